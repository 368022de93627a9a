"""Asset filters and their textual definitions such as ``ext(.zip);none(a.deb)``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Optional, Protocol, Sequence


class _Named(Protocol):
    name: str


FilterHandler = Callable[[_Named, Sequence[str]], bool]


class FilterAction(IntEnum):
    """Whether matching assets are kept or dropped."""

    INCLUDE = 0
    EXCLUDE = 1


@dataclass
class Filter:
    """A named predicate over assets with its arguments."""

    name: str
    handler: FilterHandler
    action: FilterAction
    args: list[str] = field(default_factory=list)
    definition: str = ""

    @classmethod
    def create(
        cls, name: str, handler: FilterHandler, action: FilterAction, *args: str
    ) -> "Filter":
        """Build a filter whose definition reads ``name(arg1,arg2)``."""
        return cls(
            name=name,
            handler=handler,
            action=action,
            args=list(args),
            definition=f"{name}({','.join(args)})",
        )

    def apply(self, item: _Named) -> bool:
        """Run the handler against item."""
        return self.handler(item, self.args)

    def with_args(self, *args: str) -> "Filter":
        """Replace the arguments and return the filter."""
        self.args = list(args)
        return self


def _equal_fold(left: str, right: str) -> bool:
    return left.casefold() == right.casefold()


def any_handler(item: _Named, args: Sequence[str]) -> bool:
    """True if the name equals any argument, ignoring case."""
    return any(_equal_fold(item.name, arg) for arg in args)


def all_handler(item: _Named, args: Sequence[str]) -> bool:
    """True if the name equals every argument, ignoring case."""
    return all(_equal_fold(item.name, arg) for arg in args)


def has_handler(item: _Named, args: Sequence[str]) -> bool:
    """True if the name equals every argument, ignoring case."""
    return all(_equal_fold(item.name, arg) for arg in args)


def none_handler(item: _Named, args: Sequence[str]) -> bool:
    """True if the name equals none of the arguments, ignoring case."""
    return not any(_equal_fold(item.name, arg) for arg in args)


def _extension(name: str) -> str:
    base = name.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def extension_handler(item: _Named, args: Sequence[str]) -> bool:
    """True if the name's extension equals any argument, ignoring case."""
    extension = _extension(item.name)
    return any(_equal_fold(extension, arg) for arg in args)


FILTER_MAP: dict[str, Filter] = {
    "all": Filter.create("all", all_handler, FilterAction.INCLUDE),
    "any": Filter.create("any", any_handler, FilterAction.INCLUDE),
    "ext": Filter.create("ext", extension_handler, FilterAction.INCLUDE),
    "none": Filter.create("none", none_handler, FilterAction.EXCLUDE),
    "has": Filter.create("has", has_handler, FilterAction.INCLUDE),
}

_DEFINITION_RE = re.compile(r"([a-zA-Z]+)\((.*)\)")


def parse_definition(definition: str) -> Optional[Filter]:
    """Parse ``name(arg,...)`` into a filter, or None if it is not a known filter."""
    match = _DEFINITION_RE.search(definition)
    if match is None:
        return None
    known = FILTER_MAP.get(match.group(1))
    if known is None:
        return None
    return Filter(
        name=known.name,
        handler=known.handler,
        action=known.action,
        args=match.group(2).split(","),
        definition=definition,
    )


def parse_definitions(definitions: str) -> list[Filter]:
    """Parse ';'-separated definitions, dropping the ones that are not valid."""
    parsed = (parse_definition(definition) for definition in definitions.split(";"))
    return [item for item in parsed if item is not None]