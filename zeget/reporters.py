"""Reporters that write progress messages to an output stream."""

from __future__ import annotations

import hashlib
from typing import Any, Protocol, TextIO


class Reporter(Protocol):
    """Writes something about its inputs."""

    def report(self, *args: Any) -> None:
        ...


def _format(template: str, args: tuple[Any, ...]) -> str:
    template = template.replace("%v", "%s")
    try:
        return template % args
    except (TypeError, ValueError):
        if not args:
            return template
        return template + " ".join(str(arg) for arg in args)


class MessageReporter:
    """Writes a '› '-prefixed message built from a format string and arguments."""

    def __init__(self, output: TextIO, format_string: str = "", *arguments: Any) -> None:
        self.output = output
        self.format_string = format_string
        self.arguments = arguments

    def report(self, *args: Any) -> None:
        """Write the message; with no format and no input nothing is written."""
        if not args and not self.format_string:
            return
        template = self.format_string or "%v\n"
        self.output.write("› " + _format(template, self.arguments + args))


class AssetSha256HashReporter:
    """Writes the SHA-256 of a value followed by the asset's name."""

    def __init__(self, asset: Any, output: TextIO) -> None:
        self.asset = asset
        self.output = output

    def report(self, *args: Any) -> None:
        """Write the hash of the first argument."""
        value = str(args[0])
        checksum = hashlib.sha256(value.encode()).hexdigest()
        self.output.write(f"› {checksum} {self.asset.name}\n")