"""Expanding and compacting paths relative to the user's home directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

try:
    import pwd
except ImportError:  # pragma: no cover - not available on Windows
    pwd = None


def _user_home() -> str:
    if pwd is not None:
        try:
            return pwd.getpwuid(os.getuid()).pw_dir
        except KeyError as exc:
            raise OSError(f"find homedir: {exc}") from exc
    home = os.path.expanduser("~")
    if home == "~":
        raise OSError("find homedir: unable to determine the home directory")
    return home


@dataclass
class PathExpander:
    """Replaces a leading ``~`` with a home directory."""

    home_path: str = ""

    def home_directory(self) -> str:
        """Return the configured home path, or the current user's home directory."""
        if self.home_path:
            return self.home_path
        return _user_home()

    def expand(self, path: str) -> str:
        """Expand a leading ``~/``; other paths are returned unchanged."""
        prefix = "~" + os.sep
        if not path.startswith(prefix):
            return path

        try:
            home = self.home_directory()
        except OSError as exc:
            raise OSError(f"expand tilde: {exc}") from exc
        if not home:
            raise OSError("expand tilde: empty home directory")

        return path.replace(prefix, home + os.sep, 1)


def _default_home() -> str:
    try:
        return PathExpander().home_directory()
    except OSError:
        return ""


@dataclass
class PathCompactor:
    """Replaces a leading home directory with ``~``."""

    home_path: str = field(default_factory=_default_home)

    def compact(self, path: str) -> str:
        """Shorten path by replacing the home directory prefix with ``~``."""
        if path.startswith(self.home_path):
            return path.replace(self.home_path, "~", 1)
        return path


def expand(path: str, home_directory_path: Optional[str] = None) -> str:
    """Expand a leading ``~/`` using the given or the current user's home directory."""
    return PathExpander(home_directory_path or "").expand(path)