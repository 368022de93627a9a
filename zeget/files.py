"""Archive entry descriptions and symbolic links."""

from __future__ import annotations

import os
from contextlib import suppress
from dataclasses import dataclass
from enum import IntEnum


class FileType(IntEnum):
    """Kind of an archive entry."""

    NORMAL = 0
    DIR = 1
    LINK = 2
    SYMLINK = 3
    OTHER = 4


@dataclass
class File:
    """An entry read from an archive."""

    name: str
    link_name: str = ""
    mode: int = 0
    type: FileType = FileType.NORMAL

    def is_dir(self) -> bool:
        """Return True if the entry is a directory."""
        return self.type == FileType.DIR


@dataclass
class Link:
    """A link to be created at ``newname`` pointing to ``oldname``."""

    oldname: str
    newname: str
    sym: bool = True

    def write(self) -> None:
        """Create the link as a symlink, replacing whatever exists at newname."""
        if os.path.exists(self.newname):
            with suppress(OSError):
                os.remove(self.newname)

        with suppress(OSError):
            os.mkdir(os.path.dirname(self.newname) or ".", 0o755)

        os.symlink(self.oldname, self.newname)