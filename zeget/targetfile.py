"""Output files that extracted data is written to, including standard output."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from dataclasses import dataclass
from typing import BinaryIO, Optional


class TargetFileInvalidatedError(RuntimeError):
    """Raised when writing to a target file that has already been closed."""

    def __init__(self, message: str = "target file has been invalidated") -> None:
        super().__init__(message)


@dataclass
class TargetFile:
    """A writable destination, optionally closed once written."""

    file: Optional[BinaryIO]
    filename: Optional[str] = None
    should_close: bool = False
    error: Optional[BaseException] = None

    def __enter__(self) -> "TargetFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Close the file if it is owned by this target, then invalidate it."""
        if not self.should_close or self.is_invalid():
            return
        self.file.close()
        self.invalidate()

    def write(self, data: bytes, cleanup: bool = False) -> None:
        """Write data; with cleanup the file is closed afterwards."""
        if self.error is not None:
            raise self.error
        if self.is_invalid():
            raise TargetFileInvalidatedError()
        try:
            self.file.write(data)
            self.file.flush()
        finally:
            if cleanup:
                self.cleanup()

    def invalidate(self) -> None:
        """Forget the underlying file."""
        self.file = None
        self.should_close = False

    def is_invalid(self) -> bool:
        """Return True once the file is gone."""
        return self.file is None

    def has_filename(self) -> bool:
        """Return True if the target is a named file."""
        return self.filename is not None

    def name(self) -> str:
        """Return the target's file name, or an empty string."""
        return self.filename or ""


def new_target_file(
    file: Optional[BinaryIO], filename: str, should_close: bool = False
) -> TargetFile:
    """Wrap an open file; an empty name or '-' is never named nor closed."""
    if filename in ("", "-"):
        return TargetFile(file=file, filename=None, should_close=False)
    return TargetFile(file=file, filename=filename, should_close=should_close)


def _stdout() -> BinaryIO:
    return getattr(sys.stdout, "buffer", sys.stdout)


def get_target_file(
    filename: str, mode: int = 0o644, remove_existing: bool = False
) -> TargetFile:
    """Open filename for writing with mode; '-' means standard output.

    The parent directory is created (one level) when missing. Raises OSError
    if the file cannot be opened.
    """
    if filename == "-":
        return new_target_file(_stdout(), filename, False)

    if remove_existing:
        with suppress(OSError):
            os.remove(filename)

    with suppress(OSError):
        os.mkdir(os.path.dirname(filename) or ".", 0o755)

    descriptor = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    return new_target_file(os.fdopen(descriptor, "wb"), filename, True)