"""Choosing and extracting files from downloaded archives and single files."""

from __future__ import annotations

import bz2
import gzip
import io
import lzma
import os
import posixpath
import re
import stat
import tarfile
import zipfile
import zlib
from contextlib import suppress
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterator, Optional, Protocol, Tuple

import zstandard

from .files import File, FileType, Link
from .targetfile import get_target_file
from .utilities import get_rename, is_exec, mode_from

Decompressor = Callable[[bytes], bytes]
Entry = Tuple[File, Callable[[], bytes]]
ArchiveOpener = Callable[[bytes, Decompressor], Iterator[Entry]]

_ARCHIVE_ERRORS = (
    OSError,
    EOFError,
    zlib.error,
    lzma.LZMAError,
    tarfile.TarError,
    zipfile.BadZipFile,
    zstandard.ZstdError,
)

# Uncompressed data passes through as a plain bytes copy.
_NO_DECOMPRESSION: Decompressor = bytes


class Chooser(Protocol):
    """Selects files: a direct match is extracted at once, a possible match only if unique."""

    def choose(self, name: str, is_dir: bool, mode: int) -> tuple[bool, bool]:
        ...


@dataclass
class BinaryChooser:
    """Chooses executables; one named like the tool is a direct match."""

    tool: str

    def choose(self, name: str, is_dir: bool, mode: int) -> tuple[bool, bool]:
        if is_dir:
            return False, False
        base = posixpath.basename(name)
        fmatch = base in (self.tool, self.tool + ".exe", self.tool + ".appimage")
        possible = not stat.S_ISDIR(mode) and is_exec(name, mode & 0o777)
        return fmatch and possible, possible

    def __str__(self) -> str:
        return f"exe `{self.tool}`"


class _GlobParser:
    """Turns a glob with '/' separators into a regular expression."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0

    def _peek(self, offset: int = 0) -> Optional[str]:
        index = self.pos + offset
        return self.pattern[index] if index < len(self.pattern) else None

    def parse(self, depth: int = 0) -> str:
        out: list[str] = []
        while (char := self._peek()) is not None:
            if depth and char in ",}":
                break
            if char == "\\":
                self.pos += 1
                escaped = self._peek()
                if escaped is None:
                    raise ValueError(f"unexpected end of glob {self.pattern!r}")
                out.append(re.escape(escaped))
                self.pos += 1
            elif char == "*":
                if self._peek(1) == "*":
                    out.append(".*")
                    self.pos += 2
                else:
                    out.append("[^/]*")
                    self.pos += 1
            elif char == "?":
                out.append("[^/]")
                self.pos += 1
            elif char == "[":
                out.append(self._parse_class())
            elif char == "{":
                out.append(self._parse_alternatives(depth))
            else:
                out.append(re.escape(char))
                self.pos += 1
        return "".join(out)

    def _parse_alternatives(self, depth: int) -> str:
        self.pos += 1
        alternatives = []
        while True:
            alternatives.append(self.parse(depth + 1))
            char = self._peek()
            if char is None:
                raise ValueError(f"unclosed '{{' in glob {self.pattern!r}")
            self.pos += 1
            if char == "}":
                return "(?:" + "|".join(alternatives) + ")"

    def _parse_class(self) -> str:
        self.pos += 1
        negate = self._peek() == "!"
        if negate:
            self.pos += 1
        parts: list[str] = []
        while (char := self._peek()) != "]":
            if char is None:
                raise ValueError(f"unclosed '[' in glob {self.pattern!r}")
            if self._peek(1) == "-" and self._peek(2) not in (None, "]"):
                low, high = char, self._peek(2)
                if low > high:
                    raise ValueError(f"invalid range {low}-{high} in glob {self.pattern!r}")
                parts.append(f"{re.escape(low)}-{re.escape(high)}")
                self.pos += 3
            else:
                parts.append(re.escape(char))
                self.pos += 1
        self.pos += 1
        if not parts:
            raise ValueError(f"empty character class in glob {self.pattern!r}")
        return "[" + ("^" if negate else "") + "".join(parts) + "]"


class GlobChooser:
    """Chooses files by glob; a full-path match is direct, a base-name match possible."""

    def __init__(self, pattern: str) -> None:
        self.expr = pattern
        self.all = pattern in ("*", "/")
        self._regex = re.compile(_GlobParser(pattern).parse(), re.DOTALL)

    def _match(self, name: str) -> bool:
        return self._regex.fullmatch(name) is not None

    def choose(self, name: str, is_dir: bool = False, mode: int = 0) -> tuple[bool, bool]:
        if self.all:
            return True, True
        if name.endswith("/"):
            name = name[:-1]
        direct = self._match(name)
        return direct, self._match(posixpath.basename(name)) or direct

    def __str__(self) -> str:
        return f"`{self.expr}`"


@dataclass
class LiteralFileChooser:
    """Chooses files whose path ends with the given file name (never directly)."""

    file: str

    def choose(self, name: str, is_dir: bool = False, mode: int = 0) -> tuple[bool, bool]:
        same_base = posixpath.basename(name) == posixpath.basename(self.file)
        return False, same_base and name.endswith(self.file)

    def __str__(self) -> str:
        return f"`{self.file}`"


@dataclass
class ExtractedFile:
    """A file selected from an archive, ready to be written out."""

    name: str
    archive_name: str
    extractor: Callable[[str], None]
    raw_mode: int = 0
    is_dir: bool = False

    def mode(self) -> int:
        """Return the file mode, with executable bits for executables."""
        return mode_from(self.name, self.raw_mode)

    def extract(self, to: str) -> None:
        """Write the file (or directory tree) to the path ``to``."""
        self.extractor(to)

    def __str__(self) -> str:
        return self.archive_name


class ExtractionError(Exception):
    """Raised when an archive cannot be read or written out."""


class CandidatesError(ExtractionError):
    """Raised when no file, or more than one file, matches the chooser."""

    def __init__(self, message: str, candidates: list[ExtractedFile]) -> None:
        super().__init__(message)
        self.candidates = list(candidates)


def _unzstd(data: bytes) -> bytes:
    out = io.BytesIO()
    zstandard.ZstdDecompressor().copy_stream(io.BytesIO(data), out)
    return out.getvalue()


_TAR_TYPES = {
    tarfile.REGTYPE: FileType.NORMAL,
    tarfile.AREGTYPE: FileType.NORMAL,
    tarfile.CONTTYPE: FileType.NORMAL,
    tarfile.DIRTYPE: FileType.DIR,
    tarfile.LNKTYPE: FileType.LINK,
    tarfile.SYMTYPE: FileType.SYMLINK,
}


def _read_tar_member(archive: tarfile.TarFile, member: tarfile.TarInfo) -> bytes:
    if not member.isfile():
        return b""
    handle = archive.extractfile(member)
    return handle.read() if handle is not None else b""


def _tar_entries(data: bytes, decompress: Decompressor) -> Iterator[Entry]:
    raw = decompress(data)
    with tarfile.open(fileobj=io.BytesIO(raw), mode="r:") as archive:
        for member in archive:
            name = member.name
            if member.isdir() and not name.endswith("/"):
                name += "/"
            entry = File(
                name=name,
                link_name=member.linkname,
                mode=member.mode & 0o7777,
                type=_TAR_TYPES.get(member.type, FileType.OTHER),
            )
            yield entry, partial(_read_tar_member, archive, member)


def _zip_entries(data: bytes, decompress: Decompressor) -> Iterator[Entry]:
    with zipfile.ZipFile(io.BytesIO(decompress(data))) as archive:
        for info in archive.infolist():
            unix_mode = info.external_attr >> 16
            link_name = ""
            if info.is_dir():
                file_type = FileType.DIR
            elif stat.S_ISLNK(unix_mode):
                file_type = FileType.SYMLINK
                link_name = archive.read(info).decode("utf-8", "replace")
            else:
                file_type = FileType.NORMAL
            mode = unix_mode & 0o7777 or (0o777 if info.is_dir() else 0o666)
            entry = File(name=info.filename, link_name=link_name, mode=mode, type=file_type)
            yield entry, partial(archive.read, info)


def _write_file(data: bytes, mode: int, to: str) -> None:
    with get_target_file(to, mode, True) as target:
        target.write(data, True)


@dataclass
class ArchiveExtractor:
    """Extracts the chosen file or directory from a tar or zip archive."""

    chooser: Chooser
    entries: ArchiveOpener
    decompress: Decompressor

    def extract(self, data: bytes, multiple: bool = False) -> ExtractedFile:
        """Return the single matching file; raise CandidatesError otherwise."""
        candidates: list[ExtractedFile] = []
        dirs: list[str] = []

        try:
            for entry, read in self.entries(data, self.decompress):
                if any(entry.name.startswith(d) for d in dirs):
                    continue
                direct, possible = self.chooser.choose(entry.name, entry.is_dir(), entry.mode)
                if not direct and not possible:
                    continue

                name = get_rename(entry.name, entry.name)
                contents = read()

                if entry.is_dir():
                    extractor = partial(self._extract_directory, data, entry)
                    dirs.append(entry.name)
                else:
                    extractor = partial(_write_file, contents, mode_from(name, entry.mode))

                extracted = ExtractedFile(
                    name=name,
                    archive_name=entry.name,
                    extractor=extractor,
                    raw_mode=entry.mode,
                    is_dir=entry.is_dir(),
                )
                if direct and not multiple:
                    return extracted
                candidates.append(extracted)
        except _ARCHIVE_ERRORS as exc:
            raise ExtractionError(f"extract: {exc}") from exc

        if len(candidates) == 1:
            return candidates[0]
        if not candidates:
            raise CandidatesError(f"target {self.chooser} not found in archive", [])
        raise CandidatesError(
            f"{len(candidates)} candidates for target {self.chooser} found", candidates
        )

    def _extract_directory(self, data: bytes, directory: File, to: str) -> None:
        links: list[Link] = []
        try:
            for entry, read in self.entries(data, self.decompress):
                if not entry.name.startswith(directory.name):
                    continue
                target = os.path.normpath(os.path.join(to, entry.name[len(directory.name):]))

                if entry.is_dir():
                    with suppress(OSError):
                        os.mkdir(target, 0o755)
                    continue

                if entry.type in (FileType.LINK, FileType.SYMLINK):
                    links.append(
                        Link(
                            oldname=entry.link_name,
                            newname=target,
                            sym=entry.type == FileType.SYMLINK,
                        )
                    )
                    continue

                _write_file(read(), entry.mode, target)

            for link in links:
                with suppress(FileExistsError):
                    link.write()
        except _ARCHIVE_ERRORS as exc:
            raise ExtractionError(f"extract: {exc}") from exc


@dataclass
class SingleFileExtractor:
    """Decompresses a single downloaded file and writes it out."""

    name: str
    rename: str
    decompress: Decompressor

    def extract(self, data: bytes, multiple: bool = False) -> ExtractedFile:
        name = get_rename(self.rename, self.name)
        return ExtractedFile(
            name=name,
            archive_name=self.name,
            extractor=partial(self._write, data, mode_from(name, 0o666)),
            raw_mode=0o666,
        )

    def _write(self, data: bytes, mode: int, to: str) -> None:
        try:
            contents = self.decompress(data)
        except _ARCHIVE_ERRORS as exc:
            raise ExtractionError(f"extract: {exc}") from exc
        _write_file(contents, mode, to)


def new_extractor(
    filename: str, tool: str = "", chooser: Optional[Chooser] = None
) -> ArchiveExtractor | SingleFileExtractor:
    """Pick an extractor for filename by its extension."""
    if not tool:
        tool = filename

    archive_formats: list[tuple[tuple[str, ...], ArchiveOpener, Decompressor]] = [
        ((".tar.gz", ".tgz"), _tar_entries, gzip.decompress),
        ((".tar.bz2", ".tbz"), _tar_entries, bz2.decompress),
        ((".tar.xz", ".txz"), _tar_entries, lzma.decompress),
        ((".tar.zst",), _tar_entries, _unzstd),
        ((".tar",), _tar_entries, _NO_DECOMPRESSION),
        ((".zip",), _zip_entries, _NO_DECOMPRESSION),
    ]
    for suffixes, opener, decompress in archive_formats:
        if filename.endswith(suffixes):
            return ArchiveExtractor(chooser=chooser, entries=opener, decompress=decompress)

    single_formats: list[tuple[str, Decompressor]] = [
        (".gz", gzip.decompress),
        (".bz2", bz2.decompress),
        (".xz", lzma.decompress),
        (".zst", _unzstd),
    ]
    for suffix, decompress in single_formats:
        if filename.endswith(suffix):
            return SingleFileExtractor(name=tool, rename=filename, decompress=decompress)

    return SingleFileExtractor(name=tool, rename=filename, decompress=_NO_DECOMPRESSION)