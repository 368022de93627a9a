"""Helpers for paths, URLs, repository references and executable detection."""

from __future__ import annotations

import hashlib
import os
import re
import stat
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol, TypeVar
from urllib.parse import urlparse


class InvalidGitHubProjectURLError(ValueError):
    """Raised when a value is not a usable GitHub project URL."""

    def __init__(self, url: str = "") -> None:
        super().__init__("Invalid GitHub URL")
        self.url = url


class InvalidGitHubProjectReferenceError(ValueError):
    """Raised when a value is not a valid ``owner/repo`` reference."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Invalid GitHub project reference: {reference}")
        self.reference = reference


class _Named(Protocol):
    name: str


_AssetT = TypeVar("_AssetT", bound=_Named)

_ASSET_FILTER_RE = re.compile(r"(arm64|amd64|x86|i386|mips64|[a-zA-Z]+)")
_GITHUB_URL_RE = re.compile(
    r"^(http(s)?://)?github\.com/[\w,\-,_]+/[\w,\-,_]+(.git)?(/)?\Z", re.ASCII
)
_GITHUB_REPO_NAME_RE = re.compile(
    r"github\.com/([\w\-_]+/[\w\-_]+)(\.git)?(/)?\Z", re.ASCII
)
_REPOSITORY_REFERENCE_RE = re.compile(r"^[\w\-_]+/[\w\-_]+\Z", re.ASCII)
_TOOL_NAME_RE = re.compile(r"([^/]+)-?v?[\d.]*-?(\w*-?\w*\.\w+)?", re.ASCII)
_LEADING_NAME_RE = re.compile(r"^[a-zA-Z0-9-]+")
_VERSION_TAG_RE = re.compile(r"releases/download/(v?[\d.]+)", re.ASCII)


@dataclass(frozen=True)
class RepositoryReference:
    """A GitHub repository named as ``owner/name``."""

    owner: str
    name: str

    @classmethod
    def parse(cls, reference: str) -> "RepositoryReference":
        """Parse ``owner/repo``, raising InvalidGitHubProjectReferenceError if malformed."""
        if not is_valid_repository_reference(reference):
            raise InvalidGitHubProjectReferenceError(reference)
        owner, _, name = reference.partition("/")
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


def parse_repository_reference(reference: str) -> RepositoryReference:
    """Parse an ``owner/repo`` reference."""
    return RepositoryReference.parse(reference)


def filename_to_asset_filters(filename: str) -> list[str]:
    """Guess inclusive asset filters from a filename, skipping its first word."""
    return [match.group(0) for match in _ASSET_FILTER_RE.finditer(filename)][1:]


def _join(*parts: str) -> str:
    """Join path elements the way a plain concatenating join would, then normalise."""
    joined = os.sep.join(part for part in parts if part)
    return os.path.normpath(joined) if joined else ""


def bintime(binary: str, to: str = "") -> Optional[datetime]:
    """Return the modification time of the installed binary, or None if it is missing."""
    file = ""
    directory = "."

    if to and is_directory(to):
        directory = to
    elif os.environ.get("EGET_BIN"):
        directory = os.environ["EGET_BIN"]

    if to and os.sep not in to:
        binary = to
    elif to and not is_directory(to):
        file = to

    if not file:
        file = _join(directory, binary)

    try:
        return datetime.fromtimestamp(os.stat(file).st_mtime)
    except (OSError, ValueError):
        return None


def is_url(value: str) -> bool:
    """Return True if value parses as a URL with a scheme and a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def cut(value: str, sep: str) -> tuple[str, str, bool]:
    """Split value around the first sep: (before, after, found)."""
    before, found, after = value.partition(sep)
    return before, after, bool(found)


def is_github_url(value: str) -> bool:
    """Return True if value is a github.com project URL."""
    return _GITHUB_URL_RE.match(value) is not None


def is_invalid_github_url(value: str) -> bool:
    """Return True if value points at github.com but is not a project URL."""
    contains_domain = value.startswith("github.com") or value.startswith("https://github.com")
    return contains_domain and not is_github_url(value)


def is_non_github_url(value: str) -> bool:
    """Return True if value is a URL that is not a GitHub project URL."""
    return is_url(value) and not is_github_url(value)


def repository_name_from_github_url(value: str) -> Optional[str]:
    """Return ``owner/repo`` from a GitHub project URL, or None."""
    if not is_github_url(value):
        return None
    match = _GITHUB_REPO_NAME_RE.search(value)
    return match.group(1) if match else None


def is_valid_repository_reference(value: str) -> bool:
    """Return True if value has the form ``owner/repo``."""
    if value.count("/") != 1 or len(value) < 3:
        return False
    return _REPOSITORY_REFERENCE_RE.match(value) is not None


def is_local_file(path: str) -> bool:
    """Return True if something exists at path."""
    if not path:
        return False
    try:
        os.stat(path)
    except (OSError, ValueError):
        return False
    return True


def path_exists(path: str) -> bool:
    """Return whether path exists; errors other than non-existence propagate."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def is_directory(path: str) -> bool:
    """Return True if path is an existing directory."""
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


def find_checksum_asset(asset: _Named, assets: Iterable[_AssetT]) -> Optional[_AssetT]:
    """Find the ``.sha256sum`` or ``.sha256`` companion of asset, or None."""
    wanted = {asset.name + ".sha256sum", asset.name + ".sha256"}
    return next((candidate for candidate in assets if candidate.name in wanted), None)


def is_definitely_not_exec(filename: str) -> bool:
    """Return True for names that are never executables (.deb, .1, .txt)."""
    return filename.endswith((".deb", ".1", ".txt"))


def is_exec(filename: str, mode: int) -> bool:
    """Return True if the file looks executable by name or permission bits."""
    if is_definitely_not_exec(filename):
        return False
    return (
        filename.endswith((".exe", ".appimage"))
        or "." not in filename
        or mode & 0o111 != 0
    )


def mode_from(filename: str, mode: int) -> int:
    """Return mode with the executable bits added when the file is an executable."""
    if is_definitely_not_exec(filename):
        return mode
    if is_exec(filename, mode):
        return mode | 0o111
    return mode


def get_rename(filename: str, nameguess: str) -> str:
    """Guess the name an extracted file should be installed under."""
    if is_definitely_not_exec(filename):
        return filename
    if filename.endswith(".appimage"):
        return filename[: -len(".appimage")]
    if filename.endswith(".exe"):
        return filename
    return nameguess


def get_current_directory() -> str:
    """Return the working directory, or '.' when it cannot be determined."""
    try:
        return os.getcwd()
    except OSError:
        return "."


def extract_tool_name_from_url(url: str) -> str:
    """Guess a tool name from the last path segment of a URL."""
    url = url.removesuffix("/")
    if "://" in url:
        url = url[url.rfind("://") + 3 :]

    base = url.removesuffix("/")
    base = base[base.rfind("/") + 1 :]

    match = _TOOL_NAME_RE.search(base)
    if "." not in base and match:
        name = _LEADING_NAME_RE.match(match.group(1))
        if name:
            return name.group(0).strip("-")

    return "Unknown"


def parse_version_tag_from_url(url: str, current_tag: str) -> str:
    """Return the release tag found in a download URL, else current_tag or 'latest'."""
    match = _VERSION_TAG_RE.search(url)
    if match:
        return match.group(1)
    return current_tag if current_tag else "latest"


def calculate_string_hash(body: str) -> str:
    """Return the hex SHA-256 digest of body."""
    return hashlib.sha256(body.encode()).hexdigest()