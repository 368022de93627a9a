"""The lock file that records installed packages."""

from __future__ import annotations

import json
import os
import shutil
from dataclasses import dataclass, field
from typing import Any

from .utilities import path_exists

_PACKAGE_FIELDS = (
    ("source", "source"),
    ("owner", "owner"),
    ("repo", "repo"),
    ("tag", "tag"),
    ("installed_at", "date_installed"),
    ("asset_filters", "asset_filters"),
    ("asset", "asset"),
    ("binary", "binary"),
    ("url", "url"),
    ("binary_hash", "binaryHash"),
)


class PackageNotFoundError(LookupError):
    """Raised when no package in the lock file has the requested name."""

    def __init__(self, repo_name: str) -> None:
        super().__init__(f"no package found for {repo_name}")
        self.repo_name = repo_name


class NoPackagesError(LookupError):
    """Raised when removing from a lock file that holds no packages."""

    def __init__(self) -> None:
        super().__init__("no packages in the lockfile")


class PackageIndexError(IndexError):
    """Raised when a package index is outside the lock file's package list."""

    def __init__(self, index: int) -> None:
        super().__init__(f"index {index} out of bounds in the lockfile")
        self.index = index


@dataclass
class PackageData:
    """Information about one installed binary."""

    source: str = ""
    owner: str = ""
    repo: str = ""
    tag: str = ""
    installed_at: str = ""
    asset_filters: list[str] = field(default_factory=list)
    asset: str = ""
    binary: str = ""
    url: str = ""
    binary_hash: str = ""


def _full_name(package: PackageData) -> str:
    return f"{package.owner}/{package.repo}"


def _package_to_dict(package: PackageData) -> dict[str, Any]:
    return {key: getattr(package, attr) for attr, key in _PACKAGE_FIELDS}


def _package_from_dict(data: dict[str, Any]) -> PackageData:
    values: dict[str, Any] = {}
    for attr, key in _PACKAGE_FIELDS:
        value = data.get(key)
        if attr == "asset_filters":
            values[attr] = list(value or [])
        else:
            values[attr] = "" if value is None else str(value)
    return PackageData(**values)


@dataclass
class LockFile:
    """The installed packages for one operating system and architecture."""

    operating_system: str = ""
    arch: str = ""
    packages: list[PackageData] = field(default_factory=list)
    filename: str = ""

    @classmethod
    def load(cls, path: str, user_os: str, user_arch: str) -> "LockFile":
        """Read the lock file at path, or start an empty one if it does not exist."""
        if path_exists(path):
            lock_file = _read_lock_file(path)
        else:
            lock_file = cls(operating_system=user_os, arch=user_arch)
        lock_file.filename = path
        return lock_file

    def save(self) -> None:
        """Write the lock file back to its file name."""
        write_lock_file(self, self.filename)

    def add_package(self, package: PackageData) -> None:
        """Append a package."""
        self.packages.append(package)

    def remove_package_at(self, index: int) -> None:
        """Remove the package at index."""
        if not self.packages:
            raise NoPackagesError()
        if index < 0 or index >= len(self.packages):
            raise PackageIndexError(index)
        del self.packages[index]

    def remove_package(self, repo_name: str) -> None:
        """Remove the first package named ``owner/repo``."""
        for index, package in enumerate(self.packages):
            if _full_name(package) == repo_name:
                del self.packages[index]
                return
        raise PackageNotFoundError(repo_name)

    def add_or_update_package(self, package: PackageData) -> None:
        """Replace the package with the same ``owner/repo``, or append it."""
        wanted = _full_name(package)
        for index, existing in enumerate(self.packages):
            if _full_name(existing) == wanted:
                self.packages[index] = package
                return
        self.add_package(package)

    def get_package(self, repo_name: str) -> PackageData:
        """Return the package named ``owner/repo``."""
        for package in self.packages:
            if _full_name(package) == repo_name:
                return package
        raise PackageNotFoundError(repo_name)


def _read_lock_file(path: str) -> LockFile:
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: lock file is not a JSON object")
    return LockFile(
        operating_system=str(data.get("os") or ""),
        arch=str(data.get("arch") or ""),
        packages=[_package_from_dict(item) for item in data.get("packages") or []],
        filename=str(data.get("Filename") or ""),
    )


def write_lock_file(lock_file: LockFile, output_path: str) -> None:
    """Write lock_file as tab-indented JSON to output_path."""
    document = {
        "os": lock_file.operating_system,
        "arch": lock_file.arch,
        "packages": [_package_to_dict(package) for package in lock_file.packages],
        "Filename": lock_file.filename,
    }
    text = json.dumps(document, indent="\t", ensure_ascii=False)
    descriptor = os.open(output_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
        handle.write(text)


def read_lock_file_packages(path: str) -> list[PackageData]:
    """Return the packages recorded in the lock file at path."""
    return _read_lock_file(path).packages


def _remove_all(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def delete_asset_and_binary(pkg_path: str, bin_path: str, asset: str, binary: str) -> None:
    """Delete a downloaded asset and its installed binary; missing ones are ignored."""
    _remove_all(os.path.join(pkg_path, asset))
    _remove_all(os.path.join(bin_path, binary))