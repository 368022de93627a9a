"""Finding the downloadable assets of a project."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Optional, Protocol

from .github import API_ROOT, Asset, Client, GitHubError, HttpResponse, Release


class Finder(Protocol):
    """Returns the list of assets making up a project's release."""

    def find(self, client: Client) -> list[Asset]:
        ...


class NoUpgradeError(Exception):
    """Raised when the requested release is not newer than the minimum time."""

    def __init__(
        self, message: str = "requested release is not more recent than current version"
    ) -> None:
        super().__init__(message)


@dataclass
class ValidFinder:
    """A finder together with the tool it looks for."""

    finder: Finder
    tool: str


@dataclass
class DirectAssetFinder:
    """Returns the given URL as the only asset."""

    url: str

    def find(self, client: Optional[Client] = None) -> list[Asset]:
        return [Asset(name=self.url, download_url=self.url)]


def _as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def _before(moment: Optional[datetime], minimum: Optional[datetime]) -> bool:
    if minimum is None:
        return False
    if moment is None:
        return True
    return _as_utc(moment) < _as_utc(minimum)


def _check(response: HttpResponse, url: str) -> None:
    if response.status_code != HTTPStatus.OK:
        raise GitHubError(response.status_code, response.status, response.body, url)


@dataclass
class GithubAssetFinder:
    """Finds the assets of a repository release; tags are given as 'tags/<tag>' or 'latest'."""

    repo: str
    tag: str = "latest"
    prerelease: bool = False
    min_time: Optional[datetime] = None

    def find(self, client: Client) -> list[Asset]:
        """Return the release's assets; raises GitHubError or NoUpgradeError."""
        tag = self.tag
        if self.prerelease and tag == "latest":
            tag = "tags/" + self.get_latest_tag(client)

        url = f"{API_ROOT}/repos/{self.repo}/releases/{tag}"
        response = client.get_json(url)
        if response.status_code != HTTPStatus.OK:
            if tag.startswith("tags/") and response.status_code == HTTPStatus.NOT_FOUND:
                return self._find_match(client, tag)
            _check(response, url)

        release = Release.from_json(response.json())
        if _before(release.created_at, self.min_time):
            raise NoUpgradeError()
        return [asset.to_asset() for asset in release.assets]

    def find_match(self, client: Client) -> list[Asset]:
        """Search the release list for a release whose tag contains the wanted tag."""
        return self._find_match(client, self.tag)

    def _find_match(self, client: Client, tag: str) -> list[Asset]:
        tag = tag.removeprefix("tags/")

        for page in itertools.count(1):
            url = f"{API_ROOT}/repos/{self.repo}/releases?page={page}"
            response = client.get_json(url)
            _check(response, url)

            documents = response.json()
            if not isinstance(documents, list):
                raise ValueError("release list is not a JSON array")

            for release in map(Release.from_json, documents):
                if release.prerelease and not self.prerelease:
                    continue
                if tag in release.tag and not _before(release.created_at, self.min_time):
                    return [asset.to_asset() for asset in release.assets]

            if len(documents) < 30 or page > 20:
                break

        raise LookupError(f"no matching tag for '{tag}'")

    def get_latest_tag(self, client: Client) -> str:
        """Return the tag of the latest release."""
        url = f"{API_ROOT}/repos/{self.repo}/releases/latest"
        response = client.get_json(url)
        try:
            release = Release.from_json(response.json())
        except ValueError as exc:
            raise ValueError(f"pre-release finder: {exc}") from exc
        return release.tag


@dataclass
class GithubSourceFinder:
    """Returns the source tarball of a repository at a tag."""

    tool: str
    repo: str
    tag: str

    def find(self, client: Optional[Client] = None) -> list[Asset]:
        name = f"{self.tool}.tar.gz"
        url = f"https://github.com/{self.repo}/tarball/{self.tag}/{name}"
        return [Asset(name=name, download_url=url)]