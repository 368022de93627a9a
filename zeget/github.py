"""GitHub API errors, responses, rate limits and release descriptions."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Any, Optional, Protocol

API_ROOT = "https://api.github.com"
RATE_LIMIT_URL = API_ROOT + "/rate_limit"


class InvalidGitHubProjectURLError(ValueError):
    """Raised when a value is not a GitHub project URL."""

    def __init__(self, url: str = "") -> None:
        super().__init__("Invalid GitHub project URL")
        self.url = url


class InvalidGitHubProjectReferenceError(ValueError):
    """Raised when a value is not a GitHub project reference."""

    def __init__(self, reference: str = "") -> None:
        super().__init__("Invalid GitHub project reference")
        self.reference = reference


class GitHubError(Exception):
    """An unexpected HTTP status returned by the GitHub API."""

    def __init__(self, code: int, status: str, body: bytes = b"", url: str = "") -> None:
        super().__init__(code, status, body, url)
        self.code = code
        self.status = status
        self.body = body
        self.url = url

    def __str__(self) -> str:
        message, doc = "", ""
        try:
            parsed = json.loads(self.body)
        except (ValueError, TypeError):
            parsed = None
        if isinstance(parsed, dict):
            message = str(parsed.get("message", ""))
            doc = str(parsed.get("documentation_url", ""))

        if self.code == HTTPStatus.FORBIDDEN:
            return f"{self.status}: {message}: {doc}"
        return f"{self.status} (URL: {self.url})"


@dataclass
class HttpResponse:
    """Status and body of an HTTP response."""

    status_code: int
    body: bytes = b""
    status: str = ""

    def __post_init__(self) -> None:
        if not self.status:
            try:
                phrase = HTTPStatus(self.status_code).phrase
            except ValueError:
                phrase = ""
            self.status = f"{self.status_code} {phrase}".strip()

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)


class Client(Protocol):
    """Anything that can fetch a JSON document by URL."""

    def get_json(self, url: str) -> HttpResponse:
        ...


class ApiClient:
    """A minimal client for the GitHub JSON API."""

    def __init__(self, token: Optional[str] = None, timeout: float = 30.0) -> None:
        self.token = token
        self.timeout = timeout

    def get_json(self, url: str) -> HttpResponse:
        """Fetch url; HTTP error statuses are returned, not raised."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        request = urllib.request.Request(url, headers=headers)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return HttpResponse(
                    status_code=response.status,
                    body=response.read(),
                    status=f"{response.status} {response.reason}",
                )
        except urllib.error.HTTPError as exc:
            return HttpResponse(
                status_code=exc.code, body=exc.read(), status=f"{exc.code} {exc.reason}"
            )


@dataclass
class RateLimit:
    """The API's core rate limit."""

    limit: int = 0
    remaining: int = 0
    reset: int = 0
    resets_at: Optional[datetime] = None

    def reset_time(self) -> datetime:
        """Return the moment the limit resets, in local time."""
        return datetime.fromtimestamp(self.reset)

    def __str__(self) -> str:
        now = datetime.now()
        reset = self.reset_time()
        text = f"Limit: {self.limit}, Remaining: {self.remaining}, Reset: {reset}"
        if reset < now:
            return text
        left = timedelta(seconds=round((reset - now).total_seconds()))
        return f"{text} ({left})"


def fetch_rate_limit(client: Client) -> RateLimit:
    """Fetch the current core rate limit."""
    response = client.get_json(RATE_LIMIT_URL)
    if response.status_code != HTTPStatus.OK:
        raise GitHubError(response.status_code, response.status, response.body, RATE_LIMIT_URL)

    data = response.json()
    resources = data.get("resources") if isinstance(data, dict) else None
    core = resources.get("core") if isinstance(resources, dict) else None
    core = core if isinstance(core, dict) else {}

    result = RateLimit(
        limit=int(core.get("limit", 0)),
        remaining=int(core.get("remaining", 0)),
        reset=int(core.get("reset", 0)),
    )
    result.resets_at = result.reset_time()
    return result


@dataclass
class Asset:
    """A downloadable file belonging to a release."""

    name: str = ""
    download_url: str = ""
    release_date: Optional[datetime] = None
    filters: list[str] = field(default_factory=list)


def _parse_time(value: Any) -> Optional[datetime]:
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


@dataclass
class ReleaseAsset:
    """An asset as described by the releases API."""

    name: str = ""
    url: str = ""
    download_url: str = ""
    size: int = 0
    download_count: int = 0
    content_type: str = ""
    release: Optional["Release"] = field(default=None, repr=False, compare=False)

    def to_asset(self) -> Asset:
        """Return the plain asset this release asset describes."""
        return Asset(
            name=self.name,
            download_url=self.download_url,
            release_date=self.release.published_at if self.release else None,
        )


@dataclass
class Release:
    """A release with its assets."""

    assets: list[ReleaseAsset] = field(default_factory=list)
    prerelease: bool = False
    tag: str = ""
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Any) -> "Release":
        """Build a release from a decoded API document."""
        if not isinstance(data, dict):
            raise ValueError("release document is not a JSON object")
        release = cls(
            assets=[
                ReleaseAsset(
                    name=item.get("name", ""),
                    url=item.get("url", ""),
                    download_url=item.get("browser_download_url", ""),
                    size=int(item.get("size", 0) or 0),
                    download_count=int(item.get("download_count", 0) or 0),
                    content_type=item.get("content_type", ""),
                )
                for item in data.get("assets") or []
            ],
            prerelease=bool(data.get("prerelease", False)),
            tag=data.get("tag_name", ""),
            created_at=_parse_time(data.get("created_at")),
            published_at=_parse_time(data.get("published_at")),
        )
        release.process_release_assets()
        return release

    def process_release_assets(self) -> None:
        """Link every asset back to this release."""
        for asset in self.assets:
            asset.release = self