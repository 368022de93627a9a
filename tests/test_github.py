from datetime import datetime, timedelta, timezone

import pytest

from zeget.github import (
    Asset,
    GitHubError,
    HttpResponse,
    InvalidGitHubProjectReferenceError,
    InvalidGitHubProjectURLError,
    RateLimit,
    Release,
    ReleaseAsset,
    fetch_rate_limit,
)

RATE_LIMIT_BODY = (
    '{"resources":{"core":{"limit":5000,"remaining":4990,"reset":1715643356,"used":0,'
    '"resource":"core"},"graphql":{"limit":0,"remaining":0,"reset":1715643356,"used":0,'
    '"resource":"graphql"},"search":{"limit":10,"remaining":10,"reset":1715639816,"used":0,'
    '"resource":"search"}},"rate":{"limit":60,"remaining":60,"reset":1715643356,"used":0,'
    '"resource":"core"}}'
)


class FakeClient:
    def __init__(self, responses):
        self.responses = responses

    def get_json(self, url):
        status, body = self.responses.get(url, (404, '{"message": "Not Found"}'))
        return HttpResponse(status_code=status, body=body.encode())


def test_invalid_url_error_message():
    err = InvalidGitHubProjectURLError("https://github.com/not/a/real/project")
    assert str(err) == "Invalid GitHub project URL"


def test_invalid_reference_error_message():
    err = InvalidGitHubProjectReferenceError("master")
    assert str(err) == "Invalid GitHub project reference"


def test_github_error_forbidden():
    err = GitHubError(
        403,
        "Forbidden",
        b'{"message": "API rate limit exceeded", '
        b'"documentation_url": "https://developer.github.com/v3/#rate-limiting"}',
    )
    assert str(err) == (
        "Forbidden: API rate limit exceeded: https://developer.github.com/v3/#rate-limiting"
    )


def test_github_error_generic():
    err = GitHubError(404, "Not Found", url="https://api.github.com/repos/nonexistent")
    assert str(err) == "Not Found (URL: https://api.github.com/repos/nonexistent)"


def test_http_response_default_status():
    assert HttpResponse(status_code=404).status == "404 Not Found"


def test_rate_limit_str_past_reset():
    text = str(RateLimit(limit=5000, remaining=4999, reset=1715643356))
    assert "Limit: 5000, Remaining: 4999, Reset:" in text
    assert not text.endswith(")")


def test_rate_limit_str_future_reset():
    reset = int((datetime.now() + timedelta(hours=1)).timestamp())
    text = str(RateLimit(limit=5000, remaining=4999, reset=reset))
    assert text.startswith("Limit: 5000, Remaining: 4999, Reset:")
    assert text.endswith(")")


def test_fetch_rate_limit():
    client = FakeClient({"https://api.github.com/rate_limit": (200, RATE_LIMIT_BODY)})
    limit = fetch_rate_limit(client)
    assert limit.limit == 5000
    assert limit.remaining == 4990
    assert limit.reset == 1715643356
    assert limit.resets_at == datetime.fromtimestamp(1715643356)


def test_fetch_rate_limit_failure():
    client = FakeClient({"https://api.github.com/rate_limit": (500, "{}")})
    with pytest.raises(GitHubError):
        fetch_rate_limit(client)


def _release():
    now = datetime.now(timezone.utc)
    return Release(
        assets=[
            ReleaseAsset(
                name="asset1",
                url="http://example.com/asset1",
                download_url="http://example.com/download/asset1",
                size=1024,
                download_count=100,
                content_type="application/octet-stream",
            ),
            ReleaseAsset(
                name="asset2",
                url="http://example.com/asset2",
                download_url="http://example.com/download/asset2",
                size=2048,
                download_count=200,
                content_type="application/octet-stream",
            ),
        ],
        tag="v1.0.0",
        created_at=now,
        published_at=now,
    )


def test_process_release_assets():
    release = _release()
    release.process_release_assets()
    assert all(asset.release is release for asset in release.assets)


def test_to_asset():
    published = datetime(2021, 5, 1, tzinfo=timezone.utc)
    release = Release(tag="v1.0.0", published_at=published)
    asset = ReleaseAsset(
        name="asset",
        url="http://example.com/asset",
        download_url="http://example.com/download/asset",
        release=release,
    )
    assert asset.to_asset() == Asset(
        name="asset",
        download_url="http://example.com/download/asset",
        release_date=published,
    )


def test_release_from_json():
    release = Release.from_json(
        {
            "tag_name": "v1.0.0",
            "prerelease": True,
            "assets": [{"name": "asset1", "browser_download_url": "http://example.com/asset1"}],
            "created_at": "2020-01-01T00:00:00Z",
        }
    )
    assert release.tag == "v1.0.0"
    assert release.prerelease is True
    assert release.created_at == datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert release.published_at is None
    assert release.assets[0].download_url == "http://example.com/asset1"
    assert release.assets[0].release is release


def test_release_from_json_rejects_list():
    with pytest.raises(ValueError):
        Release.from_json([])