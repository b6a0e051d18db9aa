"""Tests for the GitHub REST client."""

import httpx
import pytest

from tools.repo_stats.client import PER_PAGE, GitHubClient
from tools.repo_stats.exceptions import RemoteFetchError

from tests.fakes import BASE_URL, FakeGitHub, make_items


def _client_for(handler) -> GitHubClient:
    return GitHubClient("test-token", base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestRequests:
    """Test headers and query parameters."""

    def test_authorization_header_on_every_request(self, client, fake_github):
        """Test that the token is sent as a bearer credential."""
        client.get_repository("octocat", "Hello-World")
        client.list_contributors("octocat", "Hello-World")

        assert len(fake_github.requests) == 2
        for request in fake_github.requests:
            assert request.headers["Authorization"] == "Bearer test-token"
            assert request.headers["Accept"] == "application/vnd.github+json"
            assert request.headers["User-Agent"] == "repo-stats"

    def test_list_requests_max_page_size(self, client, fake_github):
        """Test that list calls ask for the largest page size."""
        client.list_pull_requests("octocat", "Hello-World", state="closed")

        params = fake_github.requests[0].url.params
        assert params["per_page"] == str(PER_PAGE)
        assert params["state"] == "closed"

    def test_base_url_from_env(self, monkeypatch):
        """Test GITHUB_API_URL override."""
        monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3/")
        with GitHubClient("t") as c:
            assert c.base_url == "https://github.example.com/api/v3"


class TestPagination:
    """Test that list calls return complete collections."""

    def test_follows_link_header(self):
        """Test walking several pages."""
        fake = FakeGitHub(contributors=make_items(7), page_size=3)

        with _client_for(fake) as c:
            contributors = c.list_contributors("octocat", "Hello-World")

        assert len(contributors) == 7
        assert [item["id"] for item in contributors] == list(range(1, 8))
        assert len(fake.requests) == 3

    def test_empty_list(self):
        """Test that an empty collection is not an error."""
        fake = FakeGitHub()

        with _client_for(fake) as c:
            assert c.list_contributors("octocat", "Hello-World") == []

    def test_no_content_is_empty(self):
        """Test 204 answer for contributors of an empty repository."""
        with _client_for(lambda request: httpx.Response(204)) as c:
            assert c.list_contributors("octocat", "empty") == []

    def test_issues_exclude_pull_requests(self):
        """Test that pull requests returned by the issues endpoint are dropped."""
        issues = make_items(4) + [{"id": 99, "pull_request": {"url": "x"}}]
        fake = FakeGitHub(issues=issues)

        with _client_for(fake) as c:
            result = c.list_issues("octocat", "Hello-World")

        assert len(result) == 4
        assert all("pull_request" not in item for item in result)

    def test_issues_can_include_pull_requests(self):
        """Test keeping pull requests in the issue list."""
        issues = make_items(4) + [{"id": 99, "pull_request": {"url": "x"}}]
        fake = FakeGitHub(issues=issues)

        with _client_for(fake) as c:
            result = c.list_issues("octocat", "Hello-World", include_pull_requests=True)

        assert len(result) == 5


class TestErrors:
    """Test mapping of failures to RemoteFetchError."""

    @pytest.mark.parametrize(
        "status,headers,message",
        [
            (401, {}, "Bad credentials"),
            (403, {"X-RateLimit-Remaining": "0"}, "API rate limit exceeded"),
            (429, {}, "API rate limit exceeded"),
            (403, {}, "Access forbidden"),
            (404, {}, "Not Found"),
        ],
    )
    def test_status_mapping(self, status, headers, message):
        """Test known status codes."""
        fake = FakeGitHub()
        fake.fail("repo", status, headers=headers)

        with _client_for(fake) as c:
            with pytest.raises(RemoteFetchError) as exc_info:
                c.get_repository("octocat", "Hello-World")

        assert str(exc_info.value) == message
        assert exc_info.value.status_code == status

    def test_message_from_body(self):
        """Test that other errors use the API's message."""
        fake = FakeGitHub()
        fake.fail("pulls", 500, body={"message": "Server Error"})

        with _client_for(fake) as c:
            with pytest.raises(RemoteFetchError, match="Server Error"):
                c.list_pull_requests("octocat", "Hello-World")

    def test_status_without_body(self):
        """Test fallback message."""
        fake = FakeGitHub()
        fake.fail("issues", 502)

        with _client_for(fake) as c:
            with pytest.raises(RemoteFetchError, match="HTTP 502"):
                c.list_issues("octocat", "Hello-World")

    def test_timeout(self):
        """Test that a timeout becomes a RemoteFetchError."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with _client_for(handler) as c:
            with pytest.raises(RemoteFetchError, match="Request timed out") as exc_info:
                c.get_repository("octocat", "Hello-World")

        assert exc_info.value.status_code is None

    def test_network_error(self):
        """Test that connection failures become a RemoteFetchError."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client_for(handler) as c:
            with pytest.raises(RemoteFetchError, match="Network error: connection refused"):
                c.list_contributors("octocat", "Hello-World")

    def test_invalid_json(self):
        """Test that a non-JSON body is reported."""
        with _client_for(lambda request: httpx.Response(200, text="<html>")) as c:
            with pytest.raises(RemoteFetchError, match="Invalid JSON"):
                c.get_repository("octocat", "Hello-World")

    def test_control_character_in_path(self):
        """Test that an unencodable URL becomes a RemoteFetchError."""
        fake = FakeGitHub()

        with _client_for(fake) as c:
            with pytest.raises(RemoteFetchError, match="Invalid URL"):
                c.get_repository("octo\x01cat", "Hello-World")

        assert fake.requests == []

    def test_non_ascii_token(self):
        """Test that a token that cannot be sent as a header is rejected."""
        with pytest.raises(RemoteFetchError, match="Invalid token"):
            GitHubClient("tökén", base_url=BASE_URL)
