"""Read-only GitHub REST client used by the stats reporter."""

import os
from typing import Any, Dict, List, Optional

import httpx

from shared.logger import get_logger

from .exceptions import RemoteFetchError

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0
PER_PAGE = 100  # API maximum


class GitHubClient:
    """
    Thin client over the GitHub REST API (v3).

    List calls follow the ``Link`` header until the last page, so callers
    always receive the complete collection.
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            token: GitHub personal access token
            base_url: API root (defaults to GITHUB_API_URL or api.github.com)
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = (base_url or os.getenv("GITHUB_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-stats",
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {token}",
        }
        try:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self.headers,
                timeout=timeout,
                transport=transport,
                follow_redirects=True,  # renamed repositories answer 301
            )
        except httpx.InvalidURL as e:
            raise RemoteFetchError(f"Invalid URL: {e}") from e
        except UnicodeEncodeError as e:
            # header values must be ASCII
            raise RemoteFetchError("Invalid token: non-ASCII characters") from e

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_repository(self, owner: str, name: str) -> Dict[str, Any]:
        """Get repository metadata."""
        response = self._get(f"/repos/{owner}/{name}")
        data = self._json(response)
        if not isinstance(data, dict):
            raise RemoteFetchError("Unexpected response for repository", response.status_code)
        return data

    def list_contributors(self, owner: str, name: str) -> List[Dict[str, Any]]:
        """List every contributor of a repository."""
        return self._get_all(f"/repos/{owner}/{name}/contributors")

    def list_issues(
        self, owner: str, name: str, state: str = "open", include_pull_requests: bool = False
    ) -> List[Dict[str, Any]]:
        """
        List every issue of a repository.

        The issues endpoint also returns pull requests; those are dropped
        unless include_pull_requests is set.
        """
        items = self._get_all(f"/repos/{owner}/{name}/issues", {"state": state})
        if include_pull_requests:
            return items
        return [item for item in items if "pull_request" not in item]

    def list_pull_requests(self, owner: str, name: str, state: str = "open") -> List[Dict[str, Any]]:
        """List every pull request of a repository."""
        return self._get_all(f"/repos/{owner}/{name}/pulls", {"state": state})

    def _get_all(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Walk all pages of a list endpoint."""
        items: List[Dict[str, Any]] = []
        url: Optional[str] = path
        query: Optional[Dict[str, Any]] = {**(params or {}), "per_page": PER_PAGE}
        pages = 0

        while url:
            response = self._get(url, params=query)
            pages += 1

            # GitHub answers 204 for contributors of an empty repository
            if response.status_code == 204:
                break

            page = self._json(response)
            if not isinstance(page, list):
                raise RemoteFetchError(f"Unexpected response for {path}", response.status_code)
            items.extend(page)

            url = response.links.get("next", {}).get("url")
            query = None  # next URL already carries the query string

        logger.debug(f"{path}: {len(items)} items over {pages} page(s)")
        return items

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        logger.debug(f"GET {url}")

        try:
            response = self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.debug(f"Timeout: {e}")
            raise RemoteFetchError("Request timed out") from e
        except httpx.RequestError as e:
            logger.debug(f"Network error: {e}")
            raise RemoteFetchError(f"Network error: {e}") from e
        except httpx.InvalidURL as e:
            # e.g. control characters in the owner or repository name
            logger.debug(f"Invalid URL: {e}")
            raise RemoteFetchError(f"Invalid URL: {e}") from e

        if response.is_error:
            raise self._error_for(response)

        return response

    def _error_for(self, response: httpx.Response) -> RemoteFetchError:
        """Map an error response to a RemoteFetchError."""
        status = response.status_code

        if status == 401:
            message = "Bad credentials"
        elif status == 429 or (status == 403 and response.headers.get("x-ratelimit-remaining") == "0"):
            message = "API rate limit exceeded"
        elif status == 403:
            message = "Access forbidden"
        elif status == 404:
            message = "Not Found"
        else:
            message = self._message_from(response) or f"HTTP {status}"

        logger.debug(f"API error {status}: {message}")
        return RemoteFetchError(message, status)

    @staticmethod
    def _message_from(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("message")
        return None

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError("Invalid JSON in API response", response.status_code) from e
