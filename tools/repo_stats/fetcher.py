"""Core repository statistics fetching and reporting logic."""

import concurrent.futures
import contextlib
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import click
import httpx

from shared.logger import get_logger

from .client import DEFAULT_TIMEOUT, GitHubClient
from .exceptions import InvalidInputError, RemoteFetchError

logger = get_logger(__name__)

FAILURE_PREFIX = "Error fetching repository stats"


class StateFilter(str, Enum):
    """Which issues and pull requests are counted."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


def _require(value: Optional[str], field: str) -> str:
    """Return the trimmed value, or raise if it is blank."""
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{field} must not be blank")
    return value


@dataclass(frozen=True)
class RepositoryIdentifier:
    """Owner-scoped repository name, e.g. octocat/Hello-World."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", _require(self.owner, "owner"))
        object.__setattr__(self, "name", _require(self.name, "repository name"))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RepositorySummary:
    """Statistics reported for a repository."""

    full_name: str
    description: Optional[str]
    stars: int
    forks: int
    open_issues: int
    open_pull_requests: int
    contributors: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FetchResult:
    """Outcome of a fetch: a summary on success, an error message on failure."""

    summary: Optional[RepositorySummary] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.summary is not None

    @classmethod
    def success(cls, summary: RepositorySummary) -> "FetchResult":
        return cls(summary=summary)

    @classmethod
    def failure(cls, message: str) -> "FetchResult":
        return cls(error=message)


def render_summary(summary: RepositorySummary) -> List[str]:
    """Render the report lines, in fixed order."""
    return [
        f"Repository: {summary.full_name}",
        f"Description: {summary.description or ''}",
        f"Stars: {summary.stars}",
        f"Forks: {summary.forks}",
        f"Open Issues: {summary.open_issues}",
        f"Open Pull Requests: {summary.open_pull_requests}",
        f"Contributors: {summary.contributors}",
    ]


def render_failure(message: str) -> str:
    return f"{FAILURE_PREFIX}: {message}"


class RepoStatsReporter:
    """
    Fetch statistics for one repository and write a plain-text report.

    The four API reads are independent and run concurrently; nothing is
    written until all of them have finished.
    """

    def __init__(
        self,
        token: str,
        identifier: RepositoryIdentifier,
        *,
        client: Optional[Any] = None,
        state: StateFilter = StateFilter.OPEN,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: Optional[str] = None,
        include_pull_requests: bool = False,
        write_line: Callable[[str], Any] = click.echo,
    ):
        """
        Initialize the reporter. No network activity happens here.

        Args:
            token: GitHub personal access token
            identifier: Repository to report on
            client: Object providing the GitHubClient read methods
                (a GitHubClient is created per fetch when omitted)
            state: Issue and pull request state filter
            timeout: Per-request timeout in seconds
            base_url: API root override
            include_pull_requests: Count pull requests as issues too, as the
                issues endpoint itself does
            write_line: Output function for the rendered report

        Raises:
            InvalidInputError: If the token is blank
        """
        self.token = _require(token, "token")
        self.identifier = identifier
        self.state = StateFilter(state)
        self.timeout = timeout
        self.base_url = base_url
        self.include_pull_requests = include_pull_requests
        self.write_line = write_line
        self._client = client

    def _open_client(self):
        if self._client is not None:
            return contextlib.nullcontext(self._client)
        return GitHubClient(self.token, base_url=self.base_url, timeout=self.timeout)

    def fetch(self) -> FetchResult:
        """
        Fetch repository metadata, contributors, issues and pull requests.

        Returns:
            FetchResult with a summary, or with the error message of the
            first failed request
        """
        owner, name = self.identifier.owner, self.identifier.name
        state = self.state.value
        logger.info(f"Fetching stats for {self.identifier.full_name} (state={state})")

        try:
            with self._open_client() as client:
                executor = concurrent.futures.ThreadPoolExecutor(max_workers=4)
                interrupted = False
                try:
                    future_repo = executor.submit(client.get_repository, owner, name)
                    future_contributors = executor.submit(client.list_contributors, owner, name)
                    future_issues = executor.submit(
                        client.list_issues, owner, name, state, self.include_pull_requests
                    )
                    future_pulls = executor.submit(client.list_pull_requests, owner, name, state)

                    concurrent.futures.wait(
                        [future_repo, future_contributors, future_issues, future_pulls]
                    )

                    repo = future_repo.result()
                    contributors = future_contributors.result()
                    issues = future_issues.result()
                    pulls = future_pulls.result()
                except KeyboardInterrupt:
                    interrupted = True
                    raise
                finally:
                    # On interrupt, running reads stop once the client is closed
                    executor.shutdown(wait=not interrupted, cancel_futures=interrupted)

        except (RemoteFetchError, httpx.HTTPError, httpx.InvalidURL) as e:
            logger.info(f"Failed to fetch {self.identifier.full_name}: {e}")
            return FetchResult.failure(str(e))

        summary = RepositorySummary(
            full_name=repo.get("full_name") or self.identifier.full_name,
            description=repo.get("description"),
            stars=repo.get("stargazers_count") or 0,
            forks=repo.get("forks_count") or 0,
            open_issues=len(issues),
            open_pull_requests=len(pulls),
            contributors=len(contributors),
        )
        logger.debug(f"Fetched summary: {summary}")
        return FetchResult.success(summary)

    def fetch_and_report(self) -> FetchResult:
        """
        Fetch and write the report, or a single error line on failure.

        Remote failures never propagate from here.
        """
        result = self.fetch()

        if result.ok:
            self.write_line("\n".join(render_summary(result.summary)))
        else:
            self.write_line(render_failure(result.error))

        return result
