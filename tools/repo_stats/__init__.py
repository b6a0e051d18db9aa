"""Repo Stats - Report statistics for a single GitHub repository."""

from .client import GitHubClient
from .exceptions import InvalidInputError, RemoteFetchError, RepoStatsError
from .fetcher import (
    FetchResult,
    RepositoryIdentifier,
    RepositorySummary,
    RepoStatsReporter,
    StateFilter,
)

__all__ = [
    "FetchResult",
    "GitHubClient",
    "InvalidInputError",
    "RemoteFetchError",
    "RepoStatsError",
    "RepoStatsReporter",
    "RepositoryIdentifier",
    "RepositorySummary",
    "StateFilter",
]
