"""Exceptions raised by the repository stats tool."""

from typing import Optional


class RepoStatsError(Exception):
    """Base exception for all repo stats errors."""


class InvalidInputError(RepoStatsError, ValueError):
    """A required field (owner, repository name or token) is blank."""


class RemoteFetchError(RepoStatsError):
    """Any failure while talking to the GitHub API."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)
