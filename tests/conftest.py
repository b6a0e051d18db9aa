"""Shared fixtures for the repo stats tests."""

import httpx
import pytest

from tools.repo_stats import fetcher
from tools.repo_stats.client import GitHubClient

from tests.fakes import BASE_URL, FakeGitHub, make_items


@pytest.fixture
def fake_github() -> FakeGitHub:
    """The octocat/Hello-World scenario: 17 issues, 3 pull requests, 5 contributors."""
    return FakeGitHub(
        contributors=make_items(5, contributions=1),
        issues=make_items(17),
        pulls=make_items(3),
    )


@pytest.fixture
def client(fake_github: FakeGitHub):
    with GitHubClient("test-token", base_url=BASE_URL, transport=httpx.MockTransport(fake_github)) as c:
        yield c


@pytest.fixture
def patched_client(monkeypatch, fake_github: FakeGitHub) -> FakeGitHub:
    """Route every GitHubClient the reporter creates to the fake API."""
    transport = httpx.MockTransport(fake_github)

    def factory(token, **kwargs):
        return GitHubClient(token, transport=transport, **kwargs)

    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr(fetcher, "GitHubClient", factory)
    return fake_github
