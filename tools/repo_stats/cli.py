"""CLI interface for Repo Stats."""

import json
from typing import Callable, Optional, Tuple

import click

from shared.cli import handle_errors, info, warning
from shared.logger import get_logger, setup_logger

from .client import DEFAULT_TIMEOUT
from .exceptions import InvalidInputError
from .fetcher import RepositoryIdentifier, RepoStatsReporter, StateFilter

INVALID_INPUT_MESSAGE = "Invalid input. All fields must be filled."
TOKEN_PROMPT = "GitHub Token: "

logger = get_logger(__name__)

state_option = click.option(
    "--state",
    type=click.Choice([s.value for s in StateFilter], case_sensitive=False),
    default=StateFilter.OPEN.value,
    help="Which issues and pull requests to count",
)
timeout_option = click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Per-request timeout in seconds",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Verbose output")
include_prs_option = click.option(
    "--issues-include-prs",
    "include_pull_requests",
    is_flag=True,
    help="Count pull requests as issues, as the issues API does",
)


def build_reporter(
    token: str,
    owner: str,
    name: str,
    state: str,
    timeout: float,
    include_pull_requests: bool = False,
) -> Optional[RepoStatsReporter]:
    """Build a reporter, or print the invalid input message and return None."""
    try:
        identifier = RepositoryIdentifier(owner, name)
        return RepoStatsReporter(
            token,
            identifier,
            state=StateFilter(state.lower()),
            timeout=timeout,
            include_pull_requests=include_pull_requests,
        )
    except InvalidInputError:
        click.echo(INVALID_INPUT_MESSAGE)
        return None


def prompt_inputs(read_line: Callable[[str], Optional[str]]) -> Tuple[str, str, str]:
    """
    Ask for token, owner and repository name, in that order.

    Args:
        read_line: Shows a prompt and returns the line typed by the user,
            or None once input has ended

    Returns:
        (token, owner, name), each trimmed; answers after the end of input
        are empty
    """
    answers = []
    for message in (TOKEN_PROMPT, "Repository Owner: ", "Repository Name: "):
        line = read_line(message)
        if line is None:
            break
        answers.append(line.strip())

    answers += [""] * (3 - len(answers))
    return answers[0], answers[1], answers[2]


def _click_read_line(message: str) -> Optional[str]:
    hidden = message == TOKEN_PROMPT
    try:
        return click.prompt(
            message,
            default="",
            show_default=False,
            prompt_suffix="",
            hide_input=hidden,
        )
    except click.Abort:
        # End of input; click already ends the line for hidden prompts
        if not hidden:
            click.echo()
        return None


def _configure(state: str, verbose: bool) -> None:
    log_level = "DEBUG" if verbose else "WARNING"
    setup_logger("tools.repo_stats", level=log_level)

    if state.lower() != StateFilter.OPEN.value:
        warning(f"Counting {state.lower()} issues and pull requests")


# Extra positional arguments are ignored
@click.command(context_settings={"allow_extra_args": True})
@click.argument("owner", required=False)
@click.argument("repo", required=False)
@click.argument("token", required=False, envvar="GITHUB_TOKEN")
@state_option
@timeout_option
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format",
)
@include_prs_option
@verbose_option
@click.pass_context
@handle_errors
def main(
    ctx: click.Context,
    owner: Optional[str],
    repo: Optional[str],
    token: Optional[str],
    state: str,
    timeout: float,
    output: str,
    include_pull_requests: bool,
    verbose: bool,
):
    """
    Repo Stats - report stars, forks, issues, pull requests and
    contributors of a GitHub repository.

    The token may also be given through the GITHUB_TOKEN env var.

    Examples:

        \b
        repo-stats octocat Hello-World ghp_xxx

        \b
        repo-stats octocat Hello-World --state all --output json
    """
    if owner is None or repo is None or token is None:
        click.echo(f"Usage: {ctx.info_name} <owner> <repo> <token>")
        return

    _configure(state, verbose)
    if ctx.args:
        logger.debug(f"Ignoring extra arguments: {ctx.args}")

    reporter = build_reporter(token, owner, repo, state, timeout, include_pull_requests)
    if reporter is None:
        return

    if verbose:
        info(f"Fetching stats for {reporter.identifier.full_name}")

    if output.lower() == "json":
        result = reporter.fetch()
        payload = result.summary.to_dict() if result.ok else {"error": result.error}
        click.echo(json.dumps(payload, indent=2))
        return

    reporter.fetch_and_report()


@click.command()
@state_option
@timeout_option
@include_prs_option
@verbose_option
@handle_errors
def interactive(state: str, timeout: float, include_pull_requests: bool, verbose: bool):
    """
    Repo Stats (interactive) - prompt for token, owner and repository name.
    """
    token, owner, name = prompt_inputs(_click_read_line)

    if not (token and owner and name):
        click.echo(INVALID_INPUT_MESSAGE)
        return

    _configure(state, verbose)

    reporter = build_reporter(token, owner, name, state, timeout, include_pull_requests)
    if reporter is None:
        return

    reporter.fetch_and_report()


if __name__ == "__main__":
    main()
