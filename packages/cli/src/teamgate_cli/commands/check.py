"""check command — evaluate the approval policy for a pull request."""

from __future__ import annotations

import json

import click
from rich.console import Console

from teamgate_cli.context import require_store
from teamgate_core.checker import run_check
from teamgate_core.errors import PolicyError
from teamgate_core.gh.pull_request import change_from_event, get_pull_requests, get_repo
from teamgate_store.base import RuleStoreError

console = Console()


@click.command("check")
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Pull request number. Omit to list open PRs interactively.",
)
@click.option(
    "--event",
    "event_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Webhook event payload (e.g. $GITHUB_EVENT_PATH). Supplies --repo and --pr.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the result without posting it to GitHub.",
)
@click.option(
    "--exit-code",
    "exit_code",
    is_flag=True,
    help="Exit with status 1 when the policy is not satisfied.",
)
@click.pass_context
def check_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    event_path: str | None,
    shadow: bool,
    exit_code: bool,
):
    """Check a pull request against the team approval rules.

    Reads the rule document from the configured store, counts the latest
    approvals of each required team, and posts the verdict as a check run
    (or commit status) on the PR's head commit.

    \b
    Required environment variables:
      GITHUB_TOKEN   GitHub token (or TEAMGATE_TOKEN, or use gh CLI).
                     Needs read:org to list team members.
    """
    config = ctx.obj["config"]
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    if event_path is not None:
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
        try:
            change, pr_number = change_from_event(payload)
        except ValueError as e:
            raise click.UsageError(str(e))
        repo = change.repo_name

    if repo is None:
        raise click.UsageError("Pass --repo (and --pr) or --event.")

    store = require_store(ctx)
    try:
        document = store.read()
    except RuleStoreError as e:
        raise click.ClickException(str(e))

    this_repo = get_repo(repo, token=token)

    if pr_number is None:
        prs = list(get_pull_requests(this_repo))
        if not prs:
            console.print("[yellow]No open pull requests found.[/yellow]")
            return
        console.print("\nOpen pull requests:")
        for pr in prs:
            console.print(f"  [bold]#{pr.number}[/bold]  {pr.title}")
        pr_number = click.prompt("\nEnter the pull request number", type=int)

    try:
        summary = run_check(
            repo=repo,
            pr_number=pr_number,
            config=config,
            rule_document=document.content,
            shadow=shadow,
            repo_obj=this_repo,
        )
    except PolicyError as e:
        raise click.ClickException(f"{document.source}: {e}")
    except ValueError as e:
        raise click.ClickException(str(e))

    if exit_code and not summary.result.overall_passed:
        ctx.exit(1)
