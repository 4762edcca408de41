"""Approval check orchestration for a single pull request."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from github import Github, GithubException
from rich.console import Console

from teamgate_core.errors import PolicyError
from teamgate_core.gh.pull_request import (
    change_from_pull,
    get_pull,
    get_repo,
    get_review_events,
    get_team_members,
    post_check_run,
    post_commit_status,
)
from teamgate_core.policy import ChangeRef, PolicyResult, aggregate
from teamgate_core.report import CheckReport, build_error_report, build_report
from teamgate_core.rules import parse_rules

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class CheckSummary:
    """Result returned by run_check — what was decided and whether it reached GitHub."""

    repo: str
    pr_number: int
    head_sha: str
    result: PolicyResult
    report: CheckReport
    posted: bool = False


def _publish(repo_obj, head_sha: str, config: dict, report: CheckReport) -> None:
    name = config.get("check_name", "Team approvals")
    if config.get("report", "check") == "status":
        post_commit_status(repo_obj, head_sha, name, report)
    else:
        post_check_run(repo_obj, head_sha, name, report)
    logger.debug("Posted %s report %r for %s", config.get("report", "check"), report.conclusion, head_sha)


def print_report(report: CheckReport, result: PolicyResult | None = None) -> None:
    """Print a report to the terminal."""
    color = "green" if report.passed else "red"
    console.print(f"\n[bold {color}]{report.conclusion.upper()}[/bold {color}]  {report.title}")
    if result is not None and result.verdicts:
        for v in result.verdicts:
            mark = "[green]✓[/green]" if v.passed else "[red]✗[/red]"
            console.print(
                f"  {mark} [cyan]{v.rule.repo_pattern}[/cyan]@[cyan]{v.rule.branch_pattern}[/cyan]  {v.explanation}"
            )
    elif report.summary:
        console.print(f"  {report.summary}")


def run_check(
    repo: str,
    pr_number: int,
    config: dict,
    rule_document: str,
    shadow: bool = False,
    repo_obj=None,
    gh=None,
) -> CheckSummary:
    """Evaluate the approval policy for one PR and publish the outcome.

    In shadow mode nothing is posted to GitHub. When the policy cannot be
    evaluated (bad rule document, unknown team) a failing report is published
    and the PolicyError is re-raised for the caller to surface.
    """
    token = config.get("github_token")
    gh = gh if gh is not None else Github(token)
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=token)

    try:
        this_pr = get_pull(this_repo, pr_number)
    except GithubException:
        raise ValueError(f"PR #{pr_number} not found in {repo}.")

    change = change_from_pull(this_pr)
    org = config.get("org") or change.repo_name.split("/", 1)[0]
    console.print(f"Checking approvals for {change.repo_name}#{pr_number} → [bold]{change.branch_name}[/bold]")

    def review_provider(c: ChangeRef):
        events = get_review_events(this_pr)
        logger.debug("Fetched %d review(s) for %s#%d", len(events), c.repo_name, pr_number)
        return events

    def membership_provider(group: str):
        return get_team_members(gh, org, group)

    try:
        rules = parse_rules(rule_document)
        result = aggregate(change, rules, review_provider, membership_provider)
    except PolicyError as e:
        report = build_error_report(e)
        print_report(report)
        if not shadow:
            _publish(this_repo, change.head_revision, config, report)
        raise

    report = build_report(result, change)
    print_report(report, result)

    if shadow:
        console.print("[yellow]Shadow mode: result not posted.[/yellow]")
    else:
        _publish(this_repo, change.head_revision, config, report)

    return CheckSummary(
        repo=change.repo_name,
        pr_number=pr_number,
        head_sha=change.head_revision,
        result=result,
        report=report,
        posted=not shadow,
    )
