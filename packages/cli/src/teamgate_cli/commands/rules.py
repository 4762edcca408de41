"""rules and validate commands — inspect the rule document."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from teamgate_cli.context import read_rules, require_store

console = Console()


@click.command("rules")
@click.option("--repo", default=None, help="Mark rules applying to this repository (owner/name).")
@click.option("--branch", default=None, help="Mark rules applying to this target branch.")
@click.pass_context
def rules_cmd(ctx, repo: str | None, branch: str | None):
    """Show the approval rules in the configured rule document.

    With --repo and --branch, an extra column shows which rules would be
    evaluated for a pull request into that branch.
    """
    from teamgate_core.policy import ChangeRef
    from teamgate_core.matching import rule_applies

    if (repo is None) != (branch is None):
        raise click.UsageError("--repo and --branch must be given together.")

    document, rules = read_rules(require_store(ctx))
    if not rules:
        console.print(f"[yellow]No rules defined in {document.source}. Every pull request is approved.[/yellow]")
        return

    change = ChangeRef(repo_name=repo, branch_name=branch, head_revision="") if repo else None

    table = Table(title=f"Approval Rules — {document.source}", show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", justify="right", width=4)
    table.add_column("Repository")
    table.add_column("Branch")
    table.add_column("Team")
    table.add_column("Approvals", justify="right", width=10)
    if change is not None:
        table.add_column("Applies", justify="center", width=8)

    applying = 0
    for i, rule in enumerate(rules, 1):
        row = [str(i), rule.repo_pattern, rule.branch_pattern, rule.group, str(rule.required_count)]
        if change is not None:
            applies = rule_applies(rule, change)
            applying += applies
            row.append("[green]yes[/green]" if applies else "[dim]no[/dim]")
        table.add_row(*row)

    console.print(table)
    if change is not None and not applying:
        console.print(f"[yellow]No rule applies to {repo}@{branch}: approved by default.[/yellow]")


@click.command("validate")
@click.option(
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Validate this file instead of the configured rule document.",
)
@click.pass_context
def validate_cmd(ctx, file_path: str | None):
    """Validate a rule document without evaluating anything."""
    if file_path is not None:
        from teamgate_store.file import FileRuleStore

        store = FileRuleStore(file_path)
    else:
        store = require_store(ctx)

    document, rules = read_rules(store)
    console.print(f"[green]{document.source}: {len(rules)} rule(s) OK.[/green]")

