"""add-rule and remove-rule commands — edit the rule document in its store."""

from __future__ import annotations

import click
from rich.console import Console

from teamgate_cli.context import read_rules, require_store
from teamgate_core.errors import InvalidRule
from teamgate_core.rules import Rule, dump_rules, rules_from_data
from teamgate_store.base import RuleStoreError

console = Console()


def _save(store, rules: list[Rule], message: str) -> None:
    try:
        store.write(dump_rules(rules), message)
    except RuleStoreError as e:
        raise click.ClickException(str(e))


@click.command("add-rule")
@click.option("--repo-pattern", required=True, help='Repository pattern: "*", "owner/*" or "owner/name".')
@click.option("--branch-pattern", required=True, help='Target branch pattern: "*", "release/*" or "main".')
@click.option("--team", required=True, help="Slug of the team whose approvals count.")
@click.option("--required", "required_count", type=int, required=True, help="Number of approvals required.")
@click.pass_context
def add_rule_cmd(ctx, repo_pattern: str, branch_pattern: str, team: str, required_count: int):
    """Append a rule to the rule document."""
    store = require_store(ctx)
    document, rules = read_rules(store)

    entry = {
        "repo_name": repo_pattern,
        "branch": branch_pattern,
        "team": team,
        "required_approvals": required_count,
    }
    # Validate through the loader so CLI edits obey the same rules as hand edits.
    try:
        (rule,) = rules_from_data({"repos": [entry]})
    except InvalidRule as e:
        raise click.BadParameter(e.reason, param_hint=f"'{e.field}'")

    rules.append(rule)
    _save(store, rules, f"Add approval rule: {team} x{required_count} for {repo_pattern}@{branch_pattern}")
    console.print(f"[green]Added rule #{len(rules)} to {document.source}[/green]")


@click.command("remove-rule")
@click.option("--index", "index", type=int, required=True, help="1-based rule number as shown by `teamgate rules`.")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
def remove_rule_cmd(ctx, index: int, yes: bool):
    """Remove a rule from the rule document."""
    store = require_store(ctx)
    document, rules = read_rules(store)

    if not 1 <= index <= len(rules):
        raise click.BadParameter(f"must be between 1 and {len(rules)}", param_hint="'--index'")

    rule = rules[index - 1]
    description = f"{rule.group} x{rule.required_count} for {rule.repo_pattern}@{rule.branch_pattern}"
    if not yes and not click.confirm(f"Remove rule #{index} ({description})?"):
        return

    del rules[index - 1]
    _save(store, rules, f"Remove approval rule: {description}")
    console.print(f"[green]Removed rule #{index} from {document.source}[/green]")
