"""CLI entry point for teamgate.

Commands:
  check        — evaluate the approval policy for a pull request
  rules        — list the rules in the configured rule document
  validate     — validate a rule document
  add-rule     — append a rule and save the document
  remove-rule  — delete a rule and save the document
  init         — interactive setup wizard
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from teamgate_cli.commands.check import check_cmd
from teamgate_cli.commands.edit import add_rule_cmd, remove_rule_cmd
from teamgate_cli.commands.init import init_cmd
from teamgate_cli.commands.rules import rules_cmd, validate_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured rule store from .teamgate.yml settings.

      rules_store: file → FileRuleStore (rules_path, default approval-rules.yml)
      rules_store: repo → RepoRuleStore (requires admin_repo and a GitHub token)

    Returns None when the configuration is incomplete; commands that need the
    rule document report that themselves.
    """
    store_type = config.get("rules_store", "file")
    rules_path = config.get("rules_path") or "approval-rules.yml"

    if store_type == "repo":
        from teamgate_store.repo import RepoRuleStore

        admin_repo = config.get("admin_repo")
        token = config.get("github_token")
        if not admin_repo or not token:
            console.print(
                "[yellow]The repo rule store requires admin_repo and a GitHub token. No rule store configured.[/yellow]"
            )
            return None
        return RepoRuleStore(admin_repo, rules_path, token, ref=config.get("admin_ref") or "main")

    if store_type == "file":
        from teamgate_store.file import FileRuleStore

        return FileRuleStore(rules_path)

    console.print(f"[yellow]Unknown rules_store {store_type!r}. Choose 'file' or 'repo'.[/yellow]")
    return None


@click.group()
@click.version_option(
    version=importlib.metadata.version("teamgate"),
    prog_name="teamgate",
)
@click.option(
    "--config",
    "config_path",
    default=".teamgate.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="TEAMGATE_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Team approval policies for GitHub pull requests."""
    from teamgate_core.config import load_config
    from teamgate_cli.auth import resolve_github_token

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(show_path=False)])

    ctx.ensure_object(dict)

    config = load_config(config_path)

    token = resolve_github_token()
    if token:
        config["github_token"] = token

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    if store is not None:
        ctx.call_on_close(store.close)


main.add_command(check_cmd)
main.add_command(rules_cmd)
main.add_command(validate_cmd)
main.add_command(add_rule_cmd)
main.add_command(remove_rule_cmd)
main.add_command(init_cmd)
