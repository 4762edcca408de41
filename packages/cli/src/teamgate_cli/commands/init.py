"""init command — interactive setup wizard.

Writes .teamgate.yml, a starter rule document when the rules live in this
repository, and optionally a GitHub Actions workflow that re-checks a pull
request whenever it changes or receives a review.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

logger = logging.getLogger(__name__)
console = Console()

_STARTER_RULES = {
    "repos": [
        {"repo_name": "*", "branch": "main", "team": "reviewers", "required_approvals": 1},
    ]
}

_WORKFLOW_TEMPLATE = """\
name: Team approvals

on:
  pull_request:
    types: [opened, synchronize, reopened]
  pull_request_review:
    types: [submitted, edited, dismissed]

jobs:
  approvals:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: read
      checks: write
      statuses: write

    steps:
      # Rules are read from the target branch; the PR's own copy is ignored.
      - uses: actions/checkout@v4
        with:
          ref: ${{{{ github.event.pull_request.base.sha }}}}

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install teamgate
        run: pip install "teamgate=={version}"

      - name: Check team approvals
        env:
          GITHUB_TOKEN: ${{{{ secrets.TEAMGATE_TOKEN }}}}
        run: teamgate check --event "$GITHUB_EVENT_PATH"
"""


@click.command("init")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
def init_cmd(repo: str | None):
    """Set up teamgate for a repository or organization.

    Creates .teamgate.yml, a starter approval-rules.yml when the rules are
    kept locally, and optionally a GitHub Actions workflow.
    """
    console.print("\n[bold cyan]teamgate init[/bold cyan] — setup wizard\n")

    if repo is None:
        repo = _detect_repo_from_git()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("GitHub repository (owner/name)")

    console.print("\nWhere do the approval rules live?")
    console.print("  [bold]file[/bold]  — a YAML file in this repository (default)")
    console.print("  [bold]repo[/bold]  — a YAML file in a shared admin repository")
    store_type = click.prompt("Rule store", type=click.Choice(["file", "repo"]), default="file")

    config: dict = {"rules_store": store_type}

    if store_type == "file":
        rules_path = click.prompt("Rule document path", default="approval-rules.yml")
        config["rules_path"] = rules_path
        if _write_starter_rules(Path(rules_path)):
            console.print(f"[green]Created {rules_path} with a starter rule[/green]")
        else:
            console.print(f"[dim]{rules_path} already exists — left unchanged[/dim]")
    else:
        owner = repo.split("/", 1)[0]
        config["admin_repo"] = click.prompt("Admin repository (owner/name)", default=f"{owner}/admin")
        config["rules_path"] = click.prompt("Rule document path in the admin repository", default="approval-rules.yml")
        config["admin_ref"] = click.prompt("Admin repository branch", default="main")

    console.print(
        "\n[yellow]Note:[/yellow] check runs can only be created by GitHub App tokens. "
        "With a personal access token, report results as commit statuses."
    )
    config["report"] = click.prompt("Report results as", type=click.Choice(["check", "status"]), default="status")

    _write_config(config)
    console.print("[green]Created .teamgate.yml[/green]")

    setup_ci = click.confirm("\nGenerate .github/workflows/teamgate.yml for GitHub Actions?", default=True)
    if setup_ci:
        _write_workflow()
        console.print("[green]Created .github/workflows/teamgate.yml[/green]")
        console.print(
            "\n[yellow]Add a [bold]TEAMGATE_TOKEN[/bold] secret holding a token with "
            "[bold]read:org[/bold] scope — the built-in GITHUB_TOKEN cannot list team members.[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print(f"Check a pull request with: [bold]teamgate check --repo {repo} --pr <number> --shadow[/bold]")


def _detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    url = result.stdout.strip()
    # https://github.com/owner/repo.git  →  owner/repo
    # git@github.com:owner/repo.git      →  owner/repo
    if "github.com" not in url:
        return None
    slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
    return slug if "/" in slug else None


def _write_starter_rules(path: Path) -> bool:
    """Write a one-rule document unless the file exists. Returns True if written."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(_STARTER_RULES, default_flow_style=False, sort_keys=False))
    return True


def _write_config(config: dict) -> None:
    """Write or update .teamgate.yml, preserving any existing keys."""
    path = Path(".teamgate.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    try:
        from importlib.metadata import version

        return version("teamgate")
    except Exception:
        logger.debug("teamgate is not installed; pinning workflow to 0.1.0")
        return "0.1.0"


def _write_workflow() -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "teamgate.yml").write_text(_WORKFLOW_TEMPLATE.format(version=_get_version()))
