"""Helpers for commands reading shared state from the click context."""

from __future__ import annotations

import click


def require_store(ctx: click.Context):
    store = ctx.obj.get("store") if ctx.obj else None
    if store is None:
        raise click.UsageError(
            "No rule store configured. Set 'rules_store: file' with 'rules_path', or 'rules_store: repo' "
            "with 'admin_repo' in .teamgate.yml, or run `teamgate init`."
        )
    return store


def read_rules(store):
    """Read and parse the store's document; store and policy errors become click errors."""
    from teamgate_core.errors import PolicyError
    from teamgate_core.rules import parse_rules
    from teamgate_store.base import RuleStoreError

    try:
        document = store.read()
    except RuleStoreError as e:
        raise click.ClickException(str(e))
    try:
        return document, parse_rules(document.content)
    except PolicyError as e:
        raise click.ClickException(f"{document.source}: {e}")
