"""Rule document loading and validation.

The document is the same YAML shape the admin repository has always held:

    repos:
      - repo_name: "svc/*"
        branch: main
        team: leads
        required_approvals: 2

Entries are validated at load time into fixed-shape ``Rule`` records. Any
deviation raises — a broken document must never be mistaken for an empty one.
"""

from __future__ import annotations

from dataclasses import dataclass

import yaml

from teamgate_core.errors import InvalidRule, MalformedRuleDocument

# Document key → Rule attribute, in serialization order.
_FIELDS = {
    "repo_name": "repo_pattern",
    "branch": "branch_pattern",
    "team": "group",
    "required_approvals": "required_count",
}


@dataclass(frozen=True)
class Rule:
    """A policy statement: N approvals from ``group`` for matching changes."""

    repo_pattern: str
    branch_pattern: str
    group: str
    required_count: int


def parse_rules(text: str) -> list[Rule]:
    """Parse a YAML rule document into an ordered list of rules."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedRuleDocument(f"Rule document is not valid YAML: {e}") from e
    return rules_from_data(data)


def rules_from_data(data) -> list[Rule]:
    """Validate an already-deserialized rule document."""
    if not isinstance(data, dict):
        raise MalformedRuleDocument(f"Rule document must be a mapping with a 'repos' list, got {type(data).__name__}")
    if "repos" not in data:
        raise MalformedRuleDocument("Rule document has no 'repos' key")

    entries = data["repos"]
    if not isinstance(entries, list):
        raise MalformedRuleDocument(f"'repos' must be a list, got {type(entries).__name__}")

    return [_rule_from_entry(index, entry) for index, entry in enumerate(entries)]


def _rule_from_entry(index: int, entry) -> Rule:
    if not isinstance(entry, dict):
        raise InvalidRule(index, None, f"expected a mapping, got {type(entry).__name__}")

    unknown = sorted(str(k) for k in entry if k not in _FIELDS)
    if unknown:
        raise InvalidRule(index, unknown[0], "unknown field")
    for key in _FIELDS:
        if key not in entry:
            raise InvalidRule(index, key, "missing field")

    for key in ("repo_name", "branch", "team"):
        value = entry[key]
        if not isinstance(value, str) or not value.strip():
            raise InvalidRule(index, key, "must be a non-empty string")

    count = entry["required_approvals"]
    # bool is an int subclass; `required_approvals: yes` is a typo, not 1.
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidRule(index, "required_approvals", f"must be an integer, got {count!r}")
    if count < 0:
        raise InvalidRule(index, "required_approvals", f"must be >= 0, got {count}")

    return Rule(
        repo_pattern=entry["repo_name"],
        branch_pattern=entry["branch"],
        group=entry["team"],
        required_count=count,
    )


def dump_rules(rules: list[Rule]) -> str:
    """Serialize rules back to the document format, preserving order."""
    entries = [{key: getattr(rule, attr) for key, attr in _FIELDS.items()} for rule in rules]
    return yaml.safe_dump({"repos": entries}, default_flow_style=False, sort_keys=False)
