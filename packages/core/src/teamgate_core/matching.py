"""Repository/branch pattern matching."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from teamgate_core.policy import ChangeRef
    from teamgate_core.rules import Rule


def matches(pattern: str, value: str) -> bool:
    """Return True if ``pattern`` selects ``value``.

    Supports:
    - "*": any value
    - "prefix/*": ``prefix`` itself or anything under ``prefix/`` — segment-aware,
      so "foo/*" matches "foo/bar" and "foo" but not "foobar"
    - anything else: exact equality
    """
    if pattern == "*":
        return True
    if pattern.endswith("/*"):
        prefix = pattern[:-2]
        return value == prefix or value.startswith(prefix + "/")
    return pattern == value


def repo_matches(pattern: str, repo_name: str) -> bool:
    """Match a repository pattern against a full "owner/name" repository name.

    A pattern without a "/" ("api", "*") names the repository alone, so it is
    compared with the bare name after the owner.
    """
    if "/" not in pattern:
        return matches(pattern, repo_name.rsplit("/", 1)[-1])
    return matches(pattern, repo_name)


def rule_applies(rule: Rule, change: ChangeRef) -> bool:
    return repo_matches(rule.repo_pattern, change.repo_name) and matches(rule.branch_pattern, change.branch_name)


def select_rules(rules, change: ChangeRef) -> list[tuple[int, Rule]]:
    """Return (document index, rule) for every rule that applies, in document order."""
    return [(index, rule) for index, rule in enumerate(rules) if rule_applies(rule, change)]
