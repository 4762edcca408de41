"""Tests for repository/branch pattern matching."""

import pytest

from teamgate_core.matching import matches, rule_applies, select_rules
from teamgate_core.policy import ChangeRef
from teamgate_core.rules import Rule


def _rule(repo="*", branch="*", group="reviewers", count=1):
    return Rule(repo_pattern=repo, branch_pattern=branch, group=group, required_count=count)


def _change(repo="svc/api", branch="main"):
    return ChangeRef(repo_name=repo, branch_name=branch, head_revision="a" * 40)


class TestMatches:
    @pytest.mark.parametrize("value", ["", "main", "svc/api", "release/1.2/hotfix"])
    def test_star_matches_anything(self, value):
        assert matches("*", value) is True

    def test_prefix_matches_child(self):
        assert matches("foo/*", "foo/bar") is True

    def test_prefix_matches_nested_child(self):
        assert matches("foo/*", "foo/bar/baz") is True

    def test_prefix_matches_prefix_itself(self):
        assert matches("foo/*", "foo") is True

    def test_prefix_is_segment_aware(self):
        assert matches("foo/*", "foobar") is False

    def test_prefix_does_not_match_other_prefix(self):
        assert matches("foo/*", "bar/foo") is False

    def test_exact_match(self):
        assert matches("foo", "foo") is True

    def test_exact_mismatch(self):
        assert matches("foo", "bar") is False

    def test_exact_is_case_sensitive(self):
        assert matches("Main", "main") is False

    def test_star_inside_pattern_is_literal(self):
        assert matches("release-*", "release-1") is False
        assert matches("release-*", "release-*") is True


class TestRuleApplies:
    def test_both_patterns_must_match(self):
        assert rule_applies(_rule(repo="svc/*", branch="main"), _change("svc/api", "main")) is True

    def test_repo_mismatch(self):
        assert rule_applies(_rule(repo="web/*", branch="main"), _change("svc/api", "main")) is False

    def test_branch_mismatch(self):
        assert rule_applies(_rule(repo="svc/*", branch="main"), _change("svc/api", "develop")) is False

    def test_bare_repo_pattern_matches_name_without_owner(self):
        assert rule_applies(_rule(repo="api"), _change("svc/api")) is True

    def test_bare_repo_pattern_does_not_match_other_name(self):
        assert rule_applies(_rule(repo="api"), _change("svc/web")) is False

    def test_bare_repo_pattern_is_not_a_suffix_match(self):
        assert rule_applies(_rule(repo="api"), _change("svc/my-api")) is False

    def test_full_repo_pattern_requires_owner(self):
        assert rule_applies(_rule(repo="svc/api"), _change("svc/api")) is True
        assert rule_applies(_rule(repo="web/api"), _change("svc/api")) is False

    def test_branch_prefix_pattern(self):
        assert rule_applies(_rule(branch="release/*"), _change(branch="release/2024.1")) is True


class TestSelectRules:
    def test_keeps_document_order_and_index(self):
        rules = [
            _rule(repo="web/*"),
            _rule(repo="*", group="a"),
            _rule(repo="svc/*", group="b"),
        ]
        selected = select_rules(rules, _change())
        assert [(i, r.group) for i, r in selected] == [(1, "a"), (2, "b")]

    def test_empty_when_nothing_matches(self):
        assert select_rules([_rule(repo="web/*")], _change()) == []

    def test_empty_rule_set(self):
        assert select_rules([], _change()) == []
