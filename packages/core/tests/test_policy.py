"""Tests for policy aggregation."""

from unittest.mock import MagicMock

import pytest

from teamgate_core.errors import UnknownGroup
from teamgate_core.policy import ChangeRef, PolicyResult, aggregate
from teamgate_core.reviews import Disposition, ReviewEvent
from teamgate_core.rules import Rule

APPROVED = Disposition.APPROVED


def _rule(repo="*", branch="*", group="reviewers", count=1):
    return Rule(repo_pattern=repo, branch_pattern=branch, group=group, required_count=count)


CHANGE = ChangeRef(repo_name="svc/api", branch_name="main", head_revision="a" * 40)

SCENARIO_RULES = [
    _rule(repo="*", branch="main", group="reviewers", count=1),
    _rule(repo="svc/*", branch="*", group="leads", count=2),
]
SCENARIO_REVIEWS = [
    ReviewEvent("rita", APPROVED, 1),
    ReviewEvent("lee", APPROVED, 2),
    ReviewEvent("lou", Disposition.COMMENTED, 3),
]
SCENARIO_TEAMS = {"reviewers": {"rita", "ravi"}, "leads": {"lee", "lou"}}


def _run(rules=SCENARIO_RULES, reviews=SCENARIO_REVIEWS, teams=SCENARIO_TEAMS, change=CHANGE):
    return aggregate(change, rules, lambda c: list(reviews), teams.get)


class TestEndToEnd:
    def test_scenario_fails_on_leads_only(self):
        result = _run()

        assert result.overall_passed is False
        assert result.no_rules_matched is False
        assert [(v.rule.group, v.approvals, v.passed) for v in result.verdicts] == [
            ("reviewers", 1, True),
            ("leads", 1, False),
        ]
        assert result.failures == ["group leads: required 2, got 1"]

    def test_passes_when_every_rule_satisfied(self):
        reviews = SCENARIO_REVIEWS + [ReviewEvent("lou", APPROVED, 4)]
        result = _run(reviews=reviews)
        assert result.overall_passed is True
        assert result.failures == []

    def test_later_change_request_revokes_approval(self):
        reviews = SCENARIO_REVIEWS + [ReviewEvent("rita", Disposition.CHANGES_REQUESTED, 9)]
        result = _run(reviews=reviews)
        assert result.failures == [
            "group reviewers: required 1, got 0",
            "group leads: required 2, got 1",
        ]

    def test_only_matching_rules_evaluated(self):
        change = ChangeRef(repo_name="web/site", branch_name="main", head_revision="b" * 40)
        result = _run(change=change)
        assert [v.rule.group for v in result.verdicts] == ["reviewers"]
        assert result.overall_passed is True


class TestDefaultAllow:
    def test_no_rules(self):
        result = _run(rules=[])
        assert result == PolicyResult(overall_passed=True, verdicts=(), no_rules_matched=True)

    def test_no_matching_rules(self):
        result = _run(rules=[_rule(repo="web/*")])
        assert result.overall_passed is True
        assert result.no_rules_matched is True
        assert result.verdicts == ()

    def test_providers_not_called_when_nothing_matches(self):
        reviews = MagicMock()
        members = MagicMock()
        aggregate(CHANGE, [_rule(branch="develop")], reviews, members)
        reviews.assert_not_called()
        members.assert_not_called()


class TestProviders:
    def test_reviews_fetched_once(self):
        reviews = MagicMock(return_value=SCENARIO_REVIEWS)
        aggregate(CHANGE, SCENARIO_RULES, reviews, SCENARIO_TEAMS.get)
        reviews.assert_called_once_with(CHANGE)

    def test_repeated_group_fetched_once(self):
        members = MagicMock(return_value={"rita"})
        rules = [_rule(group="reviewers", count=1), _rule(branch="main", group="reviewers", count=2)]
        result = aggregate(CHANGE, rules, lambda c: SCENARIO_REVIEWS, members)
        members.assert_called_once_with("reviewers")
        assert [v.passed for v in result.verdicts] == [True, False]

    def test_unknown_group_raises_with_rule_index(self):
        rules = [_rule(group="reviewers"), _rule(repo="web/*", group="ghosts"), _rule(group="ghosts")]
        with pytest.raises(UnknownGroup) as exc_info:
            _run(rules=rules)
        assert exc_info.value.group == "ghosts"
        assert exc_info.value.index == 2
        assert "rule #3" in str(exc_info.value)

    def test_empty_group_is_not_unknown(self):
        result = _run(rules=[_rule(group="empty")], teams={"empty": set()})
        assert result.overall_passed is False
        assert result.failures == ["group empty: required 1, got 0"]


class TestDeterminism:
    def test_identical_input_gives_identical_output(self):
        first = _run()
        second = _run()
        assert first == second
        assert first.failures == second.failures

    def test_review_input_order_does_not_matter(self):
        forward = _run(reviews=SCENARIO_REVIEWS)
        backward = _run(reviews=list(reversed(SCENARIO_REVIEWS)))
        assert forward == backward

    def test_verdicts_follow_document_order(self):
        rules = [_rule(group=g, count=5) for g in ("leads", "reviewers", "leads")]
        result = _run(rules=rules)
        assert [v.rule.group for v in result.verdicts] == ["leads", "reviewers", "leads"]
        assert result.failures == [
            "group leads: required 5, got 1",
            "group reviewers: required 5, got 1",
            "group leads: required 5, got 1",
        ]
