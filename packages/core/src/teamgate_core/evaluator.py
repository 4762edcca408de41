"""Single-rule evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Mapping

from teamgate_core.reviews import Disposition
from teamgate_core.rules import Rule


@dataclass(frozen=True)
class RuleVerdict:
    rule: Rule
    approvals: int
    passed: bool

    @property
    def explanation(self) -> str:
        return f"group {self.rule.group}: required {self.rule.required_count}, got {self.approvals}"


def evaluate_rule(rule: Rule, resolved_reviews: Mapping[str, Disposition], group_members: Collection[str]) -> RuleVerdict:
    """Count group members whose current disposition is APPROVED.

    Members without a review contribute nothing. An empty group can only
    satisfy a rule that requires zero approvals.
    """
    approvals = sum(1 for member in set(group_members) if resolved_reviews.get(member) == Disposition.APPROVED)
    return RuleVerdict(rule=rule, approvals=approvals, passed=approvals >= rule.required_count)
