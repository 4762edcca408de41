"""Policy aggregation: every matching rule → one overall verdict.

Pure and synchronous. Reviews and team membership arrive through provider
callables so the caller owns fetching, retrying and caching; the engine only
decides.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Collection, Iterable, Optional, Sequence

from teamgate_core.errors import UnknownGroup
from teamgate_core.evaluator import RuleVerdict, evaluate_rule
from teamgate_core.matching import select_rules
from teamgate_core.reviews import ReviewEvent, resolve_reviews
from teamgate_core.rules import Rule

ReviewProvider = Callable[["ChangeRef"], Iterable[ReviewEvent]]
# Returns None when the group does not exist; an empty collection means no members.
MembershipProvider = Callable[[str], Optional[Collection[str]]]


@dataclass(frozen=True)
class ChangeRef:
    repo_name: str  # full name, "owner/name"
    branch_name: str  # target (base) branch
    head_revision: str


@dataclass(frozen=True)
class PolicyResult:
    overall_passed: bool
    verdicts: tuple[RuleVerdict, ...] = ()
    no_rules_matched: bool = False

    @property
    def failures(self) -> list[str]:
        """One explanation per failing rule, in rule document order."""
        return [v.explanation for v in self.verdicts if not v.passed]


def aggregate(
    change: ChangeRef,
    rules: Sequence[Rule],
    review_provider: ReviewProvider,
    membership_provider: MembershipProvider,
) -> PolicyResult:
    """Evaluate every rule that applies to ``change`` and fold the verdicts.

    No matching rule is an automatic pass (default-allow). Reviews are fetched
    once and shared by all rules; membership is fetched once per distinct group.
    Raises UnknownGroup when the membership provider has no answer for a group.
    """
    selected = select_rules(rules, change)
    if not selected:
        return PolicyResult(overall_passed=True, verdicts=(), no_rules_matched=True)

    resolved = resolve_reviews(review_provider(change))

    memberships: dict[str, frozenset[str]] = {}
    verdicts: list[RuleVerdict] = []
    for index, rule in selected:
        if rule.group not in memberships:
            members = membership_provider(rule.group)
            if members is None:
                raise UnknownGroup(rule.group, index)
            memberships[rule.group] = frozenset(members)
        verdicts.append(evaluate_rule(rule, resolved, memberships[rule.group]))

    return PolicyResult(
        overall_passed=all(v.passed for v in verdicts),
        verdicts=tuple(verdicts),
        no_rules_matched=False,
    )
