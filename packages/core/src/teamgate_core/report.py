"""Render a PolicyResult as a pass/fail check: conclusion, title and summary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from teamgate_core.policy import ChangeRef, PolicyResult


@dataclass(frozen=True)
class CheckReport:
    conclusion: str  # "success" | "failure"
    title: str
    summary: str

    @property
    def passed(self) -> bool:
        return self.conclusion == "success"


def build_report(result: PolicyResult, change: ChangeRef | None = None) -> CheckReport:
    if result.no_rules_matched:
        target = f" {change.repo_name}@{change.branch_name}" if change else " this change"
        return CheckReport(
            conclusion="success",
            title="No approval policy applies",
            summary=f"No approval rule matches{target}. The change is approved by default.",
        )

    if result.overall_passed:
        return CheckReport(
            conclusion="success",
            title="All approval rules satisfied",
            summary="\n".join(v.explanation for v in result.verdicts),
        )

    failures = result.failures
    return CheckReport(
        conclusion="failure",
        title=f"{len(failures)} of {len(result.verdicts)} approval rule(s) not satisfied",
        summary="\n".join(failures),
    )


def build_error_report(error: Exception) -> CheckReport:
    """A policy that cannot be evaluated blocks the change rather than passing it."""
    return CheckReport(
        conclusion="failure",
        title="Approval policy could not be evaluated",
        summary=str(error),
    )
