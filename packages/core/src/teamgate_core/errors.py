"""Errors raised by the policy engine.

Every error carries enough context (rule index, field, group) for an operator
to locate the problem in the rule document. The engine raises these and never
logs or swallows them; reporting is the caller's job.
"""

from __future__ import annotations


class PolicyError(Exception):
    """Base class for all engine errors."""


class MalformedRuleDocument(PolicyError):
    """The rule document does not parse into the expected rule-sequence shape."""


class InvalidRule(PolicyError):
    """A single rule entry is missing a field or has an invalid value."""

    def __init__(self, index: int, field: str | None, reason: str):
        self.index = index
        self.field = field
        self.reason = reason
        where = f"rule #{index + 1}"
        if field:
            where += f" field {field!r}"
        super().__init__(f"Invalid {where}: {reason}")


class UnknownGroup(PolicyError):
    """Membership lookup for a rule's group returned no result.

    Distinct from a group with zero members, which is a valid (failing) input.
    """

    def __init__(self, group: str, index: int):
        self.group = group
        self.index = index
        super().__init__(f"Unknown group {group!r} referenced by rule #{index + 1}")
