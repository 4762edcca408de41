from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RuleDocument:
    """Raw rule document text plus where it came from."""

    content: str
    source: str  # human-readable location, e.g. "approval-rules.yml" or "org/admin@main:rules.yml"
    revision: str | None = None  # blob SHA for repository-backed documents
