"""Abstract rule store interface.

A rule store holds the raw rule document. Stores deal only in text — parsing
and validation belong to teamgate_core, so the store layer has no knowledge of
rules and the core has no knowledge of where documents live. The CLI bridges
the two.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from teamgate_store.models import RuleDocument


class RuleStoreError(Exception):
    """The rule document could not be read or written."""


class RuleDocumentNotFound(RuleStoreError):
    """The configured location holds no rule document."""


class BaseRuleStore(ABC):
    """Pluggable location of the approval rule document."""

    @abstractmethod
    def read(self) -> RuleDocument:
        """Return the current rule document.

        Raises RuleDocumentNotFound if it does not exist — a missing document
        is an error, never an empty policy.
        """

    @abstractmethod
    def write(self, content: str, message: str) -> None:
        """Replace the rule document with ``content``.

        ``message`` describes the change; stores with history record it.
        """

    def close(self) -> None:
        """Release any resources held by the store.

        Default is a no-op so callers can always call close() safely.
        """
