"""FileRuleStore — rule document kept next to the code.

Suited to single-repository setups and to GitHub Actions, where the checked
out workspace already contains the document.
"""

from __future__ import annotations

import logging
from pathlib import Path

from teamgate_store.base import BaseRuleStore, RuleDocumentNotFound
from teamgate_store.models import RuleDocument

logger = logging.getLogger(__name__)


class FileRuleStore(BaseRuleStore):
    def __init__(self, path: str = "approval-rules.yml"):
        self._path = Path(path)

    def read(self) -> RuleDocument:
        if not self._path.is_file():
            raise RuleDocumentNotFound(f"Rule document not found: {self._path}")
        return RuleDocument(content=self._path.read_text(encoding="utf-8"), source=str(self._path))

    def write(self, content: str, message: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s (%s)", self._path, message)
