"""RepoRuleStore — shared rule document in an admin repository.

Why an admin repository:
- One document governs every repository in the organization.
- Repository permissions decide who may change the policy, and every change
  is a commit with an author and a message.

Reads go through the contents API at the configured ref; writes commit
straight to that ref.
"""

from __future__ import annotations

import logging

from teamgate_store.base import BaseRuleStore, RuleDocumentNotFound, RuleStoreError
from teamgate_store.models import RuleDocument

logger = logging.getLogger(__name__)


class RepoRuleStore(BaseRuleStore):
    """Reads and writes the rule document at ``path`` on ``ref`` of ``repo_name``."""

    def __init__(self, repo_name: str, path: str, token: str, ref: str = "main"):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for RepoRuleStore.")
        self._repo_name = repo_name
        self._path = path
        self._ref = ref
        self._gh = Github(token)

    @property
    def source(self) -> str:
        return f"{self._repo_name}@{self._ref}:{self._path}"

    def _get_repo(self):
        return self._gh.get_repo(self._repo_name)

    def _get_contents(self, repo):
        """Return the ContentFile for the document, or None if it does not exist."""
        from github import GithubException

        try:
            contents = repo.get_contents(self._path, ref=self._ref)
        except GithubException as e:
            if e.status == 404:
                return None
            raise RuleStoreError(f"Could not read {self.source}: {e}") from e
        if isinstance(contents, list):
            raise RuleStoreError(f"{self.source} is a directory, not a rule document")
        return contents

    def read(self) -> RuleDocument:
        contents = self._get_contents(self._get_repo())
        if contents is None:
            raise RuleDocumentNotFound(f"Rule document not found: {self.source}")
        return RuleDocument(
            content=contents.decoded_content.decode("utf-8"),
            source=self.source,
            revision=contents.sha,
        )

    def write(self, content: str, message: str) -> None:
        from github import GithubException

        repo = self._get_repo()
        current = self._get_contents(repo)
        try:
            if current is None:
                repo.create_file(self._path, message, content, branch=self._ref)
                logger.debug("Created %s", self.source)
            else:
                # The current blob SHA guards against overwriting a concurrent edit.
                repo.update_file(self._path, message, content, current.sha, branch=self._ref)
                logger.debug("Updated %s (was %s)", self.source, current.sha)
        except GithubException as e:
            raise RuleStoreError(f"Could not write {self.source}: {e}") from e
