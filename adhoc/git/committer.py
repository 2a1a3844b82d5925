"""Idempotent commits of generated project artifacts."""

from __future__ import annotations

import logging

from ..logging import get_logger
from ..models import CommitHandle, Identity
from .repository import GitRepository

DEFAULT_COMMIT_MESSAGE = "Created AdHoc Project"


def commit_changes(
    repo: GitRepository,
    identity: Identity,
    message: str = DEFAULT_COMMIT_MESSAGE,
    logger: logging.Logger | None = None,
) -> CommitHandle:
    """Commit staged changes, or return HEAD when nothing actually changed."""
    logger = logger or get_logger("committer")
    staged = repo.staged_changes()
    if not staged:
        head = repo.head()
        logger.info("No changes in %s; keeping %s", repo.path, head.short_sha)
        return head

    commit = repo.commit(message, identity)
    logger.info("Committed %d file(s) to %s as %s", len(staged), repo.path, commit.short_sha)
    return commit


__all__ = ["DEFAULT_COMMIT_MESSAGE", "commit_changes"]
