"""Git access for generated project repositories."""

from __future__ import annotations

from .committer import commit_changes
from .repository import GitError, GitRepository, GitRunner, default_runner

__all__ = ["GitError", "GitRepository", "GitRunner", "commit_changes", "default_runner"]
