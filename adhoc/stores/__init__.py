"""Persistent stores used by adhoc."""

from __future__ import annotations

from .workspace_store import WorkspaceStore

__all__ = ["WorkspaceStore"]
