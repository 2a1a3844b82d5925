"""Persistent registry of expanded projects."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Dict, List, Optional

from ..models import RegisteredProject

_STORE_VERSION = 1


class WorkspaceStore:
    """Stores registered projects keyed by project name.

    With ``path=None`` the store lives in memory only.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._entries: Dict[str, RegisteredProject] = {}
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def get(self, name: str) -> Optional[RegisteredProject]:
        return self._entries.get(name)

    def all(self) -> List[RegisteredProject]:
        return [self._entries[name] for name in sorted(self._entries)]

    def put(self, name: str, project_file: Path) -> RegisteredProject:
        entry = RegisteredProject(
            name=name,
            project_file=str(project_file),
            registered_at=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        )
        self._entries[name] = entry
        self._dirty = True
        return entry

    def remove(self, name: str) -> bool:
        if self._entries.pop(name, None) is None:
            return False
        self._dirty = True
        return True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {
            "version": _STORE_VERSION,
            "projects": {name: asdict(entry) for name, entry in self._entries.items()},
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
        )
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return
        projects = data.get("projects")
        if not isinstance(projects, dict):
            return
        valid: Dict[str, RegisteredProject] = {}
        for name, raw in projects.items():
            entry = _project_from_dict(name, raw)
            if entry is not None:
                valid[name] = entry
        self._entries = valid
        self._dirty = False


def _project_from_dict(name: object, payload: object) -> Optional[RegisteredProject]:
    if not isinstance(name, str) or not isinstance(payload, dict):
        return None
    project_file = payload.get("project_file")
    registered_at = payload.get("registered_at", "")
    if not isinstance(project_file, str):
        return None
    if not isinstance(registered_at, str):
        registered_at = ""
    return RegisteredProject(name=name, project_file=project_file, registered_at=registered_at)


__all__ = ["WorkspaceStore"]
