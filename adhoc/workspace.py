"""Workspace registry for expanded projects."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_PROJECT_XML
from .descriptor.normalizer import PROJECT_ELEMENT, local_name
from .logging import get_logger
from .models import RegisteredProject
from .stores import WorkspaceStore


class ProjectWorkspace:
    """Tracks which generated projects are open, one per project name."""

    def __init__(
        self,
        store: WorkspaceStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store or WorkspaceStore()
        self.logger = logger or get_logger("workspace")

    @property
    def projects(self) -> List[RegisteredProject]:
        return self.store.all()

    def find(self, name: str) -> Optional[RegisteredProject]:
        return self.store.get(name)

    def remove(self, name: str) -> bool:
        removed = self.store.remove(name)
        if removed:
            self.logger.info("Removing %s from workspace", name)
            self.store.persist()
        return removed

    def register(self, project_file: Path, default_xml: str = DEFAULT_PROJECT_XML) -> bool:
        """Open ``project_file`` and record it.

        A missing file is created from ``default_xml`` first. Returns True when
        the project could not be opened, meaning the caller must not commit.
        """
        if not project_file.exists():
            with project_file.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(default_xml)
                handle.write("\n")

        try:
            root = ET.parse(project_file).getroot()
        except (OSError, ET.ParseError) as exc:
            self.logger.warning("Could not open project %s: %s", project_file, exc)
            return True
        if local_name(root.tag) != PROJECT_ELEMENT:
            self.logger.warning("%s is not a project file", project_file)
            return True

        name = project_file.stem
        self.store.put(name, project_file)
        self.store.persist()
        self.logger.info("Added project to workspace: %s", project_file)
        self.logger.debug("Workspace now holds %d project(s)", len(self.store.all()))
        return False


__all__ = ["ProjectWorkspace"]
