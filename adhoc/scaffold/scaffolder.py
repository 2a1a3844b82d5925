"""Project directory and repository lifecycle."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..git.repository import GitRepository, GitRunner
from ..logging import get_logger
from ..models import Identity


class ProjectScaffolder:
    """Prepares a clean, version-controlled project directory."""

    def __init__(
        self,
        identity: Identity,
        *,
        project_extension: str = ".csproj",
        init_message: str = "Initializing Repository",
        runner: GitRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.identity = identity
        self.project_extension = project_extension
        self.init_message = init_message
        self._runner = runner
        self.logger = logger or get_logger("scaffolder")

    def prepare(self, project_dir: Path) -> GitRepository:
        """Return a repository for ``project_dir`` whose working tree matches HEAD."""
        if not project_dir.exists():
            project_dir.mkdir(parents=True)
            self.logger.info("Created project directory %s", project_dir)
            return self._init(project_dir)

        if not GitRepository.exists_at(project_dir):
            self.logger.info("Initializing repository in existing directory %s", project_dir)
            return self._init(project_dir)

        repo = GitRepository(project_dir, runner=self._runner)
        if repo.is_dirty():
            self.logger.info("Resetting dirty working tree in %s", project_dir)
            repo.reset_hard()
        return repo

    def write_project_file(
        self,
        repo: GitRepository,
        project_dir: Path,
        base_name: str,
        project_xml: str,
    ) -> Optional[Path]:
        """Write and stage ``<base_name><ext>``; None when the file did not land."""
        project_file = project_dir / f"{base_name}{self.project_extension}"
        with project_file.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(project_xml)
        if not project_file.exists():
            self.logger.error("Project file %s was not created", project_file)
            return None
        repo.stage(project_file)
        self.logger.info("Created project file: %s", project_file)
        return project_file

    def _init(self, project_dir: Path) -> GitRepository:
        return GitRepository.init(
            project_dir,
            self.identity,
            message=self.init_message,
            runner=self._runner,
        )


__all__ = ["ProjectScaffolder"]
