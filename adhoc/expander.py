"""Pipeline that expands descriptor comments into version-controlled projects.

Runs are synchronous and single-threaded. Two runs that target the same
project directory at the same time race on directory creation and reset;
callers must serialize them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable

from .config import AdhocConfig
from .descriptor.extractor import descriptor_text, extract
from .descriptor.normalizer import DescriptorNormalizer
from .git.committer import commit_changes
from .git.repository import GitError, GitRunner
from .logging import get_logger
from .models import NOTHING_TO_DO, ExpansionResult, Identity
from .scaffold.scaffolder import ProjectScaffolder
from .scaffold.splitter import split_global_usings
from .scaffold.writer import write_readme, write_source
from .source_scanner import iter_source_files
from .syntax.model import SourceUnit, SyntaxNode
from .syntax.parser import CSharpParser, SourceParser
from .workspace import ProjectWorkspace


class Expander:
    """Coordinates descriptor extraction, scaffolding and commits for source files."""

    def __init__(
        self,
        config: AdhocConfig | None = None,
        parser: SourceParser | None = None,
        workspace: ProjectWorkspace | None = None,
        normalizer: DescriptorNormalizer | None = None,
        runner: GitRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or AdhocConfig(root=Path.cwd())
        self.logger = logger or get_logger("expander")
        self.parser = parser or CSharpParser()
        self.workspace = workspace or ProjectWorkspace()
        self.normalizer = normalizer or DescriptorNormalizer(
            default_xml=self.config.project.default_xml,
            attribute_rewrite=self.config.descriptor.attribute_rewrite,
        )
        self.identity = Identity(
            name=self.config.git.author_name,
            email=self.config.git.author_email,
        )
        self.scaffolder = ProjectScaffolder(
            self.identity,
            project_extension=self.config.project.extension,
            init_message=self.config.git.init_message,
            runner=runner,
        )

    def process_paths(
        self, paths: Iterable[Path | str], output_root: Path | None = None
    ) -> Dict[Path, ExpansionResult]:
        """Expand files one after another; directories are scanned for sources."""
        results: Dict[Path, ExpansionResult] = {}
        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                files = list(iter_source_files(path, self.config.sources.suffixes))
            else:
                files = [path]
            for file in files:
                results[file] = self.process_file(file, output_root)
        return results

    def process_file(self, path: Path | str, output_root: Path | None = None) -> ExpansionResult:
        """Expand the first descriptor comment in ``path``.

        The project lands in ``output_root`` (default: the configured output,
        else the file's own directory). Never raises for filesystem or git
        failures; those yield ``handled=False``.
        """
        source_path = Path(path).expanduser().resolve()
        self.logger.info("Processing %s", source_path)

        try:
            # Decode the raw bytes so CRLF line endings reach the parser untouched.
            text = source_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Could not read %s: %s", source_path, exc)
            return NOTHING_TO_DO

        if not text:
            self.logger.info("%s is empty", source_path)
            return NOTHING_TO_DO

        root = self._resolve_output_root(source_path, output_root)
        unit = self.parser.parse(text)

        def handler(node: SyntaxNode, current: SourceUnit) -> ExpansionResult:
            return self.process_token(node, current, source_path, root)

        result = extract(unit, handler)
        if result.handled:
            self.logger.info("Processed %s", source_path)
        else:
            self.logger.info("Nothing to do in %s", source_path)
        return result

    def process_token(
        self,
        node: SyntaxNode,
        unit: SourceUnit,
        source_path: Path,
        output_root: Path,
    ) -> ExpansionResult:
        """Expand one descriptor comment into ``output_root/<stem>``."""
        try:
            return self._expand(node, unit, source_path, output_root)
        except (OSError, GitError) as exc:
            self.logger.error("Expansion of %s failed: %s", source_path, exc, exc_info=True)
            return NOTHING_TO_DO

    # ------------------------------------------------------------------
    # Internals

    def _expand(
        self,
        node: SyntaxNode,
        unit: SourceUnit,
        source_path: Path,
        output_root: Path,
    ) -> ExpansionResult:
        unit = unit.without([node])

        project_xml = self.normalizer.normalize(descriptor_text(node))
        if not project_xml:
            self.logger.info("%s has a documentation comment but no descriptor", source_path.name)
            return ExpansionResult(handled=True)

        base_name = source_path.stem
        project_dir = output_root / base_name
        self.logger.info("Expanding project directory: %s", project_dir)

        if self.workspace.find(base_name) is not None:
            self.workspace.remove(base_name)

        repo = self.scaffolder.prepare(project_dir)

        project_file = self.scaffolder.write_project_file(repo, project_dir, base_name, project_xml)
        if project_file is None:
            return NOTHING_TO_DO

        unit = split_global_usings(
            unit,
            project_dir,
            repo,
            suffix=source_path.suffix,
            file_stem=self.config.project.global_usings,
        )

        source_file = write_source(unit, project_dir, source_path.name, repo)
        if source_file is None:
            return NOTHING_TO_DO
        self.logger.info("Wrote source to %s", source_file)

        if self.workspace.register(project_file, self.config.project.default_xml):
            return ExpansionResult(handled=True)

        write_readme(project_dir, repo, self.config.project.readme)

        commit = commit_changes(repo, self.identity, self.config.git.commit_message)
        return ExpansionResult(handled=True, commit=commit)

    def _resolve_output_root(self, source_path: Path, output_root: Path | None) -> Path:
        if output_root is not None:
            return Path(output_root).expanduser().resolve()
        if self.config.output is not None:
            return self.config.output
        return source_path.parent


__all__ = ["Expander"]
