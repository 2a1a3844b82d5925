"""Configuration loading for adhoc (.adhoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".adhoc.yml"

DEFAULT_PROJECT_XML = '<Project Sdk="Microsoft.NET.Sdk" />'

ATTRIBUTE_REWRITE_MODES = ("structured", "text")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProjectConfig:
    """Layout of the generated project directory."""

    extension: str = ".csproj"
    default_xml: str = DEFAULT_PROJECT_XML
    readme: str = "# AdHoc Project\n"
    global_usings: str = "GlobalUsings"


@dataclass
class GitConfig:
    """Fixed identity and messages used for generated commits."""

    author_name: str = "AdHocCSharp"
    author_email: str = "adhoc@example.com"
    commit_message: str = "Created AdHoc Project"
    init_message: str = "Initializing Repository"


@dataclass
class DescriptorConfig:
    """Descriptor normalization settings."""

    attribute_rewrite: str = "structured"


@dataclass
class SourcesConfig:
    """Which files a directory scan picks up."""

    suffixes: List[str] = field(default_factory=lambda: [".cs"])


@dataclass
class AdhocConfig:
    """Represents the settings defined in .adhoc.yml."""

    root: Path
    output: Optional[Path] = None
    project: ProjectConfig = field(default_factory=ProjectConfig)
    git: GitConfig = field(default_factory=GitConfig)
    descriptor: DescriptorConfig = field(default_factory=DescriptorConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    workspace_file: Optional[Path] = None


def load_config(config_path: Path) -> AdhocConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AdhocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_str = _as_str(data.get("output"))
    output = root / output_str if output_str else None

    workspace_str = _as_str(data.get("workspace"))
    workspace_file = root / workspace_str if workspace_str else None

    project = ProjectConfig()
    project_data = _as_dict(data.get("project"))
    if project_data:
        extension = _as_str(project_data.get("extension"))
        if extension:
            project.extension = extension if extension.startswith(".") else f".{extension}"
        project.default_xml = _as_str(project_data.get("default_xml")) or project.default_xml
        project.readme = _as_str(project_data.get("readme")) or project.readme
        project.global_usings = _as_str(project_data.get("global_usings")) or project.global_usings

    git = GitConfig()
    git_data = _as_dict(data.get("git"))
    if git_data:
        git.author_name = _as_str(git_data.get("author_name")) or git.author_name
        git.author_email = _as_str(git_data.get("author_email")) or git.author_email
        git.commit_message = _as_str(git_data.get("commit_message")) or git.commit_message
        git.init_message = _as_str(git_data.get("init_message")) or git.init_message

    descriptor = DescriptorConfig()
    descriptor_data = _as_dict(data.get("descriptor"))
    if descriptor_data:
        mode = _as_str(descriptor_data.get("attribute_rewrite"))
        if mode:
            mode = mode.strip().lower()
            if mode not in ATTRIBUTE_REWRITE_MODES:
                allowed = ", ".join(ATTRIBUTE_REWRITE_MODES)
                raise ConfigError(f"descriptor.attribute_rewrite must be one of: {allowed}")
            descriptor.attribute_rewrite = mode

    sources = SourcesConfig()
    sources_data = _as_dict(data.get("sources"))
    if sources_data:
        suffixes = _as_str_list(sources_data.get("suffixes"))
        if suffixes:
            sources.suffixes = [s if s.startswith(".") else f".{s}" for s in suffixes]

    return AdhocConfig(
        root=root,
        output=output,
        project=project,
        git=git,
        descriptor=descriptor,
        sources=sources,
        workspace_file=workspace_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AdhocConfig",
    "ConfigError",
    "DEFAULT_PROJECT_XML",
    "DescriptorConfig",
    "GitConfig",
    "ProjectConfig",
    "SourcesConfig",
    "load_config",
]
