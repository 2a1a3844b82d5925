"""Tests for adhoc.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from adhoc.config import AdhocConfig, ConfigError, DEFAULT_PROJECT_XML, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, AdhocConfig)
    assert config.root == tmp_path.resolve()
    assert config.output is None
    assert config.workspace_file is None
    assert config.project.extension == ".csproj"
    assert config.project.default_xml == DEFAULT_PROJECT_XML
    assert config.project.readme == "# AdHoc Project\n"
    assert config.git.author_name == "AdHocCSharp"
    assert config.git.author_email == "adhoc@example.com"
    assert config.git.commit_message == "Created AdHoc Project"
    assert config.git.init_message == "Initializing Repository"
    assert config.descriptor.attribute_rewrite == "structured"
    assert config.sources.suffixes == [".cs"]


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".adhoc.yml"
    config_file.write_text(
        """
output: "generated"
workspace: ".adhoc/workspace.json"
project:
  extension: "proj"
  default_xml: "<Project Sdk=\\"Custom.Sdk\\" />"
  readme: "# Scratch\\n"
  global_usings: "Usings"
git:
  author_name: "Builder"
  author_email: "builder@example.com"
  commit_message: "Scaffold"
descriptor:
  attribute_rewrite: text
sources:
  suffixes: [cs, ".csx"]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    root = tmp_path.resolve()
    assert config.output == root / "generated"
    assert config.workspace_file == root / ".adhoc" / "workspace.json"
    assert config.project.extension == ".proj"
    assert config.project.default_xml == '<Project Sdk="Custom.Sdk" />'
    assert config.project.readme == "# Scratch\n"
    assert config.project.global_usings == "Usings"
    assert config.git.author_name == "Builder"
    assert config.git.author_email == "builder@example.com"
    assert config.git.commit_message == "Scaffold"
    assert config.git.init_message == "Initializing Repository"
    assert config.descriptor.attribute_rewrite == "text"
    assert config.sources.suffixes == [".cs", ".csx"]


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".adhoc.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.project.extension == ".csproj"


def test_load_config_rejects_unknown_rewrite_mode(tmp_path: Path) -> None:
    (tmp_path / ".adhoc.yml").write_text("descriptor:\n  attribute_rewrite: regex\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="attribute_rewrite"):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".adhoc.yml").write_text("output: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_requires_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".adhoc.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)
