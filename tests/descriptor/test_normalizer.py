"""Tests for adhoc.descriptor.normalizer."""

from __future__ import annotations

import datetime
import xml.etree.ElementTree as ET

import pytest

from adhoc.config import DEFAULT_PROJECT_XML
from adhoc.descriptor.normalizer import (
    EMPTY_DESCRIPTOR,
    DescriptorNormalizer,
    canonical_xml,
    json_to_xml,
    rewrite_attribute_keys,
    rewrite_attribute_keys_text,
    to_json_compatible,
)


def test_project_xml_is_returned_in_canonical_form() -> None:
    text = '<Project Sdk="X">\n<PropertyGroup><OutputType>Exe</OutputType></PropertyGroup>\n</Project>'

    result = DescriptorNormalizer().normalize(text)

    assert result == canonical_xml(ET.fromstring(text))
    assert result == (
        '<Project Sdk="X">\n'
        "  <PropertyGroup>\n"
        "    <OutputType>Exe</OutputType>\n"
        "  </PropertyGroup>\n"
        "</Project>"
    )


def test_self_closing_project_xml() -> None:
    assert DescriptorNormalizer().normalize('<Project Sdk="X"/>') == '<Project Sdk="X" />'


def test_simple_yaml_becomes_project_child() -> None:
    result = DescriptorNormalizer().normalize("key: value")

    root = ET.fromstring(result)
    assert root.tag == "Project"
    assert root.findtext("key") == "value"


def test_underscore_keys_become_attributes() -> None:
    assert DescriptorNormalizer().normalize("_Sdk: X") == '<Project Sdk="X" />'


def test_project_key_is_used_as_root() -> None:
    text = "\n".join(
        [
            "Project:",
            "  _Sdk: Microsoft.NET.Sdk",
            "  PropertyGroup:",
            "    OutputType: Exe",
            "    TargetFramework: net8.0",
        ]
    )

    result = DescriptorNormalizer().normalize(text)

    assert result == (
        '<Project Sdk="Microsoft.NET.Sdk">\n'
        "  <PropertyGroup>\n"
        "    <OutputType>Exe</OutputType>\n"
        "    <TargetFramework>net8.0</TargetFramework>\n"
        "  </PropertyGroup>\n"
        "</Project>"
    )


def test_sequences_become_repeated_elements() -> None:
    text = "\n".join(
        [
            "ItemGroup:",
            "  PackageReference:",
            "    - _Include: Serilog",
            '      _Version: "3.1.1"',
            "    - _Include: YamlDotNet",
            "  Deterministic: true",
        ]
    )

    root = ET.fromstring(DescriptorNormalizer().normalize(text))
    references = root.findall("ItemGroup/PackageReference")

    assert [ref.get("Include") for ref in references] == ["Serilog", "YamlDotNet"]
    assert references[0].get("Version") == "3.1.1"
    assert root.findtext("ItemGroup/Deterministic") == "true"


@pytest.mark.parametrize("text", ["", "   ", "~", '""'])
def test_empty_descriptors_yield_empty_sentinel(text: str) -> None:
    assert DescriptorNormalizer().normalize(text) == EMPTY_DESCRIPTOR


@pytest.mark.parametrize(
    "text",
    [
        "a: [unclosed",
        "<Project",
        "- a\n- b",
        "just a sentence",
        "my key: 1",
    ],
)
def test_unusable_descriptors_fall_back_to_default(text: str) -> None:
    assert DescriptorNormalizer().normalize(text) == DEFAULT_PROJECT_XML


def test_configured_default_is_used() -> None:
    normalizer = DescriptorNormalizer(default_xml='<Project Sdk="Custom" />')

    assert normalizer.normalize("a: [unclosed") == '<Project Sdk="Custom" />'


def test_non_project_xml_is_treated_as_yaml_text() -> None:
    # A plain XML doc comment is a YAML scalar, which has no project shape.
    assert DescriptorNormalizer().normalize("<summary>Hello</summary>") == DEFAULT_PROJECT_XML


def test_text_rewrite_also_touches_values() -> None:
    structured = DescriptorNormalizer().normalize("Name: _internal")
    textual = DescriptorNormalizer(attribute_rewrite="text").normalize("Name: _internal")

    assert ET.fromstring(structured).findtext("Name") == "_internal"
    assert ET.fromstring(textual).findtext("Name") == "@internal"


def test_rewrite_attribute_keys_walks_nested_values() -> None:
    data = {"_a": 1, "b": [{"_c": "_d"}], "e": {"_f": None}}

    assert rewrite_attribute_keys(data) == {"@a": 1, "b": [{"@c": "_d"}], "e": {"@f": None}}


def test_rewrite_attribute_keys_text_replaces_every_quoted_underscore() -> None:
    assert rewrite_attribute_keys_text('{"_a": {"_b": "x"}}') == '{"@a": {"@b": "x"}}'


def test_json_to_xml_supports_text_nodes_and_nulls() -> None:
    xml = json_to_xml({"Target": {"@Name": "Build", "#text": "go"}, "Empty": None})

    assert xml is not None
    root = ET.fromstring(xml)
    assert root.find("Target").get("Name") == "Build"
    assert root.findtext("Target") == "go"
    assert root.find("Empty") is not None


def test_json_to_xml_rejects_non_mappings() -> None:
    assert json_to_xml(["a"]) is None
    assert json_to_xml("a") is None


@pytest.mark.parametrize("text", ["2024-01-01: x", "&a [*a]", "&a {self: *a}", "1: one"])
def test_unserializable_yaml_falls_back_to_default(text: str) -> None:
    assert DescriptorNormalizer().normalize(text) == DEFAULT_PROJECT_XML


def test_unserializable_yaml_falls_back_in_text_mode() -> None:
    normalizer = DescriptorNormalizer(attribute_rewrite="text")

    assert normalizer.normalize("2024-01-01: x") == DEFAULT_PROJECT_XML
    assert normalizer.normalize("&a [*a]") == DEFAULT_PROJECT_XML


def test_yaml_dates_become_element_text() -> None:
    root = ET.fromstring(DescriptorNormalizer().normalize("Released: 2024-01-01"))

    assert root.findtext("Released") == "2024-01-01"


def test_to_json_compatible_coerces_keys_and_scalars() -> None:
    value = {datetime.date(2024, 1, 1): [datetime.date(2024, 2, 1)], True: None, 3: 1.5}

    assert to_json_compatible(value) == {"2024-01-01": ["2024-02-01"], "true": None, "3": 1.5}


def test_to_json_compatible_allows_shared_non_cyclic_aliases() -> None:
    shared = {"a": 1}

    assert to_json_compatible({"x": shared, "y": shared}) == {"x": {"a": 1}, "y": {"a": 1}}


def test_to_json_compatible_rejects_cycles() -> None:
    cyclic: list = []
    cyclic.append(cyclic)

    with pytest.raises(ValueError, match="Circular"):
        to_json_compatible(cyclic)


def test_namespaced_project_keeps_default_namespace() -> None:
    text = (
        '<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">'
        "<PropertyGroup><OutputType>Exe</OutputType></PropertyGroup>"
        "</Project>"
    )

    result = DescriptorNormalizer().normalize(text)

    assert result == (
        '<Project xmlns="http://schemas.microsoft.com/developer/msbuild/2003" ToolsVersion="15.0">\n'
        "  <PropertyGroup>\n"
        "    <OutputType>Exe</OutputType>\n"
        "  </PropertyGroup>\n"
        "</Project>"
    )
    assert "ns0" not in result


def test_xml_comments_in_project_are_kept() -> None:
    text = '<Project Sdk="X"><!-- pinned for CI --><PropertyGroup /></Project>'

    result = DescriptorNormalizer().normalize(text)

    assert result == (
        '<Project Sdk="X">\n'
        "  <!-- pinned for CI -->\n"
        "  <PropertyGroup />\n"
        "</Project>"
    )
