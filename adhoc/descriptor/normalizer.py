"""Turn raw descriptor text into canonical project XML.

Authors may write the project file directly as XML, or describe it in
YAML. YAML keys starting with ``_`` become XML attributes::

    Project:
      _Sdk: Microsoft.NET.Sdk
      PropertyGroup:
        OutputType: Exe

becomes ``<Project Sdk="Microsoft.NET.Sdk"><PropertyGroup>...``.
"""

from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Optional

import yaml

from ..config import DEFAULT_PROJECT_XML
from ..logging import get_logger

PROJECT_ELEMENT = "Project"

EMPTY_DESCRIPTOR = ""

_ATTRIBUTE_PREFIX = "@"
_TEXT_KEY = "#text"


class DescriptorNormalizer:
    """Converts XML or YAML descriptors into canonical project XML."""

    def __init__(
        self,
        default_xml: str = DEFAULT_PROJECT_XML,
        attribute_rewrite: str = "structured",
        logger: logging.Logger | None = None,
    ) -> None:
        self.default_xml = default_xml
        self.attribute_rewrite = attribute_rewrite
        self.logger = logger or get_logger("normalizer")

    def normalize(self, text: str) -> str:
        """Return canonical project XML, the default XML, or ``EMPTY_DESCRIPTOR``."""
        project = self._parse_project_xml(text)
        if project is not None:
            self.logger.debug("Descriptor is project XML")
            return canonical_xml(project)
        return self.yaml_to_xml(text)

    def yaml_to_xml(self, text: str) -> str:
        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            self.logger.debug("Descriptor is neither XML nor YAML: %s", exc)
            return self.default_xml

        if value is None or value == "":
            self.logger.debug("Descriptor is empty")
            return EMPTY_DESCRIPTOR

        try:
            plain = to_json_compatible(value)
            if self.attribute_rewrite == "text":
                data = json.loads(rewrite_attribute_keys_text(json.dumps(plain)))
            else:
                data = rewrite_attribute_keys(plain)
            xml = json_to_xml(data)
        except (TypeError, ValueError, RecursionError) as exc:
            self.logger.debug("Descriptor could not be serialized: %s", exc)
            return self.default_xml

        if xml is None:
            self.logger.debug("Descriptor could not be converted to XML; using default")
            return self.default_xml
        return xml

    @staticmethod
    def _parse_project_xml(text: str) -> Optional[ET.Element]:
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            root = ET.fromstring(text, parser=parser)
        except ET.ParseError:
            return None
        if local_name(root.tag) != PROJECT_ELEMENT:
            return None
        return root


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def xml_namespace(element: ET.Element) -> Optional[str]:
    match = re.match(r"\{(.+)}", element.tag)
    return match.group(1) if match else None


def canonical_xml(element: ET.Element) -> str:
    """Render ``element`` with two-space indentation and no declaration.

    A namespaced root keeps its namespace as the default one instead of an
    ``ns0:`` prefix.
    """
    ET.indent(element, space="  ")
    namespace = xml_namespace(element)
    if namespace:
        _adopt_default_namespace(element, namespace)
    return ET.tostring(element, encoding="unicode")


def _adopt_default_namespace(root: ET.Element, namespace: str) -> None:
    qualifier = f"{{{namespace}}}"
    for node in root.iter():
        if isinstance(node.tag, str) and node.tag.startswith(qualifier):
            node.tag = node.tag[len(qualifier) :]
    attrib = {"xmlns": namespace, **root.attrib}
    root.attrib.clear()
    root.attrib.update(attrib)


def to_json_compatible(value: Any, _active: Optional[set[int]] = None) -> Any:
    """Return ``value`` with string keys and JSON scalars only.

    Dates and other YAML-only scalars become strings. Raises ValueError on
    alias cycles.
    """
    active = set() if _active is None else _active
    if isinstance(value, (dict, list)):
        if id(value) in active:
            raise ValueError("Circular reference in descriptor")
        active.add(id(value))
        try:
            if isinstance(value, dict):
                return {_json_key(key): to_json_compatible(item, active) for key, item in value.items()}
            return [to_json_compatible(item, active) for item in value]
        finally:
            active.discard(id(value))
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def _json_key(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def rewrite_attribute_keys(value: Any) -> Any:
    """Rename mapping keys starting with ``_`` to start with ``@``."""
    if isinstance(value, dict):
        return {
            (_ATTRIBUTE_PREFIX + key[1:] if key.startswith("_") else key): rewrite_attribute_keys(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [rewrite_attribute_keys(item) for item in value]
    return value


def rewrite_attribute_keys_text(json_text: str) -> str:
    """Substring variant of :func:`rewrite_attribute_keys`.

    Caveat: it also rewrites string values that start with ``_``, e.g.
    ``{"Name": "_internal"}`` becomes ``{"Name": "@internal"}``.
    """
    return json_text.replace('"_', '"' + _ATTRIBUTE_PREFIX)


def json_to_xml(data: Any) -> Optional[str]:
    """Convert a JSON-compatible mapping into project XML, or None."""
    if not isinstance(data, dict):
        return None

    if len(data) == 1 and PROJECT_ELEMENT in data:
        root = ET.Element(PROJECT_ELEMENT)
        _fill(root, data[PROJECT_ELEMENT])
    else:
        root = ET.Element(PROJECT_ELEMENT)
        _fill(root, data)

    try:
        # Round trip through the parser to reject names XML does not allow.
        reparsed = ET.fromstring(ET.tostring(root, encoding="unicode"))
    except ET.ParseError:
        return None
    return canonical_xml(reparsed)


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _append(element, str(key), item)
    elif isinstance(value, list):
        for item in value:
            _fill(element, item)
    elif value is not None:
        element.text = _scalar(value)


def _append(parent: ET.Element, key: str, value: Any) -> None:
    if key.startswith(_ATTRIBUTE_PREFIX):
        parent.set(key[1:], _scalar(value))
        return
    if key == _TEXT_KEY:
        parent.text = _scalar(value)
        return
    if isinstance(value, list):
        for item in value:
            _append(parent, key, item)
        return
    child = ET.SubElement(parent, key)
    _fill(child, value)


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


__all__ = [
    "DescriptorNormalizer",
    "EMPTY_DESCRIPTOR",
    "PROJECT_ELEMENT",
    "canonical_xml",
    "json_to_xml",
    "rewrite_attribute_keys",
    "rewrite_attribute_keys_text",
    "to_json_compatible",
    "xml_namespace",
]
