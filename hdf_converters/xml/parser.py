"""
XML → intermediate object adapter.

Parses XML text with defusedxml and converts the element tree into plain
dicts, lists and strings according to a binding table. The result is the
raw input the domain constructors consume.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Union
from xml.etree.ElementTree import Element, ParseError as XMLParseError

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import MalformedInputError
from hdf_converters.xml.schema import Sch

ATTRS_KEY = "@attrs"


@dataclass(frozen=True)
class XmlBinding:
    """
    Describes how one XML format maps onto the intermediate object.

    Attributes:
        name: Format name used in error messages
        root: Expected root element (local name)
        repeated: Element names always represented as lists
        strip_namespaces: Use local names as keys
    """

    name: str
    root: str
    repeated: FrozenSet[str] = field(default_factory=frozenset)
    strip_namespaces: bool = True

    def key(self, tag: str) -> str:
        return Sch.strip_ns(tag) if self.strip_namespaces else tag


CKL_BINDING = XmlBinding(name="checklist", root=Sch.ROOT, repeated=Sch.REPEATED)


def parse_xml_to_object(text: Union[str, bytes], binding: XmlBinding) -> Dict[str, Any]:
    """
    Parse XML text into an intermediate object.

    Args:
        text: XML document
        binding: Binding table of the format

    Returns:
        {root_tag: converted_root}

    Raises:
        MalformedInputError: If the text is not well-formed, uses forbidden
            constructs (entity expansion, external entities), declares an
            unknown encoding, nests too deeply or has an unexpected root element
    """
    try:
        root = ET.fromstring(text)
    except (XMLParseError, DefusedXmlException, LookupError, ValueError) as exc:
        LOG.e(f"{binding.name} XML parse error: {exc}")
        raise MalformedInputError(f"XML parse failed: {exc}", {"format": binding.name}) from exc

    tag = Sch.strip_ns(root.tag)
    if tag != binding.root:
        raise MalformedInputError(
            f"Unexpected root element: {tag}",
            {"format": binding.name, "expected": binding.root},
        )
    try:
        return {binding.key(root.tag): _convert(root, binding)}
    except RecursionError as exc:
        LOG.e(f"{binding.name} XML nesting too deep")
        raise MalformedInputError("XML nesting too deep", {"format": binding.name}) from exc


def _convert(elem: Element, binding: XmlBinding) -> Any:
    children = list(elem)
    if not children and not elem.attrib:
        return elem.text or ""

    out: Dict[str, Any] = {}
    if elem.attrib:
        out[ATTRS_KEY] = {binding.key(k): v for k, v in elem.attrib.items()}
        if not children:
            out["#text"] = elem.text or ""
            return out

    for child in children:
        key = binding.key(child.tag)
        value = _convert(child, binding)
        if key in binding.repeated:
            out.setdefault(key, []).append(value)
        elif key in out:
            # Element repeated although the binding declares it single
            existing = out[key]
            if not isinstance(existing, list):
                out[key] = [existing]
            out[key].append(value)
        else:
            out[key] = value
    return out
