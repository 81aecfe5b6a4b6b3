"""
XML processing modules.

This package contains the checklist schema definitions and the defusedxml
based adapter turning XML text into intermediate objects.
"""

from __future__ import annotations

from hdf_converters.xml.schema import Sch
from hdf_converters.xml.parser import CKL_BINDING, XmlBinding, parse_xml_to_object

__all__ = [
    "Sch",
    "XmlBinding",
    "CKL_BINDING",
    "parse_xml_to_object",
]
