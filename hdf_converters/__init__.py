"""
hdf-converters: security tool output → Heimdall Data Format (HDF).

A declarative mapping engine (hdf_converters.mapping) interprets
per-tool mapping trees; the STIG checklist pipeline (hdf_converters.ckl)
and the TruffleHog converter are built on it.
"""

from __future__ import annotations

from hdf_converters.core.constants import VERSION, APP_NAME
from hdf_converters.exceptions import (
    HDFError,
    MalformedInputError,
    MalformedChecklistError,
    UnresolvedTransformError,
    FileError,
    UnmappedSeverityWarning,
)
from hdf_converters.ckl.mapper import ChecklistResults
from hdf_converters.converters.trufflehog import TrufflehogMapper

__version__ = VERSION

__all__ = [
    "VERSION",
    "APP_NAME",
    "__version__",
    "HDFError",
    "MalformedInputError",
    "MalformedChecklistError",
    "UnresolvedTransformError",
    "FileError",
    "UnmappedSeverityWarning",
    "ChecklistResults",
    "TrufflehogMapper",
]
