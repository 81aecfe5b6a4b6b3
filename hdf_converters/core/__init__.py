"""Core infrastructure modules.

Provides foundational components: constants, configuration and logging.
"""

from __future__ import annotations

from hdf_converters.core.constants import (
    VERSION,
    APP_NAME,
    PLATFORM_NAME,
    ResultStatus,
    Severity,
    IMPACT_MAPPING,
    DEFAULT_STATIC_CODE_ANALYSIS_NIST_TAGS,
)
from hdf_converters.core.config import Cfg
from hdf_converters.core.logging import Log, LOG

__all__ = [
    "VERSION",
    "APP_NAME",
    "PLATFORM_NAME",
    "ResultStatus",
    "Severity",
    "IMPACT_MAPPING",
    "DEFAULT_STATIC_CODE_ANALYSIS_NIST_TAGS",
    "Cfg",
    "Log",
    "LOG",
]
