"""hdf-converters constants module.

This module defines application constants and enumerations shared by the
mapping engine and the tool-specific converters.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Tuple


# ──────────────────────────────────────────────────────────────────────────────
# VERSION INFORMATION
# ──────────────────────────────────────────────────────────────────────────────

VERSION = "2.6.0"
APP_NAME = "hdf-converters"
PLATFORM_NAME = "Heimdall Tools"


# ──────────────────────────────────────────────────────────────────────────────
# CHECKLIST PROCESSING
# ──────────────────────────────────────────────────────────────────────────────

FINDING_SEPARATOR = "--------------------------------\n"  # Joins exported results
EXPECTED_MARKER = "\nexpected"  # Starts the message part of a result segment
CCI_SEPARATOR = "; "
PARENT_PROFILE_NAME = "Parent Profile"
NOT_APPLICABLE_STATUSES: FrozenSet[str] = frozenset(["Not Applicable", "Not_Applicable"])


# ──────────────────────────────────────────────────────────────────────────────
# NIST TAGS
# ──────────────────────────────────────────────────────────────────────────────

DEFAULT_STATIC_CODE_ANALYSIS_NIST_TAGS: Tuple[str, ...] = ("SA-11", "RA-5")
SECRET_DETECTION_NIST_TAGS: Tuple[str, ...] = ("IA-5(7)",)


# ──────────────────────────────────────────────────────────────────────────────
# ENUMERATIONS
# ──────────────────────────────────────────────────────────────────────────────


class ResultStatus(str, Enum):
    """HDF control result status values.

    Values are lowercase on the wire; json serializes members as their value.
    """

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a status value is valid.

        Args:
            value: The status string to validate

        Returns:
            True if the status is valid, False otherwise
        """
        return value in cls._value2member_map_


class Severity(str, Enum):
    """STIG severity levels (CAT I/II/III)."""

    HIGH = "high"      # CAT I
    MEDIUM = "medium"  # CAT II
    LOW = "low"        # CAT III


# Severity → control impact
IMPACT_MAPPING: Dict[str, float] = {
    Severity.HIGH.value: 0.7,
    Severity.MEDIUM.value: 0.5,
    Severity.LOW.value: 0.3,
}


# ──────────────────────────────────────────────────────────────────────────────
# FILE HANDLING
# ──────────────────────────────────────────────────────────────────────────────

# Tried in order when reading input files; latin-1 never fails and stays last
ENCODINGS: Tuple[str, ...] = (
    "utf-8-sig",
    "utf-16",
    "cp1252",
    "latin-1",
)

MAX_FILE_SIZE = 500 * 1024 * 1024  # 500MB maximum input file size
