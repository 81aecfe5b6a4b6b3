"""
Control status and severity derivation.

Heimdall-style reporting reduces every control to one status and one
severity bucket. Downstream filters and the `summary` command use these.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Mapping

from hdf_converters.converters.base import profile_controls
from hdf_converters.core.constants import ResultStatus

# Derived control statuses, in report order
CONTROL_STATUSES = (
    "Passed",
    "Failed",
    "Not Applicable",
    "Not Reviewed",
    "Profile Error",
    "From Profile",
)

# Severity buckets, in report order
SEVERITIES = ("none", "low", "medium", "high", "critical")


def control_status(control: Mapping[str, Any]) -> str:
    """
    Overall status of a control from its results and impact.

    A control without results was only declared by a profile. Errors take
    precedence, then a zero impact, then failures and passes; anything left
    (skipped or no results) is Not Reviewed.
    """
    results = control.get("results")
    if results is None:
        return "From Profile"

    statuses = {str(getattr(r.get("status"), "value", r.get("status"))) for r in results}
    if ResultStatus.ERROR.value in statuses:
        return "Profile Error"
    if control.get("impact") == 0:
        return "Not Applicable"
    if ResultStatus.FAILED.value in statuses:
        return "Failed"
    if ResultStatus.PASSED.value in statuses:
        return "Passed"
    return "Not Reviewed"


def control_severity(impact: float) -> str:
    """Severity bucket of an impact value."""
    if impact < 0.1:
        return "none"
    if impact < 0.4:
        return "low"
    if impact < 0.7:
        return "medium"
    if impact < 0.9:
        return "high"
    return "critical"


def status_counts(execution: Mapping[str, Any]) -> Dict[str, int]:
    """Number of controls per derived status (all statuses present, zero-filled)."""
    counts = Counter(control_status(c) for c in profile_controls(execution))
    return {status: counts.get(status, 0) for status in CONTROL_STATUSES}


def severity_counts(execution: Mapping[str, Any]) -> Dict[str, int]:
    """Number of controls per severity bucket (zero-filled)."""
    counts = Counter(
        control_severity(float(c.get("impact") or 0.0)) for c in profile_controls(execution)
    )
    return {severity: counts.get(severity, 0) for severity in SEVERITIES}
