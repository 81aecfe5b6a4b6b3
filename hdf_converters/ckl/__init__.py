"""STIG checklist (.ckl) pipeline: domain objects, constructor and mapper."""

from __future__ import annotations

from hdf_converters.ckl.models import (
    ChecklistAsset,
    ChecklistObject,
    ChecklistStig,
    ChecklistVuln,
    StigHeader,
)
from hdf_converters.ckl.constructor import create_checklist_object
from hdf_converters.ckl.mapper import (
    ChecklistMapper,
    ChecklistResults,
    get_status,
    parse_finding_details,
    transform_impact,
    with_parent_profile,
)

__all__ = [
    "ChecklistAsset",
    "ChecklistObject",
    "ChecklistStig",
    "ChecklistVuln",
    "StigHeader",
    "create_checklist_object",
    "ChecklistMapper",
    "ChecklistResults",
    "get_status",
    "parse_finding_details",
    "transform_impact",
    "with_parent_profile",
]
