"""Checklist (.ckl) → HDF conversion.

This module provides:
- Field transformers for checklist vulnerabilities (impact, status, CCI/NIST tags)
- Re-splitting of exported finding details into several results
- ChecklistMapper, the mapping tree for one checklist object
- ChecklistResults, which parses .ckl text and aggregates multi-STIG
  checklists under a synthetic parent profile
"""

from __future__ import annotations

import copy
import json
import warnings
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from hdf_converters.ckl.constructor import create_checklist_object
from hdf_converters.ckl.models import ChecklistObject
from hdf_converters.converters.base import BaseConverter, generate_hash, platform_spec
from hdf_converters.core.config import Cfg
from hdf_converters.core.constants import (
    CCI_SEPARATOR,
    DEFAULT_STATIC_CODE_ANALYSIS_NIST_TAGS,
    EXPECTED_MARKER,
    FINDING_SEPARATOR,
    IMPACT_MAPPING,
    NOT_APPLICABLE_STATUSES,
    VERSION,
    ResultStatus,
)
from hdf_converters.core.logging import LOG
from hdf_converters.data.cci_nist import CCI_NIST_MAPPING
from hdf_converters.exceptions import UnmappedSeverityWarning, UnresolvedTransformError
from hdf_converters.mapping.nodes import CollectionNode, ObjectNode, PathRef, Transform
from hdf_converters.xml.parser import CKL_BINDING, parse_xml_to_object

# Optional tags copied when present: (tag name, vuln field)
OPTIONAL_TAGS: Tuple[Tuple[str, str], ...] = (
    ("ia_controls", "ia_controls"),
    ("legacy_id", "legacy_id"),
    ("false_positives", "false_positives"),
    ("false_negatives", "false_negatives"),
    ("mitigations", "mitigations"),
    ("mitigation_controls", "mitigation_control"),
    ("potential_impact", "potential_impact"),
    ("responsibility", "responsibility"),
    ("stig_ref", "stig_ref"),
    ("security_override_guidance", "security_override_guidance"),
    ("severity_justification", "severity_justification"),
)


# ──────────────────────────────────────────────────────────────────────────────
# FIELD TRANSFORMERS
# ──────────────────────────────────────────────────────────────────────────────


def cci_ref(text: str) -> List[str]:
    """Split a "; "-delimited CCI reference string into identifiers."""
    return [ident.strip() for ident in text.split(CCI_SEPARATOR) if ident.strip()]


def nist_tag(text: str) -> List[str]:
    """NIST control tags for a CCI reference string."""
    return CCI_NIST_MAPPING.nist_filter(cci_ref(text), DEFAULT_STATIC_CODE_ANALYSIS_NIST_TAGS)


def find_severity(vuln: Mapping[str, Any]) -> str:
    """Severity override when one was recorded, otherwise the STIG severity."""
    override = vuln.get("severity_override")
    if override:
        return str(override)
    return str(vuln.get("severity") or "")


def transform_impact(vuln: Mapping[str, Any]) -> float:
    """
    Impact (0.0-1.0) of a checklist vulnerability.

    Not Applicable findings score 0.0; otherwise the (overridden) severity
    is looked up case-insensitively in IMPACT_MAPPING.

    Args:
        vuln: Checklist vulnerability record

    Returns:
        0.7, 0.5, 0.3, 0.0, or Cfg.DEFAULT_IMPACT for unmapped severities

    Raises:
        UnresolvedTransformError: If the severity is unmapped and
            Cfg.UNMAPPED_SEVERITY is "error"
    """
    if vuln.get("status") in NOT_APPLICABLE_STATUSES:
        return 0.0

    severity = find_severity(vuln)
    impact = IMPACT_MAPPING.get(severity.strip().lower())
    if impact is not None:
        return impact

    ctx = {"vuln": vuln.get("vuln_num", ""), "severity": severity}
    if Cfg.UNMAPPED_SEVERITY == "error":
        raise UnresolvedTransformError("Severity has no impact mapping", ctx)

    LOG.w(f"Unmapped severity {severity!r} for {ctx['vuln'] or 'vulnerability'}, "
          f"using impact {Cfg.DEFAULT_IMPACT}")
    warnings.warn(
        f"Severity {severity!r} has no impact mapping; using {Cfg.DEFAULT_IMPACT}",
        UnmappedSeverityWarning,
        stacklevel=2,
    )
    return Cfg.DEFAULT_IMPACT


def get_status(raw: Optional[str]) -> ResultStatus:
    """
    Result status for a checklist or exported status word.

    Unrecognized values (Not_Reviewed, Not_Applicable, ...) are Skipped.
    """
    status = (raw or "").lower()
    if status in ("notafinding", "passed"):
        return ResultStatus.PASSED
    if status in ("open", "failed"):
        return ResultStatus.FAILED
    if status == "error":
        return ResultStatus.ERROR
    return ResultStatus.SKIPPED


def optional_tags(vuln: Mapping[str, Any]) -> Dict[str, Any]:
    """Tags for the optional vulnerability fields that carry a value."""
    tags: Dict[str, Any] = {}
    for tag, field in OPTIONAL_TAGS:
        value = vuln.get(field)
        if value and value != CCI_SEPARATOR:
            tags[tag] = value
    return tags


def vuln_code(vuln: Mapping[str, Any]) -> str:
    """Source record of a control, kept for audit."""
    return json.dumps(vuln, indent=2)


# ──────────────────────────────────────────────────────────────────────────────
# FINDING DETAILS
# ──────────────────────────────────────────────────────────────────────────────


def split_segment(segment: str, fallback: Any) -> Dict[str, Any]:
    """
    Parse one exported finding-details segment.

    A segment whose first line is a status word carries its own status;
    the text after it is the code description, followed by the message
    from the first "\\nexpected" on. The split is ambiguous when the code
    description itself contains "\\nexpected"; the first occurrence wins.

    Args:
        segment: Text of one segment (without the separator line)
        fallback: Status used when the segment has no status word

    Returns:
        Result with status, code_desc, message and start_time
    """
    token, newline, rest = segment.partition("\n")
    message = ""
    if ResultStatus.is_valid(token):
        status: Any = get_status(token)
        marker = rest.find(EXPECTED_MARKER) if newline else -1
        if marker > 0:
            code_desc = rest[:marker]
            message = rest[marker + 1:]
        else:
            code_desc = rest
    else:
        status = fallback
        code_desc = segment

    return {
        "code_desc": code_desc,
        "status": status,
        "message": message or None,
        "start_time": "",
    }


def parse_finding_details(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Re-split results whose code_desc holds several exported results.

    Exported checklists join results with a separator line; each segment
    becomes its own result. Results with an empty code_desc pass through.

    Args:
        results: Mapped results ({status, code_desc, start_time})

    Returns:
        Results in source order
    """
    out: List[Dict[str, Any]] = []
    for finding in results:
        details = finding.get("code_desc")
        if not details:
            out.append(finding)
            continue
        for segment in details.split(FINDING_SEPARATOR):
            if segment.endswith("\n"):
                segment = segment[:-1]
            out.append(split_segment(segment, finding.get("status")))
    return out


# ──────────────────────────────────────────────────────────────────────────────
# MAPPERS
# ──────────────────────────────────────────────────────────────────────────────


class ChecklistMapper(BaseConverter):
    """Maps a checklist object: one profile per STIG, one control per vulnerability."""

    def __init__(self, checklist_object: ChecklistObject, with_raw: bool = False):
        super().__init__(checklist_object.as_dict())
        self.checklist = checklist_object
        self.with_raw = with_raw

    def mappings(self) -> Dict[str, Any]:
        control = {
            "tags": ObjectNode(
                {
                    "gtitle": PathRef("group_title"),
                    "rid": PathRef("rule_id"),
                    "gid": PathRef("vuln_num"),
                    "stig_id": PathRef("rule_ver"),
                    "cci": Transform(cci_ref, path="cci_ref"),
                    "nist": Transform(nist_tag, path="cci_ref"),
                    "weight": PathRef("weight"),
                },
                merge=Transform(optional_tags),
            ),
            "refs": [],
            "source_location": {},
            "title": PathRef("rule_title"),
            "id": PathRef("vuln_num"),
            "desc": PathRef("vuln_discuss"),
            "descriptions": [
                {"data": PathRef("check_content"), "label": "check"},
                {"data": PathRef("fix_text"), "label": "fix"},
                {"data": PathRef("comments"), "label": "comments"},
            ],
            "impact": Transform(transform_impact),
            "code": Transform(vuln_code),
            "results": CollectionNode(
                {
                    "status": Transform(get_status, path="status"),
                    "code_desc": PathRef("finding_details"),
                    "start_time": "",
                },
                array_transformer=parse_finding_details,
            ),
        }
        profile = {
            "name": PathRef("name"),
            "version": PathRef("header.version"),
            "title": PathRef("header.title"),
            "summary": PathRef("header.description"),
            "license": PathRef("header.notice"),
            "supports": [],
            "attributes": [],
            "groups": [],
            "status": "loaded",
            "controls": CollectionNode(control, path="vulns", key="id"),
            "sha256": "",
        }
        return {
            "platform": platform_spec(),
            "version": VERSION,
            "statistics": {},
            "profiles": CollectionNode(profile, path="stigs"),
            "passthrough": Transform(self.passthrough),
        }

    def passthrough(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "checklist": {
                "asset": copy.deepcopy(data["asset"]),
                "stigs": copy.deepcopy(data["stigs"]),
            }
        }
        if self.with_raw:
            out["raw"] = copy.deepcopy(self.checklist.raw)
        return out


def with_parent_profile(execution: Dict[str, Any], parent_name: str) -> Dict[str, Any]:
    """
    Aggregate the profiles of an execution under a synthetic parent.

    The parent depends on every profile by name and holds a copy of all
    their controls. Profiles are rebuilt rather than modified, and every
    hash is computed on the final values.

    Args:
        execution: Mapped execution with one profile per STIG
        parent_name: Name of the parent profile

    Returns:
        New execution whose profiles are the children followed by the parent
    """
    children: List[Dict[str, Any]] = []
    depends: List[Dict[str, str]] = []
    controls: List[Dict[str, Any]] = []

    for profile in execution["profiles"]:
        child = dict(profile, parent_profile=parent_name)
        child["sha256"] = generate_hash(child.get("controls", []))
        children.append(child)
        depends.append({"name": profile.get("name", "")})
        controls.extend(copy.deepcopy(profile.get("controls", [])))

    parent = {
        "name": parent_name,
        "version": VERSION,
        "supports": [],
        "attributes": [],
        "groups": [],
        "depends": depends,
        "status": "loaded",
        "controls": controls,
        "sha256": "",
    }
    parent["sha256"] = generate_hash(parent["controls"])

    LOG.d(f"Parent profile {parent_name!r}: {len(depends)} children, {len(controls)} controls")
    return dict(execution, profiles=children + [parent])


class ChecklistResults:
    """
    Parses checklist XML and produces HDF executions.

    A checklist with one STIG maps to one profile. With several STIGs every
    STIG becomes its own profile and a parent profile aggregates them.
    """

    def __init__(
        self,
        checklist_xml: Union[str, bytes],
        with_raw: bool = False,
        parent_name: Optional[str] = None,
    ):
        self.checklist_xml = checklist_xml
        self.with_raw = with_raw
        self.parent_name = parent_name or Cfg.PARENT_PROFILE
        self.raw = parse_xml_to_object(checklist_xml, CKL_BINDING)
        self.checklist_object = create_checklist_object(self.raw)

    def to_hdf(self) -> Dict[str, Any]:
        """Single execution; multi-STIG checklists get a parent profile."""
        with LOG.scope(op="ckl_to_hdf", stigs=len(self.checklist_object.stigs)):
            execution = ChecklistMapper(self.checklist_object, self.with_raw).to_hdf()
            if len(self.checklist_object.stigs) > 1:
                execution = with_parent_profile(execution, self.parent_name)
            LOG.i(f"Converted checklist with {len(execution['profiles'])} profile(s)")
            return execution

    def to_hdf_split(self) -> List[Dict[str, Any]]:
        """One execution per STIG block."""
        executions = []
        for stig in self.checklist_object.stigs:
            single = ChecklistObject(
                asset=self.checklist_object.asset,
                stigs=[stig],
                raw=self.checklist_object.raw,
            )
            executions.append(ChecklistMapper(single, self.with_raw).to_hdf())
        return executions
