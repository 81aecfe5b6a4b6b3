"""
Checklist domain objects.

Flat records mirroring the STIG checklist schema, independent of how the
XML was parsed. Every field is a string (empty when absent in the file)
except severity_override, which is None when no override was recorded.

Thread-safe: Yes (not mutated after construction)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ChecklistAsset:
    """Target host metadata from the ASSET section."""

    role: str = ""
    asset_type: str = ""
    marking: str = ""
    host_name: str = ""
    host_ip: str = ""
    host_mac: str = ""
    host_fqdn: str = ""
    target_comment: str = ""
    tech_area: str = ""
    target_key: str = ""
    web_or_database: str = ""
    web_db_site: str = ""
    web_db_instance: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StigHeader:
    """STIG_INFO metadata of one iSTIG block."""

    version: str = ""
    classification: str = ""
    customname: str = ""
    stigid: str = ""
    description: str = ""
    filename: str = ""
    releaseinfo: str = ""
    title: str = ""
    uuid: str = ""
    notice: str = ""
    source: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChecklistVuln:
    """
    One vulnerability (VULN) of a STIG block.

    Attributes mirror the STIG_DATA attributes and status elements; see
    Sch.VULN and Sch.STATUS for the XML names. Repeated attributes
    (cci_ref, legacy_id) hold "; "-joined values.
    """

    vuln_num: str = ""
    severity: str = ""
    group_title: str = ""
    rule_id: str = ""
    rule_ver: str = ""
    rule_title: str = ""
    vuln_discuss: str = ""
    ia_controls: str = ""
    check_content: str = ""
    fix_text: str = ""
    false_positives: str = ""
    false_negatives: str = ""
    documentable: str = ""
    mitigations: str = ""
    potential_impact: str = ""
    third_party_tools: str = ""
    mitigation_control: str = ""
    responsibility: str = ""
    security_override_guidance: str = ""
    check_content_ref: str = ""
    weight: str = ""
    vuln_class: str = ""
    stig_ref: str = ""
    target_key: str = ""
    stig_uuid: str = ""
    legacy_id: str = ""
    cci_ref: str = ""
    status: str = ""
    finding_details: str = ""
    comments: str = ""
    severity_override: Optional[str] = None
    severity_justification: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChecklistStig:
    """One iSTIG block: header plus its vulnerabilities."""

    header: StigHeader
    vulns: List[ChecklistVuln] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Profile name: title, falling back to the STIG id or file name."""
        return self.header.title or self.header.stigid or self.header.filename

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "header": self.header.as_dict(),
            "vulns": [v.as_dict() for v in self.vulns],
        }


@dataclass
class ChecklistObject:
    """
    A whole checklist.

    Attributes:
        asset: Target host metadata
        stigs: STIG blocks in file order
        raw: Intermediate object the checklist was built from
    """

    asset: ChecklistAsset
    stigs: List[ChecklistStig] = field(default_factory=list)
    raw: Any = None

    def as_dict(self) -> Dict[str, Any]:
        """Serialize to the record walked by the checklist mapping (raw excluded)."""
        return {
            "asset": self.asset.as_dict(),
            "stigs": [s.as_dict() for s in self.stigs],
        }
