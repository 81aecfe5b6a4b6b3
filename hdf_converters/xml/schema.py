"""
Checklist XML schema definitions.

Defines element names of the DISA STIG Viewer checklist (.ckl) format and
how each one maps onto the checklist domain object.

This module provides:
- Element name constants for CHECKLIST, ASSET, STIG_INFO, VULN sections
- Attribute name → domain field tables
- The binding table used to parse .ckl text into an intermediate object
- Namespace tag manipulation
"""

from __future__ import annotations
from typing import Dict, FrozenSet, Tuple


class Sch:
    """
    XML schema definitions for CKL processing.

    Thread-safe: Yes (immutable class constants)
    """

    # Root element
    ROOT = "CHECKLIST"

    # Section element names
    ASSET_SECTION = "ASSET"
    STIGS = "STIGS"
    ISTIG = "iSTIG"
    STIG_INFO = "STIG_INFO"
    VULN_SECTION = "VULN"
    STIG_DATA = "STIG_DATA"
    VULN_ATTRIBUTE = "VULN_ATTRIBUTE"
    ATTRIBUTE_DATA = "ATTRIBUTE_DATA"
    SI_DATA = "SI_DATA"
    SID_NAME = "SID_NAME"
    SID_DATA = "SID_DATA"

    # Asset metadata elements (in ASSET section) → domain field
    ASSET: Dict[str, str] = {
        "ROLE": "role",
        "ASSET_TYPE": "asset_type",
        "MARKING": "marking",
        "HOST_NAME": "host_name",
        "HOST_IP": "host_ip",
        "HOST_MAC": "host_mac",
        "HOST_FQDN": "host_fqdn",
        "TARGET_COMMENT": "target_comment",
        "TECH_AREA": "tech_area",
        "TARGET_KEY": "target_key",
        "WEB_OR_DATABASE": "web_or_database",
        "WEB_DB_SITE": "web_db_site",
        "WEB_DB_INSTANCE": "web_db_instance",
    }

    # STIG metadata names (SID_NAME values in STIG_INFO); field names match
    STIG: Tuple[str, ...] = (
        "version",
        "classification",
        "customname",
        "stigid",
        "description",
        "filename",
        "releaseinfo",
        "title",
        "uuid",
        "notice",
        "source",
    )

    # Vulnerability attributes (VULN_ATTRIBUTE values in STIG_DATA) → domain field
    VULN: Dict[str, str] = {
        "Vuln_Num": "vuln_num",
        "Severity": "severity",
        "Group_Title": "group_title",
        "Rule_ID": "rule_id",
        "Rule_Ver": "rule_ver",
        "Rule_Title": "rule_title",
        "Vuln_Discuss": "vuln_discuss",
        "IA_Controls": "ia_controls",
        "Check_Content": "check_content",
        "Fix_Text": "fix_text",
        "False_Positives": "false_positives",
        "False_Negatives": "false_negatives",
        "Documentable": "documentable",
        "Mitigations": "mitigations",
        "Potential_Impact": "potential_impact",
        "Third_Party_Tools": "third_party_tools",
        "Mitigation_Control": "mitigation_control",
        "Responsibility": "responsibility",
        "Security_Override_Guidance": "security_override_guidance",
        "Check_Content_Ref": "check_content_ref",
        "Weight": "weight",
        "Class": "vuln_class",
        "STIGRef": "stig_ref",
        "TargetKey": "target_key",
        "STIG_UUID": "stig_uuid",
        "LEGACY_ID": "legacy_id",
        "CCI_REF": "cci_ref",
    }

    # Attributes that may repeat within one VULN; values are joined
    MULTI_VALUED: FrozenSet[str] = frozenset(["CCI_REF", "LEGACY_ID"])
    MULTI_SEPARATOR = "; "

    # Status tracking elements (in VULN section) → domain field
    STATUS: Dict[str, str] = {
        "STATUS": "status",
        "FINDING_DETAILS": "finding_details",
        "COMMENTS": "comments",
        "SEVERITY_OVERRIDE": "severity_override",
        "SEVERITY_JUSTIFICATION": "severity_justification",
    }

    # Elements that are always lists in the parsed intermediate object
    REPEATED: FrozenSet[str] = frozenset([ISTIG, VULN_SECTION, STIG_DATA, SI_DATA])

    @staticmethod
    def strip_ns(tag: str) -> str:
        """
        Remove namespace prefix from tag.

        Args:
            tag: Potentially namespaced tag (e.g., "{http://...}VULN" or "ns:VULN")

        Returns:
            Tag without namespace (e.g., "VULN")

        Example:
            >>> Sch.strip_ns("{urn:x}VULN")
            'VULN'
            >>> Sch.strip_ns("VULN")
            'VULN'
        """
        if "}" in tag:
            return tag.split("}", 1)[1]
        if ":" in tag:
            return tag.split(":", 1)[1]
        return tag
