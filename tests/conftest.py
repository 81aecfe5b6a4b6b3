"""
Pytest configuration and shared fixtures for hdf-converters tests.

This module provides:
- Checklist (.ckl) document builders
- Single and multi-STIG checklist fixtures
- TruffleHog export fixtures
- Configuration reset between tests
"""

import json
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

import pytest

from hdf_converters.core.config import Cfg


# ============================================================================
# Checklist builders
# ============================================================================

def vuln_xml(
    vuln_num: str,
    severity: str = "medium",
    status: str = "Open",
    finding_details: str = "",
    cci_refs: Optional[List[str]] = None,
    severity_override: str = "",
    extra: Optional[Dict[str, str]] = None,
) -> str:
    """Build one VULN element.

    Args:
        vuln_num: Vuln_Num attribute (becomes the control id)
        severity: Severity attribute
        status: STATUS element
        finding_details: FINDING_DETAILS element
        cci_refs: CCI_REF attributes, one STIG_DATA each
        severity_override: SEVERITY_OVERRIDE element
        extra: Additional VULN_ATTRIBUTE → ATTRIBUTE_DATA pairs

    Returns:
        VULN XML fragment
    """
    attrs = {
        "Vuln_Num": vuln_num,
        "Severity": severity,
        "Group_Title": f"SRG-OS-{vuln_num}",
        "Rule_ID": f"SV-{vuln_num[2:]}r1_rule",
        "Rule_Ver": f"RULE-{vuln_num[2:]}",
        "Rule_Title": f"Rule title for {vuln_num}",
        "Vuln_Discuss": f"Discussion of {vuln_num}",
        "Check_Content": f"Check {vuln_num}",
        "Fix_Text": f"Fix {vuln_num}",
        "Weight": "10.0",
    }
    attrs.update(extra or {})

    parts = ["<VULN>"]
    for name, data in attrs.items():
        parts.append(
            f"<STIG_DATA><VULN_ATTRIBUTE>{name}</VULN_ATTRIBUTE>"
            f"<ATTRIBUTE_DATA>{escape(data)}</ATTRIBUTE_DATA></STIG_DATA>"
        )
    for cci in cci_refs if cci_refs is not None else ["CCI-000366"]:
        parts.append(
            "<STIG_DATA><VULN_ATTRIBUTE>CCI_REF</VULN_ATTRIBUTE>"
            f"<ATTRIBUTE_DATA>{cci}</ATTRIBUTE_DATA></STIG_DATA>"
        )
    parts.append(f"<STATUS>{status}</STATUS>")
    parts.append(f"<FINDING_DETAILS>{escape(finding_details)}</FINDING_DETAILS>")
    parts.append("<COMMENTS>Reviewed</COMMENTS>")
    parts.append(f"<SEVERITY_OVERRIDE>{severity_override}</SEVERITY_OVERRIDE>")
    parts.append("<SEVERITY_JUSTIFICATION></SEVERITY_JUSTIFICATION>")
    parts.append("</VULN>")
    return "".join(parts)


def istig_xml(title: str, version: str, vulns: List[str]) -> str:
    """Build one iSTIG block from VULN fragments."""
    info = {
        "version": version,
        "classification": "UNCLASSIFIED",
        "stigid": title.replace(" ", "_"),
        "description": f"{title} description",
        "filename": f"{title.replace(' ', '_')}.xml",
        "releaseinfo": "Release: 1 Benchmark Date: 01 Jan 2024",
        "title": title,
        "notice": "terms-of-use",
        "source": "STIG.DOD.MIL",
    }
    parts = ["<iSTIG><STIG_INFO>"]
    for name, data in info.items():
        parts.append(f"<SI_DATA><SID_NAME>{name}</SID_NAME><SID_DATA>{escape(data)}</SID_DATA></SI_DATA>")
    parts.append("</STIG_INFO>")
    parts.extend(vulns)
    parts.append("</iSTIG>")
    return "".join(parts)


def checklist_xml(istigs: List[str], host_name: str = "web01") -> str:
    """Wrap iSTIG blocks into a complete checklist document."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<CHECKLIST><ASSET>"
        "<ROLE>Member Server</ROLE><ASSET_TYPE>Computing</ASSET_TYPE>"
        "<MARKING>CUI</MARKING>"
        f"<HOST_NAME>{host_name}</HOST_NAME><HOST_IP>10.0.0.5</HOST_IP>"
        "<HOST_MAC></HOST_MAC><HOST_FQDN>web01.example.mil</HOST_FQDN>"
        "<TARGET_COMMENT></TARGET_COMMENT><TECH_AREA></TECH_AREA>"
        "<TARGET_KEY>2350</TARGET_KEY><WEB_OR_DATABASE>false</WEB_OR_DATABASE>"
        "<WEB_DB_SITE></WEB_DB_SITE><WEB_DB_INSTANCE></WEB_DB_INSTANCE>"
        "</ASSET><STIGS>"
        + "".join(istigs)
        + "</STIGS></CHECKLIST>"
    )


# ============================================================================
# Checklist fixtures
# ============================================================================

@pytest.fixture
def single_stig_ckl() -> str:
    """Checklist with one STIG and three vulnerabilities.

    V-1001: Open, high, two results in its finding details
    V-1002: NotAFinding, medium, no finding details
    V-1003: Not_Applicable, low
    """
    details = (
        "passed\nfoo bar\n"
        "--------------------------------\n"
        "failed\nbaz\nexpected: 1\nactual: 2"
    )
    vulns = [
        vuln_xml("V-1001", "high", "Open", details, ["CCI-000366", "CCI-000213"]),
        vuln_xml("V-1002", "medium", "NotAFinding"),
        vuln_xml("V-1003", "low", "Not_Applicable", cci_refs=["CCI-999999"]),
    ]
    return checklist_xml([istig_xml("Red Hat 8 STIG", "1", vulns)])


@pytest.fixture
def multi_stig_ckl() -> str:
    """Checklist with two STIGs holding 3 and 5 vulnerabilities."""
    first = [vuln_xml(f"V-2{i:03d}", status="Open") for i in range(1, 4)]
    second = [vuln_xml(f"V-3{i:03d}", status="NotAFinding") for i in range(1, 6)]
    return checklist_xml([
        istig_xml("Apache Server STIG", "2", first),
        istig_xml("Apache Site STIG", "3", second),
    ])


# ============================================================================
# TruffleHog fixtures
# ============================================================================

def trufflehog_finding(detector: str = "AWS", decoder: str = "PLAIN", secret: str = "AKIA0000") -> Dict:
    """One TruffleHog finding record."""
    return {
        "SourceMetadata": {"Data": {"Git": {"file": "config.py", "line": 3}}},
        "SourceID": 1,
        "SourceType": 16,
        "SourceName": "trufflehog - git",
        "DetectorType": 2 if detector == "AWS" else 8,
        "DetectorName": detector,
        "DecoderName": decoder,
        "Verified": False,
        "Raw": secret,
    }


@pytest.fixture
def make_finding():
    """Factory for TruffleHog finding records."""
    return trufflehog_finding


@pytest.fixture
def trufflehog_json_lines() -> str:
    """Three findings as JSON lines; two share a detector/decoder pair."""
    findings = [
        trufflehog_finding("AWS", "PLAIN", "AKIA0001"),
        trufflehog_finding("Github", "BASE64", "ghp_0002"),
        trufflehog_finding("AWS", "PLAIN", "AKIA0003"),
    ]
    return "\n".join(json.dumps(f) for f in findings) + "\n"


# ============================================================================
# Configuration
# ============================================================================

@pytest.fixture(autouse=True)
def default_config():
    """Run every test against default settings."""
    Cfg.reset()
    Cfg.init(environ={})
    yield
    Cfg.reset()
    Cfg.init(environ={})


@pytest.fixture
def ckl_builder():
    """Checklist builder functions: vuln, istig and checklist."""

    class Builder:
        vuln = staticmethod(vuln_xml)
        istig = staticmethod(istig_xml)
        checklist = staticmethod(checklist_xml)

    return Builder
