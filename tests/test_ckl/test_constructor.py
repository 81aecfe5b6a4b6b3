"""Unit tests for checklist domain construction."""

import pytest

from hdf_converters.ckl.constructor import create_checklist_object
from hdf_converters.exceptions import MalformedChecklistError, MalformedInputError
from hdf_converters.xml.parser import CKL_BINDING, parse_xml_to_object


def construct(text):
    return create_checklist_object(parse_xml_to_object(text, CKL_BINDING))


class TestCreateChecklistObject:
    """Tests for create_checklist_object()."""

    def test_asset(self, single_stig_ckl):
        asset = construct(single_stig_ckl).asset
        assert asset.host_name == "web01"
        assert asset.host_ip == "10.0.0.5"
        assert asset.role == "Member Server"
        assert asset.host_mac == ""

    def test_header(self, single_stig_ckl):
        stig = construct(single_stig_ckl).stigs[0]
        assert stig.header.title == "Red Hat 8 STIG"
        assert stig.header.version == "1"
        assert stig.header.notice == "terms-of-use"
        assert stig.name == "Red Hat 8 STIG"

    def test_vulns(self, single_stig_ckl):
        vulns = construct(single_stig_ckl).stigs[0].vulns
        assert [v.vuln_num for v in vulns] == ["V-1001", "V-1002", "V-1003"]
        first = vulns[0]
        assert first.severity == "high"
        assert first.status == "Open"
        assert first.rule_id == "SV-1001r1_rule"
        assert first.comments == "Reviewed"
        assert first.finding_details.startswith("passed\nfoo bar\n")

    def test_repeated_cci_refs_joined(self, single_stig_ckl):
        vuln = construct(single_stig_ckl).stigs[0].vulns[0]
        assert vuln.cci_ref == "CCI-000366; CCI-000213"

    def test_empty_severity_override_is_none(self, single_stig_ckl):
        vuln = construct(single_stig_ckl).stigs[0].vulns[0]
        assert vuln.severity_override is None

    def test_severity_override_kept(self, ckl_builder):
        text = ckl_builder.checklist([
            ckl_builder.istig("S", "1", [ckl_builder.vuln("V-1", "low", severity_override="high")])
        ])
        assert construct(text).stigs[0].vulns[0].severity_override == "high"

    def test_unknown_attributes_ignored(self, ckl_builder):
        text = ckl_builder.checklist([
            ckl_builder.istig("S", "1", [ckl_builder.vuln("V-1", extra={"Made_Up": "x"})])
        ])
        vuln = construct(text).stigs[0].vulns[0]
        assert not hasattr(vuln, "made_up")
        assert vuln.vuln_num == "V-1"

    def test_multiple_stigs(self, multi_stig_ckl):
        stigs = construct(multi_stig_ckl).stigs
        assert [s.name for s in stigs] == ["Apache Server STIG", "Apache Site STIG"]
        assert [len(s.vulns) for s in stigs] == [3, 5]

    def test_stig_without_vulns(self, ckl_builder):
        checklist = construct(ckl_builder.checklist([ckl_builder.istig("Empty", "1", [])]))
        assert checklist.stigs[0].vulns == []

    def test_raw_kept(self, single_stig_ckl):
        raw = parse_xml_to_object(single_stig_ckl, CKL_BINDING)
        assert create_checklist_object(raw).raw is raw

    def test_as_dict(self, single_stig_ckl):
        data = construct(single_stig_ckl).as_dict()
        assert set(data) == {"asset", "stigs"}
        assert data["stigs"][0]["name"] == "Red Hat 8 STIG"
        assert data["stigs"][0]["vulns"][0]["vuln_num"] == "V-1001"


class TestIntermediateQuirks:
    """Intermediate objects built by other parsers."""

    def test_single_objects_instead_of_lists(self):
        raw = {
            "CHECKLIST": {
                "ASSET": {"HOST_NAME": "h"},
                "STIGS": {
                    "iSTIG": {
                        "STIG_INFO": {"SI_DATA": {"SID_NAME": "title", "SID_DATA": "T"}},
                        "VULN": {
                            "STIG_DATA": {"VULN_ATTRIBUTE": "Vuln_Num", "ATTRIBUTE_DATA": "V-9"},
                            "STATUS": "Open",
                        },
                    }
                },
            }
        }
        checklist = create_checklist_object(raw)
        assert checklist.asset.host_name == "h"
        assert checklist.stigs[0].name == "T"
        assert checklist.stigs[0].vulns[0].vuln_num == "V-9"

    def test_arrays_of_one_and_namespaced_keys(self):
        raw = {
            "ns:CHECKLIST": [{
                "ns:ASSET": [{"ns:HOST_NAME": ["h"]}],
                "ns:STIGS": [{"ns:iSTIG": [{"ns:STIG_INFO": [{}], "ns:VULN": []}]}],
            }]
        }
        checklist = create_checklist_object(raw)
        assert checklist.asset.host_name == "h"
        assert checklist.stigs[0].vulns == []


class TestMalformedChecklists:
    """Missing required sections."""

    def test_missing_root(self):
        with pytest.raises(MalformedChecklistError):
            create_checklist_object({"Benchmark": {}})

    def test_empty_root(self):
        with pytest.raises(MalformedChecklistError):
            create_checklist_object({"CHECKLIST": ""})

    def test_missing_asset(self):
        raw = {"CHECKLIST": {"STIGS": {"iSTIG": [{"VULN": []}]}}}
        with pytest.raises(MalformedChecklistError):
            create_checklist_object(raw)

    def test_missing_istig(self):
        raw = {"CHECKLIST": {"ASSET": "", "STIGS": ""}}
        with pytest.raises(MalformedChecklistError):
            create_checklist_object(raw)

    def test_is_malformed_input(self):
        assert issubclass(MalformedChecklistError, MalformedInputError)
