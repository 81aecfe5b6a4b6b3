"""TruffleHog secret scan → HDF conversion."""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Union

from hdf_converters.converters.base import BaseConverter, platform_spec
from hdf_converters.core.constants import SECRET_DETECTION_NIST_TAGS, VERSION, ResultStatus
from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import MalformedInputError
from hdf_converters.mapping.nodes import CollectionNode, Transform


def load_findings(export_text: Union[str, bytes]) -> List[Dict[str, Any]]:
    """
    Parse a TruffleHog JSON export.

    TruffleHog writes one JSON object per line; a single object or a JSON
    array of objects are accepted too.

    Raises:
        MalformedInputError: If the text is not UTF-8 JSON or holds non-object findings
    """
    if isinstance(export_text, bytes):
        try:
            export_text = export_text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError(f"TruffleHog export is not UTF-8: {exc}") from exc

    try:
        data = json.loads(export_text)
    except ValueError:
        lines = [ln for ln in export_text.splitlines() if ln.strip()]
        try:
            data = [json.loads(ln) for ln in lines]
        except ValueError as exc:
            raise MalformedInputError(f"Invalid TruffleHog JSON: {exc}") from exc

    findings = data if isinstance(data, list) else [data]
    for idx, finding in enumerate(findings):
        if not isinstance(finding, dict):
            raise MalformedInputError(
                "TruffleHog finding is not an object",
                {"index": idx, "type": type(finding).__name__},
            )
    return findings


def source_name(findings: List[Dict[str, Any]]) -> str:
    """Name of the scanned source (first finding wins)."""
    for finding in findings:
        if finding.get("SourceName"):
            return str(finding["SourceName"])
    return ""


def detector_id(finding: Dict[str, Any]) -> str:
    return f"{finding.get('DetectorType')}_{finding.get('DecoderName')}"


def detector_title(finding: Dict[str, Any]) -> str:
    return f"{finding.get('DetectorName')}_{finding.get('DecoderName')}"


def detector_desc(finding: Dict[str, Any]) -> str:
    return f"Found {finding.get('DetectorName')} secret using {finding.get('DecoderName')} decoder"


def finding_message(finding: Dict[str, Any]) -> str:
    """Finding details without its source metadata."""
    return json.dumps({k: v for k, v in finding.items() if k != "SourceMetadata"}, indent=2)


class TrufflehogMapper(BaseConverter):
    """
    Maps a TruffleHog export: one profile for the scanned source, one control
    per detector/decoder pair. Every finding is a failed result; findings of
    the same pair are collapsed into one control.
    """

    def __init__(self, export_text: Union[str, bytes], with_raw: bool = False):
        findings = load_findings(export_text)
        LOG.d(f"TruffleHog export: {len(findings)} finding(s)")
        super().__init__({"findings": findings}, collapse_results=True)
        self.with_raw = with_raw

    def mappings(self) -> Dict[str, Any]:
        control = {
            "tags": {"nist": list(SECRET_DETECTION_NIST_TAGS)},
            "descriptions": [],
            "refs": [],
            "source_location": {},
            "title": Transform(detector_title),
            "id": Transform(detector_id),
            "desc": Transform(detector_desc),
            "impact": 0.0,
            "code": None,
            "results": CollectionNode(
                {
                    "status": ResultStatus.FAILED.value,
                    "code_desc": "",
                    "message": Transform(finding_message),
                    "run_time": None,
                    "start_time": "",
                }
            ),
        }
        profile = {
            "name": Transform(source_name, path="$.findings"),
            "title": Transform(source_name, path="$.findings"),
            "version": None,
            "maintainer": None,
            "summary": None,
            "license": None,
            "copyright": None,
            "copyright_email": None,
            "supports": [],
            "attributes": [],
            "depends": [],
            "groups": [],
            "status": "loaded",
            "controls": CollectionNode(control, path="findings", key="id"),
            "sha256": "",
        }
        return {
            "platform": dict(platform_spec(), target_id=None),
            "version": VERSION,
            "statistics": {"duration": None},
            "profiles": CollectionNode(profile),
            "passthrough": Transform(self.passthrough),
        }

    def passthrough(self, data: Dict[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {"auxiliary_data": [{"name": "TruffleHog", "data": {}}]}
        if self.with_raw:
            out["raw"] = copy.deepcopy(data["findings"])
        return out
