"""
Checklist domain constructor.

Turns the intermediate object produced by the XML adapter into a
ChecklistObject. The intermediate form is tolerated in all its quirks:
single elements where lists are expected (and lists of one where single
values are expected), namespaced keys, and empty elements parsed as "".
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from hdf_converters.ckl.models import (
    ChecklistAsset,
    ChecklistObject,
    ChecklistStig,
    ChecklistVuln,
    StigHeader,
)
from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import MalformedChecklistError
from hdf_converters.xml.schema import Sch

_MISSING = object()


def _get(node: Any, key: str) -> Any:
    """Child value by local name, ignoring namespace prefixes."""
    if not isinstance(node, Mapping):
        return _MISSING
    if key in node:
        return node[key]
    for name, value in node.items():
        if Sch.strip_ns(name) == key:
            return value
    return _MISSING


def _as_list(value: Any) -> List[Any]:
    if value is _MISSING or value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else _MISSING
    return value


def _text(value: Any) -> str:
    value = _first(value)
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, Mapping):
        return str(value.get("#text", ""))
    return str(value)


def _section(value: Any) -> Dict[str, Any]:
    """Structured section; an empty element ("") counts as an empty section."""
    value = _first(value)
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def create_checklist_object(raw: Mapping[str, Any]) -> ChecklistObject:
    """
    Build the checklist domain object from a parsed .ckl.

    Args:
        raw: Intermediate object ({"CHECKLIST": {...}})

    Returns:
        ChecklistObject with the asset and one ChecklistStig per iSTIG block

    Raises:
        MalformedChecklistError: If the CHECKLIST root, the ASSET section,
            or every iSTIG block is missing
    """
    checklist = _first(_get(raw, Sch.ROOT))
    if checklist is _MISSING:
        raise MalformedChecklistError("Checklist root element missing", {"expected": Sch.ROOT})
    if not isinstance(checklist, Mapping):
        raise MalformedChecklistError("Checklist root element is empty")

    asset_node = _get(checklist, Sch.ASSET_SECTION)
    if asset_node is _MISSING:
        raise MalformedChecklistError("Checklist has no ASSET section")
    asset = build_asset(_section(asset_node))

    stigs_node = _section(_get(checklist, Sch.STIGS))
    istigs = [_section(s) for s in _as_list(_get(stigs_node, Sch.ISTIG))]
    if not istigs:
        raise MalformedChecklistError("Checklist has no iSTIG blocks")

    stigs = [build_stig(node, idx) for idx, node in enumerate(istigs, 1)]
    LOG.d(
        f"Checklist constructed: {len(stigs)} STIG(s), "
        f"{sum(len(s.vulns) for s in stigs)} vulnerabilities"
    )
    return ChecklistObject(asset=asset, stigs=stigs, raw=raw)


def build_asset(node: Mapping[str, Any]) -> ChecklistAsset:
    values = {field: _text(_get(node, tag)) for tag, field in Sch.ASSET.items()}
    return ChecklistAsset(**values)


def build_header(node: Mapping[str, Any]) -> StigHeader:
    values: Dict[str, str] = {}
    for si_data in _as_list(_get(node, Sch.SI_DATA)):
        name = _text(_get(si_data, Sch.SID_NAME)).strip()
        if name not in Sch.STIG:
            LOG.d(f"Ignoring unknown STIG_INFO entry: {name!r}")
            continue
        values[name] = _text(_get(si_data, Sch.SID_DATA))
    return StigHeader(**values)


def build_vuln(node: Mapping[str, Any]) -> ChecklistVuln:
    values: Dict[str, Any] = {}
    multi: Dict[str, List[str]] = {}

    for stig_data in _as_list(_get(node, Sch.STIG_DATA)):
        attr = _text(_get(stig_data, Sch.VULN_ATTRIBUTE)).strip()
        field = Sch.VULN.get(attr)
        if field is None:
            LOG.d(f"Ignoring unknown VULN_ATTRIBUTE: {attr!r}")
            continue
        data = _text(_get(stig_data, Sch.ATTRIBUTE_DATA))
        if attr in Sch.MULTI_VALUED:
            if data:
                multi.setdefault(field, []).append(data)
        elif field not in values:
            values[field] = data

    for field, items in multi.items():
        values[field] = Sch.MULTI_SEPARATOR.join(items)

    for tag, field in Sch.STATUS.items():
        values[field] = _text(_get(node, tag))

    override: Optional[str] = values.get("severity_override") or None
    values["severity_override"] = override
    return ChecklistVuln(**values)


def build_stig(node: Mapping[str, Any], index: int = 1) -> ChecklistStig:
    header = build_header(_section(_get(node, Sch.STIG_INFO)))
    vulns = [build_vuln(_section(v)) for v in _as_list(_get(node, Sch.VULN_SECTION))]
    stig = ChecklistStig(header=header, vulns=vulns)
    if not stig.name:
        LOG.w(f"iSTIG block {index} has no title, stigid or filename")
    return stig
