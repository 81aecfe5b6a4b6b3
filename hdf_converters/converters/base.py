"""Base class shared by every tool-specific converter.

A converter holds one already-parsed input and a mapping tree
describing the HDF execution record. to_hdf() interprets the tree
over the input and finalizes the per-profile integrity hashes.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List, Optional

from hdf_converters.core.constants import PLATFORM_NAME, VERSION
from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import MalformedInputError
from hdf_converters.mapping.nodes import CollectionNode, Node, ObjectNode, compile_spec
from hdf_converters.mapping.walker import collapse_duplicates, walk


def generate_hash(value: Any) -> str:
    """
    Deterministic SHA-256 of a JSON-serializable value.

    Key order is the insertion order of the value, so identical inputs
    mapped by the same tree always hash identically.

    Args:
        value: JSON-serializable value (e.g. a profile's controls)

    Returns:
        Hex digest
    """
    payload = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def platform_spec() -> Dict[str, Any]:
    """Platform block shared by all converters."""
    return {"name": PLATFORM_NAME, "release": VERSION}


class BaseConverter:
    """
    Interprets a mapping tree over one parsed input.

    Subclasses implement mappings(). The tree is compiled once per
    instance; every to_hdf() call builds a new record.

    Thread-safe: Yes (no state is mutated after construction)
    """

    def __init__(self, data: Any, collapse_results: bool = False):
        self.data = data
        self.collapse_results = collapse_results
        self._spec: Optional[Node] = None

    def mappings(self) -> Any:
        """Return the mapping tree (plain tree or nodes)."""
        raise NotImplementedError

    @property
    def spec(self) -> Node:
        if self._spec is None:
            self._spec = compile_spec(self.mappings())
        return self._spec

    def to_hdf(self) -> Dict[str, Any]:
        """
        Convert the input into an HDF execution record.

        Returns:
            Execution record with profiles, controls and results

        Raises:
            MalformedInputError: If the mapping does not produce a profiles list
            UnresolvedTransformError: If a transformer fails
        """
        LOG.d(f"{type(self).__name__}: mapping input")
        result = walk(self.spec, self.data)
        if not isinstance(result, dict) or not isinstance(result.get("profiles"), list):
            raise MalformedInputError(
                "Mapping did not produce a profiles list",
                {"converter": type(self).__name__},
            )

        if self.collapse_results:
            key = self._control_key()
            if key:
                for profile in result["profiles"]:
                    profile["controls"] = collapse_duplicates(profile.get("controls", []), key)

        for profile in result["profiles"]:
            profile["sha256"] = generate_hash(profile.get("controls", []))

        LOG.d(
            f"{type(self).__name__}: {len(result['profiles'])} profile(s), "
            f"{sum(len(p.get('controls', [])) for p in result['profiles'])} control(s)"
        )
        return result

    def _control_key(self) -> Optional[str]:
        """Key declared on the controls collection of the profiles node."""
        spec = self.spec
        if not isinstance(spec, ObjectNode):
            return None
        profiles = spec.fields.get("profiles")
        if not isinstance(profiles, CollectionNode) or not isinstance(profiles.item, ObjectNode):
            return None
        controls = profiles.item.fields.get("controls")
        if isinstance(controls, CollectionNode):
            return controls.key
        return None


def profile_controls(execution: Dict[str, Any]) -> List[Dict[str, Any]]:
    """All controls of an execution, in profile order."""
    return [c for p in execution.get("profiles", []) for c in p.get("controls", [])]
