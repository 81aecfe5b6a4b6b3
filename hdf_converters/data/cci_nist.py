"""
CCI → NIST SP 800-53 reference table.

The table is static configuration data: it is read once per file path,
exposed read-only, and shared by every conversion in the process.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from hdf_converters.core.config import Cfg
from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import FileError

BUNDLED_TABLE = Path(__file__).with_name("cci_nist.json")


class CciNistMapping:
    """
    Read-only CCI identifier → NIST control tag lookup.

    Tables are cached per resolved path, so constructing several instances
    for the same file loads it once.

    Thread-safe: Yes (load guarded by RLock, data immutable afterwards)
    """

    _cache: Dict[Path, Mapping[str, str]] = {}
    _lock = threading.RLock()

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or Cfg.CCI_NIST_PATH or BUNDLED_TABLE).resolve()
        self.data = self._load(self.path)

    @classmethod
    def _load(cls, path: Path) -> Mapping[str, str]:
        with cls._lock:
            cached = cls._cache.get(path)
            if cached is not None:
                return cached
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise FileError(f"Cannot load CCI/NIST table: {exc}", {"path": str(path)}) from exc
            if not isinstance(raw, dict):
                raise FileError("CCI/NIST table must be a JSON object", {"path": str(path)})
            table = MappingProxyType({str(k): str(v) for k, v in raw.items()})
            cls._cache[path] = table
            LOG.d(f"Loaded {len(table)} CCI/NIST entries from {path}")
            return table

    def __len__(self) -> int:
        return len(self.data)

    def __contains__(self, cci: object) -> bool:
        return cci in self.data

    def lookup(self, cci: str) -> Optional[str]:
        """NIST tag for one CCI identifier, or None."""
        return self.data.get(cci.strip())

    def nist_filter(
        self,
        identifiers: Iterable[str],
        default_nist: Sequence[str],
        collapse: bool = True,
    ) -> List[str]:
        """
        Map CCI identifiers to NIST tags.

        Args:
            identifiers: CCI identifiers, in source order
            default_nist: Tags returned when no identifier maps
            collapse: Drop repeated tags, keeping first-seen order

        Returns:
            Ordered list of NIST tags
        """
        matches: List[str] = []
        for ident in identifiers:
            tag = self.lookup(ident)
            if tag is None:
                continue
            if collapse and tag in matches:
                continue
            matches.append(tag)
        if not matches:
            return list(default_nist)
        return matches


# Shared instance, loaded at import
CCI_NIST_MAPPING = CciNistMapping()
