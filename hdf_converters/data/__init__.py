"""Static reference datasets (loaded once, read-only)."""

from __future__ import annotations

from hdf_converters.data.cci_nist import CCI_NIST_MAPPING, CciNistMapping

__all__ = ["CCI_NIST_MAPPING", "CciNistMapping"]
