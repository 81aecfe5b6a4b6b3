"""File input/output helpers."""

from __future__ import annotations

from hdf_converters.io.file_ops import FO

__all__ = ["FO"]
