"""Tool converters built on the mapping engine."""

from __future__ import annotations

from hdf_converters.converters.base import BaseConverter, generate_hash, platform_spec
from hdf_converters.converters.trufflehog import TrufflehogMapper

__all__ = ["BaseConverter", "generate_hash", "platform_spec", "TrufflehogMapper"]
