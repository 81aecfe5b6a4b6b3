"""Custom exception classes for hdf-converters.

All errors raised by the package inherit from HDFError so callers can
catch conversion failures with a single except clause while still
getting the context of where and why the failure happened.
"""

from __future__ import annotations
from typing import Optional, Dict, Any


class HDFError(Exception):
    """Base exception with context.

    Attributes:
        msg: The error message
        ctx: Optional dictionary of contextual information (e.g., path, field, profile)
    """

    def __init__(self, msg: str, ctx: Optional[Dict[str, Any]] = None):
        super().__init__(msg)
        self.msg = msg
        self.ctx = ctx or {}

    def __str__(self) -> str:
        if self.ctx:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.ctx.items())
            return f"{self.msg} [{ctx_str}]"
        return self.msg


class MalformedInputError(HDFError):
    """Raised when raw input is unparseable or missing required sections."""


class MalformedChecklistError(MalformedInputError):
    """Raised when a checklist lacks its root, ASSET or iSTIG sections."""


class UnresolvedTransformError(HDFError):
    """Raised when a mapping transformer fails during a conversion."""


class FileError(HDFError):
    """Raised when file operations fail."""


class UnmappedSeverityWarning(UserWarning):
    """Issued when a severity value has no entry in the impact table."""
