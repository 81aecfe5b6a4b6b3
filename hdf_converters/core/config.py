"""
hdf-converters configuration.

Process-wide settings read once from HDF_CONVERTERS_* environment variables.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Dict, Optional

from hdf_converters.core.constants import PARENT_PROFILE_NAME


class Cfg:
    """
    Application configuration.

    Provides:
    - Logging destination and level
    - Location of the CCI→NIST reference table
    - Policy for severities missing from the impact table
    - Name of the synthetic parent profile

    Settings are class attributes, initialized once by init(). They are
    treated as read-only while conversions run.

    Thread-safe: Yes (uses RLock for initialization)
    """

    ENV_PREFIX = "HDF_CONVERTERS_"

    # Logging
    LOG_DIR: Optional[Path] = None
    LOG_LEVEL = "INFO"

    # Reference data (None = bundled table)
    CCI_NIST_PATH: Optional[Path] = None

    # Impact scoring
    UNMAPPED_SEVERITY = "warn"  # "warn" or "error"
    DEFAULT_IMPACT = 0.0

    # Checklist aggregation
    PARENT_PROFILE = PARENT_PROFILE_NAME

    SEVERITY_POLICIES = frozenset(["warn", "error"])

    _lock = threading.RLock()
    _done = False

    @classmethod
    def init(cls, environ: Optional[Dict[str, str]] = None) -> None:
        """
        Initialize settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If a setting has an invalid value
        """
        with cls._lock:
            if cls._done:
                return
            env = os.environ if environ is None else environ

            def get(name: str) -> Optional[str]:
                val = env.get(cls.ENV_PREFIX + name)
                if val is None or not val.strip():
                    return None
                return val.strip()

            log_dir = get("LOG_DIR")
            if log_dir:
                cls.LOG_DIR = Path(log_dir).expanduser()
                cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

            level = get("LOG_LEVEL")
            if level:
                cls.LOG_LEVEL = level.upper()

            cci_path = get("CCI_NIST_PATH")
            if cci_path:
                cls.CCI_NIST_PATH = Path(cci_path).expanduser()

            policy = get("UNMAPPED_SEVERITY")
            if policy:
                policy = policy.lower()
                if policy not in cls.SEVERITY_POLICIES:
                    raise ValueError(
                        f"{cls.ENV_PREFIX}UNMAPPED_SEVERITY must be one of "
                        f"{', '.join(sorted(cls.SEVERITY_POLICIES))}, got {policy!r}"
                    )
                cls.UNMAPPED_SEVERITY = policy

            parent = get("PARENT_PROFILE")
            if parent:
                cls.PARENT_PROFILE = parent

            cls._done = True

    @classmethod
    def reset(cls) -> None:
        """Restore defaults so init() can run again (used by tests)."""
        with cls._lock:
            cls.LOG_DIR = None
            cls.LOG_LEVEL = "INFO"
            cls.CCI_NIST_PATH = None
            cls.UNMAPPED_SEVERITY = "warn"
            cls.DEFAULT_IMPACT = 0.0
            cls.PARENT_PROFILE = PARENT_PROFILE_NAME
            cls._done = False


# Settings are read on first import
Cfg.init()
