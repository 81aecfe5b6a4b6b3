"""
Lookup-path resolution against semi-structured records.

Paths are dotted key sequences with optional bracket steps:

    header.title          nested keys
    stigs[0].vulns        index into a sequence
    findings[*].Detector  every element of a sequence (returns a list)
    $.SourceName          resolve against the conversion root

A missing step never raises; it produces ABSENT, which is distinct from
every real data value (None, False, 0 and "" are all valid data).
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, List, Tuple, Union

ROOT_PREFIX = "$."
WILDCARD = "*"

_STEP = re.compile(r"([^.\[\]]+)|\[(\d+|\*)\]")


class _Absent:
    """Marker for a value that is not present in the record."""

    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: Any) -> "_Absent":
        return self

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

Step = Union[str, int]


def is_absent(value: Any) -> bool:
    """Return True when value is the ABSENT marker."""
    return value is ABSENT


@lru_cache(maxsize=1024)
def parse_path(path: str) -> Tuple[Step, ...]:
    """
    Split a lookup path into steps.

    Args:
        path: Dotted/bracketed path (without the root prefix)

    Returns:
        Tuple of steps; keys are str, indexes are int, "*" is the wildcard

    Raises:
        ValueError: If the path contains characters outside any step

    Example:
        >>> parse_path("a.b[0].c[*]")
        ('a', 'b', 0, 'c', '*')
    """
    steps: List[Step] = []
    pos = 0
    for match in _STEP.finditer(path):
        gap = path[pos:match.start()]
        if gap.strip("."):
            raise ValueError(f"Invalid lookup path: {path!r}")
        pos = match.end()
        key, index = match.groups()
        if key is not None:
            steps.append(key)
        elif index == WILDCARD:
            steps.append(WILDCARD)
        else:
            steps.append(int(index))
    if path[pos:].strip("."):
        raise ValueError(f"Invalid lookup path: {path!r}")
    return tuple(steps)


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _step(value: Any, step: Step) -> Any:
    if isinstance(step, int):
        if is_sequence(value) and -len(value) <= step < len(value):
            return value[step]
        return ABSENT
    if isinstance(value, Mapping):
        return value.get(step, ABSENT)
    return ABSENT


def _walk(value: Any, steps: Tuple[Step, ...]) -> Any:
    for pos, step in enumerate(steps):
        if value is ABSENT:
            return ABSENT
        if step == WILDCARD:
            if not is_sequence(value):
                return ABSENT
            rest = steps[pos + 1:]
            found = [_walk(item, rest) for item in value]
            return [item for item in found if item is not ABSENT]
        value = _step(value, step)
    return value


def resolve(record: Any, path: str, root: Any = ABSENT) -> Any:
    """
    Resolve a lookup path against a record.

    Args:
        record: Current record (mapping, sequence or scalar)
        path: Lookup path; "$." prefix resolves against root
        root: Whole conversion input (defaults to record)

    Returns:
        The value, a list of values for wildcard steps, or ABSENT

    Example:
        >>> resolve({"a": {"b": [1, 2, 3]}}, "a.b")
        [1, 2, 3]
        >>> resolve({}, "x.y")
        ABSENT
    """
    if path.startswith(ROOT_PREFIX):
        record = record if root is ABSENT else root
        path = path[len(ROOT_PREFIX):]
    if not path:
        return record
    return _walk(record, parse_path(path))
