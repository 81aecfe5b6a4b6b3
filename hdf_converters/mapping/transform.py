"""Field transformer engine: evaluation of leaf mapping nodes."""

from __future__ import annotations

import copy
from typing import Any

from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import HDFError, UnresolvedTransformError
from hdf_converters.mapping.nodes import Literal, Node, PathRef, Transform
from hdf_converters.mapping.path import ABSENT, resolve


def evaluate(node: Node, record: Any, root: Any = ABSENT) -> Any:
    """
    Produce the value of one leaf node for the current record.

    Args:
        node: Literal, PathRef or Transform
        record: Current record
        root: Whole conversion input, used by "$." paths

    Returns:
        The computed value, or ABSENT when a path is missing and no default is set

    Raises:
        UnresolvedTransformError: If a transformer function fails
        TypeError: If node is not a leaf node
    """
    if isinstance(node, Literal):
        return copy.deepcopy(node.value)

    if isinstance(node, PathRef):
        value = resolve(record, node.path, root)
        if value is ABSENT:
            return node.default
        return value

    if isinstance(node, Transform):
        if node.path is None:
            value = record
        else:
            value = resolve(record, node.path, root)
            if value is ABSENT:
                return node.default
        return apply_transform(node, value)

    raise TypeError(f"Not a leaf mapping node: {type(node).__name__}")


def apply_transform(node: Transform, value: Any) -> Any:
    """Invoke a transformer, converting foreign failures to UnresolvedTransformError."""
    try:
        return node.fn(value)
    except HDFError:
        raise
    except Exception as exc:
        LOG.d(f"Transformer {node.name} failed on path {node.path}: {exc}")
        raise UnresolvedTransformError(
            f"Transformer failed: {exc}",
            {"transformer": node.name, "path": node.path or "<record>"},
        ) from exc
