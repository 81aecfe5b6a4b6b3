"""
Declarative mapping engine.

This package contains lookup-path resolution, the mapping tree
node types, leaf evaluation, and the recursive tree walker used by every
tool-specific converter.
"""

from __future__ import annotations

from hdf_converters.mapping.path import ABSENT, is_absent, resolve
from hdf_converters.mapping.nodes import (
    CollectionNode,
    Literal,
    Node,
    ObjectNode,
    PathRef,
    SequenceNode,
    Transform,
    compile_spec,
)
from hdf_converters.mapping.transform import evaluate
from hdf_converters.mapping.walker import collapse_duplicates, walk

__all__ = [
    "ABSENT",
    "is_absent",
    "resolve",
    "Node",
    "Literal",
    "PathRef",
    "Transform",
    "ObjectNode",
    "CollectionNode",
    "SequenceNode",
    "compile_spec",
    "evaluate",
    "walk",
    "collapse_duplicates",
]
