"""
Mapping tree node types.

A converter describes its output as a tree of nodes. Every node kind is an
explicit class, so the walker dispatches on type and never has to guess
whether a dict is a descriptor or nested structure:

    Literal         constant value
    PathRef         value looked up in the current record
    Transform       function of a looked-up value or of the whole record
    ObjectNode      keyed structure, walked field by field
    CollectionNode  list built from a collection (or the record itself)
    SequenceNode    fixed list of nodes, each walked against the record

Plain Python trees are accepted by compile_spec(): dicts become ObjectNode,
lists and tuples become SequenceNode, node instances pass through, and
everything else becomes a Literal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

from hdf_converters.mapping.path import ABSENT


class Node:
    """Base class of all mapping tree nodes."""

    __slots__ = ()


@dataclass(frozen=True)
class Literal(Node):
    """Constant emitted as-is (deep-copied per conversion)."""

    value: Any


@dataclass(frozen=True)
class PathRef(Node):
    """Value resolved from the current record.

    Attributes:
        path: Lookup path (see mapping.path)
        default: Value used when the path is absent
    """

    path: str
    default: Any = ABSENT


@dataclass(frozen=True)
class Transform(Node):
    """Function applied to a resolved value, or to the whole record.

    Attributes:
        fn: Callable receiving the resolved value
        path: Lookup path; None passes the current record
        default: Value used when the path is absent (fn is not called)
    """

    fn: Callable[[Any], Any]
    path: Optional[str] = None
    default: Any = ABSENT

    @property
    def name(self) -> str:
        return getattr(self.fn, "__qualname__", None) or repr(self.fn)


@dataclass(frozen=True)
class ObjectNode(Node):
    """Keyed structure.

    Attributes:
        fields: Output key → node, in output order
        merge: Transform whose mapping result is merged into the object
    """

    fields: Mapping[str, Node] = field(default_factory=dict)
    merge: Optional[Transform] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class CollectionNode(Node):
    """List built by mapping each element of a collection.

    Attributes:
        item: Node walked once per element
        path: Lookup path of the collection; None maps the current record once
        key: Field identifying duplicates when results are collapsed
        array_transformer: Function receiving the full list of mapped items
    """

    item: Node
    path: Optional[str] = None
    key: Optional[str] = None
    array_transformer: Optional[Callable[[list], list]] = None


@dataclass(frozen=True)
class SequenceNode(Node):
    """Fixed-length list; every element is walked against the current record."""

    items: Tuple[Node, ...] = ()


def compile_spec(value: Any) -> Node:
    """
    Convert a plain mapping tree into nodes.

    Args:
        value: Node, dict of sub-trees, or any constant

    Returns:
        Equivalent node tree

    Example:
        >>> compile_spec({"version": "1.0", "name": PathRef("header.title")})
        ObjectNode(fields=..., merge=None)
    """
    if isinstance(value, ObjectNode):
        return ObjectNode(
            {key: compile_spec(sub) for key, sub in value.fields.items()},
            merge=value.merge,
        )
    if isinstance(value, CollectionNode):
        return CollectionNode(
            compile_spec(value.item),
            path=value.path,
            key=value.key,
            array_transformer=value.array_transformer,
        )
    if isinstance(value, SequenceNode):
        return SequenceNode(tuple(compile_spec(sub) for sub in value.items))
    if isinstance(value, Node):
        return value
    if isinstance(value, dict):
        return ObjectNode({key: compile_spec(sub) for key, sub in value.items()})
    if isinstance(value, (list, tuple)):
        return SequenceNode(tuple(compile_spec(sub) for sub in value))
    return Literal(value)
