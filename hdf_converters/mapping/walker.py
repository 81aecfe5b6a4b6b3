"""
Mapping tree walker.

Recursively interprets a node tree against an input record and builds an
output of the same shape: ObjectNode → dict, CollectionNode and SequenceNode
→ list, leaves through the field transformer engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from hdf_converters.exceptions import MalformedInputError, UnresolvedTransformError
from hdf_converters.mapping.nodes import CollectionNode, Node, ObjectNode, SequenceNode, Transform
from hdf_converters.mapping.path import ABSENT, is_sequence, resolve
from hdf_converters.mapping.transform import apply_transform, evaluate


def walk(node: Node, record: Any, root: Any = ABSENT) -> Any:
    """
    Walk a mapping tree over a record.

    Args:
        node: Compiled mapping tree (see nodes.compile_spec)
        record: Current input record
        root: Whole conversion input; defaults to record at the top call

    Returns:
        Output mirroring the node's shape; ABSENT for a missing leaf

    Raises:
        MalformedInputError: If a collection path resolves to a scalar
        UnresolvedTransformError: If a transformer fails
    """
    if root is ABSENT:
        root = record

    if isinstance(node, ObjectNode):
        return _walk_object(node, record, root)
    if isinstance(node, CollectionNode):
        return _walk_collection(node, record, root)
    if isinstance(node, SequenceNode):
        return [v for v in (walk(sub, record, root) for sub in node.items) if v is not ABSENT]
    return evaluate(node, record, root)


def _walk_object(node: ObjectNode, record: Any, root: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, sub in node.fields.items():
        value = walk(sub, record, root)
        if value is not ABSENT:
            out[key] = value

    if node.merge is not None:
        extra = evaluate(node.merge, record, root)
        if extra is ABSENT:
            return out
        if not isinstance(extra, Mapping):
            raise UnresolvedTransformError(
                "Merge transformer must return a mapping",
                {"transformer": node.merge.name, "type": type(extra).__name__},
            )
        out.update(extra)
    return out


def _items(node: CollectionNode, record: Any, root: Any) -> List[Any]:
    if node.path is None:
        return [record]

    found = resolve(record, node.path, root)
    if found is ABSENT or found is None:
        return []
    if isinstance(found, Mapping):
        # A lone element parsed without its enclosing list
        return [found]
    if is_sequence(found):
        return list(found)
    raise MalformedInputError(
        "Collection path does not resolve to a collection",
        {"path": node.path, "type": type(found).__name__},
    )


def _walk_collection(node: CollectionNode, record: Any, root: Any) -> List[Any]:
    mapped = []
    for item in _items(node, record, root):
        value = walk(node.item, item, root)
        if value is not ABSENT:
            mapped.append(value)

    if node.array_transformer is None:
        return mapped

    result = apply_transform(Transform(node.array_transformer, path=node.path), mapped)
    if not isinstance(result, list):
        raise UnresolvedTransformError(
            "Array transformer must return a list",
            {"path": node.path or "<record>", "type": type(result).__name__},
        )
    return result


def collapse_duplicates(
    items: List[Dict[str, Any]],
    key: str,
    merge_field: str = "results",
) -> List[Dict[str, Any]]:
    """
    Merge items that share the same key value.

    The first occurrence of each key keeps its position; the merge_field
    lists of later duplicates are appended to it. Items without the key are
    kept unchanged.

    Args:
        items: Mapped items (e.g. controls)
        key: Identifying field (e.g. "id")
        merge_field: List field concatenated across duplicates

    Returns:
        New list of items; the input is not modified
    """
    out: List[Dict[str, Any]] = []
    seen: Dict[Any, Dict[str, Any]] = {}
    for item in items:
        ident: Optional[Any] = item.get(key) if isinstance(item, Mapping) else None
        if ident is None:
            out.append(item)
            continue
        first = seen.get(ident)
        if first is None:
            first = dict(item)
            first[merge_field] = list(item.get(merge_field, []))
            seen[ident] = first
            out.append(first)
        else:
            first[merge_field].extend(item.get(merge_field, []))
    return out
