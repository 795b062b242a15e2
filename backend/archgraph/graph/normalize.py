import uuid
from typing import Any

from archgraph.graph.types import GraphNode


def new_node_id(prefix: str = "node") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _text(value: Any, default: str) -> str:
    if not value:
        return default
    if isinstance(value, str):
        return value
    return str(value)


def _depth(value: Any) -> int:
    if not value:
        return 1
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 1


def normalize(raw: Any) -> GraphNode:
    """
    Coerce an untrusted tree-shaped value into a well-formed GraphNode.

    Applied recursively to every entry of `children`:
    - missing id          -> generated "node-xxxxxxxx"
    - missing title       -> "Untitled"
    - missing description -> ""
    - missing depth       -> 1 (a default, never derived from the parent)
    - missing code        -> ""
    - non-list children   -> []

    NEVER throws. Malformed substructures are coerced, not rejected.
    """
    if isinstance(raw, GraphNode):
        raw = raw.to_dict()

    if not isinstance(raw, dict):
        raw = {}

    children = raw.get("children")
    if not isinstance(children, (list, tuple)):
        children = []

    return GraphNode(
        id=_text(raw.get("id"), "") or new_node_id(),
        title=_text(raw.get("title"), "Untitled"),
        description=_text(raw.get("description"), ""),
        depth=_depth(raw.get("depth")),
        code=_text(raw.get("code"), ""),
        children=[normalize(child) for child in children],
    )
