"""
Copy-on-write structural edits of an architecture tree.

Every function takes the canonical tree and returns a MutationResult whose
`tree` is either a fresh deep copy carrying the edit (`changed=True`) or the
untouched input (`changed=False`). The input tree is never modified.
"""

from dataclasses import dataclass
from typing import List, Optional

from archgraph.graph.errors import RootDeletionError
from archgraph.graph.normalize import new_node_id
from archgraph.graph.search import find_node, find_path
from archgraph.graph.types import GraphNode

NEW_NODE_TITLE = "New Node"
NEW_NODE_DESCRIPTION = "Describe this component."


@dataclass
class MutationResult:
    tree: GraphNode
    changed: bool
    focus_id: Optional[str] = None
    message: str = ""
    node_id: Optional[str] = None  # node created or touched by the edit


def edit_node(
    tree: GraphNode,
    node_id: str,
    title: str,
    description: str,
    focus_id: Optional[str] = None,
) -> MutationResult:
    draft = tree.copy()
    node = find_node(draft, node_id)
    if node is None:
        return MutationResult(tree, False, focus_id, f"Node '{node_id}' not found")

    node.title = title
    node.description = description
    return MutationResult(draft, True, focus_id, node_id=node_id)


def update_node_code(
    tree: GraphNode,
    node_id: str,
    code: str,
    focus_id: Optional[str] = None,
) -> MutationResult:
    draft = tree.copy()
    node = find_node(draft, node_id)
    if node is None:
        return MutationResult(tree, False, focus_id, f"Node '{node_id}' not found")

    node.code = code or ""
    return MutationResult(draft, True, focus_id, node_id=node_id)


def delete_node(
    tree: GraphNode,
    node_id: str,
    focus_id: Optional[str] = None,
) -> MutationResult:
    """
    Remove the node and its whole subtree.

    Raises RootDeletionError for the root. When the focus was the deleted
    node, or anything beneath it, the focus moves to the deleted node's
    parent.
    """
    if node_id == tree.id:
        raise RootDeletionError(node_id)

    draft = tree.copy()
    path: List[GraphNode] = []
    if not find_path(draft, node_id, path):
        return MutationResult(tree, False, focus_id, f"Node '{node_id}' not found")

    target = path[-1]
    parent = path[-2]
    # Identity, not id equality: with duplicate ids only the matched child goes
    parent.children = [child for child in parent.children if child is not target]

    if focus_id is not None and find_node(target, focus_id) is not None:
        focus_id = parent.id

    return MutationResult(draft, True, focus_id, node_id=node_id)


def add_child_node(
    tree: GraphNode,
    parent_id: str,
    focus_id: Optional[str] = None,
) -> MutationResult:
    draft = tree.copy()
    parent = find_node(draft, parent_id)
    if parent is None:
        return MutationResult(tree, False, focus_id, f"Node '{parent_id}' not found")

    child = GraphNode(
        id=new_node_id(),
        title=NEW_NODE_TITLE,
        description=NEW_NODE_DESCRIPTION,
        depth=parent.depth + 1,
        code="",
        children=[],
    )
    parent.children.append(child)
    return MutationResult(draft, True, focus_id, node_id=child.id)
