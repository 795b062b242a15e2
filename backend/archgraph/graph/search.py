from typing import Iterator, List, Optional

from archgraph.graph.types import GraphNode


def iter_nodes(root: GraphNode) -> Iterator[GraphNode]:
    """Pre-order traversal: node before its children, children in order."""
    yield root
    for child in root.children:
        yield from iter_nodes(child)


def count_nodes(root: GraphNode) -> int:
    return sum(1 for _ in iter_nodes(root))


def collect_ids(root: GraphNode) -> List[str]:
    return [node.id for node in iter_nodes(root)]


def find_node(root: GraphNode, node_id: str) -> Optional[GraphNode]:
    # Duplicate ids resolve to the first pre-order match
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def find_path(root: GraphNode, node_id: str, path: List[GraphNode]) -> bool:
    """
    Backtracking path search.

    On success `path` holds root..target inclusive and True is returned.
    On failure every node pushed during the search has been popped again.
    """
    path.append(root)
    if root.id == node_id:
        return True

    for child in root.children:
        if find_path(child, node_id, path):
            return True

    path.pop()
    return False


def find_parent(root: GraphNode, node_id: str) -> Optional[GraphNode]:
    # Resolved through the path so the parent belongs to the same match find_node returns
    path: List[GraphNode] = []
    if not find_path(root, node_id, path) or len(path) < 2:
        return None
    return path[-2]
