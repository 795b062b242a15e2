# Architecture graph engine
# Normalization, search, layout, navigation and copy-on-write mutation of decomposition trees

from archgraph.graph.types import GraphNode, VisualNode, VisualEdge, GraphView
from archgraph.graph.normalize import normalize
from archgraph.graph.search import find_node, find_path, find_parent
from archgraph.graph.layout import layout, count_leaves
from archgraph.graph.navigation import NavigationController
from archgraph.graph.mutation import (
    MutationResult,
    edit_node,
    delete_node,
    add_child_node,
    update_node_code,
)
from archgraph.graph.errors import (
    ArchGraphError,
    RootDeletionError,
    FocusNotFoundError,
    ExternalServiceError,
    PersistenceError,
)

__all__ = [
    "GraphNode",
    "VisualNode",
    "VisualEdge",
    "GraphView",
    "normalize",
    "find_node",
    "find_path",
    "find_parent",
    "layout",
    "count_leaves",
    "NavigationController",
    "MutationResult",
    "edit_node",
    "delete_node",
    "add_child_node",
    "update_node_code",
    "ArchGraphError",
    "RootDeletionError",
    "FocusNotFoundError",
    "ExternalServiceError",
    "PersistenceError",
]
