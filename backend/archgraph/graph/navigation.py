import logging
from typing import List, Optional

from archgraph.graph.errors import FocusNotFoundError
from archgraph.graph.layout import layout
from archgraph.graph.search import find_path
from archgraph.graph.types import GraphNode, GraphView

logger = logging.getLogger(__name__)


class NavigationController:
    """
    Tracks the focused node and derives the breadcrumb trail.

    The view is always recomputed from the canonical root; nothing is
    patched incrementally. A focus id that is no longer in the tree falls
    back to the full tree with empty breadcrumbs, unless `strict` is set,
    in which case FocusNotFoundError is raised and the focus is left as it
    was.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.focus_id: Optional[str] = None
        self.breadcrumbs: List[GraphNode] = []

    def view(self, root: Optional[GraphNode]) -> GraphView:
        if root is None:
            self.breadcrumbs = []
            return GraphView()

        if self.focus_id is None:
            self.breadcrumbs = []
            nodes, edges = layout(root)
            return GraphView(nodes=nodes, edges=edges, breadcrumbs=[])

        path: List[GraphNode] = []
        if not find_path(root, self.focus_id, path):
            logger.info("Focus '%s' not found, rendering full tree", self.focus_id)
            self.breadcrumbs = []
            nodes, edges = layout(root)
            return GraphView(nodes=nodes, edges=edges, breadcrumbs=[])

        self.breadcrumbs = path
        nodes, edges = layout(path[-1])
        return GraphView(nodes=nodes, edges=edges, breadcrumbs=list(path))

    def set_focus(self, root: Optional[GraphNode], node_id: str) -> GraphView:
        if self.strict and root is not None and not find_path(root, node_id, []):
            raise FocusNotFoundError(node_id)

        self.focus_id = node_id
        return self.view(root)

    def clear_focus(self, root: Optional[GraphNode]) -> GraphView:
        self.focus_id = None
        return self.view(root)

    def go_back(self, root: Optional[GraphNode]) -> GraphView:
        if len(self.breadcrumbs) > 1:
            return self.set_focus(root, self.breadcrumbs[-2].id)
        return self.clear_focus(root)
