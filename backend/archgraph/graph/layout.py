from dataclasses import dataclass
from typing import Dict, List, Tuple

from archgraph.graph.types import Band, GraphNode, Position, VisualEdge, VisualNode

NODE_WIDTH = 240
HORIZONTAL_GAP = 40
VERTICAL_GAP = 200

# Horizontal space owned by a single leaf
SLOT_WIDTH = NODE_WIDTH + HORIZONTAL_GAP


@dataclass
class Placement:
    node: GraphNode
    parent_id: str | None
    band: Band
    level: int  # 0 for the layout root


def count_leaves(node: GraphNode) -> int:
    if node.is_leaf:
        return 1
    return sum(count_leaves(child) for child in node.children)


def _leaf_table(node: GraphNode, table: Dict[int, int]) -> int:
    # Keyed by object identity: ids are not guaranteed unique
    if node.is_leaf:
        table[id(node)] = 1
    else:
        table[id(node)] = sum(_leaf_table(child, table) for child in node.children)
    return table[id(node)]


def partition(root: GraphNode) -> List[Placement]:
    """
    Leaf-proportional recursive partition of the horizontal axis.

    The root owns [0, leaves(root) * SLOT_WIDTH). Each child receives a
    contiguous slice of its parent's band proportional to its own leaf
    count, left to right in child order. Returned in pre-order.
    """
    leaves: Dict[int, int] = {}
    _leaf_table(root, leaves)

    placements: List[Placement] = []

    def place(node: GraphNode, parent_id: str | None, band: Band, level: int):
        placements.append(Placement(node, parent_id, band, level))

        total = sum(leaves[id(child)] for child in node.children)
        consumed = 0
        for child in node.children:
            share = leaves[id(child)]
            child_band = Band(
                start=band.start + band.width * consumed / total,
                width=band.width * share / total,
            )
            place(child, node.id, child_band, level + 1)
            consumed += share

    place(root, None, Band(0.0, float(leaves[id(root)] * SLOT_WIDTH)), 0)
    return placements


def layout(root: GraphNode) -> Tuple[List[VisualNode], List[VisualEdge]]:
    """
    Turn a (sub)tree into positioned card nodes and parent->child edges.

    Never fails; a single node yields one card and no edges.
    """
    nodes: List[VisualNode] = []
    edges: List[VisualEdge] = []

    for placement in partition(root):
        node = placement.node
        nodes.append(
            VisualNode(
                id=node.id,
                position=Position(
                    x=placement.band.center - NODE_WIDTH / 2,
                    y=float(placement.level * VERTICAL_GAP),
                ),
                kind="card",
                payload={
                    "title": node.title,
                    "description": node.description,
                    "code": node.code or "",
                },
            )
        )

        if placement.parent_id is not None:
            edges.append(
                VisualEdge(
                    id=f"{placement.parent_id}->{node.id}",
                    source=placement.parent_id,
                    target=node.id,
                )
            )

    return nodes, edges
