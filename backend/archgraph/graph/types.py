from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class GraphNode:
    id: str
    title: str
    description: str = ""
    depth: int = 1
    code: str = ""
    children: List["GraphNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "depth": self.depth,
            "code": self.code,
            "children": [child.to_dict() for child in self.children],
        }

    def copy(self) -> "GraphNode":
        """Deep copy; the returned tree shares no nodes with this one."""
        return GraphNode(
            id=self.id,
            title=self.title,
            description=self.description,
            depth=self.depth,
            code=self.code,
            children=[child.copy() for child in self.children],
        )


@dataclass
class Position:
    x: float
    y: float


@dataclass
class Band:
    start: float
    width: float

    @property
    def end(self) -> float:
        return self.start + self.width

    @property
    def center(self) -> float:
        return self.start + self.width / 2


@dataclass
class VisualNode:
    id: str
    position: Position
    kind: str = "card"
    payload: Dict[str, str] = field(default_factory=dict)  # title, description, code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": {"x": self.position.x, "y": self.position.y},
            "type": self.kind,
            "data": dict(self.payload),
        }


@dataclass
class VisualEdge:
    id: str
    source: str
    target: str
    animated: bool = True
    style: Dict[str, Any] = field(
        default_factory=lambda: {"stroke": "#4F8CFF", "strokeWidth": 2}
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "animated": self.animated,
            "style": dict(self.style),
        }


@dataclass
class GraphView:
    nodes: List[VisualNode] = field(default_factory=list)
    edges: List[VisualEdge] = field(default_factory=list)
    breadcrumbs: List[GraphNode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "breadcrumbs": [
                {"id": b.id, "title": b.title, "depth": b.depth}
                for b in self.breadcrumbs
            ],
        }
