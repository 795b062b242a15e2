from html import escape
from typing import List

from archgraph.graph.layout import NODE_WIDTH
from archgraph.graph.types import VisualEdge, VisualNode

NODE_HEIGHT = 120
PADDING = 20


def render_svg(nodes: List[VisualNode], edges: List[VisualEdge]) -> str:
    """Static SVG export of a laid-out view. Edges run bottom-centre to top-centre."""
    if nodes:
        w = max(n.position.x for n in nodes) + NODE_WIDTH + 2 * PADDING
        h = max(n.position.y for n in nodes) + NODE_HEIGHT + 2 * PADDING
    else:
        w, h = 2 * PADDING, 2 * PADDING

    svg = [
        f'<svg width="{w:g}" height="{h:g}" xmlns="http://www.w3.org/2000/svg">'
    ]

    # Draw edges first
    node_map = {n.id: n for n in nodes}

    for e in edges:
        src = node_map.get(e.source)
        dst = node_map.get(e.target)
        if src is None or dst is None:
            continue

        x1 = src.position.x + PADDING + NODE_WIDTH / 2
        y1 = src.position.y + PADDING + NODE_HEIGHT
        x2 = dst.position.x + PADDING + NODE_WIDTH / 2
        y2 = dst.position.y + PADDING

        svg.append(
            f'<line x1="{x1:g}" y1="{y1:g}" x2="{x2:g}" y2="{y2:g}" '
            f'stroke="{e.style.get("stroke", "#4F8CFF")}" '
            f'stroke-width="{e.style.get("strokeWidth", 2)}"/>'
        )

    # Draw nodes
    for n in nodes:
        x = n.position.x + PADDING
        y = n.position.y + PADDING
        svg.append(
            f'<rect x="{x:g}" y="{y:g}" '
            f'width="{NODE_WIDTH}" height="{NODE_HEIGHT}" '
            f'rx="8" ry="8" fill="#E3F2FD" stroke="#1E88E5"/>'
        )

        svg.append(
            f'<text x="{x + NODE_WIDTH / 2:g}" '
            f'y="{y + NODE_HEIGHT / 2:g}" '
            f'text-anchor="middle" dominant-baseline="middle" '
            f'font-family="Arial" font-size="14">'
            f'{escape(n.payload.get("title", ""))}</text>'
        )

    svg.append("</svg>")
    return "\n".join(svg)
