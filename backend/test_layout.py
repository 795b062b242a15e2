import random

import pytest

from archgraph.graph.layout import (
    NODE_WIDTH,
    SLOT_WIDTH,
    VERTICAL_GAP,
    count_leaves,
    layout,
    partition,
)
from archgraph.graph.normalize import normalize
from archgraph.graph.search import count_nodes
from archgraph.graph.types import GraphNode
from archgraph.renderer.svg_renderer import render_svg


def random_tree(seed: int, max_depth: int = 5) -> GraphNode:
    rng = random.Random(seed)
    counter = iter(range(10_000))

    def build(depth):
        fan_out = rng.choice([0, 0, 1, 2, 3, 5]) if depth < max_depth else 0
        return {
            "id": f"n{next(counter)}",
            "title": "N",
            "depth": depth,
            "children": [build(depth + 1) for _ in range(fan_out)],
        }

    return normalize(build(1))


def test_count_leaves(tree):
    assert count_leaves(tree) == 3
    assert count_leaves(tree.children[1]) == 2
    assert count_leaves(GraphNode(id="x", title="X")) == 1


def test_parent_of_leaves_counts_children_not_one():
    node = normalize({"children": [{}, {}, {}, {}]})
    assert count_leaves(node) == 4


def test_is_leaf():
    node = normalize({"children": [{}]})

    assert not node.is_leaf
    assert node.children[0].is_leaf


def test_scenario_band_shares(tree):
    bands = {p.node.id: p.band for p in partition(tree)}
    root = bands["sys"]

    assert root.start == 0
    assert root.width == 3 * SLOT_WIDTH
    assert bands["a"].width == pytest.approx(root.width / 3)
    assert bands["b"].width == pytest.approx(root.width * 2 / 3)
    assert bands["b1"].width == pytest.approx(bands["b"].width / 2)
    assert bands["b2"].width == pytest.approx(bands["b"].width / 2)
    assert bands["b"].start == pytest.approx(bands["a"].end)
    assert bands["b2"].start == pytest.approx(bands["b1"].end)


def test_scenario_positions(tree):
    nodes, edges = layout(tree)
    pos = {n.id: (n.position.x, n.position.y) for n in nodes}

    assert pos["sys"] == (420 - NODE_WIDTH / 2, 0)
    assert pos["a"] == (140 - NODE_WIDTH / 2, VERTICAL_GAP)
    assert pos["b"] == (560 - NODE_WIDTH / 2, VERTICAL_GAP)
    assert pos["b1"] == (420 - NODE_WIDTH / 2, 2 * VERTICAL_GAP)
    assert pos["b2"] == (700 - NODE_WIDTH / 2, 2 * VERTICAL_GAP)
    assert [e.id for e in edges] == ["sys->a", "sys->b", "b->b1", "b->b2"]


def test_single_node_has_no_edges():
    nodes, edges = layout(normalize({"id": "solo", "title": "Solo"}))

    assert len(nodes) == 1
    assert edges == []
    assert nodes[0].position.x == SLOT_WIDTH / 2 - NODE_WIDTH / 2
    assert nodes[0].kind == "card"
    assert nodes[0].payload == {"title": "Solo", "description": "", "code": ""}


@pytest.mark.parametrize("seed", range(20))
def test_leaf_bands_tile_root_band(seed):
    tree = random_tree(seed)
    placements = partition(tree)
    root_band = placements[0].band

    leaf_bands = sorted(
        (p.band for p in placements if not p.node.children), key=lambda b: b.start
    )
    assert sum(b.width for b in leaf_bands) / SLOT_WIDTH == pytest.approx(count_leaves(tree))
    assert leaf_bands[0].start == pytest.approx(root_band.start)
    assert leaf_bands[-1].end == pytest.approx(root_band.end)
    for left, right in zip(leaf_bands, leaf_bands[1:]):
        assert left.end == pytest.approx(right.start)


@pytest.mark.parametrize("seed", range(20))
def test_no_overlap_within_a_level(seed):
    tree = random_tree(seed)
    nodes, edges = layout(tree)

    assert len(nodes) == count_nodes(tree)
    assert len(edges) == len(nodes) - 1

    by_level = {}
    for n in nodes:
        by_level.setdefault(n.position.y, []).append(n.position.x)

    for xs in by_level.values():
        xs.sort()
        for left, right in zip(xs, xs[1:]):
            assert left + NODE_WIDTH < right + 1e-9


def test_layout_depends_only_on_shape(tree):
    renamed = normalize(
        {
            "id": "other",
            "children": [
                {"id": "p"},
                {"id": "q", "children": [{"id": "q1"}, {"id": "q2"}]},
            ],
        }
    )
    first = [(n.position.x, n.position.y) for n in layout(tree)[0]]
    second = [(n.position.x, n.position.y) for n in layout(renamed)[0]]
    assert first == second


def test_svg_export(tree):
    nodes, edges = layout(tree)
    svg = render_svg(nodes, edges)

    assert svg.startswith("<svg")
    assert svg.count("<rect") == 5
    assert svg.count("<line") == 4
    assert ">B1</text>" in svg


def test_svg_escapes_titles():
    nodes, edges = layout(normalize({"id": "r", "title": "<Auth & Users>"}))
    assert "&lt;Auth &amp; Users&gt;" in render_svg(nodes, edges)
