import pytest

from archgraph.graph.normalize import normalize


def scenario_raw():
    return {
        "id": "sys",
        "title": "System",
        "children": [
            {"id": "a", "title": "A", "depth": 2, "children": []},
            {
                "id": "b",
                "title": "B",
                "depth": 2,
                "children": [
                    {"id": "b1", "title": "B1", "depth": 3, "children": []},
                    {"id": "b2", "title": "B2", "depth": 3, "children": []},
                ],
            },
        ],
    }


@pytest.fixture
def raw_tree():
    return scenario_raw()


@pytest.fixture
def tree():
    return normalize(scenario_raw())
