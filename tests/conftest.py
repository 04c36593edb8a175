"""Shared fixtures."""

from __future__ import annotations

import pytest

from layermap.core.graph.graph import Graph


def build_farm() -> Graph:
    """Farming
    ├── Land
    │   ├── Barn1 (Potato, Yam)
    │   └── Barn2
    ├── People (PersonA, PersonB)
    └── Animals (Cows, Chickens)

    Edges: PersonA -> PersonB, Barn2 -> Chickens, Potato <-> Yam.
    """
    graph = Graph("Farming")
    root = graph.root

    land = root.upsert("Land")
    barn1 = land.upsert("Barn1")
    barn1.upsert("Potato").set_as_leaf("Potato")
    barn1.upsert("Yam").set_as_leaf("Yam")
    land.upsert("Barn2").is_leaf = True

    people = root.upsert("People")
    people.upsert("PersonA").is_leaf = True
    people.upsert("PersonB").is_leaf = True

    animals = root.upsert("Animals")
    animals.upsert("Cows").is_leaf = True
    animals.upsert("Chickens").is_leaf = True

    graph.upsert_edge(people.get_by_name("PersonA"), people.get_by_name("PersonB"))
    graph.upsert_edge(land.get_by_name("Barn2"), animals.get_by_name("Chickens"))
    graph.upsert_edge(graph.get_leaf("Potato"), graph.get_leaf("Yam"))
    graph.upsert_edge(graph.get_leaf("Yam"), graph.get_leaf("Potato"))
    return graph


@pytest.fixture
def farm_graph() -> Graph:
    return build_farm()


def _find(graph: Graph, path: str):
    current = graph.root
    for name in path.split("/"):
        current = current.get_by_name(name)
        assert current is not None, f"{name!r} not found in {path!r}"
    return current


@pytest.fixture
def find():
    """Look up a container by ``/``-separated names below the root."""
    return _find


@pytest.fixture
def make_farm():
    """Factory for independent copies of the farm graph."""
    return build_farm
