"""Pytest configuration and shared fixtures."""
import pytest

from modelerstate import DataModel, reset_current_config
from modelerstate.canvas import CanvasEdge, CanvasNode, Position


@pytest.fixture(autouse=True)
def reset_config():
    """Drop any thread-local config a test installed."""
    reset_current_config()
    yield
    reset_current_config()


@pytest.fixture
def triple():
    """Conceptual -> logical -> physical chain (ids 1, 2, 3)."""
    return [
        DataModel(id=1, layer="conceptual", name="Sales"),
        DataModel(id=2, layer="logical", parent_model_id=1, name="Sales (logical)"),
        DataModel(id=3, layer="physical", parent_model_id=2, name="Sales (physical)"),
    ]


@pytest.fixture
def two_families(triple):
    """Family A (1, 2, 3) plus an unrelated family B (10, 20, 30)."""
    return triple + [
        DataModel(id=10, layer="conceptual", name="HR"),
        DataModel(id=20, layer="logical", parent_model_id=10, name="HR (logical)"),
        DataModel(id=30, layer="physical", parent_model_id=20, name="HR (physical)"),
    ]


@pytest.fixture
def branched():
    """One conceptual root with two logical branches, each with a physical model.

        1 (C)
        ├── 2 (L) ── 4 (P)
        └── 3 (L) ── 5 (P)
    """
    return [
        DataModel(id=1, layer="conceptual"),
        DataModel(id=2, layer="logical", parent_model_id=1),
        DataModel(id=3, layer="logical", parent_model_id=1),
        DataModel(id=4, layer="physical", parent_model_id=2),
        DataModel(id=5, layer="physical", parent_model_id=3),
    ]


def make_node(node_id, x=0.0, y=0.0, object_id=None):
    data = {'name': f"Object {node_id}"}
    if object_id is not None:
        data['objectId'] = object_id
    return CanvasNode(id=node_id, position=Position(x=x, y=y), data=data)


def make_edge(edge_id, source, target):
    return CanvasEdge(id=edge_id, source=source, target=target, data={'relationshipType': "1:N"})
