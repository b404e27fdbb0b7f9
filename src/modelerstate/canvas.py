"""
Live canvas state: nodes, edges and the current selection.

CanvasState is the mutable editor state that HistoryManager snapshots and
restores. Node and edge records are plain mutable dataclasses; history never
stores references to them, only deep copies.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class CanvasNode:
    """A data object drawn on the canvas.

    data carries the object payload (objectId, name, attributes, ...) as
    received from the canvas-loading collaborator.
    """
    id: str
    type: str = "dataObject"
    position: Position = field(default_factory=Position)
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'position': {'x': self.position.x, 'y': self.position.y},
            'data': self.data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CanvasNode':
        position = data.get('position') or {}
        return cls(
            id=data['id'],
            type=data.get('type', "dataObject"),
            position=Position(x=position.get('x', 0.0), y=position.get('y', 0.0)),
            data=dict(data.get('data') or {}),
        )


@dataclass
class CanvasEdge:
    """A relationship drawn between two nodes."""
    id: str
    source: str
    target: str
    type: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'source': self.source,
            'target': self.target,
            'type': self.type,
            'data': self.data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CanvasEdge':
        return cls(
            id=data['id'],
            source=data['source'],
            target=data['target'],
            type=data.get('type'),
            data=dict(data.get('data') or {}),
        )


class CanvasState:
    """Mutable canvas contents plus selection.

    Selecting one kind of element clears the others, mirroring how the
    properties panel shows exactly one thing at a time.

    Thread safety: Not thread-safe (all operations expected on main thread).
    """

    def __init__(self, nodes: Optional[List[CanvasNode]] = None, edges: Optional[List[CanvasEdge]] = None):
        self.nodes: List[CanvasNode] = list(nodes or [])
        self.edges: List[CanvasEdge] = list(edges or [])
        self.selected_node_id: Optional[str] = None
        self.selected_edge_id: Optional[str] = None
        self.selected_object_id: Optional[int] = None
        self.selected_attribute_id: Optional[int] = None

    # ========== CONTENTS ==========

    def set_nodes(self, nodes: List[CanvasNode]) -> None:
        self.nodes = list(nodes)

    def set_edges(self, edges: List[CanvasEdge]) -> None:
        self.edges = list(edges)

    def get_node(self, node_id: str) -> Optional[CanvasNode]:
        return next((node for node in self.nodes if node.id == node_id), None)

    def get_edge(self, edge_id: str) -> Optional[CanvasEdge]:
        return next((edge for edge in self.edges if edge.id == edge_id), None)

    def add_node(self, node: CanvasNode) -> None:
        if self.get_node(node.id) is not None:
            raise ValueError(f"Node '{node.id}' already exists on canvas")
        self.nodes.append(node)

    def update_node(self, node_id: str, **updates: Any) -> CanvasNode:
        """Replace a node with a copy carrying updates (e.g. position=...)."""
        for i, node in enumerate(self.nodes):
            if node.id == node_id:
                self.nodes[i] = replace(node, **updates)
                return self.nodes[i]
        raise KeyError(f"Node '{node_id}' not found on canvas")

    def delete_node(self, node_id: str) -> None:
        """Remove a node together with every edge touching it."""
        if self.get_node(node_id) is None:
            raise KeyError(f"Node '{node_id}' not found on canvas")
        self.nodes = [node for node in self.nodes if node.id != node_id]
        before = len(self.edges)
        self.edges = [edge for edge in self.edges if edge.source != node_id and edge.target != node_id]
        if self.selected_node_id == node_id:
            self.selected_node_id = None
        logger.debug(f"Deleted node {node_id} and {before - len(self.edges)} incident edge(s)")

    def add_edge(self, edge: CanvasEdge) -> None:
        if self.get_edge(edge.id) is not None:
            raise ValueError(f"Edge '{edge.id}' already exists on canvas")
        self.edges.append(edge)

    def update_edge(self, edge_id: str, **updates: Any) -> CanvasEdge:
        for i, edge in enumerate(self.edges):
            if edge.id == edge_id:
                self.edges[i] = replace(edge, **updates)
                return self.edges[i]
        raise KeyError(f"Edge '{edge_id}' not found on canvas")

    def delete_edge(self, edge_id: str) -> None:
        if self.get_edge(edge_id) is None:
            raise KeyError(f"Edge '{edge_id}' not found on canvas")
        self.edges = [edge for edge in self.edges if edge.id != edge_id]
        if self.selected_edge_id == edge_id:
            self.selected_edge_id = None

    def clear(self) -> None:
        """Empty the canvas and drop the selection."""
        self.nodes = []
        self.edges = []
        self.clear_selection()

    # ========== SELECTION ==========

    def select_node(self, node_id: Optional[str]) -> None:
        node = self.get_node(node_id) if node_id is not None else None
        self.selected_node_id = node_id
        self.selected_object_id = node.data.get('objectId') if node is not None else None
        self.selected_edge_id = None
        self.selected_attribute_id = None

    def select_edge(self, edge_id: Optional[str]) -> None:
        self.selected_edge_id = edge_id
        self.selected_node_id = None
        self.selected_attribute_id = None

    def select_attribute(self, attribute_id: Optional[int]) -> None:
        self.selected_attribute_id = attribute_id
        self.selected_node_id = None
        self.selected_edge_id = None

    def select_object(self, object_id: Optional[int]) -> None:
        self.selected_object_id = object_id
        self.selected_node_id = None
        self.selected_edge_id = None
        self.selected_attribute_id = None

    def clear_selection(self) -> None:
        self.selected_node_id = None
        self.selected_edge_id = None
        self.selected_object_id = None
        self.selected_attribute_id = None
