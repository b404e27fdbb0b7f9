"""
CanvasSnapshot and HistoryEntry dataclasses for the undo/redo log.

Design Philosophy: Correct by Construction
- Immutable entries (frozen dataclass)
- Snapshots hold deep copies, never live canvas records
- UUID-based identity for entries
"""

import copy
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from modelerstate.canvas import CanvasEdge, CanvasNode


class HistoryAction:
    """Action tags emitted by canvas edit handlers.

    Tags are free-form strings; these are the ones the editor uses.
    """
    INITIAL = "initial"
    NODE_MOVED = "node_moved"
    NODE_ADDED = "node_added"
    NODE_DELETED = "node_deleted"
    EDGE_ADDED = "edge_added"
    EDGE_DELETED = "edge_deleted"
    OBJECT_ADDED = "object_added"
    AREA_ADDED = "area_added"
    RELATIONSHIP_UPDATED = "relationship_updated"
    RELATIONSHIP_DELETED = "relationship_deleted"
    LAYOUT_APPLIED = "layout_applied"


@dataclass(frozen=True)
class CanvasSnapshot:
    """Immutable copy of the complete canvas contents."""
    nodes: Tuple[Any, ...]
    edges: Tuple[Any, ...]

    @classmethod
    def capture(cls, nodes: Sequence[Any], edges: Sequence[Any]) -> 'CanvasSnapshot':
        """Deep-copy live nodes and edges into a new snapshot."""
        return cls(nodes=tuple(copy.deepcopy(list(nodes))), edges=tuple(copy.deepcopy(list(edges))))

    def restore(self) -> Tuple[list, list]:
        """Return fresh deep copies of the stored nodes and edges."""
        return copy.deepcopy(list(self.nodes)), copy.deepcopy(list(self.edges))

    def to_dict(self) -> Dict:
        return {
            'nodes': [_export_record(node) for node in self.nodes],
            'edges': [_export_record(edge) for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CanvasSnapshot':
        return cls(
            nodes=tuple(_import_record(n) for n in data['nodes']),
            edges=tuple(_import_record(e) for e in data['edges']),
        )


# Export tag marking records that are rebuilt as CanvasNode/CanvasEdge on import
RECORD_TAG = '_record'
_RECORD_TYPES = {'node': CanvasNode, 'edge': CanvasEdge}


def _export_record(record: Any) -> Any:
    for tag, record_type in _RECORD_TYPES.items():
        if isinstance(record, record_type):
            exported = copy.deepcopy(record.to_dict())
            exported[RECORD_TAG] = tag
            return exported
    # Opaque records are exported as-is
    return copy.deepcopy(record)


def _import_record(data: Any) -> Any:
    if isinstance(data, dict) and data.get(RECORD_TAG) in _RECORD_TYPES:
        return _RECORD_TYPES[data[RECORD_TAG]].from_dict(data)
    return copy.deepcopy(data)


@dataclass(frozen=True)
class HistoryEntry:
    """One recorded canvas state in the undo/redo log."""
    id: str
    timestamp: float
    action: str
    description: str
    node_count: int
    edge_count: int
    preview: Optional[str]
    snapshot: CanvasSnapshot

    @classmethod
    def create(
        cls,
        action: str,
        description: str,
        nodes: Sequence[Any],
        edges: Sequence[Any],
        preview: Optional[str] = None,
    ) -> 'HistoryEntry':
        """Create a new entry with auto-generated ID and timestamp."""
        return cls(
            id=f"history_{uuid.uuid4().hex}",
            timestamp=time.time(),
            action=action,
            description=description,
            node_count=len(nodes),
            edge_count=len(edges),
            preview=preview,
            snapshot=CanvasSnapshot.capture(nodes, edges),
        )

    def to_dict(self) -> Dict:
        """Export to JSON-serializable dict."""
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'action': self.action,
            'description': self.description,
            'node_count': self.node_count,
            'edge_count': self.edge_count,
            'preview': self.preview,
            'snapshot': self.snapshot.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'HistoryEntry':
        """Import from dict (e.g., loaded from JSON)."""
        snapshot = CanvasSnapshot.from_dict(data['snapshot'])
        return cls(
            id=data['id'],
            timestamp=data['timestamp'],
            action=data['action'],
            description=data['description'],
            node_count=data.get('node_count', len(snapshot.nodes)),
            edge_count=data.get('edge_count', len(snapshot.edges)),
            preview=data.get('preview'),
            snapshot=snapshot,
        )
