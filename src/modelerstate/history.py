"""
HistoryManager: bounded, linear undo/redo log over canvas snapshots.

The log is a list of HistoryEntry plus a single cursor (history_index) pointing
at the entry the canvas currently shows. Saving after an undo discards the redo
branch permanently - history is linear, not a DAG. Once the log grows past
max_history_size the oldest entries are evicted and the cursor is shifted so it
keeps pointing at the same logical entry.

Every save deep-copies the live canvas in, and every restore deep-copies the
stored snapshot out, so live editor records never alias stored history.
"""
import datetime
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from modelerstate.canvas import CanvasState
from modelerstate.config import ModelerConfig, get_current_config
from modelerstate.history_model import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryManager:
    """Undo/redo log bound to one live CanvasState.

    Owns its entry list and cursor exclusively; callers go through the public
    methods only.

    Thread safety: Not thread-safe (all operations expected on main thread).
    """

    def __init__(self, canvas: CanvasState, config: Optional[ModelerConfig] = None):
        self.canvas = canvas
        self.max_history_size: int = (config or get_current_config()).max_history_size
        self._history: List[HistoryEntry] = []
        self._history_index: int = -1
        # Fired after any change to entries or cursor; used by the timeline widget
        self._on_history_changed_callbacks: List[Callable[[], None]] = []

    # ========== CALLBACKS ==========

    def add_history_changed_callback(self, callback: Callable[[], None]) -> None:
        """Subscribe to history change events (save, undo/redo, clear)."""
        if callback not in self._on_history_changed_callbacks:
            self._on_history_changed_callbacks.append(callback)

    def remove_history_changed_callback(self, callback: Callable[[], None]) -> None:
        """Unsubscribe from history change events."""
        if callback in self._on_history_changed_callbacks:
            self._on_history_changed_callbacks.remove(callback)

    def _fire_history_changed_callbacks(self) -> None:
        for callback in list(self._on_history_changed_callbacks):
            try:
                callback()
            except Exception as e:
                logger.warning(f"Error in history_changed callback: {e}")

    # ========== STATE ==========

    @property
    def history(self) -> List[HistoryEntry]:
        """Copy of the entry list, oldest first."""
        return list(self._history)

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def current_entry(self) -> Optional[HistoryEntry]:
        if self._history_index < 0:
            return None
        return self._history[self._history_index]

    def __len__(self) -> int:
        return len(self._history)

    def can_undo(self) -> bool:
        return self._history_index > 0

    def can_redo(self) -> bool:
        return self._history_index < len(self._history) - 1

    # ========== RECORDING ==========

    def save_to_history(self, action: str, description: str, preview: Optional[str] = None) -> HistoryEntry:
        """Record the live canvas as a new entry.

        Discards any entries after the cursor, appends, then evicts from the
        oldest end while the log exceeds max_history_size.

        Args:
            action: Action tag (see HistoryAction)
            description: Human-readable description for the timeline
            preview: Optional short preview text

        Returns:
            The recorded entry
        """
        del self._history[self._history_index + 1:]

        entry = HistoryEntry.create(action, description, self.canvas.nodes, self.canvas.edges, preview)
        self._history.append(entry)
        self._history_index = len(self._history) - 1

        while len(self._history) > self.max_history_size:
            evicted = self._history.pop(0)
            self._history_index -= 1
            logger.debug(f"HISTORY: Evicted oldest entry '{evicted.description}' ({evicted.id})")

        logger.debug(
            f"HISTORY: Recorded {action} '{description}' "
            f"(index={self._history_index}, size={len(self._history)})"
        )
        self._fire_history_changed_callbacks()
        return entry

    def clear_history(self) -> None:
        """Reset to the empty log (cursor -1)."""
        self._history.clear()
        self._history_index = -1
        logger.debug("HISTORY: Cleared")
        self._fire_history_changed_callbacks()

    # ========== NAVIGATION ==========

    def _restore_current(self) -> None:
        nodes, edges = self._history[self._history_index].snapshot.restore()
        self.canvas.set_nodes(nodes)
        self.canvas.set_edges(edges)

    def undo(self) -> bool:
        """Step back one entry. Returns False if there is nothing to undo."""
        if not self.can_undo():
            return False
        self._history_index -= 1
        self._restore_current()
        logger.debug(f"HISTORY: Undo to index {self._history_index}")
        self._fire_history_changed_callbacks()
        return True

    def redo(self) -> bool:
        """Step forward one entry. Returns False if there is nothing to redo."""
        if not self.can_redo():
            return False
        self._history_index += 1
        self._restore_current()
        logger.debug(f"HISTORY: Redo to index {self._history_index}")
        self._fire_history_changed_callbacks()
        return True

    def jump_to(self, index: int) -> bool:
        """Move the cursor directly to index (timeline click).

        Equivalent to the matching number of undo()/redo() calls.
        Negative indices count from the newest entry.
        """
        if index < 0:
            index = len(self._history) + index

        if index < 0 or index >= len(self._history):
            logger.warning(f"HISTORY: Index {index} out of range [0, {len(self._history) - 1}]")
            return False

        if index == self._history_index:
            return True

        self._history_index = index
        self._restore_current()
        logger.debug(f"HISTORY: Jumped to index {index}")
        self._fire_history_changed_callbacks()
        return True

    def get_history_info(self) -> List[Dict[str, Any]]:
        """Get human-readable history for UI display, oldest first."""
        result = []
        for i, entry in enumerate(self._history):
            result.append({
                'index': i,
                'id': entry.id,
                'timestamp': datetime.datetime.fromtimestamp(entry.timestamp).strftime('%H:%M:%S.%f')[:-3],
                'action': entry.action,
                'description': entry.description,
                'node_count': entry.node_count,
                'edge_count': entry.edge_count,
                'preview': entry.preview,
                'is_current': i == self._history_index,
                'is_future': i > self._history_index,
            })
        return result

    # ========== PERSISTENCE ==========

    def export_history_to_dict(self) -> Dict[str, Any]:
        """Export history to a JSON-serializable dict."""
        return {
            'entries': [entry.to_dict() for entry in self._history],
            'history_index': self._history_index,
        }

    def import_history_from_dict(self, data: Dict[str, Any]) -> None:
        """Replace the log with exported data and restore the canvas to its cursor.

        Entries beyond max_history_size are dropped from the oldest end.
        """
        entries = [HistoryEntry.from_dict(e) for e in data['entries']]
        index = data.get('history_index', len(entries) - 1)

        overflow = len(entries) - self.max_history_size
        if overflow > 0:
            entries = entries[overflow:]
            index -= overflow

        self._history = entries
        self._history_index = min(max(index, 0), len(entries) - 1) if entries else -1
        if self._history_index >= 0:
            self._restore_current()
        self._fire_history_changed_callbacks()

    def save_history_to_file(self, filepath: str) -> None:
        """Save history to a JSON file."""
        data = self.export_history_to_dict()
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved {len(self._history)} history entries to {filepath}")

    def load_history_from_file(self, filepath: str) -> None:
        """Load history from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        self.import_history_from_dict(data)
        logger.info(f"Loaded {len(self._history)} history entries from {filepath}")
