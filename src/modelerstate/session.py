"""
ModelerSession: one editor session wiring model state, canvas and history.

Canvas history only makes sense for the model it was recorded on, so the session
clears it (and the canvas selection) whenever the display model changes.
"""
import logging
from typing import Iterable, List, Optional

from modelerstate.canvas import CanvasEdge, CanvasNode, CanvasState
from modelerstate.config import ModelerConfig, get_current_config
from modelerstate.history import HistoryManager
from modelerstate.history_model import HistoryAction, HistoryEntry
from modelerstate.lineage import list_root_models
from modelerstate.model_types import DataModel, Layer
from modelerstate.modeler_state import ModelerStateMachine

logger = logging.getLogger(__name__)


class ModelerSession:
    """Owns a ModelerStateMachine, a CanvasState and its HistoryManager."""

    def __init__(self, config: Optional[ModelerConfig] = None):
        config = config or get_current_config()
        self.state = ModelerStateMachine(config=config)
        self.canvas = CanvasState()
        self.history = HistoryManager(self.canvas, config=config)
        self._display_model_id: Optional[int] = None
        self.state.add_change_callback(self._on_state_changed)

    def _on_state_changed(self, model: Optional[DataModel], layer: Layer) -> None:
        model_id = model.id if model is not None else None
        if model_id == self._display_model_id:
            return
        logger.debug(f"Display model {self._display_model_id} -> {model_id}, clearing history")
        self._display_model_id = model_id
        self.canvas.clear_selection()
        self.history.clear_history()

    @property
    def current_model(self) -> Optional[DataModel]:
        return self.state.current_model

    @property
    def current_layer(self) -> Layer:
        return self.state.current_layer

    def load_models(self, models: Iterable[DataModel]) -> None:
        """Replace the model snapshot and pick a default model if none is active.

        The default is the first root conceptual model, else the first model.
        """
        self.state.set_all_models(models)
        if self.state.current_model is not None or not self.state.all_models:
            return

        roots = list_root_models(self.state.all_models)
        default = roots[0] if roots else self.state.all_models[0]
        logger.debug(f"No active model, defaulting to model {default.id}")
        self.state.set_current_model(default)

    def select_model(self, model: Optional[DataModel]) -> None:
        self.state.set_current_model(model)

    def select_layer(self, layer) -> None:
        self.state.set_current_layer(layer)

    def root_models(self) -> List[DataModel]:
        """Models offered by the model picker."""
        return list_root_models(self.state.all_models)

    def load_canvas(self, nodes: List[CanvasNode], edges: List[CanvasEdge]) -> HistoryEntry:
        """Show freshly fetched canvas contents and start a new history."""
        self.canvas.set_nodes(nodes)
        self.canvas.set_edges(edges)
        self.canvas.clear_selection()
        self.history.clear_history()
        return self.history.save_to_history(
            HistoryAction.INITIAL,
            "Initial canvas state",
            f"{len(nodes)} objects, {len(edges)} relationships",
        )
