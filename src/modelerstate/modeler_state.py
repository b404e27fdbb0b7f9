"""
ModelerStateMachine: current model and layer preference for the modeler.

Holds the active model, the layer the user is viewing and the snapshot of all
models. Whenever the active model or the layer preference changes the display
model is re-resolved through the model family, so:

- switching models keeps the layer the user was viewing (when the new family
  has a model in that layer)
- switching layers lands on the first family model in that layer that shares
  the current model's lineage
- a missing layer degrades to "unavailable" instead of raising

Lifecycle: one instance per editor session (or test). reset() returns it to the
initial state; there is no process-wide singleton.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from modelerstate.config import ModelerConfig, get_current_config
from modelerstate.layer_resolver import resolve_layer_model, resolve_layer_models
from modelerstate.lineage import build_model_index, collect_family, find_root
from modelerstate.model_types import DataModel, Layer

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Optional[DataModel], Layer], None]


class ModelerStateMachine:
    """Two-variable state machine over (current_model, current_layer).

    Invariant (best effort): current_model.layer == current_layer whenever
    current_model is set and the last resolution succeeded.

    Thread safety: Not thread-safe (all operations expected on main thread).
    """

    def __init__(self, all_models: Iterable[DataModel] = (), config: Optional[ModelerConfig] = None):
        self._config = config or get_current_config()
        self.current_model: Optional[DataModel] = None
        self.current_layer: Layer = self._config.default_layer
        self.all_models: Tuple[DataModel, ...] = ()
        self._on_change_callbacks: List[ChangeCallback] = []
        self.set_all_models(all_models)

    def reset(self) -> None:
        """Return to the initial state. Change callbacks stay subscribed and fire if the state changed."""
        self.all_models = ()
        self._apply(None, self._config.default_layer)
        logger.debug("Modeler state reset")

    # ========== CALLBACKS ==========

    def add_change_callback(self, callback: ChangeCallback) -> None:
        """Subscribe to (current_model, current_layer) changes."""
        if callback not in self._on_change_callbacks:
            self._on_change_callbacks.append(callback)

    def remove_change_callback(self, callback: ChangeCallback) -> None:
        if callback in self._on_change_callbacks:
            self._on_change_callbacks.remove(callback)

    def _apply(self, model: Optional[DataModel], layer: Layer) -> None:
        changed = model != self.current_model or layer is not self.current_layer
        self.current_model = model
        self.current_layer = layer
        if not changed:
            return
        for callback in list(self._on_change_callbacks):
            try:
                callback(model, layer)
            except Exception as e:
                logger.warning(f"Error in change callback: {e}")

    # ========== FAMILY ==========

    def _family_context(self, model: DataModel) -> Tuple[Dict[int, DataModel], DataModel, List[DataModel]]:
        """Return (index, root, family) for model against the current snapshot.

        A model missing from the snapshot is treated as its own singleton family.
        """
        index = build_model_index(self.all_models)
        if model.id not in index:
            logger.debug(f"Model {model.id} not in snapshot, using singleton family")
            return {model.id: model}, model, [model]

        root = find_root(model, index)
        return index, root, collect_family(root, self.all_models)

    def get_family(self) -> List[DataModel]:
        """Family of the current model ([] when no model is active)."""
        if self.current_model is None:
            return []
        return self._family_context(self.current_model)[2]

    def get_root_model(self) -> Optional[DataModel]:
        if self.current_model is None:
            return None
        return self._family_context(self.current_model)[1]

    # ========== TRANSITIONS ==========

    def set_all_models(self, models: Iterable[DataModel]) -> None:
        """Replace the model snapshot. Does not touch current_model/current_layer."""
        if models is None:
            raise TypeError("models must be an iterable of DataModel, got None")
        self.all_models = tuple(models)
        logger.debug(f"Model snapshot replaced ({len(self.all_models)} models)")

    def set_current_model(self, model: Optional[DataModel]) -> None:
        """Activate model, keeping the current layer preference when possible."""
        if model is None:
            self._apply(None, self.current_layer)
            return

        index, _root, family = self._family_context(model)
        resolved = resolve_layer_model(self.current_layer, model, family, index)
        if resolved is not None:
            self._apply(resolved, resolved.layer)
        else:
            logger.debug(
                f"No {self.current_layer.value} model in family of {model.id}, "
                f"showing model {model.id} in its own {model.layer.value} layer"
            )
            self._apply(model, model.layer)

        logger.debug(f"Current model -> {self.current_model.id} ({self.current_layer.value})")

    def set_current_layer(self, layer) -> None:
        """Switch the layer preference and re-resolve the display model."""
        layer = Layer.coerce(layer)
        if self.current_model is None:
            self._apply(None, layer)
            return

        index, root, family = self._family_context(self.current_model)
        resolved = resolve_layer_model(layer, self.current_model, family, index)
        if resolved is not None:
            # Trust the resolved model's layer over the requested one
            self._apply(resolved, resolved.layer)
        else:
            fallback = root if root is not None else self.current_model
            logger.info(
                f"Layer {layer.value} unavailable for model {self.current_model.id}, "
                f"falling back to model {fallback.id}"
            )
            self._apply(fallback, fallback.layer)

        logger.debug(f"Current layer -> {self.current_layer.value} (model {self.current_model.id})")

    # ========== READ-ONLY ==========

    def get_current_layer_model(self) -> Optional[DataModel]:
        """Display model for the current layer, without mutating state."""
        if self.current_model is None:
            return None
        index, _root, family = self._family_context(self.current_model)
        resolved = resolve_layer_model(self.current_layer, self.current_model, family, index)
        return resolved if resolved is not None else self.current_model

    def layer_availability(self) -> Dict[Layer, Optional[DataModel]]:
        """Resolved model per layer; None marks an unavailable layer."""
        if self.current_model is None:
            return {layer: None for layer in Layer}
        index, root, family = self._family_context(self.current_model)
        return resolve_layer_models(self.current_model, family, index, root)

    def is_layer_available(self, layer) -> bool:
        return self.layer_availability()[Layer.coerce(layer)] is not None
