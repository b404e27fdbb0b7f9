"""
State management core for a three-layer data-modeling editor.

Models live in three linked abstraction layers (conceptual, logical, physical)
joined by parent_model_id references. This package keeps the active model, the
layer being viewed and the canvas edit history mutually consistent as the user
navigates and edits.

Key Features:
- Cycle-safe lineage walks and breadth-first family collection
- Layer resolution preferring the model on the branch being edited
- Sticky layer preference across model switches
- Bounded, linear undo/redo over deep-copied canvas snapshots

Quick Start:
    >>> from modelerstate import DataModel, ModelerStateMachine
    >>>
    >>> models = [
    ...     DataModel(id=1, layer="conceptual"),
    ...     DataModel(id=2, layer="logical", parent_model_id=1),
    ...     DataModel(id=3, layer="physical", parent_model_id=2),
    ... ]
    >>> state = ModelerStateMachine(models)
    >>> state.set_current_model(models[0])
    >>> state.set_current_layer("physical")
    >>> state.current_model.id
    3

Modules:
    - model_types: Layer enum and DataModel record
    - lineage: model index, root/lineage walks, family collection
    - layer_resolver: per-layer model resolution
    - modeler_state: current model/layer state machine
    - canvas: live canvas nodes, edges and selection
    - history_model: CanvasSnapshot and HistoryEntry records
    - history: bounded undo/redo log
    - session: state machine, canvas and history wired together
    - config: ModelerConfig and thread-local current config
"""

# Records
from modelerstate.model_types import Layer, LAYER_ORDER, DataModel

# Configuration
from modelerstate.config import (
    ModelerConfig,
    set_current_config,
    get_current_config,
    reset_current_config,
)

# Lineage
from modelerstate.lineage import (
    build_model_index,
    iter_ancestors,
    find_root,
    collect_lineage,
    find_conceptual_root,
    collect_family,
    list_root_models,
)

# Resolver
from modelerstate.layer_resolver import resolve_layer_model, resolve_layer_models

# State
from modelerstate.modeler_state import ModelerStateMachine

# Canvas and history
from modelerstate.canvas import Position, CanvasNode, CanvasEdge, CanvasState
from modelerstate.history_model import HistoryAction, CanvasSnapshot, HistoryEntry
from modelerstate.history import HistoryManager

# Session
from modelerstate.session import ModelerSession

__all__ = [
    # Records
    'Layer',
    'LAYER_ORDER',
    'DataModel',
    # Configuration
    'ModelerConfig',
    'set_current_config',
    'get_current_config',
    'reset_current_config',
    # Lineage
    'build_model_index',
    'iter_ancestors',
    'find_root',
    'collect_lineage',
    'find_conceptual_root',
    'collect_family',
    'list_root_models',
    # Resolver
    'resolve_layer_model',
    'resolve_layer_models',
    # State
    'ModelerStateMachine',
    # Canvas and history
    'Position',
    'CanvasNode',
    'CanvasEdge',
    'CanvasState',
    'HistoryAction',
    'CanvasSnapshot',
    'HistoryEntry',
    'HistoryManager',
    # Session
    'ModelerSession',
]

__version__ = '1.0.0'
__description__ = 'Layer resolution and undo/redo history for a three-layer data-modeling editor'
