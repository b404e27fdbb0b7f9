"""
Layer resolution for a model family.

Given a target layer, picks the model in that layer that best represents the
same entity as the currently active model. A candidate whose ancestor chain
intersects the current model's lineage (a branch match) wins over a candidate
that shares no ancestry with it.

ALGORITHM:
  1. Candidates are the family members in the target layer (family order)
  2. No candidates -> None (layer unavailable)
  3. No current model -> first candidate
  4. First candidate whose own upward walk hits the current lineage
  5. No branch match -> first candidate

Ties among branch matches go to family order. In a well-formed family every
member reaches the root, which is always on the current lineage, so step 4
usually picks the first candidate in BFS order.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from modelerstate.lineage import collect_lineage, iter_ancestors
from modelerstate.model_types import LAYER_ORDER, DataModel, Layer

logger = logging.getLogger(__name__)


def _shares_branch(candidate: DataModel, lineage: Set[int], index: Dict[int, DataModel]) -> bool:
    return any(ancestor.id in lineage for ancestor in iter_ancestors(candidate, index))


def resolve_layer_model(
    target_layer: Any,
    current_model: Optional[DataModel],
    family: Iterable[DataModel],
    index: Dict[int, DataModel],
) -> Optional[DataModel]:
    """Resolve the display model for target_layer within family.

    Args:
        target_layer: Layer (or its string value) to resolve
        current_model: Active model, used only as a lineage hint; may be None
        family: Family members in BFS order (see collect_family)
        index: id -> model lookup used to walk ancestor chains

    Returns:
        The resolved model, or None if the family has no model in that layer
    """
    if family is None:
        raise TypeError("family must be an iterable of DataModel, got None")
    layer = Layer.coerce(target_layer)

    candidates: List[DataModel] = [model for model in family if model.layer is layer]
    if not candidates:
        return None

    if current_model is None:
        return candidates[0]

    lineage = collect_lineage(current_model, index)
    for candidate in candidates:
        if _shares_branch(candidate, lineage, index):
            return candidate

    logger.debug(
        f"No branch match for model {current_model.id} in {layer.value} layer, "
        f"falling back to model {candidates[0].id}"
    )
    return candidates[0]


def resolve_layer_models(
    current_model: Optional[DataModel],
    family: List[DataModel],
    index: Dict[int, DataModel],
    root: Optional[DataModel] = None,
) -> Dict[Layer, Optional[DataModel]]:
    """Resolve every layer at once for layer navigation.

    The conceptual entry falls back to root (then current_model) so the first
    tab is always populated whenever a model is active. Logical and physical
    entries are None when the family lacks that layer.
    """
    resolved = {
        layer: resolve_layer_model(layer, current_model, family, index)
        for layer in LAYER_ORDER
    }
    if resolved[Layer.CONCEPTUAL] is None:
        resolved[Layer.CONCEPTUAL] = root if root is not None else current_model
    return resolved
