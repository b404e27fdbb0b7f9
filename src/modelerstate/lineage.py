"""
Lineage walking over the model forest.

Models are linked upward through parent_model_id. These functions are the single
implementation of the upward walk (root and lineage lookup) and the downward
breadth-first family collection that the rest of the package builds on.

Upstream data is not guaranteed acyclic, so every walk keeps a visited set and
treats a repeated id as if the cycle boundary were a root. None of these
functions raise for malformed graphs; they only raise TypeError when handed
None instead of a model list.
"""

import logging
from collections import deque
from typing import Dict, Iterable, Iterator, List, Optional, Set

from modelerstate.model_types import DataModel, Layer

logger = logging.getLogger(__name__)


def _require_models(models: Optional[Iterable[DataModel]]) -> None:
    if models is None:
        raise TypeError("models must be an iterable of DataModel, got None")


def build_model_index(models: Iterable[DataModel]) -> Dict[int, DataModel]:
    """Build an id -> model lookup.

    Duplicate ids overwrite earlier entries (last write wins).
    """
    _require_models(models)
    index: Dict[int, DataModel] = {}
    for model in models:
        if model.id in index:
            logger.debug(f"Duplicate model id {model.id} in snapshot, keeping last occurrence")
        index[model.id] = model
    return index


def iter_ancestors(model: Optional[DataModel], index: Dict[int, DataModel]) -> Iterator[DataModel]:
    """Yield model itself, then each ancestor up to the root.

    Stops when a model has no parent, the parent is missing from the index,
    or the parent id was already visited (cycle).
    """
    visited: Set[int] = set()
    current = model
    while current is not None:
        visited.add(current.id)
        yield current

        parent_id = current.parent_model_id
        if parent_id is None:
            return
        if parent_id in visited:
            logger.debug(f"Cycle in parent_model_id chain at model {current.id} -> {parent_id}")
            return
        current = index.get(parent_id)


def find_root(model: DataModel, index: Dict[int, DataModel]) -> DataModel:
    """Return the topmost ancestor reachable from model.

    Returns model unchanged if it has no parent. Only parent ids are tracked,
    so a walk around a pure cycle comes back to its starting model before the
    repeated parent stops it (1 <-> 2 from 1 returns 1).
    """
    visited_parents: Set[int] = set()
    current = model
    while current.parent_model_id is not None:
        parent_id = current.parent_model_id
        if parent_id in visited_parents:
            logger.debug(f"Cycle in parent_model_id chain at model {current.id} -> {parent_id}")
            break
        visited_parents.add(parent_id)
        parent = index.get(parent_id)
        if parent is None:
            break
        current = parent
    return current


def collect_lineage(model: Optional[DataModel], index: Dict[int, DataModel]) -> Set[int]:
    """Ids of model and all of its ancestors."""
    return {ancestor.id for ancestor in iter_ancestors(model, index)}


def find_conceptual_root(model: Optional[DataModel], index: Dict[int, DataModel]) -> Optional[DataModel]:
    """Nearest conceptual model on the upward walk from model (model included)."""
    for ancestor in iter_ancestors(model, index):
        if ancestor.layer is Layer.CONCEPTUAL:
            return ancestor
    return None


def collect_family(root: Optional[DataModel], models: Iterable[DataModel]) -> List[DataModel]:
    """Breadth-first collection of root and every model derived from it.

    Children are visited in input order, so the result is deterministic for a
    fixed input list. Each model id appears at most once.
    """
    _require_models(models)
    if root is None:
        return []

    children: Dict[int, List[DataModel]] = {}
    for model in models:
        if model.parent_model_id is not None:
            children.setdefault(model.parent_model_id, []).append(model)

    family: List[DataModel] = []
    visited: Set[int] = set()
    queue = deque([root])
    while queue:
        current = queue.popleft()
        if current.id in visited:
            continue
        visited.add(current.id)
        family.append(current)
        queue.extend(children.get(current.id, ()))

    return family


def list_root_models(models: Iterable[DataModel]) -> List[DataModel]:
    """Conceptual models without a parent, in input order."""
    _require_models(models)
    return [model for model in models if model.is_root]
