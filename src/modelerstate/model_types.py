"""
Model records for the three-layer data-modeling editor.

A DataModel is one version of a data model in one abstraction layer. Layers are
linked through parent_model_id: logical models point to their conceptual parent,
physical models point to their logical parent (or, in degenerate data, directly
to the conceptual one).

The records are immutable. Resolution code only ever reads id, layer and
parent_model_id; the remaining fields are carried for display.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Layer(str, Enum):
    """Abstraction layer of a data model."""
    CONCEPTUAL = "conceptual"
    LOGICAL = "logical"
    PHYSICAL = "physical"

    @classmethod
    def coerce(cls, value: Any) -> 'Layer':
        """Return value as a Layer, accepting the plain string form."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown layer: {value!r} (expected one of {[layer.value for layer in cls]})") from None


# Display order for layer tabs
LAYER_ORDER = (Layer.CONCEPTUAL, Layer.LOGICAL, Layer.PHYSICAL)


@dataclass(frozen=True)
class DataModel:
    """One model in one layer.

    parent_model_id is not guaranteed to form an acyclic chain - upstream data
    can contain self references or mutual cycles.
    """
    id: int
    layer: Layer
    parent_model_id: Optional[int] = None
    name: str = ""
    target_system_id: Optional[int] = None

    def __post_init__(self):
        # frozen: bypass __setattr__ to normalize string layers
        object.__setattr__(self, 'layer', Layer.coerce(self.layer))

    @property
    def is_root(self) -> bool:
        """True for a conceptual model with no parent (a family root)."""
        return self.layer is Layer.CONCEPTUAL and self.parent_model_id is None

    def to_dict(self) -> Dict[str, Any]:
        """Export to JSON-serializable dict."""
        return {
            'id': self.id,
            'layer': self.layer.value,
            'parent_model_id': self.parent_model_id,
            'name': self.name,
            'target_system_id': self.target_system_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DataModel':
        """Import from dict.

        Accepts both the REST payload shape (parentModelId, targetSystemId)
        and the snake_case shape produced by to_dict().
        """
        parent_id = data.get('parent_model_id', data.get('parentModelId'))
        target_id = data.get('target_system_id', data.get('targetSystemId'))
        return cls(
            id=data['id'],
            layer=data['layer'],
            parent_model_id=parent_id,
            name=data.get('name') or "",
            target_system_id=target_id,
        )
