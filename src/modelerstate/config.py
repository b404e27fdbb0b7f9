"""
Configuration for the modeler state components.

Provides thread-local storage for the current ModelerConfig, following the same
pattern as the global config storage: components read the current config when
they are constructed unless an explicit config is passed in.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from modelerstate.model_types import Layer


@dataclass(frozen=True)
class ModelerConfig:
    """Tunables for history and layer handling."""
    max_history_size: int = 50
    default_layer: Layer = Layer.CONCEPTUAL

    def __post_init__(self):
        if self.max_history_size < 1:
            raise ValueError(f"max_history_size must be positive, got {self.max_history_size}")
        object.__setattr__(self, 'default_layer', Layer.coerce(self.default_layer))


_current_config_context = threading.local()


def set_current_config(config: ModelerConfig) -> None:
    """Set the config used by components created on this thread."""
    _current_config_context.value = config


def get_current_config() -> ModelerConfig:
    """Get the current config, falling back to defaults."""
    config: Optional[ModelerConfig] = getattr(_current_config_context, 'value', None)
    return config if config is not None else ModelerConfig()


def reset_current_config() -> None:
    """Drop any config set on this thread."""
    if hasattr(_current_config_context, 'value'):
        del _current_config_context.value
