"""Model configuration."""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for a model offered by a provider.

    Attributes:
        name: Model identifier sent to the vendor API
        label: Human readable name shown in settings screens
        legacy: Whether the model is kept only for compatibility
    """

    name: str
    label: str
    legacy: bool = False


def catalog(*configs: ModelConfig) -> Dict[str, ModelConfig]:
    """Build an ordered name -> config mapping."""
    return {config.name: config for config in configs}
