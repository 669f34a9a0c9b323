"""Impasto - Van Gogh style photo repainting with Gemini."""

__version__ = "0.1.0"

from impasto.core.config import ImpastoConfig, config
from impasto.core.model_adapters import ModelAdapterBase, model_registry
from impasto.core.style_profiles import StyleIntensity

# Import adapters to ensure they're registered
from impasto.core.adapters import GeminiImageEditAdapter  # noqa: F401

__all__ = [
    "ModelAdapterBase",
    "model_registry",
    "ImpastoConfig",
    "config",
    "StyleIntensity",
    "GeminiImageEditAdapter",
]
