"""Core functionality for Van Gogh style transformation.

- **Model Adapters**: transport-specific clients behind one ``transform`` call
- **model_registry**: Registry for discovering and instantiating model adapters
- **Style profiles**: the three fixed intensity descriptions and the
  instruction template
- **Encoding helpers**: data URI conversion and download writing
- **ImpastoConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)

Usage Example
-------------
    from impasto.core import model_registry, config, StyleIntensity

    adapter = model_registry.instantiate("Gemini-Image-Edit", config)
    painted = await adapter.transform(photo_data_uri, StyleIntensity.MEDIUM)
"""

# Import adapters to ensure they're registered
from impasto.core.adapters import GeminiImageEditAdapter  # noqa: F401
from impasto.core.config import ImpastoConfig, config
from impasto.core.errors import DecodeError, RequestError, TransitionError
from impasto.core.model_adapters import ContentPart, ModelAdapterBase, model_registry
from impasto.core.style_profiles import StyleIntensity, StyleProfile, build_instruction

__all__ = [
    "ContentPart",
    "DecodeError",
    "ImpastoConfig",
    "ModelAdapterBase",
    "RequestError",
    "StyleIntensity",
    "StyleProfile",
    "TransitionError",
    "build_instruction",
    "config",
    "model_registry",
]
