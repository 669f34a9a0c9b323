"""Base classes and registry for model adapters.

A model adapter is the only part of Impasto that knows how to talk to a
particular generative service. The base class owns everything about a
transformation that does not depend on the transport:

1. Strip the data-URI header from the source image
2. Compile the instruction text for the selected intensity
3. Hand image + instruction to the adapter (``generate_parts``)
4. Pick the first inline image out of the returned content parts
5. Re-wrap it as a PNG data URI

Adapters implement step 3 and translate the service's response into a list of
`ContentPart` values.

Usage Example
-------------
    >>> from impasto.core.model_adapters import model_registry
    >>> from impasto.core.config import config
    >>>
    >>> adapter = model_registry.instantiate("Gemini-Image-Edit", config)
    >>> result = await adapter.transform(encoded_photo, StyleIntensity.HIGH)

See Also
--------
- GeminiImageEditAdapter: Google Gemini implementation
- ImpastoConfig: Configuration options
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

from .config import ImpastoConfig
from .encoding import strip_data_uri, to_data_uri
from .errors import RequestError
from .style_profiles import StyleIntensity, build_instruction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentPart:
    """One part of a mixed-content service response.

    Attributes
    ----------
    text : str | None
        Text emitted by the model, if any
    data : str | None
        Base64 payload of inline image bytes, if any
    mime_type : str | None
        MIME type the service declared for ``data``
    """

    text: str | None = None
    data: str | None = None
    mime_type: str | None = None

    @property
    def has_image(self) -> bool:
        return bool(self.data)


def extract_image(parts: list[ContentPart]) -> str:
    """Return the first inline image in ``parts`` as a PNG data URI.

    Raises:
        RequestError: If no part carries image bytes
    """
    for part in parts:
        if part.has_image:
            return to_data_uri(part.data)
        if part.text:
            logger.info(f"Model text response: {part.text[:200]}")

    raise RequestError()


class ModelAdapterBase(ABC):
    """Abstract base class for all model adapters.

    Attributes
    ----------
    name : str
        Registry name of the adapter (e.g., "Gemini-Image-Edit")
    description : str
        Brief description of the model's capabilities
    model_type : str
        Type of generation this model supports
    config : ImpastoConfig
        Configuration object containing model settings

    Notes
    -----
    - Adapters should implement lazy loading (create clients on first use)
    - Exceptions raised by the service must propagate unchanged from
      ``generate_parts``; only a missing image is reported as RequestError
    """

    name: str = "Base Model Adapter"
    description: str = "Base class for model adapters"
    model_type: Literal["image-edit"] = "image-edit"
    version: str = "0.1.0"

    def __init__(self, config: ImpastoConfig) -> None:
        """Initialize the model adapter.

        Args:
            config: Configuration object containing model settings
        """
        self.config = config
        logger.info(f"Initialized {self.name} adapter")

    @abstractmethod
    def load_model(self) -> None:
        """Prepare the service client.

        Raises
        ------
        Exception
            If the client cannot be created (missing credentials, etc.)
        """
        pass

    @abstractmethod
    def unload_model(self) -> None:
        """Release the service client."""
        pass

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """True when the service client is ready."""
        pass

    @abstractmethod
    async def generate_parts(
        self, image_data: str, mime_type: str, instruction: str
    ) -> list[ContentPart]:
        """Submit one image + instruction request.

        Args:
            image_data: Raw base64 image payload (no data-URI header)
            mime_type: MIME type to declare for the image
            instruction: Full instruction text

        Returns
        -------
        list[ContentPart]
            Content parts of the response, in service order
        """
        pass

    async def transform(
        self, encoded_image: str, intensity: StyleIntensity | str | None
    ) -> str:
        """Repaint an encoded image at the given intensity.

        Args:
            encoded_image: Source image as data URI or raw base64
            intensity: Stroke intensity; unknown values use the Arles profile

        Returns
        -------
        str
            The result as a ``data:image/png;base64,...`` string

        Raises
        ------
        RequestError
            If the response carries no inline image
        Exception
            Any transport/service error, unchanged
        """
        if not self.is_loaded:
            self.load_model()

        image_data = strip_data_uri(encoded_image)
        instruction = build_instruction(intensity)

        logger.info(
            f"Requesting transform from {self.name} "
            f"(intensity={getattr(intensity, 'value', intensity)}, "
            f"payload={len(image_data)} chars)"
        )

        parts = await self.generate_parts(image_data, self.config.input_mime_type, instruction)

        try:
            result = extract_image(parts)
        except RequestError:
            logger.warning(f"{self.name} returned {len(parts)} parts without image data")
            raise

        logger.info(f"Transform complete ({len(result)} chars)")
        return result

    def get_model_info(self) -> dict[str, Any]:
        """Get information about this model adapter."""
        return {
            "name": self.name,
            "description": self.description,
            "model_type": self.model_type,
            "version": self.version,
            "is_loaded": self.is_loaded,
        }


class ModelRegistry:
    """Registry for managing available model adapters.

    Usage
    -----
        >>> from impasto.core.model_adapters import model_registry
        >>> model_registry.register(MyCustomAdapter)
        >>> adapter = model_registry.instantiate("My Adapter", config)
    """

    def __init__(self) -> None:
        """Initialize the model registry."""
        self._adapters: dict[str, type[ModelAdapterBase]] = {}

    def register(self, adapter_class: type[ModelAdapterBase]) -> None:
        """Register a model adapter class.

        Args:
            adapter_class: Model adapter class to register
        """
        adapter_name = adapter_class.name

        if adapter_name in self._adapters:
            logger.warning(f"Model adapter '{adapter_name}' is already registered, overwriting")

        self._adapters[adapter_name] = adapter_class
        logger.info(f"Registered model adapter: {adapter_name}")

    def instantiate(self, adapter_name: str, config: ImpastoConfig) -> ModelAdapterBase:
        """Create an instance of a registered model adapter.

        Raises
        ------
        KeyError
            If adapter_name is not registered
        """
        if adapter_name not in self._adapters:
            available = ", ".join(self.list_available())
            raise KeyError(
                f"Model adapter '{adapter_name}' not found. Available adapters: {available}"
            )

        instance = self._adapters[adapter_name](config=config)
        logger.info(f"Instantiated model adapter: {adapter_name}")
        return instance

    def list_available(self) -> list[str]:
        return list(self._adapters.keys())

    def get_adapter_info(self, adapter_name: str) -> dict[str, Any] | None:
        """Get metadata for a registered adapter, or None if unknown."""
        adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None

        return {
            "name": adapter_class.name,
            "description": adapter_class.description,
            "model_type": adapter_class.model_type,
            "version": adapter_class.version,
        }


# Global model registry instance
model_registry = ModelRegistry()
