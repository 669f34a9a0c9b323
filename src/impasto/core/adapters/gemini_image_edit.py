"""Gemini image-edit model adapter.

This module provides the adapter for Google's Gemini image models
(``gemini-2.5-flash-image`` by default). The model takes the uploaded photo and
a natural-language instruction in a single multi-part request and answers with
a mixed list of text and inline image parts.

Request Shape
-------------
One user turn with two parts, in this order:
- **inline_data**: the photo bytes, declared as ``config.input_mime_type``
- **text**: the compiled Van Gogh instruction

Response Handling
-----------------
Only the first candidate is read. Its parts are converted to `ContentPart`
values; inline bytes are base64-encoded so the base class can wrap them as a
PNG data URI without touching the pixels.

Errors raised by the google-genai client (``google.genai.errors.APIError`` and
friends) propagate to the caller unchanged.

Usage Example
-------------
    >>> from impasto.core.adapters.gemini_image_edit import GeminiImageEditAdapter
    >>> from impasto.core.config import config
    >>>
    >>> adapter = GeminiImageEditAdapter(config)
    >>> result = await adapter.transform(photo_data_uri, "Vibrant Arles")
"""

import base64
import logging
from typing import Any

from google import genai
from google.genai import types

from impasto.core.config import ImpastoConfig
from impasto.core.model_adapters import ContentPart, ModelAdapterBase, model_registry

logger = logging.getLogger(__name__)


class GeminiImageEditAdapter(ModelAdapterBase):
    """Model adapter for instruction-based repainting with Gemini.

    The client is created lazily: ``transform`` calls ``load_model`` the first
    time it runs if nothing has loaded it yet.

    Attributes
    ----------
    model_id : str
        Gemini model name used for every request
    client : genai.Client | None
        google-genai client (None until loaded)
    """

    name = "Gemini-Image-Edit"
    description = "Van Gogh repainting with Gemini 2.5 Flash Image"
    model_type = "image-edit"
    version = "1.0.0"

    def __init__(self, config: ImpastoConfig) -> None:
        super().__init__(config)
        self.client: genai.Client | None = None
        self.model_id = config.gemini_model_id
        logger.info(f"Configured Gemini-Image-Edit with model: {self.model_id}")

    def load_model(self) -> None:
        """Create the google-genai client.

        Raises
        ------
        RuntimeError
            If no API key is configured
        """
        if self.client is not None:
            logger.info("Gemini client already created, skipping...")
            return

        if not self.config.has_api_key:
            raise RuntimeError(
                "Gemini API key is not configured. "
                "Set IMPASTO_GEMINI_API_KEY (or GEMINI_API_KEY) in your environment or .env file."
            )

        self.client = genai.Client(api_key=self.config.gemini_api_key)
        logger.info(f"Gemini client ready for {self.model_id}")

    def unload_model(self) -> None:
        if self.client is None:
            return
        self.client = None
        logger.info("Gemini client released")

    @property
    def is_loaded(self) -> bool:
        return self.client is not None

    def _build_contents(self, image_data: str, mime_type: str, instruction: str) -> types.Content:
        return types.Content(
            role="user",
            parts=[
                types.Part(
                    inline_data=types.Blob(mime_type=mime_type, data=base64.b64decode(image_data))
                ),
                types.Part.from_text(text=instruction),
            ],
        )

    @staticmethod
    def _iter_response_parts(response: Any) -> list[Any]:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return []
        content = getattr(candidates[0], "content", None)
        return list(getattr(content, "parts", None) or [])

    @staticmethod
    def _to_content_part(part: Any) -> ContentPart:
        inline_data = getattr(part, "inline_data", None)
        data = getattr(inline_data, "data", None) if inline_data is not None else None

        if isinstance(data, bytes):
            data = base64.b64encode(data).decode("ascii")

        return ContentPart(
            text=getattr(part, "text", None),
            data=data or None,
            mime_type=getattr(inline_data, "mime_type", None) if inline_data is not None else None,
        )

    async def generate_parts(
        self, image_data: str, mime_type: str, instruction: str
    ) -> list[ContentPart]:
        """Send the request and convert the first candidate's parts."""
        if self.client is None:
            self.load_model()

        response = await self.client.aio.models.generate_content(
            model=self.model_id,
            contents=self._build_contents(image_data, mime_type, instruction),
        )

        parts = [self._to_content_part(part) for part in self._iter_response_parts(response)]
        logger.debug(f"Gemini returned {len(parts)} parts")
        return parts


# Register adapter
model_registry.register(GeminiImageEditAdapter)
