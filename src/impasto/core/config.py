"""Configuration management for Impasto.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the IMPASTO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (IMPASTO_* prefix)
2. .env file in the project root
3. Default values defined in ImpastoConfig

The Gemini credential is the one exception to the prefix rule: it is also read
from the plain ``GEMINI_API_KEY`` or ``API_KEY`` variables so that an existing
Google AI Studio setup works unchanged.

Example .env file:
    IMPASTO_GEMINI_API_KEY=your-key-here
    IMPASTO_GEMINI_MODEL_ID=gemini-2.5-flash-image
    IMPASTO_OUTPUTS_DIR=outputs
    IMPASTO_GRADIO_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

Usage Example
-------------
    from impasto.core.config import config

    print(config.gemini_model_id)
    print(config.outputs_dir)

See Also
--------
- ImpastoConfig: Full configuration class documentation
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImpastoConfig(BaseSettings):
    """Main configuration for Impasto.

    Attributes
    ----------
    Model Adapter Settings:
        default_model_adapter : str
            Model adapter used for new sessions
        gemini_model_id : str
            Gemini model that performs the repaint
        gemini_api_key : str | None
            Credential for the Gemini API (never logged)
        input_mime_type : str
            MIME type declared for the uploaded photo in the request

    Paths:
        outputs_dir : Path
            Directory where downloaded results are written
        download_prefix : str
            Filename prefix for downloaded results

    UI Settings:
        gradio_server_name : str
            Server bind address (0.0.0.0 for local network)
        gradio_server_port : int
            Server port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Notes
    -----
    - outputs_dir is created automatically if it doesn't exist
    - A missing API key does not fail startup; the first transform reports it
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMPASTO_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Model adapter settings
    default_model_adapter: str = Field(
        default="Gemini-Image-Edit",
        description="Model adapter to use for new sessions",
    )
    gemini_model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini model ID used for image repainting",
    )
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("IMPASTO_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        description="API key for the Gemini API",
        repr=False,
    )
    input_mime_type: str = Field(
        default="image/jpeg",
        description="MIME type declared for the source photo",
    )

    # Paths
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to save downloaded images",
    )
    download_prefix: str = Field(
        default="vangogh-art",
        description="Filename prefix for downloaded images",
    )

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the output directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def has_api_key(self) -> bool:
        """True when a non-blank Gemini API key is configured."""
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


# Global configuration instance
# Loads values from environment variables (IMPASTO_* prefix) and .env file.
config = ImpastoConfig()
