"""Data models for the Impasto UI session."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from impasto.core.style_profiles import DEFAULT_INTENSITY, StyleIntensity


class Phase(str, Enum):
    """Lifecycle phase of one transformation attempt."""

    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class ErrorKind(str, Enum):
    """Which failure put the session into the ERROR phase."""

    DECODE = "DECODE"  # local file unreadable
    REQUEST = "REQUEST"  # service answered without an image
    SERVICE = "SERVICE"  # transport/service failure, message passed through


@dataclass
class UIState:
    """Session state for the Gradio UI.

    One instance per browser session, mutated in place by the transition
    functions in ``impasto.ui.state``.

    Attributes
    ----------
    source_image : str | None
        Uploaded photo as a data URI
    result_image : str | None
        Repainted image as a PNG data URI; set only in the SUCCESS phase
    phase : Phase
        Current lifecycle phase
    intensity : StyleIntensity
        Stroke intensity used by the next transform
    error_message : str | None
        User-facing message; set only in the ERROR phase
    error_kind : ErrorKind | None
        Failure category; set only in the ERROR phase
    model_adapter : Any | None
        ModelAdapterBase instance used for transforms
    current_model_name : str
        Registry name of the model adapter
    """

    source_image: str | None = None
    result_image: str | None = None
    phase: Phase = Phase.IDLE
    intensity: StyleIntensity = DEFAULT_INTENSITY
    error_message: str | None = None
    error_kind: ErrorKind | None = None

    # Model adapter
    model_adapter: Any | None = None  # ModelAdapterBase instance
    current_model_name: str = ""

    @property
    def has_source(self) -> bool:
        return self.source_image is not None

    @property
    def has_result(self) -> bool:
        return self.result_image is not None

    @property
    def is_processing(self) -> bool:
        return self.phase == Phase.PROCESSING

    def is_initialized(self) -> bool:
        """True once a model adapter has been attached."""
        return self.model_adapter is not None

    def is_consistent(self) -> bool:
        """Check the result/error invariants of the session."""
        if self.result_image is not None and self.phase != Phase.SUCCESS:
            return False
        if (self.error_message is not None or self.error_kind is not None) and (
            self.phase != Phase.ERROR
        ):
            return False
        return True

    def __repr__(self) -> str:
        """String representation for debugging (image payloads omitted)."""
        return (
            f"UIState(phase={self.phase.value}, "
            f"intensity={self.intensity.value}, "
            f"has_source={self.has_source}, "
            f"has_result={self.has_result}, "
            f"model={self.current_model_name or None})"
        )


# Constants for UI
INTENSITY_CHOICES = [intensity.value for intensity in StyleIntensity]

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."
