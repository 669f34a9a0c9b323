"""Validation utilities for Impasto UI inputs."""

import logging

from impasto.core.style_profiles import StyleIntensity

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def parse_intensity(label: str | None) -> StyleIntensity:
    """Convert a radio-button label into a StyleIntensity.

    Args:
        label: Intensity label as shown in the UI (or the enum name)

    Raises:
        ValidationError: If the label is empty or unknown
    """
    if not label or not label.strip():
        raise ValidationError("Please select a stroke intensity")

    label = label.strip()
    for intensity in StyleIntensity:
        if label in (intensity.value, intensity.name):
            return intensity

    logger.warning(f"Unknown intensity label: {label!r}")
    choices = ", ".join(intensity.value for intensity in StyleIntensity)
    raise ValidationError(f"Unknown stroke intensity '{label}'. Choose one of: {choices}")


def validate_upload(file_path: str | None) -> str:
    """Ensure the upload widget actually produced a file path.

    Raises:
        ValidationError: If no file was provided
    """
    if not file_path or not str(file_path).strip():
        raise ValidationError("No image selected")
    return str(file_path)
