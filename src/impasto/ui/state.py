"""Session state machine for the Impasto UI.

This module owns every transition of a `UIState`:

    IDLE/SUCCESS/ERROR --upload--> UPLOADING --> IDLE (image set) | ERROR
    IDLE/SUCCESS/ERROR --process--> PROCESSING --> SUCCESS | ERROR
    ERROR --dismiss--> IDLE

Transitions only mutate the session. Decoding the uploaded file and calling the
generative service are delegated to ``impasto.core.encoding`` and the model
adapter. A transition requested from a phase that does not allow it raises
`TransitionError` and leaves the session untouched.
"""

import asyncio
import logging
from pathlib import Path

from impasto.core.config import config
from impasto.core.encoding import encode_image_file, save_encoded_image
from impasto.core.errors import DECODE_ERROR_MESSAGE, DecodeError, RequestError, TransitionError
from impasto.core.model_adapters import model_registry
from impasto.core.style_profiles import StyleIntensity

from .models import GENERIC_ERROR_MESSAGE, ErrorKind, Phase, UIState

logger = logging.getLogger(__name__)

_BUSY_PHASES = (Phase.UPLOADING, Phase.PROCESSING)


def initialize_ui_state(state: UIState | None = None, model_name: str | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Creates the model adapter on first use. A client that fails to load is
    logged and retried by the adapter on the first transform, so a missing API
    key does not prevent the UI from starting.

    Args:
        state: Existing UIState or None
        model_name: Name of model adapter to use (default: from config)

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if model_name:
        state.current_model_name = model_name

    if not state.current_model_name:
        state.current_model_name = config.default_model_adapter

    if state.is_initialized():
        logger.debug("UIState already initialized")
        return state

    logger.info(f"Initializing model adapter: {state.current_model_name}")
    state.model_adapter = model_registry.instantiate(state.current_model_name, config)

    try:
        state.model_adapter.load_model()
        logger.info("Model client pre-loaded successfully")
    except Exception as e:
        logger.error(f"Failed to pre-load model client: {e}")
        logger.warning("Model client will be loaded on first transform attempt")

    logger.info(f"Model adapter details: {state.model_adapter.get_model_info()}")
    logger.info(f"UIState initialization complete: {state}")
    return state


def _clear_error(state: UIState) -> None:
    state.error_message = None
    state.error_kind = None


def _fail(state: UIState, kind: ErrorKind, message: str | None) -> None:
    state.phase = Phase.ERROR
    state.result_image = None
    state.error_kind = kind
    state.error_message = message or GENERIC_ERROR_MESSAGE


async def upload_image(state: UIState, file_path: str | Path) -> UIState:
    """Load a new source image into the session.

    Args:
        state: UI state
        file_path: Path of the uploaded file

    Returns:
        The same state, now IDLE with the new image, or ERROR on decode failure

    Raises:
        TransitionError: If an upload or transform is already running
    """
    if state.phase in _BUSY_PHASES:
        logger.warning(f"Upload rejected while {state.phase.value}")
        raise TransitionError(f"Cannot load an image while {state.phase.value.lower()}")

    state.phase = Phase.UPLOADING
    state.result_image = None
    _clear_error(state)

    try:
        encoded = await asyncio.to_thread(encode_image_file, file_path)
    except DecodeError as e:
        logger.warning(f"Upload failed: {e}")
        _fail(state, ErrorKind.DECODE, str(e))
        return state
    except Exception as e:
        logger.error(f"Upload failed unexpectedly: {e}", exc_info=True)
        _fail(state, ErrorKind.DECODE, DECODE_ERROR_MESSAGE)
        return state

    state.source_image = encoded
    state.phase = Phase.IDLE
    logger.info(f"Source image loaded from {Path(file_path).name}")
    return state


async def process_image(state: UIState) -> UIState:
    """Repaint the source image with the session's current intensity.

    The phase check and the switch to PROCESSING happen before the first
    ``await``, so a second call on the same session is rejected while the
    first request is in flight.

    Args:
        state: UI state

    Returns:
        The same state, now SUCCESS with a result or ERROR with a message

    Raises:
        TransitionError: If no image is loaded or the session is busy
    """
    if not state.has_source:
        logger.warning("Process rejected: no source image")
        raise TransitionError("Load an image before applying the style")

    if state.phase in _BUSY_PHASES:
        logger.warning(f"Process rejected while {state.phase.value}")
        raise TransitionError(f"Cannot apply the style while {state.phase.value.lower()}")

    state.phase = Phase.PROCESSING
    state.result_image = None
    _clear_error(state)

    source, intensity = state.source_image, state.intensity
    logger.info(f"Processing image with intensity: {intensity.value}")

    try:
        state = initialize_ui_state(state)
        result = await state.model_adapter.transform(source, intensity)
    except RequestError as e:
        logger.warning(f"Transform returned no image: {e}")
        _fail(state, ErrorKind.REQUEST, str(e))
        return state
    except Exception as e:
        logger.error(f"Transform failed: {e}", exc_info=True)
        _fail(state, ErrorKind.SERVICE, str(e))
        return state

    state.result_image = result
    state.phase = Phase.SUCCESS
    logger.info("Transform succeeded")
    return state


def dismiss_error(state: UIState) -> UIState:
    """Return an ERROR session to IDLE. No-op in any other phase."""
    if state.phase != Phase.ERROR:
        logger.debug(f"Nothing to dismiss in phase {state.phase.value}")
        return state

    logger.info(f"Dismissing {state.error_kind.value if state.error_kind else ''} error")
    _clear_error(state)
    state.phase = Phase.IDLE
    return state


def change_intensity(state: UIState, intensity: StyleIntensity | str) -> UIState:
    """Store the intensity used by the next transform.

    Raises:
        TransitionError: While a transform is in flight
        ValueError: If ``intensity`` is not a known intensity label
    """
    if state.is_processing:
        logger.warning("Intensity change rejected while processing")
        raise TransitionError("Cannot change the stroke intensity while painting")

    state.intensity = StyleIntensity(intensity)
    logger.info(f"Intensity set to: {state.intensity.value}")
    return state


def download_result(
    state: UIState, outputs_dir: Path | None = None, prefix: str | None = None
) -> Path | None:
    """Write the result image to disk for download.

    Args:
        state: UI state
        outputs_dir: Target directory (default: config.outputs_dir)
        prefix: Filename prefix (default: config.download_prefix)

    Returns:
        Path of the written PNG, or None when there is no result
    """
    if not state.has_result:
        logger.debug("No result image to download")
        return None

    return save_encoded_image(
        state.result_image,
        outputs_dir if outputs_dir is not None else config.outputs_dir,
        prefix if prefix is not None else config.download_prefix,
    )


def cleanup_ui_state(state: UIState) -> None:
    """Release the session's model adapter."""
    logger.info("Cleaning up UIState resources")

    if state.model_adapter is not None:
        try:
            state.model_adapter.unload_model()
        except Exception as e:
            logger.error(f"Error unloading model client: {e}")

    state.model_adapter = None
