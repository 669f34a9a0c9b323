"""Gradio event handlers.

Each handler runs one state-machine transition and returns the session
followed by the component updates from ``render_session``. Rejected
transitions and invalid input are reported with a toast (``gr.Warning``) and
leave the session unchanged.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import aclosing

import gradio as gr

from impasto.core.errors import TransitionError

from .components import render_session
from .models import UIState
from .state import (
    change_intensity,
    dismiss_error,
    download_result,
    initialize_ui_state,
    process_image,
    upload_image,
)
from .validation import ValidationError, parse_intensity, validate_upload

logger = logging.getLogger(__name__)


# Transitions whose handler was closed before they finished
_detached_transitions: set[asyncio.Task] = set()


def _outputs(state: UIState) -> tuple:
    return (state, *render_session(state))


async def _run_transition(state: UIState, transition: Awaitable[UIState]) -> AsyncIterator[tuple]:
    """Render the in-progress phase, then the outcome, of an async transition.

    If the handler is closed or cancelled early (the browser went away), the
    transition keeps running and still updates the session in place.
    """
    task = asyncio.ensure_future(transition)
    try:
        # let the transition run up to its first suspension point
        await asyncio.sleep(0)
        if not task.done():
            yield _outputs(state)

        try:
            state = await asyncio.shield(task)
        except TransitionError as e:
            gr.Warning(str(e))
        yield _outputs(state)
    finally:
        if not task.done():
            logger.info("Handler closed before its transition finished; letting it complete")
            _detached_transitions.add(task)
            task.add_done_callback(_detached_transitions.discard)


def load_session(state: UIState) -> tuple:
    """Attach the model adapter and render the initial page."""
    try:
        state = initialize_ui_state(state)
    except KeyError as e:
        logger.error(f"Failed to initialize session: {e}")
        gr.Warning(f"Model adapter unavailable: {e}")
    return _outputs(state)


async def upload_handler(file_path: str | None, state: UIState) -> AsyncIterator[tuple]:
    """Handle a file chosen with the Load Image button."""
    try:
        file_path = validate_upload(file_path)
    except ValidationError as e:
        gr.Warning(str(e))
        yield _outputs(state)
        return

    async with aclosing(_run_transition(state, upload_image(state, file_path))) as outputs:
        async for output in outputs:
            yield output


async def process_handler(state: UIState) -> AsyncIterator[tuple]:
    """Handle the Apply Style button."""
    async with aclosing(_run_transition(state, process_image(state))) as outputs:
        async for output in outputs:
            yield output


def dismiss_error_handler(state: UIState) -> tuple:
    """Handle the ✕ button on the error banner."""
    return _outputs(dismiss_error(state))


def change_intensity_handler(label: str, state: UIState) -> tuple:
    """Handle a change of the Stroke Intensity radio."""
    try:
        state = change_intensity(state, parse_intensity(label))
    except (ValidationError, TransitionError) as e:
        gr.Warning(str(e))
    return _outputs(state)


def download_handler(state: UIState) -> dict:
    """Handle the Save Art button.

    Returns:
        Update for the download file component
    """
    try:
        path = download_result(state)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to save result: {e}", exc_info=True)
        gr.Warning(f"Could not save the image: {e}")
        return gr.update(visible=False)

    if path is None:
        gr.Warning("Nothing to save yet")
        return gr.update(visible=False)

    return gr.update(value=str(path), visible=True)
