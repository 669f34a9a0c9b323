"""Reusable UI components for the Impasto Gradio interface."""

import logging
from io import BytesIO

import gradio as gr
from PIL import Image

from impasto.core.encoding import decode_data_uri

from .models import INTENSITY_CHOICES, Phase, UIState

logger = logging.getLogger(__name__)


def data_uri_to_image(encoded_image: str | None) -> Image.Image | None:
    """Decode a data URI into a PIL Image for display."""
    if not encoded_image:
        return None
    try:
        image = Image.open(BytesIO(decode_data_uri(encoded_image)))
        image.load()
        return image
    except (OSError, ValueError) as e:
        logger.error(f"Could not render image for display: {e}")
        return None


def format_status(state: UIState) -> str:
    """Describe the canvas for the current phase."""
    if state.phase == Phase.UPLOADING:
        return "*Loading image...*"
    if state.phase == Phase.PROCESSING:
        return "🎨 **The artist is working...**\n\n*Analyzing gradients and applying impasto*"
    if state.phase == Phase.SUCCESS:
        return f"✅ **Masterpiece complete!** ({state.intensity.value})"
    if state.phase == Phase.ERROR:
        return ""
    if not state.has_source:
        return "**No Image Loaded**\n\n*Upload a photo to begin your masterpiece*"
    return '**Canvas Empty**\n\n*Click "Apply Style" to generate art*'


def format_error(state: UIState) -> str:
    if state.phase != Phase.ERROR or not state.error_message:
        return ""
    return f"❌ {state.error_message}"


class ControlsUI:
    """Sidebar with the upload, paint and save actions plus the intensity picker.

    Button availability follows the session phase: nothing but viewing is
    allowed while painting, painting needs a loaded image, and saving needs a
    result.
    """

    def __init__(self):
        gr.Markdown("## VAN GOGH\n*Stroke-by-stroke photo repainting*")

        self.upload_button = gr.UploadButton(
            "Load Image",
            file_types=["image"],
            file_count="single",
            type="filepath",
        )
        self.process_button = gr.Button("Apply Style", variant="primary", interactive=False)
        self.download_button = gr.Button("Save Art", interactive=False)

        self.intensity = gr.Radio(
            label="Stroke Intensity",
            choices=INTENSITY_CHOICES,
            value=INTENSITY_CHOICES[1],
        )

        gr.Markdown("<small>Powered by Gemini 2.5 Flash Image</small>")

    def get_output_components(self) -> list[gr.components.Component]:
        return [self.upload_button, self.process_button, self.download_button, self.intensity]

    @staticmethod
    def render(state: UIState) -> tuple:
        """Build component updates for the current session.

        Returns:
            Tuple of (upload_update, process_update, download_update, intensity_update)
        """
        busy = state.phase in (Phase.UPLOADING, Phase.PROCESSING)
        return (
            gr.update(interactive=not busy),
            gr.update(
                interactive=state.has_source and not busy,
                value="Painting..." if state.is_processing else "Apply Style",
            ),
            gr.update(interactive=state.has_result and not busy),
            gr.update(interactive=not state.is_processing, value=state.intensity.value),
        )


class CanvasUI:
    """Error banner, side-by-side original/result images and the saved file."""

    def __init__(self):
        with gr.Row(visible=False) as self.error_row:
            self.error_text = gr.Markdown()
            self.dismiss_button = gr.Button("✕", size="sm", scale=0)

        self.status = gr.Markdown()

        with gr.Row():
            self.original = gr.Image(label="Original", type="pil", interactive=False, height=480)
            self.result = gr.Image(label="Masterpiece", type="pil", interactive=False, height=480)

        self.download_file = gr.File(label="Download", visible=False, interactive=False)

    def get_output_components(self) -> list[gr.components.Component]:
        return [self.error_row, self.error_text, self.status, self.original, self.result]

    @staticmethod
    def render(state: UIState) -> tuple:
        """Build component updates for the current session.

        Returns:
            Tuple of (error_row_update, error_text, status_text, original_image, result_image)
        """
        return (
            gr.update(visible=state.phase == Phase.ERROR),
            format_error(state),
            format_status(state),
            data_uri_to_image(state.source_image),
            data_uri_to_image(state.result_image),
        )


def render_session(state: UIState) -> tuple:
    """Updates for ControlsUI outputs followed by CanvasUI outputs."""
    return ControlsUI.render(state) + CanvasUI.render(state)
