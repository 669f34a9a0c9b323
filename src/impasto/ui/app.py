"""Gradio UI for Impasto."""

import logging

import gradio as gr

from impasto.core.config import config
from impasto.core.model_adapters import model_registry

from .components import CanvasUI, ControlsUI
from .handlers import (
    change_intensity_handler,
    dismiss_error_handler,
    download_handler,
    load_session,
    process_handler,
    upload_handler,
)
from .models import UIState
from .state import cleanup_ui_state

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> tuple[gr.Blocks, str]:
    """Create the Gradio UI.

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    custom_css = """
    .impasto-sidebar {
        border-right: 1px solid #1f2937;
        padding: 12px;
    }
    """

    app = gr.Blocks(title="Impasto - Van Gogh Style")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState(), delete_callback=cleanup_ui_state)

        with gr.Row():
            with gr.Column(scale=1, min_width=260, elem_classes=["impasto-sidebar"]):
                controls = ControlsUI()

            with gr.Column(scale=4):
                canvas = CanvasUI()

        session_outputs = [
            ui_state,
            *controls.get_output_components(),
            *canvas.get_output_components(),
        ]

        app.load(fn=load_session, inputs=[ui_state], outputs=session_outputs)

        controls.upload_button.upload(
            fn=upload_handler,
            inputs=[controls.upload_button, ui_state],
            outputs=session_outputs,
        )
        controls.process_button.click(
            fn=process_handler,
            inputs=[ui_state],
            outputs=session_outputs,
        )
        controls.intensity.change(
            fn=change_intensity_handler,
            inputs=[controls.intensity, ui_state],
            outputs=session_outputs,
        )
        controls.download_button.click(
            fn=download_handler,
            inputs=[ui_state],
            outputs=[canvas.download_file],
        )
        canvas.dismiss_button.click(
            fn=dismiss_error_handler,
            inputs=[ui_state],
            outputs=session_outputs,
        )

    return app, custom_css


def main():
    """Main entry point for the application."""
    logger.info("Starting Impasto...")
    logger.info(f"Configuration: {config.model_dump(exclude={'gemini_api_key'})}")
    for adapter_name in model_registry.list_available():
        logger.info(f"Available model adapter: {model_registry.get_adapter_info(adapter_name)}")

    if not config.has_api_key:
        logger.warning("No Gemini API key configured; transforms will fail until one is set")

    app, custom_css = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
        css=custom_css,
    )


if __name__ == "__main__":
    main()
