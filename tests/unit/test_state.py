"""Unit tests for the session state machine."""

import asyncio
import base64
import logging
from unittest.mock import Mock, patch

import pytest

from impasto.core.errors import DECODE_ERROR_MESSAGE, RequestError, TransitionError
from impasto.core.model_adapters import ContentPart
from impasto.core.style_profiles import StyleIntensity, build_instruction
from impasto.ui.models import GENERIC_ERROR_MESSAGE, ErrorKind, Phase, UIState
from impasto.ui.state import (
    change_intensity,
    cleanup_ui_state,
    dismiss_error,
    download_result,
    initialize_ui_state,
    process_image,
    upload_image,
)

from tests.conftest import FakeAdapter


class SlowAdapter(FakeAdapter):
    """Adapter whose request blocks until released."""

    def __init__(self, config, **kwargs):
        super().__init__(config, **kwargs)
        self.release = asyncio.Event()

    async def generate_parts(self, image_data, mime_type, instruction):
        await self.release.wait()
        return await super().generate_parts(image_data, mime_type, instruction)


class TestInitializeUIState:
    """Tests for initialize_ui_state function."""

    def test_initialize_none_creates_new_state(self, test_config):
        with patch("impasto.ui.state.model_registry") as mock_registry, patch(
            "impasto.ui.state.config", test_config
        ):
            mock_registry.instantiate.return_value = Mock()

            result = initialize_ui_state(None)

            assert isinstance(result, UIState)
            assert result.current_model_name == "Gemini-Image-Edit"
            mock_registry.instantiate.assert_called_once_with("Gemini-Image-Edit", test_config)

    def test_initialize_returns_if_already_initialized(self, ready_state):
        adapter = ready_state.model_adapter

        with patch("impasto.ui.state.model_registry") as mock_registry:
            result = initialize_ui_state(ready_state)

        assert result is ready_state
        assert result.model_adapter is adapter
        mock_registry.instantiate.assert_not_called()

    def test_initialize_uses_requested_model(self, test_config):
        with patch("impasto.ui.state.model_registry") as mock_registry, patch(
            "impasto.ui.state.config", test_config
        ):
            mock_registry.instantiate.return_value = Mock()

            result = initialize_ui_state(UIState(), model_name="Fake-Adapter")

            assert result.current_model_name == "Fake-Adapter"
            mock_registry.instantiate.assert_called_once_with("Fake-Adapter", test_config)

    def test_initialize_loads_model(self, test_config):
        with patch("impasto.ui.state.model_registry") as mock_registry, patch(
            "impasto.ui.state.config", test_config
        ):
            mock_adapter = Mock()
            mock_registry.instantiate.return_value = mock_adapter

            initialize_ui_state(UIState())

            mock_adapter.load_model.assert_called_once()

    def test_initialize_logs_model_info(self, fake_adapter, caplog):
        caplog.set_level(logging.INFO, logger="impasto.ui.state")

        with patch("impasto.ui.state.model_registry") as mock_registry:
            mock_registry.instantiate.return_value = fake_adapter
            initialize_ui_state(UIState())

        assert "'name': 'Fake-Adapter'" in caplog.text
        assert "'is_loaded': True" in caplog.text

    def test_initialize_handles_model_load_failure(self, test_config):
        with patch("impasto.ui.state.model_registry") as mock_registry, patch(
            "impasto.ui.state.config", test_config
        ):
            mock_adapter = Mock()
            mock_adapter.load_model.side_effect = RuntimeError("no key")
            mock_registry.instantiate.return_value = mock_adapter

            result = initialize_ui_state(UIState())

            assert result.model_adapter is mock_adapter


class TestUploadImage:
    """Tests for the upload transition."""

    def test_valid_image_sets_source_and_clears_result(self, jpeg_file):
        state = UIState(phase=Phase.SUCCESS, result_image="data:image/png;base64,QUJD")

        asyncio.run(upload_image(state, jpeg_file))

        assert state.phase == Phase.IDLE
        assert state.source_image.startswith("data:image/jpeg;base64,")
        assert base64.b64decode(state.source_image.split(",", 1)[1]) == jpeg_file.read_bytes()
        assert state.result_image is None
        assert state.is_consistent()

    def test_upload_from_error_clears_error(self, png_file):
        state = UIState(
            phase=Phase.ERROR, error_message="boom", error_kind=ErrorKind.SERVICE
        )

        asyncio.run(upload_image(state, str(png_file)))

        assert state.phase == Phase.IDLE
        assert state.error_message is None
        assert state.error_kind is None

    def test_decode_failure_sets_fixed_message(self, text_file):
        state = UIState()

        asyncio.run(upload_image(state, text_file))

        assert state.phase == Phase.ERROR
        assert state.error_kind == ErrorKind.DECODE
        assert state.error_message == DECODE_ERROR_MESSAGE
        assert state.is_consistent()

    def test_decode_failure_keeps_previous_source(self, text_file):
        state = UIState(source_image="data:image/png;base64,QUJD")

        asyncio.run(upload_image(state, text_file))

        assert state.source_image == "data:image/png;base64,QUJD"

    def test_oversized_image_is_decode_error(self, oversized_png, jpeg_file):
        state = UIState()

        asyncio.run(upload_image(state, oversized_png))

        assert state.phase == Phase.ERROR
        assert state.error_kind == ErrorKind.DECODE
        assert state.error_message == DECODE_ERROR_MESSAGE

        asyncio.run(upload_image(state, jpeg_file))

        assert state.phase == Phase.IDLE
        assert state.has_source

    def test_unexpected_decode_failure_is_decode_error(self, jpeg_file):
        state = UIState()

        with patch("impasto.ui.state.encode_image_file", side_effect=RuntimeError("disk gone")):
            asyncio.run(upload_image(state, jpeg_file))

        assert state.phase == Phase.ERROR
        assert state.error_kind == ErrorKind.DECODE
        assert state.error_message == DECODE_ERROR_MESSAGE
        assert state.is_consistent()

    @pytest.mark.parametrize("phase", [Phase.UPLOADING, Phase.PROCESSING])
    def test_rejected_while_busy(self, jpeg_file, phase):
        state = UIState(phase=phase)

        with pytest.raises(TransitionError):
            asyncio.run(upload_image(state, jpeg_file))

        assert state.phase == phase
        assert state.source_image is None


class TestProcessImage:
    """Tests for the process transition."""

    def test_success_stores_result(self, ready_state, png_b64):
        asyncio.run(process_image(ready_state))

        assert ready_state.phase == Phase.SUCCESS
        assert ready_state.result_image == f"data:image/png;base64,{png_b64}"
        assert ready_state.error_message is None
        assert ready_state.is_consistent()

    def test_uses_current_intensity(self, ready_state):
        ready_state.intensity = StyleIntensity.HIGH

        asyncio.run(process_image(ready_state))

        assert ready_state.model_adapter.calls[0][2] == build_instruction(StyleIntensity.HIGH)

    def test_intensity_change_between_runs(self, ready_state):
        asyncio.run(process_image(ready_state))
        change_intensity(ready_state, StyleIntensity.LOW)
        asyncio.run(process_image(ready_state))

        first, second = ready_state.model_adapter.calls
        assert first[0] == second[0]
        assert first[2] != second[2]

    def test_without_source_rejected(self, fake_adapter):
        state = UIState(model_adapter=fake_adapter)

        with pytest.raises(TransitionError):
            asyncio.run(process_image(state))

        assert state.phase == Phase.IDLE
        assert fake_adapter.calls == []

    def test_request_error_sets_message(self, ready_state, test_config):
        ready_state.model_adapter = FakeAdapter(
            test_config, parts=[ContentPart(text="no image for you")]
        )

        asyncio.run(process_image(ready_state))

        assert ready_state.phase == Phase.ERROR
        assert ready_state.error_kind == ErrorKind.REQUEST
        assert ready_state.error_message == "no image data found"
        assert ready_state.result_image is None

    def test_service_error_message_passed_through(self, ready_state, test_config):
        ready_state.model_adapter = FakeAdapter(
            test_config, error=ConnectionError("429 RESOURCE_EXHAUSTED")
        )

        asyncio.run(process_image(ready_state))

        assert ready_state.phase == Phase.ERROR
        assert ready_state.error_kind == ErrorKind.SERVICE
        assert ready_state.error_message == "429 RESOURCE_EXHAUSTED"

    def test_service_error_without_message_uses_fallback(self, ready_state, test_config):
        ready_state.model_adapter = FakeAdapter(test_config, error=RuntimeError())

        asyncio.run(process_image(ready_state))

        assert ready_state.error_message == GENERIC_ERROR_MESSAGE

    def test_request_error_subclass_is_request_kind(self, ready_state, test_config):
        ready_state.model_adapter = FakeAdapter(test_config, error=RequestError())

        asyncio.run(process_image(ready_state))

        assert ready_state.error_kind == ErrorKind.REQUEST

    def test_previous_result_cleared_on_failure(self, ready_state, test_config):
        asyncio.run(process_image(ready_state))
        ready_state.model_adapter = FakeAdapter(test_config, error=ConnectionError("offline"))

        asyncio.run(process_image(ready_state))

        assert ready_state.result_image is None
        assert ready_state.is_consistent()

    def test_retry_from_error(self, ready_state, fake_adapter, test_config):
        ready_state.model_adapter = FakeAdapter(test_config, error=ConnectionError("offline"))
        asyncio.run(process_image(ready_state))

        ready_state.model_adapter = fake_adapter
        asyncio.run(process_image(ready_state))

        assert ready_state.phase == Phase.SUCCESS
        assert ready_state.error_message is None

    def test_initializes_adapter_when_missing(self, png_b64, fake_adapter):
        state = UIState(source_image=f"data:image/jpeg;base64,{png_b64}")

        with patch("impasto.ui.state.model_registry") as mock_registry:
            mock_registry.instantiate.return_value = fake_adapter
            asyncio.run(process_image(state))

        assert state.phase == Phase.SUCCESS
        assert state.model_adapter is fake_adapter

    def test_unknown_adapter_reported_as_error(self, png_b64):
        state = UIState(
            source_image=f"data:image/jpeg;base64,{png_b64}", current_model_name="Missing"
        )

        asyncio.run(process_image(state))

        assert state.phase == Phase.ERROR
        assert state.error_kind == ErrorKind.SERVICE
        assert "Missing" in state.error_message

    def test_in_flight_guard(self, test_config, png_b64, jpeg_file):
        adapter = SlowAdapter(test_config, parts=[ContentPart(data=png_b64)])
        state = UIState(source_image=png_b64, model_adapter=adapter, current_model_name="Slow")

        async def scenario():
            first = asyncio.ensure_future(process_image(state))
            await asyncio.sleep(0)
            assert state.phase == Phase.PROCESSING

            with pytest.raises(TransitionError):
                await process_image(state)
            with pytest.raises(TransitionError):
                change_intensity(state, StyleIntensity.HIGH)
            with pytest.raises(TransitionError):
                await upload_image(state, jpeg_file)

            adapter.release.set()
            await first

        asyncio.run(scenario())

        assert len(adapter.calls) == 1
        assert state.phase == Phase.SUCCESS
        assert state.intensity == StyleIntensity.MEDIUM


class TestDismissError:
    """Tests for the dismiss transition."""

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_returns_to_idle_for_every_kind(self, kind):
        state = UIState(phase=Phase.ERROR, error_message="boom", error_kind=kind)

        dismiss_error(state)

        assert state.phase == Phase.IDLE
        assert state.error_message is None
        assert state.error_kind is None

    def test_noop_outside_error(self):
        state = UIState(phase=Phase.SUCCESS, result_image="data:image/png;base64,QUJD")

        dismiss_error(state)

        assert state.phase == Phase.SUCCESS
        assert state.result_image is not None


class TestChangeIntensity:
    """Tests for the intensity transition."""

    @pytest.mark.parametrize("phase", [Phase.IDLE, Phase.SUCCESS, Phase.ERROR, Phase.UPLOADING])
    def test_allowed_outside_processing(self, phase):
        state = UIState(phase=phase)

        change_intensity(state, StyleIntensity.LOW)

        assert state.intensity == StyleIntensity.LOW
        assert state.phase == phase

    def test_accepts_label(self):
        state = change_intensity(UIState(), "Starry Night Swirls")

        assert state.intensity == StyleIntensity.HIGH

    def test_rejected_while_processing(self):
        state = UIState(phase=Phase.PROCESSING)

        with pytest.raises(TransitionError):
            change_intensity(state, StyleIntensity.HIGH)

        assert state.intensity == StyleIntensity.MEDIUM

    def test_unknown_value_rejected(self):
        with pytest.raises(ValueError):
            change_intensity(UIState(), "Pointillism")


class TestDownloadResult:
    """Tests for download_result."""

    def test_writes_result_bytes(self, ready_state, temp_dir, png_bytes):
        asyncio.run(process_image(ready_state))

        path = download_result(ready_state, outputs_dir=temp_dir, prefix="vangogh-art")

        assert path.parent == temp_dir
        assert path.name.startswith("vangogh-art-")
        assert path.suffix == ".png"
        assert path.read_bytes() == png_bytes

    def test_defaults_from_config(self, ready_state, test_config, png_bytes):
        asyncio.run(process_image(ready_state))

        with patch("impasto.ui.state.config", test_config):
            path = download_result(ready_state)

        assert path.parent == test_config.outputs_dir
        assert path.read_bytes() == png_bytes

    def test_none_without_result(self, temp_dir):
        assert download_result(UIState(), outputs_dir=temp_dir) is None
        assert list(temp_dir.iterdir()) == []


class TestCleanupUIState:
    """Tests for cleanup_ui_state."""

    def test_unloads_adapter(self, ready_state):
        adapter = ready_state.model_adapter
        adapter.load_model()

        cleanup_ui_state(ready_state)

        assert adapter.is_loaded is False
        assert ready_state.model_adapter is None

    def test_unload_failure_is_logged(self):
        adapter = Mock()
        adapter.unload_model.side_effect = RuntimeError("busy")
        state = UIState(model_adapter=adapter)

        cleanup_ui_state(state)

        assert state.model_adapter is None
