"""Shared pytest fixtures for Impasto tests."""

import base64
import shutil
import struct
import tempfile
import zlib
from io import BytesIO
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from impasto.core.config import ImpastoConfig
from impasto.core.model_adapters import ContentPart, ModelAdapterBase
from impasto.ui.models import UIState


class FakeAdapter(ModelAdapterBase):
    """In-memory adapter that records requests and returns scripted parts."""

    name = "Fake-Adapter"
    description = "Scripted adapter for tests"

    def __init__(self, config: ImpastoConfig, parts=None, error: Exception | None = None):
        super().__init__(config)
        self.parts = list(parts or [])
        self.error = error
        self.calls: list[tuple[str, str, str]] = []
        self._loaded = False

    def load_model(self) -> None:
        self._loaded = True

    def unload_model(self) -> None:
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def generate_parts(self, image_data, mime_type, instruction):
        self.calls.append((image_data, mime_type, instruction))
        if self.error is not None:
            raise self.error
        return list(self.parts)


def _image_bytes(fmt: str, color: tuple[int, int, int]) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, fmt)
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> ImpastoConfig:
    """Create a test configuration with a temporary output directory."""
    return ImpastoConfig(
        _env_file=None,
        outputs_dir=temp_dir / "outputs",
        gemini_api_key="test-key",
        gemini_model_id="gemini-test-model",
    )


@pytest.fixture
def png_bytes() -> bytes:
    """Raw bytes of a small red PNG."""
    return _image_bytes("PNG", (200, 30, 30))


@pytest.fixture
def png_b64(png_bytes: bytes) -> str:
    """Base64 text of the red PNG."""
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def jpeg_file(temp_dir: Path) -> Path:
    """A small JPEG photo on disk."""
    path = temp_dir / "photo.jpg"
    path.write_bytes(_image_bytes("JPEG", (30, 90, 200)))
    return path


@pytest.fixture
def png_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """A small PNG on disk."""
    path = temp_dir / "photo.png"
    path.write_bytes(png_bytes)
    return path


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


@pytest.fixture
def oversized_png(temp_dir: Path) -> Path:
    """A PNG whose header declares 40000x40000 pixels, past Pillow's bomb limit."""
    path = temp_dir / "huge.png"
    header = struct.pack(">IIBBBBB", 40000, 40000, 8, 2, 0, 0, 0)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def text_file(temp_dir: Path) -> Path:
    """A file that is not an image."""
    path = temp_dir / "notes.jpg"
    path.write_text("definitely not an image")
    return path


@pytest.fixture
def fake_adapter(test_config: ImpastoConfig, png_b64: str) -> FakeAdapter:
    """Adapter that answers with a text part followed by the red PNG."""
    return FakeAdapter(
        test_config,
        parts=[
            ContentPart(text="Here is your painting."),
            ContentPart(data=png_b64, mime_type="image/png"),
        ],
    )


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing."""
    return UIState()


@pytest.fixture
def ready_state(fake_adapter: FakeAdapter, png_b64: str) -> UIState:
    """UI state with a loaded source image and the fake adapter attached."""
    return UIState(
        source_image=f"data:image/jpeg;base64,{png_b64}",
        model_adapter=fake_adapter,
        current_model_name=fake_adapter.name,
    )
