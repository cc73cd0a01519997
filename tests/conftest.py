"""Shared pytest fixtures for GenAI Gateway tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from genai_gateway.api.main import create_app
from genai_gateway.core.config import GatewayConfig
from genai_gateway.core.encoder import EncodedMediaPart
from genai_gateway.core.model_client import ModelClient


class StubModelClient(ModelClient):
    """In-memory :class:`ModelClient` that records every call.

    Attributes:
        reply: Text returned by both generate methods.
        error: If set, raised instead of returning ``reply``.
        calls: ``(kind, prompt, part)`` tuples in call order.
        files_during_call: Contents of ``upload_dir`` at the time of the
            most recent call (empty when no ``upload_dir`` was given).
    """

    def __init__(self, reply: str = "stub output", upload_dir: Path | None = None):
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[tuple[str, str, EncodedMediaPart | None]] = []
        self.files_during_call: list[Path] = []
        self._upload_dir = upload_dir

    async def generate_from_text(self, prompt: str) -> str:
        return self._respond("text", prompt, None)

    async def generate_from_parts(self, prompt: str, part: EncodedMediaPart) -> str:
        return self._respond("parts", prompt, part)

    def _respond(self, kind: str, prompt: str, part: EncodedMediaPart | None) -> str:
        self.calls.append((kind, prompt, part))
        if self._upload_dir is not None:
            self.files_during_call = list(self._upload_dir.iterdir())
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> GatewayConfig:
    """Create a test configuration with a temporary upload directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        GatewayConfig instance for testing
    """
    return GatewayConfig(
        google_api_key="test-key",
        model_name="gemini-test",
        upload_dir=str(temp_dir / "uploads"),
        _env_file=None,
    )


@pytest.fixture
def stub_client(test_config: GatewayConfig) -> StubModelClient:
    """Model client stub that replies ``"hi there"``."""
    return StubModelClient(reply="hi there", upload_dir=test_config.upload_dir)


@pytest.fixture
def test_client(
    test_config: GatewayConfig, stub_client: StubModelClient
) -> Generator[TestClient, None, None]:
    """TestClient for an app wired to the stub model client."""
    app = create_app(test_config, model_client=stub_client)
    with TestClient(app) as client:
        yield client

