"""Pytest configuration and shared fixtures."""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Keep test output quiet: no console exporters during app startup
os.environ.setdefault("OTEL_ENABLE_TRACES", "false")
os.environ.setdefault("OTEL_ENABLE_METRICS", "false")
os.environ.setdefault("LOG_FORMAT", "console")

from api.models import NoteContent  # noqa: E402
from api.services import AIGateway, InMemoryBlobStore, NoteStore  # noqa: E402


class FakeClock:
    """Clock that advances one minute on every call unless frozen."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class SequentialIds:
    """Id factory returning "n1", "n2", ..."""

    def __init__(self, prefix: str = "n"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count}"


@pytest.fixture
def clock():
    """Deterministic clock for the note store."""
    return FakeClock()


@pytest.fixture
def id_factory():
    """Deterministic id factory for the note store."""
    return SequentialIds()


@pytest.fixture
def blob_store():
    """Empty in-memory blob store."""
    return InMemoryBlobStore()


@pytest.fixture
def store(blob_store, id_factory, clock):
    """Empty note store with deterministic ids and timestamps."""
    return NoteStore(blob_store, id_factory=id_factory, clock=clock)


@pytest.fixture
def sample_content():
    """Sample Gujarati note content."""
    return NoteContent(title="ખરીદી", body="દૂધ અને બ્રેડ લાવવાના છે")


@pytest.fixture
def long_body():
    """Body long enough to be summarized."""
    return "Meeting notes: discuss the release plan, assign owners and agree on dates."


@pytest.fixture
def fake_gateway():
    """AI gateway double with async methods."""
    gateway = MagicMock(spec=AIGateway)
    gateway.summarize = AsyncMock(return_value="A short summary.")
    gateway.translate = AsyncMock(
        return_value=NoteContent(title="Shopping", body="Bring milk and bread")
    )
    gateway.chat = AsyncMock(return_value="Hello from SmartBot!")
    return gateway


@pytest.fixture
def api_client(tmp_path, monkeypatch, fake_gateway):
    """FastAPI test client with lifespan context.

    Notes are persisted under a temporary directory and the AI gateway is
    replaced with ``fake_gateway``.
    """
    monkeypatch.setenv("SMARTNOTE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SMARTNOTE_DEFAULT_LANGUAGE", "gu")

    from api.app import app

    with TestClient(app) as client:
        app.state.ai_gateway = fake_gateway
        yield client


@pytest.fixture
def note_store(api_client):  # noqa: ARG001
    """The note store owned by the running test app."""
    from api.app import app

    return app.state.note_store


@pytest.fixture
def sample_note_data():
    """Sample note data for the create endpoint."""
    return {
        "title": "Test Note",
        "body": "This is a test note body.",
        "color": "#FFC0CB",
        "isPinned": False,
    }
