"""
Tests for API Routes.

Requires Python 3.11+.
"""

import inspect
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_code_generator, set_refresher
from api.main import app
from api.routes.codes import generate_code
from api.routes.websocket import WebSocketManager
from codes.generator import CodeGenerator
from utils.config import CodeSettings
from watcher.refresher import ImageRefresher


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def generator(project_dir: Path):
    """Route code generation into the test project."""
    gen = CodeGenerator("%PROJECTDIR%/code.png", CodeSettings(), project_dir)
    app.dependency_overrides[get_code_generator] = lambda: gen
    yield gen
    app.dependency_overrides.pop(get_code_generator, None)


@pytest.fixture
def running_refresher(image_reference, project_dir: Path):
    """Publish a running session to the API."""
    session = ImageRefresher(image_reference, project_dir=project_dir, delay_ms=10)
    session.start()
    set_refresher(session)
    yield session
    set_refresher(None)
    session.stop()


class TestHealthEndpoint:
    """Test cases for health endpoint."""

    def test_health_check(self, client):
        """Test health check returns valid response."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestCodeEndpoints:
    """Test cases for code generation endpoints."""

    def test_generate_qr(self, client, generator, project_dir: Path):
        """A QR code is written to the configured path."""
        response = client.post("/codes", json={"value": "HELLO", "type": "QRCode"})
        assert response.status_code == 200

        data = response.json()
        assert data["path"] == str(project_dir / "code.png")
        assert data["type"] == "QRCode"
        assert data["size"] > 0

    def test_generate_barcode(self, client, generator):
        """A Code 39 barcode is accepted."""
        response = client.post("/codes", json={"value": "HELLO", "type": "Barcode39"})
        assert response.status_code == 200

    def test_unknown_type(self, client, generator):
        """Unknown symbologies fail validation."""
        response = client.post("/codes", json={"value": "HELLO", "type": "Aztec"})
        assert response.status_code == 422

    def test_empty_value(self, client, generator):
        """Empty values fail validation."""
        response = client.post("/codes", json={"value": "", "type": "QRCode"})
        assert response.status_code == 422

    def test_unencodable_value(self, client, generator):
        """Values Code 39 cannot encode are reported as 422."""
        response = client.post("/codes", json={"value": "a@b", "type": "Barcode39"})
        assert response.status_code == 422

    def test_value_too_long_for_qr(self, client, generator):
        """Values past QR capacity are reported as 422."""
        response = client.post("/codes", json={"value": "\u00e9" * 2000, "type": "QRCode"})
        assert response.status_code == 422

    def test_route_runs_off_the_event_loop(self):
        """Blocking rendering is declared sync so FastAPI runs it in a worker thread."""
        assert not inspect.iscoroutinefunction(generate_code)


class TestRefresherEndpoints:
    """Test cases for refresher endpoints."""

    def test_status_without_session(self, client):
        """No session means 503."""
        set_refresher(None)
        response = client.get("/refresher")
        assert response.status_code == 503

    def test_status(self, client, running_refresher, image_file: Path):
        """Status reports the watched file."""
        response = client.get("/refresher")
        assert response.status_code == 200

        data = response.json()
        assert data["active"] is True
        assert data["watched_path"] == str(image_file)
        assert data["counter"] == 1

    def test_manual_refresh(self, client, running_refresher, image_reference):
        """POST /refresher/refresh queues a cycle."""
        response = client.post("/refresher/refresh")
        assert response.status_code == 200
        assert response.json()["queued"] is True


class TestWebSocketManager:
    """Test cases for the WebSocket manager."""

    @pytest.mark.asyncio
    async def test_broadcast_drops_failed_clients(self):
        """Clients that fail to receive are disconnected."""
        sent: list[str] = []

        class GoodSocket:
            async def send_text(self, text: str) -> None:
                sent.append(text)

        class BadSocket:
            async def send_text(self, text: str) -> None:
                raise RuntimeError("closed")

        manager = WebSocketManager()
        manager._connections = {GoodSocket(), BadSocket()}

        await manager.broadcast({"type": "image_updated", "path": "%PROJECTDIR%/img~1.png"})

        assert len(sent) == 1
        assert manager.connection_count == 1

    def test_websocket_connect_and_ping(self, client):
        """Viewers get a greeting and can ping."""
        with client.websocket_connect("/ws/images") as ws:
            greeting = ws.receive_json()
            assert greeting["type"] == "connected"

            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}
