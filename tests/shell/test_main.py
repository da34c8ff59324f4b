"""Tests for the Flask entry point.

Drives the HTTP controls with Flask's test client against a controller
backed by a fake provider.
"""

import asyncio
import threading
from unittest.mock import Mock

import pytest

from quakemap.controller import MapController
from quakemap.core.config import Config
from quakemap.core.event import EventRecord
from quakemap.core.source import DataSourceMode
from quakemap.main import LoopThread, create_app
from quakemap.shell.location_service import LocationService
from quakemap.shell.map_surface import MapSurface
from quakemap.shell.static_map_client import MapImageResult


DATA = {
    DataSourceMode.LIVE: {
        "Izmir": [EventRecord("2023-02-06", "04:17", 10.0, 6.5, (27.1, 38.4))],
        "Ankara": [EventRecord("2023-02-06", "05:00", 7.0, 3.1, (32.8, 39.9))],
    },
    DataSourceMode.STORED: {},
}


class FakeProvider:
    async def fetch(self, mode):
        return DATA[mode]


@pytest.fixture
def loop_thread():
    thread = LoopThread().start()
    yield thread
    thread.stop()


@pytest.fixture
def controller():
    surface = MapSurface()
    return MapController(
        Config(geolocation_url=""),
        provider=FakeProvider(),
        surface=surface,
        location_service=LocationService(surface, None),
    )


@pytest.fixture
def static_map_client():
    client = Mock()
    client.render_layers.return_value = MapImageResult(success=True, image_bytes=b"PNG")
    return client


@pytest.fixture
def app(controller, loop_thread, static_map_client):
    app = create_app(
        config=Config(geolocation_url=""),
        controller=controller,
        loop_thread=loop_thread,
        static_map_client=static_map_client,
        start=False,
    )
    app.testing = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


class TestRoutes:
    """Tests for the HTTP controls."""

    def test_refresh_renders_events(self, client):
        response = client.post("/refresh")

        assert response.status_code == 200
        body = response.get_json()
        assert body["mode"] == "live"
        assert body["markers_drawn"] == 2
        assert body["alerts_fired"] == 1

    def test_toggle_source(self, client):
        body = client.post("/source/toggle").get_json()

        assert body["mode"] == "stored"
        assert body["markers_drawn"] == 0

        state = client.get("/state").get_json()
        assert state["mode"] == "stored"
        assert state["toggle_label"] == "Live data"

    def test_filter_with_form_values(self, client):
        response = client.post("/filter", data={"location": "ank", "magnitude": "low"})

        body = response.get_json()
        assert body["markers_drawn"] == 1
        assert body["alerts_fired"] == 0

    def test_filter_with_json(self, client):
        response = client.post("/filter", json={"location": "", "magnitude": "high"})
        assert response.get_json()["markers_drawn"] == 1

    @pytest.mark.parametrize("body", [{"magnitude": 5}, {"location": 7}])
    def test_non_text_json_values_are_bad_request(self, client, body):
        response = client.post("/filter", json=body)

        assert response.status_code == 400
        assert response.get_json()["status"] == "error"

    def test_non_object_json_falls_back_to_form(self, client):
        response = client.post("/filter", json=["high"])

        assert response.status_code == 200
        assert response.get_json()["markers_drawn"] == 2

    def test_invalid_band_is_bad_request(self, client):
        response = client.post("/filter", data={"magnitude": "apocalyptic"})

        assert response.status_code == 400
        assert response.get_json()["status"] == "error"

    def test_filter_panel_and_reset(self, client):
        assert client.post("/filter/panel").get_json() == {"filter_panel_open": True}

        body = client.post("/filter/reset").get_json()

        assert body["markers_drawn"] == 2
        assert client.get("/state").get_json()["filter_panel_open"] is False

    def test_location_unavailable(self, client):
        body = client.post("/location").get_json()

        assert body["status"] == "unavailable"
        assert body["code"] == "UNSUPPORTED"

    def test_index_serves_map_html(self, client):
        client.post("/refresh")
        response = client.get("/")

        assert response.status_code == 200
        assert response.mimetype == "text/html"
        assert b"L.circle" in response.data

    def test_state_counts_markers(self, client):
        client.post("/refresh")
        state = client.get("/state").get_json()

        assert state["event_markers"] == 2
        assert state["self_markers"] == 0

    def test_snapshot(self, client, static_map_client):
        response = client.get("/snapshot.png")

        assert response.status_code == 200
        assert response.mimetype == "image/png"
        assert response.data == b"PNG"

    def test_snapshot_failure(self, client, static_map_client):
        static_map_client.render_layers.return_value = MapImageResult(
            success=False, error="no tiles"
        )

        response = client.get("/snapshot.png")

        assert response.status_code == 502
        assert response.get_json()["message"] == "no tiles"

    def test_snapshot_draws_copied_layers(self, client, static_map_client):
        client.post("/refresh")

        client.get("/snapshot.png")

        view, layers, width, height = static_map_client.render_layers.call_args.args
        assert len(layers) == 2
        assert (width, height) == (800, 600)
        assert view.zoom == 6

    def test_loop_stays_responsive_during_snapshot(self, app, loop_thread, static_map_client):
        started = threading.Event()
        release = threading.Event()

        def slow_render(*args):
            started.set()
            release.wait(5)
            return MapImageResult(success=True, image_bytes=b"PNG")

        static_map_client.render_layers.side_effect = slow_render
        results = []
        worker = threading.Thread(
            target=lambda: results.append(app.test_client().get("/snapshot.png"))
        )
        worker.start()

        try:
            assert started.wait(5)
            # Tile download is still in progress; the loop must answer at once
            assert loop_thread.run(asyncio.sleep(0, result="tick"), timeout=1) == "tick"
            assert app.test_client().post("/filter/panel").status_code == 200
        finally:
            release.set()
            worker.join(5)

        assert results[0].status_code == 200


class TestStartup:
    """Tests for the initial render submitted by create_app()."""

    def test_startup_failure_is_logged(self, loop_thread, caplog):
        controller = Mock()

        async def broken_start():
            raise RuntimeError("provider exploded")

        controller.start = broken_start

        with caplog.at_level("ERROR"):
            create_app(
                config=Config(geolocation_url=""),
                controller=controller,
                loop_thread=loop_thread,
                static_map_client=Mock(),
            )
            loop_thread.run(asyncio.sleep(0.05))

        assert "Initial render failed" in caplog.text
        assert "provider exploded" in caplog.text
