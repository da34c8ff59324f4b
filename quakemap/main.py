"""Web Entry Point.

Thin Flask wrapper exposing the map controls over HTTP. All pipeline work
runs on one background asyncio loop, so the session and the map surface
are only touched from that loop's thread.
"""

import asyncio
import logging
import os
import threading
from concurrent.futures import Future
from typing import Any, Coroutine

from flask import Flask, Response, jsonify, request

from quakemap.controller import MapController, RenderResult
from quakemap.core.config import Config
from quakemap.core.location import LocationFailure
from quakemap.core.source import source_label
from quakemap.shell.config_loader import load_validated_config
from quakemap.shell.map_surface import EVENT_LAYER, SELF_LAYER
from quakemap.shell.static_map_client import StaticMapClient


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class LoopThread:
    """A daemon thread running one asyncio event loop."""

    def __init__(self) -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run,
            name="quakemap-loop",
            daemon=True,
        )

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> "LoopThread":
        self._thread.start()
        return self

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        """Schedule a coroutine on the loop."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def run(self, coro: Coroutine[Any, Any, Any], timeout: float | None = None) -> Any:
        """Run a coroutine on the loop and wait for its result."""
        return self.submit(coro).result(timeout)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)


async def _call(func, *args):
    return func(*args)


def _log_startup(future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error("Initial render failed: %s", error, exc_info=error)


def _render_response(result: RenderResult) -> dict[str, Any]:
    return {
        "mode": result.mode.value,
        "stale": result.stale,
        "summary": result.summary,
        "events_fetched": result.events_fetched,
        "events_matched": result.events_matched,
        "markers_drawn": result.markers_drawn,
        "skipped": result.skipped,
        "alerts_fired": result.alerts_fired,
    }


def create_app(
    config: Config | None = None,
    controller: MapController | None = None,
    loop_thread: LoopThread | None = None,
    static_map_client: StaticMapClient | None = None,
    start: bool = True,
) -> Flask:
    """Build the Flask application.

    Args:
        config: Application configuration (loaded from CONFIG_PATH if not provided)
        controller: Map controller (created if not provided)
        loop_thread: Loop running the controller (started if not provided)
        static_map_client: Snapshot renderer (created if not provided)
        start: Run the initial render and location lookup

    Returns:
        Configured Flask app
    """
    if config is None:
        config = load_validated_config()

    loop_thread = loop_thread or LoopThread().start()
    controller = controller or MapController(config)
    static_map_client = static_map_client or StaticMapClient(config.tile_url)

    app = Flask(__name__)
    app.config["CONTROLLER"] = controller
    app.config["LOOP_THREAD"] = loop_thread

    if start:
        loop_thread.submit(controller.start()).add_done_callback(_log_startup)

    def run(coro):
        return loop_thread.run(coro)

    @app.get("/")
    def index() -> Response:
        html = run(_call(controller.surface.to_html))
        return Response(html, mimetype="text/html")

    @app.get("/state")
    def state():
        def snapshot() -> dict[str, Any]:
            return {
                "mode": controller.mode.value,
                "toggle_label": source_label(controller.mode),
                "filter_panel_open": controller.session.filter_panel_open,
                "alert_active": controller.alert_trigger.active,
                "event_markers": len(controller.surface.layers(EVENT_LAYER)),
                "self_markers": len(controller.surface.layers(SELF_LAYER)),
            }

        return jsonify(run(_call(snapshot)))

    @app.post("/refresh")
    def refresh():
        return jsonify(_render_response(run(controller.show_events())))

    @app.post("/source/toggle")
    def toggle_source():
        return jsonify(_render_response(run(controller.toggle_source())))

    @app.post("/filter/panel")
    def filter_panel():
        is_open = run(_call(controller.open_filter))
        return jsonify({"filter_panel_open": is_open})

    @app.post("/filter")
    def apply_filter():
        form = request.get_json(silent=True)
        if not isinstance(form, dict):
            form = request.form
        try:
            result = run(controller.apply_filter(
                form.get("location", ""),
                form.get("magnitude", "all"),
            ))
        except ValueError as e:
            logger.warning("Rejected filter: %s", e)
            return jsonify({"status": "error", "message": str(e)}), 400
        return jsonify(_render_response(result))

    @app.post("/filter/reset")
    def reset_filter():
        return jsonify(_render_response(run(controller.reset_filter())))

    @app.post("/location")
    def locate():
        outcome = run(controller.show_user_location())
        if isinstance(outcome, LocationFailure):
            return jsonify({
                "status": "unavailable",
                "code": outcome.code,
                "message": outcome.message,
            })
        return jsonify({
            "status": "ok",
            "latitude": outcome.latitude,
            "longitude": outcome.longitude,
        })

    @app.get("/snapshot.png")
    def snapshot_png():
        # Copy the layers on the loop, fetch tiles in this worker thread
        view, layers = run(_call(
            lambda: (controller.surface.view, controller.surface.layers())
        ))
        result = static_map_client.render_layers(
            view,
            layers,
            config.snapshot_width,
            config.snapshot_height,
        )
        if not result.success:
            return jsonify({"status": "error", "message": result.error}), 502
        return Response(result.image_bytes, mimetype="image/png")

    return app


# For local testing
if __name__ == "__main__":
    port = int(os.environ.get("PORT", "8080"))
    create_app().run(host="0.0.0.0", port=port)
