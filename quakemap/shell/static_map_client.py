"""Static Map Client - Imperative Shell.

This module renders PNG snapshots of the current map using OpenStreetMap
tiles. All I/O is contained here; marker derivation is in the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from quakemap.core.location import ViewState
from quakemap.core.render_plan import get_marker_radius_px
from quakemap.shell.map_surface import CircleLayer, Layer, PointLayer


logger = logging.getLogger(__name__)

# Named colors used by the render plan, as hex for staticmap
COLOR_HEX = {
    "red": "#dc2626",
    "orange": "#f97316",
    "yellow": "#eab308",
}

SELF_MARKER_COLOR = "#2563eb"


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapClient:
    """Client for generating static map images.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(self, tile_url: str | None = None) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
        """
        self.tile_url = tile_url or "https://tile.openstreetmap.org/{z}/{x}/{y}.png"

    def render_layers(
        self,
        view: ViewState,
        layers: list[Layer],
        width: int = 800,
        height: int = 600,
    ) -> MapImageResult:
        """Render a copy of the map layers at a viewport.

        This method performs blocking I/O (fetches map tiles from tile
        server), so callers keep it off the control loop.

        Args:
            view: Viewport to center the image on
            layers: Layers to draw
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Generating snapshot of %d layers at (%.4f, %.4f) zoom %d",
            len(layers),
            view.latitude,
            view.longitude,
            view.zoom,
        )

        try:
            static_map = StaticMap(width, height, url_template=self.tile_url)

            for layer in layers:
                # staticmap expects (lon, lat) order
                position = (layer.longitude, layer.latitude)

                if isinstance(layer, CircleLayer):
                    static_map.add_marker(CircleMarker(
                        position,
                        COLOR_HEX.get(layer.color, layer.color),
                        get_marker_radius_px(layer.magnitude),
                    ))
                elif isinstance(layer, PointLayer):
                    static_map.add_marker(CircleMarker(position, "white", 9))
                    static_map.add_marker(CircleMarker(position, SELF_MARKER_COLOR, 6))

            image = static_map.render(
                zoom=view.zoom,
                center=(view.longitude, view.latitude),
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Generated map image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to generate map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
