"""Map Drawing Surface - Imperative Shell.

This module holds the layers currently shown on the map and turns them
into an interactive Leaflet page with folium. Marker derivation lives in
the core module; this layer only stores and draws.
"""

import logging
from dataclasses import dataclass, field

import folium

from quakemap.core.config import DEFAULT_TILE_ATTRIBUTION, DEFAULT_TILE_URL
from quakemap.core.location import DEFAULT_VIEW, ViewState


logger = logging.getLogger(__name__)


# Layer kinds
EVENT_LAYER = "event"
SELF_LAYER = "self"

# Keyframes for the alert class applied to the map container
SHAKE_CSS = """
<style>
@keyframes quakemap-shake {
  0%, 100% { transform: translate(0, 0); }
  20%, 60% { transform: translate(-8px, 0); }
  40%, 80% { transform: translate(8px, 0); }
}
.shake { animation: quakemap-shake 0.5s; }
.panel-open { margin-right: 300px; }
</style>
"""


@dataclass(frozen=True)
class CircleLayer:
    """A circle marker on the map.

    Attributes:
        latitude: Center latitude
        longitude: Center longitude
        radius_m: Radius in metres
        color: Stroke and fill color
        fill_opacity: Fill opacity (0-1)
        popup_html: Popup content
        magnitude: Magnitude the circle represents (used by snapshots)
        kind: Layer kind
    """
    latitude: float
    longitude: float
    radius_m: float
    color: str
    fill_opacity: float
    popup_html: str
    magnitude: float = 0.0
    kind: str = EVENT_LAYER


@dataclass(frozen=True)
class PointLayer:
    """A pin marker with a label.

    Attributes:
        latitude: Marker latitude
        longitude: Marker longitude
        label: Popup label
        open_popup: Show the popup without a click
        kind: Layer kind
    """
    latitude: float
    longitude: float
    label: str
    open_popup: bool = True
    kind: str = SELF_LAYER


Layer = CircleLayer | PointLayer


@dataclass
class MapSurface:
    """In-memory drawing surface.

    Keeps the layer list, the viewport and the CSS classes of the map
    container. All mutations come from the single control loop.

    Attributes:
        view: Current viewport
        tile_url: Tile URL template
        tile_attribution: Tile attribution HTML
    """
    view: ViewState = DEFAULT_VIEW
    tile_url: str = DEFAULT_TILE_URL
    tile_attribution: str = DEFAULT_TILE_ATTRIBUTION
    _layers: list[Layer] = field(default_factory=list)
    _classes: set[str] = field(default_factory=set)

    def add_circle(
        self,
        latitude: float,
        longitude: float,
        radius_m: float,
        color: str,
        popup_html: str,
        fill_opacity: float = 0.5,
        magnitude: float = 0.0,
        kind: str = EVENT_LAYER,
    ) -> CircleLayer:
        """Add a circle marker and return it."""
        layer = CircleLayer(
            latitude=latitude,
            longitude=longitude,
            radius_m=radius_m,
            color=color,
            fill_opacity=fill_opacity,
            popup_html=popup_html,
            magnitude=magnitude,
            kind=kind,
        )
        self._layers.append(layer)
        return layer

    def add_point_marker(
        self,
        latitude: float,
        longitude: float,
        label: str,
        kind: str = SELF_LAYER,
    ) -> PointLayer:
        """Add a pin marker and return it."""
        layer = PointLayer(latitude=latitude, longitude=longitude, label=label, kind=kind)
        self._layers.append(layer)
        return layer

    def layers(self, kind: str | None = None) -> list[Layer]:
        """List layers, optionally only those of one kind."""
        if kind is None:
            return list(self._layers)
        return [layer for layer in self._layers if layer.kind == kind]

    def remove_layers(self, kind: str) -> int:
        """Remove every layer of a kind.

        Returns:
            Number of layers removed
        """
        before = len(self._layers)
        self._layers = [layer for layer in self._layers if layer.kind != kind]
        return before - len(self._layers)

    def set_view(self, latitude: float, longitude: float, zoom: int) -> None:
        """Center the viewport."""
        self.view = ViewState(latitude=latitude, longitude=longitude, zoom=zoom)

    def add_class(self, css_class: str) -> None:
        self._classes.add(css_class)

    def remove_class(self, css_class: str) -> None:
        self._classes.discard(css_class)

    def has_class(self, css_class: str) -> bool:
        return css_class in self._classes

    @property
    def classes(self) -> frozenset[str]:
        return frozenset(self._classes)

    def build_map(self) -> folium.Map:
        """Build a folium map showing the current layers.

        Returns:
            folium.Map ready to be saved or rendered
        """
        fmap = folium.Map(
            location=[self.view.latitude, self.view.longitude],
            zoom_start=self.view.zoom,
            tiles=self.tile_url,
            attr=self.tile_attribution,
        )

        for layer in self._layers:
            if isinstance(layer, CircleLayer):
                folium.Circle(
                    location=[layer.latitude, layer.longitude],
                    radius=layer.radius_m,
                    color=layer.color,
                    fill=True,
                    fill_color=layer.color,
                    fill_opacity=layer.fill_opacity,
                    popup=folium.Popup(layer.popup_html, max_width=300),
                ).add_to(fmap)
            else:
                folium.Marker(
                    location=[layer.latitude, layer.longitude],
                    popup=folium.Popup(layer.label, show=layer.open_popup),
                ).add_to(fmap)

        root = fmap.get_root()
        root.header.add_child(folium.Element(SHAKE_CSS))

        if self._classes:
            classes = " ".join(sorted(self._classes))
            script = (
                f"document.getElementById('{fmap.get_name()}')"
                f".classList.add(...'{classes}'.split(' '));"
            )
            root.script.add_child(folium.Element(script))

        return fmap

    def to_html(self) -> str:
        """Render the map as a standalone HTML page."""
        html = self.build_map().get_root().render()
        logger.debug("Rendered map page with %d layers", len(self._layers))
        return html
