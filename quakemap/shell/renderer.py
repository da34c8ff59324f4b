"""Map Renderer - Imperative Shell.

Executes a RenderPlan from the core against the drawing surface.
"""

import logging

from quakemap.core.render_plan import FILL_OPACITY, RenderPlan
from quakemap.shell.alert_trigger import AlertTrigger
from quakemap.shell.map_surface import EVENT_LAYER, MapSurface


logger = logging.getLogger(__name__)


class MapRenderer:
    """Replaces the event markers on a surface with a new plan.

    Only event layers are cleared; the self-location marker stays.
    """

    def __init__(self, surface: MapSurface, alert_trigger: AlertTrigger) -> None:
        self.surface = surface
        self.alert_trigger = alert_trigger

    def clear(self) -> int:
        """Remove all event markers. Returns the number removed."""
        return self.surface.remove_layers(EVENT_LAYER)

    def render(self, plan: RenderPlan) -> int:
        """Draw a plan, replacing previous event markers.

        Fires the alert once per high-tier marker.

        Args:
            plan: Markers to draw

        Returns:
            Number of alerts fired
        """
        removed = self.clear()

        alerts = 0
        for marker in plan.markers:
            self.surface.add_circle(
                latitude=marker.latitude,
                longitude=marker.longitude,
                radius_m=marker.radius_m,
                color=marker.color,
                popup_html=marker.popup_html,
                fill_opacity=FILL_OPACITY,
                magnitude=marker.magnitude,
                kind=EVENT_LAYER,
            )

            if marker.triggers_alert:
                self.alert_trigger.fire()
                alerts += 1

        logger.info(
            "Rendered %d markers (removed %d, skipped %d, alerts %d)",
            len(plan.markers),
            removed,
            plan.skipped,
            alerts,
        )

        return alerts
