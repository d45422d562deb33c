"""View transform for the page canvas.

Maps the logical 1080x1620 page onto viewport pixels:

    effective_scale = auto_scale * manual_zoom
    screen = page_origin + page * effective_scale

``auto_scale`` fits the page into the viewport (capped at 0.55), the manual
zoom is a stepped multiplier in [0.5, 2.0] and the pan offset is a plain
screen-space translation applied after scaling, so zooming never has to
re-derive it. The page is centred in the viewport before panning.
"""

import logging

from constants import (
    PAGE_WIDTH, PAGE_HEIGHT,
    AUTO_SCALE_MARGIN, AUTO_SCALE_MAX, AUTO_SCALE_MIN, AUTO_SCALE_INITIAL,
    ZOOM_MIN, ZOOM_MAX, ZOOM_STEP,
)
from models.transform import Vec2

logger = logging.getLogger(__name__)


def compute_auto_scale(viewport_width: float, viewport_height: float) -> float:
    """Largest scale that fits the page with margin, capped at AUTO_SCALE_MAX"""
    scale = min(
        (viewport_width - AUTO_SCALE_MARGIN) / PAGE_WIDTH,
        (viewport_height - AUTO_SCALE_MARGIN) / PAGE_HEIGHT,
        AUTO_SCALE_MAX,
    )
    return max(scale, AUTO_SCALE_MIN)


class ViewTransform:
    """Auto-fit scale, manual zoom and pan for one viewport"""

    def __init__(self, viewport_width: float = 0.0, viewport_height: float = 0.0):
        self.viewport_width = float(viewport_width)
        self.viewport_height = float(viewport_height)
        self.auto_scale = AUTO_SCALE_INITIAL
        self.manual_zoom = 1.0
        self.pan_offset = Vec2(0.0, 0.0)
        if viewport_width > 0 and viewport_height > 0:
            self.on_viewport_resized(viewport_width, viewport_height)

    @property
    def effective_scale(self) -> float:
        return self.auto_scale * self.manual_zoom

    # ========================================
    # Viewport / zoom / pan
    # ========================================

    def on_viewport_resized(self, width: float, height: float):
        self.viewport_width = float(width)
        self.viewport_height = float(height)
        self.auto_scale = compute_auto_scale(width, height)
        logger.debug("Viewport %dx%d -> auto scale %.3f", width, height, self.auto_scale)

    def set_zoom(self, zoom: float) -> float:
        self.manual_zoom = round(max(ZOOM_MIN, min(ZOOM_MAX, float(zoom))), 2)
        return self.manual_zoom

    def zoom_in(self) -> float:
        return self.set_zoom(self.manual_zoom + ZOOM_STEP)

    def zoom_out(self) -> float:
        return self.set_zoom(self.manual_zoom - ZOOM_STEP)

    def can_zoom_in(self) -> bool:
        return self.manual_zoom < ZOOM_MAX

    def can_zoom_out(self) -> bool:
        return self.manual_zoom > ZOOM_MIN

    def get_zoom_percent(self) -> int:
        return int(round(self.manual_zoom * 100))

    def set_pan(self, offset: Vec2):
        self.pan_offset = Vec2(float(offset.x), float(offset.y))

    def reset_view(self):
        self.manual_zoom = 1.0
        self.pan_offset = Vec2(0.0, 0.0)

    # ========================================
    # Coordinate mapping
    # ========================================

    def page_origin(self) -> Vec2:
        """Screen position of the page's top-left corner"""
        scale = self.effective_scale
        return Vec2(
            (self.viewport_width - PAGE_WIDTH * scale) / 2 + self.pan_offset.x,
            (self.viewport_height - PAGE_HEIGHT * scale) / 2 + self.pan_offset.y,
        )

    def page_to_screen(self, point: Vec2) -> Vec2:
        return self.page_origin() + point.scaled(self.effective_scale)

    def screen_to_page(self, point: Vec2) -> Vec2:
        return (point - self.page_origin()).scaled(1.0 / self.effective_scale)

    def screen_delta_to_page(self, dx: float, dy: float) -> Vec2:
        """Convert a pointer displacement to page pixels (pan does not apply)"""
        scale = self.effective_scale
        return Vec2(dx / scale, dy / scale)
