"""
Calendar Page Editor - Layer Data Model

A Layer is a user-added primitive (rectangle, circle or text) drawn above
the template content of a page. Layers are immutable values: edits build a
new Layer with ``dataclasses.replace``.

Layer ids carry the reserved ``layer_`` prefix so they can never collide
with template slot ids; the style engine and the interaction controller
branch on that distinction through ``is_layer_id``.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from constants import (
    LAYER_ID_PREFIX,
    LAYER_DEFAULT_X, LAYER_DEFAULT_Y,
    LAYER_TEXT_SIZE, LAYER_SHAPE_SIZE,
    LAYER_TEXT_FONT_SIZE, LAYER_DEFAULT_TEXT,
    ACCENT_BLUE, TRANSPARENT, DEFAULT_TEXT_COLOR,
)
from models.style import StylePatch
from models.transform import Rect, Vec2

logger = logging.getLogger(__name__)


class LayerVariant(str, Enum):
    RECT = 'rect'
    CIRCLE = 'circle'
    TEXT = 'text'


def is_layer_id(element_id: Optional[str]) -> bool:
    """True for free layer ids, False for template slot ids."""
    return bool(element_id) and element_id.startswith(LAYER_ID_PREFIX)


class LayerIdAllocator:
    """Time-derived ids, strictly increasing within the session.

    Two layers created in the same millisecond still get distinct ids.
    """

    _last = 0

    @classmethod
    def next_id(cls) -> str:
        now_ms = int(time.time() * 1000)
        cls._last = max(now_ms, cls._last + 1)
        return f"{LAYER_ID_PREFIX}{cls._last}"


@dataclass(frozen=True)
class Layer:
    """Free-form element appended on top of a template.

    Attributes:
        id: Unique id with the ``layer_`` prefix
        variant: rect, circle or text
        x, y, width, height: Initial geometry (page px)
        fill: Fill color ('transparent' for text)
        text: Text content for text layers
        style: Style patch, same shape as template overrides
    """
    id: str
    variant: LayerVariant
    x: float
    y: float
    width: float
    height: float
    fill: str
    text: Optional[str] = None
    style: StylePatch = field(default_factory=StylePatch)

    @classmethod
    def create(cls, variant: LayerVariant, layer_id: Optional[str] = None) -> 'Layer':
        """Create a layer with the default geometry and style for its variant."""
        variant = LayerVariant(variant)
        is_text = variant == LayerVariant.TEXT
        width, height = LAYER_TEXT_SIZE if is_text else LAYER_SHAPE_SIZE

        style = StylePatch(
            translate=Vec2(LAYER_DEFAULT_X, LAYER_DEFAULT_Y),
            width=float(width),
            height=None if is_text else float(height),
            border_radius='50%' if variant == LayerVariant.CIRCLE else '0px',
            font_size=LAYER_TEXT_FONT_SIZE if is_text else None,
            color=DEFAULT_TEXT_COLOR,
        )
        return cls(
            id=layer_id or LayerIdAllocator.next_id(),
            variant=variant,
            x=LAYER_DEFAULT_X,
            y=LAYER_DEFAULT_Y,
            width=float(width),
            height=float(height),
            fill=TRANSPARENT if is_text else ACCENT_BLUE,
            text=LAYER_DEFAULT_TEXT if is_text else None,
            style=style,
        )

    @property
    def is_text(self) -> bool:
        return self.variant == LayerVariant.TEXT

    def box_size(self) -> Tuple[float, float]:
        """Effective (width, height): style values win over initial geometry."""
        width = self.style.width if self.style.width is not None else self.width
        height = self.style.height if self.style.height is not None else self.height
        return width, height

    def bounds(self) -> Rect:
        """Page-space box. Layers are positioned by their translate alone."""
        width, height = self.box_size()
        offset = self.style.offset
        return Rect(offset.x, offset.y, width, height)

    def with_style(self, patch: StylePatch) -> 'Layer':
        return replace(self, style=self.style.merge(patch))

    # ── serialization ───────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'type': self.variant.value,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'fill': self.fill,
            'style': self.style.to_css(),
        }
        if self.text is not None:
            data['text'] = self.text
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Layer':
        """Build a layer from its dictionary form.

        Raises:
            ValueError: Unknown layer type or id without the layer prefix
        """
        layer_id = str(data.get('id', ''))
        if not is_layer_id(layer_id):
            raise ValueError(f"Layer id must start with '{LAYER_ID_PREFIX}': {layer_id!r}")
        variant = LayerVariant(data.get('type', LayerVariant.RECT.value))
        defaults = cls.create(variant, layer_id=layer_id)
        return cls(
            id=layer_id,
            variant=variant,
            x=float(data.get('x', defaults.x)),
            y=float(data.get('y', defaults.y)),
            width=float(data.get('width', defaults.width)),
            height=float(data.get('height', defaults.height)),
            fill=str(data.get('fill', defaults.fill)),
            text=data.get('text', defaults.text),
            style=StylePatch.from_css(data.get('style')) if 'style' in data else defaults.style,
        )
