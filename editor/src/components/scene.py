"""Scene geometry and hit testing for the page canvas.

The template layouts are drawn by an external renderer, which reports where
each slot sits on the page (``set_slot_bounds``) and, optionally, the
text size it uses (``set_slot_font_sizes``). Slots without a published size
use the layout size from the slot catalog. Layer geometry comes from
the layers themselves. Both are combined here into interactables that the
interaction controller can pick with a page-space point.

Stacking: layers above slots, later layers above earlier ones, later slots
above earlier ones. Hidden targets are never hit.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional

from constants import RESIZE_HANDLE_HIT_RADIUS
from models.document import Document
from models.layer import is_layer_id
from models.transform import Rect, Vec2
from services.slot_catalog import ElementKind, SLOTS_BY_TEMPLATE, kind_of, slot_spec
from services.template_selector import TemplateVariant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interactable:
    """A selectable element with its kind and current page-space box"""
    id: str
    kind: ElementKind
    bounds: Rect


class Scene:
    """Slot bounds per template plus hit testing over a Document"""

    def __init__(self):
        self._slot_bounds: Dict[TemplateVariant, Dict[str, Rect]] = {}
        self._slot_font_sizes: Dict[TemplateVariant, Dict[str, float]] = {}

    def set_slot_bounds(self, variant: TemplateVariant, bounds: Mapping[str, Rect]):
        """Register the default (un-overridden) slot boxes of a layout"""
        self._slot_bounds[TemplateVariant(variant)] = dict(bounds)

    def slot_bounds(self, variant: TemplateVariant) -> Dict[str, Rect]:
        return dict(self._slot_bounds.get(TemplateVariant(variant), {}))

    def set_slot_font_sizes(self, variant: TemplateVariant, sizes: Mapping[str, float]):
        """Register the text sizes the layout renderer draws slots with"""
        self._slot_font_sizes[TemplateVariant(variant)] = {slot: float(size) for slot, size in sizes.items()}

    def base_font_size(self, element_id: str, variant: TemplateVariant) -> Optional[float]:
        """Un-overridden text size of a slot, None for layers and non-text slots"""
        if is_layer_id(element_id):
            return None
        published = self._slot_font_sizes.get(TemplateVariant(variant), {}).get(element_id)
        if published is not None:
            return published
        spec = slot_spec(variant, element_id)
        return spec.font_size if spec is not None else None

    # ========================================
    # Geometry
    # ========================================

    def bounds_of(self, document: Document, element_id: str, variant: TemplateVariant) -> Optional[Rect]:
        """Current box of a layer or slot, overrides applied"""
        if is_layer_id(element_id):
            layer = document.layer(element_id)
            return layer.bounds() if layer is not None else None

        base = self._slot_bounds.get(TemplateVariant(variant), {}).get(element_id)
        if base is None:
            return None
        patch = document.override(element_id)
        width = patch.width if patch.width is not None else base.width
        height = patch.height if patch.height is not None else base.height
        return Rect(base.x, base.y, width, height).translated(patch.offset)

    def interactables(self, document: Document, variant: TemplateVariant) -> Iterator[Interactable]:
        """Visible interactables, topmost first"""
        for layer in reversed(document.layers):
            if layer.style.hidden:
                continue
            yield Interactable(layer.id, kind_of(document, layer.id, variant), layer.bounds())

        registered = self._slot_bounds.get(TemplateVariant(variant), {})
        for spec in reversed(SLOTS_BY_TEMPLATE[TemplateVariant(variant)]):
            if spec.slot_id not in registered or document.override(spec.slot_id).hidden:
                continue
            yield Interactable(spec.slot_id, spec.kind, self.bounds_of(document, spec.slot_id, variant))

    # ========================================
    # Hit testing
    # ========================================

    def hit_test(self, document: Document, point: Vec2, variant: TemplateVariant) -> Optional[Interactable]:
        """Topmost visible interactable under a page-space point"""
        for item in self.interactables(document, variant):
            if item.bounds.contains(point):
                return item
        return None

    def handle_hit(self, document: Document, element_id: str, point: Vec2, variant: TemplateVariant,
                   radius: float = RESIZE_HANDLE_HIT_RADIUS) -> bool:
        """True when ``point`` is on the bottom-right resize handle of the element"""
        bounds = self.bounds_of(document, element_id, variant)
        if bounds is None:
            return False
        dx = point.x - bounds.right
        dy = point.y - bounds.bottom
        return dx * dx + dy * dy <= radius * radius
