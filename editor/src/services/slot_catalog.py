"""Template slot catalog.

Every interactable on a page carries an explicit kind. Free layers get it
from their variant; template slots get it from this table, which lists the
slots each of the four built-in layouts exposes and which Document field
an inline edit of the slot writes to.

The kind decides interaction behavior:
- TEXT: corner resize scales the font, double-click edits text, color
  edits set ``color``
- IMAGE: double-click opens the image picker
- SHAPE / BLOCK: corner resize changes the box, color edits set
  ``background_color``
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from models.document import Document
from models.layer import LayerVariant, is_layer_id
from services.template_selector import TemplateVariant

logger = logging.getLogger(__name__)


class ElementKind(str, Enum):
    TEXT = 'text'
    IMAGE = 'image'
    SHAPE = 'shape'
    BLOCK = 'block'


@dataclass(frozen=True)
class SlotSpec:
    """One fixed element of a layout

    Attributes:
        slot_id: Stable id used as the override key
        kind: Interaction kind
        field_path: Document field written by inline edits, None if display-only
        font_size: The layout's own text size (page px), None for non-text slots
    """
    slot_id: str
    kind: ElementKind
    field_path: Optional[str] = None
    font_size: Optional[float] = None


# Document field behind each editable slot, shared by all layouts
_FIELDS = {
    'date_number': 'day',
    'lunar_text': 'lunar_cn',
    'weekday_text': 'weekday_cn',
    'author_avatar': 'author.avatar_url',
    'author_name': 'author.name_cn',
    'author_bio': 'author.bio_cn',
    'main_image': 'image.main_url',
    'main_quote': 'content.quote_cn',
    'brand_icon': 'branding.left_icon_url',
    'brand_text': 'branding.left_brand',
    'brand_left': 'branding.left_brand',
    'month_number': 'month',
}


def _text(slot_id, font_size):
    return SlotSpec(slot_id, ElementKind.TEXT, _FIELDS.get(slot_id), float(font_size))


def _image(slot_id):
    return SlotSpec(slot_id, ElementKind.IMAGE, _FIELDS[slot_id])


SLOTS_BY_TEMPLATE: Dict[TemplateVariant, Tuple[SlotSpec, ...]] = {
    TemplateVariant.A: (
        _text('date_number', 320), _text('lunar_text', 48), _text('year_month', 42), _text('weekday_text', 42),
        _image('author_avatar'), _text('author_name', 36), _text('author_bio', 24),
        _image('main_image'), _text('main_quote', 42),
        _image('brand_icon'), _text('brand_text', 24),
    ),
    TemplateVariant.B: (
        _image('brand_icon'), _text('brand_text', 32),
        _image('main_image'),
        _text('month_number', 500), _text('year_text', 48), _text('month_text', 40),
        _image('author_avatar'), _text('author_name', 28), _text('author_bio', 20),
        _text('main_quote', 32),
    ),
    TemplateVariant.C: (
        _text('date_number', 240), _text('badge_text', 32), _text('lunar_text', 48),
        _text('year_month', 40), _text('weekday_text', 40),
        _image('author_avatar'), _text('author_name', 30), _text('author_bio', 22),
        _image('main_image'), _text('main_quote', 36), _text('sub_quote', 24),
        _image('brand_icon'), _text('brand_text', 20),
    ),
    TemplateVariant.D: (
        _text('date_number', 320), _text('lunar_text', 56), _text('year_text', 48), _text('weekday_text', 48),
        SlotSpec('separator_line', ElementKind.BLOCK),
        _image('author_avatar'), _text('author_name', 34), _text('author_bio', 24),
        _image('main_image'), _text('main_quote', 40),
        _text('brand_left', 20), _text('brand_right', 20),
    ),
}


_LAYER_KINDS = {
    LayerVariant.RECT: ElementKind.SHAPE,
    LayerVariant.CIRCLE: ElementKind.SHAPE,
    LayerVariant.TEXT: ElementKind.TEXT,
}


def slot_spec(variant: TemplateVariant, slot_id: str) -> Optional[SlotSpec]:
    for spec in SLOTS_BY_TEMPLATE[TemplateVariant(variant)]:
        if spec.slot_id == slot_id:
            return spec
    return None


def kind_of(document: Document, element_id: str, variant: TemplateVariant) -> ElementKind:
    """Interaction kind of a layer or slot on ``document`` rendered as ``variant``"""
    if is_layer_id(element_id):
        layer = document.layer(element_id)
        if layer is None:
            logger.warning("Unknown layer %s, treating as block", element_id)
            return ElementKind.BLOCK
        return _LAYER_KINDS[layer.variant]
    spec = slot_spec(variant, element_id)
    if spec is None:
        logger.warning("Slot %s is not part of template %s, treating as block", element_id, TemplateVariant(variant).value)
        return ElementKind.BLOCK
    return spec.kind


def color_field(kind: ElementKind) -> str:
    """StylePatch field a color edit targets for this kind"""
    return 'color' if kind == ElementKind.TEXT else 'background_color'
