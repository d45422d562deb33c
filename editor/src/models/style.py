"""
Calendar Page Editor - Style Patch Model

A StylePatch is a sparse set of visual adjustments applied on top of a
template slot (an override) or carried by a free layer. It is a closed set
of optional typed fields; None means "not set by this patch".

Merge semantics are shallow per field: merging {color} into {font_size}
yields both, and a field set by the incoming patch replaces the old value.
Properties outside the vocabulary are kept opaquely in ``extra``.

CSS-style mappings only exist at the boundaries:
    patch = StylePatch.from_css({'transform': 'translate(5px, 0px)', 'color': 'red'})
    css = patch.to_css()   # for the renderer
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional

from models.transform import Vec2
from utils.transform_codec import format_number, format_translate, split_transform

logger = logging.getLogger(__name__)

# CSS property -> StylePatch field for the plain pixel values
_PX_PROPERTIES = {
    'width': 'width',
    'height': 'height',
    'fontSize': 'font_size',
    'font-size': 'font_size',
}
_TEXT_PROPERTIES = {
    'color': 'color',
    'backgroundColor': 'background_color',
    'background-color': 'background_color',
    'borderRadius': 'border_radius',
    'border-radius': 'border_radius',
}


def _parse_px(value: Any) -> Optional[float]:
    """'200px' / '200' / 200 -> 200.0; anything else -> None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith('px'):
            text = text[:-2].strip()
        try:
            return float(text)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class StylePatch:
    """Sparse style delta for one element.

    Fields:
        translate: Offset from the element's template position (page px)
        width, height: Box size (page px)
        border_radius: CSS radius string ('50%', '0px', ...)
        font_size: Text size (page px)
        color: Text color
        background_color: Fill color
        hidden: True hides the element (display: none)
        transform_extra: Non-translate transform functions kept from imports
        extra: Opaque properties outside the vocabulary
    """
    translate: Optional[Vec2] = None
    width: Optional[float] = None
    height: Optional[float] = None
    border_radius: Optional[str] = None
    font_size: Optional[float] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    hidden: Optional[bool] = None
    transform_extra: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merge(self, other: 'StylePatch') -> 'StylePatch':
        """Return a new patch with every field set in ``other`` applied on top."""
        changes = {}
        for f in fields(self):
            if f.name == 'extra':
                continue
            value = getattr(other, f.name)
            if value is not None:
                changes[f.name] = value
        if other.extra:
            changes['extra'] = {**self.extra, **other.extra}
        return replace(self, **changes)

    def is_empty(self) -> bool:
        return self == StylePatch()

    @property
    def offset(self) -> Vec2:
        """Translate offset, origin when unset."""
        return self.translate if self.translate is not None else Vec2(0.0, 0.0)

    # ── CSS boundary ────────────────────────────────────────────────

    def to_css(self) -> Dict[str, Any]:
        """Serialize to the CSS-like mapping the renderer consumes."""
        css: Dict[str, Any] = dict(self.extra)
        transform_parts = []
        if self.translate is not None:
            transform_parts.append(format_translate(self.translate))
        if self.transform_extra:
            transform_parts.append(self.transform_extra)
        if transform_parts:
            css['transform'] = ' '.join(transform_parts)
        if self.width is not None:
            css['width'] = '%spx' % format_number(self.width)
        if self.height is not None:
            css['height'] = '%spx' % format_number(self.height)
        if self.border_radius is not None:
            css['borderRadius'] = self.border_radius
        if self.font_size is not None:
            css['fontSize'] = '%spx' % format_number(self.font_size)
        if self.color is not None:
            css['color'] = self.color
        if self.background_color is not None:
            css['backgroundColor'] = self.background_color
        if self.hidden:
            css['display'] = 'none'
        return css

    @classmethod
    def from_css(cls, css: Optional[Mapping[str, Any]]) -> 'StylePatch':
        """Build a patch from an imported CSS-like mapping.

        Unknown properties and non-pixel sizes ('auto', '50%') are kept in
        ``extra`` so they survive a round trip untouched.
        """
        if not css:
            return cls()
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in css.items():
            if key == 'transform':
                offset, rest = split_transform(value)
                if isinstance(value, str) and 'translate' in value:
                    values['translate'] = offset
                if rest:
                    values['transform_extra'] = rest
            elif key in _PX_PROPERTIES:
                px = _parse_px(value)
                if px is None:
                    extra[key] = value
                else:
                    values[_PX_PROPERTIES[key]] = px
            elif key in _TEXT_PROPERTIES:
                values[_TEXT_PROPERTIES[key]] = str(value)
            elif key == 'display':
                if value == 'none':
                    values['hidden'] = True
                else:
                    extra[key] = value
            else:
                extra[key] = value
        if extra:
            logger.debug("Passing through unrecognised style properties: %s", sorted(extra))
        return cls(extra=extra, **values)
