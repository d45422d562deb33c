"""
Calendar Page Editor - Document Data Model

One Document is one calendar page: identity and date fields, author,
content, image, branding and theme blocks, plus the two additive edit
layers that sit on top of the chosen template:

- overrides: slot id -> StylePatch (sparse tweaks to fixed template slots)
- layers: ordered free-form Layers drawn above the template

Documents are frozen values. Every edit returns a new Document, so a batch
snapshot held by the history can never change behind its back. Removing all
overrides and layers reproduces the template's default appearance.

Dictionary form uses the field names of the page records the editor
imports and exports (``page_id``, ``date_gregorian``, ``author.name_cn``...).
"""

import logging
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from constants import DEFAULT_BACKGROUND_COLOR, DEFAULT_PRIMARY_COLOR, DEFAULT_TEXT_COLOR
from models.layer import Layer
from models.style import StylePatch

logger = logging.getLogger(__name__)


class Focal(str, Enum):
    CENTER = 'center'
    TOP = 'top'
    BOTTOM = 'bottom'
    LEFT = 'left'
    RIGHT = 'right'


@dataclass(frozen=True)
class FestivalBadge:
    enabled: bool = False
    type: str = ''
    label_cn: str = ''


@dataclass(frozen=True)
class Author:
    name_cn: str = ''
    bio_cn: str = ''
    avatar_url: str = ''
    handle: str = ''


@dataclass(frozen=True)
class Content:
    quote_cn: str = ''
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SafeArea:
    top: float = 0.1
    bottom: float = 0.2
    left: float = 0.05
    right: float = 0.05


@dataclass(frozen=True)
class ImageBlock:
    main_url: str = ''
    main_alt: str = ''
    focal: Focal = Focal.CENTER
    safe_area: SafeArea = field(default_factory=SafeArea)


@dataclass(frozen=True)
class Branding:
    left_brand: str = ''
    left_icon_url: str = ''
    right_brand: str = ''
    right_icon_url: str = ''


@dataclass(frozen=True)
class Theme:
    background_color: str = DEFAULT_BACKGROUND_COLOR
    primary_color: str = DEFAULT_PRIMARY_COLOR
    text_color: str = DEFAULT_TEXT_COLOR


@dataclass(frozen=True)
class Document:
    """A single calendar page."""
    page_id: str
    date_gregorian: str
    month: int
    day: int
    weekday_cn: str = ''
    lunar_cn: str = ''
    is_holiday: bool = False
    holiday_name_cn: str = ''
    festival_badge: FestivalBadge = field(default_factory=FestivalBadge)
    author: Author = field(default_factory=Author)
    content: Content = field(default_factory=Content)
    image: ImageBlock = field(default_factory=ImageBlock)
    branding: Branding = field(default_factory=Branding)
    theme: Theme = field(default_factory=Theme)
    overrides: Dict[str, StylePatch] = field(default_factory=dict)
    layers: Tuple[Layer, ...] = ()

    # ── edits (all return new Documents) ────────────────────────────

    def update(self, patch: Mapping[str, Any]) -> 'Document':
        """Shallow merge of top-level attributes.

        Raises:
            TypeError: A key is not a Document attribute
        """
        if 'layers' in patch:
            patch = {**patch, 'layers': tuple(patch['layers'])}
        return replace(self, **patch)

    def with_field(self, path: str, value: Any) -> 'Document':
        """Set a dotted field path such as ``author.name_cn`` or ``day``.

        The value is coerced to the current field's type, so inline edits
        can pass the raw text they collected.

        Raises:
            KeyError: Unknown path
            ValueError: Value cannot be coerced (e.g. non-numeric day)
        """
        return _set_path(self, path.split('.'), value)

    def layer(self, layer_id: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def override(self, slot_id: str) -> StylePatch:
        return self.overrides.get(slot_id, StylePatch())

    def with_override(self, slot_id: str, patch: StylePatch) -> 'Document':
        merged = self.override(slot_id).merge(patch)
        return replace(self, overrides={**self.overrides, slot_id: merged})

    def with_layers(self, layers) -> 'Document':
        return replace(self, layers=tuple(layers))

    # ── serialization ───────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == 'overrides':
                data[f.name] = {slot: patch.to_css() for slot, patch in value.items()}
            elif f.name == 'layers':
                data[f.name] = [layer.to_dict() for layer in value]
            else:
                data[f.name] = _plain(value)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], defaults: Optional['Document'] = None) -> 'Document':
        """Build a Document, filling anything missing from ``defaults``.

        Raises:
            TypeError: ``data`` is not a mapping
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Document record must be an object, got {type(data).__name__}")
        base = defaults if defaults is not None else DEFAULT_DOCUMENT
        values = {}
        for f in fields(cls):
            current = getattr(base, f.name)
            if f.name not in data or data[f.name] is None:
                values[f.name] = current
            elif f.name == 'overrides':
                values[f.name] = _overrides_from_dict(data[f.name])
            elif f.name == 'layers':
                values[f.name] = _layers_from_list(data[f.name])
            else:
                values[f.name] = _coerce(current, data[f.name])
        return cls(**values)


# ======================================================================
# Helpers
# ======================================================================

def _plain(value: Any) -> Any:
    if is_dataclass(value):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value


def _coerce(current: Any, value: Any) -> Any:
    """Coerce ``value`` to the type of ``current`` (used for imports and edits)."""
    if is_dataclass(current):
        if not isinstance(value, Mapping):
            raise ValueError(f"Expected an object for {type(current).__name__}")
        changes = {}
        for f in fields(current):
            if f.name in value and value[f.name] is not None:
                changes[f.name] = _coerce(getattr(current, f.name), value[f.name])
        return replace(current, **changes)
    if isinstance(current, Enum):
        try:
            return type(current)(value)
        except ValueError:
            logger.warning("Unknown %s %r, keeping %s", type(current).__name__, value, current.value)
            return current
    if isinstance(current, bool):
        if isinstance(value, str):
            return value.strip().lower() in ('1', 'true', 'yes', 'y')
        return bool(value)
    if isinstance(current, int):
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, tuple):
        if isinstance(value, str):
            return tuple(t.strip() for t in value.split(',') if t.strip())
        return tuple(str(v) for v in value)
    if isinstance(current, str):
        return str(value)
    return value


def _set_path(obj: Any, parts, value: Any) -> Any:
    name = parts[0]
    if not is_dataclass(obj) or name not in {f.name for f in fields(obj)}:
        raise KeyError(name)
    if name in ('overrides', 'layers'):
        raise KeyError(f"{name} is edited through the style engine")
    current = getattr(obj, name)
    if len(parts) == 1:
        return replace(obj, **{name: _coerce(current, value)})
    return replace(obj, **{name: _set_path(current, parts[1:], value)})


def _overrides_from_dict(data: Any) -> Dict[str, StylePatch]:
    if not isinstance(data, Mapping):
        logger.warning("Ignoring overrides that are not an object")
        return {}
    return {str(slot): StylePatch.from_css(css) for slot, css in data.items() if isinstance(css, Mapping)}


def _layers_from_list(data: Any) -> Tuple[Layer, ...]:
    if not isinstance(data, (list, tuple)):
        logger.warning("Ignoring layers that are not a list")
        return ()
    layers = []
    for entry in data:
        try:
            layers.append(Layer.from_dict(entry))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Skipping invalid layer %r: %s", entry, e)
    return tuple(layers)


DEFAULT_DOCUMENT = Document(
    page_id='2026-01-03',
    date_gregorian='2026-01-03',
    month=1,
    day=3,
    weekday_cn='星期五',
    lunar_cn='腊月初四',
    is_holiday=False,
    holiday_name_cn='',
    festival_badge=FestivalBadge(enabled=False, label_cn=''),
    author=Author(
        name_cn='张宇轩Apollo',
        bio_cn='INTJ 5w6 摩羯座',
        avatar_url='https://picsum.photos/100/100',
    ),
    content=Content(quote_cn='天空没有鸟的痕迹，但我已飞过', tags=('通往AGI之路',)),
    image=ImageBlock(main_url='https://picsum.photos/800/800', main_alt='Cyberpunk robot'),
    branding=Branding(left_brand='通往AGI之路'),
    theme=Theme(),
)
