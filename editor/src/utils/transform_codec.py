"""Translate transform codec.

Reads and writes the 2D translation carried in a CSS-style transform string,
e.g. ``translate(12px, -4px)``. The model stores translations as ``Vec2``
values; strings only exist at the import and render boundaries.

Parsing is best-effort: anything that is not a readable translate resolves
to the origin instead of raising.
"""

import re
from typing import Optional, Tuple

from models.transform import Vec2

_NUMBER = r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?'
_TRANSLATE_RE = re.compile(
    r'translate\(\s*(' + _NUMBER + r')px\s*,\s*(' + _NUMBER + r')px\s*\)'
)


def parse_translate(text: Optional[str]) -> Vec2:
    """Extract the translate component of a transform string.

    Args:
        text: Transform string, may be None or contain other functions

    Returns:
        Vec2 offset, or Vec2(0, 0) when absent or unparsable
    """
    if not text or not isinstance(text, str):
        return Vec2(0.0, 0.0)
    match = _TRANSLATE_RE.search(text)
    if not match:
        return Vec2(0.0, 0.0)
    try:
        return Vec2(float(match.group(1)), float(match.group(2)))
    except ValueError:
        return Vec2(0.0, 0.0)


def split_transform(text: Optional[str]) -> Tuple[Vec2, str]:
    """Split a transform string into its translate offset and the rest.

    ``"translate(4px, 2px) rotate(10deg)"`` -> ``(Vec2(4, 2), "rotate(10deg)")``
    """
    if not text or not isinstance(text, str):
        return Vec2(0.0, 0.0), ''
    offset = parse_translate(text)
    remainder = _TRANSLATE_RE.sub('', text, count=1)
    return offset, ' '.join(remainder.split())


def format_number(value: float) -> str:
    """Format a pixel value: integral values without a decimal point."""
    value = float(value)
    if value == int(value):
        return str(int(value))  # also folds -0.0 into "0"
    return ('%.4f' % value).rstrip('0').rstrip('.')


def format_translate(offset: Vec2) -> str:
    """Serialize an offset as a translation-only transform string."""
    return 'translate(%spx,%spx)' % (format_number(offset.x), format_number(offset.y))
