"""
Calendar Page Editor - Data Models

This package contains the page data model. This is the MODEL in MVC
architecture.

Public API: Document, Layer, StylePatch, Vec2 from here;
BatchStore from models.batch.
"""

from .transform import Vec2, Rect
from .style import StylePatch
from .layer import Layer, LayerVariant, is_layer_id
from .document import Document, DEFAULT_DOCUMENT

__all__ = [
    'Vec2', 'Rect', 'StylePatch',
    'Layer', 'LayerVariant', 'is_layer_id',
    'Document', 'DEFAULT_DOCUMENT',
]
