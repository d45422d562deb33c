"""UI components for Calendar Page Editor

- view_transform: page <-> screen mapping, zoom and pan
- scene: element bounds and hit testing
- interaction: selection, gestures and keyboard handling
- canvas_widget: the Qt canvas (import directly, it pulls in QtWidgets)
"""

from .view_transform import ViewTransform, compute_auto_scale
from .scene import Scene, Interactable

__all__ = [
    'ViewTransform',
    'compute_auto_scale',
    'Scene',
    'Interactable',
]
