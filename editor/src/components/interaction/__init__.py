"""
Calendar Page Editor - Canvas Interaction

- controller.py: pointer/keyboard state machine (InteractionController)
- drag_context.py: gesture state (GestureState, DragContext, Tool)
- edit_session.py: inline edit sessions (EditSession, EditMode)
"""

from .drag_context import DragContext, GestureState, Tool
from .edit_session import EditMode, EditSession
from .controller import InteractionController

__all__ = [
    'InteractionController',
    'DragContext', 'GestureState', 'Tool',
    'EditMode', 'EditSession',
]
