"""Gesture state for the page canvas.

One DragContext exists per active gesture (press to release) and replaces
a set of loose boolean flags on the controller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from models.transform import Vec2
from services.slot_catalog import ElementKind


class GestureState(Enum):
    IDLE = 'idle'
    PENDING = 'pending'      # pressed on an element, threshold not crossed yet
    DRAGGING = 'dragging'
    RESIZING = 'resizing'
    PANNING = 'panning'


class Tool(str, Enum):
    SELECT = 'select'
    HAND = 'hand'


@dataclass
class DragContext:
    """State of the active gesture.

    Positions are screen pixels; the controller converts deltas to page
    pixels when it emits style patches.
    """
    state: GestureState
    origin: Vec2                       # pointer position at press
    last_pos: Vec2                     # pointer position of the previous move event
    target_id: Optional[str] = None
    kind: Optional[ElementKind] = None
    start_pan: Vec2 = field(default_factory=Vec2)
