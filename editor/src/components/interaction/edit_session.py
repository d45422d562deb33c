"""Inline edit sessions opened by double-activating an element."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from services.slot_catalog import ElementKind


class EditMode(Enum):
    TEXT = 'text'
    IMAGE = 'image'


@dataclass(frozen=True)
class EditSession:
    """What the canvas needs to show an inline editor

    Attributes:
        target_id: Layer or slot being edited
        mode: TEXT (editable field) or IMAGE (file picker)
        kind: Element kind of the target
        text: Current text for TEXT sessions
        box_size: (width, height) of the target in page pixels
        field_path: Document field written on commit, None for layer text
    """
    target_id: str
    mode: EditMode
    kind: ElementKind
    text: str = ''
    box_size: Tuple[float, float] = (0.0, 0.0)
    field_path: Optional[str] = None
