"""
Board interaction state.

The board is in exactly one of these at a time, so "at most one dragged
note" and "at most one edit session" hold by construction:

  Idle ──drag_start──▶ Dragging ──drop / drag_end──▶ Idle
  Idle ──begin_edit──▶ Editing  ──end_edit──────────▶ Idle
"""
from dataclasses import dataclass
from typing import Optional, Union

from .schema import EditField, NoteStatus


@dataclass(frozen=True)
class Idle:
    """Nothing in progress."""

    def holds(self, uuid: str) -> bool:
        return False


@dataclass(frozen=True)
class Dragging:
    """A note is under the pointer. origin_* is the pre-drag snapshot."""
    uuid: str
    origin_status: NoteStatus
    origin_index: int

    def holds(self, uuid: str) -> bool:
        return self.uuid == uuid


@dataclass(frozen=True)
class Editing:
    """A note's fields are editable; caret sits at the end of `field`."""
    uuid: str
    field: EditField
    caret: int = 0

    def holds(self, uuid: str) -> bool:
        return self.uuid == uuid


Interaction = Union[Idle, Dragging, Editing]
IDLE = Idle()


def dragged_uuid(state: Interaction) -> Optional[str]:
    return state.uuid if isinstance(state, Dragging) else None


def edited_uuid(state: Interaction) -> Optional[str]:
    return state.uuid if isinstance(state, Editing) else None
