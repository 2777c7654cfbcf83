"""
Drag-and-drop of notes between and within columns.

Geometry comes from a Layout the view keeps current (column and note
rectangles plus the viewport width). Events:

  drag_start(uuid)        Idle → Dragging, pre-drag status/index snapshotted
  drag_over(x, y, col)    speculative status + position, column highlighted
  drop()                  commit; one immediate write if anything moved
  drag_end()              Dragging without a drop → cancelled, snapshot restored
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .interaction import IDLE, Dragging, Editing, Idle, dragged_uuid
from .schema import COLUMNS, NoteStatus

logger = logging.getLogger(__name__)


@dataclass
class Rect:
    """Axis-aligned box in viewport coordinates."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    def contains_x(self, x: float) -> bool:
        return self.left <= x < self.right

    def contains_y(self, y: float) -> bool:
        return self.top <= y < self.bottom


@dataclass
class Layout:
    """Last rendered geometry of the board."""
    viewport_width: float = 1280
    columns: Dict[NoteStatus, Rect] = field(default_factory=dict)
    notes: Dict[str, Rect] = field(default_factory=dict)


class DragController:
    """Pointer drag state machine for one board."""

    def __init__(self, board, layout: Optional[Layout] = None):
        self.board = board
        self.layout = layout or Layout()
        self.highlighted: Optional[NoteStatus] = None

    @property
    def active(self) -> bool:
        return isinstance(self.board.state, Dragging)

    def is_dragging(self, uuid: str) -> bool:
        return dragged_uuid(self.board.state) == uuid

    def stacked(self) -> bool:
        """Narrow viewport: columns sit on top of each other."""
        return self.layout.viewport_width < self.board.config.stack_breakpoint_px

    # ── Transitions ──────────────────────────────────────────

    def drag_start(self, uuid: str) -> bool:
        board = self.board
        state = board.state
        if isinstance(state, Editing):
            if state.uuid == uuid:
                return False  # editing suspends dragging this note
            board.edit.end_edit(state.uuid)
        elif not isinstance(board.state, Idle):
            return False

        where = board.locate(uuid)
        if where is None:
            return False
        status, index = where
        board.state = Dragging(uuid, status, index)
        self.highlighted = None
        logger.debug("drag start %s from %s[%d]", uuid, status.value, index)
        return True

    def drag_over(self, x: float, y: float, column: Optional[NoteStatus] = None) -> Optional[NoteStatus]:
        """Pointer moved while dragging. Returns the column now under the pointer."""
        state = self.board.state
        if not isinstance(state, Dragging):
            return None
        note = self.board.find(state.uuid)
        if note is None:
            self._finish()
            return None

        target = self.resolve_column(x, y, column)
        if target is None:
            return None
        self.highlighted = target
        self.board.place(note, target, self.insertion_index(target, y))
        return target

    def drop(self) -> bool:
        """Commit the drag. Returns True if a write was issued."""
        board = self.board
        state = board.state
        if not isinstance(state, Dragging):
            return False
        self._finish()
        note = board.find(state.uuid)
        if note is None:
            return False

        status, index = board.locate(note.uuid)
        if status == state.origin_status and index == state.origin_index:
            logger.debug("drop %s: no change", note.uuid)
            return False
        note.touch(board.clock())
        board.write_now(note.uuid)
        logger.info("Moved note %s to %s[%d]", note.uuid, status.value, index)
        return True

    def drag_end(self) -> bool:
        """
        Drag finished. After a drop this is a no-op; otherwise the drag was
        cancelled and the note goes back where it started.
        """
        board = self.board
        state = board.state
        if not isinstance(state, Dragging):
            return False
        self._finish()
        note = board.find(state.uuid)
        if note is not None:
            board.place(note, state.origin_status, state.origin_index)
            logger.debug("drag of %s cancelled, restored to %s[%d]",
                         note.uuid, state.origin_status.value, state.origin_index)
        return True

    def _finish(self) -> None:
        self.board.state = IDLE
        self.highlighted = None

    # ── Geometry ─────────────────────────────────────────────

    def resolve_column(self, x: float, y: float, column: Optional[NoteStatus] = None) -> Optional[NoteStatus]:
        rects = self.layout.columns
        if self.stacked():
            for status in COLUMNS:
                rect = rects.get(status)
                if rect is not None and rect.contains_y(y):
                    return status
            return None
        if column is not None:
            return column
        for status in COLUMNS:
            rect = rects.get(status)
            if rect is not None and rect.contains_x(x):
                return status
        return None

    def insertion_index(self, status: NoteStatus, y: float) -> int:
        """Before the first non-dragged note whose centre is below y, else at the end."""
        dragged = dragged_uuid(self.board.state)
        others = [n for n in self.board.columns[status] if n.uuid != dragged]
        for i, note in enumerate(others):
            rect = self.layout.notes.get(note.uuid)
            if rect is not None and rect.center_y > y:
                return i
        return len(others)
