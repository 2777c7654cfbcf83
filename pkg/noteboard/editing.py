"""
In-place editing of note title and description.

One session at a time. While a note is being edited it cannot be dragged,
and every keystroke re-arms that note's debounced write so text reaches the
store even if focus never leaves the field.
"""
import logging
from typing import Optional

from .interaction import IDLE, Dragging, Editing
from .schema import EditField

logger = logging.getLogger(__name__)


class EditSessionController:
    """Focus / blur lifecycle of editable note fields."""

    def __init__(self, board):
        self.board = board

    @property
    def session(self) -> Optional[Editing]:
        state = self.board.state
        return state if isinstance(state, Editing) else None

    def is_editable(self, uuid: str) -> bool:
        session = self.session
        return session is not None and session.uuid == uuid

    def begin_edit(self, uuid: str, field: EditField = EditField.TITLE) -> bool:
        """Open a session on `uuid` with the caret at the end of `field`."""
        board = self.board
        if isinstance(board.state, Dragging):
            return False
        note = board.find(uuid)
        if note is None:
            return False

        current = self.session
        if current is not None and current.uuid != uuid:
            self.end_edit(current.uuid)
        board.state = Editing(uuid, field, caret=len(note.get_field(field)))
        logger.debug("edit %s.%s", uuid, field.value)
        return True

    def input(self, uuid: str, field: EditField, text: str) -> bool:
        """A keystroke changed `field` to `text`."""
        board = self.board
        if not self.is_editable(uuid):
            return False
        note = board.find(uuid)
        if note is None:
            board.state = IDLE
            return False
        note.set_field(field, text)
        note.touch(board.clock())
        board.state = Editing(uuid, field, caret=len(text))
        board.schedule_write(uuid)
        return True

    def end_edit(self, uuid: Optional[str] = None) -> bool:
        """Close the session (blur). Empty fields get their placeholder text."""
        board = self.board
        session = self.session
        if session is None or (uuid is not None and session.uuid != uuid):
            return False
        board.state = IDLE
        note = board.find(session.uuid)
        if note is None:
            return False

        cfg = board.config
        corrected = False
        if not note.title.strip():
            note.title = cfg.default_title
            corrected = True
        if not note.description.strip():
            note.description = cfg.default_description
            corrected = True
        if corrected:
            note.touch(board.clock())
        board.schedule_write(note.uuid)
        return True
