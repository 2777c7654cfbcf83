"""
Right-click (or long-press) menu: New, Edit, Delete.
"""
from typing import Optional, Tuple

from .interaction import Dragging
from .schema import EditField, Note, NoteStatus


class ContextMenuController:
    """Issues board commands against the note the menu was opened on."""

    COMMANDS = ("New", "Edit", "Delete")

    def __init__(self, board):
        self.board = board
        self.is_open = False
        self.anchor: Optional[Tuple[float, float]] = None
        self.target_uuid: Optional[str] = None
        self.target_field: Optional[EditField] = None

    def open(self, x: float, y: float, uuid: Optional[str] = None,
             field: Optional[EditField] = None) -> bool:
        """Anchor the menu at the pointer. uuid=None means empty board space."""
        if isinstance(self.board.state, Dragging):
            return False
        if uuid is not None and self.board.find(uuid) is None:
            uuid = None
            field = None
        self.is_open = True
        self.anchor = (x, y)
        self.target_uuid = uuid
        self.target_field = field
        return True

    long_press = open

    def dismiss(self) -> None:
        """Any click outside the menu."""
        self.is_open = False
        self.anchor = None
        self.target_uuid = None
        self.target_field = None

    def new(self) -> Optional[Note]:
        """Sibling of the target note, or an Active note on empty space."""
        if not self.is_open:
            return None
        where = self.board.locate(self.target_uuid) if self.target_uuid else None
        self.dismiss()
        if where is None:
            note = self.board.create_note(NoteStatus.ACTIVE)
        else:
            status, index = where
            note = self.board.create_note(status, index=index + 1)
        self.board.edit.begin_edit(note.uuid, EditField.TITLE)
        return note

    def edit(self) -> bool:
        if not self.is_open or self.target_uuid is None:
            self.dismiss()
            return False
        uuid, field = self.target_uuid, self.target_field or EditField.TITLE
        self.dismiss()
        return self.board.edit.begin_edit(uuid, field)

    def delete(self) -> bool:
        if not self.is_open or self.target_uuid is None:
            self.dismiss()
            return False
        uuid = self.target_uuid
        self.dismiss()
        return self.board.delete_note(uuid)
