"""
Note schema.

A note lives in exactly one of three columns; the column is its status.
Wire form is the flat JSON object exchanged with the note store:
  { uuid, title, description, status, mod_time }
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import time
import uuid as uuidlib


DEFAULT_TITLE = "New Note"
DEFAULT_DESCRIPTION = "Add description..."


class NoteStatus(Enum):
    """Board columns, in display order."""
    ACTIVE = "Active"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"

    @classmethod
    def from_str(cls, value: str) -> "NoteStatus":
        try:
            return cls(value)
        except ValueError:
            pass
        try:
            return cls[str(value).upper()]
        except KeyError:
            return cls.ACTIVE


# Column order left to right (or top to bottom when stacked)
COLUMNS = (NoteStatus.ACTIVE, NoteStatus.COMPLETED, NoteStatus.ARCHIVED)


class EditField(Enum):
    """In-place editable parts of a note."""
    TITLE = "title"
    DESCRIPTION = "description"


def unix_now() -> int:
    return int(time.time())


def new_uuid() -> str:
    return str(uuidlib.uuid4())


@dataclass
class Note:
    """One note on the board."""

    uuid: str = field(default_factory=new_uuid)
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    status: NoteStatus = NoteStatus.ACTIVE
    mod_time: int = field(default_factory=unix_now)

    def touch(self, now: Optional[int] = None) -> None:
        """Stamp a local mutation. mod_time never moves backwards."""
        now = unix_now() if now is None else int(now)
        self.mod_time = max(self.mod_time, now)

    def get_field(self, which: EditField) -> str:
        return self.title if which == EditField.TITLE else self.description

    def set_field(self, which: EditField, text: str) -> None:
        if which == EditField.TITLE:
            self.title = text
        else:
            self.description = text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "mod_time": self.mod_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """Deserialize a wire record. Missing text fields become empty."""
        try:
            mod_time = int(data.get("mod_time") or 0)
        except (TypeError, ValueError):
            mod_time = 0
        return cls(
            uuid=str(data.get("uuid") or new_uuid()),
            title=data.get("title") or "",
            description=data.get("description") or "",
            status=NoteStatus.from_str(data.get("status") or "Active"),
            mod_time=mod_time,
        )
