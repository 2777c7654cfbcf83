"""Tests for the note record."""
from pkg.noteboard.schema import EditField, Note, NoteStatus


def test_defaults():
    note = Note()
    assert note.status == NoteStatus.ACTIVE
    assert note.title == "New Note"
    assert note.description == "Add description..."
    assert len(note.uuid) == 36
    assert Note().uuid != note.uuid


def test_status_from_str():
    assert NoteStatus.from_str("Completed") == NoteStatus.COMPLETED
    assert NoteStatus.from_str("archived") == NoteStatus.ARCHIVED
    assert NoteStatus.from_str("Done") == NoteStatus.ACTIVE


def test_wire_form():
    note = Note(uuid="u", title="t", description="d", status=NoteStatus.ARCHIVED, mod_time=9)
    assert note.to_dict() == {
        "uuid": "u", "title": "t", "description": "d", "status": "Archived", "mod_time": 9,
    }
    assert Note.from_dict(note.to_dict()) == note


def test_from_dict_tolerates_missing_fields():
    note = Note.from_dict({"uuid": "u", "mod_time": "oops"})
    assert (note.title, note.description, note.status, note.mod_time) == ("", "", NoteStatus.ACTIVE, 0)


def test_touch_is_monotonic():
    note = Note(mod_time=50)
    note.touch(40)
    assert note.mod_time == 50
    note.touch(60)
    assert note.mod_time == 60


def test_field_access():
    note = Note(title="a", description="b")
    note.set_field(EditField.DESCRIPTION, "c")
    assert note.get_field(EditField.TITLE) == "a"
    assert note.get_field(EditField.DESCRIPTION) == "c"
