"""Shared test fixtures for the note board tests."""

import asyncio
import sys
from pathlib import Path

import pytest

# Ensure the project root is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from pkg.noteboard.board import Board
from pkg.noteboard.config import BoardConfig
from pkg.noteboard.drag import Layout
from pkg.noteboard.schema import Note


class FakeStore:
    """In-memory stand-in for RemoteSyncClient that records every call."""

    base_url = "http://fake"

    def __init__(self, notes=None):
        self.notes = {n.uuid: Note.from_dict(n.to_dict()) for n in (notes or [])}
        self.calls = []
        self.fail = False
        self.loop = None
        # called at the start of list(), before the snapshot is taken
        self.before_list = None

    def bind_loop(self, loop):
        self.loop = loop

    def list(self):
        self.calls.append(("list", None))
        if self.before_list is not None:
            self.before_list()
        if self.fail:
            return None
        return [Note.from_dict(n.to_dict()) for n in self.notes.values()]

    def create(self, note):
        self.calls.append(("create", note.to_dict()))
        if self.fail:
            return False
        self.notes[note.uuid] = Note.from_dict(note.to_dict())
        return True

    def update(self, note):
        self.calls.append(("update", note.to_dict()))
        if self.fail:
            return False
        self.notes[note.uuid] = Note.from_dict(note.to_dict())
        return True

    def delete(self, uuid):
        self.calls.append(("delete", uuid))
        if self.fail:
            return False
        return self.notes.pop(uuid, None) is not None

    def fetch_qr(self):
        return None if self.fail else b"\x89PNG"

    def writes(self, kind=None):
        return [c for c in self.calls if c[0] != "list" and (kind is None or c[0] == kind)]


class Clock:
    """Settable clock returning integer seconds."""

    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def board(store, loop, clock):
    return Board(store, BoardConfig(), loop=loop, layout=Layout(), clock=clock)


def make_note(title, status, mod_time=100, uuid=None):
    note = Note(title=title, description=f"{title} body", status=status, mod_time=mod_time)
    if uuid:
        note.uuid = uuid
    return note
