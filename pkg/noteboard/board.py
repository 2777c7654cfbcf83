"""
Board controller.

Owns the column → notes structure and the single interaction state, and
mediates between the drag, edit and menu controllers and the note store.

Write paths:
  immediate  create, delete, drag commit
  debounced  keystrokes, edit end, status dropdown (config.debounce_secs)

Refresh re-sorts every column by mod_time, newest first. Notes that are
being dragged, being edited, waiting on a debounced write, or written while
the fetch was out keep their local content; the dragged note also keeps its
place. Notes deleted locally stay deleted until a snapshot confirms it.
"""
import asyncio
import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from .config import BoardConfig
from .debounce import Debouncer
from .drag import DragController, Layout
from .editing import EditSessionController
from .interaction import IDLE, Interaction, dragged_uuid
from .menu import ContextMenuController
from .remote import RemoteSyncClient
from .schema import COLUMNS, EditField, Note, NoteStatus, unix_now

logger = logging.getLogger(__name__)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _log_failure(future: asyncio.Future) -> None:
    if not future.cancelled() and future.exception() is not None:
        logger.error("Sync call failed: %s", future.exception())


class Board:
    """Three status columns plus the interaction engine around them."""

    def __init__(
        self,
        client: RemoteSyncClient,
        config: Optional[BoardConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        layout: Optional[Layout] = None,
        clock: Callable[[], int] = unix_now,
    ):
        self.client = client
        self.config = config or BoardConfig()
        self.clock = clock
        self.columns: Dict[NoteStatus, List[Note]] = {s: [] for s in COLUMNS}
        self.placeholders: Set[NoteStatus] = set()
        self.state: Interaction = IDLE

        self.debouncer = Debouncer(loop)
        self.drag = DragController(self, layout)
        self.edit = EditSessionController(self)
        self.menu = ContextMenuController(self)

        self._executor: Optional[ThreadPoolExecutor] = None
        self._refresh_task: Optional[asyncio.Task] = None
        # uuids deleted locally whose removal no snapshot has confirmed yet
        self._deleted: Set[str] = set()
        # one set per fetch in progress: uuids written while it was out
        self._fetches: List[Set[str]] = []
        self.refresh_placeholders()

    # ── Queries ──────────────────────────────────────────────

    def all_notes(self) -> List[Note]:
        return [n for s in COLUMNS for n in self.columns[s]]

    def find(self, uuid: Optional[str]) -> Optional[Note]:
        for note in self.all_notes():
            if note.uuid == uuid:
                return note
        return None

    def locate(self, uuid: Optional[str]) -> Optional[Tuple[NoteStatus, int]]:
        for status in COLUMNS:
            for i, note in enumerate(self.columns[status]):
                if note.uuid == uuid:
                    return status, i
        return None

    def is_busy(self, uuid: str) -> bool:
        """Being dragged or edited: other handlers must leave it alone."""
        return self.state.holds(uuid)

    # ── Structure ────────────────────────────────────────────

    def place(self, note: Note, status: NoteStatus, index: Optional[int] = None) -> None:
        """Put `note` in `status` at `index` (end if None). Status follows the column."""
        self._detach(note.uuid)
        note.status = status
        column = self.columns[status]
        if index is None or index > len(column):
            index = len(column)
        column.insert(max(index, 0), note)
        self.refresh_placeholders()

    def _detach(self, uuid: str) -> None:
        for status in COLUMNS:
            self.columns[status] = [n for n in self.columns[status] if n.uuid != uuid]

    def add_placeholder_if_empty(self, status: NoteStatus) -> bool:
        """Show the 'add note' affordance in an empty column. True if shown."""
        if self.columns[status]:
            self.placeholders.discard(status)
            return False
        self.placeholders.add(status)
        return True

    def refresh_placeholders(self) -> None:
        for status in COLUMNS:
            self.add_placeholder_if_empty(status)

    def click_placeholder(self, status: NoteStatus) -> Optional[Note]:
        """Create a note in the empty column and start editing its title."""
        if status not in self.placeholders:
            return None
        note = self.create_note(status)
        self.edit.begin_edit(note.uuid, EditField.TITLE)
        return note

    # ── Commands ─────────────────────────────────────────────

    def create_note(
        self,
        status: NoteStatus = NoteStatus.ACTIVE,
        title: Optional[str] = None,
        description: Optional[str] = None,
        index: int = 0,
    ) -> Note:
        note = Note(
            title=title or self.config.default_title,
            description=description or self.config.default_description,
            status=status,
            mod_time=self.clock(),
        )
        self.place(note, status, index)
        self._dispatch(self.client.create, dataclasses.replace(note))
        logger.info("Created note %s in %s", note.uuid, status.value)
        return note

    def submit_note(self, title: str, description: str = "") -> Note:
        """The new-note form. Blank fields get placeholder text."""
        return self.create_note(
            NoteStatus.ACTIVE,
            title=(title or "").strip() or None,
            description=(description or "").strip() or None,
        )

    def set_status(self, uuid: str, status: NoteStatus) -> bool:
        """Status dropdown: move to the top of `status`, debounced write."""
        note = self.find(uuid)
        if note is None or self.drag.is_dragging(uuid):
            return False
        if note.status == status:
            return False
        self.place(note, status, 0)
        note.touch(self.clock())
        self.schedule_write(uuid)
        return True

    def delete_note(self, uuid: str) -> bool:
        """Remove locally at once; remote delete is fire-and-forget."""
        note = self.find(uuid)
        if note is None:
            return False
        self.debouncer.cancel(uuid)
        if self.state.holds(uuid):
            self.state = IDLE
            self.drag.highlighted = None
        self._detach(uuid)
        self._deleted.add(uuid)
        self.refresh_placeholders()
        self._dispatch(self.client.delete, uuid)
        logger.info("Deleted note %s", uuid)
        return True

    # ── Writes ───────────────────────────────────────────────

    def schedule_write(self, uuid: str) -> None:
        self.debouncer.schedule(uuid, lambda: self._push_update(uuid), self.config.debounce_secs)

    def write_now(self, uuid: str) -> None:
        self.debouncer.cancel(uuid)
        self._push_update(uuid)

    def flush(self) -> int:
        """Send every pending debounced write now."""
        return self.debouncer.flush()

    def _push_update(self, uuid: str) -> None:
        note = self.find(uuid)
        if note is None:
            return
        for written in self._fetches:
            written.add(uuid)
        self._dispatch(self.client.update, dataclasses.replace(note))

    def _dispatch(self, fn: Callable, *args) -> None:
        """Inline without a running loop; otherwise on the single sync worker."""
        loop = _running_loop()
        if loop is None:
            try:
                fn(*args)
            except Exception as e:
                logger.error("Sync call failed: %s", e)
            return
        self.client.bind_loop(loop)
        future = loop.run_in_executor(self._get_executor(), fn, *args)
        future.add_done_callback(_log_failure)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="noteboard-sync")
        return self._executor

    # ── Refresh ──────────────────────────────────────────────

    def load(self) -> bool:
        """Fetch and reconcile. A failed fetch leaves the board as it is."""
        deleted = set(self._deleted)
        notes = self.client.list()
        if notes is None:
            return False
        self._apply_snapshot(notes, deleted, set())
        return True

    async def refresh(self) -> bool:
        """load() with the fetch off the event loop thread."""
        loop = asyncio.get_running_loop()
        self.client.bind_loop(loop)
        deleted = set(self._deleted)
        written: Set[str] = set()
        self._fetches.append(written)
        try:
            notes = await loop.run_in_executor(self._get_executor(), self.client.list)
        finally:
            self._fetches = [s for s in self._fetches if s is not written]
        if notes is None:
            return False
        self._apply_snapshot(notes, deleted, written)
        return True

    def _apply_snapshot(self, notes: List[Note], deleted: Set[str], written: Set[str]) -> None:
        # Writes go out in order on one worker, so deletes issued before the
        # fetch have landed: absent from the snapshot means gone for good.
        self._deleted -= deleted - {n.uuid for n in notes}
        self.reconcile(notes, keep_local=written)

    def reconcile(self, remote_notes: Iterable[Note], keep_local: Iterable[str] = ()) -> None:
        """
        Merge a fetched note list by uuid and rebuild the columns.

        Remote-only notes are added unless they were deleted here. Local notes
        missing remotely stay (a create may still be in flight). Busy notes,
        notes with an unsent write, and those named in `keep_local` keep their
        local content.
        """
        keep_local = set(keep_local)
        local = {n.uuid: n for n in self.all_notes()}
        dragged = dragged_uuid(self.state)
        drag_pos = self.locate(dragged) if dragged else None

        merged: Dict[str, Note] = {}
        for remote in remote_notes:
            if remote.uuid in self._deleted:
                continue
            if remote.uuid in local and (remote.uuid in keep_local or self._keeps_local(remote.uuid)):
                merged[remote.uuid] = local[remote.uuid]
            else:
                merged[remote.uuid] = remote
        for uuid, note in local.items():
            merged.setdefault(uuid, note)

        ordered = sorted(
            (n for n in merged.values() if n.uuid != dragged),
            key=lambda n: n.mod_time,
            reverse=True,
        )
        columns: Dict[NoteStatus, List[Note]] = {s: [] for s in COLUMNS}
        for note in ordered:
            columns[note.status].append(note)
        if drag_pos is not None:
            status, index = drag_pos
            columns[status].insert(min(index, len(columns[status])), merged[dragged])

        self.columns = columns
        self.refresh_placeholders()
        logger.debug("reconciled %d remote notes, board has %d", len(merged), len(self.all_notes()))

    def _keeps_local(self, uuid: str) -> bool:
        return self.state.holds(uuid) or self.debouncer.is_pending(uuid)

    def start_auto_refresh(self, interval: Optional[float] = None) -> asyncio.Task:
        """Refresh every `interval` seconds on the running loop."""
        self.stop_auto_refresh()
        interval = interval or self.config.refresh_interval_secs
        self._refresh_task = asyncio.get_running_loop().create_task(self._auto_refresh(interval))
        return self._refresh_task

    def stop_auto_refresh(self) -> None:
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            self._refresh_task = None

    async def _auto_refresh(self, interval: float) -> None:
        while True:
            try:
                await self.refresh()
            except Exception as e:
                logger.error("Auto refresh failed: %s", e)
            await asyncio.sleep(interval)

    def close(self) -> None:
        """Flush pending writes and release the sync worker."""
        self.stop_auto_refresh()
        self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __str__(self) -> str:
        return ", ".join(f"{s.value}: {len(self.columns[s])} notes" for s in COLUMNS)
