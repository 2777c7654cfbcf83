# Note board: kanban columns of notes, edited in place and synced to a note store
#
# Components:
#   schema.py      - Data model (Note, NoteStatus, EditField)
#   remote.py      - HTTP CRUD client for the note store
#   debounce.py    - Keyed debounce on the asyncio loop
#   interaction.py - Idle / Dragging / Editing board state
#   editing.py     - In-place edit sessions
#   drag.py        - Drag-and-drop between and within columns
#   menu.py        - Context menu commands
#   board.py       - Board controller: columns, writes, refresh
#   config.py      - YAML configuration
#   cli.py         - Command line front end
