"""
This is the view model package for the GUI. Here, you'll find the following:

- ``stickynotesapp.py`` - Contains the ``StickyNotesApp`` class - the GUI controller which owns the note windows and
  dispatches their events to the ``NoteController``.
- ``notewindow.py`` - Contains the ``NoteWindow`` class, a frameless always-on-top window for one note.
- ``trayicon.py`` - Contains the ``StickyNotesTray`` class which handles the system tray icon.

"""
