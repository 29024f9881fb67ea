"""
This is the notes package for StickyNotes.

- ``controller.py`` - Contains the ``NoteController`` class which holds the application state and is called by the GUI
  and CLI.
- ``model`` - the persisted note model and the text and geometry rules used by note windows.

"""
