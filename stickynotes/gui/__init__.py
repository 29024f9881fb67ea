"""
This is the GUI package for StickyNotes.

- ``StickyNotes.py`` - Application entry point. Creates the note windows and the system tray icon.
- ``viewmodel`` - Contains the view controllers for the tray icon and note windows.

"""
