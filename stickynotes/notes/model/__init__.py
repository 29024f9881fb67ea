"""
This is the note model package. Here, you'll find the following:

- ``notestate.py`` - Contains the ``NoteState``, ``AppSettings`` and ``NoteStateCollection`` classes, which are loaded
  from and saved to the data file.
- ``textformat.py`` - Bullet and numbered list transforms, list continuation and tray previews.
- ``geometry.py`` - Default and minimum note sizes, the resize corner and placement of new notes.

"""
