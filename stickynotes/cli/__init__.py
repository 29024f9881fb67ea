"""
This is the CLI package for StickyNotes.

- ``sncli.py`` - Contains the ``StickyNotesCli`` class and the ``main`` entry point.

"""
