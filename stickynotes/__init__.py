"""
This is the main package for StickyNotes.

- ``notes`` - the note model, the note state store and the note controller.
- ``gui`` - the StickyNotes tray application and its note windows.
- ``cli`` - a command-line interface to the same data file.
- ``helpers`` - helpers used by all of the above.

"""

from . import helpers

__all__ = ['helpers', ]
