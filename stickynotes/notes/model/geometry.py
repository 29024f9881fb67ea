"""
Window geometry rules for note windows: default and minimum sizes, the resize corner and placement of new notes.
"""

from __future__ import annotations

from typing import Tuple

DEFAULT_WIDTH: int = 360  #: Width of a new note.
DEFAULT_HEIGHT: int = 320  #: Height of a new note.
MIN_WIDTH: int = 250  #: A note can't be resized narrower than this.
MIN_HEIGHT: int = 180  #: A note can't be resized shorter than this.
RESIZE_AREA: int = 30  #: Size of the square in the bottom-right corner which starts a resize.
NEW_NOTE_OFFSET: int = 30  #: New notes are cascaded by this much from the note they were created from.
NEW_NOTE_ORIGIN: Tuple[int, int] = (100, 100)  #: Position of a new note when there is no note to cascade from.


def in_resize_area(x: int, y: int, width: int, height: int) -> bool:
    """
    Checks whether a point, relative to the top-left of a note, falls in the resize corner.

    :param x: horizontal position of the point.
    :param y: vertical position of the point.
    :param width: width of the note.
    :param height: height of the note.

    :return: True if the point is in the bottom-right resize corner.
    """
    return x >= width - RESIZE_AREA and y >= height - RESIZE_AREA


def clamp_size(width: int, height: int) -> Tuple[int, int]:
    return max(width, MIN_WIDTH), max(height, MIN_HEIGHT)


def resized(start_width: int, start_height: int, dx: int, dy: int) -> Tuple[int, int]:
    """
    Size of a note after dragging the resize corner by ``dx``, ``dy`` from where the drag started.
    """
    return clamp_size(start_width + dx, start_height + dy)


def next_note_position(reference_x: int | None = None, reference_y: int | None = None) -> Tuple[int, int]:
    """
    Position for a new note, cascaded from a reference note if there is one.

    :param reference_x: horizontal position of the reference note, or None.
    :param reference_y: vertical position of the reference note, or None.

    :return: the ``(x, y)`` position of the new note.
    """
    if reference_x is None or reference_y is None:
        return NEW_NOTE_ORIGIN
    return reference_x + NEW_NOTE_OFFSET, reference_y + NEW_NOTE_OFFSET
