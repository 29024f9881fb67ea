"""
Plain text transforms behind the list buttons of the formatting toolbar, list continuation when pressing Enter, and the
short previews shown in the tray menu.

Lines may be separated by ``\\r\\n``, ``\\r`` or ``\\n``; transformed text is always joined with ``\\n``.
"""

from __future__ import annotations

import re
from typing import List, Tuple

BULLET: str = '• '  #: Marker at the start of a bulleted line.
NUMBERED = re.compile(r'^(\d+)\. ')  #: Marker at the start of a numbered line.
EMPTY_PREVIEW: str = '(empty)'


def split_lines(text: str) -> List[str]:
    return re.split(r'\r\n|\r|\n', text)


def _indent(line: str) -> str:
    return line[:len(line) - len(line.lstrip())]


def _is_blank(line: str) -> bool:
    return line.strip() == ''


def toggle_bullets(text: str) -> str:
    """
    Toggles bullets on a block of selected text. If every non-blank line is already bulleted, the bullets are removed.
    Otherwise a bullet is added after the indentation of every non-blank line. Blank lines come out empty.

    :param text: the selected text.

    :return: the transformed text.
    """
    lines = split_lines(text)
    has_bullets = all(_is_blank(line) or line.lstrip().startswith(BULLET) for line in lines)

    result = []
    for line in lines:
        if _is_blank(line):
            result.append('')
        elif has_bullets:
            result.append(_indent(line) + line.lstrip()[len(BULLET):])
        else:
            result.append(_indent(line) + BULLET + line.strip())
    return '\n'.join(result)


def toggle_numbering(text: str) -> str:
    """
    Toggles numbering on a block of selected text. If every non-blank line is already numbered, the numbers are removed.
    Otherwise non-blank lines are numbered from 1, skipping blank lines.

    :param text: the selected text.

    :return: the transformed text.
    """
    lines = split_lines(text)
    has_numbering = all(_is_blank(line) or NUMBERED.match(line.lstrip()) for line in lines)

    result = []
    number = 1
    for line in lines:
        if _is_blank(line):
            result.append('')
        elif has_numbering:
            trimmed = line.lstrip()
            match = NUMBERED.match(trimmed)
            result.append(_indent(line) + trimmed[match.end():])
        else:
            result.append('{}{}. {}'.format(_indent(line), number, line.strip()))
            number += 1
    return '\n'.join(result)


def toggle_line_bullet(line: str) -> Tuple[str, int]:
    """
    Toggles the bullet on the line holding the cursor when nothing is selected.

    :param line: the current line.

    :returns:

        - new_line (:py:class:`str`) - the line with the bullet added or removed.
        - column (:py:class:`int`) - where to put the cursor in the new line.

    """
    indent = _indent(line)
    trimmed = line.lstrip()
    if trimmed.startswith(BULLET):
        return indent + trimmed[len(BULLET):], len(indent)
    return indent + BULLET + trimmed, len(indent) + len(BULLET)


def toggle_line_number(line: str) -> Tuple[str, int]:
    """
    Toggles numbering on the line holding the cursor when nothing is selected. A new number always starts at ``1.``.

    :param line: the current line.

    :returns:

        - new_line (:py:class:`str`) - the line with the number added or removed.
        - column (:py:class:`int`) - where to put the cursor in the new line.

    """
    indent = _indent(line)
    trimmed = line.lstrip()
    match = NUMBERED.match(trimmed)
    if match:
        return indent + trimmed[match.end():], len(indent)
    return indent + '1. ' + trimmed, len(indent) + 3


def continuation_prefix(line: str) -> str | None:
    """
    What to start the next line with when Enter is pressed on ``line``: a bulleted line continues the bullets and a
    numbered line continues with the next number, at the same indentation.

    :param line: the line holding the cursor.

    :return: the prefix for the new line, or None if the line isn't part of a list.
    """
    indent = _indent(line)
    trimmed = line.lstrip()
    if trimmed.startswith(BULLET):
        return indent + BULLET
    match = NUMBERED.match(trimmed)
    if match:
        return '{}{}. '.format(indent, int(match.group(1)) + 1)
    return None


def preview(text: str | None, length: int = 20) -> str:
    """
    A single-line preview of a note for the tray menu.

    :param text: the text of the note.
    :param length: maximum length of the preview.

    :return: the first ``length`` characters with line breaks flattened, or ``(empty)``.
    """
    clean = (text or '').replace('\r\n', ' ').replace('\n', ' ').replace('\r', ' ').strip()
    if not clean:
        return EMPTY_PREVIEW
    return clean[:length]
