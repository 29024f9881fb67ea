"""
Contains the ``NoteState`` class, which represents a single note, ``AppSettings``, which holds the global settings, and
``NoteStateCollection`` which is the whole document persisted to disk.

The document is UTF-8 JSON, pretty-printed, and looks like this:

.. code-block:: json

    {
      "Notes": [
        {"Id": "...", "Text": "...", "X": 0, "Y": 0, "Width": 360, "Height": 320}
      ],
      "Settings": {"HideTaskbarIcon": false, "TopMost": true, "RunAtStartup": false, "ConfirmDelete": true}
    }

Keys are matched without regard to case when loading. Missing keys take their defaults and unknown keys are ignored.
"""

from __future__ import annotations

import enum
import json
import logging
from pathlib import Path
from typing import Iterable, List

from stickynotes import helpers
from stickynotes.notes.model import geometry


class LoadStatus(enum.Enum):
    """
    How loading the data file went.
    """

    #: The file was read and parsed.
    LOADED = 'loaded'
    #: There was no file, an empty collection was returned.
    MISSING = 'missing'
    #: The file could not be read or parsed, an empty collection was returned.
    RECOVERED = 'recovered'


def _fold_keys(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError('{} must be an object, not {}'.format(what, type(data).__name__))
    return {str(key).lower(): value for key, value in data.items()}


def _read_int(data: dict, key: str, default: int) -> int:
    value = data.get(key.lower())
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError('{} must be an integer, not {!r}'.format(key, value))
    return value


def _read_str(data: dict, key: str, default: str | None) -> str | None:
    value = data.get(key.lower())
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError('{} must be a string, not {!r}'.format(key, value))
    return value


def _read_bool(data: dict, key: str, default: bool | None) -> bool | None:
    value = data.get(key.lower())
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError('{} must be true or false, not {!r}'.format(key, value))
    return value


class NoteState:
    """
    The persisted state of one note: its identity, text, position and size.
    """

    def __init__(self,
                 note_id: str | None = None,
                 text: str = '',
                 x: int = 0,
                 y: int = 0,
                 width: int = geometry.DEFAULT_WIDTH,
                 height: int = geometry.DEFAULT_HEIGHT):
        """
        Create a note state.

        :param note_id: the unique identifier of this note. A new UUID is generated if not given.
        :param text: the plain text of the note.
        :param x: horizontal position of the note window.
        :param y: vertical position of the note window.
        :param width: width of the note window.
        :param height: height of the note window.
        """
        self.id: str = note_id if note_id else helpers.get_uuid()
        self.text: str = text
        self.x: int = x
        self.y: int = y
        self.width: int = width
        self.height: int = height

    def to_dict(self) -> dict:
        return {
            'Id': self.id,
            'Text': self.text,
            'X': self.x,
            'Y': self.y,
            'Width': self.width,
            'Height': self.height
        }

    @staticmethod
    def from_dict(data: dict) -> NoteState:
        """
        Creates a note state from a deserialised JSON object.

        :param data: the JSON object.

        :return: the note state.

        :raises ValueError: if ``data`` is not an object or a field has the wrong type.
        """
        data = _fold_keys(data, 'A note')
        return NoteState(
            note_id=_read_str(data, 'Id', None),
            text=_read_str(data, 'Text', ''),
            x=_read_int(data, 'X', 0),
            y=_read_int(data, 'Y', 0),
            width=_read_int(data, 'Width', geometry.DEFAULT_WIDTH),
            height=_read_int(data, 'Height', geometry.DEFAULT_HEIGHT))

    def __eq__(self, other):
        if not isinstance(other, NoteState):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'NoteState({}, {}x{} at {},{})'.format(self.id, self.width, self.height, self.x, self.y)


class AppSettings:
    """
    Global settings, persisted next to the notes. ``run_at_startup`` and ``confirm_delete`` may be None when they were
    never written, in which case the caller picks the effective value.
    """

    def __init__(self,
                 hide_taskbar_icon: bool = False,
                 top_most: bool = False,
                 run_at_startup: bool | None = None,
                 confirm_delete: bool | None = None):
        self.hide_taskbar_icon: bool = hide_taskbar_icon
        self.top_most: bool = top_most
        self.run_at_startup: bool | None = run_at_startup
        self.confirm_delete: bool | None = confirm_delete

    def to_dict(self) -> dict:
        return {
            'HideTaskbarIcon': self.hide_taskbar_icon,
            'TopMost': self.top_most,
            'RunAtStartup': self.run_at_startup,
            'ConfirmDelete': self.confirm_delete
        }

    @staticmethod
    def from_dict(data: dict) -> AppSettings:
        data = _fold_keys(data, 'Settings')
        return AppSettings(
            hide_taskbar_icon=_read_bool(data, 'HideTaskbarIcon', False),
            top_most=_read_bool(data, 'TopMost', False),
            run_at_startup=_read_bool(data, 'RunAtStartup', None),
            confirm_delete=_read_bool(data, 'ConfirmDelete', None))

    def __eq__(self, other):
        if not isinstance(other, AppSettings):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'AppSettings({})'.format(self.to_dict())


class NoteStateCollection:
    """
    The whole persisted document: an ordered list of notes and the optional global settings. The document is read once
    at startup and rewritten in full on every save.
    """

    def __init__(self, notes: List[NoteState] | None = None, settings: AppSettings | None = None):
        if notes is None:
            notes = []
        self.notes: List[NoteState] = notes
        self.settings: AppSettings | None = settings

    def to_dict(self) -> dict:
        return {
            'Notes': [note.to_dict() for note in self.notes],
            'Settings': self.settings.to_dict() if self.settings is not None else None
        }

    @staticmethod
    def from_dict(data: dict) -> NoteStateCollection:
        """
        Creates a collection from the deserialised JSON document.

        :param data: the JSON document.

        :return: the collection.

        :raises ValueError: if the document, or anything in it, is malformed.
        """
        data = _fold_keys(data, 'The document')
        raw_notes = data.get('notes')
        if raw_notes is None:
            raw_notes = []
        if not isinstance(raw_notes, list):
            raise ValueError('Notes must be a list, not {}'.format(type(raw_notes).__name__))
        raw_settings = data.get('settings')
        return NoteStateCollection(
            notes=[NoteState.from_dict(note) for note in raw_notes],
            settings=AppSettings.from_dict(raw_settings) if raw_settings is not None else None)

    def __eq__(self, other):
        if not isinstance(other, NoteStateCollection):
            return NotImplemented
        return self.notes == other.notes and self.settings == other.settings

    def __repr__(self):
        return 'NoteStateCollection({} notes, {})'.format(len(self.notes), self.settings)

    @staticmethod
    def try_load(path: Path | str) -> tuple[LoadStatus, NoteStateCollection]:
        """
        Loads the collection from ``path``. Never raises: a missing file or a file which can't be read or parsed gives
        an empty collection.

        :param path: path to the data file.

        :returns:

            - status (:py:class:`LoadStatus`) - whether the file was loaded, missing, or recovered from.
            - collection (:py:class:`NoteStateCollection`) - the loaded collection, or an empty one.

        """
        path = Path(path)
        try:
            if not path.is_file():
                logging.info('No data file at {}, starting empty.'.format(path))
                return LoadStatus.MISSING, NoteStateCollection()

            # utf-8-sig also accepts files written with a byte order mark
            with open(path, encoding='utf-8-sig') as fp:
                data = json.load(fp)
            if data is None:
                raise ValueError('The document is null')
            collection = NoteStateCollection.from_dict(data)
        except (OSError, ValueError, RecursionError) as e:
            logging.warning('Could not load data file {}, starting empty: {}'.format(path, e))
            return LoadStatus.RECOVERED, NoteStateCollection()

        logging.debug('Loaded {} notes from {}'.format(len(collection.notes), path))
        return LoadStatus.LOADED, collection

    @staticmethod
    def load(path: Path | str) -> NoteStateCollection:
        """
        Loads the collection from ``path``, falling back to an empty collection on any failure.

        :param path: path to the data file.

        :return: the loaded collection, or an empty one.
        """
        return NoteStateCollection.try_load(path)[1]

    @staticmethod
    def save(path: Path | str, notes: Iterable[NoteState], settings: AppSettings | None = None) -> tuple[bool, str]:
        """
        Writes all notes and the settings to ``path``, replacing its content. The parent folder is created if needed.
        Failures are logged and reported, never raised.

        :param path: path to the data file.
        :param notes: the notes to save, in order.
        :param settings: the global settings, if any.

        :returns:

            -success (:py:class:`bool`) - true if the file was written.

            -data (:py:class:`str`) - error message on failure, or success message.

        """
        path = Path(path)
        collection = NoteStateCollection(list(notes), settings)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # encode before opening, opening for writing truncates the old file
            data = json.dumps(collection.to_dict(), indent=2, ensure_ascii=False).encode('utf-8')
            with open(path, 'wb') as fp:
                fp.write(data)
        except (OSError, TypeError, ValueError, RecursionError) as e:
            error = 'Failed to save notes to {}: {}'.format(path, e)
            logging.error(error)
            return False, error
        debug_msg = 'Saved {} notes to {}'.format(len(collection.notes), path)
        logging.debug(debug_msg)
        return True, debug_msg
