"""
This is the note controller. It owns the notes shown by the application, their visibility and the global settings, and
persists them through the note state store. The GUI and the CLI both drive the application through an instance of
``NoteController``; nothing here depends on Qt.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Tuple

from stickynotes import helpers
from stickynotes.notes.model import geometry, textformat
from stickynotes.notes.model.notestate import AppSettings, LoadStatus, NoteState, NoteStateCollection

#: Milliseconds without edits before a note is saved.
AUTOSAVE_INTERVAL: int = 800


class NoteController:
    """
    Application state for the sticky notes.

    Settings which were never written to disk take these effective values: ``confirm_delete`` is True,
    ``run_at_startup`` follows whatever the OS currently has. When the data file has no settings at all, notes are not
    kept on top and are shown in the taskbar.
    """

    def __init__(self, data_path: Path | str | None = None):
        """
        Create the controller. Nothing is loaded until :py:meth:`load` is called.

        :param data_path: path to the data file. Defaults to :py:func:`helpers.data_file`.
        """
        self.data_path: Path = Path(data_path) if data_path else helpers.data_file()
        self.notes: List[NoteState] = []
        self.last_active_id: str | None = None
        self._visible: Dict[str, bool] = {}
        self.hide_taskbar_icon: bool = False
        self.top_most: bool = False
        self.run_at_startup: bool = False
        self.confirm_delete: bool = True

    # LOADING & SAVING -------------------------------------------------------------------------------------------------

    def load(self, synthesize_default: bool = True) -> LoadStatus:
        """
        Load notes and settings from the data file. A note whose id repeats an earlier note's id is given a new id.

        :param synthesize_default: if True and there are no notes, one default note is created so there is always a
            note to show.

        :return: how loading went.
        """
        status, collection = NoteStateCollection.try_load(self.data_path)
        self.notes = collection.notes
        seen = set()
        for note in self.notes:
            if note.id in seen:
                old_id, note.id = note.id, helpers.get_uuid()
                logging.warning('Note id {} is used more than once, renamed to {}'.format(old_id, note.id))
            seen.add(note.id)
        self._visible = {note.id: True for note in self.notes}
        self.last_active_id = None

        if not self.notes and synthesize_default:
            note = NoteState()
            self.notes.append(note)
            self._visible[note.id] = True
            logging.debug('No saved notes, created note {}'.format(note.id))

        self._apply_settings(collection.settings)
        logging.info('Loaded {} notes ({})'.format(len(self.notes), status.value))
        return status

    def _apply_settings(self, settings: AppSettings | None) -> None:
        registered = helpers.is_run_at_startup_enabled()
        if settings is None:
            self.hide_taskbar_icon = False
            self.top_most = False
            self.run_at_startup = registered
            self.confirm_delete = True
            return

        self.hide_taskbar_icon = settings.hide_taskbar_icon
        self.top_most = settings.top_most
        self.confirm_delete = settings.confirm_delete if settings.confirm_delete is not None else True
        if settings.run_at_startup is None:
            self.run_at_startup = registered
        else:
            self.run_at_startup = settings.run_at_startup
            if self.run_at_startup != registered:
                helpers.set_run_at_startup(self.run_at_startup)

    def settings(self) -> AppSettings:
        return AppSettings(
            hide_taskbar_icon=self.hide_taskbar_icon,
            top_most=self.top_most,
            run_at_startup=self.run_at_startup,
            confirm_delete=self.confirm_delete)

    def save(self) -> tuple[bool, str]:
        """
        Save all notes, in order, with the current settings.

        :returns:

            -success (:py:class:`bool`) - true if the notes were saved.

            -data (:py:class:`str`) - error message on failure, or success message.

        """
        return NoteStateCollection.save(self.data_path, self.notes, self.settings())

    # NOTES ------------------------------------------------------------------------------------------------------------

    def get_note(self, note_id: str) -> NoteState | None:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def is_visible(self, note_id: str) -> bool:
        return self._visible.get(note_id, False)

    def set_visible(self, note_id: str, visible: bool) -> None:
        if self.get_note(note_id) is not None:
            self._visible[note_id] = visible

    def visible_count(self) -> int:
        return sum(1 for note in self.notes if self.is_visible(note.id))

    def set_active(self, note_id: str) -> None:
        """
        Remember the note the user last interacted with. New notes are cascaded from it.
        """
        if self.get_note(note_id) is not None:
            self.last_active_id = note_id

    def _reference_note(self, reference_id: str | None) -> NoteState | None:
        for candidate in (reference_id, self.last_active_id):
            note = self.get_note(candidate) if candidate else None
            if note is not None:
                return note
        visible = [note for note in self.notes if self.is_visible(note.id)]
        return visible[-1] if visible else None

    def new_note(self, reference_id: str | None = None) -> NoteState:
        """
        Create a new, visible note. It is cascaded from the reference note, falling back to the last active note, then
        the last visible note.

        :param reference_id: the note the new note was requested from.

        :return: the new note.
        """
        reference = self._reference_note(reference_id)
        if reference is None:
            x, y = geometry.next_note_position()
        else:
            x, y = geometry.next_note_position(reference.x, reference.y)
        note = NoteState(x=x, y=y)
        self.notes.append(note)
        self._visible[note.id] = True
        logging.debug('Created note {} at {},{}'.format(note.id, x, y))
        return note

    def update_note(self,
                    note_id: str,
                    text: str | None = None,
                    x: int | None = None,
                    y: int | None = None,
                    width: int | None = None,
                    height: int | None = None) -> bool:
        """
        Update the in-memory state of a note. Only the values given are changed. Sizes are clamped to the minimum note
        size. Nothing is saved.

        :return: False if there is no such note.
        """
        note = self.get_note(note_id)
        if note is None:
            logging.warning('Cannot update unknown note {}'.format(note_id))
            return False
        if text is not None:
            note.text = text
        if x is not None:
            note.x = x
        if y is not None:
            note.y = y
        if width is not None or height is not None:
            note.width, note.height = geometry.clamp_size(
                width if width is not None else note.width,
                height if height is not None else note.height)
        return True

    def delete_note(self, note_id: str) -> tuple[bool, str]:
        """
        Remove a note and save. Asking the user for confirmation is up to the caller.

        :returns:

            -success (:py:class:`bool`) - true if the note was deleted and the notes saved.

            -data (:py:class:`str`) - error message on failure, or success message.

        """
        note = self.get_note(note_id)
        if note is None:
            error = 'No note with id {}'.format(note_id)
            logging.warning(error)
            return False, error
        self.notes.remove(note)
        self._visible.pop(note_id, None)
        if self.last_active_id == note_id:
            self.last_active_id = None
        success, data = self.save()
        if not success:
            return False, data
        debug_msg = 'Deleted note {}'.format(note_id)
        logging.debug(debug_msg)
        return True, debug_msg

    def toggle_all(self) -> NoteState | None:
        """
        Hide all notes if any is visible, otherwise show them all. With no notes at all, a new note is created.

        :return: the new note if one was created.
        """
        if not self.notes:
            return self.new_note()
        show = self.visible_count() == 0
        for note in self.notes:
            self._visible[note.id] = show
        return None

    # SETTINGS ---------------------------------------------------------------------------------------------------------

    def set_top_most(self, top_most: bool) -> tuple[bool, str]:
        self.top_most = top_most
        return self.save()

    def set_hide_taskbar_icon(self, hide: bool) -> tuple[bool, str]:
        self.hide_taskbar_icon = hide
        return self.save()

    def set_confirm_delete(self, confirm: bool) -> tuple[bool, str]:
        self.confirm_delete = confirm
        return self.save()

    def set_run_at_startup(self, enable: bool) -> tuple[bool, str]:
        """
        Register or unregister the application to run at login, then save.
        """
        self.run_at_startup = enable
        helpers.set_run_at_startup(enable)
        return self.save()

    # TRAY PRESENTATION ------------------------------------------------------------------------------------------------

    def tray_text(self) -> str:
        return 'Sticky Notes ({})'.format(len(self.notes))

    def show_hide_label(self) -> str:
        return 'Hide all' if self.visible_count() > 0 else 'Show all'

    def menu_entries(self) -> List[Tuple[str, str]]:
        """
        Entries for the tray's note list, e.g. ``1. + Buy milk``. ``+`` marks visible notes and ``-`` hidden ones.

        :return: a list of ``(note id, label)`` in note order.
        """
        entries = []
        for index, note in enumerate(self.notes, start=1):
            status = '+' if self.is_visible(note.id) else '-'
            entries.append((note.id, '{}. {} {} '.format(index, status, textformat.preview(note.text))))
        return entries
