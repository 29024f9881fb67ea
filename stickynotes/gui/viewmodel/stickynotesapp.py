"""
Contains the GUI controller, which creates a window for every note and turns window events into calls on the
``NoteController``.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable, Dict

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QApplication, QMessageBox

from stickynotes import helpers
from stickynotes.gui.viewmodel.notewindow import NoteEvent, NoteWindow
from stickynotes.notes.controller import NoteController
from stickynotes.notes.model.notestate import NoteState


class StickyNotesApp(QObject):
    """
    GUI controller for StickyNotes. Every :py:class:`NoteWindow` reports what happens to it through one signal, and
    :py:attr:`handlers` maps each kind of event to the method that handles it.
    """

    def __init__(self, controller: NoteController | None = None):
        """
        Load notes and open a window for each of them.

        :param controller: the note controller. A controller for the default data file is created if not given.
        """
        super().__init__()
        self.controller: NoteController = controller if controller is not None else NoteController()
        self.windows: Dict[str, NoteWindow] = {}
        self.tray_icon = None
        self.quitting: bool = False
        self.handlers: Dict[str, Callable[[str], None]] = {
            NoteEvent.NEW: self.create_new_note,
            NoteEvent.DELETE: self.delete_note,
            NoteEvent.EXIT: lambda note_id: self.quit_gracefully(),
            NoteEvent.TEXT_CHANGED: self.handle_text_changed,
            NoteEvent.SAVE: self.handle_save,
            NoteEvent.ACTIVATED: self.controller.set_active,
            NoteEvent.VISIBILITY: self.handle_visibility,
        }

        status = self.controller.load()
        logging.info('Data file {}: {}'.format(self.controller.data_path, status.value))
        for note in list(self.controller.notes):
            self.open_window(note)

    # EVENT DISPATCH ---------------------------------------------------------------------------------------------------

    def dispatch(self, note_id: str, kind: str) -> None:
        """
        Handles an event from a note window.

        :param note_id: the note the event came from.
        :param kind: the :py:class:`NoteEvent` kind.
        """
        handler = self.handlers.get(kind)
        if handler is None:
            logging.warning('Unhandled note event {} from {}'.format(kind, note_id))
            return
        handler(note_id)

    def open_window(self, note: NoteState) -> NoteWindow:
        window = NoteWindow(note, self.controller.top_most, self.controller.hide_taskbar_icon)
        window.note_event.connect(self.dispatch)
        self.windows[note.id] = window
        window.show_note()
        return window

    def refresh_tray(self) -> None:
        if self.tray_icon is not None:
            self.tray_icon.refresh()

    def _sync_from_window(self, note_id: str) -> None:
        window = self.windows.get(note_id)
        if window is None:
            return
        state = window.state()
        self.controller.update_note(note_id, text=state.text, x=state.x, y=state.y, width=state.width,
                                    height=state.height)

    def handle_text_changed(self, note_id: str) -> None:
        window = self.windows.get(note_id)
        if window is not None:
            self.controller.update_note(note_id, text=window.editor.toPlainText())

    def handle_save(self, note_id: str) -> None:
        self._sync_from_window(note_id)
        self.controller.save()

    def handle_visibility(self, note_id: str) -> None:
        window = self.windows.get(note_id)
        if window is None or self.quitting:
            return
        self.controller.set_visible(note_id, window.isVisible())
        self.refresh_tray()

    # NOTE ACTIONS -----------------------------------------------------------------------------------------------------

    def create_new_note(self, note_id: str | None) -> None:
        """
        Creates a new note cascaded from ``note_id`` (or the last active note) and saves.
        """
        note = self.controller.new_note(note_id)
        self.open_window(note)
        self.controller.save()
        self.refresh_tray()

    def delete_note(self, note_id: str) -> None:
        """
        Deletes a note, asking first if confirmation is enabled.
        """
        if self.controller.confirm_delete:
            action = StickyNotesApp._ask_question("Delete Note", "Are you sure you want to delete this note?")
            if action != QMessageBox.StandardButton.Yes:
                return
        for other_id in self.windows:
            self._sync_from_window(other_id)
        window = self.windows.pop(note_id, None)
        self.controller.delete_note(note_id)
        if window is not None:
            window.quitting = True
            window.autosave_timer.stop()
            window.close()
            window.deleteLater()
        self.refresh_tray()

    def toggle_notes(self) -> None:
        """
        Hides every note if any is showing, otherwise shows them all.
        """
        created = self.controller.toggle_all()
        if created is not None:
            self.open_window(created)
            self.controller.save()
        else:
            for note in self.controller.notes:
                window = self.windows[note.id]
                if self.controller.is_visible(note.id):
                    window.show_note()
                else:
                    window.hide()
        self.refresh_tray()

    def toggle_note(self, note_id: str) -> None:
        window = self.windows.get(note_id)
        if window is None:
            return
        if window.isVisible():
            window.hide()
        else:
            window.show_note()

    # SETTINGS ---------------------------------------------------------------------------------------------------------

    def _apply_flags(self) -> None:
        for window in self.windows.values():
            window.apply_flags(self.controller.top_most, self.controller.hide_taskbar_icon)

    def set_top_most(self, top_most: bool) -> None:
        self.controller.set_top_most(top_most)
        self._apply_flags()

    def set_hide_taskbar_icon(self, hide: bool) -> None:
        self.controller.set_hide_taskbar_icon(hide)
        self._apply_flags()

    def set_run_at_startup(self, enable: bool) -> None:
        self.controller.set_run_at_startup(enable)

    def set_confirm_delete(self, confirm: bool) -> None:
        self.controller.set_confirm_delete(confirm)

    # GENERAL ----------------------------------------------------------------------------------------------------------

    @staticmethod
    def _ask_question(title: str, message: str) -> int:
        """
        Show a question dialog. No is the default button.

        :param title: the window title for the dialog.
        :param message: message to show.
        """
        ask = QMessageBox()
        ask.setIcon(QMessageBox.Icon.Question)
        ask.setText(message)
        ask.setWindowTitle(title)
        ask.setStandardButtons(QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
        ask.setDefaultButton(QMessageBox.StandardButton.No)
        ask.activateWindow()
        return ask.exec()

    @staticmethod
    def show_about() -> None:
        """
        Open the project page in the browser.
        """
        webbrowser.open(helpers.PROJECT_URL)

    def quit_gracefully(self) -> None:
        """
        Saves every note and quits.
        """
        self.quitting = True
        for note_id, window in self.windows.items():
            window.autosave_timer.stop()
            self._sync_from_window(note_id)
        self.controller.save()
        if self.tray_icon is not None:
            self.tray_icon.hide()
        for window in self.windows.values():
            window.quitting = True
            window.close()
        logging.info('Exiting')
        QApplication.instance().quit()
