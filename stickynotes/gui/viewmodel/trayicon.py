"""
Contains the ``StickyNotesTray`` class which handles the system tray icon.
"""

from __future__ import annotations

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QAction, QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QMenu, QSystemTrayIcon

from stickynotes.gui.viewmodel.stickynotesapp import StickyNotesApp


def create_icon(dark: bool) -> QIcon:
    """
    Draws the tray icon: a yellow note with a folded corner, outlined to suit the system theme.

    :param dark: True if the system uses a dark theme.

    :return: the icon.
    """
    pixmap = QPixmap(64, 64)
    pixmap.fill(Qt.GlobalColor.transparent)
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setPen(QColor('white') if dark else QColor('#333333'))
    painter.setBrush(QColor('#FFF8B4'))
    painter.drawRoundedRect(QRectF(6, 6, 52, 52), 6, 6)
    painter.drawLine(16, 22, 48, 22)
    painter.drawLine(16, 32, 48, 32)
    painter.drawLine(16, 42, 36, 42)
    painter.end()
    return QIcon(pixmap)


# noinspection PyUnresolvedReferences
class StickyNotesTray(QSystemTrayIcon):
    """
    Handles the system tray icon. The menu is refreshed from the controller every time it is about to show.
    """

    def __init__(self, icon: QIcon, parent: StickyNotesApp, *args, **kwargs):
        """
        Initialises the system tray icon.

        :param icon: the icon to be displayed.
        :param parent: the GUI controller.
        """
        super().__init__(*args, **kwargs)
        self.setIcon(icon)
        self.parent = parent

        self.menu = QMenu()
        self.mnu_show_hide = QAction("Show all")
        self.mnu_show_hide.triggered.connect(self.parent.toggle_notes)
        self.mnu_top_most = self._checkable("Always on top", self.parent.set_top_most)
        self.mnu_hide_taskbar = self._checkable("Hide taskbar icon", self.parent.set_hide_taskbar_icon)
        self.mnu_run_at_startup = self._checkable("Run at startup", self.parent.set_run_at_startup)
        self.mnu_confirm_delete = self._checkable("Confirm delete", self.parent.set_confirm_delete)
        self.mnu_notes = QMenu("Notes")
        self.mnu_new_note = QAction("New note")
        self.mnu_new_note.triggered.connect(lambda: self.parent.create_new_note(None))
        self.mnu_about = QAction("About")
        self.mnu_about.triggered.connect(StickyNotesApp.show_about)
        self.mnu_exit = QAction("Exit")
        self.mnu_exit.triggered.connect(self.parent.quit_gracefully)

        self.menu.addAction(self.mnu_show_hide)
        self.menu.addAction(self.mnu_top_most)
        self.menu.addAction(self.mnu_hide_taskbar)
        self.menu.addAction(self.mnu_run_at_startup)
        self.menu.addAction(self.mnu_confirm_delete)
        self.menu.addSeparator()
        self.menu.addMenu(self.mnu_notes)
        self.menu.addAction(self.mnu_new_note)
        self.menu.addSeparator()
        self.menu.addAction(self.mnu_about)
        self.menu.addAction(self.mnu_exit)
        self.menu.aboutToShow.connect(self.refresh)
        self.setContextMenu(self.menu)

        self.activated.connect(self.handle_activated)
        self.refresh()
        self.show()

    @staticmethod
    def _checkable(text: str, handler) -> QAction:
        action = QAction(text)
        action.setCheckable(True)
        action.triggered.connect(handler)
        return action

    def handle_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self.parent.toggle_notes()

    def refresh(self) -> None:
        """
        Updates the tooltip, the check marks and the list of notes from the controller.
        """
        controller = self.parent.controller
        self.setToolTip(controller.tray_text())
        self.mnu_show_hide.setText(controller.show_hide_label())
        self.mnu_top_most.setChecked(controller.top_most)
        self.mnu_hide_taskbar.setChecked(controller.hide_taskbar_icon)
        self.mnu_run_at_startup.setChecked(controller.run_at_startup)
        self.mnu_confirm_delete.setChecked(controller.confirm_delete)

        self.mnu_notes.clear()
        entries = controller.menu_entries()
        self.mnu_notes.setEnabled(len(entries) > 0)
        for note_id, label in entries:
            action = self.mnu_notes.addAction(label)
            action.triggered.connect(lambda checked=False, nid=note_id: self.parent.toggle_note(nid))
