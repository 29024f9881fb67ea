"""
Main application entry point. Opens the note windows and creates the system tray icon.
"""
import sys

import darkdetect
from PyQt6.QtWidgets import QApplication

from stickynotes import helpers
from stickynotes.gui.viewmodel import trayicon
from stickynotes.gui.viewmodel.stickynotesapp import StickyNotesApp


def main():
    helpers.setup_logging(helpers.LOG_LEVEL, log_stdout=True)
    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)
    sn = StickyNotesApp()
    tray_icon = trayicon.StickyNotesTray(trayicon.create_icon(bool(darkdetect.isDark())), sn)
    sn.tray_icon = tray_icon
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
