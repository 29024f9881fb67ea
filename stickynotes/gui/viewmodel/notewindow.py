"""
Contains the ``NoteWindow`` class, a frameless window showing a single note, and ``NoteEvent`` which lists the events a
note window reports to the GUI controller.
"""

from __future__ import annotations

from PyQt6.QtCore import QEvent, QObject, QPoint, QTimer, Qt, pyqtSignal
from PyQt6.QtGui import QCloseEvent, QFont, QKeyEvent, QMouseEvent, QTextCharFormat, QTextCursor
from PyQt6.QtWidgets import QApplication, QFrame, QHBoxLayout, QLabel, QMenu, QPushButton, QTextEdit, QVBoxLayout, \
    QWidget

from stickynotes.notes.controller import AUTOSAVE_INTERVAL
from stickynotes.notes.model import geometry, textformat
from stickynotes.notes.model.notestate import NoteState

NOTE_COLOUR = '#FFF8B4'
TOOLBAR_HEIGHT = 30
HIDE_TOOLBAR_DELAY = 200
COPY_CONFIRM_DELAY = 2000


class NoteEvent:
    """
    Kinds of events emitted through :py:attr:`NoteWindow.note_event`.
    """

    NEW = 'new'  #: The user asked for a new note.
    DELETE = 'delete'  #: The user asked to delete this note.
    EXIT = 'exit'  #: The user asked to exit the application.
    TEXT_CHANGED = 'text'  #: The text was edited.
    SAVE = 'save'  #: Edits have settled and the note should be saved.
    ACTIVATED = 'activated'  #: The window became the active window.
    VISIBILITY = 'visibility'  #: The window was shown or hidden.


# noinspection PyUnresolvedReferences
class NoteWindow(QWidget):
    """
    A borderless window for one note. The toolbars show while the mouse is over the note. Dragging anywhere outside the
    editor moves the window, dragging the bottom-right corner resizes it.
    """

    #: Emitted with the note id and a :py:class:`NoteEvent` kind.
    note_event = pyqtSignal(str, str)

    def __init__(self, state: NoteState, top_most: bool = True, hide_taskbar_icon: bool = False):
        """
        Creates the window for a note.

        :param state: the note to show.
        :param top_most: if True, the window stays on top of other windows.
        :param hide_taskbar_icon: if True, the window is not shown in the taskbar.
        """
        super().__init__()
        self.note_id: str = state.id
        self.quitting: bool = False
        self.resizing: bool = False
        self.resize_start_pos: QPoint = QPoint()
        self.resize_start_size: tuple[int, int] = (0, 0)

        self.setWindowTitle('Sticky Notes')
        self.setWindowFlag(Qt.WindowType.FramelessWindowHint, True)
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, top_most)
        self.setWindowFlag(Qt.WindowType.Tool, hide_taskbar_icon)
        self.setMinimumSize(geometry.MIN_WIDTH, geometry.MIN_HEIGHT)
        self.setStyleSheet("""
            NoteWindow, QFrame, QTextEdit, QLabel {{ background-color: {0}; border: none; }}
            QPushButton {{ background-color: transparent; border: none; border-radius: 3px; color: #333; }}
            QPushButton:hover {{ background-color: rgba(0, 0, 0, 0.08); }}
        """.format(NOTE_COLOUR))

        self.autosave_timer = QTimer(self)
        self.autosave_timer.setSingleShot(True)
        self.autosave_timer.setInterval(AUTOSAVE_INTERVAL)
        self.autosave_timer.timeout.connect(lambda: self.note_event.emit(self.note_id, NoteEvent.SAVE))

        self.hide_toolbar_timer = QTimer(self)
        self.hide_toolbar_timer.setSingleShot(True)
        self.hide_toolbar_timer.setInterval(HIDE_TOOLBAR_DELAY)
        self.hide_toolbar_timer.timeout.connect(self.hide_toolbars)

        self.bootstrap_ui()
        self.load_state(state)
        self.editor.textChanged.connect(self.handle_text_changed)
        self.hide_toolbars()

    # SETUP ------------------------------------------------------------------------------------------------------------

    def _tool_button(self, text: str, tooltip: str, handler) -> QPushButton:
        button = QPushButton(text)
        button.setFixedSize(28, 28)
        button.setToolTip(tooltip)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        button.clicked.connect(handler)
        return button

    def bootstrap_ui(self) -> None:
        """
        Builds the top bar, the editor and the formatting bar.
        """
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.top_bar = QFrame()
        self.top_bar.setFixedHeight(TOOLBAR_HEIGHT)
        top_layout = QHBoxLayout(self.top_bar)
        top_layout.setContentsMargins(5, 0, 5, 0)
        self.add_button = self._tool_button('+', 'New note',
                                            lambda: self.note_event.emit(self.note_id, NoteEvent.NEW))
        self.delete_button = self._tool_button('×', 'Delete note',
                                               lambda: self.note_event.emit(self.note_id, NoteEvent.DELETE))
        self.close_button = self._tool_button('–', 'Hide note', self.hide)
        top_layout.addWidget(self.add_button)
        top_layout.addStretch()
        top_layout.addWidget(self.delete_button)
        top_layout.addWidget(self.close_button)
        layout.addWidget(self.top_bar)

        self.editor = QTextEdit()
        self.editor.setFont(QFont('Segoe UI', 10))
        self.editor.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.editor.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.editor.customContextMenuRequested.connect(self.show_context_menu)
        self.editor.installEventFilter(self)
        layout.addWidget(self.editor)

        self.format_bar = QFrame()
        self.format_bar.setFixedHeight(TOOLBAR_HEIGHT)
        format_layout = QHBoxLayout(self.format_bar)
        format_layout.setContentsMargins(10, 0, 2, 0)
        format_layout.setSpacing(5)
        self.bold_button = self._tool_button('B', 'Bold', self.toggle_bold)
        self.bold_button.setStyleSheet('font-weight: bold;')
        self.italic_button = self._tool_button('I', 'Italic', self.toggle_italic)
        self.italic_button.setStyleSheet('font-style: italic;')
        self.underline_button = self._tool_button('U', 'Underline', self.toggle_underline)
        self.underline_button.setStyleSheet('text-decoration: underline;')
        self.strikethrough_button = self._tool_button('S', 'Strikethrough', self.toggle_strikethrough)
        self.strikethrough_button.setStyleSheet('text-decoration: line-through;')
        self.clear_button = self._tool_button('Tx', 'Clear formatting', self.clear_formatting)
        self.list_button = self._tool_button('•', 'Bulleted list', self.insert_list)
        self.ordered_list_button = self._tool_button('1.', 'Numbered list', self.insert_ordered_list)
        self.copy_button = self._tool_button('⧉', 'Copy', self.copy_to_clipboard)
        for button in (self.bold_button, self.italic_button, self.underline_button, self.strikethrough_button,
                       self.clear_button, self.list_button, self.ordered_list_button, self.copy_button):
            format_layout.addWidget(button)
        format_layout.addStretch()
        self.resize_handle = QLabel('◢')
        self.resize_handle.setFixedSize(geometry.RESIZE_AREA, TOOLBAR_HEIGHT)
        self.resize_handle.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignBottom)
        self.resize_handle.setCursor(Qt.CursorShape.SizeFDiagCursor)
        format_layout.addWidget(self.resize_handle)
        layout.addWidget(self.format_bar)

    def load_state(self, state: NoteState) -> None:
        if state.text:
            self.editor.setPlainText(state.text)
        if state.width > 0 and state.height > 0:
            self.setGeometry(state.x, state.y, state.width, state.height)

    def state(self) -> NoteState:
        """
        The current state of this window as a :py:class:`NoteState`.
        """
        geo = self.geometry()
        return NoteState(note_id=self.note_id, text=self.editor.toPlainText(), x=geo.x(), y=geo.y(),
                         width=geo.width(), height=geo.height())

    def apply_flags(self, top_most: bool, hide_taskbar_icon: bool) -> None:
        """
        Changes the window flags. Qt hides a window when its flags change, so a visible window is shown again.
        """
        visible = self.isVisible()
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, top_most)
        self.setWindowFlag(Qt.WindowType.Tool, hide_taskbar_icon)
        if visible:
            self.show()

    def show_note(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    # TOOLBARS ---------------------------------------------------------------------------------------------------------

    def show_toolbars(self) -> None:
        self.top_bar.show()
        self.format_bar.show()

    def hide_toolbars(self) -> None:
        if self.resizing:
            return
        self.top_bar.hide()
        self.format_bar.hide()

    def enterEvent(self, event) -> None:
        self.hide_toolbar_timer.stop()
        self.show_toolbars()
        super().enterEvent(event)

    def leaveEvent(self, event: QEvent) -> None:
        self.hide_toolbar_timer.start()
        super().leaveEvent(event)

    # FORMATTING -------------------------------------------------------------------------------------------------------

    def _merge_selection_format(self, fmt: QTextCharFormat) -> None:
        cursor = self.editor.textCursor()
        self.editor.setFocus()
        if cursor.hasSelection():
            cursor.mergeCharFormat(fmt)

    def toggle_bold(self) -> None:
        fmt = QTextCharFormat()
        bold = self.editor.textCursor().charFormat().fontWeight() >= QFont.Weight.Bold
        fmt.setFontWeight(QFont.Weight.Normal if bold else QFont.Weight.Bold)
        self._merge_selection_format(fmt)

    def toggle_italic(self) -> None:
        fmt = QTextCharFormat()
        fmt.setFontItalic(not self.editor.textCursor().charFormat().fontItalic())
        self._merge_selection_format(fmt)

    def toggle_underline(self) -> None:
        fmt = QTextCharFormat()
        fmt.setFontUnderline(not self.editor.textCursor().charFormat().fontUnderline())
        self._merge_selection_format(fmt)

    def toggle_strikethrough(self) -> None:
        fmt = QTextCharFormat()
        fmt.setFontStrikeOut(not self.editor.textCursor().charFormat().fontStrikeOut())
        self._merge_selection_format(fmt)

    def clear_formatting(self) -> None:
        fmt = QTextCharFormat()
        fmt.setFontWeight(QFont.Weight.Normal)
        fmt.setFontItalic(False)
        fmt.setFontUnderline(False)
        fmt.setFontStrikeOut(False)
        self._merge_selection_format(fmt)

    def _replace_selection(self, transform) -> None:
        cursor = self.editor.textCursor()
        start = cursor.selectionStart()
        # Qt separates selected paragraphs with U+2029
        selected = cursor.selectedText().replace('\u2029', '\n')
        replacement = transform(selected)
        cursor.insertText(replacement)
        cursor.setPosition(start)
        cursor.setPosition(start + len(replacement), QTextCursor.MoveMode.KeepAnchor)
        self.editor.setTextCursor(cursor)

    def _replace_current_line(self, transform) -> None:
        cursor = self.editor.textCursor()
        block = cursor.block()
        if not block.text() and not block.next().isValid():
            return
        new_line, column = transform(block.text())
        cursor.movePosition(QTextCursor.MoveOperation.StartOfBlock)
        cursor.movePosition(QTextCursor.MoveOperation.EndOfBlock, QTextCursor.MoveMode.KeepAnchor)
        cursor.insertText(new_line)
        cursor.setPosition(block.position() + column)
        self.editor.setTextCursor(cursor)

    def insert_list(self) -> None:
        self.editor.setFocus()
        if self.editor.textCursor().hasSelection():
            self._replace_selection(textformat.toggle_bullets)
        else:
            self._replace_current_line(textformat.toggle_line_bullet)

    def insert_ordered_list(self) -> None:
        self.editor.setFocus()
        if self.editor.textCursor().hasSelection():
            self._replace_selection(textformat.toggle_numbering)
        else:
            self._replace_current_line(textformat.toggle_line_number)

    def copy_to_clipboard(self) -> None:
        """
        Copies the selection, or the whole note if nothing is selected.
        """
        self.editor.setFocus()
        if self.editor.textCursor().hasSelection():
            self.editor.copy()
        else:
            QApplication.clipboard().setText(self.editor.toPlainText())
        self.copy_button.setText('✓')
        QTimer.singleShot(COPY_CONFIRM_DELAY, lambda: self.copy_button.setText('⧉'))

    def show_context_menu(self, pos: QPoint) -> None:
        menu = QMenu(self)
        menu.addAction('Copy', self.editor.copy)
        menu.addAction('Paste', self.editor.paste)
        menu.addAction('Cut', self.editor.cut)
        menu.addAction('Clear', self.editor.clear)
        menu.addSeparator()
        menu.addAction('Minimize to tray', self.hide)
        menu.addAction('Exit', lambda: self.note_event.emit(self.note_id, NoteEvent.EXIT))
        menu.exec(self.editor.mapToGlobal(pos))

    def eventFilter(self, widget: QObject, event: QEvent | QKeyEvent) -> bool:
        """
        Continues bulleted and numbered lists when Enter is pressed in the editor.

        :return: True if the key press was handled here.
        """
        if (widget is self.editor and event.type() == QEvent.Type.KeyPress
                and event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter)):
            cursor = self.editor.textCursor()
            prefix = textformat.continuation_prefix(cursor.block().text())
            if prefix is not None:
                cursor.insertText('\n' + prefix)
                self.editor.setTextCursor(cursor)
                return True
        return super().eventFilter(widget, event)

    # CHANGE TRACKING --------------------------------------------------------------------------------------------------

    def handle_text_changed(self) -> None:
        self.autosave_timer.start()
        self.note_event.emit(self.note_id, NoteEvent.TEXT_CHANGED)

    def moveEvent(self, event) -> None:
        super().moveEvent(event)
        self.autosave_timer.start()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.autosave_timer.start()

    def changeEvent(self, event: QEvent) -> None:
        if event.type() == QEvent.Type.ActivationChange and self.isActiveWindow():
            self.note_event.emit(self.note_id, NoteEvent.ACTIVATED)
        super().changeEvent(event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.note_event.emit(self.note_id, NoteEvent.VISIBILITY)

    def hideEvent(self, event) -> None:
        super().hideEvent(event)
        self.note_event.emit(self.note_id, NoteEvent.VISIBILITY)

    def closeEvent(self, event: QCloseEvent) -> None:
        """
        Closing a note only hides it, unless the application is quitting.
        """
        if self.quitting:
            super().closeEvent(event)
            return
        event.ignore()
        self.hide()

    # MOVING & RESIZING ------------------------------------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self.note_event.emit(self.note_id, NoteEvent.ACTIVATED)
        pos = event.position().toPoint()
        if geometry.in_resize_area(pos.x(), pos.y(), self.width(), self.height()):
            self.resizing = True
            self.resize_start_pos = event.globalPosition().toPoint()
            self.resize_start_size = (self.width(), self.height())
        elif self.windowHandle() is not None:
            self.windowHandle().startSystemMove()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if not self.resizing:
            super().mouseMoveEvent(event)
            return
        delta = event.globalPosition().toPoint() - self.resize_start_pos
        width, height = geometry.resized(self.resize_start_size[0], self.resize_start_size[1], delta.x(), delta.y())
        self.resize(width, height)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.resizing:
            self.resizing = False
        super().mouseReleaseEvent(event)
