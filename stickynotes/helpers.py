"""
This is a helper file used by the note store, the GUI and the CLI.
"""

from __future__ import annotations

import logging
import os
import re
import sys
import uuid
from datetime import datetime
from pathlib import Path

import markdown2
from decouple import Choices, config

if sys.platform == 'win32':
    import winreg
else:
    winreg = None


def _default_data_location() -> Path:
    appdata = os.environ.get('APPDATA')
    if sys.platform == 'win32' and appdata:
        return Path(appdata) / "StickyNotes"
    return Path.home() / ".config" / "StickyNotes"


DATA_LOCATION: Path = Path(config('STICKYNOTES_DATA_DIR', default=str(_default_data_location())))  #: Location where
# application data is stored.
LOG_LEVEL: str = config('STICKYNOTES_LOG_LEVEL', default='info',
                        cast=Choices(['debug', 'info', 'warning', 'critical']))  #: Default logging level.
PROJECT_URL: str = "https://github.com/Levgenij/Sticky-Notes"  #: Opened by the About menu item.
RUN_KEY: str = r"Software\Microsoft\Windows\CurrentVersion\Run"  #: Registry key used for run-at-startup.
RUN_VALUE: str = "StickyNotes"  #: Name of the value under ``RUN_KEY``.

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'critical': logging.CRITICAL
}

BULLET_LINE = re.compile(r'^(\s*)• ')

_log_handlers: list[logging.Handler] = []  #: Handlers added by the last call to setup_logging.


def data_file() -> Path:
    """
    Get the location of the JSON file holding notes and settings. The folder is not created here, saving creates it.

    :return: path to the data file.
    """
    return DATA_LOCATION / "data.json"


def log_folder() -> Path:
    """
    Get the location of the ``logs`` folder within the Application Data folder.

    :return: path to the ``logs`` folder.
    """
    folder = DATA_LOCATION / 'logs'
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def setup_logging(logging_level: str, folder: Path | None = None, log_stdout: bool = False) -> logging.Logger:
    """
    Sets up the logging system. Logs always go to a timestamped file. Handlers added by an earlier call are removed
    and closed.

    :param logging_level: the logging level which can be `debug`, `info`, `warning` or `critical`.
    :param folder: the folder to write the log file to. Defaults to :py:func:`log_folder`.
    :param log_stdout: if True, logs are also sent to standard out.

    :return: the root logger.
    """
    if folder is None:
        folder = log_folder()
    log_file = datetime.now().strftime("StickyNotes_%Y%m%d-%H%M%S") + '.log'
    logging.basicConfig(
        level=LOG_LEVELS[logging_level],
        format='%(asctime)s %(levelname)s: %(message)s',
    )
    logger = logging.getLogger()
    logger.setLevel(LOG_LEVELS[logging_level])
    while _log_handlers:
        handler = _log_handlers.pop()
        logger.removeHandler(handler)
        handler.close()

    _log_handlers.append(logging.FileHandler(Path(folder) / log_file))
    if log_stdout:
        _log_handlers.append(logging.StreamHandler(sys.stdout))
    for handler in _log_handlers:
        logger.addHandler(handler)
    return logger


def get_uuid() -> str:
    """
    Generates a UUID.

    :return: a UUID.
    """
    return str(uuid.uuid4())


def startup_command() -> str:
    """
    The command line registered to run StickyNotes at login. Frozen builds run the executable directly, otherwise the
    GUI module is started with the current interpreter.

    :return: the quoted command line.
    """
    if getattr(sys, 'frozen', False):
        return '"{}"'.format(sys.executable)
    return '"{}" -m stickynotes.gui.StickyNotes'.format(sys.executable)


def is_run_at_startup_enabled() -> bool:
    """
    Checks whether StickyNotes is registered in the Windows ``Run`` key for the current user.

    :return: True if registered. Always False when not on Windows or if the registry can't be read.
    """
    if winreg is None:
        return False
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, RUN_KEY, 0, winreg.KEY_READ) as key:
            winreg.QueryValueEx(key, RUN_VALUE)
            return True
    except OSError:
        return False


def set_run_at_startup(enable: bool) -> bool:
    """
    Adds or removes StickyNotes from the Windows ``Run`` key for the current user.

    :param enable: if True, StickyNotes is registered to run at login, otherwise the entry is removed.

    :return: True if the registry was updated.
    """
    if winreg is None:
        logging.debug('Run at startup is only supported on Windows.')
        return False
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, RUN_KEY, 0, winreg.KEY_SET_VALUE) as key:
            if enable:
                winreg.SetValueEx(key, RUN_VALUE, 0, winreg.REG_SZ, startup_command())
            else:
                try:
                    winreg.DeleteValue(key, RUN_VALUE)
                except FileNotFoundError:
                    pass
    except OSError as e:
        logging.warning('Could not update run at startup: {}'.format(e))
        return False
    logging.debug('Run at startup {}.'.format('enabled' if enable else 'disabled'))
    return True


def note_to_markdown(text: str) -> str:
    """
    Converts the plain text of a note to Markdown. Bullet markers become Markdown list items, numbered lines are
    already valid Markdown.

    :param text: the text of the note.

    :return: the Markdown version of the note.
    """
    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    return '\n'.join(BULLET_LINE.sub(r'\1- ', line) for line in lines)


def markdown_to_html(text: str) -> str:
    """
    Converts Markdown to HTML using the `markdown2 <https://pypi.org/project/markdown2/>`_ library.

    :param text: the Markdown text to convert to HTMl.

    :return: the HTML version of the Markdown given.
    """
    html = markdown2.markdown(text, extras={
        'breaks': {'on_newline': True, 'on_backslash': True},
        'cuddled-lists': None
    })
    build = ''
    for line in html.split('\n'):
        build += '<br>' if re.match(r'^\s*$', line) else line
        build += '\n'
    return build
