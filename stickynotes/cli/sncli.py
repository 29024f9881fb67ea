import argparse
import json
import logging
import os
import pathlib
import re
import sys
from pathlib import Path

from stickynotes import helpers
from stickynotes.notes.controller import NoteController
from stickynotes.notes.model import textformat


class StickyNotesCli:
    """
    Defines the functionality of the StickyNotes CLI. The CLI works on the same data file as the GUI, so it should not
    be used to change notes while the GUI is running.
    """

    def __init__(self, args):
        self.args = args
        self.logger = self.setup_logging()
        data_file = self.args.data_file if 'data_file' in self.args else None
        self.controller = NoteController(data_file)
        self.controller.load(synthesize_default=False)

        commands = {
            'list': self.list_notes,
            'show': self.show_note,
            'add': self.add_note,
            'delete': self.delete_note,
            'export': self.export_notes,
            'settings': self.settings
        }
        commands[self.args.command]()

    def _find_note(self, note_id: str):
        """
        Finds a note by its id or a unique prefix of it. Exits with status 2 if there is no single match.
        """
        matches = [note for note in self.controller.notes if note.id.startswith(note_id)]
        if len(matches) != 1:
            logging.critical('No single note matches id {}.'.format(note_id))
            sys.exit(2)
        return matches[0]

    def _save(self) -> None:
        success, data = self.controller.save()
        if not success:
            logging.critical(data)
            sys.exit(3)

    def list_notes(self) -> None:
        for index, note in enumerate(self.controller.notes, start=1):
            print('{}. {}  {}x{} at {},{}  {}'.format(
                index, note.id, note.width, note.height, note.x, note.y, textformat.preview(note.text, 40)))

    def show_note(self) -> None:
        print(self._find_note(self.args.id).text)

    def add_note(self) -> None:
        note = self.controller.new_note()
        self.controller.update_note(note.id, text=self.args.text)
        self._save()
        logging.info('Added note {}'.format(note.id))
        print(note.id)

    def delete_note(self) -> None:
        note = self._find_note(self.args.id)
        success, data = self.controller.delete_note(note.id)
        if not success:
            logging.critical(data)
            sys.exit(3)
        logging.info(data)

    def export_notes(self) -> None:
        """
        Writes every note to a Markdown file in the export folder, and to an HTML file as well if ``--html`` is given.
        """
        folder = Path(self.args.folder)
        try:
            folder.mkdir(parents=True, exist_ok=True)
            for index, note in enumerate(self.controller.notes, start=1):
                # ids are read from the data file and may hold path separators
                name = '{:02d}-{}'.format(index, re.sub(r'[^\w-]', '_', note.id[:8]))
                markdown = helpers.note_to_markdown(note.text)
                with open(folder / (name + '.md'), 'w', encoding='utf-8') as fp:
                    fp.write(markdown)
                if self.args.html:
                    with open(folder / (name + '.html'), 'w', encoding='utf-8') as fp:
                        fp.write(helpers.markdown_to_html(markdown))
        except (OSError, ValueError) as e:
            logging.critical('Could not export notes to {}: {}'.format(folder, e))
            sys.exit(3)
        logging.info('Exported {} notes to {}'.format(len(self.controller.notes), folder))

    def settings(self) -> None:
        """
        Changes any settings given on the command line, then prints the settings in use.
        """
        changes = {
            'top_most': self.controller.set_top_most,
            'hide_taskbar_icon': self.controller.set_hide_taskbar_icon,
            'confirm_delete': self.controller.set_confirm_delete,
            'run_at_startup': self.controller.set_run_at_startup
        }
        for key, setter in changes.items():
            if key in self.args:
                success, data = setter(vars(self.args)[key] == '1')
                if not success:
                    logging.critical(data)
                    sys.exit(3)
        print(json.dumps(self.controller.settings().to_dict(), indent=2))

    def setup_logging(self) -> logging.Logger:
        """
        Sets up the logging system.

        :return: the logging helper for the CLI.
        """

        if 'log_dir' in self.args:
            if os.access(self.args.log_dir, os.W_OK | os.X_OK):
                log_folder = self.args.log_dir
            else:
                print("Specified log directory {} is not accessible.".format(self.args.log_dir))
                sys.exit(1)
        else:
            log_folder = helpers.log_folder()
        return helpers.setup_logging(self.args.log_level, log_folder)


def build_parser() -> argparse.ArgumentParser:
    """
    Defines arguments accepted by the CLI.
    """

    parser = argparse.ArgumentParser(
        prog="sncli",
        description="List, add, delete and export your sticky notes, and change StickyNotes settings.",
    )
    parser.add_argument(
        "--data-file",
        type=pathlib.Path,
        default=argparse.SUPPRESS,
        help="use to provide a path to a custom data file.")
    parser.add_argument(
        "--log-dir",
        type=pathlib.Path,
        default=argparse.SUPPRESS,
        help="specify a custom directory to use for logging.")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=['debug', 'info', 'critical', 'warning'],
        default=helpers.LOG_LEVEL,
        help="specify the logging level.")

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('list', help="list all notes.")
    show = commands.add_parser('show', help="print the text of a note.")
    show.add_argument('id', help="the id of the note, or a unique prefix of it.")
    add = commands.add_parser('add', help="add a new note.")
    add.add_argument('text', help="the text of the new note.")
    delete = commands.add_parser('delete', help="delete a note.")
    delete.add_argument('id', help="the id of the note, or a unique prefix of it.")
    export = commands.add_parser('export', help="export all notes as Markdown.")
    export.add_argument('folder', type=pathlib.Path, help="the folder to export notes to.")
    export.add_argument('--html', action='store_true', help="also export each note as HTML.")

    settings = commands.add_parser('settings', help="show or change settings.")
    for option, text in (('--top-most', 'keep notes on top of other windows'),
                         ('--hide-taskbar-icon', 'hide notes from the taskbar'),
                         ('--confirm-delete', 'ask before deleting a note'),
                         ('--run-at-startup', 'run StickyNotes at login (Windows only)')):
        settings.add_argument(
            option,
            type=str,
            choices=['0', '1'],
            default=argparse.SUPPRESS,
            help="set to 1 to {}, or 0 not to.".format(text))
    return parser


def main(argv=None):
    StickyNotesCli(build_parser().parse_args(argv))


if __name__ == "__main__":
    main()
