import json
import logging
from unittest import mock

import pytest

from stickynotes import helpers
from stickynotes.cli import sncli
from stickynotes.notes.model.notestate import AppSettings, NoteState, NoteStateCollection


class TestStickyNotesCli:

    @pytest.fixture(autouse=True)
    def workspace(self, tmp_path):
        self.data_file = tmp_path / 'data.json'
        self.log_dir = tmp_path / 'logs'
        self.log_dir.mkdir()
        with mock.patch('stickynotes.helpers.is_run_at_startup_enabled', return_value=False), \
                mock.patch('stickynotes.helpers.set_run_at_startup', return_value=True) as set_startup:
            self.set_startup = set_startup
            yield
        for handler in list(helpers._log_handlers):
            logging.getLogger().removeHandler(handler)
            handler.close()
        helpers._log_handlers.clear()

    def _run(self, *args):
        sncli.main(['--data-file', str(self.data_file), '--log-dir', str(self.log_dir), '--log-level', 'debug',
                    *args])

    def _seed(self):
        NoteStateCollection.save(self.data_file, [
            NoteState('11111111-aaaa', 'Buy milk', 10, 20, 360, 320),
            NoteState('22222222-bbbb', '• eggs\n• bread', 40, 50, 300, 200)
        ], AppSettings(top_most=True, run_at_startup=False, confirm_delete=True))

    def test_parser(self):
        args = sncli.build_parser().parse_args(['settings', '--top-most', '0'])
        assert args.command == 'settings'
        assert args.top_most == '0'
        assert 'confirm_delete' not in args
        assert 'data_file' not in args

        with pytest.raises(SystemExit):
            sncli.build_parser().parse_args([])
        with pytest.raises(SystemExit):
            sncli.build_parser().parse_args(['settings', '--top-most', 'yes'])

    def test_list(self, capsys):
        self._seed()
        self._run('list')
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            '1. 11111111-aaaa  360x320 at 10,20  Buy milk',
            '2. 22222222-bbbb  300x200 at 40,50  • eggs • bread'
        ]

    def test_list_missing_file(self, capsys):
        self._run('list')
        assert capsys.readouterr().out == ''
        assert not self.data_file.exists()

    def test_show(self, capsys):
        self._seed()
        self._run('show', '2222')
        assert capsys.readouterr().out == '• eggs\n• bread\n'

    def test_show_unknown(self):
        self._seed()
        with pytest.raises(SystemExit) as e:
            self._run('show', '3333')
        assert e.value.code == 2

    def test_show_ambiguous_prefix(self):
        self._seed()
        with pytest.raises(SystemExit) as e:
            self._run('show', '')
        assert e.value.code == 2

    def test_add(self, capsys):
        self._seed()
        self._run('add', 'Call Bob')
        note_id = capsys.readouterr().out.strip()
        notes = NoteStateCollection.load(self.data_file).notes
        assert len(notes) == 3
        assert notes[-1].id == note_id
        assert notes[-1].text == 'Call Bob'
        assert (notes[-1].x, notes[-1].y) == (70, 80)

    def test_add_first_note(self, capsys):
        self._run('add', 'First')
        notes = NoteStateCollection.load(self.data_file).notes
        assert [note.text for note in notes] == ['First']
        assert (notes[0].x, notes[0].y) == (100, 100)

    def test_delete(self):
        self._seed()
        self._run('delete', '1111')
        notes = NoteStateCollection.load(self.data_file).notes
        assert [note.id for note in notes] == ['22222222-bbbb']

    def test_export(self, tmp_path):
        self._seed()
        export = tmp_path / 'export'
        self._run('export', str(export), '--html')
        assert sorted(path.name for path in export.iterdir()) == [
            '01-11111111.html', '01-11111111.md', '02-22222222.html', '02-22222222.md'
        ]
        with open(export / '02-22222222.md', encoding='utf-8') as fp:
            assert fp.read() == '- eggs\n- bread'
        with open(export / '02-22222222.html', encoding='utf-8') as fp:
            assert '<li>eggs</li>' in fp.read()

    def test_settings(self, capsys):
        self._seed()
        self._run('settings', '--top-most', '0', '--confirm-delete', '0', '--run-at-startup', '1')
        printed = json.loads(capsys.readouterr().out)
        assert printed == {'HideTaskbarIcon': False, 'TopMost': False, 'RunAtStartup': True, 'ConfirmDelete': False}
        assert NoteStateCollection.load(self.data_file).settings == AppSettings(
            hide_taskbar_icon=False, top_most=False, run_at_startup=True, confirm_delete=False)
        self.set_startup.assert_called_once_with(True)

    def test_inaccessible_log_dir(self, tmp_path):
        with pytest.raises(SystemExit) as e:
            sncli.main(['--data-file', str(self.data_file), '--log-dir', str(tmp_path / 'nothing'), 'list'])
        assert e.value.code == 1

    def test_save_failure(self):
        self._seed()
        with mock.patch('stickynotes.notes.model.notestate.json.dumps', side_effect=TypeError('broken')):
            with pytest.raises(SystemExit) as e:
                self._run('add', 'Call Bob')
        assert e.value.code == 3

    def test_add_unencodable_text_keeps_notes(self):
        self._seed()
        with open(self.data_file, 'rb') as fp:
            before = fp.read()
        with pytest.raises(SystemExit) as e:
            self._run('add', 'x\udced')
        assert e.value.code == 3
        with open(self.data_file, 'rb') as fp:
            assert fp.read() == before
        assert len(NoteStateCollection.load(self.data_file).notes) == 2

    def test_export_unsafe_id(self, tmp_path):
        NoteStateCollection.save(self.data_file, [NoteState('ab/cd\\efgh', 'Buy milk')])
        export = tmp_path / 'export'
        self._run('export', str(export))
        assert [path.name for path in export.iterdir()] == ['01-ab_cd_ef.md']
        with open(export / '01-ab_cd_ef.md', encoding='utf-8') as fp:
            assert fp.read() == 'Buy milk'

    def test_export_unwritable_folder(self, tmp_path):
        self._seed()
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a folder')
        with pytest.raises(SystemExit) as e:
            self._run('export', str(blocker / 'export'))
        assert e.value.code == 3
