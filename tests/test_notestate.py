import json
from unittest import mock

from stickynotes.notes.model.notestate import AppSettings, LoadStatus, NoteState, NoteStateCollection


class TestNoteState:

    @staticmethod
    def _write(path, content: str, encoding='utf-8'):
        with open(path, 'w', encoding=encoding) as fp:
            fp.write(content)

    def test_defaults(self):
        note = NoteState()
        assert len(note.id) == 36
        assert note.text == ''
        assert (note.x, note.y, note.width, note.height) == (0, 0, 360, 320)

        other = NoteState()
        assert other.id != note.id

    def test_to_dict(self):
        note = NoteState('abc', 'Buy milk', 10, 20, 400, 300)
        assert note.to_dict() == {'Id': 'abc', 'Text': 'Buy milk', 'X': 10, 'Y': 20, 'Width': 400, 'Height': 300}

    def test_from_dict_any_case(self):
        note = NoteState.from_dict({'id': 'abc', 'TEXT': 'hello', 'x': 5, 'Y': 6, 'width': 300, 'Height': 200})
        assert note == NoteState('abc', 'hello', 5, 6, 300, 200)

    def test_from_dict_missing_fields(self):
        note = NoteState.from_dict({'Id': 'abc'})
        assert note.text == ''
        assert (note.x, note.y, note.width, note.height) == (0, 0, 360, 320)

        note = NoteState.from_dict({'Text': 'no id'})
        assert len(note.id) == 36

    def test_save_load(self, tmp_path):
        path = tmp_path / 'data.json'
        notes = [
            NoteState('first', 'Line one\nLine two', 0, 0, 360, 320),
            NoteState('second', '• bullet\n1. number', 130, 130, 250, 180),
            NoteState('third', 'Ünïcödé ✓', -40, 2000, 800, 600)
        ]
        settings = AppSettings(hide_taskbar_icon=True, top_most=False, run_at_startup=True, confirm_delete=False)
        success, data = NoteStateCollection.save(path, notes, settings)
        assert success is True

        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.LOADED
        assert collection.notes == notes
        assert [note.id for note in collection.notes] == ['first', 'second', 'third']
        assert collection.settings == settings

    def test_save_load_empty(self, tmp_path):
        path = tmp_path / 'data.json'
        success, _ = NoteStateCollection.save(path, [])
        assert success is True

        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.LOADED
        assert collection.notes == []
        assert collection.settings is None

    def test_saved_format(self, tmp_path):
        path = tmp_path / 'data.json'
        NoteStateCollection.save(path, [NoteState('abc', 'héllo')], AppSettings(top_most=True))
        with open(path, 'rb') as fp:
            raw = fp.read()
        assert not raw.startswith(b'\xef\xbb\xbf')
        content = raw.decode('utf-8')
        assert 'héllo' in content
        assert '\n  "Notes"' in content
        data = json.loads(content)
        assert data['Notes'][0]['Id'] == 'abc'
        assert data['Settings'] == {'HideTaskbarIcon': False, 'TopMost': True, 'RunAtStartup': None,
                                    'ConfirmDelete': None}

    def test_save_creates_folder(self, tmp_path):
        path = tmp_path / 'StickyNotes' / 'nested' / 'data.json'
        success, _ = NoteStateCollection.save(path, [NoteState()])
        assert success is True
        assert path.is_file()

    def test_save_failure(self, tmp_path):
        # the target is a folder, so it can't be opened for writing
        path = tmp_path / 'data.json'
        path.mkdir()
        success, data = NoteStateCollection.save(path, [NoteState()])
        assert success is False
        assert 'Failed to save notes' in data

    def test_save_replaces_content(self, tmp_path):
        path = tmp_path / 'data.json'
        NoteStateCollection.save(path, [NoteState('a'), NoteState('b')])
        NoteStateCollection.save(path, [NoteState('c')])
        assert [note.id for note in NoteStateCollection.load(path).notes] == ['c']

    def test_load_missing(self, tmp_path):
        status, collection = NoteStateCollection.try_load(tmp_path / 'nothing.json')
        assert status == LoadStatus.MISSING
        assert collection.notes == []
        assert collection.settings is None

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / 'data.json'
        TestNoteState._write(path, '{"Notes": [')
        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.RECOVERED
        assert collection.notes == []
        assert collection.settings is None

        assert NoteStateCollection.load(path) == NoteStateCollection()

    def test_load_wrong_types(self, tmp_path):
        path = tmp_path / 'data.json'
        for content in ('[]',
                        '"text"',
                        'null',
                        '{"Notes": {}}',
                        '{"Notes": [1, 2]}',
                        '{"Notes": [{"Id": "a", "X": "ten"}]}',
                        '{"Notes": [{"Id": "a", "Width": true}]}',
                        '{"Notes": [], "Settings": {"TopMost": "yes"}}',
                        '{"Notes": [], "Settings": []}'):
            TestNoteState._write(path, content)
            status, collection = NoteStateCollection.try_load(path)
            assert status == LoadStatus.RECOVERED, content
            assert collection.notes == []

    def test_load_null_notes(self, tmp_path):
        path = tmp_path / 'data.json'
        TestNoteState._write(path, '{"Notes": null, "Settings": null}')
        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.LOADED
        assert collection.notes == []
        assert collection.settings is None

    def test_load_byte_order_mark(self, tmp_path):
        path = tmp_path / 'data.json'
        TestNoteState._write(path, '{"Notes": [{"Id": "abc", "Text": "hi"}]}', encoding='utf-8-sig')
        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.LOADED
        assert collection.notes[0].text == 'hi'

    def test_load_any_case_and_unknown_keys(self, tmp_path):
        path = tmp_path / 'data.json'
        TestNoteState._write(path, json.dumps({
            'notes': [{'id': 'abc', 'text': 'hi', 'x': 1, 'y': 2, 'width': 300, 'height': 200, 'Colour': 'yellow'}],
            'settings': {'topMost': True, 'confirmDelete': False},
            'Version': 3
        }))
        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.LOADED
        assert collection.notes == [NoteState('abc', 'hi', 1, 2, 300, 200)]
        assert collection.settings == AppSettings(top_most=True, confirm_delete=False)
        assert collection.settings.run_at_startup is None

    def test_load_unreadable(self, tmp_path):
        path = tmp_path / 'data.json'
        TestNoteState._write(path, '{}')
        with mock.patch('builtins.open', side_effect=PermissionError('denied')):
            status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.RECOVERED
        assert collection.notes == []

    def test_load_deeply_nested(self, tmp_path):
        path = tmp_path / 'data.json'
        TestNoteState._write(path, '{"Notes": ' + '[' * 100000 + ']' * 100000 + '}')
        status, collection = NoteStateCollection.try_load(path)
        assert status == LoadStatus.RECOVERED
        assert collection.notes == []

    def test_load_folder_not_accessible(self, tmp_path):
        with mock.patch('pathlib.Path.is_file', side_effect=PermissionError('denied')):
            status, collection = NoteStateCollection.try_load(tmp_path / 'locked' / 'data.json')
        assert status == LoadStatus.RECOVERED
        assert collection.notes == []

    def test_failed_save_keeps_previous_file(self, tmp_path):
        path = tmp_path / 'data.json'
        notes = [NoteState('a', 'one'), NoteState('b', 'two')]
        NoteStateCollection.save(path, notes, AppSettings(top_most=True))
        with open(path, 'rb') as fp:
            before = fp.read()

        # a lone surrogate can't be encoded as UTF-8
        success, data = NoteStateCollection.save(path, notes + [NoteState('c', 'x\udced')])
        assert success is False
        assert 'Failed to save notes' in data
        with open(path, 'rb') as fp:
            assert fp.read() == before
        assert NoteStateCollection.load(path).notes == notes
