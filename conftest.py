import itertools
import re
import threading
import time

import pytest
from openpyxl.utils import column_index_from_string

from services.file_index import AppState
from services.results import RemoteResult

_A1 = re.compile(r"^(?:'((?:[^']|'')+)'|([^!]+))!([A-Z]+)(\d+):([A-Z]+)(\d*)$")


def parse_a1(a1):
    match = _A1.match(a1)
    if not match:
        raise ValueError(f"Unable to parse range: {a1}")
    quoted, plain, c0, r0, c1, r1 = match.groups()
    tab = quoted.replace("''", "'") if quoted else plain
    return (tab, int(r0), column_index_from_string(c0) - 1,
            column_index_from_string(c1) - 1, int(r1) if r1 else None)


def _trim(row):
    row = list(row)
    while row and row[-1] == '':
        row.pop()
    return row


class FakeSheets:
    """In-memory spreadsheet mimicking what the Sheets API returns.

    Trailing empty cells and rows are dropped from reads, appends land after
    the last populated row, and unknown tabs fail like the real API does.
    """

    def __init__(self, tabs=None):
        self._ids = itertools.count(100)
        self.tabs = {}
        self.ids = {}
        self.calls = []
        self.fail = set()
        self.read_delay = 0
        self._lock = threading.Lock()
        for title, rows in (tabs or {}).items():
            self.add_tab(title, rows)

    def add_tab(self, title, rows=None):
        self.tabs[title] = [[str(c) for c in row] for row in (rows or [])]
        self.ids[title] = next(self._ids)

    def rows(self, title):
        return [_trim(row) for row in self.tabs[title]]

    def _result(self, kind, operation, fn):
        self.calls.append((kind, operation))
        if kind in self.fail:
            return RemoteResult.failure(operation, f"simulated {kind} failure")
        try:
            with self._lock:
                value = fn()
        except (KeyError, ValueError) as e:
            return RemoteResult.failure(operation, e)
        return RemoteResult.success(operation, value)

    def _sheet(self, tab):
        if tab not in self.tabs:
            raise KeyError(f"Unable to parse range: {tab}")
        return self.tabs[tab]

    def _write(self, sheet, first_row, first_col, rows):
        for offset, values in enumerate(rows):
            index = first_row - 1 + offset
            while len(sheet) <= index:
                sheet.append([])
            row = sheet[index]
            for col_offset, value in enumerate(values):
                col = first_col + col_offset
                while len(row) <= col:
                    row.append('')
                row[col] = '' if value is None else str(value)

    def get_values(self, a1):
        if self.read_delay:
            time.sleep(self.read_delay)

        def read():
            tab, r0, c0, c1, r1 = parse_a1(a1)
            sheet = self._sheet(tab)
            block = sheet[r0 - 1:r1] if r1 else sheet[r0 - 1:]
            values = [_trim(row[c0:c1 + 1]) for row in block]
            while values and not values[-1]:
                values.pop()
            return values
        return self._result('get', f"read {a1}", read)

    def append_values(self, a1, rows):
        def append():
            tab, r0, c0, _, _ = parse_a1(a1)
            sheet = self._sheet(tab)
            last = max((i + 1 for i, row in enumerate(sheet) if any(row)), default=0)
            self._write(sheet, max(last + 1, r0), c0, rows)
        return self._result('append', f"append {a1}", append)

    def update_values(self, a1, rows):
        def update():
            tab, r0, c0, _, _ = parse_a1(a1)
            self._write(self._sheet(tab), r0, c0, rows)
        return self._result('update', f"update {a1}", update)

    def clear_values(self, a1):
        def clear():
            tab, r0, c0, c1, r1 = parse_a1(a1)
            sheet = self._sheet(tab)
            for index in range(r0 - 1, r1 if r1 else len(sheet)):
                if index < len(sheet):
                    row = sheet[index]
                    for col in range(c0, min(c1 + 1, len(row))):
                        row[col] = ''
        return self._result('clear', f"clear {a1}", clear)

    def batch_update(self, requests):
        def apply():
            for request in requests:
                if 'addSheet' in request:
                    title = request['addSheet']['properties']['title']
                    if title in self.tabs:
                        raise ValueError(f'A sheet with the name "{title}" already exists.')
                    self.add_tab(title)
                elif 'deleteSheet' in request:
                    sheet_id = request['deleteSheet']['sheetId']
                    title = next((t for t, i in self.ids.items() if i == sheet_id), None)
                    if title is None:
                        raise KeyError(f"No sheet with id: {sheet_id}")
                    del self.tabs[title]
                    del self.ids[title]
        return self._result('batch', 'batchUpdate', apply)

    def get_metadata(self):
        return self._result('metadata', 'read spreadsheet metadata',
                            lambda: [{'title': t, 'id': i} for t, i in self.ids.items()])


class FakeFileHost:
    """In-memory file host with ImageKit's upload/delete/list behaviour"""

    def __init__(self):
        self._ids = itertools.count(1)
        self.files = {}
        self.calls = []
        self.fail = set()

    def upload(self, data, name, folder):
        self.calls.append(('upload', folder, name))
        operation = f"upload {folder}/{name}"
        if 'upload' in self.fail:
            return RemoteResult.failure(operation, 'simulated upload failure')
        file_id = f"file-{next(self._ids)}"
        url = f"https://files.example.test/{folder}/{file_id}/{name}"
        self.files[file_id] = {'name': name, 'url': url, 'folder': folder, 'data': data}
        return RemoteResult.success(operation, {'fileId': file_id, 'url': url, 'name': name})

    def delete(self, file_id):
        self.calls.append(('delete', file_id))
        operation = f"delete file {file_id}"
        if 'delete' in self.fail or file_id not in self.files:
            return RemoteResult.failure(operation, 'simulated delete failure')
        del self.files[file_id]
        return RemoteResult.success(operation)

    def list(self, folder):
        self.calls.append(('list', folder))
        operation = f"list {folder}"
        if 'list' in self.fail:
            return RemoteResult.failure(operation, 'simulated list failure')
        return RemoteResult.success(operation, [
            {'name': f['name'], 'url': f['url'], 'fileId': file_id}
            for file_id, f in self.files.items() if f['folder'] == folder
        ])

    def ids_in(self, folder):
        return [file_id for file_id, f in self.files.items() if f['folder'] == folder]


HEADERS = ['RollNumber', 'StudentName', 'ParentEmail', 'Section']


@pytest.fixture
def sheets():
    return FakeSheets({
        'Class1': [
            HEADERS + ['2024-01-01', '2024-01-02'],
            ['S0001', 'Alice', 'alice@example.com', 'A', 'Present', 'Present'],
            ['S0002', 'Bob', 'bob@example.com', 'A', 'Absent', 'Present'],
            ['S0003', 'Cara', 'cara@example.com', 'B'],
        ],
        'User': [
            ['username', 'password'],
            ['admin', 'admin123'],
            ['teacher', 'chalk'],
        ],
    })


@pytest.fixture
def file_host():
    return FakeFileHost()


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def app(sheets, file_host, state):
    from app import create_app
    from models import db

    application = create_app(
        {'TESTING': True, 'DATABASE_URL': 'sqlite:///:memory:', 'SCHOOL_TIMEZONE': 'Asia/Kolkata'},
        state=state, sheets_store=sheets, file_host=file_host,
    )
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    state.teardown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['school_services']
