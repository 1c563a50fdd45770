import pytest

from conftest import FakeSheets
from services.table_range import CellRange, TableRangeAdapter, TableSchema, find_row_by_key, pad
from utils.errors import NotFoundError, RemoteServiceError


def test_cell_range_renders_a1_notation():
    assert CellRange('Class1', 1, 0, 25).a1 == 'Class1!A1:Z'
    assert CellRange('Class1', 2, 0, 3, 2).a1 == 'Class1!A2:D2'
    assert CellRange('Class 1', 2, 5, 5, 9).a1 == "'Class 1'!F2:F9"
    assert CellRange("O'Brien", 1, 0, 1).a1 == "'O''Brien'!A1:B"


def test_find_row_by_key_ignores_surrounding_whitespace():
    rows = [['S00010', 'Zed'], [' S0001 ', 'Alice']]
    position, row = find_row_by_key(rows, 0, 'S0001')
    assert position == 1
    assert row[1] == 'Alice'


def test_find_row_by_key_does_not_match_prefixes():
    with pytest.raises(NotFoundError):
        find_row_by_key([['S00010', 'Zed']], 0, 'S0001')


def test_find_row_by_key_returns_first_match():
    rows = [['S0001', 'first'], ['S0001', 'second']]
    assert find_row_by_key(rows, 0, 'S0001') == (0, ['S0001', 'first'])


def test_schema_decode_pads_missing_cells():
    schema = TableSchema(['RollNumber', 'StudentName', 'ParentEmail', 'Section'])
    assert schema.decode(['S0001', 'Alice']) == {
        'RollNumber': 'S0001', 'StudentName': 'Alice', 'ParentEmail': '', 'Section': '',
    }
    assert schema.extra(['S0001', 'Alice', 'a@x.com', 'A', 'Present']) == ['Present']
    assert schema.encode({'Section': 'B', 'RollNumber': 'S1'}) == ['S1', '', '', 'B']


def test_pad_converts_cells_to_strings():
    assert pad([1, None], 3) == ['1', '', '']


def test_read_rows_splits_headers_and_pads_rows(sheets):
    table = TableRangeAdapter(sheets)
    data = table.read_rows('Class1', width=4)
    assert data.headers[4:] == ['2024-01-01', '2024-01-02']
    assert len(data.rows) == 3
    # Cara has no attendance cells at all
    assert data.rows[2] == ['S0003', 'Cara', 'cara@example.com', 'B', '', '']


def test_read_rows_of_empty_tab():
    table = TableRangeAdapter(FakeSheets({'Empty': []}))
    data = table.read_rows('Empty')
    assert data.headers == []
    assert data.rows == []


def test_append_row_lands_after_last_populated_row(sheets):
    table = TableRangeAdapter(sheets)
    table.append_row('Class1', ['S0004', 'Dan', 'dan@example.com', 'C'])
    assert sheets.rows('Class1')[-1] == ['S0004', 'Dan', 'dan@example.com', 'C']
    assert ('append', 'append Class1!A2:D2') in sheets.calls


def test_replace_range_overwrites_only_requested_columns(sheets):
    table = TableRangeAdapter(sheets)
    rows = table.read_rows('Class1', width=4, header=False).rows
    rows = [row[:4] for row in rows]
    rows[0][1] = 'Alicia'
    table.replace_range('Class1', rows, 4)

    stored = sheets.rows('Class1')
    assert stored[1] == ['S0001', 'Alicia', 'alice@example.com', 'A', 'Present', 'Present']
    assert stored[2] == ['S0002', 'Bob', 'bob@example.com', 'A', 'Absent', 'Present']


def test_clear_range_keeps_header(sheets):
    table = TableRangeAdapter(sheets)
    table.clear_range('Class1')
    data = table.read_rows('Class1')
    assert data.headers[0] == 'RollNumber'
    assert data.rows == []


def test_remote_failure_surfaces_as_remote_service_error(sheets):
    sheets.fail.add('get')
    with pytest.raises(RemoteServiceError) as excinfo:
        TableRangeAdapter(sheets).read_rows('Class1')
    assert excinfo.value.operation == 'read Class1!A1:ZZ'


def test_unknown_tab_is_a_remote_failure(sheets):
    with pytest.raises(RemoteServiceError):
        TableRangeAdapter(sheets).read_rows('NoSuchClass')


def test_width_pads_without_bounding_the_read(sheets):
    data = TableRangeAdapter(sheets).read_rows('Class1', width=4)
    assert sheets.calls == [('get', 'read Class1!A1:ZZ')]
    assert data.rows[0][4:] == ['Present', 'Present']


def test_columns_bounds_the_read(sheets):
    data = TableRangeAdapter(sheets).read_rows('Class1', width=4, header=False, columns=4)
    assert sheets.calls == [('get', 'read Class1!A2:D')]
    assert data.rows[0] == ['S0001', 'Alice', 'alice@example.com', 'A']
