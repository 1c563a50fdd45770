"""
Treat a spreadsheet tab as a table.

Row 1 of a tab holds the headers, every following row is a record. The store
offers no row-level patch, no locking and no schema, so updates are done as
read-modify-write of the whole data region; callers serialise those
sequences per tab with ``AppState.tab_locks``.
"""
from collections import namedtuple

from openpyxl.utils import get_column_letter, column_index_from_string

from utils.errors import NotFoundError

HEADER_ROW = 1
FIRST_DATA_ROW = 2

TableData = namedtuple('TableData', ['headers', 'rows'])


def _quote_tab(tab):
    if tab.replace('_', '').isalnum():
        return tab
    return "'" + tab.replace("'", "''") + "'"


class CellRange(namedtuple('CellRange', ['tab', 'first_row', 'first_col', 'last_col', 'last_row'])):
    """A rectangular range; columns are 0-based indexes, rows are 1-based"""

    __slots__ = ()

    def __new__(cls, tab, first_row, first_col, last_col, last_row=None):
        return super().__new__(cls, tab, first_row, first_col, last_col, last_row)

    @property
    def a1(self):
        start = f"{get_column_letter(self.first_col + 1)}{self.first_row}"
        end = get_column_letter(self.last_col + 1)
        if self.last_row is not None:
            end = f"{end}{self.last_row}"
        return f"{_quote_tab(self.tab)}!{start}:{end}"

    def __str__(self):
        return self.a1


class TableSchema:
    """Named fixed columns at the start of every row of a tab.

    Components address cells by field name through this codec instead of by
    numeric offset; anything past the fixed columns is left to the caller.
    """

    def __init__(self, fields, key_field=None):
        self.fields = tuple(fields)
        self.key_field = key_field or self.fields[0]
        self.key_index = self.fields.index(self.key_field)

    @property
    def width(self):
        return len(self.fields)

    def index(self, field):
        return self.fields.index(field)

    def decode(self, row):
        row = pad(row, self.width)
        return {field: row[i] for i, field in enumerate(self.fields)}

    def encode(self, values):
        return [values.get(field, '') for field in self.fields]

    def extra(self, row):
        """Cells after the fixed columns"""
        return list(row[self.width:])


def pad(row, width):
    row = ['' if cell is None else str(cell) for cell in (row or [])]
    if len(row) < width:
        row.extend([''] * (width - len(row)))
    return row


def find_row_by_key(rows, key_index, key_value):
    """Return ``(position, row)`` of the first row whose key cell matches.

    Comparison is exact on trimmed strings, so ``" S0001 "`` matches
    ``"S0001"`` but ``"S00010"`` does not.
    """
    wanted = (key_value or '').strip()
    for position, row in enumerate(rows):
        if len(row) > key_index and str(row[key_index]).strip() == wanted:
            return position, row
    raise NotFoundError(f"No row with key {wanted!r}")


class TableRangeAdapter:

    def __init__(self, store, last_column='ZZ'):
        self.store = store
        self.last_col = column_index_from_string(last_column) - 1

    def _span(self, columns):
        return self.last_col if columns is None else columns - 1

    def read_rows(self, tab, width=None, header=True, columns=None):
        """One bounded read of a tab.

        The read covers ``columns`` columns from A, or every column up to the
        configured last column when ``columns`` is None. With ``header`` the
        first row is returned separately as headers. Rows are padded with
        empty strings to the wider of the header and ``width``; missing cells
        are never an error.
        """
        first_row = HEADER_ROW if header else FIRST_DATA_ROW
        values = self.store.get_values(CellRange(tab, first_row, 0, self._span(columns)).a1).unwrap() or []

        headers = []
        if header:
            headers = [str(cell).strip() for cell in values[0]] if values else []
            values = values[1:]

        target = max(len(headers), width or 0)
        rows = [pad(row, target) for row in values]
        return TableData(headers, rows)

    def append_row(self, tab, row):
        a1 = CellRange(tab, FIRST_DATA_ROW, 0, len(row) - 1, FIRST_DATA_ROW).a1
        return self.store.append_values(a1, [list(row)]).unwrap()

    def replace_range(self, tab, rows, width):
        """Overwrite the data region (row 2 onwards, first ``width`` columns)"""
        if not rows:
            return None
        body = [pad(row, width)[:width] for row in rows]
        a1 = CellRange(tab, FIRST_DATA_ROW, 0, width - 1, FIRST_DATA_ROW + len(body) - 1).a1
        return self.store.update_values(a1, body).unwrap()

    def clear_range(self, tab, columns=None):
        a1 = CellRange(tab, FIRST_DATA_ROW, 0, self._span(columns)).a1
        return self.store.clear_values(a1).unwrap()

    def write_header(self, tab, headers):
        a1 = CellRange(tab, HEADER_ROW, 0, len(headers) - 1, HEADER_ROW).a1
        return self.store.update_values(a1, [list(headers)]).unwrap()

    def write_column(self, tab, col_index, cells):
        """Write one column of the data region, leaving every other column alone"""
        if not cells:
            return None
        a1 = CellRange(tab, FIRST_DATA_ROW, col_index, col_index, FIRST_DATA_ROW + len(cells) - 1).a1
        return self.store.update_values(a1, [[cell] for cell in cells]).unwrap()
