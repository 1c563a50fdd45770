from flask import current_app

from .file_index import AppState, ClassCategoryKey, FileRecord, RemoteFileIndex, GENERAL, EXAM
from .table_range import TableRangeAdapter
from .timetables import TimetableFileService
from .attendance import AttendanceLedger
from .credentials import CredentialStore
from .sheet_lifecycle import SheetLifecycleManager


class SchoolServices:
    """The remote-backed services wired to one app's state and clients"""

    extension_name = 'school_services'

    def __init__(self, state, sheets_store, file_host, config):
        self.state = state
        self.table = TableRangeAdapter(sheets_store, last_column=config.get('SHEET_LAST_COLUMN', 'ZZ'))
        self.timetables = TimetableFileService(file_host, state)
        self.attendance = AttendanceLedger(
            self.table, state.tab_locks, timezone_name=config.get('SCHOOL_TIMEZONE', 'Asia/Kolkata'),
        )
        self.credentials = CredentialStore(self.table, state.tab_locks)
        self.sheets = SheetLifecycleManager(sheets_store, state.tab_locks)

    def init_app(self, app):
        app.extensions[self.extension_name] = self
        return self


def get_services():
    return current_app.extensions[SchoolServices.extension_name]


__all__ = ['AppState', 'ClassCategoryKey', 'FileRecord', 'RemoteFileIndex', 'GENERAL', 'EXAM',
           'TableRangeAdapter', 'TimetableFileService', 'AttendanceLedger', 'CredentialStore',
           'SheetLifecycleManager', 'SchoolServices', 'get_services']
