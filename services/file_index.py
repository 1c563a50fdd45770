"""
In-process tracking of the live timetable file per class and category.

The index is not persisted; a restart forgets every entry. The timetable
service reconciles against the file host's listing when the index is empty
for a key, so a lost entry never leaves a second live file behind.
"""
from collections import namedtuple

from utils.locks import KeyedLock

GENERAL = 'general'
EXAM = 'exam'

CATEGORY_FOLDERS = {
    GENERAL: 'Class_Timetables',
    EXAM: 'Exam_Timetables',
}

FileRecord = namedtuple('FileRecord', ['file_id', 'url', 'display_name'])


class ClassCategoryKey(namedtuple('ClassCategoryKey', ['category', 'class_id'])):
    __slots__ = ()

    @property
    def folder(self):
        return f"{CATEGORY_FOLDERS[self.category]}/{self.class_id}"


class RemoteFileIndex:
    """At most one FileRecord per ClassCategoryKey"""

    def __init__(self):
        self._records = {}

    def get(self, key):
        return self._records.get(key)

    def set(self, key, record):
        self._records[key] = record

    def clear(self, key):
        self._records.pop(key, None)

    def clear_all(self):
        self._records.clear()

    def __len__(self):
        return len(self._records)


class AppState:
    """Process-wide mutable state: the file index and the per-key locks.

    Installed on the Flask app by ``init_app`` and dropped by ``teardown``.
    Tests build their own instance; a persistent index can be passed in
    without touching the services that use it.
    """

    extension_name = 'school_state'

    def __init__(self, file_index=None):
        self.file_index = file_index if file_index is not None else RemoteFileIndex()
        self.file_locks = KeyedLock()
        self.tab_locks = KeyedLock()

    def init_app(self, app):
        app.extensions[self.extension_name] = self
        return self

    def teardown(self):
        self.file_index.clear_all()
