"""
Upload, replace and delete class timetables on the file host.

Every sequence for a ClassCategoryKey runs under that key's lock, so the
delete-then-upload halves of two requests for the same class never
interleave. A new file is only uploaded once the previous one is confirmed
gone; if the delete fails nothing is uploaded.
"""
import logging

from services.file_index import FileRecord
from utils.errors import PartialFailureError, RemoteServiceError, UntrackedFileError

logger = logging.getLogger(__name__)


class TimetableFileService:

    def __init__(self, file_host, state):
        self.file_host = file_host
        self.index = state.file_index
        self.locks = state.file_locks

    def upload(self, key, data, file_name):
        with self.locks.hold(key):
            deleted = self._remove_live_files(key)

            result = self.file_host.upload(data, file_name, key.folder)
            if not result.ok:
                if deleted:
                    self.index.clear(key)
                    logger.error("Timetable %s/%s deleted but not replaced (deleted %s): %s",
                                 key.category, key.class_id, ', '.join(deleted), result.error)
                    raise PartialFailureError(key, deleted[0], cause=result.error)
                raise RemoteServiceError(result.operation, cause=result.error)

            uploaded = result.value
            record = FileRecord(uploaded['fileId'], uploaded['url'], uploaded.get('name') or file_name)
            self.index.set(key, record)
            logger.info("Timetable %s/%s is now %s", key.category, key.class_id, record.file_id)
            return record

    def _remove_live_files(self, key):
        """Delete whatever is live for ``key`` and return the deleted file ids"""
        record = self.index.get(key)
        if record is not None:
            self.file_host.delete(record.file_id).unwrap()
            self.index.clear(key)
            return [record.file_id]

        # Nothing tracked: after a restart the folder may still hold a file
        strays = self.file_host.list(key.folder).unwrap()
        deleted = []
        for item in strays:
            logger.warning("Untracked timetable %s found in %s, removing before upload",
                           item['fileId'], key.folder)
            result = self.file_host.delete(item['fileId'])
            if not result.ok:
                if deleted:
                    raise PartialFailureError(key, deleted[0], cause=result.error)
                raise RemoteServiceError(result.operation, cause=result.error)
            deleted.append(item['fileId'])
        return deleted

    def delete(self, key):
        with self.locks.hold(key):
            record = self.index.get(key)
            if record is None:
                raise UntrackedFileError(f"No file to delete for {key.class_id}.")
            self.file_host.delete(record.file_id).unwrap()
            self.index.clear(key)
            logger.info("Timetable %s/%s deleted (%s)", key.category, key.class_id, record.file_id)
            return record

    def list(self, key):
        files = self.file_host.list(key.folder).unwrap()
        return [
            {'fileName': item['name'], 'url': item['url'], 'fileId': item['fileId']}
            for item in files
        ]

    def tracked(self, key):
        record = self.index.get(key)
        if record is None:
            return None
        return {'fileId': record.file_id, 'url': record.url, 'fileName': record.display_name}
