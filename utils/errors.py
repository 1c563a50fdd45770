"""
Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it maps to and a machine-readable code, so
route handlers never translate exceptions by hand.
"""


class SchoolServiceError(Exception):
    """Base class for every error surfaced to API callers"""

    http_status = 500
    code = 'internal_error'

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.code, 'message': self.message}


class ValidationError(SchoolServiceError):
    """Missing or malformed input, raised before any remote call"""

    http_status = 400
    code = 'validation_error'


class NotFoundError(SchoolServiceError):
    http_status = 404
    code = 'not_found'


class UntrackedFileError(NotFoundError):
    """No timetable file is tracked for the requested class"""

    http_status = 400
    code = 'file_not_tracked'


class AttendanceNotTakenError(NotFoundError):
    """The attendance tab has no column for the requested date"""

    http_status = 400
    code = 'attendance_not_taken'


class RemoteServiceError(SchoolServiceError):
    """A call to the file host or the spreadsheet store failed"""

    code = 'remote_service_error'

    def __init__(self, operation, cause=None, message=None):
        self.operation = operation
        self.cause = cause
        if message is None:
            message = f"{operation} failed: {cause}" if cause is not None else f"{operation} failed"
        super().__init__(message)

    def to_dict(self):
        payload = super().to_dict()
        payload['operation'] = self.operation
        return payload


class PartialFailureError(RemoteServiceError):
    """The old timetable was deleted but the replacement upload failed"""

    code = 'partial_failure'

    def __init__(self, key, deleted_file_id, cause=None):
        self.key = key
        self.deleted_file_id = deleted_file_id
        message = (
            f"Timetable for {key.category}/{key.class_id} was deleted but not replaced "
            f"(deleted file {deleted_file_id}): {cause}"
        )
        super().__init__('timetable upload', cause=cause, message=message)

    def to_dict(self):
        payload = super().to_dict()
        payload['deletedFileId'] = self.deleted_file_id
        payload['replaced'] = False
        return payload
