from .student import Student, FeeStatus, db
from .marks import StudentMarks

__all__ = ['Student', 'FeeStatus', 'db', 'StudentMarks']
