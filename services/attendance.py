"""
Attendance tabs: one tab per class.

Header row: RollNumber, StudentName, ParentEmail, Section, then one column per
day attendance was taken (ISO date in the school's timezone, in the order the
columns were added). Whether attendance was taken on a day is decided by the
presence of that date in the header, never by column position.
"""
import logging
from datetime import datetime

import pytz

from services.table_range import TableSchema, find_row_by_key
from utils.errors import AttendanceNotTakenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

PRESENT = 'Present'
ABSENT = 'Absent'
STATUSES = (PRESENT, ABSENT)

STUDENT_SCHEMA = TableSchema(['RollNumber', 'StudentName', 'ParentEmail', 'Section'])


def today_in(timezone_name):
    """Today's date as YYYY-MM-DD in the given timezone"""
    return datetime.now(pytz.timezone(timezone_name)).date().isoformat()


def attendance_percentage(present, absent):
    total = present + absent
    if total == 0:
        return 0
    return f"{present / total * 100:.2f}"


class AttendanceLedger:

    def __init__(self, table, tab_locks, timezone_name='Asia/Kolkata', today=None):
        self.table = table
        self.locks = tab_locks
        self.timezone_name = timezone_name
        self._today = today

    def today(self):
        if self._today is not None:
            return self._today()
        return today_in(self.timezone_name)

    def mark_attendance(self, class_id, roll_number, name, email, section):
        """Append a student row. Duplicate roll numbers are not checked."""
        row = STUDENT_SCHEMA.encode({
            'RollNumber': roll_number,
            'StudentName': name,
            'ParentEmail': email,
            'Section': section,
        })
        with self.locks.hold(class_id):
            self.table.append_row(class_id, row)
        logger.info("Appended %s to attendance tab %s", roll_number, class_id)

    def today_summary(self, class_id):
        current_date = self.today()
        data = self.table.read_rows(class_id, width=STUDENT_SCHEMA.width)
        if current_date not in data.headers:
            raise AttendanceNotTakenError("No attendance marked for today.")
        date_index = data.headers.index(current_date)

        summary = []
        for row in data.rows:
            student = STUDENT_SCHEMA.decode(row)
            summary.append({
                'rollNumber': student['RollNumber'],
                'studentName': student['StudentName'],
                'status': row[date_index],
            })
        return summary

    def full_sheet(self, class_id):
        data = self.table.read_rows(class_id, width=STUDENT_SCHEMA.width)
        dates = STUDENT_SCHEMA.extra(data.headers)
        result = []
        for row in data.rows:
            student = STUDENT_SCHEMA.decode(row)
            result.append({
                'rollNumber': student['RollNumber'],
                'studentName': student['StudentName'],
                'dates': dates,
                'statuses': STUDENT_SCHEMA.extra(row),
            })
        return result

    def tracker(self, class_id):
        """Per-student present/absent counts and the cohort totals"""
        data = self.table.read_rows(class_id, width=STUDENT_SCHEMA.width)

        tracker = []
        for row in data.rows:
            student = STUDENT_SCHEMA.decode(row)
            statuses = STUDENT_SCHEMA.extra(row)
            present = statuses.count(PRESENT)
            absent = statuses.count(ABSENT)
            tracker.append({
                'rollNumber': student['RollNumber'],
                'studentName': student['StudentName'],
                'section': student['Section'],
                'totalPresent': present,
                'totalAbsent': absent,
                'attendancePercentage': attendance_percentage(present, absent),
            })

        summary = {
            'totalStudents': len(tracker),
            'totalPresent': sum(s['totalPresent'] for s in tracker),
            'totalAbsent': sum(s['totalAbsent'] for s in tracker),
        }
        return tracker, summary

    def search_student(self, class_id, roll_number):
        data = self.table.read_rows(class_id, width=STUDENT_SCHEMA.width, header=False,
                                    columns=STUDENT_SCHEMA.width)
        try:
            _, row = find_row_by_key(data.rows, STUDENT_SCHEMA.key_index, roll_number)
        except NotFoundError:
            raise NotFoundError("Student not found.")
        student = STUDENT_SCHEMA.decode(row)
        return {
            'RollNumber': student['RollNumber'],
            'NameOfTheStudent': student['StudentName'],
            'ParentEmail': student['ParentEmail'],
            'Section': student['Section'],
        }

    def update_student(self, class_id, roll_number, name, email, section):
        """Replace the fixed columns of one student; date columns are never rewritten"""
        replacement = STUDENT_SCHEMA.encode({
            'RollNumber': roll_number.strip(),
            'StudentName': name.strip(),
            'ParentEmail': email.strip(),
            'Section': section.strip(),
        })
        with self.locks.hold(class_id):
            data = self.table.read_rows(class_id, width=STUDENT_SCHEMA.width, header=False,
                                        columns=STUDENT_SCHEMA.width)
            rows = data.rows
            try:
                position, _ = find_row_by_key(rows, STUDENT_SCHEMA.key_index, roll_number)
            except NotFoundError:
                raise NotFoundError("Student not found.")
            rows[position] = replacement
            self.table.replace_range(class_id, rows, STUDENT_SCHEMA.width)
        logger.info("Updated %s in attendance tab %s", roll_number, class_id)

    def record_day(self, class_id, entries):
        """Write today's status for the listed roll numbers.

        Adds today's date column to the header first if it is missing. Every
        roll number is resolved before anything is written.
        """
        for entry in entries:
            if not isinstance(entry.get('rollNumber'), str) or not entry['rollNumber'].strip():
                raise ValidationError('Every entry needs a rollNumber string')
            if entry.get('status') not in STATUSES:
                raise ValidationError(f"Invalid status for {entry.get('rollNumber')}: {entry.get('status')!r}")

        current_date = self.today()
        with self.locks.hold(class_id):
            data = self.table.read_rows(class_id, width=STUDENT_SCHEMA.width)
            if not data.headers:
                raise NotFoundError(f"Attendance sheet {class_id} has no header row.")

            positions = {}
            for entry in entries:
                try:
                    position, _ = find_row_by_key(data.rows, STUDENT_SCHEMA.key_index, entry.get('rollNumber'))
                except NotFoundError:
                    raise NotFoundError(f"Student {entry.get('rollNumber')} not found.")
                positions[position] = entry['status']

            headers = list(data.headers)
            if current_date in headers:
                date_index = headers.index(current_date)
            else:
                headers = headers + [''] * (STUDENT_SCHEMA.width - len(headers))
                headers.append(current_date)
                date_index = len(headers) - 1
                self.table.write_header(class_id, headers)
                logger.info("Added attendance column %s to tab %s", current_date, class_id)

            column = [row[date_index] if date_index < len(row) else '' for row in data.rows]
            for position, status in positions.items():
                column[position] = status
            self.table.write_column(class_id, date_index, column)

        return {'date': current_date, 'recorded': len(positions)}
