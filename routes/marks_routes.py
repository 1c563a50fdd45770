import logging

from flask import Blueprint, request, jsonify

from models import db, Student, StudentMarks
from utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

marks_bp = Blueprint('marks', __name__)

EXAM_FIELDS = ['subject', 'marks', 'grade', 'typeofexam']


@marks_bp.route('/allexamreport', methods=['GET'])
def all_exam_reports():
    rows = StudentMarks.query.order_by(StudentMarks.rollNumber, StudentMarks.id).all()
    return jsonify([r.to_dict() for r in rows])


@marks_bp.route('/report/<roll_number>', methods=['GET'])
def exam_report(roll_number):
    rows = db.session.query(Student, StudentMarks)\
        .join(StudentMarks, StudentMarks.rollNumber == Student.rollNumber)\
        .filter(Student.rollNumber == roll_number)\
        .order_by(StudentMarks.typeofexam, StudentMarks.subject)\
        .all()

    if not rows:
        raise NotFoundError(f"No exam reports found for roll number {roll_number}")

    return jsonify([
        {
            'rollNumber': student.rollNumber,
            'firstName': student.firstName,
            'lastName': student.lastName,
            'subject': marks.subject,
            'marks': marks.marks,
            'grade': marks.grade,
            'typeofexam': marks.typeofexam,
        }
        for student, marks in rows
    ])


def _clean_exam_entry(entry):
    if not isinstance(entry, dict) or any(entry.get(f) in (None, '') for f in EXAM_FIELDS):
        raise ValidationError('Missing required fields in exam data')
    try:
        marks = float(entry['marks'])
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid marks for {entry['subject']}: {entry['marks']!r}")
    if not 0 <= marks <= 100:
        raise ValidationError(f"Invalid mark for {entry['subject']}: {marks}. Marks must be between 0 and 100.")
    return {
        'subject': str(entry['subject']).strip(),
        'marks': marks,
        'grade': str(entry['grade']).strip(),
        'typeofexam': str(entry['typeofexam']).strip(),
    }


@marks_bp.route('/addexamreport', methods=['POST'])
def add_exam_report():
    data = request.get_json(silent=True) or {}
    roll_number = data.get('rollNumber')
    exam_data = data.get('examData')

    if not roll_number or not isinstance(exam_data, list) or not exam_data:
        raise ValidationError('Invalid input. Please provide rollNumber and examData array')

    # Validate everything first so a bad entry never leaves a half-written report
    entries = [_clean_exam_entry(entry) for entry in exam_data]

    if db.session.get(Student, roll_number) is None:
        raise NotFoundError(f"No student with roll number {roll_number}")

    for entry in entries:
        existing = StudentMarks.query.filter_by(
            rollNumber=roll_number,
            subject=entry['subject'],
            typeofexam=entry['typeofexam'],
        ).first()
        if existing:
            existing.marks = entry['marks']
            existing.grade = entry['grade']
        else:
            db.session.add(StudentMarks(rollNumber=roll_number, **entry))

    db.session.commit()
    logger.info("Saved %d exam entries for %s", len(entries), roll_number)
    return jsonify({'message': 'Exam report(s) added/updated successfully'}), 201


@marks_bp.route('/deletegrade/<grade>', methods=['DELETE'])
def delete_grade(grade):
    deleted = StudentMarks.query.filter_by(grade=grade).delete(synchronize_session=False)
    db.session.commit()
    if deleted == 0:
        raise NotFoundError(f"No data found for grade {grade}")
    return jsonify({'message': f'Data for grade {grade} deleted successfully', 'deleted': deleted})
