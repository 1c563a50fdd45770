import logging

from flask import Blueprint, request, jsonify

from models import db, Student
from utils.errors import NotFoundError, ValidationError
from utils.validation import require_fields

logger = logging.getLogger(__name__)

student_bp = Blueprint('student', __name__)

EDITABLE_FIELDS = [
    'firstName', 'lastName', 'gender', 'dob', 'address', 'parentName',
    'parentEmail', 'parentContact', 'cast', 'region', 'yearOfAdmission',
]


def make_roll_number(year_of_admission, sequence):
    """Roll numbers look like S20240007: year of admission plus a 4-digit sequence"""
    return f"S{year_of_admission}{sequence:04d}"


def _apply(student, data):
    for field in EDITABLE_FIELDS:
        if field in data:
            value = data.get(field)
            setattr(student, field, value.strip() if isinstance(value, str) else value)
    try:
        student.validate_email()
    except ValueError as e:
        raise ValidationError(str(e))


@student_bp.route('/register', methods=['POST'])
def register_student():
    data = require_fields(request.get_json(silent=True), ['firstName'])
    year = str(data.get('yearOfAdmission') or '').strip()
    if not (year.isdigit() and len(year) == 4):
        raise ValidationError('yearOfAdmission must be a 4-digit year')

    # Start from current count+1 so numbering follows the number of registrations
    roll_number = make_roll_number(year, Student.query.count() + 1)
    if db.session.get(Student, roll_number) is not None:
        raise ValidationError('Roll number already exists')

    student = Student(rollNumber=roll_number)
    _apply(student, {**data, 'yearOfAdmission': year})
    db.session.add(student)
    db.session.commit()
    logger.info("Registered student %s", roll_number)

    return jsonify({'message': 'Student registered successfully', 'rollNumber': roll_number}), 201


@student_bp.route('/allstudents', methods=['GET'])
def all_students():
    students = Student.query.order_by(Student.rollNumber).all()
    return jsonify([s.to_dict() for s in students])


@student_bp.route('/updateStudent/<roll_number>', methods=['PUT'])
def update_student(roll_number):
    student = db.session.get(Student, roll_number)
    if student is None:
        raise NotFoundError(f"No student with roll number {roll_number}")

    _apply(student, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify({'message': 'Student details updated successfully'})


@student_bp.route('/studentcount', methods=['GET'])
def student_count():
    return jsonify({'studentCount': Student.query.count()})
