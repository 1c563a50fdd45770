from flask import Blueprint, request, jsonify
from sqlalchemy import func, case

from models import db, Student, FeeStatus
from utils.errors import NotFoundError, ValidationError

fee_bp = Blueprint('fee', __name__)


@fee_bp.route('/updateFeeStatus/<roll_number>', methods=['PUT'])
def update_fee_status(roll_number):
    data = request.get_json(silent=True) or {}
    fee_status = data.get('feeStatus')
    if fee_status not in FeeStatus.CHOICES:
        raise ValidationError('Invalid fee status')

    student = db.session.get(Student, roll_number)
    if student is None:
        raise NotFoundError(f"No student with roll number {roll_number}")

    student.feeStatus = fee_status
    db.session.commit()
    return jsonify({'message': 'Fee status updated successfully'})


@fee_bp.route('/studentsWithFeeStatus', methods=['GET'])
def students_with_fee_status():
    rows = db.session.query(
        Student.rollNumber, Student.firstName, Student.lastName, Student.feeStatus,
    ).order_by(Student.rollNumber).all()
    return jsonify([
        {'rollNumber': r[0], 'firstName': r[1], 'lastName': r[2], 'feeStatus': r[3]}
        for r in rows
    ])


@fee_bp.route('/feestatuscount', methods=['GET'])
def fee_status_count():
    def count_of(status):
        return func.coalesce(func.sum(case((Student.feeStatus == status, 1), else_=0)), 0)

    paid, unpaid, partially_paid = db.session.query(
        count_of(FeeStatus.PAID),
        count_of(FeeStatus.UNPAID),
        count_of(FeeStatus.PARTIALLY_PAID),
    ).one()
    return jsonify({'paid': int(paid), 'unpaid': int(unpaid), 'partiallyPaid': int(partially_paid)})
