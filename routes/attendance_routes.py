from flask import Blueprint, request, jsonify

from services import get_services
from utils.errors import ValidationError
from utils.validation import require_fields, normalize_email

attendance_bp = Blueprint('attendance', __name__)

STUDENT_FIELDS = ['Class', 'RollNumber', 'NameOfTheStudent', 'ParentEmail', 'Section']


@attendance_bp.route('/save', methods=['POST'])
def save_student():
    """Append a student row to a class attendance sheet"""
    data = require_fields(request.get_json(silent=True), STUDENT_FIELDS)
    email = normalize_email(data['ParentEmail'], 'ParentEmail')

    get_services().attendance.mark_attendance(
        data['Class'], data['RollNumber'], data['NameOfTheStudent'], email, data['Section'],
    )
    return jsonify({'message': 'Data saved successfully!'})


@attendance_bp.route('/attendance/current/<class_sheet>', methods=['GET'])
def current_attendance(class_sheet):
    summary = get_services().attendance.today_summary(class_sheet)
    return jsonify({'success': True, 'todaySummary': summary})


@attendance_bp.route('/attendance/full/<class_sheet>', methods=['GET'])
def full_attendance(class_sheet):
    attendance_data = get_services().attendance.full_sheet(class_sheet)
    return jsonify({'success': True, 'attendanceData': attendance_data})


@attendance_bp.route('/attendance/full/<class_sheet>', methods=['DELETE'])
def delete_attendance_sheet(class_sheet):
    get_services().sheets.delete_tab(class_sheet)
    return jsonify({'success': True, 'message': f'Attendance sheet for {class_sheet} deleted successfully.'})


@attendance_bp.route('/attendance/tracker', methods=['POST'])
def attendance_tracker():
    data = require_fields(request.get_json(silent=True), ['classSheet'])
    tracker, summary = get_services().attendance.tracker(data['classSheet'])
    return jsonify({'success': True, 'tracker': tracker, 'summary': summary})


@attendance_bp.route('/attendance/mark', methods=['POST'])
def mark_attendance():
    """Record today's Present/Absent status for a list of students"""
    data = require_fields(request.get_json(silent=True), ['classSheet'])
    entries = data.get('entries')
    if not entries or not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValidationError('entries must be a list of {rollNumber, status} objects')

    result = get_services().attendance.record_day(data['classSheet'], entries)
    return jsonify({
        'success': True,
        'message': f"Attendance saved for {result['recorded']} students",
        **result,
    })


@attendance_bp.route('/search-student', methods=['POST'])
def search_student():
    data = require_fields(request.get_json(silent=True), ['Class', 'RollNumber'])
    return jsonify(get_services().attendance.search_student(data['Class'], data['RollNumber']))


@attendance_bp.route('/update-student', methods=['POST'])
def update_student():
    data = require_fields(request.get_json(silent=True), STUDENT_FIELDS)
    email = normalize_email(data['ParentEmail'], 'ParentEmail')

    get_services().attendance.update_student(
        data['Class'], data['RollNumber'], data['NameOfTheStudent'], email, data['Section'],
    )
    return jsonify({'message': 'Student information updated successfully!'})


@attendance_bp.route('/sheet/create', methods=['POST'])
def create_sheet():
    data = require_fields(request.get_json(silent=True), ['sheetName'])
    sheet_name = data['sheetName'].strip()
    get_services().sheets.create_tab(sheet_name)
    return jsonify({'success': True, 'message': f'Sheet "{sheet_name}" created successfully.'})


@attendance_bp.route('/sheets', methods=['GET'])
def list_sheets():
    return jsonify(get_services().sheets.list_tabs())
