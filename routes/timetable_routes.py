from flask import Blueprint, request, jsonify
from werkzeug.utils import secure_filename

from services import get_services, ClassCategoryKey, GENERAL, EXAM
from utils.errors import ValidationError
from utils.settings import CLASSES

timetable_bp = Blueprint('timetable', __name__, url_prefix='/api')

# URL segment -> timetable category
CATEGORY_PREFIXES = {
    'timetables': GENERAL,
    'exam-timetables': EXAM,
}


def _key(prefix, class_name):
    if prefix not in CATEGORY_PREFIXES:
        raise ValidationError(f"Unknown timetable kind: {prefix}")
    if class_name not in CLASSES:
        raise ValidationError(f"Unknown class: {class_name}")
    return ClassCategoryKey(CATEGORY_PREFIXES[prefix], class_name)


@timetable_bp.route('/timetables/classes', methods=['GET'])
def list_classes():
    return jsonify(CLASSES)


@timetable_bp.route('/<prefix>/upload/<class_name>', methods=['POST'])
def upload_timetable(prefix, class_name):
    key = _key(prefix, class_name)

    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValidationError('No file uploaded.')

    file_name = secure_filename(upload.filename) or 'timetable'
    record = get_services().timetables.upload(key, upload.read(), file_name)
    return jsonify({
        'fileId': record.file_id,
        'url': record.url,
        'name': record.display_name,
        'class': class_name,
        'category': key.category,
    })


@timetable_bp.route('/<prefix>/delete/<class_name>', methods=['DELETE'])
def delete_timetable(prefix, class_name):
    key = _key(prefix, class_name)
    get_services().timetables.delete(key)
    return jsonify({'message': 'File deleted successfully'})


@timetable_bp.route('/<prefix>/view/<class_name>', methods=['GET'])
def view_timetables(prefix, class_name):
    key = _key(prefix, class_name)
    return jsonify(get_services().timetables.list(key))


@timetable_bp.route('/<prefix>/status/<class_name>', methods=['GET'])
def timetable_status(prefix, class_name):
    """What this process currently tracks for the class; compare with /view to spot drift"""
    key = _key(prefix, class_name)
    return jsonify({'class': class_name, 'category': key.category,
                    'tracked': get_services().timetables.tracked(key)})
