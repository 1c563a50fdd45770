from flask import Blueprint, request, jsonify

from services import get_services
from utils.validation import require_fields

user_bp = Blueprint('user', __name__)


@user_bp.route('/getUsers', methods=['GET'])
def get_users():
    return jsonify(get_services().credentials.list_users())


@user_bp.route('/updateUser', methods=['POST'])
def update_user():
    data = require_fields(
        request.get_json(silent=True),
        ['CurrentUsername', 'NewUsername', 'CurrentPassword', 'NewPassword'],
    )
    updated = get_services().credentials.update_user(
        data['CurrentUsername'], data['CurrentPassword'], data['NewUsername'], data['NewPassword'],
    )
    if not updated:
        return jsonify({'message': 'No user matched the current username and password.', 'updated': 0})
    return jsonify({'message': 'User info updated successfully!', 'updated': updated})
