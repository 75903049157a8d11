from flask import Blueprint, request, jsonify
from flask_login import current_user
from tracker.utils import classes as class_service
from tracker.utils.decorators import role_required
from tracker.utils.errors import ValidationError

bp = Blueprint('classes', __name__, url_prefix='/api/classes')


def read_class_payload():
    data = request.get_json(silent=True) or {}
    grade = data.get('grade')
    name = data.get('name')
    teacher_id = data.get('teacherId')

    if grade is None or not name:
        raise ValidationError('Missing required fields: grade and name')

    if teacher_id is not None:
        try:
            teacher_id = int(teacher_id)
        except (TypeError, ValueError):
            raise ValidationError('teacherId must be an integer')

    return grade, name, teacher_id


@bp.route('', methods=['GET'])
@role_required()
def list_classes():
    return jsonify([c.to_dict() for c in class_service.list_classes(current_user)])


@bp.route('', methods=['POST'])
@role_required('admin')
def create_class():
    grade, name, teacher_id = read_class_payload()
    school_class = class_service.create_class(grade, name, teacher_id, current_user.id)
    return jsonify(school_class.to_dict()), 201


@bp.route('/<int:class_id>', methods=['PUT'])
@role_required('admin')
def update_class(class_id):
    grade, name, teacher_id = read_class_payload()
    school_class = class_service.update_class(class_id, grade, name, teacher_id, current_user.id)
    return jsonify(school_class.to_dict())


@bp.route('/<int:class_id>', methods=['DELETE'])
@role_required('admin')
def delete_class(class_id):
    class_service.delete_class(class_id, current_user.id)
    return jsonify({'success': True})
