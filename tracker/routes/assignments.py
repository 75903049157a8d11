from datetime import datetime
from flask import Blueprint, request, jsonify
from flask_login import current_user
from tracker import db
from tracker.models import Assignment
from tracker.utils import assignments as assignment_service
from tracker.utils import grading, quota
from tracker.utils.decorators import role_required
from tracker.utils.errors import ValidationError, AuthError, NotFound
from tracker.utils.helpers import int_arg

bp = Blueprint('assignments', __name__, url_prefix='/api/assignments')


def parse_assigned_date(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        raise ValidationError('Invalid assignedDate, expected an ISO date')


@bp.route('', methods=['GET'])
@role_required()
def list_assignments():
    if request.args.get('type') == 'class-quotas':
        return jsonify(quota.class_quotas(current_user.id))

    class_id = int_arg(request.args, 'classId')

    if current_user.is_admin():
        return jsonify(assignment_service.get_all_assignments(class_id))
    return jsonify(assignment_service.get_assignments_for_teacher(current_user.id, class_id))


@bp.route('', methods=['POST'])
@role_required('teacher')
def create_assignment():
    data = request.get_json(silent=True) or {}
    subject = data.get('subject')
    learning_goal = data.get('learningGoal')
    assignment_type = data.get('type')
    class_ids = data.get('classIds')

    if not subject or not learning_goal or not assignment_type or not isinstance(class_ids, list) or not class_ids:
        raise ValidationError('Missing required fields')

    assignment = assignment_service.create_assignment(
        subject,
        learning_goal,
        assignment_type,
        class_ids,
        current_user.id,
        parse_assigned_date(data.get('assignedDate'))
    )

    return jsonify(assignment.to_dict()), 201


@bp.route('/<int:assignment_id>', methods=['DELETE'])
@role_required()
def delete_assignment(assignment_id):
    assignment = db.session.get(Assignment, assignment_id)
    if assignment is None:
        raise NotFound('Assignment not found')

    if assignment.teacher_id != current_user.id and not current_user.is_admin():
        raise AuthError('You can only delete your own assignments')

    assignment_service.delete_assignment(assignment, current_user.id)
    return jsonify({'success': True})


@bp.route('/grade', methods=['PUT'])
@role_required()
def update_grade_status():
    data = request.get_json(silent=True) or {}
    assignment_id = data.get('assignmentId')
    is_graded = data.get('isGraded')

    if not assignment_id or is_graded is None:
        raise ValidationError('Missing required fields: assignmentId and isGraded')
    if not isinstance(is_graded, bool):
        raise ValidationError('isGraded must be a boolean')

    try:
        assignment_id = int(assignment_id)
    except (TypeError, ValueError):
        raise ValidationError('assignmentId must be an integer')

    status = grading.set_graded(assignment_id, is_graded, current_user.id)
    return jsonify(status.to_dict())
