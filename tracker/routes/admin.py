from flask import Blueprint, request, jsonify, send_file
from flask_login import current_user
from tracker.models import SchoolClass, User, Assignment, AssignmentStatus, ReminderLog
from tracker.utils import audit, quota, reminders, settings, telegram_notifications
from tracker.utils import assignments as assignment_service
from tracker.utils.decorators import role_required
from tracker.utils.errors import ValidationError, ProviderError
from tracker.utils.excel_export import export_grading_status_to_excel
from tracker.utils.helpers import school_now, int_arg

bp = Blueprint('admin', __name__, url_prefix='/api/admin')

@bp.route('/dashboard')
@role_required('admin')
def dashboard():
    week_number, year = quota.current_week_bucket()
    graded = AssignmentStatus.query.filter_by(is_graded=True).count()
    total = Assignment.query.count()

    stats = {
        'classes': SchoolClass.query.count(),
        'teachers': User.query.filter_by(role='teacher').count(),
        'assignments': total,
        'graded': graded,
        'ungraded': total - graded,
        'assignments_this_week': Assignment.query.filter_by(week_number=week_number, year=year).count(),
        'reminders_sent': ReminderLog.query.count(),
        'quota_limit': quota.get_limit(),
        'week_number': week_number,
        'year': year
    }

    return jsonify(stats)

@bp.route('/assignments')
@role_required('admin')
def assignments():
    class_id = int_arg(request.args, 'classId')
    return jsonify(assignment_service.get_all_assignments(class_id))

@bp.route('/assignments/export')
@role_required('admin')
def export_assignments():
    rows = assignment_service.get_assignment_rows()
    output = export_grading_status_to_excel(rows)
    filename = f"grading_status_{school_now().strftime('%Y%m%d_%H%M')}.xlsx"
    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=filename
    )

@bp.route('/settings', methods=['GET'])
@role_required('admin')
def list_settings():
    return jsonify(settings.list_settings())

@bp.route('/settings', methods=['PUT'])
@role_required('admin')
def update_setting():
    data = request.get_json(silent=True) or {}
    key = data.get('key')
    value = data.get('value')
    description = data.get('description') or None

    if not key or value is None:
        raise ValidationError('Missing required fields: key and value')

    value = str(value).strip()
    if key == settings.MAX_ASSIGNMENTS_SETTING:
        try:
            limit = int(value)
        except ValueError:
            raise ValidationError('Limit must be a positive whole number')
        if limit < 1:
            raise ValidationError('Limit must be a positive whole number')
        value = str(limit)

    setting = settings.upsert(key, value, description, current_user.id)
    return jsonify(setting.to_dict())

@bp.route('/reminders', methods=['POST'])
@role_required('admin')
def send_reminder():
    data = request.get_json(silent=True) or {}
    assignment_id = data.get('assignmentId')

    if not assignment_id:
        raise ValidationError('Assignment ID is required')

    try:
        assignment_id = int(assignment_id)
    except (TypeError, ValueError):
        raise ValidationError('assignmentId must be an integer')

    result = reminders.send_reminder(assignment_id, current_user.id)

    if not result['success']:
        return jsonify({'success': False, 'error': result['reason'], 'code': result['code']}), 400

    return jsonify({
        'success': True,
        'message': 'Reminder sent successfully',
        'message_id': result['message_id']
    })

@bp.route('/reminders', methods=['GET'])
@role_required('admin')
def send_all_reminders():
    if not telegram_notifications.is_configured():
        raise ProviderError('Messaging provider not configured')

    results = reminders.send_all_pending(current_user.id)

    return jsonify({
        'success': True,
        'message': 'Reminders sent',
        'results': results
    })

@bp.route('/audit-logs')
@role_required('admin')
def audit_logs():
    try:
        limit = int(request.args.get('limit', 50))
        offset = int(request.args.get('offset', 0))
    except ValueError:
        raise ValidationError('limit and offset must be integers')

    if limit > audit.MAX_QUERY_LIMIT:
        raise ValidationError(f'Limit cannot exceed {audit.MAX_QUERY_LIMIT}')
    if limit < 1 or offset < 0:
        raise ValidationError('limit must be positive and offset cannot be negative')

    user_id = int_arg(request.args, 'userId')
    action = request.args.get('action') or None

    logs = audit.query(limit, offset, user_id, action)
    return jsonify([log.to_dict() for log in logs])
