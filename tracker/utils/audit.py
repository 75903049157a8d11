import logging
from tracker import db
from tracker.models import AuditLog
from tracker.models.audit_log import AUDIT_ACTIONS
from tracker.utils.helpers import school_now, to_json

logger = logging.getLogger(__name__)

MAX_QUERY_LIMIT = 100


def record(user_id, action, table_name=None, record_id=None, old_value=None, new_value=None):
    """Append an audit entry and return its id.

    Auditing is a side channel: any failure is rolled back and logged, and
    None is returned instead of raising. Callers must commit their own work
    before calling this.
    """
    try:
        if action not in AUDIT_ACTIONS:
            raise ValueError(f'Unknown audit action: {action}')

        entry = AuditLog(
            user_id=user_id,
            action=action,
            table_name=table_name,
            record_id=str(record_id) if record_id is not None else None,
            old_value=to_json(old_value),
            new_value=to_json(new_value),
            created_at=school_now()
        )
        db.session.add(entry)
        db.session.commit()
        return entry.id
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating audit log for {action}: {e}")
        return None


def query(limit=50, offset=0, user_id=None, action=None):
    """Audit entries, newest first. The limit ceiling is enforced by the caller."""
    q = AuditLog.query

    if user_id is not None:
        q = q.filter(AuditLog.user_id == user_id)
    if action:
        q = q.filter(AuditLog.action == action)

    return q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(offset).limit(limit).all()


def log_assignment_creation(user_id, assignment_id, assignment_data):
    return record(user_id, 'create_assignment', 'assignments', assignment_id, None, assignment_data)


def log_assignment_deletion(user_id, assignment_id, old_value):
    return record(user_id, 'delete_assignment', 'assignments', assignment_id, old_value, None)


def log_class_creation(user_id, class_id, class_data):
    return record(user_id, 'create_class', 'classes', class_id, None, class_data)


def log_class_update(user_id, class_id, old_value, new_value):
    return record(user_id, 'update_class', 'classes', class_id, old_value, new_value)


def log_class_deletion(user_id, class_id, old_value):
    return record(user_id, 'delete_class', 'classes', class_id, old_value, None)


def log_settings_update(user_id, key, old_value, new_value):
    return record(user_id, 'update_settings', 'settings', key, old_value, new_value)


def log_reminder_sent(user_id, assignment_id, reminder_data=None):
    return record(user_id, 'send_reminder', 'reminder_logs', assignment_id, None, reminder_data)


def log_grade_status_update(user_id, assignment_id, old_value, new_value):
    return record(user_id, 'update_grade_status', 'assignment_statuses', assignment_id, old_value, new_value)


def log_user_event(user_id, action, user_data=None):
    return record(user_id, action, 'users', user_id, None, user_data)
