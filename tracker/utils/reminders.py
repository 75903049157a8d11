import logging
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from tracker import db
from tracker.models import Assignment, AssignmentStatus, ReminderLog
from tracker.utils import audit, telegram_notifications
from tracker.utils.errors import ProviderError, AlreadySent, StorageError
from tracker.utils.helpers import school_now

logger = logging.getLogger(__name__)

REMINDER_TEMPLATE = (
    "Dear {teacher_name},\n\n"
    "*GRADING REMINDER*\n"
    "{school_name}\n\n"
    "📚 *Assignment*: {subject}\n"
    "🎯 *Learning goal*: {learning_goal}\n"
    "📅 *Assigned on*: {assigned_date}\n\n"
    "This assignment is past its deadline and has not been graded yet.\n\n"
    "Please grade it and enter the marks into the interim report.\n\n"
    "Thank you,\n"
    "{school_name} administration"
)


def _failure(reason, code):
    return {'success': False, 'reason': reason, 'code': code}


def build_reminder_message(assignment, teacher):
    return REMINDER_TEMPLATE.format(
        teacher_name=teacher.full_name,
        school_name=current_app.config.get('SCHOOL_NAME', ''),
        subject=assignment.subject,
        learning_goal=assignment.learning_goal,
        assigned_date=assignment.assigned_date.strftime('%d/%m/%Y')
    )


def ensure_not_sent(assignment, teacher):
    """Raise AlreadySent if a reminder row exists for the assignment and teacher."""
    existing = ReminderLog.query.filter_by(assignment_id=assignment.id, teacher_id=teacher.id).first()
    if existing:
        raise AlreadySent('Reminder already sent for this assignment to this teacher')


def record_reminder(assignment, teacher, message_text, result):
    log = ReminderLog(
        assignment_id=assignment.id,
        teacher_id=teacher.id,
        sent_at=school_now(),
        message_id=result['id'],
        message_content=message_text,
        status=result['status']
    )
    try:
        db.session.add(log)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise AlreadySent('Reminder already sent for this assignment to this teacher')
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Reminder for assignment {assignment.id} sent but not recorded: {e}")
        raise StorageError('Reminder sent but could not be recorded')
    return log


def send_reminder(assignment_id, user_id=None):
    """Send one grading reminder to the assignment's teacher.

    Returns ``{'success': True, 'message_id': ...}`` or
    ``{'success': False, 'reason': ..., 'code': ...}``; provider problems are
    reported in the result, never raised. A ReminderLog row for the
    assignment and teacher blocks any further reminder.
    """
    if not telegram_notifications.is_configured():
        return _failure('Messaging provider not configured', 'provider_not_configured')

    assignment = db.session.get(Assignment, assignment_id)
    if assignment is None:
        return _failure('Assignment not found', 'not_found')

    teacher = assignment.teacher
    if not teacher.telegram_chat_id:
        return _failure(f'Teacher {teacher.full_name} does not have a contact address registered', 'no_contact')

    try:
        ensure_not_sent(assignment, teacher)
    except AlreadySent as e:
        return _failure(e.message, 'already_sent')

    message_text = build_reminder_message(assignment, teacher)

    try:
        result = telegram_notifications.send_message(teacher.telegram_chat_id, message_text)
    except ProviderError as e:
        logger.error(f"Reminder for assignment {assignment.id} failed: {e.message}")
        return _failure(e.message, 'provider_error')

    try:
        record_reminder(assignment, teacher, message_text, result)
    except AlreadySent as e:
        return _failure(e.message, 'already_sent')
    except StorageError as e:
        return _failure(e.message, 'storage_error')

    logger.info(f"Reminder sent to {teacher.full_name} for assignment {assignment.id} (message {result['id']})")
    audit.log_reminder_sent(user_id, assignment.id, {
        'teacher_id': teacher.id,
        'message_id': result['id'],
        'status': result['status']
    })

    return {'success': True, 'message_id': result['id']}


def pending_assignments():
    """Ungraded assignments that have no reminder row yet."""
    return Assignment.query.join(
        AssignmentStatus, AssignmentStatus.assignment_id == Assignment.id
    ).outerjoin(
        ReminderLog, ReminderLog.assignment_id == Assignment.id
    ).filter(
        AssignmentStatus.is_graded.is_(False),
        ReminderLog.id.is_(None)
    ).order_by(Assignment.created_at, Assignment.id).all()


def send_all_pending(user_id=None):
    results = []
    for assignment in pending_assignments():
        result = send_reminder(assignment.id, user_id)
        results.append({'assignment_id': assignment.id, **result})

    sent = sum(1 for r in results if r['success'])
    logger.info(f"Reminder batch completed: {sent}/{len(results)} sent")
    return results
