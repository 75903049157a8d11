import logging
from datetime import date, datetime
from sqlalchemy.exc import SQLAlchemyError
from tracker import db
from tracker.models import Assignment, ClassAssignment, AssignmentStatus, SchoolClass, User
from tracker.models.assignment import ASSIGNMENT_TYPES
from tracker.utils import audit, quota
from tracker.utils.errors import ValidationError, NotFound, StorageError
from tracker.utils.helpers import school_now, isoformat

logger = logging.getLogger(__name__)


def _normalize_class_ids(class_ids):
    if not class_ids or isinstance(class_ids, (str, bytes)):
        raise ValidationError('At least one class is required')
    try:
        normalized = [int(class_id) for class_id in class_ids]
    except (TypeError, ValueError):
        raise ValidationError('Class ids must be integers')
    return list(dict.fromkeys(normalized))


def _normalize_assigned_date(assigned_date):
    if assigned_date is None:
        return school_now().date()
    if isinstance(assigned_date, datetime):
        return assigned_date.date()
    if isinstance(assigned_date, date):
        return assigned_date
    raise ValidationError('Invalid assigned date')


def create_assignment(subject, learning_goal, assignment_type, class_ids, teacher_id, assigned_date=None):
    """Create an assignment with its class links and grading status.

    The quota bucket is stamped from the moment of creation, not from
    ``assigned_date``; the supplied date is only stored on the record.
    Raises ValidationError, NotFound, QuotaExceeded or StorageError, and
    writes nothing in any of those cases.
    """
    subject = (subject or '').strip()
    learning_goal = (learning_goal or '').strip()
    if not subject or not learning_goal:
        raise ValidationError('Subject and learning goal are required')
    if assignment_type not in ASSIGNMENT_TYPES:
        raise ValidationError('Invalid assignment type')

    class_ids = _normalize_class_ids(class_ids)
    assigned_date = _normalize_assigned_date(assigned_date)

    found = {c.id for c in SchoolClass.query.filter(SchoolClass.id.in_(class_ids)).all()}
    missing = [class_id for class_id in class_ids if class_id not in found]
    if missing:
        raise NotFound(f'Class not found: {", ".join(str(m) for m in missing)}')

    week_number, year = quota.current_week_bucket()
    quota.check_quota(class_ids, teacher_id, (week_number, year))

    assignment = Assignment(
        subject=subject,
        learning_goal=learning_goal,
        type=assignment_type,
        week_number=week_number,
        year=year,
        status='pending',
        assigned_date=assigned_date,
        teacher_id=teacher_id
    )

    try:
        db.session.add(assignment)
        db.session.flush()

        for class_id in class_ids:
            db.session.add(ClassAssignment(class_id=class_id, assignment_id=assignment.id))

        db.session.add(AssignmentStatus(assignment_id=assignment.id, is_graded=False))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating assignment for teacher {teacher_id}: {e}")
        raise StorageError('Could not create assignment')

    logger.info(f"Assignment {assignment.id} created by teacher {teacher_id} for classes {class_ids} (week {week_number}/{year})")

    audit.log_assignment_creation(teacher_id, assignment.id, {
        'subject': subject,
        'learning_goal': learning_goal,
        'type': assignment_type,
        'class_ids': class_ids,
        'teacher_id': teacher_id,
        'assigned_date': isoformat(assigned_date)
    })

    return assignment


def _joined_query():
    return db.session.query(Assignment, SchoolClass, AssignmentStatus, User).join(
        ClassAssignment, ClassAssignment.assignment_id == Assignment.id
    ).join(
        SchoolClass, SchoolClass.id == ClassAssignment.class_id
    ).join(
        AssignmentStatus, AssignmentStatus.assignment_id == Assignment.id
    ).join(
        User, User.id == Assignment.teacher_id
    )


def _serialize_rows(rows):
    return [
        {
            'assignment': assignment.to_dict(),
            'class': school_class.to_dict(),
            'status': status.to_dict(),
            'teacher': {'id': teacher.id, 'full_name': teacher.full_name}
        }
        for assignment, school_class, status, teacher in rows
    ]


def get_assignment_rows(teacher_id=None, class_id=None):
    q = _joined_query()
    if teacher_id is not None:
        q = q.filter(Assignment.teacher_id == teacher_id)
    if class_id is not None:
        q = q.filter(SchoolClass.id == class_id)
    return q.order_by(Assignment.created_at.desc(), Assignment.id.desc(), SchoolClass.grade, SchoolClass.name).all()


def get_assignments_for_teacher(teacher_id, class_id=None):
    return _serialize_rows(get_assignment_rows(teacher_id, class_id))


def get_all_assignments(class_id=None):
    return _serialize_rows(get_assignment_rows(None, class_id))


def delete_assignment(assignment, user_id):
    old_value = assignment.to_dict()
    old_value['class_ids'] = [link.class_id for link in assignment.class_links]
    assignment_id = assignment.id

    try:
        db.session.delete(assignment)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error deleting assignment {assignment_id}: {e}")
        raise StorageError('Could not delete assignment')

    logger.info(f"Assignment {assignment_id} deleted by user {user_id}")
    audit.log_assignment_deletion(user_id, assignment_id, old_value)
