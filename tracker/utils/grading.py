import logging
from sqlalchemy.exc import SQLAlchemyError
from tracker import db
from tracker.models import AssignmentStatus, Assignment
from tracker.utils import audit
from tracker.utils.errors import NotFound, StorageError
from tracker.utils.helpers import school_now

logger = logging.getLogger(__name__)


def set_graded(assignment_id, is_graded, user_id):
    """Mark an assignment graded or ungraded.

    ``graded_at`` and ``grade_input_by`` are set together when graded and
    cleared together otherwise. Every call writes an audit entry, even when
    the flag does not change.
    """
    status = db.session.get(AssignmentStatus, assignment_id)
    if status is None:
        raise NotFound('Assignment not found')

    old_value = status.to_dict()
    is_graded = bool(is_graded)

    try:
        status.is_graded = is_graded
        status.graded_at = school_now() if is_graded else None
        status.grade_input_by = user_id if is_graded else None

        assignment = db.session.get(Assignment, assignment_id)
        if assignment is not None:
            assignment.status = 'graded' if is_graded else 'pending'

        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error updating grade status of assignment {assignment_id}: {e}")
        raise StorageError('Could not update grade status')

    audit.log_grade_status_update(user_id, assignment_id, old_value, status.to_dict())
    return status
