"""Weekly assignment quota per class and teacher.

Assignments are bucketed by the ISO week and ISO year of the moment they
were created. The same rule is used to stamp new assignments and to count
existing ones.

The check and the later insert are not serialised, so two concurrent
requests for the same teacher, class and week can both pass the check and
push the count one past the limit. The limit is a soft one.
"""
import logging
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from tracker import db
from tracker.models import Assignment, ClassAssignment, SchoolClass
from tracker.utils import settings
from tracker.utils.errors import QuotaExceeded
from tracker.utils.helpers import school_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_ASSIGNMENTS_PER_WEEK = 2


def current_week_bucket(now=None):
    """Return ``(week_number, year)`` of ``now`` (default: school time now)."""
    now = now or school_now()
    iso_year, iso_week, _ = now.isocalendar()
    return iso_week, iso_year


def get_limit():
    try:
        raw = settings.get_value(settings.MAX_ASSIGNMENTS_SETTING)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning(f"Could not read quota limit, using default {DEFAULT_MAX_ASSIGNMENTS_PER_WEEK}: {e}")
        return DEFAULT_MAX_ASSIGNMENTS_PER_WEEK

    if raw is None:
        return DEFAULT_MAX_ASSIGNMENTS_PER_WEEK

    try:
        limit = int(str(raw).strip())
    except ValueError:
        logger.warning(f"Invalid quota limit {raw!r}, using default {DEFAULT_MAX_ASSIGNMENTS_PER_WEEK}")
        return DEFAULT_MAX_ASSIGNMENTS_PER_WEEK

    return limit if limit > 0 else DEFAULT_MAX_ASSIGNMENTS_PER_WEEK


def count_for_class_and_teacher(class_id, week_number, year, teacher_id):
    return db.session.query(func.count(Assignment.id)).join(
        ClassAssignment, ClassAssignment.assignment_id == Assignment.id
    ).filter(
        ClassAssignment.class_id == class_id,
        Assignment.week_number == week_number,
        Assignment.year == year,
        Assignment.teacher_id == teacher_id
    ).scalar() or 0


def check_quota(class_ids, teacher_id, bucket=None):
    """Raise QuotaExceeded for the first class already at the weekly limit.

    ``bucket`` is the ``(week_number, year)`` to count in; callers that stamp
    a new assignment pass the bucket they stamp with.
    """
    week_number, year = bucket or current_week_bucket()
    limit = get_limit()

    for class_id in class_ids:
        count = count_for_class_and_teacher(class_id, week_number, year, teacher_id)
        if count >= limit:
            school_class = db.session.get(SchoolClass, class_id)
            class_name = school_class.name if school_class else str(class_id)
            logger.info(f"Quota reached for class {class_name}: {count}/{limit} (teacher {teacher_id})")
            raise QuotaExceeded(class_name, limit)


def class_quotas(teacher_id):
    week_number, year = current_week_bucket()
    limit = get_limit()

    quotas = []
    classes = SchoolClass.query.filter_by(teacher_id=teacher_id).order_by(
        SchoolClass.grade, SchoolClass.name
    ).all()
    for school_class in classes:
        count = count_for_class_and_teacher(school_class.id, week_number, year, teacher_id)
        quotas.append({
            'class': school_class.to_dict(),
            'current_count': count,
            'remaining': limit - count,
            'quota_percentage': count / limit * 100
        })
    return quotas
