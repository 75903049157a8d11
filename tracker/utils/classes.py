import logging
from sqlalchemy.exc import SQLAlchemyError
from tracker import db
from tracker.models import SchoolClass, User
from tracker.models.school_class import MIN_GRADE, MAX_GRADE
from tracker.utils import audit
from tracker.utils.errors import ValidationError, NotFound, Conflict, StorageError

logger = logging.getLogger(__name__)


def _validate(grade, name, teacher_id):
    try:
        grade = int(grade)
    except (TypeError, ValueError):
        raise ValidationError('Grade must be a number')
    if grade < MIN_GRADE or grade > MAX_GRADE:
        raise ValidationError(f'Grade must be between {MIN_GRADE} and {MAX_GRADE}')

    name = (name or '').strip()
    if not name:
        raise ValidationError('Class name is required')

    if teacher_id is not None:
        teacher = db.session.get(User, teacher_id)
        if teacher is None:
            raise NotFound('Teacher not found')

    return grade, name


def _check_unique(grade, name, exclude_id=None):
    q = SchoolClass.query.filter_by(grade=grade, name=name)
    if exclude_id is not None:
        q = q.filter(SchoolClass.id != exclude_id)
    if q.first():
        raise Conflict('Class already exists')


def list_classes(user):
    q = SchoolClass.query
    if not user.is_admin():
        q = q.filter_by(teacher_id=user.id)
    return q.order_by(SchoolClass.grade, SchoolClass.name).all()


def create_class(grade, name, teacher_id, user_id):
    grade, name = _validate(grade, name, teacher_id)
    _check_unique(grade, name)

    school_class = SchoolClass(grade=grade, name=name, teacher_id=teacher_id)
    try:
        db.session.add(school_class)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating class {grade} {name}: {e}")
        raise StorageError('Could not create class')

    audit.log_class_creation(user_id, school_class.id, {
        'grade': grade,
        'name': name,
        'teacher_id': teacher_id
    })
    return school_class


def update_class(class_id, grade, name, teacher_id, user_id):
    school_class = db.session.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFound('Class not found')

    grade, name = _validate(grade, name, teacher_id)
    _check_unique(grade, name, exclude_id=class_id)

    old_value = school_class.to_dict()
    try:
        school_class.grade = grade
        school_class.name = name
        school_class.teacher_id = teacher_id
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error updating class {class_id}: {e}")
        raise StorageError('Could not update class')

    audit.log_class_update(user_id, class_id, old_value, school_class.to_dict())
    return school_class


def delete_class(class_id, user_id):
    school_class = db.session.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFound('Class not found')

    if school_class.assignment_links.count():
        raise Conflict('Class still has assignments')

    old_value = school_class.to_dict()
    try:
        db.session.delete(school_class)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error deleting class {class_id}: {e}")
        raise StorageError('Could not delete class')

    audit.log_class_deletion(user_id, class_id, old_value)
