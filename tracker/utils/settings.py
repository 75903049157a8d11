import logging
from sqlalchemy.exc import SQLAlchemyError
from tracker import db
from tracker.models import Setting
from tracker.utils import audit
from tracker.utils.errors import StorageError
from tracker.utils.helpers import school_now

logger = logging.getLogger(__name__)

MAX_ASSIGNMENTS_SETTING = 'max_assignments_per_class_per_week'

KNOWN_SETTINGS = {
    MAX_ASSIGNMENTS_SETTING: {
        'value': '2',
        'description': 'Maximum assignments a teacher may give one class per week'
    },
}


def get_value(key):
    setting = db.session.get(Setting, key)
    return setting.value if setting else None


def list_settings():
    """Stored settings merged over the known defaults, ordered by key."""
    merged = {
        key: {'key': key, 'value': info['value'], 'description': info['description'],
              'updated_by': None, 'updated_at': None}
        for key, info in KNOWN_SETTINGS.items()
    }
    for setting in Setting.query.all():
        merged[setting.key] = setting.to_dict()
    return [merged[key] for key in sorted(merged)]


def upsert(key, value, description, user_id):
    current = db.session.get(Setting, key)
    old_value = current.to_dict() if current else None

    try:
        if current is None:
            current = Setting(key=key)
            db.session.add(current)
        current.value = value
        current.description = description
        current.updated_by = user_id
        current.updated_at = school_now()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error saving setting {key}: {e}")
        raise StorageError(f'Could not save setting {key}')

    new_value = current.to_dict()
    audit.log_settings_update(user_id, key, old_value, new_value)
    logger.info(f"Setting {key} updated to {value!r}")
    return current
