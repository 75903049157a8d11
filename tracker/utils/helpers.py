import json
from datetime import datetime, date
from zoneinfo import ZoneInfo
from flask import current_app, has_app_context
from tracker.utils.errors import ValidationError

DEFAULT_TIMEZONE = 'Asia/Jakarta'


def school_now():
    """Current wall-clock time in the school's timezone, as a naive datetime."""
    tz_name = DEFAULT_TIMEZONE
    if has_app_context():
        tz_name = current_app.config.get('SCHOOL_TIMEZONE', DEFAULT_TIMEZONE)
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def isoformat(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_json(value):
    if value is None:
        return None
    return json.dumps(value, default=str, ensure_ascii=False)


def from_json(value):
    if value is None:
        return None
    return json.loads(value)


def int_arg(args, name):
    """Optional integer query argument; a present but non-integer value is a 400."""
    if name not in args:
        return None
    try:
        return int(args[name])
    except ValueError:
        raise ValidationError(f'{name} must be an integer')
