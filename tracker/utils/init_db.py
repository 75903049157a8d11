from tracker import db
from tracker.utils import settings
import logging

logger = logging.getLogger(__name__)

def initialize_database():
    db.create_all()

    for key, info in settings.KNOWN_SETTINGS.items():
        if settings.get_value(key) is None:
            logger.info(f"Seeding default setting {key}={info['value']}")
            settings.upsert(key, info['value'], info['description'], None)

    logger.info("Database initialization completed successfully")
