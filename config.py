import os

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'assignment_tracker.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SCHOOL_NAME = os.environ.get('SCHOOL_NAME', 'SMP YPS Singkole')
    SCHOOL_TIMEZONE = os.environ.get('SCHOOL_TIMEZONE', 'Asia/Jakarta')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    TELEGRAM_BOT_TOKEN = os.environ.get('TELEGRAM_BOT_TOKEN', '')

    REMINDER_SCHEDULER_ENABLED = os.environ.get('REMINDER_SCHEDULER_ENABLED', 'False').lower() == 'true'
    REMINDER_DAY_OF_WEEK = os.environ.get('REMINDER_DAY_OF_WEEK', 'mon')
    REMINDER_HOUR = int(os.environ.get('REMINDER_HOUR', '9'))
