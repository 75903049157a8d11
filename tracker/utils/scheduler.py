import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

scheduler = None

REMINDER_JOB_ID = 'grading_reminder_job'


def run_grading_reminders(app):
    with app.app_context():
        try:
            from tracker.utils.reminders import send_all_pending
            results = send_all_pending()
            logger.info(f"Scheduled grading reminders completed. Processed {len(results)} assignments.")
        except Exception as e:
            logger.error(f"Error in scheduled grading reminders: {e}")


def init_scheduler(app):
    global scheduler

    if not app.config.get('REMINDER_SCHEDULER_ENABLED'):
        return

    if scheduler is None:
        scheduler = BackgroundScheduler(daemon=True, timezone=app.config.get('SCHOOL_TIMEZONE'))

        day_of_week = app.config.get('REMINDER_DAY_OF_WEEK', 'mon')
        hour = app.config.get('REMINDER_HOUR', 9)

        scheduler.add_job(
            func=run_grading_reminders,
            args=[app],
            trigger=CronTrigger(day_of_week=day_of_week, hour=hour, minute=0),
            id=REMINDER_JOB_ID,
            name='Weekly Grading Reminder',
            replace_existing=True
        )

        scheduler.start()
        logger.info(f"Grading reminder scheduler started ({day_of_week} at {hour:02d}:00)")


def shutdown_scheduler():
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler shut down successfully")
