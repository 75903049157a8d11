import logging
import os
from tracker import create_app
from tracker.utils.scheduler import shutdown_scheduler

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=os.environ.get('LOG_LEVEL', 'INFO')
)
logger = logging.getLogger(__name__)

def main():
    """Run the assignment tracker web application"""
    flask_app = create_app()
    port = int(os.environ.get('PORT', 5000))

    logger.info("=" * 50)
    logger.info(f"Starting assignment tracker on port {port}...")
    logger.info("=" * 50)

    try:
        flask_app.run(host='0.0.0.0', port=port, debug=False, use_reloader=False)
    except KeyboardInterrupt:
        logger.info("Stopping assignment tracker...")
    finally:
        shutdown_scheduler()

if __name__ == '__main__':
    main()
