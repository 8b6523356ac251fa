"""
Activity Cleanup Scheduler - daily pruning of the activity log
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.database import SessionLocal
from app.services import ActivityService

logger = logging.getLogger(__name__)


class ActivityCleanupScheduler:
    """
    Runs the activity retention cleanup once a day
    """
    
    JOB_ID = "activity_cleanup"
    
    def __init__(self, session_factory=SessionLocal, hour: int = 3):
        self.scheduler = AsyncIOScheduler()
        self.session_factory = session_factory
        self.hour = hour
        self.is_running = False
    
    def start(self):
        """Start the scheduler"""
        if self.is_running:
            return
        self.scheduler.add_job(
            func=self.run_cleanup,
            trigger=CronTrigger(hour=self.hour, minute=0),
            id=self.JOB_ID,
            name="Activity Log Retention",
            replace_existing=True
        )
        self.scheduler.start()
        self.is_running = True
        logger.info("Activity cleanup scheduler started")
    
    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Activity cleanup scheduler stopped")
    
    def run_cleanup(self) -> int:
        db = self.session_factory()
        try:
            return ActivityService.cleanup(db)
        except Exception as e:
            logger.error(f"Activity cleanup failed: {e}")
            raise
        finally:
            db.close()
