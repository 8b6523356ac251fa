# Jobs Package - Scheduled background tasks
from .activity_cleanup import ActivityCleanupScheduler

__all__ = ["ActivityCleanupScheduler"]
