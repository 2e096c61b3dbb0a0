from liverisk.services.activity.log import ActivityLog

__all__ = ["ActivityLog"]
