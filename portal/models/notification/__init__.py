from portal.models.notification.notification import Notification

__all__ = ["Notification"]
