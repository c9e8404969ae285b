# Application Services
from . import notification_factory
from .notification_dispatcher import NotificationDispatcher, PendingReceipt

__all__ = ["NotificationDispatcher", "PendingReceipt", "notification_factory"]
