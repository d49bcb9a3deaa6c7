from .notifier import BaseNotifier, TelegramNotifier, LogNotifier, get_notifier
from .outbox import Outbox, PendingNotification, deliver_notifications
from . import templates

__all__ = [
    "BaseNotifier",
    "TelegramNotifier",
    "LogNotifier",
    "get_notifier",
    "Outbox",
    "PendingNotification",
    "deliver_notifications",
    "templates",
]
