"""
Per-transition notification outbox.

Services queue messages on an Outbox while they hold the transaction; each
message is recorded in the notifications table alongside the state change.
Delivery happens after commit (deliver_notifications, usually as a FastAPI
background task) so a dead bot can never fail or roll back a transition.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from songbird.db.models.notifications import NotificationLog
from songbird.db.models.users import Users, UserRole

from .notifier import BaseNotifier, get_notifier


logger = logging.getLogger(__name__)


@dataclass
class PendingNotification:
    user_id: int
    chat_id: Optional[str]
    kind: str
    message: str


class Outbox:
    def __init__(self, db: Session):
        self.db = db
        self.pending: list[PendingNotification] = []

    def notify_user(self, user: Users, kind: str, message: str) -> None:
        self.db.add(NotificationLog(
            user_id=user.id,
            type=kind,
            message=message,
            sent_via="telegram" if user.telegram_id else "none",
        ))
        self.pending.append(PendingNotification(
            user_id=user.id,
            chat_id=user.telegram_id,
            kind=kind,
            message=message,
        ))

    def notify_admins(self, kind: str, message: str) -> None:
        stmt = select(Users).where(
            Users.role == UserRole.ADMIN,
            Users.is_active == True,
        ).order_by(Users.id)
        for admin in self.db.execute(stmt).scalars().all():
            self.notify_user(admin, kind, message)

    def drain(self) -> list[PendingNotification]:
        items, self.pending = self.pending, []
        return items


def deliver_notifications(
    notifications: list[PendingNotification],
    notifier: Optional[BaseNotifier] = None,
) -> int:
    """Send queued notifications. Returns how many the channel accepted."""
    if not notifications:
        return 0

    if notifier is None:
        try:
            notifier = get_notifier()
        except ValueError as e:
            logger.error(f"Notifications dropped: {e}")
            return 0

    sent = 0
    for item in notifications:
        if not item.chat_id:
            logger.info(f"Notification '{item.kind}' for user {item.user_id} not sent (no Telegram ID linked)")
            continue
        if notifier.send_notification(item.chat_id, item.message):
            sent += 1

    logger.info(f"Delivered {sent}/{len(notifications)} notifications via {notifier.notifier_name()}")
    return sent
