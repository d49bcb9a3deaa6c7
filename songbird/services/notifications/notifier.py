"""
Notification sink abstraction.
Telegram is the only real channel; LogNotifier stands in when no bot is configured.
"""

import logging
import httpx
from abc import ABC, abstractmethod
from typing import Optional

from songbird.core.config import settings


logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    """Best-effort message delivery. Implementations must never raise."""

    @abstractmethod
    def send_notification(self, chat_id: str, message: str) -> bool:
        """Deliver one message; True if the channel accepted it."""
        ...

    @abstractmethod
    def notifier_name(self) -> str:
        ...


class TelegramNotifier(BaseNotifier):
    """Telegram Bot API over plain REST (no bot SDK, we never poll)."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.token = token or settings.TELEGRAM_BOT_TOKEN
        if not self.token:
            raise ValueError("TELEGRAM_BOT_TOKEN not set")
        self.api_url = (api_url or settings.TELEGRAM_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.NOTIFICATION_TIMEOUT_SECONDS

    def notifier_name(self) -> str:
        return "telegram"

    def send_notification(self, chat_id: str, message: str) -> bool:
        if not chat_id:
            logger.info("Notification not sent (no Telegram ID)")
            return False

        url = f"{self.api_url}/bot{self.token}/sendMessage"
        payload = {
            "chat_id": chat_id,
            "text": message,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }

        try:
            response = httpx.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Telegram API HTTP error for {chat_id}: {e.response.status_code} - {e.response.text}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send Telegram notification to {chat_id}: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected Telegram error for {chat_id}: {e}")
            return False

        logger.info(f"Telegram notification sent to {chat_id}")
        return True


class LogNotifier(BaseNotifier):
    """Writes messages to the log instead of delivering them."""

    def notifier_name(self) -> str:
        return "log"

    def send_notification(self, chat_id: str, message: str) -> bool:
        logger.info(f"Notification not sent (notifications disabled) for {chat_id}: {message!r}")
        return False


def get_notifier() -> BaseNotifier:
    """Factory for the configured notifier."""
    name = settings.NOTIFIER

    if name == "telegram":
        if not settings.TELEGRAM_BOT_TOKEN:
            logger.warning("Telegram notifications disabled (TELEGRAM_BOT_TOKEN not set)")
            return LogNotifier()
        return TelegramNotifier()
    elif name == "log":
        return LogNotifier()
    else:
        raise ValueError(f"Unknown notifier: {name}")
