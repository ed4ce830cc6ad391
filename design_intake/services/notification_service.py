"""
Notification sink for user-visible toasts.
"""
import logging
from abc import ABC, abstractmethod
from typing import List
from design_intake.models.notification import Notification

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Fire-and-forget sink for toasts."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        pass


class CollectingNotifier(Notifier):
    """Keeps the toasts of one upload batch, in the order they were raised."""

    def __init__(self):
        self._notifications: List[Notification] = []

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    def notify(self, notification: Notification) -> None:
        if notification.is_destructive:
            logger.warning("%s: %s", notification.title, notification.description)
        else:
            logger.info("%s: %s", notification.title, notification.description)
        self._notifications.append(notification)
