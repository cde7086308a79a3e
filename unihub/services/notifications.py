# unihub/services/notifications.py
import logging
from typing import Callable, List, Optional

from pydantic import ValidationError as ModelValidationError

from unihub.errors import ValidationError
from unihub.models.notification import Notification, NotificationType
from unihub.services.store import RecordStore

logger = logging.getLogger(__name__)

NOTIFICATIONS_KEY = "notifications"

Subscriber = Callable[[List[Notification], int], None]


class NotificationBus:
    """
    Owns the persisted notification collection.

    Every mutation writes the full list back to the store and then calls each
    subscriber, in registration order, with the new list and unread count.
    """

    def __init__(self, store: RecordStore, key: str = NOTIFICATIONS_KEY):
        self.store = store
        self.key = key
        self._subscribers: List[Subscriber] = []
        self._notifications: List[Notification] = self._load()

    def _load(self) -> List[Notification]:
        notifications = []
        seen_ids = set()
        for record in self.store.get(self.key):
            try:
                notification = Notification.model_validate(record)
            except ModelValidationError as e:
                logger.warning(f"Skipping malformed notification record: {e.error_count()} error(s)")
                continue
            if notification.id in seen_ids:
                logger.warning(f"Skipping duplicate notification id {notification.id}")
                continue
            seen_ids.add(notification.id)
            notifications.append(notification)
        return notifications

    # Read side
    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if not n.read)

    def get(self, notification_id: str) -> Optional[Notification]:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def recent(self, limit: int = 5) -> List[Notification]:
        """Newest notifications first, as shown on the dashboard."""
        return self._notifications[:limit]

    def reload(self) -> None:
        """Re-read the persisted list; another writer may have replaced it."""
        self._notifications = self._load()

    # Subscriptions
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` and return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        self.store.set(self.key, [n.to_record() for n in self._notifications])

        snapshot = self.notifications
        unread = self.unread_count
        for callback in self._subscribers[:]:  # Subscribers may unsubscribe while notified
            try:
                callback(list(snapshot), unread)
            except Exception:
                logger.exception(f"Notification subscriber {callback!r} failed")

    # Mutations
    def add(self, title: str, message: str,
            type: NotificationType = NotificationType.SYSTEM,
            action_url: Optional[str] = None) -> Notification:
        if not title or not title.strip():
            raise ValidationError("Notification title must not be empty")
        if not message or not message.strip():
            raise ValidationError("Notification message must not be empty")
        try:
            type = NotificationType(type)
        except ValueError:
            raise ValidationError(f"Unknown notification type: {type!r}") from None

        notification = Notification(
            title=title,
            message=message,
            type=type,
            action_url=action_url,
        )
        self._notifications.insert(0, notification)
        logger.debug(f"Added {notification.type.value} notification {notification.id}")
        self._publish()
        return notification

    def mark_as_read(self, notification_id: str) -> None:
        self._notifications = [
            n.model_copy(update={"read": True}) if n.id == notification_id else n
            for n in self._notifications
        ]
        self._publish()

    def mark_all_as_read(self) -> None:
        self._notifications = [n.model_copy(update={"read": True}) for n in self._notifications]
        self._publish()

    def remove(self, notification_id: str) -> None:
        self._notifications = [n for n in self._notifications if n.id != notification_id]
        self._publish()

    def clear_all(self) -> None:
        self._notifications = []
        self._publish()
