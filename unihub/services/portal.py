# unihub/services/portal.py
from dataclasses import dataclass
from typing import Optional

from unihub.models.records import CurrentUser
from unihub.services.assistant import AssistantSession
from unihub.services.context import ContextAggregator
from unihub.services.intents import IntentResolver
from unihub.services.notifications import NotificationBus
from unihub.services.store import RecordStore, create_store


@dataclass
class PortalServices:
    """Services shared by the whole process. Build once, pass by reference."""

    store: RecordStore
    notifications: NotificationBus
    aggregator: ContextAggregator
    resolver: IntentResolver
    resolve_timeout: Optional[float] = None

    def open_session(self, user: Optional[CurrentUser] = None) -> AssistantSession:
        """Start a conversation for `user` (default: the persisted current user)."""
        if user is None:
            user = self.aggregator.current_user()
        return AssistantSession(
            self.aggregator, self.resolver, user, resolve_timeout=self.resolve_timeout
        )


def build_services(store: Optional[RecordStore] = None,
                   resolve_timeout: Optional[float] = None) -> PortalServices:
    from unihub.config import ASSISTANT_RESOLVE_TIMEOUT

    store = store or create_store()
    return PortalServices(
        store=store,
        notifications=NotificationBus(store),
        aggregator=ContextAggregator(store),
        resolver=IntentResolver(),
        resolve_timeout=ASSISTANT_RESOLVE_TIMEOUT if resolve_timeout is None else resolve_timeout,
    )
