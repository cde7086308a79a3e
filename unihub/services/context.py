# unihub/services/context.py
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import ValidationError as ModelValidationError

from unihub.models.records import (
    ContextSnapshot, CurrentUser, Event, ExamSchedule, Notice, PortalRecord
)
from unihub.services.store import RecordStore

logger = logging.getLogger(__name__)

NOTICES_KEY = "notices"
EVENTS_KEY = "events"
EXAMS_KEY = "examSchedules"
CURRENT_USER_KEY = "currentUser"

SNAPSHOT_LIMIT = 5

R = TypeVar("R", bound=PortalRecord)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ContextAggregator:
    """Reads the portal collections into a fresh ContextSnapshot per request."""

    def __init__(self, store: RecordStore, today: Callable[[], date] = utc_today):
        self.store = store
        self.today = today

    def _records(self, key: str, model: Type[R]) -> List[R]:
        records = []
        for raw in self.store.get(key):
            try:
                records.append(model.model_validate(raw))
            except ModelValidationError:
                logger.warning(f"Skipping malformed record in '{key}'")
        return records

    def _upcoming(self, key: str, model: Type[R], current: str) -> List[R]:
        # Filter then take the first survivors in stored order; no date sort.
        upcoming = [
            record for record in self._records(key, model)
            if record.date and record.date >= current
        ]
        return upcoming[:SNAPSHOT_LIMIT]

    def snapshot(self, current_user: CurrentUser) -> ContextSnapshot:
        current_date = self.today()
        current = current_date.isoformat()
        return ContextSnapshot(
            notices=self._records(NOTICES_KEY, Notice)[:SNAPSHOT_LIMIT],
            upcoming_events=self._upcoming(EVENTS_KEY, Event, current),
            upcoming_exams=self._upcoming(EXAMS_KEY, ExamSchedule, current),
            current_date=current_date,
            user_role=current_user.role,
            user_name=current_user.name,
        )

    def current_user(self, default: Optional[CurrentUser] = None) -> CurrentUser:
        """The signed-in user persisted by the auth pages, or `default`."""
        record: Optional[Dict[str, Any]] = self.store.get_record(CURRENT_USER_KEY)
        if record is not None:
            try:
                return CurrentUser.model_validate(record)
            except ModelValidationError:
                logger.warning(f"Ignoring malformed '{CURRENT_USER_KEY}' record")
        return default or CurrentUser()
