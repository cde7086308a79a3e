# unihub/services/producers.py
"""Notifications raised by the notice board, exam schedule and calendar pages."""
from datetime import date
from typing import Any, Dict, Union

from unihub.models.notification import Notification, NotificationType
from unihub.models.records import Event, ExamSchedule, Notice
from unihub.services.notifications import NotificationBus


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: str) -> str:
    """'2024-05-10' -> 'May 10th, 2024'. Unparseable values are returned as-is."""
    try:
        parsed = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return value
    return f"{parsed.strftime('%B')} {_ordinal(parsed.day)}, {parsed.year}"


def notify_notice_posted(bus: NotificationBus, notice: Union[Notice, Dict[str, Any]]) -> Notification:
    notice = Notice.model_validate(notice)
    notice_id = getattr(notice, "id", None)
    action_url = f"/notices?id={notice_id}" if notice_id not in (None, "") else "/notices"
    return bus.add(
        title="New Notice Posted",
        message=notice.title,
        type=NotificationType.NOTICE,
        action_url=action_url,
    )


def notify_exam_scheduled(bus: NotificationBus, exam: Union[ExamSchedule, Dict[str, Any]]) -> Notification:
    exam = ExamSchedule.model_validate(exam)
    return bus.add(
        title="New Exam Scheduled",
        message=f"{exam.subject} exam scheduled for {format_long_date(exam.date)}",
        type=NotificationType.EXAM,
    )


def notify_event_created(bus: NotificationBus, event: Union[Event, Dict[str, Any]]) -> Notification:
    event = Event.model_validate(event)
    return bus.add(
        title="New Event Added",
        message=f"{event.title} on {format_long_date(event.date)}",
        type=NotificationType.EVENT,
        action_url="/calendar",
    )
