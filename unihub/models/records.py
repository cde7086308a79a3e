# unihub/models/records.py
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from typing import Annotated, Any, List
from datetime import date


def as_text(value: Any) -> str:
    """Stored text field: None reads as empty, numbers as their digits."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def as_date_text(value: Any) -> str:
    # Only string dates compare against today; anything else reads as missing
    return value if isinstance(value, str) else ""


Text = Annotated[str, BeforeValidator(as_text)]
DateText = Annotated[str, BeforeValidator(as_date_text)]


class PortalRecord(BaseModel):
    # Records are written by other parts of the portal. Only the fields the
    # assistant reads are declared; everything else rides along as extra.
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Notice(PortalRecord):
    title: Text = ""
    created_at: DateText = Field(default="", alias="createdAt")
    post_date: DateText = Field(default="", alias="postDate")

    @property
    def posted_at(self) -> str:
        """Timestamp the notice was posted, preferring `createdAt`."""
        return self.created_at or self.post_date


class Event(PortalRecord):
    title: Text = ""
    date: DateText = ""


class ExamSchedule(PortalRecord):
    subject: Text = ""
    date: DateText = ""
    time: Text = ""


class CurrentUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = "Guest"
    role: str = "student"


class ContextSnapshot(BaseModel):
    """Point-in-time view of the portal used to ground assistant answers."""

    notices: List[Notice] = Field(default_factory=list)
    upcoming_events: List[Event] = Field(default_factory=list)
    upcoming_exams: List[ExamSchedule] = Field(default_factory=list)
    current_date: date
    user_role: str
    user_name: str
