# unihub/models/conversation.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone
from enum import Enum
import uuid


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"


class ConversationTurn(BaseModel):
    """One message in an assistant transcript. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
