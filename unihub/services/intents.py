# unihub/services/intents.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from langchain_core.runnables import Runnable, RunnableLambda

from unihub.models.records import ContextSnapshot
from unihub.utils import responses

Matcher = Callable[[str], bool]
Responder = Callable[[ContextSnapshot], str]


@dataclass(frozen=True)
class Rule:
    name: str
    matcher: Matcher
    responder: Responder


def contains_any(*keywords: str) -> Matcher:
    """Matcher that fires when the normalized text contains any keyword."""
    def matcher(text: str) -> bool:
        return any(keyword in text for keyword in keywords)
    return matcher


def format_post_date(value: str) -> str:
    """Date part of an ISO timestamp, or the stored text if it is not one."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except (AttributeError, ValueError):
        return value


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"• {line}" for line in lines)


# Responders
def respond_notices(snapshot: ContextSnapshot) -> str:
    if not snapshot.notices:
        return responses.NO_NOTICES
    items = _bullets([f"{n.title} ({format_post_date(n.posted_at)})" for n in snapshot.notices])
    return responses.NOTICES_FOUND.format(items=items)


def respond_exams(snapshot: ContextSnapshot) -> str:
    if not snapshot.upcoming_exams:
        return responses.NO_EXAMS
    items = _bullets([f"{e.subject} - {e.date} at {e.time}" for e in snapshot.upcoming_exams])
    return responses.EXAMS_FOUND.format(items=items)


def respond_events(snapshot: ContextSnapshot) -> str:
    if not snapshot.upcoming_events:
        return responses.NO_EVENTS
    items = _bullets([f"{e.title} - {e.date}" for e in snapshot.upcoming_events])
    return responses.EVENTS_FOUND.format(items=items)


def respond_help(snapshot: ContextSnapshot) -> str:
    return responses.HELP.format(user_name=snapshot.user_name, user_role=snapshot.user_role)


def _fixed(text: str) -> Responder:
    return lambda snapshot: text


DEFAULT_RULES: List[Rule] = [
    Rule("notices", contains_any("notice", "announcement"), respond_notices),
    Rule("exams", contains_any("exam", "test"), respond_exams),
    Rule("events", contains_any("calendar", "event"), respond_events),
    Rule("semester", contains_any("semester", "academic year"), _fixed(responses.SEMESTER)),
    Rule("profile", contains_any("profile", "account"), _fixed(responses.PROFILE)),
    Rule("help", contains_any("help", "how to"), respond_help),
    Rule("grading", contains_any("gpa", "grade"), _fixed(responses.GRADING)),
    Rule("university", contains_any("university", "vavuniya"), _fixed(responses.UNIVERSITY)),
]


class IntentResolver:
    """
    Ordered rule cascade: the first rule whose matcher accepts the normalized
    message answers it. When no rule matches, the fallback reply echoes the
    query, so every input gets a non-empty answer.

    `resolve` is a coroutine so the cascade can later be swapped for a chain
    that calls out to a model without changing callers.
    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None):
        self.rules: List[Rule] = list(DEFAULT_RULES if rules is None else rules)

    @staticmethod
    def normalize(raw_text: str) -> str:
        return raw_text.casefold()

    def match(self, raw_text: str) -> Optional[Rule]:
        text = self.normalize(raw_text)
        for rule in self.rules:
            if rule.matcher(text):
                return rule
        return None

    async def resolve(self, raw_text: str, snapshot: ContextSnapshot) -> str:
        rule = self.match(raw_text)
        if rule is None:
            return responses.FALLBACK.format(query=raw_text)
        return rule.responder(snapshot)

    async def _ainvoke(self, inputs: Dict[str, Any]) -> str:
        return await self.resolve(inputs["message"], inputs["snapshot"])

    def as_runnable(self) -> Runnable:
        """Expose the resolver with the same `ainvoke` shape as an LLM chain."""
        return RunnableLambda(self._ainvoke)
