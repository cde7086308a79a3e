# unihub/services/assistant.py
import asyncio
import logging
from typing import List, Optional, Tuple

from unihub.errors import ResolutionFailure
from unihub.models.conversation import ConversationTurn, Sender, SessionState
from unihub.models.records import CurrentUser
from unihub.services.context import ContextAggregator
from unihub.services.intents import IntentResolver
from unihub.utils import responses

logger = logging.getLogger(__name__)


class AssistantSession:
    """
    One conversation with the academic assistant.

    The session resolves at most one message at a time: a `submit` that
    arrives while another is being resolved is discarded, not queued.
    Resolution failures never reach the caller; they become an assistant
    turn carrying a fixed apology.
    """

    def __init__(self,
                 aggregator: ContextAggregator,
                 resolver: IntentResolver,
                 user: CurrentUser,
                 resolve_timeout: Optional[float] = None):
        self.aggregator = aggregator
        self.resolver = resolver
        self.user = user
        self.resolve_timeout = resolve_timeout if resolve_timeout and resolve_timeout > 0 else None
        self.chain = resolver.as_runnable()
        self._state = SessionState.IDLE
        self._transcript: List[ConversationTurn] = []
        self._append(responses.GREETING.format(user_name=user.name), Sender.ASSISTANT)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_resolving(self) -> bool:
        return self._state is SessionState.RESOLVING

    @property
    def transcript(self) -> Tuple[ConversationTurn, ...]:
        return tuple(self._transcript)

    def _append(self, text: str, sender: Sender) -> ConversationTurn:
        turn = ConversationTurn(text=text, sender=sender)
        self._transcript.append(turn)
        return turn

    async def _resolve(self, message: str) -> str:
        snapshot = self.aggregator.snapshot(self.user)
        call = self.chain.ainvoke({"message": message, "snapshot": snapshot})
        if self.resolve_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.resolve_timeout)
        except asyncio.TimeoutError:
            raise ResolutionFailure(
                f"Resolution did not finish within {self.resolve_timeout}s"
            ) from None

    async def submit(self, text: str) -> None:
        """Send a user message; the reply is appended to the transcript."""
        if self.is_resolving:
            logger.debug("Dropping submission while a reply is being resolved")
            return
        message = (text or "").strip()
        if not message:
            logger.debug("Dropping blank submission")
            return

        self._state = SessionState.RESOLVING
        try:
            self._append(message, Sender.USER)
            try:
                reply = await self._resolve(message)
            except Exception:
                logger.exception("Assistant failed to resolve message")
                reply = responses.PROCESSING_ERROR
            self._append(reply, Sender.ASSISTANT)
        finally:
            self._state = SessionState.IDLE
