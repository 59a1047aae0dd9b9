"""View state for one browser session.

The screen is always exactly one of Idle, Analyzing, Results or Error. Each
variant carries only the data that screen needs, and SessionController is
the only thing that moves between them.

Every request gets a ticket. A response is applied only while the state
still carries the ticket it was issued for, so a reply that arrives after a
reset (or after a newer request) is dropped instead of resurrecting an old
screen.
"""
import itertools
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional, Tuple, Union

import pytz

from plantlens import prompts
from plantlens.models import ASSISTANT, USER, ConversationTurn, PlantRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Analyzing:
    image: bytes
    ticket: int


@dataclass(frozen=True)
class Results:
    image: bytes
    record: PlantRecord
    transcript: Tuple[ConversationTurn, ...]
    chat: Any
    pending: Optional[int] = None

    @property
    def awaiting_reply(self):
        return self.pending is not None


@dataclass(frozen=True)
class Error:
    message: str
    image: bytes = b""


ViewState = Union[Idle, Analyzing, Results, Error]


class SessionController:
    def __init__(self, clock=None):
        self.state: ViewState = Idle()
        self.generation = 0
        self._tickets = itertools.count(1)
        self._clock = clock or (lambda: datetime.now(pytz.utc))

    def _turn(self, role, text):
        return ConversationTurn(role=role, text=text, created_at=self._clock())

    def _is_current(self, ticket, kind, attr):
        current = getattr(self.state, attr, None) if isinstance(self.state, kind) else None
        if current is None or current != ticket:
            logger.debug("Dropping stale response for ticket %s (state=%s)", ticket, type(self.state).__name__)
            return False
        return True

    # --- image classification ---

    def submit_image(self, image_bytes):
        """Idle -> Analyzing. Returns the classify ticket, or None if the event does not apply."""
        if not isinstance(self.state, Idle) or not image_bytes:
            return None
        ticket = next(self._tickets)
        self.generation += 1
        self.state = Analyzing(image=bytes(image_bytes), ticket=ticket)
        return ticket

    def classification_succeeded(self, ticket, record, chat):
        if not self._is_current(ticket, Analyzing, "ticket"):
            return False
        greeting = self._turn(ASSISTANT, prompts.get_greeting(record))
        self.state = Results(image=self.state.image, record=record, transcript=(greeting,), chat=chat)
        return True

    def classification_failed(self, ticket, cause=None):
        if not self._is_current(ticket, Analyzing, "ticket"):
            return False
        logger.warning("Classification failed: %s", cause)
        self.state = Error(message=prompts.CLASSIFICATION_FAILED_MESSAGE, image=self.state.image)
        return True

    def run_analysis(self, gateway):
        """Classify the image being analyzed and apply the outcome."""
        if not isinstance(self.state, Analyzing):
            return False
        ticket, image = self.state.ticket, self.state.image
        try:
            record = gateway.classify(image)
            chat = gateway.start_chat(record)
        except Exception as e:
            logger.exception("Error analyzing plant")
            return self.classification_failed(ticket, e)
        return self.classification_succeeded(ticket, record, chat)

    # --- conversation ---

    def send_message(self, text):
        """Append the user's turn right away. Returns the reply ticket, or None if ignored."""
        state = self.state
        if not isinstance(state, Results) or state.awaiting_reply or not text or not text.strip():
            return None
        ticket = next(self._tickets)
        turn = self._turn(USER, text)
        self.state = replace(state, transcript=state.transcript + (turn,), pending=ticket)
        return ticket

    def reply_received(self, ticket, text):
        if not self._is_current(ticket, Results, "pending"):
            return False
        state = self.state
        turn = self._turn(ASSISTANT, text)
        self.state = replace(state, transcript=state.transcript + (turn,), pending=None)
        return True

    def run_reply(self):
        """Send the pending user turn through the chat session and append the answer."""
        state = self.state
        if not isinstance(state, Results) or not state.awaiting_reply:
            return False
        ticket = state.pending
        question = state.transcript[-1].text
        try:
            reply = state.chat.send(question)
        except Exception:
            logger.exception("Chat error")
            reply = prompts.CHAT_UNAVAILABLE_REPLY
        return self.reply_received(ticket, reply)

    # --- reset ---

    def reset(self):
        self.state = Idle()
        self.generation += 1
