"""Per-conversation memory threaded through every `ask` call."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, replace

from skillbridge_assistant.types import DocumentRecord, JobMatch


@dataclass(frozen=True, slots=True)
class ConversationContext:
    """What a follow-up question may refer back to.

    Instances are immutable; the orchestrator returns an updated copy.
    """

    last_job_matches: tuple[JobMatch, ...] = ()
    loaded_documents: tuple[DocumentRecord, ...] = ()

    @property
    def has_prior_matches(self) -> bool:
        return bool(self.last_job_matches)

    def with_matches(self, matches: Sequence[JobMatch]) -> "ConversationContext":
        return replace(self, last_job_matches=tuple(matches))

    def with_documents(self, documents: Sequence[DocumentRecord]) -> "ConversationContext":
        return replace(self, loaded_documents=tuple(documents))


class SessionStore:
    """In-memory map from session id to its conversation context.

    Holds at most `max_sessions` entries; saving past the cap evicts the
    least recently saved session.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        self._contexts: dict[str, ConversationContext] = {}
        self._max_sessions = max_sessions
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ConversationContext:
        with self._lock:
            return self._contexts.get(session_id, ConversationContext())

    def save(self, session_id: str, context: ConversationContext) -> None:
        with self._lock:
            self._contexts.pop(session_id, None)
            self._contexts[session_id] = context
            while len(self._contexts) > self._max_sessions:
                del self._contexts[next(iter(self._contexts))]

    def drop(self, session_id: str) -> None:
        with self._lock:
            self._contexts.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)
