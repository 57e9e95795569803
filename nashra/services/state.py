"""
Per-subject request state for AI calls.

A RequestTracker belongs to one call site (an article card, the analyst
panel). It keeps one RequestState per subject and guarantees that a subject
is never fetched twice while loading, and never re-fetched once it holds a
successful result.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from nashra.errors import NashraError
from nashra.messages import DEFAULT_LANGUAGE, message

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestStatus(str, Enum):
    """Lifecycle of one AI request."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RequestState(Generic[T]):
    """Snapshot of a subject's request: status plus result or error message."""

    status: RequestStatus = RequestStatus.IDLE
    result: Optional[T] = None
    error: Optional[str] = None

    @property
    def retry_available(self) -> bool:
        return self.status is RequestStatus.ERROR


IDLE = RequestState()

Listener = Callable[[str, RequestState], None]


class RequestTracker(Generic[T]):
    """Keyed store of request states for a single call site."""

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = language
        self._states: Dict[str, RequestState] = {}
        # Identifies the live request per subject; stale results are dropped.
        self._tokens: Dict[str, object] = {}
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Registers a callback invoked on every state transition."""
        self._listeners.append(listener)

    def state(self, subject: str) -> RequestState:
        return self._states.get(subject, IDLE)

    def _set(self, subject: str, state: RequestState) -> None:
        self._states[subject] = state
        logger.debug("Request %r -> %s", subject, state.status.value)
        for listener in self._listeners:
            listener(subject, state)

    async def request(
        self, subject: str, fetch: Callable[[], Awaitable[T]]
    ) -> RequestState:
        """Fetches the subject unless it is cached or already in flight."""
        current = self.state(subject)
        if current.status is RequestStatus.SUCCESS:
            logger.debug("Reusing cached result for %r.", subject)
            return current
        if current.status is RequestStatus.LOADING:
            logger.debug("Request for %r already in flight.", subject)
            return current
        return await self._run(subject, fetch)

    async def retry(
        self, subject: str, fetch: Callable[[], Awaitable[T]]
    ) -> RequestState:
        """Re-issues a failed request. Other states are returned unchanged."""
        current = self.state(subject)
        if current.status is not RequestStatus.ERROR:
            return current
        logger.info("Retrying request for %r.", subject)
        return await self._run(subject, fetch)

    def reset(self, subject: str) -> None:
        """Discards the subject's state; a pending result for it is ignored."""
        self._tokens.pop(subject, None)
        if self._states.pop(subject, None) is not None:
            for listener in self._listeners:
                listener(subject, IDLE)

    def clear(self) -> None:
        for subject in list(self._states):
            self.reset(subject)

    async def _run(
        self, subject: str, fetch: Callable[[], Awaitable[T]]
    ) -> RequestState:
        token = object()
        self._tokens[subject] = token
        self._set(subject, RequestState(RequestStatus.LOADING))

        try:
            result = await fetch()
            outcome: RequestState = RequestState(RequestStatus.SUCCESS, result=result)
        except NashraError as e:
            outcome = RequestState(
                RequestStatus.ERROR, error=message(e.message_key, self.language)
            )
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected failure for %r.", subject)
            outcome = RequestState(
                RequestStatus.ERROR, error=message("unexpected_error", self.language)
            )

        if self._tokens.get(subject) is not token:
            logger.info("Ignoring result for abandoned request %r.", subject)
            return self.state(subject)
        del self._tokens[subject]
        self._set(subject, outcome)
        return outcome
