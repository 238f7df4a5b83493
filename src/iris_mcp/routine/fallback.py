"""Walk document name candidates against a lookup with bounded retry.

For each candidate the lookup is attempted at most ``max_attempts`` times.
Only "wrong name" failures (HTTP 400/404) move on to the next candidate.
Everything else ends the walk: connectivity and auth problems immediately,
gateway errors after one retry of the same candidate. A persistent gateway
error on one candidate is terminal even if later candidates might work, so
that a tool call stays responsive when the backend is degraded.
"""

import asyncio
import logging
from enum import Enum
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Iterable
from typing import Optional

from attrs import define
from attrs import field

from ..client.errors import ErrorKind
from ..client.errors import auth_message
from ..client.errors import classify_error
from ..client.errors import connectivity_message
from ..client.errors import describe_http_error
from ..client.errors import status_of

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2
RETRY_DELAY_SECONDS = 0.25

Lookup = Callable[[str], Awaitable[Any]]


class Outcome(str, Enum):
    """What to do after one lookup attempt."""

    SUCCESS = "success"
    NEXT_CANDIDATE = "next_candidate"
    RETRY = "retry"
    ABORT_CONNECTIVITY = "abort_connectivity"
    ABORT_AUTH = "abort_auth"
    ABORT_GENERIC = "abort_generic"


class FetchStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ABORTED = "aborted"


def decide_outcome(error: Optional[BaseException], attempt: int, max_attempts: int = MAX_ATTEMPTS) -> Outcome:
    """Decide the next step after attempt number ``attempt`` (1-based)."""
    if error is None:
        return Outcome.SUCCESS

    kind = classify_error(error)
    if kind == ErrorKind.CONNECTIVITY:
        return Outcome.ABORT_CONNECTIVITY
    if kind == ErrorKind.NOT_FOUND:
        return Outcome.NEXT_CANDIDATE
    if kind == ErrorKind.AUTHORIZATION:
        return Outcome.ABORT_AUTH
    if kind == ErrorKind.TRANSIENT and attempt < max_attempts:
        return Outcome.RETRY
    return Outcome.ABORT_GENERIC


@define
class AttemptRecord:
    candidate: str
    status: int | None
    message: str


@define
class FetchResult:
    status: FetchStatus
    candidate: str | None = field(default=None)
    document: Any = field(default=None)
    outcome: Outcome | None = field(default=None)
    message: str = field(default="")
    attempts: list[AttemptRecord] = field(factory=list)

    @property
    def found(self) -> bool:
        return self.status == FetchStatus.FOUND

    @property
    def tried(self) -> list[str]:
        """Candidate names in the order they were first attempted."""
        names: list[str] = []
        for record in self.attempts:
            if record.candidate not in names:
                names.append(record.candidate)
        return names

    def to_text(self) -> str:
        if self.status == FetchStatus.NOT_FOUND:
            lines = [self.message, "Tried:"]
            lines.extend(f"- {name}" for name in self.tried)
            return "\n".join(lines)
        return self.message


def _abort_message(outcome: Outcome, candidate: str, error: BaseException) -> str:
    if outcome == Outcome.ABORT_CONNECTIVITY:
        return connectivity_message(error)
    if outcome == Outcome.ABORT_AUTH:
        return auth_message(status_of(error) or 0)
    return f"Failed to fetch {candidate}: {describe_http_error(error)}"


async def fetch_with_fallback(
    candidates: Iterable[str],
    lookup: Lookup,
    *,
    max_attempts: int = MAX_ATTEMPTS,
    retry_delay: float = RETRY_DELAY_SECONDS,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> FetchResult:
    """
    Try each candidate in order until one is found or the walk is aborted.

    Args:
        candidates: Document names in priority order. Duplicates are skipped.
        lookup: Coroutine function fetching one document by name; raises on failure.
        max_attempts: Attempts per candidate (only gateway errors are retried).
        retry_delay: Seconds to wait before retrying the same candidate.
        sleep: Awaitable sleep, replaceable in tests.

    Returns:
        FetchResult with status FOUND, NOT_FOUND (every candidate was 400/404)
        or ABORTED.
    """
    attempts: list[AttemptRecord] = []

    for candidate in dict.fromkeys(candidates):
        for attempt in range(1, max_attempts + 1):
            try:
                document = await lookup(candidate)
            except Exception as error:
                outcome = decide_outcome(error, attempt, max_attempts)
                attempts.append(AttemptRecord(candidate=candidate, status=status_of(error), message=str(error)))
                logger.debug(f"Lookup of {candidate} (attempt {attempt}) failed: {outcome.value}")

                if outcome == Outcome.NEXT_CANDIDATE:
                    break
                if outcome == Outcome.RETRY:
                    await sleep(retry_delay)
                    continue

                message = _abort_message(outcome, candidate, error)
                logger.warning(f"Aborting document lookup: {message}")
                return FetchResult(
                    status=FetchStatus.ABORTED,
                    candidate=candidate,
                    outcome=outcome,
                    message=message,
                    attempts=attempts,
                )

            return FetchResult(
                status=FetchStatus.FOUND,
                candidate=candidate,
                document=document,
                outcome=Outcome.SUCCESS,
                attempts=attempts,
            )

    return FetchResult(
        status=FetchStatus.NOT_FOUND,
        message="No document found for any candidate name. Make sure the class is compiled and its generated routine exists in the namespace.",
        attempts=attempts,
    )
