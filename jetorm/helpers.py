"""General helpers: retries, timeouts, parallel runs and entity id access."""

from __future__ import annotations

import dataclasses
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, as_completed
from typing import Any, Callable, Hashable, Iterable, Optional, TypeVar

T = TypeVar("T")

_PRIMARY_KEY = "primary_key"


class RetryError(Exception):
    """Raised when every attempt of a retried operation has failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]) -> None:
        super().__init__(f"retry failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def retry_with_backoff(
    max_attempts: int, initial_backoff: float, fn: Callable[[], T]
) -> T:
    """Call ``fn`` up to ``max_attempts`` times, doubling the pause between tries.

    Returns what ``fn`` returns on its first success; raises RetryError,
    chained to the last failure, when every attempt raised.
    """
    last_error: Optional[Exception] = None
    backoff = initial_backoff
    for attempt in range(max_attempts):
        if attempt > 0:
            time.sleep(backoff)
            backoff *= 2
        try:
            return fn()
        except Exception as exc:
            last_error = exc
    raise RetryError(max_attempts, last_error) from last_error


def retry(max_attempts: int, fn: Callable[[], T]) -> T:
    """Retry ``fn`` with exponential backoff starting at one second."""
    return retry_with_backoff(max_attempts, 1.0, fn)


def run_with_timeout(timeout: float, fn: Callable[[threading.Event], T]) -> T:
    """Call ``fn`` with an event that is set once ``timeout`` seconds have passed.

    ``fn`` should watch the event and stop its work when it is set.
    """
    expired = threading.Event()
    timer = threading.Timer(timeout, expired.set)
    timer.daemon = True
    timer.start()
    try:
        return fn(expired)
    finally:
        timer.cancel()


def parallel(*fns: Callable[[], Any]) -> None:
    """Run the callables concurrently; re-raise the first exception to finish."""
    if not fns:
        return
    executor = ThreadPoolExecutor(max_workers=len(fns))
    try:
        futures = [executor.submit(fn) for fn in fns]
        for future in as_completed(futures):
            error = future.exception()
            if error is not None:
                raise error
    finally:
        executor.shutdown(wait=False)


def _primary_key_field(entity: Any) -> Optional[dataclasses.Field]:
    if not dataclasses.is_dataclass(entity) or isinstance(entity, type):
        return None
    for candidate in dataclasses.fields(entity):
        if _PRIMARY_KEY in str(candidate.metadata.get("jet", "")):
            return candidate
    return None


def extract_id(entity: Any) -> Any:
    """Return the value of the dataclass field whose ``jet`` metadata marks the primary key."""
    pk = _primary_key_field(entity)
    if pk is None:
        raise ValueError("could not extract ID from entity")
    return getattr(entity, pk.name)


def set_id(entity: Any, value: Any) -> None:
    """Set the primary-key field of a dataclass entity."""
    pk = _primary_key_field(entity)
    if pk is None:
        raise ValueError("could not set ID on entity")
    try:
        setattr(entity, pk.name, value)
    except dataclasses.FrozenInstanceError as exc:
        raise ValueError("could not set ID on entity") from exc


def is_zero(value: Any) -> bool:
    """True for None, empty containers and strings, False, and numeric zero."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, complex)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def coalesce(*values: Any) -> Any:
    """Return the first non-zero value; otherwise the last value, or None if none given."""
    for value in values:
        if not is_zero(value):
            return value
    return values[-1] if values else None


def default_if_zero(value: Any, default: Any) -> Any:
    """Return ``default`` when ``value`` is zero, else ``value``."""
    return default if is_zero(value) else value


def unique(items: Iterable[Hashable]) -> list:
    """Remove duplicates, keeping the first occurrence of each item in order."""
    return list(dict.fromkeys(items))


__all__ = [
    "FIRST_EXCEPTION",
]
del __all__