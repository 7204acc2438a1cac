"""Functional helpers over sequences, call-rate control and dataclass field tags."""

from __future__ import annotations

import dataclasses
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import (
    Any,
    Callable,
    Hashable,
    Iterable,
    Optional,
    Sequence,
    TypeVar,
)

from jetorm.helpers import RetryError, is_zero
from jetorm.validation import Validator

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


def retry_with_condition(
    max_attempts: int,
    backoff: float,
    fn: Callable[[], T],
    condition: Optional[Callable[[Exception], bool]],
) -> T:
    """Call ``fn`` up to ``max_attempts`` times, doubling the pause between tries.

    When ``condition`` is given and returns False for a failure, that failure
    is raised at once. When every attempt fails, RetryError is raised.
    """
    last_error: Optional[Exception] = None
    pause = backoff
    for attempt in range(max_attempts):
        if attempt > 0:
            time.sleep(pause)
            pause *= 2
        try:
            return fn()
        except Exception as exc:
            if condition is not None and not condition(exc):
                raise
            last_error = exc
    raise RetryError(max_attempts, last_error) from last_error


def parallel_with_limit(limit: int, *fns: Callable[[], Any]) -> None:
    """Run the callables with at most ``limit`` at a time.

    A ``limit`` of zero or less runs them all at once. The first exception
    to finish is re-raised.
    """
    if not fns:
        return
    workers = limit if limit > 0 else len(fns)
    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [executor.submit(fn) for fn in fns]
        for future in as_completed(futures):
            error = future.exception()
            if error is not None:
                raise error
    finally:
        executor.shutdown(wait=False)


def debounce(duration: float, fn: Callable[[], Any]) -> Callable[[], None]:
    """Return a callable that runs ``fn`` once ``duration`` seconds after its last call."""
    lock = threading.Lock()
    timer: Optional[threading.Timer] = None

    def debounced() -> None:
        nonlocal timer
        with lock:
            if timer is not None:
                timer.cancel()
            timer = threading.Timer(duration, fn)
            timer.daemon = True
            timer.start()

    return debounced


def throttle(duration: float, fn: Callable[[], Any]) -> Callable[[], None]:
    """Return a callable that runs ``fn`` at most once per ``duration`` seconds."""
    lock = threading.Lock()
    last_call = -math.inf

    def throttled() -> None:
        nonlocal last_call
        with lock:
            now = time.monotonic()
            if now - last_call < duration:
                return
            last_call = now
        fn()

    return throttled


def memoize(fn: Callable[[T], R]) -> Callable[[T], R]:
    """Cache the results of a one-argument function by argument."""
    cache: dict[Any, Any] = {}

    def memoized(value: T) -> R:
        if value in cache:
            return cache[value]
        result = fn(value)
        cache[value] = result
        return result

    return memoized


def pipeline(*fns: Callable[[T], T]) -> Callable[[T], T]:
    """Return a function applying ``fns`` in order, left to right."""

    def run(value: T) -> T:
        for fn in fns:
            value = fn(value)
        return value

    return run


def compose(*fns: Callable[[T], T]) -> Callable[[T], T]:
    """Same as :func:`pipeline`: the functions apply left to right."""
    return pipeline(*fns)


def chain(value: T, *fns: Callable[[T], T]) -> T:
    """Apply ``fns`` to ``value`` in order and return the result."""
    return pipeline(*fns)(value)


def transform(items: Iterable[T], fn: Callable[[T], U]) -> list[U]:
    """Map ``fn`` over ``items``."""
    return [fn(item) for item in items]


def fold(items: Iterable[T], initial: U, fn: Callable[[U, T], U]) -> U:
    """Reduce ``items`` from the left, starting from ``initial``."""
    result = initial
    for item in items:
        result = fn(result, item)
    return result


def partition(
    items: Iterable[T], predicate: Callable[[T], bool]
) -> tuple[list[T], list[T]]:
    """Split into the items that satisfy ``predicate`` and those that do not."""
    matching: list[T] = []
    rest: list[T] = []
    for item in items:
        (matching if predicate(item) else rest).append(item)
    return matching, rest


def zip_pairs(first: Iterable[T], second: Iterable[U]) -> list[tuple[T, U]]:
    """Pair items up to the length of the shorter input."""
    return list(zip(first, second))


def unzip_pairs(pairs: Iterable[tuple[T, U]]) -> tuple[list[T], list[U]]:
    """Split pairs into a list of first items and a list of second items."""
    firsts: list[T] = []
    seconds: list[U] = []
    for left, right in pairs:
        firsts.append(left)
        seconds.append(right)
    return firsts, seconds


def flatten(groups: Iterable[Iterable[T]]) -> list[T]:
    """Concatenate the inner sequences."""
    return [item for group in groups for item in group]


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split into consecutive lists of ``size`` items; a size below one counts as one."""
    step = max(size, 1)
    return [list(items[start:start + step]) for start in range(0, len(items), step)]


def intersect(first: Iterable[T], second: Iterable[T]) -> list[T]:
    """Items of ``second`` also in ``first``, in ``second``'s order, without repeats."""
    remaining = set(first)
    result: list[T] = []
    for item in second:
        if item in remaining:
            result.append(item)
            remaining.discard(item)
    return result


def difference(first: Iterable[T], second: Iterable[T]) -> list[T]:
    """Items of ``first`` that are not in ``second``, in order."""
    excluded = set(second)
    return [item for item in first if item not in excluded]


def union(first: Iterable[T], second: Iterable[T]) -> list[T]:
    """Items of both inputs without repeats, in order of first appearance."""
    return list(dict.fromkeys([*first, *second]))


def all_match(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    """True when every item satisfies ``predicate``."""
    return all(predicate(item) for item in items)


def any_match(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    """True when some item satisfies ``predicate``."""
    return any(predicate(item) for item in items)


def none_match(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    """True when no item satisfies ``predicate``."""
    return not any_match(items, predicate)


def count_matching(items: Iterable[T], predicate: Callable[[T], bool]) -> int:
    """Count the items that satisfy ``predicate``."""
    return sum(1 for item in items if predicate(item))


def first_match(items: Iterable[T], predicate: Callable[[T], bool]) -> Optional[T]:
    """The first item satisfying ``predicate``, or None."""
    return next((item for item in items if predicate(item)), None)


def last_match(items: Sequence[T], predicate: Callable[[T], bool]) -> Optional[T]:
    """The last item satisfying ``predicate``, or None."""
    return next((item for item in reversed(items) if predicate(item)), None)


def take(items: Sequence[T], n: int) -> list[T]:
    """The first ``n`` items."""
    if n <= 0:
        return []
    return list(items[:n])


def drop(items: Sequence[T], n: int) -> list[T]:
    """Everything after the first ``n`` items."""
    if n <= 0:
        return list(items)
    return list(items[n:])


def take_while(items: Iterable[T], predicate: Callable[[T], bool]) -> list[T]:
    """The leading items that satisfy ``predicate``."""
    result: list[T] = []
    for item in items:
        if not predicate(item):
            break
        result.append(item)
    return result


def drop_while(items: Iterable[T], predicate: Callable[[T], bool]) -> list[T]:
    """Everything from the first item that fails ``predicate`` on."""
    iterator = iter(items)
    for item in iterator:
        if not predicate(item):
            return [item, *iterator]
    return []


def reverse(items: Sequence[T]) -> list[T]:
    """A reversed copy."""
    return list(reversed(items))


def shuffle(items: Sequence[T], rng: Callable[[], int]) -> list[T]:
    """A Fisher-Yates shuffled copy, drawing swap positions from ``rng``."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng() % (i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items into lists by ``key``, keeping their order."""
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def index_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, T]:
    """Map each key to the last item that produced it."""
    return {key(item): item for item in items}


def total(values: Iterable[Any]) -> Any:
    """The sum of the values; zero when there are none."""
    return sum(values)


def average(values: Sequence[float]) -> float:
    """The arithmetic mean; zero when there are no values."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def min_value(values: Sequence[T]) -> Optional[T]:
    """The smallest value, or None when there are none."""
    return min(values) if values else None


def max_value(values: Sequence[T]) -> Optional[T]:
    """The largest value, or None when there are none."""
    return max(values) if values else None


def _dataclass_fields(entity: Any) -> tuple[dataclasses.Field, ...]:
    if not dataclasses.is_dataclass(entity):
        raise TypeError("entity must be a dataclass or dataclass instance")
    return dataclasses.fields(entity)


def field_tags(entity: Any, tag_name: str) -> dict[str, str]:
    """Map each public field name to its non-empty ``tag_name`` metadata."""
    tags: dict[str, str] = {}
    for spec in _dataclass_fields(entity):
        if spec.name.startswith("_"):
            continue
        tag = str(spec.metadata.get(tag_name, ""))
        if tag:
            tags[spec.name] = tag
    return tags


def field_by_tag(entity: Any, tag_name: str, tag_value: str) -> Optional[str]:
    """The name of the first field whose ``tag_name`` metadata contains ``tag_value``."""
    for spec in _dataclass_fields(entity):
        if tag_value in str(spec.metadata.get(tag_name, "")):
            return spec.name
    return None


def validate_struct(entity: Any) -> Any:
    """Validate a dataclass entity by its ``validate`` tags."""
    return Validator().validate(entity)


def deep_equal(a: Any, b: Any) -> bool:
    """True when both values have the same type and compare equal."""
    return type(a) is type(b) and a == b


def is_nil(value: Any) -> bool:
    """True for None."""
    return value is None


def is_zero_value(value: Any) -> bool:
    """True for None, False, numeric zero and empty strings or containers."""
    return is_zero(value)