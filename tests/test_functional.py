import threading
import time
from dataclasses import dataclass, field

import pytest

from jetorm import functional as fx
from jetorm.helpers import RetryError
from jetorm.validation import ValidationError


@dataclass
class Tagged:
    id: int = field(default=0, metadata={"jet": "primary_key,auto_increment", "db": "id"})
    email: str = field(default="", metadata={"db": "email", "validate": "required,email"})
    plain: str = ""
    _hidden: str = field(default="", metadata={"db": "hidden"})


def test_retry_with_condition_succeeds_on_third_attempt():
    attempts = []

    def op():
        attempts.append(1)
        if len(attempts) < 3:
            raise RuntimeError(f"attempt {len(attempts)}")
        return "done"

    result = fx.retry_with_condition(3, 0.01, op, lambda err: True)
    assert result == "done"
    assert len(attempts) == 3


def test_retry_with_condition_exhausts_attempts():
    attempts = []

    def op():
        attempts.append(1)
        raise RuntimeError("boom")

    with pytest.raises(RetryError) as info:
        fx.retry_with_condition(2, 0.001, op, None)
    assert info.value.attempts == 2
    assert len(attempts) == 2


def test_retry_with_condition_stops_when_condition_refuses():
    attempts = []

    def op():
        attempts.append(1)
        raise KeyError("fatal")

    with pytest.raises(KeyError):
        fx.retry_with_condition(5, 0.001, op, lambda err: False)
    assert len(attempts) == 1


def test_parallel_with_limit_runs_all_within_limit():
    results = []
    lock = threading.Lock()
    state = {"active": 0, "peak": 0}

    def make(n):
        def run():
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.05)
            with lock:
                results.append(n)
                state["active"] -= 1
        return run

    outcome = fx.parallel_with_limit(2, make(1), make(2), make(3))
    assert outcome is None
    assert sorted(results) == [1, 2, 3]
    assert 1 <= state["peak"] <= 2


def test_parallel_with_limit_raises_error():
    def bad():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        fx.parallel_with_limit(0, lambda: None, bad)


def test_debounce_runs_once():
    calls = []
    debounced = fx.debounce(0.1, lambda: calls.append(1))
    debounced()
    debounced()
    debounced()
    time.sleep(0.25)
    assert len(calls) == 1


def test_throttle_limits_calls():
    calls = []
    throttled = fx.throttle(0.1, lambda: calls.append(1))
    throttled()
    throttled()
    throttled()
    time.sleep(0.05)
    throttled()
    assert 1 <= len(calls) <= 2


def test_memoize_caches():
    calls = []

    def double(x):
        calls.append(x)
        return x * 2

    memoized = fx.memoize(double)
    assert memoized(5) == 10
    assert memoized(5) == 10
    assert calls == [5]


def test_pipeline_compose_chain():
    add_one = lambda x: x + 1
    times_two = lambda x: x * 2
    assert fx.pipeline(add_one, times_two)(3) == 8
    assert fx.compose(add_one, times_two)(3) == 8
    assert fx.chain(3, times_two, add_one) == 7
    assert fx.chain(4) == 4


def test_transform():
    doubled = fx.transform([1, 2, 3, 4, 5], lambda x: x * 2)
    assert doubled == [2, 4, 6, 8, 10]


def test_fold():
    assert fx.fold([1, 2, 3, 4, 5], 0, lambda acc, v: acc + v) == 15


def test_partition():
    evens, odds = fx.partition([1, 2, 3, 4, 5, 6], lambda x: x % 2 == 0)
    assert evens == [2, 4, 6]
    assert odds == [1, 3, 5]


def test_zip_and_unzip():
    zipped = fx.zip_pairs([1, 2, 3], ["a", "b", "c"])
    assert len(zipped) == 3
    assert zipped[0] == (1, "a")
    assert fx.zip_pairs([1, 2, 3], ["a"]) == [(1, "a")]
    assert fx.unzip_pairs(zipped) == ([1, 2, 3], ["a", "b", "c"])


def test_flatten():
    assert fx.flatten([[1, 2], [3, 4], [5, 6]]) == [1, 2, 3, 4, 5, 6]


def test_chunk():
    assert fx.chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert fx.chunk([1, 2], 0) == [[1], [2]]
    assert fx.chunk([], 3) == []


def test_set_operations():
    assert fx.intersect([1, 2, 3, 4], [3, 4, 5, 6]) == [3, 4]
    assert fx.intersect([1, 2], [2, 2, 1]) == [2, 1]
    assert fx.difference([1, 2, 3, 4], [3, 4, 5, 6]) == [1, 2]
    assert fx.union([1, 2, 3], [3, 4, 5]) == [1, 2, 3, 4, 5]


def test_match_predicates():
    is_even = lambda x: x % 2 == 0
    assert fx.all_match([2, 4, 6, 8], is_even) is True
    assert fx.all_match([2, 3], is_even) is False
    assert fx.any_match([1, 3, 4, 5], is_even) is True
    assert fx.none_match([1, 3, 5], is_even) is True
    assert fx.none_match([1, 2], is_even) is False
    assert fx.count_matching([1, 2, 3, 4, 5], is_even) == 2


def test_first_and_last_match():
    assert fx.first_match([1, 2, 3, 4, 5], lambda x: x > 3) == 4
    assert fx.last_match([1, 2, 3, 4, 5], lambda x: x < 3) == 2
    assert fx.first_match([1, 2], lambda x: x > 10) is None


def test_take_and_drop():
    items = [1, 2, 3, 4, 5]
    assert fx.take(items, 3) == [1, 2, 3]
    assert fx.take(items, 0) == []
    assert fx.take(items, 10) == items
    assert fx.drop(items, 2) == [3, 4, 5]
    assert fx.drop(items, -1) == items
    assert fx.drop(items, 9) == []


def test_take_while_and_drop_while():
    items = [1, 2, 5, 1, 2]
    assert fx.take_while(items, lambda x: x < 3) == [1, 2]
    assert fx.drop_while(items, lambda x: x < 3) == [5, 1, 2]
    assert fx.drop_while([1, 2], lambda x: x < 3) == []


def test_reverse():
    items = [1, 2, 3, 4, 5]
    assert fx.reverse(items) == [5, 4, 3, 2, 1]
    assert items == [1, 2, 3, 4, 5]


def test_shuffle_is_permutation_and_deterministic():
    items = [1, 2, 3, 4, 5]
    shuffled = fx.shuffle(items, lambda: 0)
    assert shuffled == [2, 3, 4, 5, 1]
    assert sorted(fx.shuffle(items, lambda: 7)) == items
    assert items == [1, 2, 3, 4, 5]


def test_group_by_and_index_by():
    groups = fx.group_by([1, 2, 3, 4, 5, 6], lambda x: "even" if x % 2 == 0 else "odd")
    assert groups["even"] == [2, 4, 6]
    assert groups["odd"] == [1, 3, 5]
    index = fx.index_by(["apple", "avocado", "banana"], lambda s: s[0])
    assert index == {"a": "avocado", "b": "banana"}


def test_numeric_aggregates():
    assert fx.total([1, 2, 3, 4, 5]) == 15
    assert fx.average([1, 2, 3, 4, 5]) == 3.0
    assert fx.average([]) == 0.0
    assert fx.min_value([5, 2, 8, 1, 9]) == 1
    assert fx.max_value([5, 2, 8, 1, 9]) == 9
    assert fx.min_value([]) is None


def test_field_tags_skips_private_and_untagged():
    tags = fx.field_tags(Tagged(), "db")
    assert tags == {"id": "id", "email": "email"}


def test_field_by_tag():
    assert fx.field_by_tag(Tagged, "jet", "primary_key") == "id"
    assert fx.field_by_tag(Tagged(), "jet", "unique") is None


def test_field_tags_rejects_non_dataclass():
    with pytest.raises(TypeError):
        fx.field_tags(object(), "db")


def test_validate_struct():
    entity = Tagged(id=1, email="user@example.com")
    assert fx.validate_struct(entity) is entity
    with pytest.raises(ValidationError):
        fx.validate_struct(Tagged(id=1, email="not-an-address"))


def test_deep_equal_and_nil_and_zero():
    assert fx.deep_equal([1, {"a": 2}], [1, {"a": 2}]) is True
    assert fx.deep_equal(1, 1.0) is False
    assert fx.is_nil(None) is True
    assert fx.is_nil(0) is False
    assert fx.is_zero_value("") is True
    assert fx.is_zero_value(3) is False