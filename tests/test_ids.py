import threading

import pytest

from expenses import ids
from expenses.errors import IdGenerationError


def _fixed_clock(ms):
    return lambda: ms


def test_ids_are_fixed_length_url_safe_and_parseable():
    gen = ids.IdGenerator()
    value = gen.next()
    assert len(value) == ids.ID_LENGTH
    assert set(value) <= set("0123456789ABCDEFGHJKMNPQRSTVWXYZ")
    parsed = ids.parse_id(value)
    assert 0 < parsed.milliseconds <= ids.MAX_TIMESTAMP


def test_timestamp_comes_first():
    gen = ids.IdGenerator(clock=_fixed_clock(1_700_000_000_000))
    value = gen.next()
    parsed = ids.parse_id(value)
    assert parsed.milliseconds == 1_700_000_000_000
    assert parsed.datetime.year == 2023
    assert str(parsed) == value


def test_same_millisecond_increments_randomness():
    gen = ids.IdGenerator(clock=_fixed_clock(1_000), entropy=lambda n: b"\x00" * n)
    first, second, third = gen.next(), gen.next(), gen.next()
    assert first < second < third
    assert [ids.randomness(ids.parse_id(v)) for v in (first, second, third)] == [0, 1, 2]


def test_clock_going_backwards_stays_monotonic():
    ticks = iter([5_000, 4_000, 4_500])
    gen = ids.IdGenerator(clock=lambda: next(ticks))
    values = [gen.next() for _ in range(3)]
    assert values == sorted(values)
    assert len(set(values)) == 3
    assert {ids.parse_id(v).milliseconds for v in values} == {5_000}


def test_new_millisecond_draws_fresh_entropy():
    ticks = iter([1_000, 1_001])
    draws = iter([b"\xff" * 10, b"\x00" * 10])
    gen = ids.IdGenerator(clock=lambda: next(ticks), entropy=lambda n: next(draws))
    first, second = gen.next(), gen.next()
    assert first < second
    assert ids.randomness(ids.parse_id(second)) == 0


def test_counter_overflow_fails_hard():
    gen = ids.IdGenerator(clock=_fixed_clock(1_000), entropy=lambda n: b"\xff" * n)
    gen.next()
    with pytest.raises(IdGenerationError):
        gen.next()


def test_short_entropy_read_fails():
    gen = ids.IdGenerator(entropy=lambda n: b"")
    with pytest.raises(IdGenerationError):
        gen.next()


def test_timestamp_out_of_range_fails():
    gen = ids.IdGenerator(clock=_fixed_clock(ids.MAX_TIMESTAMP + 1))
    with pytest.raises(IdGenerationError):
        gen.next()


def test_concurrent_callers_never_share_an_id():
    gen = ids.IdGenerator()
    results: list[str] = []
    lock = threading.Lock()

    def worker():
        local = [gen.next() for _ in range(200)]
        assert local == sorted(local)
        with lock:
            results.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(results) == len(set(results)) == 1600


@pytest.mark.parametrize("bad", ["", "short", "8" + "0" * 25, "0" * 25 + "U", "0" * 27])
def test_parse_id_rejects_malformed(bad):
    with pytest.raises(ValueError):
        ids.parse_id(bad)


def test_parse_id_accepts_lower_case():
    value = ids.IdGenerator().next()
    assert ids.parse_id(value.lower()) == ids.parse_id(value)
