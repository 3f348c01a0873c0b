import chex
import jax.numpy as jnp
import numpy as np
import pytest

from xuniq import CapacityExceeded, compact, uniquify


def _reference(values):
    return list(dict.fromkeys(int(v) for v in values))


def _as_list(array):
    return [int(v) for v in np.asarray(array)]


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], []),
        ([7], [7]),
        ([5, 5, 5, 5], [5]),
        ([1, 2, 1, 3, 2, 4], [1, 2, 3, 4]),
        ([0, 0, 1, 0], [0, 1]),
        ([3, 3, 1, 1, 2, 2], [3, 1, 2]),
        ([9, 8, 7], [9, 8, 7]),
    ],
)
def test_concrete_cases(values, expected):
    assert _as_list(uniquify(values)) == expected


def test_output_dtype_matches_value_domain():
    assert uniquify([1, 2, 1]).dtype == jnp.uint32
    assert uniquify([1, 2, 1], value_dtype="uint8").dtype == jnp.uint8
    assert uniquify(np.array([4, 4], dtype=np.uint16), value_dtype=np.uint16).dtype == jnp.uint16


def test_accepts_numpy_and_jax_inputs():
    np_values = np.array([4, 1, 4, 0, 1], dtype=np.uint32)
    jax_values = jnp.asarray(np_values)
    assert _as_list(uniquify(np_values)) == [4, 1, 0]
    assert _as_list(uniquify(jax_values)) == [4, 1, 0]


def test_caller_buffer_is_not_modified():
    values = np.array([2, 2, 5, 2, 6, 5], dtype=np.uint32)
    original = values.copy()
    uniquify(values)
    np.testing.assert_array_equal(values, original)


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("value_range", [4, 50, 10_000])
def test_matches_dict_fromkeys(seed, value_range):
    rng = np.random.default_rng(seed)
    values = rng.integers(0, value_range, size=300).astype(np.uint32)
    assert _as_list(uniquify(values)) == _reference(values)


def test_properties_hold_for_random_inputs():
    rng = np.random.default_rng(42)
    for length in (0, 1, 2, 17, 200):
        values = rng.integers(0, 12, size=length).astype(np.uint32)
        out = _as_list(uniquify(values))

        # Idempotence.
        assert _as_list(uniquify(out)) == out
        # Order preservation: out is a subsequence of values.
        it = iter(values.tolist())
        assert all(any(v == x for x in it) for v in out)
        # Completeness.
        assert sorted(out) == sorted(set(values.tolist()))
        assert len(out) == len(set(out))
        # Length bound.
        assert len(out) <= length
        assert (len(out) == length) == (len(set(values.tolist())) == length)


def test_identity_hash_gives_same_answer():
    rng = np.random.default_rng(7)
    values = rng.integers(0, 1000, size=500).astype(np.uint32)
    assert _as_list(uniquify(values, hash_name="identity")) == _reference(values)


def test_seed_does_not_change_answer():
    values = [10, 3, 10, 7, 3, 0, 0, 12]
    assert _as_list(uniquify(values, seed=0)) == _as_list(uniquify(values, seed=1234))


def test_max_dtype_value_is_an_ordinary_value():
    top = np.iinfo(np.uint32).max
    values = np.array([top, 0, top, 1, 0], dtype=np.uint32)
    assert _as_list(uniquify(values)) == [top, 0, 1]


def test_fixed_capacity_overflow_raises():
    with pytest.raises(CapacityExceeded) as exc_info:
        uniquify(list(range(20)), capacity=7)
    err = exc_info.value
    assert err.capacity == 7
    assert err.max_load == 7
    assert err.index == 7


def test_fixed_capacity_filled_exactly_succeeds():
    values = list(range(7)) * 3
    assert _as_list(uniquify(values, capacity=7)) == list(range(7))


def test_max_load_factor_lowers_the_bound():
    with pytest.raises(CapacityExceeded) as exc_info:
        uniquify([1, 2, 3, 4], capacity=7, max_load_factor=0.5)
    assert exc_info.value.max_load == 3
    assert exc_info.value.index == 3


def test_auto_capacity_never_overflows():
    values = np.arange(5000, dtype=np.uint32)
    out = uniquify(values, capacity="auto")
    assert out.shape == (5000,)


def test_invalid_capacity_string():
    with pytest.raises(ValueError):
        uniquify([1, 2], capacity="huge")


def test_compact_prefix_and_count():
    result = compact([4, 4, 1, 4, 2, 1])
    assert result.unique_count == 3
    assert _as_list(result.buffer[: result.unique_count]) == [4, 1, 2]
    assert result.buffer.shape == (6,)
    assert int(result.table.size) == 3


def test_compact_without_duplicates_keeps_buffer():
    values = jnp.array([3, 1, 2], dtype=jnp.uint32)
    result = compact(values)
    assert result.unique_count == 3
    chex.assert_trees_all_equal(result.buffer, values)


def test_compact_base_cases_skip_the_table():
    result = compact([9])
    assert result.unique_count == 1
    assert int(result.table.size) == 0
