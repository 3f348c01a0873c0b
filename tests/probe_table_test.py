import jax
import jax.numpy as jnp
import pytest

from xuniq import ProbeOutcome, ProbeTable


def _insert(table, value):
    table, outcome = table.lookup_or_insert(jnp.uint32(value))
    return table, int(outcome)


@pytest.fixture
def table():
    """Identity-hashed table so slot positions are predictable."""
    return ProbeTable.build(7, hash_name="identity")


def test_build(table):
    assert table.capacity == 7
    assert table.max_load == 7
    assert int(table.size) == 0
    assert table.keys.shape == (7,)
    assert not bool(jnp.any(table.occupied))


def test_insert_then_present(table):
    table, outcome = _insert(table, 3)
    assert outcome == ProbeOutcome.INSERTED
    table, outcome = _insert(table, 3)
    assert outcome == ProbeOutcome.ALREADY_PRESENT
    assert int(table.size) == 1


def test_zero_is_an_ordinary_value(table):
    assert not bool(table.contains(jnp.uint32(0)))
    table, outcome = _insert(table, 0)
    assert outcome == ProbeOutcome.INSERTED
    assert bool(table.contains(jnp.uint32(0)))
    assert bool(table.occupied[0])
    # 7 hashes to the same slot as 0 but is a different value.
    assert not bool(table.contains(jnp.uint32(7)))


def test_collision_probes_linearly(table):
    table, _ = _insert(table, 3)
    table, outcome = _insert(table, 10)
    assert outcome == ProbeOutcome.INSERTED
    assert int(table.keys[3]) == 3
    assert int(table.keys[4]) == 10
    table, outcome = _insert(table, 10)
    assert outcome == ProbeOutcome.ALREADY_PRESENT


def test_probing_wraps_around(table):
    table, _ = _insert(table, 6)
    table, outcome = _insert(table, 13)
    assert outcome == ProbeOutcome.INSERTED
    assert int(table.keys[0]) == 13
    assert bool(table.contains(jnp.uint32(13)))


def test_full_table_reports_instead_of_hanging():
    table = ProbeTable.build(3, hash_name="identity")
    for value in (1, 2, 3):
        table, outcome = _insert(table, value)
        assert outcome == ProbeOutcome.INSERTED
    table, outcome = _insert(table, 4)
    assert outcome == ProbeOutcome.TABLE_FULL
    assert int(table.size) == 3
    assert not bool(table.contains(jnp.uint32(4)))
    table, outcome = _insert(table, 2)
    assert outcome == ProbeOutcome.ALREADY_PRESENT


def test_load_bound_blocks_new_values():
    table = ProbeTable.build(7, max_load_factor=0.5)
    assert table.max_load == 3
    for value in (11, 22, 33):
        table, outcome = _insert(table, value)
        assert outcome == ProbeOutcome.INSERTED
    table, outcome = _insert(table, 44)
    assert outcome == ProbeOutcome.TABLE_FULL
    assert int(table.size) == 3
    # Known values are still recognised at the bound.
    table, outcome = _insert(table, 22)
    assert outcome == ProbeOutcome.ALREADY_PRESENT


def test_load_factor(table):
    table, _ = _insert(table, 1)
    table, _ = _insert(table, 2)
    assert float(table.load_factor) == pytest.approx(2 / 7)


def test_many_values_with_xxhash():
    table = ProbeTable.build(101)
    values = list(range(0, 500, 7))
    for value in values:
        table, outcome = _insert(table, value)
        assert outcome == ProbeOutcome.INSERTED
    for value in values:
        assert bool(table.contains(jnp.uint32(value)))
    assert int(table.size) == len(values)


def test_uint8_table():
    table = ProbeTable.build(5, value_dtype="uint8")
    assert table.keys.dtype == jnp.uint8
    table, outcome = table.lookup_or_insert(jnp.uint8(255))
    assert int(outcome) == ProbeOutcome.INSERTED
    assert bool(table.contains(jnp.uint8(255)))


def test_static_fields_live_in_the_treedef(table):
    leaves = jax.tree_util.tree_leaves(table)
    assert len(leaves) == 3
    rebuilt = jax.tree_util.tree_map(lambda x: x, table)
    assert rebuilt.capacity == 7
    assert rebuilt.hash_name == "identity"
    size = jax.jit(lambda t: t.size + t.capacity)(table)
    assert int(size) == 7


@pytest.mark.parametrize(
    "kwargs",
    [
        {"capacity": 0},
        {"capacity": 7, "max_load_factor": 0.0},
        {"capacity": 7, "max_load_factor": 1.5},
        {"capacity": 7, "hash_name": "md5"},
    ],
)
def test_build_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        ProbeTable.build(**kwargs)


def test_build_rejects_signed_dtype():
    with pytest.raises(TypeError):
        ProbeTable.build(7, value_dtype="int32")
