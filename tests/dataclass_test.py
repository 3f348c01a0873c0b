import dataclasses

import chex
import jax
import jax.numpy as jnp
import pytest

from xuniq import base_dataclass


@base_dataclass(frozen=True, static_fields=("label",))
class Tagged:
    label: str
    values: chex.Array


def test_replace_and_tuple_roundtrip():
    item = Tagged(label="a", values=jnp.arange(3))
    moved = item.replace(values=item.values + 1)
    assert moved.label == "a"
    chex.assert_trees_all_equal(moved.values, jnp.arange(1, 4))
    assert Tagged.from_tuple(item.to_tuple()).label == "a"


def test_static_field_is_not_a_leaf():
    item = Tagged(label="a", values=jnp.arange(3))
    leaves, treedef = jax.tree_util.tree_flatten(item)
    assert len(leaves) == 1
    rebuilt = jax.tree_util.tree_unflatten(treedef, leaves)
    assert rebuilt.label == "a"


def test_jit_specializes_on_static_field():
    @jax.jit
    def scale(item):
        factor = 2 if item.label == "double" else 1
        return item.values * factor

    chex.assert_trees_all_equal(scale(Tagged("double", jnp.arange(3))), jnp.arange(3) * 2)
    chex.assert_trees_all_equal(scale(Tagged("single", jnp.arange(3))), jnp.arange(3))


def test_frozen():
    item = Tagged(label="a", values=jnp.arange(3))
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.label = "b"


def test_unknown_static_field():
    with pytest.raises(ValueError):

        @base_dataclass(static_fields=("missing",))
        class Broken:
            present: int
