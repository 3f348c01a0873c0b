"""Linear-probing helpers for ProbeTable."""
from __future__ import annotations

from typing import TYPE_CHECKING

import chex
import jax
import jax.numpy as jnp

from ..core import get_hash_function, slot_index
from .constants import OUTCOME_DTYPE, SIZE_DTYPE, ProbeOutcome

if TYPE_CHECKING:
    from .table import ProbeTable


def _probe_internal(
    table: "ProbeTable", value: chex.Array
) -> tuple[chex.Array, chex.Array, chex.Array]:
    """Walk the probe sequence of ``value``.

    Returns the slot where probing stopped, whether that slot holds
    ``value`` and whether it is empty. Both flags are False when all
    ``capacity`` slots were visited without finding either.
    """
    capacity = int(table.capacity)
    capacity_u32 = SIZE_DTYPE(capacity)
    hash_fn = get_hash_function(table.hash_name)
    start = slot_index(hash_fn(value, table.seed), capacity).astype(SIZE_DTYPE)

    def _cond(val: tuple[chex.Array, chex.Array, chex.Array]) -> chex.Array:
        _, done, probes = val
        return jnp.logical_and(~done, probes < capacity_u32)

    def _body(
        val: tuple[chex.Array, chex.Array, chex.Array]
    ) -> tuple[chex.Array, chex.Array, chex.Array]:
        slot, _, probes = val
        is_empty = ~table.occupied[slot]
        is_match = jnp.logical_and(~is_empty, table.keys[slot] == value)
        done = jnp.logical_or(is_empty, is_match)
        next_slot = (slot + SIZE_DTYPE(1)) % capacity_u32
        slot = jnp.where(done, slot, next_slot).astype(SIZE_DTYPE)
        return slot, done, probes + SIZE_DTYPE(1)

    slot, done, _ = jax.lax.while_loop(_cond, _body, (start, jnp.bool_(False), SIZE_DTYPE(0)))
    occupied = table.occupied[slot]
    found = jnp.logical_and(done, occupied)
    empty = jnp.logical_and(done, ~occupied)
    return slot, found, empty


def _probe_table_lookup_or_insert(
    table: "ProbeTable", value: chex.Array
) -> tuple["ProbeTable", chex.Array]:
    value = jnp.asarray(value, dtype=table.keys.dtype)
    slot, found, empty = _probe_internal(table, value)
    can_insert = jnp.logical_and(empty, table.size < SIZE_DTYPE(table.max_load))

    def _do_insert():
        return table.replace(
            keys=table.keys.at[slot].set(value),
            occupied=table.occupied.at[slot].set(True),
            size=(table.size + SIZE_DTYPE(1)).astype(SIZE_DTYPE),
        )

    def _no_insert():
        return table

    table = jax.lax.cond(can_insert, _do_insert, _no_insert)
    outcome = jnp.where(
        found,
        ProbeOutcome.ALREADY_PRESENT,
        jnp.where(can_insert, ProbeOutcome.INSERTED, ProbeOutcome.TABLE_FULL),
    ).astype(OUTCOME_DTYPE)
    return table, outcome


@jax.jit
def _probe_table_lookup_or_insert_jit(
    table: "ProbeTable", value: chex.Array
) -> tuple["ProbeTable", chex.Array]:
    return _probe_table_lookup_or_insert(table, value)


@jax.jit
def _probe_table_contains_jit(table: "ProbeTable", value: chex.Array) -> chex.Array:
    value = jnp.asarray(value, dtype=table.keys.dtype)
    _, found, _ = _probe_internal(table, value)
    return found
