"""ProbeTable data container and public API."""
from __future__ import annotations

from functools import partial
from typing import Any

import chex
import jax
import jax.numpy as jnp
import numpy as np
from absl import logging

from .. import config
from ..core import base_dataclass, get_hash_function, resolve_value_dtype
from .constants import SIZE_DTYPE
from .probe import _probe_table_contains_jit, _probe_table_lookup_or_insert_jit
from .sizing import is_prime


@partial(jax.jit, static_argnums=(0, 1, 2, 3, 4))
def _probe_table_build_jit(
    capacity: int,
    value_dtype: np.dtype,
    seed: int,
    hash_name: str,
    max_load: int,
) -> "ProbeTable":
    return ProbeTable(
        capacity=capacity,
        seed=seed,
        hash_name=hash_name,
        max_load=max_load,
        size=SIZE_DTYPE(0),
        keys=jnp.zeros((capacity,), dtype=value_dtype),
        occupied=jnp.zeros((capacity,), dtype=jnp.bool_),
    )


@base_dataclass(frozen=True, static_fields=("capacity", "seed", "hash_name", "max_load"))
class ProbeTable:
    """
    Fixed-capacity open-addressing set of unsigned values.

    Collisions are resolved by linear probing. Every slot is either empty
    (``occupied[i]`` is False) or occupied by ``keys[i]``, so the value 0 is
    an ordinary key. The table is write-only: values are never removed.

    Attributes:
        capacity: Number of slots.
        seed: Seed passed to the hash function.
        hash_name: Name of the hash function in ``HASH_FUNCTIONS``.
        max_load: Number of values after which inserts report TABLE_FULL.
        size: Number of values currently recorded.
        keys: Slot values, meaningful only where ``occupied`` is set.
        occupied: Slot occupancy mask.
    """

    capacity: int
    seed: int
    hash_name: str
    max_load: int
    size: chex.Array
    keys: chex.Array
    occupied: chex.Array

    @staticmethod
    def build(
        capacity: int,
        value_dtype: Any = None,
        seed: int | None = None,
        hash_name: str | None = None,
        max_load_factor: float | None = None,
    ) -> "ProbeTable":
        """
        Creates an empty ProbeTable.

        Args:
            capacity: Number of slots. Primes give the best spread for the
                modulo slot reduction.
            value_dtype: Unsigned dtype of the stored values.
            seed: Hash seed.
            hash_name: Hash function name, "xxhash" or "identity".
            max_load_factor: Fraction of slots that may be filled, in (0, 1].

        Returns:
            A new, empty ProbeTable.
        """
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}.")
        if not is_prime(capacity):
            logging.warning(
                "Probe table capacity %d is not prime; expect more collisions.", capacity
            )
        value_dtype = resolve_value_dtype(value_dtype)
        seed = config.DEFAULT_SEED if seed is None else int(seed)
        hash_name = config.DEFAULT_HASH if hash_name is None else hash_name
        get_hash_function(hash_name)
        if max_load_factor is None:
            max_load_factor = config.DEFAULT_MAX_LOAD_FACTOR
        if not 0.0 < max_load_factor <= 1.0:
            raise ValueError(f"max_load_factor must lie in (0, 1], got {max_load_factor}.")
        max_load = max(1, int(capacity * max_load_factor))
        return _probe_table_build_jit(capacity, value_dtype, seed, hash_name, max_load)

    def lookup_or_insert(self, value: chex.Array) -> tuple["ProbeTable", chex.Array]:
        """
        Records ``value`` unless it is already present.

        Returns:
            A tuple of the updated table and a ``ProbeOutcome`` code:
            ALREADY_PRESENT, INSERTED, or TABLE_FULL when the value is new
            but the table is at ``max_load`` or has no empty slot. A
            TABLE_FULL result leaves the table unchanged.
        """
        return _probe_table_lookup_or_insert_jit(self, value)

    def contains(self, value: chex.Array) -> chex.Array:
        return _probe_table_contains_jit(self, value)

    @property
    def load_factor(self) -> chex.Array:
        return self.size / self.capacity
