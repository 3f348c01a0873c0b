"""Materialization of the unique prefix into a result array."""
from __future__ import annotations

from functools import partial

import chex
import jax
import jax.numpy as jnp


@partial(jax.jit, static_argnums=(1,))
def _build_output_jit(buffer: chex.Array, unique_count: int) -> chex.Array:
    return jax.lax.slice(buffer, (0,), (unique_count,))


@jax.jit
def _pad_output_jit(
    buffer: chex.Array, unique_count: chex.Array, fill_value: chex.Array
) -> chex.Array:
    keep = jnp.arange(buffer.shape[-1]) < unique_count
    return jnp.where(keep, buffer, jnp.asarray(fill_value, dtype=buffer.dtype))


def build_output(buffer: chex.Array, unique_count: int) -> chex.Array:
    """
    Copies the first ``unique_count`` elements of ``buffer`` into a new array.

    Args:
        buffer: Rank-1 working buffer whose prefix holds the unique values.
        unique_count: Length of that prefix.

    Returns:
        A new array of exactly ``unique_count`` elements, in buffer order.
    """
    unique_count = int(unique_count)
    length = int(buffer.shape[0])
    if not 0 <= unique_count <= length:
        raise ValueError(f"unique_count must lie in [0, {length}], got {unique_count}.")
    return _build_output_jit(buffer, unique_count)


def pad_output(buffer: chex.Array, unique_count: chex.Array, fill_value: int = 0) -> chex.Array:
    """Static-shape variant of ``build_output``: positions past the prefix become ``fill_value``.

    ``buffer`` may carry leading batch dimensions when ``unique_count`` is
    given per row with a trailing axis, e.g. ``counts[:, None]``.
    """
    return _pad_output_jit(buffer, unique_count, fill_value)
