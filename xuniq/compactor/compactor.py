"""First-occurrence deduplication driven by a ProbeTable."""
from __future__ import annotations

from typing import Any, NamedTuple

import chex
import jax
import jax.numpy as jnp
import numpy as np
from absl import logging

from .. import config
from ..core import as_value_array
from ..exceptions import CapacityExceeded
from ..probe_table import ProbeOutcome, ProbeTable, plan_capacity
from ..probe_table.constants import OUTCOME_DTYPE, SIZE_DTYPE
from ..probe_table.probe import _probe_table_lookup_or_insert
from .output import build_output, pad_output


class CompactResult(NamedTuple):
    """Working buffer after compaction.

    Only ``buffer[:unique_count]`` is meaningful; the remaining positions
    are leftovers of the input. ``table`` holds the values classified during
    the general pass and stays empty for inputs of length 0 or 1.
    """

    buffer: chex.Array
    unique_count: int
    table: ProbeTable


def _compact_internal(
    buffer: chex.Array, table: ProbeTable
) -> tuple[chex.Array, chex.Array, ProbeTable, chex.Array, chex.Array]:
    """Rewrite first occurrences into a contiguous prefix of ``buffer``.

    ``buffer`` must hold at least two values. Returns the rewritten buffer,
    the unique count, the table, an overflow flag and the read index where
    scanning stopped (the offending index when the flag is set).
    """
    length = buffer.shape[0]
    length_u32 = SIZE_DTYPE(length)
    first = buffer[0]
    table, first_outcome = _probe_table_lookup_or_insert(table, first)
    overflow = first_outcome == ProbeOutcome.TABLE_FULL

    # Leading run of copies of the first value never touches the table.
    mismatch = buffer != first
    run_end = jnp.where(jnp.any(mismatch), jnp.argmax(mismatch), length).astype(SIZE_DTYPE)
    read = jnp.where(overflow, SIZE_DTYPE(0), run_end)
    write = SIZE_DTYPE(1)

    def _cond(val):
        read, _, _, _, _, overflow = val
        return jnp.logical_and(read < length_u32, ~overflow)

    def _body(val):
        read, write, prev, buffer, table, _ = val
        value = buffer[read]

        def _classify():
            return _probe_table_lookup_or_insert(table, value)

        def _adjacent_duplicate():
            return table, jnp.asarray(ProbeOutcome.ALREADY_PRESENT, dtype=OUTCOME_DTYPE)

        table, outcome = jax.lax.cond(value == prev, _adjacent_duplicate, _classify)
        inserted = outcome == ProbeOutcome.INSERTED
        overflow = outcome == ProbeOutcome.TABLE_FULL

        buffer = jax.lax.cond(
            jnp.logical_and(inserted, write != read),
            lambda: buffer.at[write].set(value),
            lambda: buffer,
        )
        write = (write + inserted.astype(SIZE_DTYPE)).astype(SIZE_DTYPE)
        read = jnp.where(overflow, read, read + SIZE_DTYPE(1)).astype(SIZE_DTYPE)
        return read, write, value, buffer, table, overflow

    read, write, _, buffer, table, overflow = jax.lax.while_loop(
        _cond, _body, (read, write, first, buffer, table, overflow)
    )
    return buffer, write, table, overflow, read


_compactor_compact_jit = jax.jit(_compact_internal)
_compactor_compact_batch_jit = jax.jit(jax.vmap(_compact_internal, in_axes=(0, None)))


def _resolve_capacity(capacity: int | str | None) -> int | None:
    if capacity is None:
        return config.DEFAULT_CAPACITY
    if isinstance(capacity, str):
        if capacity.strip().lower() != "auto":
            raise ValueError(f"capacity must be an integer, None or 'auto', got {capacity!r}.")
        return None
    return int(capacity)


def _build_table(
    length: int,
    value_dtype: Any,
    capacity: int | str | None,
    seed: int | None,
    hash_name: str | None,
    max_load_factor: float | None,
) -> ProbeTable:
    return ProbeTable.build(
        plan_capacity(length, _resolve_capacity(capacity)),
        value_dtype=value_dtype,
        seed=seed,
        hash_name=hash_name,
        max_load_factor=max_load_factor,
    )


def compact(
    values: Any,
    *,
    capacity: int | str | None = None,
    value_dtype: Any = None,
    seed: int | None = None,
    hash_name: str | None = None,
    max_load_factor: float | None = None,
) -> CompactResult:
    """
    Moves the first occurrence of every value into a prefix of a working buffer.

    The working buffer is owned by the call; ``values`` itself is never
    modified.

    Args:
        values: Rank-1 sequence of unsigned integers.
        capacity: Probe table size. None uses ``XUNIQ_CAPACITY``; "auto"
            sizes the table from the input length; an integer fixes it.
        value_dtype: Unsigned dtype of the value domain.
        seed: Hash seed.
        hash_name: Hash function name.
        max_load_factor: Fraction of the table that may be filled.

    Returns:
        A CompactResult.

    Raises:
        CapacityExceeded: If a fixed-capacity table cannot hold every
            distinct value.
    """
    buffer = as_value_array(values, value_dtype)
    length = int(buffer.shape[0])
    table = _build_table(length, buffer.dtype, capacity, seed, hash_name, max_load_factor)
    if length <= 1:
        return CompactResult(buffer=buffer, unique_count=length, table=table)

    buffer, unique_count, table, overflow, read = _compactor_compact_jit(buffer, table)
    overflow, unique_count, read = jax.device_get((overflow, unique_count, read))
    if overflow:
        raise CapacityExceeded(table.capacity, table.max_load, int(read))
    logging.debug(
        "Compacted %d values into %d unique (capacity=%d).", length, unique_count, table.capacity
    )
    return CompactResult(buffer=buffer, unique_count=int(unique_count), table=table)


def uniquify(values: Any, **kwargs) -> chex.Array:
    """
    Returns the distinct values of ``values`` in order of first occurrence.

    Keyword arguments are forwarded to ``compact``. The caller's data is
    never modified.
    """
    result = compact(values, **kwargs)
    if result.unique_count == result.buffer.shape[0]:
        # No duplicates: the working buffer already is the answer.
        return result.buffer
    return build_output(result.buffer, result.unique_count)


def uniquify_inplace(buffer: np.ndarray, **kwargs) -> int:
    """
    Deduplicates a writable NumPy buffer in place.

    The first ``unique_count`` positions of ``buffer`` are overwritten with
    the distinct values in order of first occurrence; later positions keep
    unspecified leftover data.

    Returns:
        The number of distinct values.
    """
    if not isinstance(buffer, np.ndarray):
        raise TypeError(f"uniquify_inplace needs a numpy.ndarray, got {type(buffer).__name__}.")
    if not buffer.flags.writeable:
        raise ValueError("uniquify_inplace needs a writable buffer.")
    if buffer.dtype.kind != "u":
        raise TypeError(f"uniquify_inplace needs an unsigned buffer, got dtype {buffer.dtype}.")
    kwargs.setdefault("value_dtype", buffer.dtype)
    result = compact(buffer, **kwargs)
    count = result.unique_count
    buffer[:count] = np.asarray(jax.device_get(result.buffer[:count]))
    return count


def uniquify_batch(
    values: Any, *, fill_value: int = 0, **kwargs
) -> tuple[chex.Array, chex.Array]:
    """
    Deduplicates every row of a rank-2 array independently.

    Args:
        values: (rows, length) array of unsigned integers.
        fill_value: Value written past each row's unique prefix.
        **kwargs: Forwarded table options, as for ``compact``.

    Returns:
        A tuple ``(padded, counts)`` where ``padded[i, :counts[i]]`` is the
        deduplicated row ``i``.
    """
    value_dtype = kwargs.pop("value_dtype", None)
    batch = as_value_array(values, value_dtype, ndim=2)
    rows, length = (int(d) for d in batch.shape)
    table = _build_table(
        length,
        batch.dtype,
        kwargs.pop("capacity", None),
        kwargs.pop("seed", None),
        kwargs.pop("hash_name", None),
        kwargs.pop("max_load_factor", None),
    )
    if kwargs:
        raise TypeError(f"unexpected keyword arguments: {sorted(kwargs)}")
    if length <= 1:
        return batch, jnp.full((rows,), length, dtype=SIZE_DTYPE)

    buffers, counts, _, overflow, read = _compactor_compact_batch_jit(batch, table)
    overflow_host = np.asarray(jax.device_get(overflow))
    if overflow_host.any():
        row = int(np.argmax(overflow_host))
        raise CapacityExceeded(table.capacity, table.max_load, int(jax.device_get(read[row])))
    return pad_output(buffers, counts[:, None], fill_value), counts
