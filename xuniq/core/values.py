"""Normalization of caller input into fixed-width unsigned JAX arrays."""
from __future__ import annotations

from typing import Any

import chex
import jax
import jax.numpy as jnp
import numpy as np

from .. import config


def resolve_value_dtype(value_dtype: Any = None) -> np.dtype:
    """Return the unsigned dtype used for the value domain.

    Args:
        value_dtype: A dtype, a dtype name, or None for the configured default.

    Raises:
        TypeError: If the dtype is not an unsigned integer type.
        ValueError: If a 64-bit domain is requested while x64 is disabled.
    """
    if value_dtype is None:
        value_dtype = config.DEFAULT_VALUE_DTYPE
    dtype = np.dtype(value_dtype)
    if dtype.kind != "u":
        raise TypeError(f"value_dtype must be an unsigned integer type, got {dtype}.")
    if dtype.itemsize == 8 and not jax.config.read("jax_enable_x64"):
        raise ValueError("uint64 values require jax_enable_x64=True.")
    return dtype


def as_value_array(values: Any, value_dtype: Any = None, *, ndim: int = 1) -> chex.Array:
    """Convert ``values`` into a rank-``ndim`` JAX array of the value dtype.

    Python sequences, NumPy arrays and JAX arrays are accepted. Signed input
    is accepted only when every element is non-negative; nothing is ever
    wrapped or truncated.
    """
    dtype = resolve_value_dtype(value_dtype)
    if not isinstance(values, (np.ndarray, jax.Array)):
        values = np.asarray(values)
    if values.ndim != ndim:
        raise ValueError(f"expected a rank-{ndim} sequence, got shape {tuple(values.shape)}.")
    if values.size == 0:
        return jnp.zeros(values.shape, dtype=dtype)

    kind = np.dtype(values.dtype).kind
    info = np.iinfo(dtype)
    if kind == "u":
        if np.dtype(values.dtype).itemsize > dtype.itemsize and int(values.max()) > info.max:
            raise ValueError(f"values exceed the {dtype} range (max {info.max}).")
    elif kind == "i":
        if int(values.min()) < 0:
            raise ValueError("values must be non-negative.")
        if int(values.max()) > info.max:
            raise ValueError(f"values exceed the {dtype} range (max {info.max}).")
    else:
        raise TypeError(f"values must be unsigned integers, got dtype {values.dtype}.")
    return jnp.asarray(values, dtype=dtype)


def to_uint32_words(value: chex.Array) -> chex.Array:
    """Split a scalar value into its 32-bit words (one word up to 32 bits, two for 64)."""
    value = jnp.asarray(value)
    if value.dtype.itemsize <= 4:
        return jnp.asarray(value, dtype=jnp.uint32).reshape(1)
    return jax.lax.bitcast_convert_type(value, jnp.uint32).reshape(-1)
