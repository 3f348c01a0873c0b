"""Hash functions mapping a fixed-width unsigned value to a 32-bit hash."""
from __future__ import annotations

from typing import Callable

import chex
import jax
import jax.numpy as jnp

from .values import to_uint32_words


def rotl(x, n):
    """Rotate left operation for 32-bit integers."""
    return (x << n) | (x >> (32 - n))


@jax.jit
def xxhash(x, seed):
    """
    Implementation of xxHash algorithm for 32-bit integers.
    Args:
        x: Input value to hash
        seed: Seed value for hash function
    Returns:
        32-bit hash value
    """
    x = jnp.asarray(x, dtype=jnp.uint32)
    prime_1 = jnp.uint32(0x9E3779B1)
    prime_2 = jnp.uint32(0x85EBCA77)
    prime_3 = jnp.uint32(0xC2B2AE3D)
    prime_5 = jnp.uint32(0x165667B1)
    acc = jnp.asarray(seed, dtype=jnp.uint32) + prime_5
    for _ in range(4):
        lane = x & 255
        acc = acc + lane * prime_5
        acc = rotl(acc, 11) * prime_1
        x = x >> 8
    acc = acc ^ (acc >> jnp.uint32(15))
    acc = acc * prime_2
    acc = acc ^ (acc >> jnp.uint32(13))
    acc = acc * prime_3
    acc = acc ^ (acc >> jnp.uint32(16))
    return acc


def words_to_hash(words: chex.Array, seed) -> chex.Array:
    """Chain xxhash over a rank-1 uint32 word array."""

    def scan_body(seed, x):
        result = xxhash(x, seed)
        return result, result

    hash_value, _ = jax.lax.scan(scan_body, jnp.asarray(seed, dtype=jnp.uint32), words)
    return hash_value


def xxhash_value(value: chex.Array, seed) -> chex.Array:
    return words_to_hash(to_uint32_words(value), seed)


def identity_value(value: chex.Array, seed) -> chex.Array:
    # Seed is ignored; 64-bit values fold their two words together.
    del seed
    words = to_uint32_words(value)
    if words.shape[0] == 1:
        return words[0]
    return jnp.bitwise_xor(words[0], words[1])


HASH_FUNCTIONS: dict[str, Callable[[chex.Array, int], chex.Array]] = {
    "xxhash": xxhash_value,
    "identity": identity_value,
}


def get_hash_function(name: str) -> Callable[[chex.Array, int], chex.Array]:
    try:
        return HASH_FUNCTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown hash function {name!r}. Expected one of: {', '.join(sorted(HASH_FUNCTIONS))}."
        ) from None


def slot_index(hash_value: chex.Array, modulus: int) -> chex.Array:
    """Reduce a 32-bit hash to a slot in ``[0, modulus)``."""
    hash_value = jnp.asarray(hash_value, dtype=jnp.uint32)
    modulus = max(int(modulus), 1)
    # Power-of-two capacities reduce with a mask; the default prime sizes use modulo.
    if modulus & (modulus - 1) == 0:
        return hash_value & jnp.uint32(modulus - 1)
    return hash_value % jnp.uint32(modulus)
