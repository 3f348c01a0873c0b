import jax.numpy as jnp

SIZE_DTYPE = jnp.uint32
OUTCOME_DTYPE = jnp.int8

# Smallest table built when the capacity is derived from the input length.
MIN_AUTO_CAPACITY = 7


class ProbeOutcome:
    """Result codes of ``ProbeTable.lookup_or_insert``."""

    ALREADY_PRESENT = 0
    INSERTED = 1
    TABLE_FULL = 2


__all__ = ["SIZE_DTYPE", "OUTCOME_DTYPE", "MIN_AUTO_CAPACITY", "ProbeOutcome"]
