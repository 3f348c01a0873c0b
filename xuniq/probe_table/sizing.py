"""Capacity planning for probe tables."""
from __future__ import annotations

from absl import logging

from .constants import MIN_AUTO_CAPACITY


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def next_prime(n: int) -> int:
    """Smallest prime >= n."""
    if n <= 2:
        return 2
    candidate = n if n % 2 else n + 1
    while not is_prime(candidate):
        candidate += 2
    return candidate


def plan_capacity(length: int, capacity: int | None = None) -> int:
    """Pick the probe table capacity for an input of ``length`` values.

    ``capacity=None`` sizes the table to the next prime >= 2 * length, which
    keeps the load factor at or below one half even when every value is
    distinct. An explicit capacity is returned unchanged (fixed sizing).
    """
    if capacity is not None:
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}.")
        return capacity
    planned = next_prime(max(2 * int(length), MIN_AUTO_CAPACITY))
    logging.debug("Planned probe table capacity %d for %d values.", planned, length)
    return planned
