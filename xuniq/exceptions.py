from __future__ import annotations


class XuniqError(Exception):
    """Base class for errors raised by xuniq."""


class CapacityExceeded(XuniqError):
    """The probe table ran out of room for a new distinct value.

    Raised instead of probing forever once the table is at its load bound
    or has no empty slot left.
    """

    def __init__(self, capacity: int, max_load: int, index: int | None = None):
        self.capacity = capacity
        self.max_load = max_load
        self.index = index
        where = "" if index is None else f" at input index {index}"
        super().__init__(
            f"Probe table capacity exceeded{where}: capacity={capacity}, max_load={max_load}. "
            "Pass capacity=None to size the table from the input."
        )
