"""
Primary-key generation for one packaging run.
"""

import time
from typing import Iterator, Optional


class IdGenerator:
    """
    Strictly increasing integer ids, seeded from a millisecond timestamp.

    A fresh generator is created for every write and passed explicitly to
    whoever needs ids, so two runs never share counter state.
    """

    def __init__(self, seed: int):
        self._next = seed

    @classmethod
    def from_timestamp(cls, timestamp: Optional[float] = None) -> "IdGenerator":
        if timestamp is None:
            timestamp = time.time()
        return cls(int(timestamp * 1000))

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        """The id the next call will return."""
        return self._next
