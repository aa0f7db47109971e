"""
Mersenne Twister (MT19937) bit generator.

Produces tempered 32-bit words from a 624-word state with period 2**19937-1.
Identical seeds always replay identical word sequences.
"""

import threading
from decimal import Decimal
from typing import Optional, Tuple

from .seeding import UINT32_MASK, new_seed

N = 624
M = 397

MATRIX_A = 0x9908B0DF
UPPER_MASK = 0x80000000
LOWER_MASK = 0x7FFFFFFF

INT_MAX = 0x7FFFFFFF
UINT_MAX = 0xFFFFFFFF

_MAG01 = (0x0, MATRIX_A)

# Multiplying a non-negative 31-bit int by these yields a value in [0, 1).
INT_TO_DOUBLE = 1.0 / (INT_MAX + 1.0)
INT_TO_DECIMAL = Decimal(1) / Decimal(INT_MAX + 1)


class MersenneTwister:
    """
    A thread-safe MT19937 generator.

    The lock guards only the state mutation (one word served, or one full
    regeneration of the state array); tempering happens outside it.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            seed: Unsigned 32-bit seed. A fresh seed is gathered from ambient
                entropy when omitted. Larger values are truncated to 32 bits.
        """
        self._lock = threading.Lock()
        self._mt = [0] * N
        self._mti = N
        self._seed = 0
        self.reset(new_seed() if seed is None else seed)

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self.reset(value)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Re-derive the state array from *seed* (or from the current seed when
        omitted). The cursor is left at the end of the array so the first draw
        regenerates it.
        """
        with self._lock:
            if seed is not None:
                self._seed = seed & UINT32_MASK
            mt = self._mt
            mt[0] = self._seed
            for i in range(1, N):
                prev = mt[i - 1]
                mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & UINT32_MASK
            self._mti = N

    def _generate(self) -> None:
        mt = self._mt
        kk = 0
        while kk < N - M:
            y = (mt[kk] & UPPER_MASK) | (mt[kk + 1] & LOWER_MASK)
            mt[kk] = mt[kk + M] ^ (y >> 1) ^ _MAG01[y & 0x1]
            kk += 1
        while kk < N - 1:
            y = (mt[kk] & UPPER_MASK) | (mt[kk + 1] & LOWER_MASK)
            mt[kk] = mt[kk + (M - N)] ^ (y >> 1) ^ _MAG01[y & 0x1]
            kk += 1
        y = (mt[N - 1] & UPPER_MASK) | (mt[0] & LOWER_MASK)
        mt[N - 1] = mt[M - 1] ^ (y >> 1) ^ _MAG01[y & 0x1]
        self._mti = 0

    def _next_raw(self) -> int:
        with self._lock:
            if self._mti >= N:
                self._generate()
            y = self._mt[self._mti]
            self._mti += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        return (y ^ (y >> 18)) & UINT32_MASK

    def next_word(self) -> int:
        """Return the next tempered unsigned 32-bit word."""
        return self._next_raw()

    def next_uint_inclusive(self) -> int:
        """Return a random unsigned integer in [0, 2**32 - 1]."""
        return self._next_raw()

    def next_inclusive(self) -> int:
        """Return a random non-negative integer in [0, 2**31 - 1]."""
        return self._next_raw() >> 1

    def next_double(self) -> float:
        """Return a random float in [0, 1)."""
        return (self._next_raw() >> 1) * INT_TO_DOUBLE

    def next_decimal(self) -> Decimal:
        """Return a random Decimal in [0, 1)."""
        return (self._next_raw() >> 1) * INT_TO_DECIMAL

    def getstate(self) -> Tuple[int, Tuple[int, ...], int]:
        with self._lock:
            return self._seed, tuple(self._mt), self._mti

    def setstate(self, state: Tuple[int, Tuple[int, ...], int]) -> None:
        seed, words, index = state
        if len(words) != N or not 0 <= index <= N:
            raise ValueError("Invalid Mersenne Twister state")
        with self._lock:
            self._seed = seed & UINT32_MASK
            self._mt = [w & UINT32_MASK for w in words]
            self._mti = index
