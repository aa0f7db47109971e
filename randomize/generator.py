"""
Uniform value derivation on top of the Mersenne Twister.

RandomNumberGenerator turns raw 32-bit words into booleans, bytes, bounded
integers and bounded floating-point values. Every bounded draw with an
inverted range consults the generator's RandomizeOptions.
"""

import math
import threading
from decimal import Decimal
from typing import Optional, Union

from .errors import NULL_BUFFER
from .mersenne import INT_MAX, UINT_MAX, MersenneTwister
from .options import (
    DEFAULT_OPTIONS,
    InvalidFloatingRangeResult,
    InvalidIntegralRangeResult,
    RandomizeOptions,
    resolve_floating_range,
    resolve_integral_range,
)

INT_MIN = -INT_MAX - 1


class RandomNumberGenerator:
    """
    A seedable pseudo-random number generator.

    Bounded methods follow the ``random.randrange`` convention: called with one
    argument it is the upper bound (from zero), called with two it is a
    ``(min_value, max_value)`` range.

    A single instance may be shared between threads. Word production and the
    boolean bit cache are each guarded by a lock held only for one state change.
    """

    def __init__(self, seed: Optional[int] = None, options: Optional[RandomizeOptions] = None):
        """
        Initialize the generator.

        Args:
            seed: Unsigned 32-bit seed; gathered from ambient entropy when omitted.
            options: Range-inversion policies; library defaults when omitted.
        """
        self._generator = MersenneTwister(seed)
        self.options = options if options is not None else DEFAULT_OPTIONS
        self._lock = threading.Lock()
        self._bit_buffer = 0
        self._bit_count = 0

    @property
    def seed(self) -> int:
        return self._generator.seed

    @seed.setter
    def seed(self, value: int) -> None:
        self.reset(value)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator to *seed*, or to its current seed when omitted.

        An identical series of values is produced after every reset to the same seed.
        """
        with self._lock:
            self._bit_buffer = 0
            self._bit_count = 0
        self._generator.reset(seed)

    def getstate(self):
        with self._lock:
            return self._generator.getstate(), self._bit_buffer, self._bit_count

    def setstate(self, state) -> None:
        generator_state, bit_buffer, bit_count = state
        self._generator.setstate(generator_state)
        with self._lock:
            self._bit_buffer = bit_buffer
            self._bit_count = bit_count

    def next_word(self) -> int:
        """Return the next raw unsigned 32-bit word."""
        return self._generator.next_word()

    def next_bool(self) -> bool:
        """Return a random boolean, drawing one bit at a time from a cached word."""
        with self._lock:
            if self._bit_count == 0:
                self._bit_buffer = self.next_uint()
                self._bit_count = 31
                return (self._bit_buffer & 0x1) == 1
            self._bit_count -= 1
            self._bit_buffer >>= 1
            return (self._bit_buffer & 0x1) == 1

    def next_bytes(self, buffer):
        """
        Fill *buffer* (a bytearray or writable memoryview) with random bytes.

        Bytes are taken four at a time from successive words, least significant
        first; a 1-3 byte tail consumes one more full word.

        Returns:
            The same buffer, for convenience.
        """
        if buffer is None:
            raise TypeError(NULL_BUFFER)
        length = len(buffer)
        i = 0
        while i < length - 3:
            buffer[i:i + 4] = self.next_uint().to_bytes(4, "little")
            i += 4
        if i < length:
            buffer[i:length] = self.next_uint().to_bytes(4, "little")[:length - i]
        return buffer

    def next_int(self, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
        """
        Return a random integer.

        With no arguments the result is in ``[0, 2**31 - 1)``. With one argument
        it is in ``[0, max)``; a negative bound acts as an exclusive minimum with
        zero the inclusive maximum. With two arguments it is in ``[min, max)``.
        """
        if min_value is None:
            while True:
                result = self._generator.next_inclusive()
                if result != INT_MAX:
                    return result
        if max_value is None:
            return int(self._generator.next_double() * min_value)
        if min_value > max_value:
            policy = self.options.invalid_integral_range
            min_value, max_value = resolve_integral_range(min_value, max_value, policy)
            if policy is not InvalidIntegralRangeResult.SWAP:
                return min_value
        return min_value + int(self._generator.next_double() * (max_value - float(min_value)))

    def next_int_inclusive(self, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
        """
        Return a random integer with an inclusive upper bound.

        With no arguments the result is in ``[0, 2**31 - 1]``; otherwise as
        next_int with the maximum included.
        """
        if min_value is None:
            return self._generator.next_inclusive()
        if max_value is None:
            if min_value == 0:
                return 0
            if min_value == INT_MAX:
                return int(self._generator.next_double() * (INT_MAX + 1.0))
            return self.next_int(min_value - 1 if min_value < 0 else min_value + 1)
        if min_value > max_value:
            policy = self.options.invalid_integral_range
            min_value, max_value = resolve_integral_range(min_value, max_value, policy)
            if policy is not InvalidIntegralRangeResult.SWAP:
                return min_value
        if max_value < INT_MAX:
            return self.next_int(min_value, max_value + 1)
        if min_value > INT_MIN:
            return self.next_int(min_value - 1, max_value) + 1
        return INT_MIN + int(self.next_double((2.0 * INT_MAX) + 1))

    def next_uint(self, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
        """
        Return a random unsigned integer.

        With no arguments the result is in ``[0, 2**32 - 1)``. With one argument
        it is in ``[0, max)``, with two in ``[min, max)``.
        """
        if min_value is None:
            while True:
                result = self._generator.next_uint_inclusive()
                if result != UINT_MAX:
                    return result
        if max_value is None:
            return int(self._generator.next_double() * min_value)
        if min_value > max_value:
            policy = self.options.invalid_integral_range
            min_value, max_value = resolve_integral_range(min_value, max_value, policy)
            if policy is not InvalidIntegralRangeResult.SWAP:
                return min_value
        return min_value + int(self._generator.next_double() * (max_value - float(min_value)))

    def next_uint_inclusive(self, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
        """Return a random unsigned integer with an inclusive upper bound."""
        if min_value is None:
            return self._generator.next_uint_inclusive()
        if max_value is None:
            if min_value == 0:
                return 0
            if min_value == UINT_MAX:
                return int(self._generator.next_double() * (UINT_MAX + 1.0))
            return self.next_uint(min_value + 1)
        if min_value > max_value:
            policy = self.options.invalid_integral_range
            min_value, max_value = resolve_integral_range(min_value, max_value, policy)
            if policy is not InvalidIntegralRangeResult.SWAP:
                return min_value
        if max_value < UINT_MAX:
            return self.next_uint(min_value, max_value + 1)
        if min_value > 0:
            return self.next_uint(min_value - 1, max_value) + 1
        return self._generator.next_uint_inclusive()

    def next_double(self, min_value: Optional[float] = None, max_value: Optional[float] = None) -> float:
        """
        Return a random float.

        With no arguments the result is in ``[0, 1)``. With one argument it is
        in ``[0, max)``. With two it is in ``[min, max)``.

        NaN bounds give NaN. An infinite bound is returned as the result, unless
        both bounds are opposite infinities, in which case the sign is random.
        An inverted range is handled by ``options.invalid_floating_range``.
        """
        if min_value is None:
            return self._generator.next_double()
        if max_value is None:
            if math.isnan(min_value):
                return math.nan
            if math.isinf(min_value):
                return min_value
            return self._generator.next_double() * min_value
        if math.isnan(min_value) or math.isnan(max_value):
            return math.nan
        if min_value > max_value:
            policy = self.options.invalid_floating_range
            min_value, max_value = resolve_floating_range(min_value, max_value, policy)
            if policy is not InvalidFloatingRangeResult.SWAP:
                return min_value
        if math.isinf(min_value):
            if math.isinf(max_value) and min_value != max_value:
                return math.inf if self.next_bool() else -math.inf
            return min_value
        if math.isinf(max_value):
            return max_value
        return min_value + (self._generator.next_double() * (max_value - min_value))

    def next_decimal(self, min_value: Union[Decimal, int, None] = None,
                     max_value: Union[Decimal, int, None] = None) -> Decimal:
        """
        Return a random Decimal in ``[0, 1)``, ``[0, max)`` or ``[min, max)``.

        Inverted ranges follow ``options.invalid_integral_range``.
        """
        if min_value is None:
            return self._generator.next_decimal()
        if max_value is None:
            return self._generator.next_decimal() * Decimal(min_value)
        min_value = Decimal(min_value)
        max_value = Decimal(max_value)
        if min_value > max_value:
            policy = self.options.invalid_integral_range
            min_value, max_value = resolve_integral_range(min_value, max_value, policy)
            if policy is not InvalidIntegralRangeResult.SWAP:
                return Decimal(min_value)
        return min_value + (self._generator.next_decimal() * (max_value - min_value))
