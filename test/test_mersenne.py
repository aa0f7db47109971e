"""Tests for randomize.mersenne -- the MT19937 bit generator."""

import threading
from decimal import Decimal

import numpy as np
import pytest

from randomize.mersenne import INT_MAX, N, UINT_MAX, MersenneTwister


def reference_words(seed, count):
    """Raw MT19937 output from numpy for the same seed."""
    key = np.random.RandomState(seed).get_state()[1]
    bit_generator = np.random.MT19937()
    bit_generator.state = {"bit_generator": "MT19937", "state": {"key": key, "pos": N}}
    return [int(w) for w in bit_generator.random_raw(count)]


class TestReferenceOutput:
    """State and output must match the standard MT19937."""

    @pytest.mark.parametrize("seed", [0, 1, 42, 5489, UINT_MAX])
    def test_state_matches_init_genrand(self, seed):
        key = np.random.RandomState(seed).get_state()[1]
        _, words, index = MersenneTwister(seed).getstate()
        assert list(words) == [int(k) for k in key]
        assert index == N

    def test_first_word_for_default_seed(self):
        assert MersenneTwister(5489).next_word() == 3499211612

    @pytest.mark.parametrize("seed", [0, 7, 123456789])
    def test_words_match_numpy_across_regenerations(self, seed):
        mt = MersenneTwister(seed)
        # 2000 words spans several regenerations of the state array.
        assert [mt.next_word() for _ in range(2000)] == reference_words(seed, 2000)

    def test_large_seed_is_truncated(self):
        assert MersenneTwister(2 ** 32 + 5).seed == 5


class TestDerivedPrimitives:

    def test_inclusive_is_shifted_word(self):
        a, b = MersenneTwister(99), MersenneTwister(99)
        for _ in range(100):
            assert a.next_inclusive() == b.next_word() >> 1

    def test_double_in_unit_interval(self):
        mt = MersenneTwister(3)
        values = [mt.next_double() for _ in range(10000)]
        assert all(0.0 <= v < 1.0 for v in values)

    def test_double_scales_31_bit_value(self):
        a, b = MersenneTwister(11), MersenneTwister(11)
        assert a.next_double() == (b.next_word() >> 1) / (INT_MAX + 1.0)

    def test_decimal_is_exact(self):
        a, b = MersenneTwister(11), MersenneTwister(11)
        value = a.next_decimal()
        assert isinstance(value, Decimal)
        assert value == Decimal(b.next_word() >> 1) / Decimal(2 ** 31)


class TestReset:
    """Identical seeds must replay identical sequences."""

    def test_reset_replays(self):
        mt = MersenneTwister(2024)
        first = [mt.next_word() for _ in range(700)]
        mt.reset()
        assert [mt.next_word() for _ in range(700)] == first

    def test_reset_to_new_seed(self):
        mt = MersenneTwister(1)
        mt.reset(2)
        assert mt.seed == 2
        assert [mt.next_word() for _ in range(10)] == reference_words(2, 10)

    def test_seed_setter_resets(self):
        mt = MersenneTwister(1)
        mt.next_word()
        mt.seed = 1
        assert mt.next_word() == MersenneTwister(1).next_word()

    def test_state_restore(self):
        mt = MersenneTwister(8)
        for _ in range(300):
            mt.next_word()
        state = mt.getstate()
        expected = [mt.next_word() for _ in range(500)]
        mt.setstate(state)
        assert [mt.next_word() for _ in range(500)] == expected

    def test_invalid_state_rejected(self):
        with pytest.raises(ValueError):
            MersenneTwister(1).setstate((1, (0,) * 10, 0))

    def test_unseeded_generators_get_seeds(self):
        assert 0 <= MersenneTwister().seed <= UINT_MAX


class TestThreadSafety:

    def test_shared_generator_serves_each_word_once(self):
        shared = MersenneTwister(77)
        results = []
        lock = threading.Lock()

        def worker():
            words = [shared.next_word() for _ in range(1000)]
            with lock:
                results.extend(words)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == sorted(reference_words(77, 4000))
