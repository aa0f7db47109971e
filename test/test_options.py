"""Tests for randomize.options -- range-inversion configuration."""

import json
import math

import pytest

from randomize import DEFAULT_OPTIONS, InvalidFloatingRangeResult, InvalidIntegralRangeResult, RandomizeOptions
from randomize.options import resolve_floating_range, resolve_integral_range


class TestLoading:

    def test_defaults(self):
        assert DEFAULT_OPTIONS.invalid_floating_range is InvalidFloatingRangeResult.MIN_BOUND
        assert DEFAULT_OPTIONS.invalid_integral_range is InvalidIntegralRangeResult.MIN_BOUND

    def test_from_dict_is_case_insensitive(self):
        options = RandomizeOptions.from_dict({"invalid_floating_range": "NaN",
                                              "invalid_integral_range": "Max-Bound"})
        assert options.invalid_floating_range is InvalidFloatingRangeResult.NAN
        assert options.invalid_integral_range is InvalidIntegralRangeResult.MAX_BOUND

    def test_from_dict_keeps_missing_defaults(self):
        options = RandomizeOptions.from_dict({"invalid_integral_range": "swap"})
        assert options.invalid_floating_range is InvalidFloatingRangeResult.MIN_BOUND
        assert options.invalid_integral_range is InvalidIntegralRangeResult.SWAP

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            RandomizeOptions.from_dict({"invalid_floating_range": "clip"})

    def test_integral_nan_rejected(self):
        with pytest.raises(ValueError):
            RandomizeOptions(invalid_integral_range="nan")

    def test_from_file(self, tmp_path):
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"invalid_floating_range": "exception"}))
        options = RandomizeOptions.from_file(path)
        assert options.invalid_floating_range is InvalidFloatingRangeResult.EXCEPTION

    def test_from_env(self):
        options = RandomizeOptions.from_env({
            "RANDOMIZE_INVALID_FLOATING_RANGE": "zero",
            "RANDOMIZE_INVALID_INTEGRAL_RANGE": "",
        })
        assert options.invalid_floating_range is InvalidFloatingRangeResult.ZERO
        assert options.invalid_integral_range is InvalidIntegralRangeResult.MIN_BOUND

    def test_to_dict_round_trip(self):
        options = RandomizeOptions(InvalidFloatingRangeResult.SWAP, InvalidIntegralRangeResult.ZERO)
        assert options.to_dict() == {"invalid_floating_range": "swap", "invalid_integral_range": "zero"}
        assert RandomizeOptions.from_dict(options.to_dict()) == options

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_OPTIONS.invalid_floating_range = InvalidFloatingRangeResult.SWAP


class TestResolve:

    def test_floating(self):
        assert resolve_floating_range(5.0, 2.0, InvalidFloatingRangeResult.MIN_BOUND) == (5.0, 5.0)
        assert resolve_floating_range(5.0, 2.0, InvalidFloatingRangeResult.ZERO) == (0.0, 0.0)
        assert resolve_floating_range(5.0, 2.0, InvalidFloatingRangeResult.MAX_BOUND) == (2.0, 2.0)
        assert resolve_floating_range(5.0, 2.0, InvalidFloatingRangeResult.SWAP) == (2.0, 5.0)
        assert all(math.isnan(v) for v in resolve_floating_range(5.0, 2.0, InvalidFloatingRangeResult.NAN))
        with pytest.raises(ValueError, match="minimum"):
            resolve_floating_range(5.0, 2.0, InvalidFloatingRangeResult.EXCEPTION)

    def test_integral(self):
        assert resolve_integral_range(5, 2, InvalidIntegralRangeResult.SWAP) == (2, 5)
        with pytest.raises(ValueError):
            resolve_integral_range(5, 2, InvalidIntegralRangeResult.EXCEPTION)
