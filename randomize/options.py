"""
Range-inversion policies and the configuration value that carries them.

A generator is built with a RandomizeOptions value and every bounded draw or
bounded sampler consults it when a caller passes a minimum above the maximum.
"""

import json
import math
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import MIN_ABOVE_MAX


FLOATING_RANGE_ENV = "RANDOMIZE_INVALID_FLOATING_RANGE"
INTEGRAL_RANGE_ENV = "RANDOMIZE_INVALID_INTEGRAL_RANGE"


class InvalidFloatingRangeResult(Enum):
    """Result of a floating-point draw whose minimum exceeds its maximum."""
    MIN_BOUND = 0
    ZERO = 1
    MAX_BOUND = 2
    SWAP = 3
    EXCEPTION = 4
    NAN = 5


class InvalidIntegralRangeResult(Enum):
    """Result of an integral draw whose minimum exceeds its maximum."""
    MIN_BOUND = 0
    ZERO = 1
    MAX_BOUND = 2
    SWAP = 3
    EXCEPTION = 4


def _policy_from_value(enum_type, value):
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace("-", "_")
        if key in enum_type.__members__:
            return enum_type[key]
    raise ValueError(f"Unknown {enum_type.__name__} policy: {value!r}")


@dataclass(frozen=True)
class RandomizeOptions:
    """Policies applied when the minimum bound of a range is above the maximum."""

    invalid_floating_range: InvalidFloatingRangeResult = InvalidFloatingRangeResult.MIN_BOUND
    invalid_integral_range: InvalidIntegralRangeResult = InvalidIntegralRangeResult.MIN_BOUND

    def __post_init__(self):
        object.__setattr__(
            self,
            "invalid_floating_range",
            _policy_from_value(InvalidFloatingRangeResult, self.invalid_floating_range),
        )
        object.__setattr__(
            self,
            "invalid_integral_range",
            _policy_from_value(InvalidIntegralRangeResult, self.invalid_integral_range),
        )

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "RandomizeOptions":
        """Create options from a dictionary of policy names."""
        return cls(
            invalid_floating_range=config_dict.get(
                "invalid_floating_range", InvalidFloatingRangeResult.MIN_BOUND
            ),
            invalid_integral_range=config_dict.get(
                "invalid_integral_range", InvalidIntegralRangeResult.MIN_BOUND
            ),
        )

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "RandomizeOptions":
        """Load options from a JSON file."""
        with open(config_path, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RandomizeOptions":
        """Load options from environment variables, keeping defaults for unset ones."""
        environ = os.environ if environ is None else environ
        config_dict: Dict[str, str] = {}
        if environ.get(FLOATING_RANGE_ENV):
            config_dict["invalid_floating_range"] = environ[FLOATING_RANGE_ENV]
        if environ.get(INTEGRAL_RANGE_ENV):
            config_dict["invalid_integral_range"] = environ[INTEGRAL_RANGE_ENV]
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, str]:
        return {
            "invalid_floating_range": self.invalid_floating_range.name.lower(),
            "invalid_integral_range": self.invalid_integral_range.name.lower(),
        }


DEFAULT_OPTIONS = RandomizeOptions()


def resolve_floating_range(minimum: float, maximum: float,
                           policy: InvalidFloatingRangeResult) -> Tuple[float, float]:
    """
    Apply *policy* to an inverted floating range.

    Returns the corrected ``(minimum, maximum)`` pair. Every policy except SWAP
    collapses the range to a single value (NaN for the NAN policy).
    """
    if policy is InvalidFloatingRangeResult.MIN_BOUND:
        return minimum, minimum
    if policy is InvalidFloatingRangeResult.ZERO:
        return 0.0, 0.0
    if policy is InvalidFloatingRangeResult.MAX_BOUND:
        return maximum, maximum
    if policy is InvalidFloatingRangeResult.SWAP:
        return maximum, minimum
    if policy is InvalidFloatingRangeResult.NAN:
        return math.nan, math.nan
    raise ValueError(MIN_ABOVE_MAX)


def resolve_integral_range(minimum, maximum, policy: InvalidIntegralRangeResult):
    """Apply *policy* to an inverted integral range; see resolve_floating_range."""
    if policy is InvalidIntegralRangeResult.MIN_BOUND:
        return minimum, minimum
    if policy is InvalidIntegralRangeResult.ZERO:
        return 0, 0
    if policy is InvalidIntegralRangeResult.MAX_BOUND:
        return maximum, maximum
    if policy is InvalidIntegralRangeResult.SWAP:
        return maximum, minimum
    raise ValueError(MIN_ABOVE_MAX)
