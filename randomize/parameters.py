"""
Distribution parameters: one immutable value type per distribution kind.

Every kind carries optional bounds and an optional rounding precision; each
subclass adds only the shape fields its distribution uses. A parameters value
can describe itself (``get_properties``), draw samples (``samples``) and be
persisted through the codec (``to_string`` / ``parse``).
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterator, Optional, Sequence, Tuple, Type

import numpy as np

from .distributions import (
    DEFAULT_WEIGHTS,
    NEARLY_ZERO,
    BinomialDistribution,
    CategoricalDistribution,
    ContinuousUniformDistribution,
    DiscreteUniformDistribution,
    DistributionProperties,
    DistributionType,
    ExponentialDistribution,
    LogisticDistribution,
    LogNormalDistribution,
    NormalDistribution,
    PositiveNormalDistribution,
)
from .generator import INT_MIN, RandomNumberGenerator
from .mersenne import INT_MAX, UINT_MAX
from .options import RandomizeOptions


def _clamp_positive(value: float) -> float:
    """Clamp a rate or scale to the nearly-zero epsilon; NaN passes through."""
    value = float(value)
    if math.isnan(value):
        return value
    return max(NEARLY_ZERO, value)


@dataclass(frozen=True)
class DistributionParameters(ABC):
    """
    Base of the parameter sum type.

    Attributes:
        minimum: Inclusive lower bound, or None for unbounded.
        maximum: Upper bound, or None for unbounded.
        precision: Number of decimal places samples are rounded to, or None.
    """

    minimum: Optional[float] = None
    maximum: Optional[float] = None
    precision: Optional[int] = None

    _registry: ClassVar[Dict[DistributionType, Type["DistributionParameters"]]] = {}
    distribution_type: ClassVar[DistributionType]
    # Number of shape parameters in encoded form; None when variable.
    parameter_count: ClassVar[Optional[int]] = 0

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "distribution_type" in cls.__dict__:
            cls._registry[cls.distribution_type] = cls

    def __post_init__(self):
        # An infinite bound in the unbounded direction is the same as no bound.
        if self.minimum is not None:
            minimum = float(self.minimum)
            object.__setattr__(self, "minimum", None if minimum == -math.inf else minimum)
        if self.maximum is not None:
            maximum = float(self.maximum)
            object.__setattr__(self, "maximum", None if maximum == math.inf else maximum)
        if self.precision is not None and not 0 <= self.precision <= 255:
            raise ValueError(f"Precision must be between 0 and 255, got {self.precision}")

    @classmethod
    def for_type(cls, distribution_type: DistributionType) -> Type["DistributionParameters"]:
        return cls._registry[distribution_type]

    @classmethod
    def create(cls, distribution_type: DistributionType, minimum: Optional[float] = None,
               maximum: Optional[float] = None, parameters: Sequence[float] = (),
               precision: Optional[int] = None) -> "DistributionParameters":
        """
        Build the parameters value for *distribution_type* from an ordered list
        of shape parameters. Missing trailing parameters take their defaults;
        surplus ones are ignored.
        """
        kind = cls.for_type(distribution_type)
        return kind(minimum, maximum, precision, **kind._shape_kwargs(tuple(parameters)))

    @classmethod
    def _shape_kwargs(cls, parameters: Tuple[float, ...]) -> Dict[str, object]:
        return {}

    @property
    def shape_parameters(self) -> Tuple[float, ...]:
        """Shape parameters in their fixed encoding order."""
        return ()

    @abstractmethod
    def get_properties(self) -> DistributionProperties:
        """Closed-form properties of this distribution."""

    @abstractmethod
    def _raw_samples(self, generator: RandomNumberGenerator, count: int,
                     options: Optional[RandomizeOptions]) -> Iterator:
        """Unrounded samples from the matching sampler."""

    def samples(self, generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                options: Optional[RandomizeOptions] = None) -> Iterator:
        """
        Lazily draw *count* samples of this distribution.

        Float samples are rounded to ``precision`` decimal places when it is set.
        """
        generator = generator or RandomNumberGenerator()
        values = self._raw_samples(generator, count, options)
        if self.precision is None:
            return values
        return (self._round(v) for v in values)

    def sample_array(self, generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                     options: Optional[RandomizeOptions] = None) -> np.ndarray:
        """Draw *count* samples into a float64 numpy array."""
        count = max(0, count)
        return np.fromiter(self.samples(generator, count, options), dtype=np.float64, count=count)

    def _round(self, value):
        if isinstance(value, float) and math.isfinite(value):
            return round(value, self.precision)
        return value

    def combine(self, other: "DistributionParameters") -> "DistributionParameters":
        """
        Merge two parameter values: the widest bounds, the highest precision,
        the kind with the higher index, and shape parameters averaged position
        by position (a position present in only one value is copied).
        """
        mine, theirs = self.shape_parameters, other.shape_parameters
        parameters = []
        for i in range(max(len(mine), len(theirs))):
            if i < len(mine) and i < len(theirs):
                parameters.append((mine[i] + theirs[i]) / 2.0)
            else:
                parameters.append(mine[i] if i < len(mine) else theirs[i])

        def merge(a, b, pick):
            if a is None:
                return b
            if b is None:
                return a
            return pick(a, b)

        distribution_type = max(self.distribution_type, other.distribution_type,
                                key=lambda t: t.value)
        return DistributionParameters.create(
            distribution_type,
            merge(self.minimum, other.minimum, min),
            merge(self.maximum, other.maximum, max),
            parameters,
            merge(self.precision, other.precision, max),
        )

    def to_string(self, format: Optional[str] = None) -> str:
        """Encode with the ``"g"`` (general, default) or ``"r"`` (round-trip) format."""
        from .codec import format_parameters
        return format_parameters(self, format)

    def __str__(self) -> str:
        return self.to_string("g")

    @classmethod
    def parse(cls, text: str, format: Optional[str] = None) -> "DistributionParameters":
        """Parse *text* in the given format, or trying ``"g"`` then ``"r"`` when omitted."""
        from .codec import parse, parse_exact
        return parse(text) if format is None else parse_exact(text, format)


@dataclass(frozen=True)
class ContinuousUniformParameters(DistributionParameters):
    """
    Uniform real numbers in ``[minimum, maximum)``.

    Absent bounds mean ``[0, 1)``; with only one bound set, the range is the
    unit interval starting or ending at it.
    """

    distribution_type: ClassVar[DistributionType] = DistributionType.CONTINUOUS_UNIFORM

    def _bounds(self):
        if self.minimum is None and self.maximum is None:
            return 0.0, 1.0
        if self.maximum is None:
            return self.minimum, self.minimum + 1.0
        if self.minimum is None:
            return self.maximum - 1.0, self.maximum
        return self.minimum, self.maximum

    def get_properties(self) -> DistributionProperties:
        return ContinuousUniformDistribution.get_properties(*self._bounds())

    def _raw_samples(self, generator, count, options):
        return ContinuousUniformDistribution.samples(generator, count, *self._bounds(), options=options)


@dataclass(frozen=True)
class _DiscreteUniformParameters(DistributionParameters):
    """Integer bounds; absent ones default to the limits of the integer type."""

    signed: ClassVar[bool]
    lowest: ClassVar[int]
    highest: ClassVar[int]

    def __post_init__(self):
        super().__post_init__()
        # -inf minimum and +inf maximum were already turned into absent bounds.
        for bound in (self.minimum, self.maximum):
            if bound is not None and not math.isfinite(bound):
                raise ValueError(f"Integer bounds must be finite, got {bound}")

    def _bounds(self):
        return (self.lowest if self.minimum is None else int(self.minimum),
                self.highest if self.maximum is None else int(self.maximum))

    def get_properties(self) -> DistributionProperties:
        return DiscreteUniformDistribution.get_properties(*self._bounds())

    def _raw_samples(self, generator, count, options):
        return DiscreteUniformDistribution.samples(
            generator, count, *self._bounds(), signed=self.signed, options=options)


@dataclass(frozen=True)
class DiscreteUniformSignedParameters(_DiscreteUniformParameters):
    """Uniform signed 32-bit integers in ``[minimum, maximum]``."""

    distribution_type: ClassVar[DistributionType] = DistributionType.DISCRETE_UNIFORM_SIGNED
    signed: ClassVar[bool] = True
    lowest: ClassVar[int] = INT_MIN
    highest: ClassVar[int] = INT_MAX


@dataclass(frozen=True)
class DiscreteUniformUnsignedParameters(_DiscreteUniformParameters):
    """Uniform unsigned 32-bit integers in ``[minimum, maximum]``."""

    distribution_type: ClassVar[DistributionType] = DistributionType.DISCRETE_UNIFORM_UNSIGNED
    signed: ClassVar[bool] = False
    lowest: ClassVar[int] = 0
    highest: ClassVar[int] = UINT_MAX


@dataclass(frozen=True)
class BinomialParameters(DistributionParameters):
    """Successes in *n* trials with success probability *p*."""

    n: int = 1
    p: float = 0.5

    distribution_type: ClassVar[DistributionType] = DistributionType.BINOMIAL
    parameter_count: ClassVar[Optional[int]] = 2

    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.n, float) and not math.isfinite(self.n):
            raise ValueError(f"Binomial sample size must be finite, got {self.n}")
        object.__setattr__(self, "n", max(0, int(self.n)))
        object.__setattr__(self, "p", float(self.p))

    @classmethod
    def _shape_kwargs(cls, parameters):
        kwargs = {}
        if len(parameters) > 0:
            kwargs["n"] = parameters[0]
        if len(parameters) > 1:
            kwargs["p"] = parameters[1]
        return kwargs

    @property
    def shape_parameters(self):
        return (float(self.n), self.p)

    def get_properties(self) -> DistributionProperties:
        return BinomialDistribution.get_properties(self.n, self.p)

    def _raw_samples(self, generator, count, options):
        return BinomialDistribution.samples(generator, count, self.n, self.p)


@dataclass(frozen=True)
class CategoricalParameters(DistributionParameters):
    """Weighted categories; weights are stored normalized."""

    weights: Tuple[float, ...] = field(default=DEFAULT_WEIGHTS)

    distribution_type: ClassVar[DistributionType] = DistributionType.CATEGORICAL
    parameter_count: ClassVar[Optional[int]] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "weights", CategoricalDistribution.normalize_weights(self.weights))

    @classmethod
    def _shape_kwargs(cls, parameters):
        return {"weights": parameters}

    @property
    def shape_parameters(self):
        return self.weights

    def get_properties(self) -> DistributionProperties:
        return CategoricalDistribution.get_properties(self.weights)

    def _raw_samples(self, generator, count, options):
        return CategoricalDistribution.samples(generator, count, self.weights)


@dataclass(frozen=True)
class ExponentialParameters(DistributionParameters):
    """Exponential distribution with rate ``lambda_``; only ``maximum`` bounds samples."""

    lambda_: float = 1.0

    distribution_type: ClassVar[DistributionType] = DistributionType.EXPONENTIAL
    parameter_count: ClassVar[Optional[int]] = 1

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "lambda_", _clamp_positive(self.lambda_))

    @classmethod
    def _shape_kwargs(cls, parameters):
        return {"lambda_": parameters[0]} if parameters else {}

    @property
    def shape_parameters(self):
        return (self.lambda_,)

    def get_properties(self) -> DistributionProperties:
        return ExponentialDistribution.get_properties(self.lambda_)

    def _raw_samples(self, generator, count, options):
        return ExponentialDistribution.samples(generator, count, self.lambda_, self.maximum)


@dataclass(frozen=True)
class _LocationScaleParameters(DistributionParameters):
    mu: float = 0.0
    sigma: float = 1.0

    parameter_count: ClassVar[Optional[int]] = 2

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "mu", float(self.mu))
        object.__setattr__(self, "sigma", _clamp_positive(self.sigma))

    @classmethod
    def _shape_kwargs(cls, parameters):
        kwargs = {}
        if len(parameters) > 0:
            kwargs["mu"] = parameters[0]
        if len(parameters) > 1:
            kwargs["sigma"] = parameters[1]
        return kwargs

    @property
    def shape_parameters(self):
        return (self.mu, self.sigma)


@dataclass(frozen=True)
class NormalParameters(_LocationScaleParameters):
    distribution_type: ClassVar[DistributionType] = DistributionType.NORMAL

    def get_properties(self) -> DistributionProperties:
        return NormalDistribution.get_properties(self.mu, self.sigma)

    def _raw_samples(self, generator, count, options):
        return NormalDistribution.samples(
            generator, count, self.mu, self.sigma, self.minimum, self.maximum, options)


@dataclass(frozen=True)
class LogNormalParameters(_LocationScaleParameters):
    distribution_type: ClassVar[DistributionType] = DistributionType.LOG_NORMAL

    def get_properties(self) -> DistributionProperties:
        return LogNormalDistribution.get_properties(self.mu, self.sigma)

    def _raw_samples(self, generator, count, options):
        return LogNormalDistribution.samples(
            generator, count, self.mu, self.sigma, self.minimum, self.maximum, options)


@dataclass(frozen=True)
class LogisticParameters(_LocationScaleParameters):
    distribution_type: ClassVar[DistributionType] = DistributionType.LOGISTIC

    def get_properties(self) -> DistributionProperties:
        return LogisticDistribution.get_properties(self.mu, self.sigma)

    def _raw_samples(self, generator, count, options):
        return LogisticDistribution.samples(
            generator, count, self.mu, self.sigma, self.minimum, self.maximum, options)


@dataclass(frozen=True)
class PositiveNormalParameters(_LocationScaleParameters):
    """Upper half-normal; *mu* is the implied minimum, so only ``maximum`` bounds samples."""

    distribution_type: ClassVar[DistributionType] = DistributionType.POSITIVE_NORMAL

    def get_properties(self) -> DistributionProperties:
        return PositiveNormalDistribution.get_properties(self.mu, self.sigma)

    def _raw_samples(self, generator, count, options):
        return PositiveNormalDistribution.samples(
            generator, count, self.mu, self.sigma, self.maximum, options)


def fixed_int(value: int) -> DiscreteUniformSignedParameters:
    """Parameters that always produce the signed integer *value*."""
    return DiscreteUniformSignedParameters(value, value)


def fixed_uint(value: int) -> DiscreteUniformUnsignedParameters:
    """Parameters that always produce the unsigned integer *value*."""
    return DiscreteUniformUnsignedParameters(value, value)


def fixed_real(value: float, precision: Optional[int] = None) -> ContinuousUniformParameters:
    """Parameters that always produce the real number *value*."""
    return ContinuousUniformParameters(value, value, precision)


DEFAULT = ContinuousUniformParameters(0.0, 1.0)
ZERO = fixed_int(0)
