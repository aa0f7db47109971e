"""
Distribution samplers and their closed-form properties.

Every sampler exposes ``get_properties(...)`` and ``samples(generator, count, ...)``.
``samples`` validates its arguments immediately and returns a lazy, single-pass
iterator of exactly ``max(0, count)`` values; consuming it again requires a new
call (reset the generator first to replay the same values).
"""

import math
import warnings
from dataclasses import asdict, dataclass
from enum import Enum
from itertools import accumulate
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import TOTAL_WEIGHT_IS_ZERO
from .generator import RandomNumberGenerator
from .options import RandomizeOptions, resolve_floating_range, resolve_integral_range

# Smallest value treated as strictly positive by this library.
NEARLY_ZERO = 1e-15

LN_2 = math.log(2.0)
PI_SQUARED = math.pi ** 2
HALF_NORMAL_MEDIAN = 0.6744897501960817  # inverse normal CDF at 0.75

REJECTION_WARNING_THRESHOLD = 100_000

DEFAULT_WEIGHTS = (1.0 / 3, 1.0 / 3, 1.0 / 3)


class DistributionType(Enum):
    """Distribution kinds; the values are the indices used in round-trip strings."""
    CONTINUOUS_UNIFORM = 0
    DISCRETE_UNIFORM_SIGNED = 1
    DISCRETE_UNIFORM_UNSIGNED = 2
    BINOMIAL = 3
    CATEGORICAL = 4
    POSITIVE_NORMAL = 5
    EXPONENTIAL = 6
    LOG_NORMAL = 7
    LOGISTIC = 8
    NORMAL = 9

    @property
    def label(self) -> str:
        """Display name, e.g. ``LogNormal``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def from_label(cls, label: str) -> "DistributionType":
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"Unknown distribution type: {label}")


def is_nearly_zero(value: float) -> bool:
    return abs(value) < NEARLY_ZERO


def is_nearly_equal(a: float, b: float) -> bool:
    if a == b:
        return True
    return math.isclose(a, b, rel_tol=NEARLY_ZERO, abs_tol=NEARLY_ZERO)


def _safe_exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


@dataclass(frozen=True)
class DistributionProperties:
    """
    Minimum, maximum, mean, median, mode(s) and variance of a distribution.

    Any value may be NaN when undefined. ``mode`` is a tuple since a
    distribution may have several modes.
    """

    maximum: float
    mean: float
    median: float
    minimum: float
    mode: Tuple[float, ...]
    variance: float

    @classmethod
    def undefined(cls) -> "DistributionProperties":
        return cls(math.nan, math.nan, math.nan, math.nan, (math.nan,), math.nan)

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        d["mode"] = list(self.mode)
        return d


def _rejection_sample(draw: Callable, accept: Callable, name: str, minimum, maximum):
    """Draw until *accept* passes; warn once if the bounds look unreachable."""
    attempts = 0
    while True:
        candidate = draw()
        if accept(candidate):
            return candidate
        attempts += 1
        if attempts == REJECTION_WARNING_THRESHOLD:
            warnings.warn(
                f"{name} sampling rejected {attempts} consecutive values outside "
                f"[{minimum}, {maximum}]; still sampling",
                RuntimeWarning,
                stacklevel=3,
            )


def _constant(value, count: int) -> Iterator:
    for _ in range(max(0, count)):
        yield value


def _is_nan_bound(bound: Optional[float]) -> bool:
    return bound is not None and math.isnan(bound)


def _has_nan(values: Sequence[float]) -> bool:
    return any(math.isnan(v) for v in values)


def _resolve_location_scale(mu: float, sigma: float, minimum: Optional[float],
                            maximum: Optional[float], options: RandomizeOptions):
    """
    Shared preamble of the location-scale samplers.

    Returns ``(constant, minimum, maximum)``. When ``constant`` is not None every
    sample is that value (NaN for a NaN shape parameter, or the collapsed
    bound); otherwise the returned bounds are ready for rejection sampling.
    """
    if math.isnan(mu) or math.isnan(sigma) or _is_nan_bound(minimum) or _is_nan_bound(maximum):
        return math.nan, minimum, maximum
    if minimum is not None and maximum is not None:
        if minimum > maximum:
            minimum, maximum = resolve_floating_range(
                minimum, maximum, options.invalid_floating_range)
            if math.isnan(minimum):
                return math.nan, minimum, maximum
        if is_nearly_equal(minimum, maximum):
            return minimum, minimum, maximum
    return None, minimum, maximum


def _options_for(generator: RandomNumberGenerator, options: Optional[RandomizeOptions]) -> RandomizeOptions:
    return options if options is not None else generator.options


def _polar_pair(generator: RandomNumberGenerator) -> Tuple[float, float, float]:
    """Draw ``(u, v, factor)`` by the polar method; ``u*factor`` and ``v*factor`` are standard normal."""
    while True:
        u = generator.next_double(-1.0, 1.0)
        v = generator.next_double(-1.0, 1.0)
        s = u * u + v * v
        if not is_nearly_zero(s) and s < 1:
            return u, v, math.sqrt(-2 * math.log(s) / s)


def _yield_pairs(draw_pair: Callable, count: int) -> Iterator[float]:
    remaining = count
    while remaining > 0:
        z0, z1 = draw_pair()
        yield z0
        remaining -= 1
        if remaining > 0:
            yield z1
            remaining -= 1


class ContinuousUniformDistribution:
    """Real numbers drawn uniformly from ``[minimum, maximum)``."""

    @staticmethod
    def get_properties(minimum: float = 0.0, maximum: float = 1.0) -> DistributionProperties:
        if math.isnan(minimum) or math.isnan(maximum):
            return DistributionProperties.undefined()
        minimum, maximum = min(minimum, maximum), max(minimum, maximum)
        mean = minimum + (maximum - minimum) / 2
        return DistributionProperties(
            maximum=maximum,
            mean=mean,
            median=mean,
            minimum=minimum,
            mode=(math.nan,),
            variance=(maximum - minimum) ** 2 / 12,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                minimum: float = 0.0, maximum: float = 1.0,
                options: Optional[RandomizeOptions] = None) -> Iterator[float]:
        generator = generator or RandomNumberGenerator()
        if minimum > maximum:
            minimum, maximum = resolve_floating_range(
                minimum, maximum, _options_for(generator, options).invalid_floating_range)
        return ContinuousUniformDistribution._generate(generator, count, minimum, maximum)

    @staticmethod
    def _generate(generator, count, minimum, maximum):
        for _ in range(max(0, count)):
            yield generator.next_double(minimum, maximum)


class DiscreteUniformDistribution:
    """Integers drawn uniformly from ``[minimum, maximum]`` (both inclusive)."""

    @staticmethod
    def get_properties(minimum: int, maximum: int) -> DistributionProperties:
        minimum, maximum = min(minimum, maximum), max(minimum, maximum)
        mean = (minimum + maximum) / 2
        return DistributionProperties(
            maximum=float(maximum),
            mean=mean,
            median=mean,
            minimum=float(minimum),
            mode=(math.nan,),
            variance=((maximum - minimum + 1) ** 2 - 1) / 12,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                minimum: int = 0, maximum: int = 0, signed: bool = True,
                options: Optional[RandomizeOptions] = None) -> Iterator[int]:
        """
        Sample integers; *signed* selects 32-bit signed or unsigned arithmetic.
        """
        generator = generator or RandomNumberGenerator()
        if minimum > maximum:
            minimum, maximum = resolve_integral_range(
                minimum, maximum, _options_for(generator, options).invalid_integral_range)
        draw = generator.next_int_inclusive if signed else generator.next_uint_inclusive
        return DiscreteUniformDistribution._generate(draw, count, minimum, maximum)

    @staticmethod
    def _generate(draw, count, minimum, maximum):
        for _ in range(max(0, count)):
            yield draw(minimum, maximum)


class BinomialDistribution:
    """
    Number of successes in *n* independent trials with success probability *p*.

    A single trial (the default) gives the Bernoulli distribution.
    """

    @staticmethod
    def get_properties(n: int = 1, p: float = 0.5) -> DistributionProperties:
        if math.isnan(p):
            return DistributionProperties.undefined()
        n = max(0, int(n))
        p = min(1.0, max(0.0, p))
        return DistributionProperties(
            maximum=float(n),
            mean=n * p,
            median=math.nan,
            minimum=0.0,
            mode=(float(min(n, math.floor(p * (n + 1)))),),
            variance=p * (1 - p) * n,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                n: int = 1, p: float = 0.5) -> Iterator:
        generator = generator or RandomNumberGenerator()
        if math.isnan(p):
            return _constant(math.nan, count)
        n = max(0, int(n))
        p = min(1.0, max(0.0, p))
        return BinomialDistribution._generate(generator, count, n, p)

    @staticmethod
    def _generate(generator, count, n, p):
        for _ in range(max(0, count)):
            successes = 0
            for _ in range(n):
                if generator.next_double() <= p:
                    successes += 1
            yield successes


class CategoricalDistribution:
    """
    Category indices drawn according to a (possibly unnormalized) weight vector.

    Negative weights count as zero; missing or empty weights mean three equal
    categories. A NaN weight makes the distribution undefined: its properties
    are NaN and every sample is NaN.
    """

    @staticmethod
    def equal_weights(k: int) -> Tuple[float, ...]:
        """Weights for *k* equally likely categories (at least one)."""
        k = max(1, k)
        return (1.0 / k,) * k

    @staticmethod
    def normalize_weights(weights: Optional[Sequence[float]] = None) -> Tuple[float, ...]:
        """
        Clamp negative weights to zero and scale them to sum to one.

        Weights containing NaN are returned clamped but unscaled.

        Raises:
            ValueError: If the weights sum to (nearly) zero.
        """
        if not weights:
            return DEFAULT_WEIGHTS
        clamped = [0.0 if w < 0 else w for w in map(float, weights)]
        if _has_nan(clamped):
            return tuple(clamped)
        total = math.fsum(clamped)
        if is_nearly_zero(total):
            raise ValueError(TOTAL_WEIGHT_IS_ZERO)
        if is_nearly_equal(total, 1.0):
            return tuple(clamped)
        return tuple(w / total for w in clamped)

    @staticmethod
    def get_properties(weights: Optional[Sequence[float]] = None) -> DistributionProperties:
        normalized = CategoricalDistribution.normalize_weights(weights)
        if _has_nan(normalized):
            return DistributionProperties.undefined()
        cumulative = list(accumulate(normalized))
        mean = math.fsum(w * i for i, w in enumerate(normalized))
        half_total = cumulative[-1] / 2
        median = next(i for i, c in enumerate(cumulative) if c >= half_total)
        mode = max(range(len(normalized)), key=lambda i: (normalized[i], -i))
        variance = math.fsum(w * (i - mean) ** 2 for i, w in enumerate(normalized))
        return DistributionProperties(
            maximum=float(len(normalized) - 1),
            mean=mean,
            median=float(median),
            minimum=0.0,
            mode=(float(mode),),
            variance=variance,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                weights: Optional[Sequence[float]] = None) -> Iterator[int]:
        generator = generator or RandomNumberGenerator()
        normalized = CategoricalDistribution.normalize_weights(weights)
        if _has_nan(normalized):
            return _constant(math.nan, count)
        cumulative = list(accumulate(normalized))
        return CategoricalDistribution._generate(generator, count, cumulative)

    @staticmethod
    def _generate(generator, count, cumulative):
        for _ in range(max(0, count)):
            yield CategoricalDistribution.select(cumulative, generator.next_double())

    @staticmethod
    def select(cumulative: List[float], u: float) -> int:
        """Binary search for the first category whose cumulative weight reaches *u*."""
        lo = 0
        hi = len(cumulative) - 1
        while lo < hi:
            index = (hi - lo) // 2 + lo
            c = cumulative[index]
            if is_nearly_equal(u, c):
                return index
            if u < c:
                hi = index
            else:
                lo = index + 1
        return lo


class ExponentialDistribution:
    """Exponential distribution with rate ``lambda_``, sampled by CDF inversion."""

    @staticmethod
    def get_properties(lambda_: float = 1.0) -> DistributionProperties:
        if math.isnan(lambda_):
            return DistributionProperties.undefined()
        lambda_ = max(NEARLY_ZERO, lambda_)
        return DistributionProperties(
            maximum=math.inf,
            mean=1 / lambda_,
            median=LN_2 / lambda_,
            minimum=0.0,
            mode=(0.0,),
            variance=lambda_ ** -2,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                lambda_: float = 1.0, maximum: Optional[float] = None) -> Iterator[float]:
        """
        Sample the distribution, rejecting values above *maximum* when given.

        A negative maximum counts as zero, and a maximum of (nearly) zero makes
        every sample ``0.0``.
        """
        generator = generator or RandomNumberGenerator()
        if math.isnan(lambda_) or _is_nan_bound(maximum):
            return _constant(math.nan, count)
        if maximum is not None:
            maximum = max(0.0, maximum)
            if is_nearly_zero(maximum):
                return _constant(0.0, count)
        return ExponentialDistribution._generate(generator, count, max(NEARLY_ZERO, lambda_), maximum)

    @staticmethod
    def _draw(generator, lambda_):
        while True:
            u = generator.next_double()
            if not is_nearly_zero(u):
                return -math.log(u) / lambda_

    @staticmethod
    def _generate(generator, count, lambda_, maximum):
        draw = lambda: ExponentialDistribution._draw(generator, lambda_)
        accept = lambda v: maximum is None or v <= maximum
        for _ in range(max(0, count)):
            yield _rejection_sample(draw, accept, "Exponential", 0.0, maximum)


class LogisticDistribution:
    """Logistic distribution with location *mu* and scale *sigma*."""

    @staticmethod
    def get_properties(mu: float = 0.0, sigma: float = 1.0) -> DistributionProperties:
        if math.isnan(mu) or math.isnan(sigma):
            return DistributionProperties.undefined()
        sigma = max(NEARLY_ZERO, sigma)
        return DistributionProperties(
            maximum=math.inf,
            mean=mu,
            median=mu,
            minimum=-math.inf,
            mode=(mu,),
            variance=sigma * sigma * PI_SQUARED / 3,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                mu: float = 0.0, sigma: float = 1.0,
                minimum: Optional[float] = None, maximum: Optional[float] = None,
                options: Optional[RandomizeOptions] = None) -> Iterator[float]:
        generator = generator or RandomNumberGenerator()
        constant, minimum, maximum = _resolve_location_scale(
            mu, sigma, minimum, maximum, _options_for(generator, options))
        if constant is not None:
            return _constant(constant, count)
        return LogisticDistribution._generate(
            generator, count, mu, max(NEARLY_ZERO, sigma), minimum, maximum)

    @staticmethod
    def _draw(generator, mu, sigma):
        while True:
            u = generator.next_double()
            if not is_nearly_zero(u * (1 - u)):
                return mu + (sigma * math.log(u / (1 - u)))

    @staticmethod
    def _generate(generator, count, mu, sigma, minimum, maximum):
        draw = lambda: LogisticDistribution._draw(generator, mu, sigma)
        accept = lambda v: ((minimum is None or v >= minimum)
                            and (maximum is None or v <= maximum))
        for _ in range(max(0, count)):
            yield _rejection_sample(draw, accept, "Logistic", minimum, maximum)


class NormalDistribution:
    """
    Normal distribution sampled with the polar Box-Muller method.

    Each accepted pair yields two independent samples; with bounds, a pair is
    redrawn whenever either of its values falls outside them.
    """

    @staticmethod
    def get_properties(mu: float = 0.0, sigma: float = 1.0) -> DistributionProperties:
        if math.isnan(mu) or math.isnan(sigma):
            return DistributionProperties.undefined()
        sigma = max(NEARLY_ZERO, sigma)
        return DistributionProperties(
            maximum=math.inf,
            mean=mu,
            median=mu,
            minimum=-math.inf,
            mode=(mu,),
            variance=sigma * sigma,
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                mu: float = 0.0, sigma: float = 1.0,
                minimum: Optional[float] = None, maximum: Optional[float] = None,
                options: Optional[RandomizeOptions] = None) -> Iterator[float]:
        generator = generator or RandomNumberGenerator()
        constant, minimum, maximum = _resolve_location_scale(
            mu, sigma, minimum, maximum, _options_for(generator, options))
        if constant is not None:
            return _constant(constant, count)
        sigma = max(NEARLY_ZERO, sigma)

        def draw():
            u, v, factor = _polar_pair(generator)
            factor *= sigma
            return mu + u * factor, mu + v * factor

        def accept(pair):
            return all((minimum is None or z >= minimum) and (maximum is None or z <= maximum)
                       for z in pair)

        return _yield_pairs(
            lambda: _rejection_sample(draw, accept, "Normal", minimum, maximum), count)


class PositiveNormalDistribution:
    """
    The upper half of a normal distribution: ``mu + |z|`` for normal ``z``.

    *mu* is the implied minimum; only a maximum may be supplied.
    """

    @staticmethod
    def get_properties(mu: float = 0.0, sigma: float = 1.0) -> DistributionProperties:
        if math.isnan(mu) or math.isnan(sigma):
            return DistributionProperties.undefined()
        sigma = max(NEARLY_ZERO, sigma)
        return DistributionProperties(
            maximum=math.inf,
            mean=mu + sigma * math.sqrt(2 / math.pi),
            median=mu + sigma * HALF_NORMAL_MEDIAN,
            minimum=mu,
            mode=(mu,),
            variance=sigma * sigma * (1 - 2 / math.pi),
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                mu: float = 0.0, sigma: float = 1.0, maximum: Optional[float] = None,
                options: Optional[RandomizeOptions] = None) -> Iterator[float]:
        """
        Sample the distribution. A *maximum* (nearly) equal to *mu* makes every
        sample *mu*; a maximum below *mu* is an inverted range and goes through
        the floating range policy (SWAP collapses to *mu*).
        """
        generator = generator or RandomNumberGenerator()
        if math.isnan(mu) or math.isnan(sigma) or _is_nan_bound(maximum):
            return _constant(math.nan, count)
        if maximum is not None:
            if is_nearly_equal(maximum, mu):
                return _constant(mu, count)
            if maximum < mu:
                low, high = resolve_floating_range(
                    mu, maximum, _options_for(generator, options).invalid_floating_range)
                return _constant(mu if high == mu else low, count)
        sigma = max(NEARLY_ZERO, sigma)

        def draw():
            u, v, factor = _polar_pair(generator)
            factor *= sigma
            return mu + abs(u * factor), mu + abs(v * factor)

        def accept(pair):
            return maximum is None or (pair[0] <= maximum and pair[1] <= maximum)

        return _yield_pairs(
            lambda: _rejection_sample(draw, accept, "PositiveNormal", mu, maximum), count)


class LogNormalDistribution:
    """
    Log-normal distribution: ``exp`` of a normal variable with location *mu*
    and scale *sigma*. Samples come from NormalDistribution against
    log-transformed bounds.
    """

    @staticmethod
    def get_properties(mu: float = 0.0, sigma: float = 1.0) -> DistributionProperties:
        if math.isnan(mu) or math.isnan(sigma):
            return DistributionProperties.undefined()
        sigma = max(NEARLY_ZERO, sigma)
        sigma_squared = sigma * sigma
        return DistributionProperties(
            maximum=math.inf,
            mean=_safe_exp(mu + sigma_squared / 2),
            median=_safe_exp(mu),
            minimum=0.0,
            mode=(_safe_exp(mu - sigma_squared),),
            variance=(_safe_exp(sigma_squared) - 1) * _safe_exp(2 * mu + sigma_squared),
        )

    @staticmethod
    def samples(generator: Optional[RandomNumberGenerator] = None, count: int = 1,
                mu: float = 0.0, sigma: float = 1.0,
                minimum: Optional[float] = None, maximum: Optional[float] = None,
                options: Optional[RandomizeOptions] = None) -> Iterator[float]:
        """Sample the distribution; a non-positive *maximum* makes every sample ``0.0``."""
        generator = generator or RandomNumberGenerator()
        options = _options_for(generator, options)
        constant, minimum, maximum = _resolve_location_scale(mu, sigma, minimum, maximum, options)
        if constant is not None:
            return _constant(constant, count)
        if maximum is not None and maximum <= 0:
            return _constant(0.0, count)
        log_minimum = math.log(minimum) if minimum is not None and minimum > 0 else None
        log_maximum = math.log(maximum) if maximum is not None else None
        normal = NormalDistribution.samples(
            generator, count, mu, sigma, log_minimum, log_maximum, options)
        return (_safe_exp(z) for z in normal)
