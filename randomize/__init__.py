"""
Deterministic, seedable random sampling.

A Mersenne Twister bit generator, uniform value derivation with configurable
range-inversion policies, a catalog of distribution samplers and a portable
string encoding of distribution parameters.
"""

from .options import (
    RandomizeOptions,
    InvalidFloatingRangeResult,
    InvalidIntegralRangeResult,
    DEFAULT_OPTIONS,
)
from .errors import ParameterFormatError
from .seeding import new_seed, derive_seed, use_seed
from .mersenne import MersenneTwister
from .generator import RandomNumberGenerator
from .distributions import (
    DistributionType,
    DistributionProperties,
    ContinuousUniformDistribution,
    DiscreteUniformDistribution,
    BinomialDistribution,
    CategoricalDistribution,
    ExponentialDistribution,
    LogisticDistribution,
    LogNormalDistribution,
    NormalDistribution,
    PositiveNormalDistribution,
)
from .parameters import (
    DistributionParameters,
    ContinuousUniformParameters,
    DiscreteUniformSignedParameters,
    DiscreteUniformUnsignedParameters,
    BinomialParameters,
    CategoricalParameters,
    ExponentialParameters,
    LogNormalParameters,
    LogisticParameters,
    NormalParameters,
    PositiveNormalParameters,
    fixed_int,
    fixed_uint,
    fixed_real,
    DEFAULT,
    ZERO,
)
from .codec import (
    format_parameters,
    parse,
    parse_exact,
    try_parse,
    try_parse_exact,
    to_json,
    from_json,
    ParametersJSONEncoder,
)

__all__ = [
    'RandomizeOptions',
    'InvalidFloatingRangeResult',
    'InvalidIntegralRangeResult',
    'DEFAULT_OPTIONS',
    'ParameterFormatError',
    'new_seed',
    'derive_seed',
    'use_seed',
    'MersenneTwister',
    'RandomNumberGenerator',
    'DistributionType',
    'DistributionProperties',
    'ContinuousUniformDistribution',
    'DiscreteUniformDistribution',
    'BinomialDistribution',
    'CategoricalDistribution',
    'ExponentialDistribution',
    'LogisticDistribution',
    'LogNormalDistribution',
    'NormalDistribution',
    'PositiveNormalDistribution',
    'DistributionParameters',
    'ContinuousUniformParameters',
    'DiscreteUniformSignedParameters',
    'DiscreteUniformUnsignedParameters',
    'BinomialParameters',
    'CategoricalParameters',
    'ExponentialParameters',
    'LogNormalParameters',
    'LogisticParameters',
    'NormalParameters',
    'PositiveNormalParameters',
    'fixed_int',
    'fixed_uint',
    'fixed_real',
    'DEFAULT',
    'ZERO',
    'format_parameters',
    'parse',
    'parse_exact',
    'try_parse',
    'try_parse_exact',
    'to_json',
    'from_json',
    'ParametersJSONEncoder',
]
