"""Tests for randomize.parameters -- the distribution parameters sum type."""

import dataclasses
import math

import numpy as np
import pytest

from randomize import (
    DEFAULT,
    ZERO,
    BinomialParameters,
    CategoricalParameters,
    ContinuousUniformParameters,
    DiscreteUniformSignedParameters,
    DiscreteUniformUnsignedParameters,
    DistributionParameters,
    DistributionType,
    ExponentialParameters,
    LogisticParameters,
    NormalParameters,
    PositiveNormalParameters,
    fixed_int,
    fixed_real,
    fixed_uint,
)
from randomize.distributions import DEFAULT_WEIGHTS, NEARLY_ZERO
from randomize.generator import INT_MIN
from randomize.mersenne import INT_MAX, UINT_MAX


class TestConstruction:

    def test_every_kind_registered(self):
        for distribution_type in DistributionType:
            kind = DistributionParameters.for_type(distribution_type)
            assert kind.distribution_type is distribution_type

    def test_location_scale_defaults(self):
        p = NormalParameters()
        assert (p.mu, p.sigma) == (0.0, 1.0)
        assert p.minimum is None and p.maximum is None and p.precision is None

    @pytest.mark.parametrize("sigma", [0.0, -2.0])
    def test_sigma_clamped(self, sigma):
        assert LogisticParameters(sigma=sigma).sigma == NEARLY_ZERO

    def test_lambda_clamped(self):
        assert ExponentialParameters(lambda_=-1).lambda_ == NEARLY_ZERO

    def test_nan_shape_kept(self):
        assert math.isnan(NormalParameters(sigma=math.nan).sigma)
        assert math.isnan(ExponentialParameters(lambda_=math.nan).lambda_)

    def test_infinite_bounds_are_absent(self):
        p = NormalParameters(minimum=-math.inf, maximum=math.inf)
        assert p.minimum is None and p.maximum is None
        assert NormalParameters(minimum=math.inf).minimum == math.inf

    @pytest.mark.parametrize("kind", [DiscreteUniformSignedParameters, DiscreteUniformUnsignedParameters])
    @pytest.mark.parametrize("minimum,maximum", [
        (math.inf, None),
        (None, -math.inf),
        (math.nan, 5),
        (1, math.nan),
    ])
    def test_integer_bounds_must_be_finite(self, kind, minimum, maximum):
        with pytest.raises(ValueError, match="finite"):
            kind(minimum, maximum)

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            DistributionParameters()

    def test_categorical_nan_weight(self, generator):
        p = CategoricalParameters(weights=[math.nan, 1.0])
        assert math.isnan(p.weights[0]) and p.weights[1] == 1.0
        assert math.isnan(p.get_properties().mean)
        assert all(math.isnan(v) for v in p.samples(generator, 3))

    def test_categorical_weights_normalized(self):
        assert CategoricalParameters(weights=[1, 1, 2]).weights == (0.25, 0.25, 0.5)
        assert CategoricalParameters().weights == DEFAULT_WEIGHTS
        assert CategoricalParameters(weights=[]).weights == DEFAULT_WEIGHTS

    def test_categorical_zero_weight(self):
        with pytest.raises(ValueError):
            CategoricalParameters(weights=[0, 0])

    def test_binomial_n(self):
        assert BinomialParameters(n=4.7).n == 4
        assert BinomialParameters(n=-3).n == 0
        with pytest.raises(ValueError):
            BinomialParameters(n=math.nan)
        with pytest.raises(ValueError):
            BinomialParameters(n=math.inf)

    @pytest.mark.parametrize("precision", [-1, 256])
    def test_precision_range(self, precision):
        with pytest.raises(ValueError):
            ContinuousUniformParameters(precision=precision)

    def test_frozen_and_hashable(self):
        p = CategoricalParameters(weights=[1, 3])
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.weights = (1.0,)
        assert hash(p) == hash(CategoricalParameters(weights=[1, 3]))

    def test_kinds_are_distinct(self):
        assert NormalParameters(mu=1.0) != LogisticParameters(mu=1.0)

    def test_create_from_ordered_parameters(self):
        p = DistributionParameters.create(DistributionType.NORMAL, 0.0, 10.0, [5.0, 2.0], 2)
        assert p == NormalParameters(0.0, 10.0, 2, mu=5.0, sigma=2.0)

    def test_create_missing_parameters_use_defaults(self):
        assert DistributionParameters.create(DistributionType.BINOMIAL, parameters=[6]) == BinomialParameters(n=6)
        assert DistributionParameters.create(DistributionType.EXPONENTIAL) == ExponentialParameters()

    def test_shape_parameters_order(self):
        assert BinomialParameters(n=3, p=0.2).shape_parameters == (3.0, 0.2)
        assert PositiveNormalParameters(mu=1.0, sigma=4.0).shape_parameters == (1.0, 4.0)
        assert ExponentialParameters(lambda_=3.0).shape_parameters == (3.0,)
        assert ContinuousUniformParameters().shape_parameters == ()

    def test_named_values(self):
        assert DEFAULT == ContinuousUniformParameters(0.0, 1.0)
        assert ZERO == DiscreteUniformSignedParameters(0, 0)
        assert fixed_uint(3) == DiscreteUniformUnsignedParameters(3, 3)
        assert fixed_real(1.5, 2) == ContinuousUniformParameters(1.5, 1.5, 2)


class TestSampling:

    def test_fixed_values(self, generator):
        assert list(fixed_int(-7).samples(generator, 5)) == [-7] * 5
        assert list(fixed_uint(9).samples(generator, 3)) == [9] * 3
        assert list(fixed_real(2.5).samples(generator, 3)) == [2.5] * 3

    def test_precision_rounding(self, generator):
        values = list(ContinuousUniformParameters(0.0, 10.0, precision=2).samples(generator, 200))
        assert all(round(v, 2) == v for v in values)
        assert all(0.0 <= v <= 10.0 for v in values)

    def test_precision_ignores_integers(self, generator):
        values = list(DiscreteUniformSignedParameters(1, 6, precision=1).samples(generator, 50))
        assert all(isinstance(v, int) for v in values)

    def test_uniform_defaults(self, generator):
        assert all(0.0 <= v < 1.0 for v in ContinuousUniformParameters().samples(generator, 100))
        assert all(INT_MIN <= v <= INT_MAX for v in DiscreteUniformSignedParameters().samples(generator, 100))
        assert all(0 <= v <= UINT_MAX for v in DiscreteUniformUnsignedParameters().samples(generator, 100))

    def test_bounds_respected(self, generator):
        values = list(NormalParameters(-1.0, 1.0, mu=0.0, sigma=1.0).samples(generator, 500))
        assert all(-1.0 <= v <= 1.0 for v in values)

    def test_positive_normal_uses_maximum_only(self, generator):
        values = list(PositiveNormalParameters(maximum=2.0, mu=1.0).samples(generator, 500))
        assert all(1.0 <= v <= 2.0 for v in values)

    def test_sample_array(self, generator):
        values = BinomialParameters(n=5, p=0.5).sample_array(generator, 1000)
        assert isinstance(values, np.ndarray)
        assert values.dtype == np.float64
        assert values.shape == (1000,)
        assert values.min() >= 0 and values.max() <= 5

    def test_discrete_kinds_pick_integer_width(self, generator):
        unsigned = DiscreteUniformUnsignedParameters(3_000_000_000, 3_000_000_010)
        assert all(3_000_000_000 <= v <= 3_000_000_010 for v in unsigned.samples(generator, 200))
        signed = DiscreteUniformSignedParameters(-10, -1)
        assert all(-10 <= v <= -1 for v in signed.samples(generator, 200))

    @pytest.mark.parametrize("value,low,high", [
        (ContinuousUniformParameters(minimum=5.0), 5.0, 6.0),
        (ContinuousUniformParameters(maximum=-3.0), -4.0, -3.0),
    ])
    def test_half_bounded_uniform(self, generator, value, low, high):
        """Properties and samples describe the same range when one bound is absent."""
        properties = value.get_properties()
        assert (properties.minimum, properties.maximum) == (low, high)
        values = np.fromiter(value.samples(generator, 2000), dtype=float)
        assert values.min() >= low and values.max() < high
        assert abs(values.mean() - properties.mean) < 0.05

    def test_sample_array_negative_count(self, generator):
        assert NormalParameters().sample_array(generator, -5).shape == (0,)

    def test_properties_dispatch(self):
        assert ExponentialParameters(lambda_=2.0).get_properties().mean == 0.5
        assert CategoricalParameters(weights=[1, 1, 2]).get_properties().mode == (2.0,)
        assert DiscreteUniformSignedParameters(1, 6).get_properties().mean == 3.5
        assert ContinuousUniformParameters().get_properties().mean == 0.5


class TestCombine:

    def test_combine_merges(self):
        a = NormalParameters(-1.0, 1.0, 1, mu=0.0, sigma=1.0)
        b = LogisticParameters(-5.0, 0.5, 3, mu=2.0, sigma=3.0)
        assert a.combine(b) == NormalParameters(-5.0, 1.0, 3, mu=1.0, sigma=2.0)
        assert b.combine(a) == a.combine(b)

    def test_combine_absent_values(self):
        a = ExponentialParameters(maximum=4.0, lambda_=2.0)
        b = ContinuousUniformParameters(minimum=1.0, precision=2)
        combined = a.combine(b)
        assert combined == ExponentialParameters(1.0, 4.0, 2, lambda_=2.0)

    def test_combine_copies_unmatched_parameters(self):
        a = CategoricalParameters(weights=[1, 1])
        b = BinomialParameters(n=4, p=0.5)
        combined = a.combine(b)
        assert isinstance(combined, CategoricalParameters)
        assert combined.weights == CategoricalParameters(weights=[2.25, 0.5]).weights
