"""
Unit tests for the normal-approximation significance test.
"""

import math

import numpy as np
import pytest
from scipy.stats import norm

from ustat_decouple.errors import DegenerateDistribution, InputError
from ustat_decouple.significance import (
    evaluate_significance,
    has_zero_spread,
    null_moments,
    significance_marker,
    two_tailed_p_value,
)


def test_null_moments_use_bessel_correction():
    null_mean, null_sd = null_moments([1.0, 2.0, 3.0, 4.0])
    assert null_mean == pytest.approx(2.5)
    assert null_sd == pytest.approx(np.std([1.0, 2.0, 3.0, 4.0], ddof=1))


def test_single_sample_sd_is_nan():
    _, null_sd = null_moments([1.0])
    assert math.isnan(null_sd)


def test_empty_distribution_rejected():
    with pytest.raises(InputError):
        null_moments([])


def test_evaluate_matches_formula():
    distribution = [0.9, 1.1, 1.0, 1.2, 0.8, 1.05, 0.95]
    result = evaluate_significance(1.5, distribution)

    null_mean = np.mean(distribution)
    null_sd = np.std(distribution, ddof=1)
    z = (1.5 - null_mean) / null_sd
    assert result.z_score == pytest.approx(z)
    assert result.p_value == pytest.approx(2 * (1 - norm.cdf(abs(z))))
    assert result.null_mean == pytest.approx(null_mean)
    assert result.null_sd == pytest.approx(null_sd)


@pytest.mark.parametrize("original", [-10.0, 0.5, 1.0, 1.7, 50.0])
def test_z_sign_matches_deviation(original):
    distribution = [0.8, 1.0, 1.2, 0.9, 1.1]
    result = evaluate_significance(original, distribution)
    assert np.sign(result.z_score) == np.sign(original - np.mean(distribution))
    assert 0.0 <= result.p_value <= 1.0


def test_p_value_clamped_for_extreme_z():
    assert two_tailed_p_value(1e6) == 0.0
    assert two_tailed_p_value(0.0) == 1.0
    assert 0.0 <= two_tailed_p_value(-40.0) <= 1.0


def test_constant_distribution_is_degenerate():
    with pytest.raises(DegenerateDistribution) as excinfo:
        evaluate_significance(5.0, [5.0] * 10)
    assert excinfo.value.null_mean == 5.0
    assert excinfo.value.null_sd == 0.0


def test_single_sample_is_degenerate():
    with pytest.raises(DegenerateDistribution):
        evaluate_significance(1.0, [2.0])


def test_rounding_noise_is_degenerate():
    # mean of identical 0.1 values rounds to 0.10000000000000002
    values = [0.1] * 1000
    null_mean, null_sd = null_moments(values)
    assert has_zero_spread(values, null_mean, null_sd)
    with pytest.raises(DegenerateDistribution):
        evaluate_significance(0.1, values)


def test_small_real_spread_is_not_degenerate():
    values = [1e-6, 2e-6, 3e-6, 4e-6]
    null_mean, null_sd = null_moments(values)
    assert not has_zero_spread(values, null_mean, null_sd)
    assert evaluate_significance(2.5e-6, values).z_score == pytest.approx(0.0)


@pytest.mark.parametrize(
    "p_value, marker",
    [(0.0001, "***"), (0.005, "**"), (0.03, "*"), (0.2, " "), (None, "")],
)
def test_significance_marker(p_value, marker):
    assert significance_marker(p_value) == marker
