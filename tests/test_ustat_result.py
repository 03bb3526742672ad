"""
Tests for the DecoupleResult aggregate and its presentation helpers.
"""

import dataclasses
import json
import math

import numpy as np
import pytest

from ustat_decouple.result import METHOD_NAME, DecoupleResult


def make_result(distribution=(0.8, 0.9, 1.0, 1.1, 1.2), p_value=0.04, z_score=2.05):
    return DecoupleResult(
        original_stat=1.15,
        decoupled_distribution=tuple(distribution),
        kernel_name="Hamming Distance",
        p_value=p_value,
        z_score=z_score,
        seed=123,
        n_samples=6,
    )


def test_result_is_immutable():
    result = make_result()
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.p_value = 0.5


def test_default_method_name():
    assert make_result().method == METHOD_NAME == "Friedman-de la Pena Decoupling"


def test_null_summary_properties():
    result = make_result()
    assert result.n_iterations == 5
    assert result.null_mean == pytest.approx(1.0)
    assert result.null_sd == pytest.approx(np.std([0.8, 0.9, 1.0, 1.1, 1.2], ddof=1))
    assert result.significance == "*"
    assert result.p_value_defined


def test_summary_text():
    text = make_result().summary()
    assert "Original U-statistic: 1.1500" in text
    assert "Decoupled mean: 1.0000" in text
    assert "Kernel: Hamming Distance" in text
    assert "Significance: * (p = 0.0400)" in text
    assert str(make_result()) == text


def test_summary_for_undefined_p_value():
    result = make_result(distribution=(5.0, 5.0, 5.0), p_value=None, z_score=None)
    text = result.summary()
    assert "P-value: undefined" in text
    assert "Z-score: undefined" in text
    assert "degenerate" in text
    assert result.significance == ""


def test_to_dict_is_json_serializable():
    data = make_result().to_dict()
    assert json.loads(json.dumps(data)) == data
    assert data["decoupled_distribution"] == [0.8, 0.9, 1.0, 1.1, 1.2]
    assert data["n_iterations"] == 5
    assert "decoupled_distribution" not in make_result().to_dict(include_distribution=False)


def test_to_dict_single_iteration_has_null_sd_none():
    data = make_result(distribution=(1.0,), p_value=None, z_score=None).to_dict()
    assert data["null_sd"] is None
    assert data["p_value"] is None


class TestHistogram:

    def test_counts_sum_to_iterations(self):
        rng = np.random.default_rng(1)
        result = make_result(distribution=rng.normal(size=200).tolist())
        histogram = result.histogram(n_bins=20)
        assert len(histogram.bins) == 20
        assert sum(b.count for b in histogram.bins) == 200
        assert histogram.n_total == 200

    def test_density_integrates_to_one(self):
        rng = np.random.default_rng(2)
        histogram = make_result(distribution=rng.normal(size=500).tolist()).histogram()
        area = sum(b.density * (b.right_edge - b.left_edge) for b in histogram.bins)
        assert area == pytest.approx(1.0)

    def test_marker_bin_locates_original_stat(self):
        histogram = make_result().histogram(n_bins=4)
        index = histogram.marker_bin
        assert index is not None
        b = histogram.bins[index]
        assert b.left_edge <= 1.15 <= b.right_edge

    def test_marker_outside_range(self):
        result = DecoupleResult(
            original_stat=10.0,
            decoupled_distribution=(0.0, 1.0, 2.0),
            kernel_name="k",
        )
        assert result.histogram(n_bins=3).marker_bin is None

    def test_constant_distribution(self):
        histogram = make_result(distribution=(5.0,) * 10, p_value=None).histogram(n_bins=5)
        assert sum(b.count for b in histogram.bins) == 10
        assert all(math.isfinite(b.density) for b in histogram.bins)

    def test_invalid_bins(self):
        with pytest.raises(ValueError):
            make_result().histogram(n_bins=0)

    def test_histogram_to_dict(self):
        data = make_result().histogram(n_bins=3).to_dict()
        assert len(data["bins"]) == 3
        assert data["original_stat"] == 1.15
