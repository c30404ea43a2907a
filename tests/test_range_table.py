"""
Tests for the range weight table and colour distance.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from recbf.filtering import build_range_table, decay_coefficient, range_distance


def test_range_table_values() -> None:
    table = build_range_table(0.1)
    assert table.shape == (256,)
    assert table.dtype == np.float32
    assert table[0] == 1.0

    expected = np.exp(-np.arange(256) / (0.1 * 255.0))
    np.testing.assert_allclose(table, expected, rtol=1e-6)
    assert np.all(np.diff(table) < 0)


def test_range_table_depends_on_sigma() -> None:
    narrow = build_range_table(0.05)
    wide = build_range_table(0.5)
    assert np.all(wide[1:] > narrow[1:])


@pytest.mark.parametrize("sigma_range", [0.0, -0.2, float("nan"), float("inf")])
def test_range_table_rejects_invalid_sigma(sigma_range: float) -> None:
    with pytest.raises(ValueError):
        build_range_table(sigma_range)


def test_range_distance_weights_red_twice() -> None:
    zero = np.zeros(3, dtype=np.uint8)

    assert int(range_distance(np.array([10, 20, 30], dtype=np.uint8), zero)) == 17
    assert int(range_distance(np.array([255, 255, 255], dtype=np.uint8), zero)) == 255
    assert int(range_distance(np.array([1, 1, 1], dtype=np.uint8), zero)) == 1
    # (2 * 1) >> 2 truncates to 0
    assert int(range_distance(np.array([1, 0, 0], dtype=np.uint8), zero)) == 0
    assert int(range_distance(np.array([0, 4, 0], dtype=np.uint8), zero)) == 1


def test_range_distance_is_symmetric() -> None:
    rng = np.random.default_rng(0)
    a = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
    b = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)

    dist = range_distance(a, b)
    assert dist.shape == (8, 8)
    assert dist.dtype == np.uint8
    np.testing.assert_array_equal(dist, range_distance(b, a))


def test_decay_coefficient_in_unit_interval() -> None:
    for sigma_spatial, length in ((0.03, 640), (0.03, 2), (5.0, 64), (1e-3, 1)):
        alpha = decay_coefficient(sigma_spatial, length)
        assert 0.0 < alpha < 1.0

    alpha = decay_coefficient(0.03, 640)
    assert math.isclose(alpha, math.exp(-math.sqrt(2.0) / (0.03 * 640)), rel_tol=1e-6)


@pytest.mark.parametrize(
    "sigma_spatial, length",
    [(1e5, 1000), (1e7, 64), (1e300, 4096), (1e-9, 1), (1e-30, 2)],
)
def test_decay_coefficient_clamped_for_extreme_sigma(sigma_spatial: float, length: int) -> None:
    alpha = decay_coefficient(sigma_spatial, length)
    assert alpha.dtype == np.float32
    assert 0.0 < alpha < 1.0
