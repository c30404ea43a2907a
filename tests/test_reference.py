"""Tests for the scipy-based exponential reference blur."""

from __future__ import annotations

import numpy as np
import pytest

from recbf import exponential_blur


def test_constant_image_unchanged() -> None:
    img = np.full((9, 13, 3), 77.0)
    result = exponential_blur(img, 0.1)
    assert result.shape == img.shape
    np.testing.assert_allclose(result, img, rtol=1e-12)


def test_blur_reduces_variance() -> None:
    rng = np.random.default_rng(0)
    img = rng.random((32, 32, 3)) * 255.0
    result = exponential_blur(img, 0.5)
    assert result.std() < img.std()
    assert np.isfinite(result).all()


def test_invalid_input_rejected() -> None:
    with pytest.raises(ValueError):
        exponential_blur(np.zeros((4, 4)), 0.1)
    with pytest.raises(ValueError):
        exponential_blur(np.zeros((4, 4, 3)), 0.0)
