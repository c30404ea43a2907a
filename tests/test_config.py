"""
Tests for filter configuration.
"""

from __future__ import annotations

import pytest

from recbf import QuantizationMode, RecursiveBFConfig, RecursiveBilateralFilter


def test_valid_config() -> None:
    config = RecursiveBFConfig(sigma_spatial=0.05, sigma_range=0.2)
    config.validate()


def test_default_config_matches_reference_demo() -> None:
    config = RecursiveBFConfig()
    assert config.sigma_spatial == 0.03
    assert config.sigma_range == 0.1
    assert config.channel == 3
    assert config.quantization == QuantizationMode.TRUNCATE


@pytest.mark.parametrize("sigma", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_sigma_spatial(sigma: float) -> None:
    config = RecursiveBFConfig(sigma_spatial=sigma)
    with pytest.raises(ValueError):
        config.validate()


@pytest.mark.parametrize("sigma", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_sigma_range(sigma: float) -> None:
    config = RecursiveBFConfig(sigma_range=sigma)
    with pytest.raises(ValueError):
        config.validate()


@pytest.mark.parametrize("channel", [1, 2, 4])
def test_invalid_channel(channel: int) -> None:
    config = RecursiveBFConfig(channel=channel)
    with pytest.raises(ValueError):
        config.validate()


def test_invalid_quantization() -> None:
    config = RecursiveBFConfig(quantization="round")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        config.validate()


def test_filter_validates_config() -> None:
    with pytest.raises(ValueError):
        RecursiveBilateralFilter(RecursiveBFConfig(sigma_range=0.0))
