"""
Smoke tests for the torch backend. Skipped automatically when torch is unavailable.
"""

from __future__ import annotations

import numpy as np
import pytest

torch = pytest.importorskip("torch")

from recbf import RecursiveBFConfig, recursive_bf  # noqa: E402
from recbf.torch import TorchRecursiveBilateralFilter, recursive_bf_torch  # noqa: E402


def test_torch_matches_numpy():
    rng = np.random.default_rng(0)
    img = rng.integers(0, 256, size=(16, 24, 3), dtype=np.uint8)

    expected = recursive_bf(img, 0.1, 0.2)
    result = recursive_bf_torch(torch.from_numpy(img), 0.1, 0.2, device=torch.device("cpu"))

    assert result.dtype == torch.uint8
    assert result.shape == img.shape
    diff = np.abs(result.numpy().astype(int) - expected.astype(int))
    assert diff.max() <= 1


def test_torch_flat_image_unchanged():
    img = torch.full((4, 4, 3), 100, dtype=torch.uint8)
    result = recursive_bf_torch(img, 0.03, 0.1, device=torch.device("cpu"))
    assert torch.equal(result, img)


def test_torch_channel_first_layout():
    img = torch.randint(0, 256, (1, 3, 8, 12), dtype=torch.uint8)
    tbf = TorchRecursiveBilateralFilter(RecursiveBFConfig(), device=torch.device("cpu"))
    result = tbf.process(img)

    assert result.shape == img.shape
    hwc = tbf.process(img[0].permute(1, 2, 0).contiguous())
    assert torch.equal(result[0].permute(1, 2, 0), hwc)


def test_torch_rejects_invalid_input():
    tbf = TorchRecursiveBilateralFilter(device=torch.device("cpu"))
    with pytest.raises(ValueError):
        tbf.process(torch.zeros((2, 3, 4, 4), dtype=torch.uint8))
    with pytest.raises(ValueError):
        tbf.process(torch.zeros((4, 4, 3), dtype=torch.float32))
    with pytest.raises(ValueError):
        tbf.process(torch.zeros((4, 4), dtype=torch.uint8))


def test_torch_huge_sigma_spatial():
    yy, xx = torch.meshgrid(torch.arange(32), torch.arange(32), indexing="ij")
    img = torch.zeros((32, 32, 3), dtype=torch.uint8)
    img[(yy + xx) % 2 == 1] = 255

    result = recursive_bf_torch(img, 1e7, 0.1, device=torch.device("cpu"))
    assert result.shape == img.shape

    flat = torch.full((6, 6, 3), 77, dtype=torch.uint8)
    assert torch.equal(recursive_bf_torch(flat, 1e30, 0.1, device=torch.device("cpu")), flat)
