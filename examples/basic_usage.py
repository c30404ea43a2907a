"""
Basic usage examples for recbf.
"""

from __future__ import annotations

import numpy as np

from recbf import QuantizationMode, RecursiveBFConfig, RecursiveBilateralFilter, recursive_bf


def synthetic_image(height: int = 256, width: int = 256, seed: int = 0) -> np.ndarray:
    """Noisy two-tone image with a vertical step edge."""

    rng = np.random.default_rng(seed)
    img = np.zeros((height, width, 3), dtype=np.float64)
    img[:, width // 2:] = (200.0, 180.0, 60.0)
    img[:, : width // 2] = (40.0, 60.0, 120.0)
    img += rng.normal(0.0, 12.0, size=img.shape)
    return np.clip(img, 0, 255).astype(np.uint8)


def example_simple() -> np.ndarray:
    """Filter with the default parameters."""

    img = synthetic_image()
    rbf = RecursiveBilateralFilter()
    img_out = rbf.process(img)
    print(f"Simple example: std before={img.std():0.2f}, after={img_out.std():0.2f}")
    return img_out


def example_flat_buffer() -> np.ndarray:
    """Filter a flat row-major byte buffer, as produced by most decoders."""

    height, width = 120, 160
    img = synthetic_image(height, width)
    raw = img.tobytes()
    out = recursive_bf(raw, sigma_spatial=0.03, sigma_range=0.1, width=width, height=height)
    print(f"Flat buffer example: {len(raw)} bytes in, {out.size} samples out")
    return out


def example_custom_configuration() -> np.ndarray:
    """Stronger smoothing with rounding instead of truncation."""

    img = synthetic_image()
    config = RecursiveBFConfig(
        sigma_spatial=0.1,
        sigma_range=0.2,
        quantization=QuantizationMode.ROUND,
    )
    img_out = RecursiveBilateralFilter(config).process(img)
    print(f"Custom configuration example: mean={img_out.mean():0.2f}")
    return img_out


if __name__ == "__main__":
    print("Running recbf basic examples...")
    example_simple()
    example_flat_buffer()
    example_custom_configuration()
