"""
Pure spatial exponential smoothing.

This is what the recursive bilateral filter reduces to when every range
weight equals 1 (``sigma_range -> inf``): a first-order IIR smoother run
forward and backward along each axis. Implemented with
``scipy.signal.lfilter`` in float64 so it can serve as an independent
check of the float32 kernels.
"""

from __future__ import annotations

import math

import numpy as np
from scipy import signal


def _one_sided(x: np.ndarray, alpha: float, axis: int) -> np.ndarray:
    """``y[n] = (1 - alpha) * x[n] + alpha * y[n-1]`` seeded with ``y[0] = x[0]``."""

    b = np.array([1.0 - alpha])
    a = np.array([1.0, -alpha])
    zi = alpha * np.take(x, [0], axis=axis)
    y, _ = signal.lfilter(b, a, x, axis=axis, zi=zi)
    return y


def _both_sides(x: np.ndarray, alpha: float, axis: int):
    forward = _one_sided(x, alpha, axis)
    backward = np.flip(_one_sided(np.flip(x, axis=axis), alpha, axis), axis=axis)
    return forward, backward


def exponential_blur(image: np.ndarray, sigma_spatial: float) -> np.ndarray:
    """
    Separable exponential blur with the recursive filter's normalization.

    Parameters
    ----------
    image : np.ndarray
        Image of shape (H, W, C), any numeric dtype.
    sigma_spatial : float
        Relative spatial sigma, as passed to the bilateral filter.

    Returns
    -------
    np.ndarray
        float64 array of shape (H, W, C).
    """

    if image.ndim != 3:
        raise ValueError(f"Expected H×W×C image, got shape {image.shape}")
    if not (math.isfinite(sigma_spatial) and sigma_spatial > 0):
        raise ValueError(f"sigma_spatial {sigma_spatial} must be a finite value > 0")

    img = np.asarray(image, dtype=np.float64)
    height, width = img.shape[:2]

    alpha_h = math.exp(-math.sqrt(2.0) / (sigma_spatial * width))
    alpha_v = math.exp(-math.sqrt(2.0) / (sigma_spatial * height))

    fwd, bwd = _both_sides(img, alpha_h, axis=1)
    color_h = 0.5 * (fwd + bwd)
    fwd, bwd = _both_sides(np.ones((height, width)), alpha_h, axis=1)
    factor_h = 0.5 * (fwd + bwd)

    fwd, bwd = _both_sides(color_h, alpha_v, axis=0)
    fwd_f, bwd_f = _both_sides(factor_h, alpha_v, axis=0)
    factor = 0.5 * (fwd_f + bwd_f)

    return 0.5 * (fwd + bwd) / factor[:, :, np.newaxis]
