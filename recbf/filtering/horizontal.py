"""
Horizontal recursive pass (left-to-right and right-to-left sweeps).
"""

from __future__ import annotations

import numpy as np

from recbf.filtering.range_table import range_weights


def horizontal_pass(
    image: np.ndarray,
    range_table: np.ndarray,
    alpha: float,
    color_out: np.ndarray,
    factor_out: np.ndarray,
    color_scratch: np.ndarray,
    factor_scratch: np.ndarray,
) -> None:
    """
    Run both horizontal sweeps and blend them into ``color_out``/``factor_out``.

    Every row is independent, so each step of the recursion is applied to
    a whole column of rows at once. Similarity is always measured on the
    raw ``image``, never on the partially filtered output.

    Parameters
    ----------
    image : np.ndarray
        Original uint8 image, shape (H, W, 3).
    range_table : np.ndarray
        Output of :func:`build_range_table`.
    alpha : float
        Horizontal decay coefficient.
    color_out, factor_out : np.ndarray
        Receive the forward sweep, then the blended result.
        Shapes (H, W, 3) and (H, W).
    color_scratch, factor_scratch : np.ndarray
        Receive the backward sweep. Same shapes as the outputs.
    """

    alpha = np.float32(alpha)

    # weights[:, x] couples columns x and x + 1
    weights = range_weights(image[:, 1:], image[:, :-1], range_table)

    _forward_sweep(image, weights, alpha, color_out, factor_out)
    _backward_sweep(image, weights, alpha, color_scratch, factor_scratch)

    # Column W-1 of the backward sweep is the raw input with factor 1.
    np.add(color_out, color_scratch, out=color_out)
    color_out *= 0.5
    np.add(factor_out, factor_scratch, out=factor_out)
    factor_out *= 0.5


def _forward_sweep(
    image: np.ndarray,
    weights: np.ndarray,
    alpha: np.float32,
    color: np.ndarray,
    factor: np.ndarray,
) -> None:
    width = image.shape[1]

    color[:, 0] = image[:, 0]
    factor[:, 0] = 1.0

    for x in range(1, width):
        _step(
            image[:, x], weights[:, x - 1], alpha,
            color[:, x - 1], factor[:, x - 1],
            color[:, x], factor[:, x],
        )


def _backward_sweep(
    image: np.ndarray,
    weights: np.ndarray,
    alpha: np.float32,
    color: np.ndarray,
    factor: np.ndarray,
) -> None:
    width = image.shape[1]

    color[:, width - 1] = image[:, width - 1]
    factor[:, width - 1] = 1.0

    for x in range(width - 2, -1, -1):
        _step(
            image[:, x], weights[:, x], alpha,
            color[:, x + 1], factor[:, x + 1],
            color[:, x], factor[:, x],
        )


def _step(
    pixels: np.ndarray,
    weight: np.ndarray,
    alpha: np.float32,
    color_prev: np.ndarray,
    factor_prev: np.ndarray,
    color_cur: np.ndarray,
    factor_cur: np.ndarray,
) -> None:
    """
    One recursion step: ``cur = x + alpha * (weight * prev - x)``.

    Same as ``(1 - alpha) * x + alpha * weight * prev``, but exact when
    ``weight == 1`` and ``prev == x``, so flat regions come out unchanged.
    The factor signal is 1 everywhere.
    """

    np.multiply(color_prev, weight[:, np.newaxis], out=color_cur)
    color_cur -= pixels
    color_cur *= alpha
    color_cur += pixels

    np.multiply(factor_prev, weight, out=factor_cur)
    factor_cur -= 1.0
    factor_cur *= alpha
    factor_cur += 1.0
