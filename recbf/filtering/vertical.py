"""
Vertical recursive pass with final normalization.
"""

from __future__ import annotations

import numpy as np

from recbf.filtering.range_table import range_weights


def vertical_pass(
    image: np.ndarray,
    range_table: np.ndarray,
    alpha: float,
    color_in: np.ndarray,
    factor_in: np.ndarray,
    color_out: np.ndarray,
    factor_out: np.ndarray,
    slice_current: np.ndarray,
    slice_previous: np.ndarray,
    line_current: np.ndarray,
    line_previous: np.ndarray,
) -> None:
    """
    Filter the horizontal accumulators along columns and normalize.

    The top-to-bottom sweep fills ``color_out``/``factor_out`` with
    unnormalized sums. The bottom-to-top sweep keeps only two rows of
    state in the slice/line buffers; as each row's backward value is
    known, it is blended with the forward row and divided by the blended
    factor. On return ``color_out`` holds the weighted average and
    ``factor_out`` the blended normalization factor.

    Similarity is measured on the raw ``image`` so that both passes agree
    on where the edges are.

    Parameters
    ----------
    image : np.ndarray
        Original uint8 image, shape (H, W, 3).
    color_in, factor_in : np.ndarray
        Horizontal pass output, shapes (H, W, C) and (H, W).
    color_out, factor_out : np.ndarray
        Destination accumulators, same shapes as the inputs.
    slice_current, slice_previous : np.ndarray
        Row scratch, shape (W, C).
    line_current, line_previous : np.ndarray
        Row scratch, shape (W,).
    """

    height = image.shape[0]
    alpha = np.float32(alpha)

    # weights[y] couples rows y and y + 1
    weights = range_weights(image[1:], image[:-1], range_table)

    color_out[0] = color_in[0]
    factor_out[0] = factor_in[0]
    for y in range(1, height):
        _step(
            color_in[y], factor_in[y], weights[y - 1], alpha,
            color_out[y - 1], factor_out[y - 1],
            color_out[y], factor_out[y],
        )

    last = height - 1
    slice_previous[...] = color_in[last]
    line_previous[...] = factor_in[last]
    _normalize_row(color_out[last], factor_out[last], slice_previous, line_previous)

    for y in range(last - 1, -1, -1):
        _step(
            color_in[y], factor_in[y], weights[y], alpha,
            slice_previous, line_previous,
            slice_current, line_current,
        )
        _normalize_row(color_out[y], factor_out[y], slice_current, line_current)
        slice_current, slice_previous = slice_previous, slice_current
        line_current, line_previous = line_previous, line_current


def _step(
    color_x: np.ndarray,
    factor_x: np.ndarray,
    weight: np.ndarray,
    alpha: np.float32,
    color_prev: np.ndarray,
    factor_prev: np.ndarray,
    color_cur: np.ndarray,
    factor_cur: np.ndarray,
) -> None:
    """``cur = x + alpha * (weight * prev - x)`` for colour and factor."""

    np.multiply(color_prev, weight[:, np.newaxis], out=color_cur)
    color_cur -= color_x
    color_cur *= alpha
    color_cur += color_x

    np.multiply(factor_prev, weight, out=factor_cur)
    factor_cur -= factor_x
    factor_cur *= alpha
    factor_cur += factor_x


def _normalize_row(
    color_row: np.ndarray,
    factor_row: np.ndarray,
    backward_color: np.ndarray,
    backward_factor: np.ndarray,
) -> None:
    """``color = 0.5*(fwd + bwd) / (0.5*(fwd_factor + bwd_factor))``, in place."""

    factor_row += backward_factor
    factor_row *= 0.5

    color_row += backward_color
    color_row *= 0.5
    color_row /= factor_row[:, np.newaxis]
