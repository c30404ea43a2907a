"""
Conversion of the normalized float accumulator back to 8-bit samples.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from recbf.core.config import QuantizationMode

logger = logging.getLogger(__name__)


def quantize(
    values: np.ndarray,
    mode: QuantizationMode = QuantizationMode.TRUNCATE,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Convert float samples to uint8.

    ``TRUNCATE`` drops the fractional part, which is what the reference
    kernel's plain cast does; ``ROUND`` rounds half to even. Values are
    clipped to [0, 255] first.
    """

    if out is None:
        out = np.empty(values.shape, dtype=np.uint8)
    elif out.shape != values.shape or out.dtype != np.uint8:
        raise ValueError(
            f"Output array must be uint8 with shape {values.shape}, got {out.dtype} {out.shape}"
        )

    low = float(np.min(values)) if values.size else 0.0
    high = float(np.max(values)) if values.size else 0.0
    if low < 0.0 or high >= 256.0:
        logger.warning("Filtered values outside [0, 255] (%0.3f, %0.3f), clipping", low, high)

    clipped = np.clip(values, 0.0, 255.0)
    if mode == QuantizationMode.ROUND:
        np.rint(clipped, out=clipped)
    elif mode != QuantizationMode.TRUNCATE:
        raise ValueError(f"Unknown quantization mode: {mode}")

    # float -> uint8 casting truncates toward zero
    np.copyto(out, clipped, casting="unsafe")
    return out
