"""
Torch-powered recursive bilateral filter.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import torch

from recbf.core.config import QuantizationMode, RecursiveBFConfig
from recbf.filtering.range_table import build_range_table, decay_coefficient
from recbf.torch.common import ensure_tensor, from_hwc, to_hwc

logger = logging.getLogger(__name__)


class TorchRecursiveBilateralFilter:
    """
    Recursive bilateral filter on torch tensors.

    Runs the same four sweeps as :class:`recbf.RecursiveBilateralFilter`,
    with every step applied to a whole column (horizontal pass) or row
    (vertical pass) at once on the selected device.
    """

    def __init__(
        self,
        config: Optional[RecursiveBFConfig] = None,
        device: Optional[torch.device] = None,
    ) -> None:
        self.config = config or RecursiveBFConfig()
        self.config.validate()

        if device is None:
            device = torch.device("cuda" if torch.cuda.is_available() else "cpu")

        self.device = device
        self.dtype = torch.float32

        logger.info("Initializing TorchRecursiveBilateralFilter (%s)", self.device)
        logger.info("  sigma_spatial: %s", self.config.sigma_spatial)
        logger.info("  sigma_range: %s", self.config.sigma_range)

    def process(self, image) -> torch.Tensor:
        """
        Filter a uint8 ``H x W x 3`` or ``1 x 3 x H x W`` tensor.

        Returns a new uint8 tensor in the input layout on ``self.device``.
        """

        img, fmt = to_hwc(ensure_tensor(image, device=self.device))
        logger.debug("Processing tensor: shape=%s", tuple(img.shape))

        logger.debug("Stage 1: range table")
        range_table = torch.as_tensor(
            build_range_table(self.config.sigma_range), device=self.device
        )

        logger.debug("Stage 2: horizontal pass")
        alpha = float(decay_coefficient(self.config.sigma_spatial, img.shape[1]))
        color_h, factor_h = self._horizontal(img, range_table, alpha)

        logger.debug("Stage 3: vertical pass")
        alpha = float(decay_coefficient(self.config.sigma_spatial, img.shape[0]))
        filtered = self._vertical(img, range_table, alpha, color_h, factor_h)

        if not torch.isfinite(filtered).all():
            raise RuntimeError("Non-finite values after normalization")

        logger.debug("Stage 4: quantization (%s)", self.config.quantization.value)
        return from_hwc(self._quantize(filtered), fmt)

    # ------------------------------------------------------------------
    # Sweeps
    # ------------------------------------------------------------------

    @staticmethod
    def _range_weights(
        first: torch.Tensor,
        second: torch.Tensor,
        range_table: torch.Tensor,
    ) -> torch.Tensor:
        diff = torch.abs(first.to(torch.int16) - second.to(torch.int16))
        dist = torch.div(2 * diff[..., 0] + diff[..., 1] + diff[..., 2], 4, rounding_mode="floor")
        return range_table[dist.long()]

    def _horizontal(
        self,
        img: torch.Tensor,
        range_table: torch.Tensor,
        alpha: float,
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        height, width = img.shape[:2]
        signal = img.to(self.dtype)
        weights = self._range_weights(img[:, 1:], img[:, :-1], range_table)

        forward = torch.empty_like(signal)
        backward = torch.empty_like(signal)
        forward_f = torch.empty((height, width), dtype=self.dtype, device=self.device)
        backward_f = torch.empty_like(forward_f)

        forward[:, 0] = signal[:, 0]
        forward_f[:, 0] = 1.0
        for x in range(1, width):
            w = weights[:, x - 1]
            forward[:, x] = signal[:, x] + alpha * (w[:, None] * forward[:, x - 1] - signal[:, x])
            forward_f[:, x] = 1.0 + alpha * (w * forward_f[:, x - 1] - 1.0)

        backward[:, width - 1] = signal[:, width - 1]
        backward_f[:, width - 1] = 1.0
        for x in range(width - 2, -1, -1):
            w = weights[:, x]
            backward[:, x] = signal[:, x] + alpha * (w[:, None] * backward[:, x + 1] - signal[:, x])
            backward_f[:, x] = 1.0 + alpha * (w * backward_f[:, x + 1] - 1.0)

        return 0.5 * (forward + backward), 0.5 * (forward_f + backward_f)

    def _vertical(
        self,
        img: torch.Tensor,
        range_table: torch.Tensor,
        alpha: float,
        color_in: torch.Tensor,
        factor_in: torch.Tensor,
    ) -> torch.Tensor:
        height = img.shape[0]
        weights = self._range_weights(img[1:], img[:-1], range_table)

        forward = torch.empty_like(color_in)
        forward_f = torch.empty_like(factor_in)
        forward[0] = color_in[0]
        forward_f[0] = factor_in[0]
        for y in range(1, height):
            w = weights[y - 1]
            forward[y] = color_in[y] + alpha * (w[:, None] * forward[y - 1] - color_in[y])
            forward_f[y] = factor_in[y] + alpha * (w * forward_f[y - 1] - factor_in[y])

        out = torch.empty_like(color_in)
        last = height - 1
        prev = color_in[last]
        prev_f = factor_in[last]
        out[last] = self._normalize(forward[last], forward_f[last], prev, prev_f)
        for y in range(last - 1, -1, -1):
            w = weights[y]
            prev = color_in[y] + alpha * (w[:, None] * prev - color_in[y])
            prev_f = factor_in[y] + alpha * (w * prev_f - factor_in[y])
            out[y] = self._normalize(forward[y], forward_f[y], prev, prev_f)

        return out

    @staticmethod
    def _normalize(
        color: torch.Tensor,
        factor: torch.Tensor,
        backward: torch.Tensor,
        backward_f: torch.Tensor,
    ) -> torch.Tensor:
        blended_f = 0.5 * (factor + backward_f)
        return 0.5 * (color + backward) / blended_f[:, None]

    def _quantize(self, filtered: torch.Tensor) -> torch.Tensor:
        clipped = torch.clamp(filtered, 0.0, 255.0)
        if self.config.quantization == QuantizationMode.ROUND:
            clipped = torch.round(clipped)
        return clipped.to(torch.uint8)


def recursive_bf_torch(
    image,
    sigma_spatial: float = 0.03,
    sigma_range: float = 0.1,
    device: Optional[torch.device] = None,
    quantization: QuantizationMode = QuantizationMode.TRUNCATE,
) -> torch.Tensor:
    """
    Convenience wrapper for the torch filter.
    """

    config = RecursiveBFConfig(
        sigma_spatial=sigma_spatial,
        sigma_range=sigma_range,
        quantization=quantization,
    )

    rbf = TorchRecursiveBilateralFilter(config=config, device=device)
    return rbf.process(image)
