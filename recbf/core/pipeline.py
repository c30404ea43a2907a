"""
Main recursive bilateral filtering pipeline.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

import numpy as np

from recbf.core.buffers import ScratchBuffers, resolve_buffers
from recbf.core.config import QuantizationMode, RecursiveBFConfig
from recbf.filtering.horizontal import horizontal_pass
from recbf.filtering.quantize import quantize
from recbf.filtering.range_table import build_range_table, decay_coefficient
from recbf.filtering.vertical import vertical_pass
from recbf.utils.image import ImageLike, as_image, restore_layout

logger = logging.getLogger(__name__)

BufferLike = Union[np.ndarray, ScratchBuffers]


class RecursiveBilateralFilter:
    """
    Edge-preserving smoothing in time linear in the pixel count.

    Pipeline stages:
        1. Range weight table
        2. Horizontal recursive pass (left-to-right, right-to-left)
        3. Vertical recursive pass (top-to-bottom, bottom-to-top) and
           normalization
        4. Quantization to 8 bits

    Reference: Qingxiong Yang, Recursive Bilateral Filtering, ECCV 2012.
    """

    def __init__(self, config: Optional[RecursiveBFConfig] = None) -> None:
        self.config = config or RecursiveBFConfig()
        self.config.validate()

        logger.info("Initializing recursive bilateral filter")
        logger.info("  sigma_spatial: %s", self.config.sigma_spatial)
        logger.info("  sigma_range: %s", self.config.sigma_range)
        logger.info("  quantization: %s", self.config.quantization.value)

        self._buffers: Optional[ScratchBuffers] = None

    def process(
        self,
        image: ImageLike,
        width: Optional[int] = None,
        height: Optional[int] = None,
        buffer: Optional[BufferLike] = None,
        out: Optional[np.ndarray] = None,
        return_intermediate: bool = False,
    ) -> Union[np.ndarray, Dict[str, Union[np.ndarray, float]]]:
        """
        Filter an 8-bit RGB image and return a new 8-bit image.

        Parameters
        ----------
        image : array or bytes
            ``H x W x 3`` uint8 array, or a flat row-major buffer with
            ``width`` and ``height``. Never modified.
        buffer : np.ndarray or ScratchBuffers, optional
            Caller-owned scratch storage, see
            :func:`recbf.core.buffers.required_buffer_size`. It must not be
            shared by two concurrent calls.
        out : np.ndarray, optional
            uint8 array in the input's layout to write the result into.
        return_intermediate : bool
            Return a dict of intermediate maps instead of the image.
        """

        img, layout = as_image(image, width, height, self.config.channel)
        logger.debug("Processing image: shape=%s", img.shape)

        if out is not None:
            if (
                out.dtype != np.uint8
                or out.shape != layout.original_shape
                or not out.flags.c_contiguous
            ):
                raise ValueError(
                    f"Output array must be C-contiguous uint8 with shape {layout.original_shape}, "
                    f"got {out.dtype} {out.shape}"
                )
            out_img = out.reshape(img.shape)
        else:
            out_img = np.empty(img.shape, dtype=np.uint8)

        buffers = self._get_buffers(buffer, layout.width, layout.height)
        filtered = self._run(img, buffers, out_img, return_intermediate)

        if return_intermediate:
            filtered["output"] = restore_layout(out_img, layout)
            return filtered

        return restore_layout(out_img, layout)

    def process_inplace(
        self,
        image: np.ndarray,
        buffer: Optional[BufferLike] = None,
    ) -> np.ndarray:
        """
        Filter a writable ``H x W x 3`` uint8 array in place and return it.

        Similarity is measured on the original samples; the array is only
        overwritten by the final quantization.
        """

        img, layout = as_image(image, channel=self.config.channel)
        if not img.flags.writeable:
            raise ValueError("In-place filtering requires a writeable array")

        buffers = self._get_buffers(buffer, layout.width, layout.height)
        self._run(img, buffers, img, False)
        return image

    # ------------------------------------------------------------------
    # Buffers
    # ------------------------------------------------------------------

    def _get_buffers(
        self,
        buffer: Optional[BufferLike],
        width: int,
        height: int,
    ) -> ScratchBuffers:
        channel = self.config.channel

        if buffer is not None:
            return resolve_buffers(buffer, width, height, channel)

        if not self.config.reuse_buffers:
            return ScratchBuffers.allocate(width, height, channel)

        if self._buffers is None or not self._buffers.fits(width, height, channel):
            logger.debug("Allocating scratch buffers for %dx%dx%d", width, height, channel)
            self._buffers = ScratchBuffers.allocate(width, height, channel)

        return self._buffers

    def release_buffers(self) -> None:
        """Drop internally cached scratch memory."""

        self._buffers = None

    # ------------------------------------------------------------------
    # Individual pipeline stages
    # ------------------------------------------------------------------

    def _run(
        self,
        img: np.ndarray,
        buffers: ScratchBuffers,
        out_img: np.ndarray,
        return_intermediate: bool,
    ) -> Optional[Dict[str, Union[np.ndarray, float]]]:
        results: Optional[Dict[str, Union[np.ndarray, float]]] = (
            {"input": img.copy()} if return_intermediate else None
        )

        range_table = self._stage_range_table(results)
        self._stage_horizontal(img, range_table, buffers, results)
        self._stage_vertical(img, range_table, buffers, results)
        self._stage_quantize(buffers, out_img)

        return results

    def _stage_range_table(
        self,
        results: Optional[Dict[str, Union[np.ndarray, float]]],
    ) -> np.ndarray:
        logger.debug("Stage 1: range table")

        range_table = build_range_table(self.config.sigma_range)

        if results is not None:
            results["range_table"] = range_table

        return range_table

    def _stage_horizontal(
        self,
        img: np.ndarray,
        range_table: np.ndarray,
        buffers: ScratchBuffers,
        results: Optional[Dict[str, Union[np.ndarray, float]]],
    ) -> None:
        logger.debug("Stage 2: horizontal pass")

        alpha = decay_coefficient(self.config.sigma_spatial, img.shape[1])
        horizontal_pass(
            img,
            range_table,
            alpha,
            buffers.color_horizontal,
            buffers.factor_horizontal,
            buffers.color_vertical,
            buffers.factor_vertical,
        )

        if results is not None:
            results["alpha_horizontal"] = float(alpha)
            results["horizontal_color"] = buffers.color_horizontal.copy()
            results["horizontal_factor"] = buffers.factor_horizontal.copy()

    def _stage_vertical(
        self,
        img: np.ndarray,
        range_table: np.ndarray,
        buffers: ScratchBuffers,
        results: Optional[Dict[str, Union[np.ndarray, float]]],
    ) -> None:
        logger.debug("Stage 3: vertical pass")

        alpha = decay_coefficient(self.config.sigma_spatial, img.shape[0])
        vertical_pass(
            img,
            range_table,
            alpha,
            buffers.color_horizontal,
            buffers.factor_horizontal,
            buffers.color_vertical,
            buffers.factor_vertical,
            buffers.slice_current,
            buffers.slice_previous,
            buffers.line_current,
            buffers.line_previous,
        )

        if not np.isfinite(buffers.color_vertical).all():
            raise RuntimeError("Non-finite values after normalization")

        if results is not None:
            results["alpha_vertical"] = float(alpha)
            results["vertical_factor"] = buffers.factor_vertical.copy()
            results["filtered"] = buffers.color_vertical.copy()

    def _stage_quantize(
        self,
        buffers: ScratchBuffers,
        out_img: np.ndarray,
    ) -> None:
        logger.debug("Stage 4: quantization (%s)", self.config.quantization.value)

        quantize(buffers.color_vertical, self.config.quantization, out=out_img)


def recursive_bf(
    image: ImageLike,
    sigma_spatial: float = 0.03,
    sigma_range: float = 0.1,
    width: Optional[int] = None,
    height: Optional[int] = None,
    channel: int = 3,
    buffer: Optional[BufferLike] = None,
    out: Optional[np.ndarray] = None,
    quantization: QuantizationMode = QuantizationMode.TRUNCATE,
) -> np.ndarray:
    """
    Convenience wrapper: filter a copy of ``image`` and return it.
    """

    config = RecursiveBFConfig(
        sigma_spatial=sigma_spatial,
        sigma_range=sigma_range,
        channel=channel,
        quantization=quantization,
        reuse_buffers=False,
    )

    rbf = RecursiveBilateralFilter(config)
    return rbf.process(image, width=width, height=height, buffer=buffer, out=out)


def recursive_bf_inplace(
    image: np.ndarray,
    sigma_spatial: float = 0.03,
    sigma_range: float = 0.1,
    buffer: Optional[BufferLike] = None,
    quantization: QuantizationMode = QuantizationMode.TRUNCATE,
) -> np.ndarray:
    """
    Convenience wrapper: filter a writable uint8 ``H x W x 3`` array in place.
    """

    config = RecursiveBFConfig(
        sigma_spatial=sigma_spatial,
        sigma_range=sigma_range,
        quantization=quantization,
        reuse_buffers=False,
    )

    rbf = RecursiveBilateralFilter(config)
    return rbf.process_inplace(image, buffer=buffer)
