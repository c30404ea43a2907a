"""
Scratch memory for the recursive passes.

All accumulators live in one flat float32 allocation, split into named
views so each pass addresses its buffers by role instead of by offset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np


def required_buffer_size(width: int, height: int, channel: int = 3) -> int:
    """
    Number of float32 elements needed for one filter invocation.

    ``2 * (W*H*C + W*H + W*C + W)``: two colour accumulators, two factor
    maps, two per-row colour slices and two per-row factor lines.
    """

    if width <= 0 or height <= 0 or channel <= 0:
        raise ValueError(f"Invalid image size {width}x{height}x{channel}")

    return 2 * (width * height * channel + width * height + width * channel + width)


@dataclass
class ScratchBuffers:
    """Named float32 views over the filter's scratch allocation."""

    storage: np.ndarray
    color_horizontal: np.ndarray  # H x W x C
    color_vertical: np.ndarray    # H x W x C
    factor_horizontal: np.ndarray  # H x W
    factor_vertical: np.ndarray    # H x W
    slice_current: np.ndarray     # W x C
    slice_previous: np.ndarray    # W x C
    line_current: np.ndarray      # W
    line_previous: np.ndarray     # W
    external: bool = False

    @classmethod
    def allocate(cls, width: int, height: int, channel: int = 3) -> "ScratchBuffers":
        storage = np.empty(required_buffer_size(width, height, channel), dtype=np.float32)
        return cls._carve(storage, width, height, channel, external=False)

    @classmethod
    def from_external(
        cls,
        buffer: np.ndarray,
        width: int,
        height: int,
        channel: int = 3,
    ) -> "ScratchBuffers":
        """
        Wrap a caller-owned flat float32 array without copying.

        Parameters
        ----------
        buffer : np.ndarray
            1-D, C-contiguous float32 array of exactly
            ``required_buffer_size(width, height, channel)`` elements.
        """

        if not isinstance(buffer, np.ndarray):
            raise ValueError(f"External buffer must be a numpy array, got {type(buffer).__name__}")
        if buffer.dtype != np.float32:
            raise ValueError(f"External buffer must be float32, got {buffer.dtype}")
        if buffer.ndim != 1 or not buffer.flags.c_contiguous:
            raise ValueError("External buffer must be a 1-D C-contiguous array")
        if not buffer.flags.writeable:
            raise ValueError("External buffer must be writeable")

        expected = required_buffer_size(width, height, channel)
        if buffer.size != expected:
            raise ValueError(
                f"External buffer has {buffer.size} elements, expected exactly {expected} "
                f"for a {width}x{height}x{channel} image"
            )

        return cls._carve(buffer, width, height, channel, external=True)

    @classmethod
    def _carve(
        cls,
        storage: np.ndarray,
        width: int,
        height: int,
        channel: int,
        external: bool,
    ) -> "ScratchBuffers":
        sizes = (
            ("color_horizontal", (height, width, channel)),
            ("color_vertical", (height, width, channel)),
            ("factor_horizontal", (height, width)),
            ("factor_vertical", (height, width)),
            ("slice_current", (width, channel)),
            ("slice_previous", (width, channel)),
            ("line_current", (width,)),
            ("line_previous", (width,)),
        )

        views = {}
        offset = 0
        for name, shape in sizes:
            count = int(np.prod(shape))
            views[name] = storage[offset:offset + count].reshape(shape)
            offset += count

        return cls(storage=storage, external=external, **views)

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Image shape (H, W, C) these buffers were sized for."""

        return tuple(self.color_horizontal.shape)  # type: ignore[return-value]

    def fits(self, width: int, height: int, channel: int = 3) -> bool:
        return self.shape == (height, width, channel)


def resolve_buffers(
    buffer: Optional[Union[np.ndarray, ScratchBuffers]],
    width: int,
    height: int,
    channel: int = 3,
) -> ScratchBuffers:
    """
    Build scratch buffers from an optional external array.

    ``None`` allocates fresh storage for this call only; an existing
    :class:`ScratchBuffers` is accepted when its shape matches.
    """

    if buffer is None:
        return ScratchBuffers.allocate(width, height, channel)

    if isinstance(buffer, ScratchBuffers):
        if not buffer.fits(width, height, channel):
            raise ValueError(
                f"Scratch buffers sized for {buffer.shape}, image is {(height, width, channel)}"
            )
        return buffer

    return ScratchBuffers.from_external(buffer, width, height, channel)
