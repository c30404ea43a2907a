"""
Image layout helpers shared by the numpy and torch front ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

ImageLike = Union[np.ndarray, bytes, bytearray, memoryview]


@dataclass(frozen=True)
class ImageLayout:
    """Bookkeeping for the caller's layout during filtering."""

    original_shape: Tuple[int, ...]
    flat: bool
    shape: Tuple[int, int, int]

    @property
    def height(self) -> int:
        return self.shape[0]

    @property
    def width(self) -> int:
        return self.shape[1]


def as_image(
    data: ImageLike,
    width: Optional[int] = None,
    height: Optional[int] = None,
    channel: int = 3,
) -> Tuple[np.ndarray, ImageLayout]:
    """
    View input data as an ``H x W x C`` uint8 array.

    Accepts an ``H x W x C`` array, or a flat row-major interleaved
    buffer (bytes or 1-D array) together with ``width`` and ``height``.
    No copy is made when the input is already a uint8 array.
    """

    if isinstance(data, (bytes, bytearray, memoryview)):
        data = np.frombuffer(data, dtype=np.uint8)

    if not isinstance(data, np.ndarray):
        raise ValueError(f"Expected a numpy array or bytes, got {type(data).__name__}")

    if data.dtype != np.uint8:
        raise ValueError(f"Expected 8-bit samples (uint8), got {data.dtype}")

    if data.ndim == 3:
        img_h, img_w, img_c = data.shape
        if img_c != channel:
            raise ValueError(f"Expected HxWx{channel} image, got shape {data.shape}")
        if (width is not None and width != img_w) or (height is not None and height != img_h):
            raise ValueError(
                f"Image shape {data.shape} does not match width={width}, height={height}"
            )
        img = data
        flat = False
    elif data.ndim == 1:
        if width is None or height is None:
            raise ValueError("width and height are required for a flat image buffer")
        expected = width * height * channel
        if data.size != expected:
            raise ValueError(
                f"Flat buffer has {data.size} samples, expected {expected} "
                f"for a {width}x{height}x{channel} image"
            )
        img = data.reshape(height, width, channel)
        flat = True
    else:
        raise ValueError(f"Unsupported array rank {data.ndim} for image input.")

    if img.shape[0] == 0 or img.shape[1] == 0:
        raise ValueError(f"Image must not be empty, got shape {img.shape}")

    layout = ImageLayout(
        original_shape=tuple(data.shape),
        flat=flat,
        shape=tuple(img.shape),  # type: ignore[arg-type]
    )
    return img, layout


def restore_layout(img: np.ndarray, layout: ImageLayout) -> np.ndarray:
    """Convert an ``H x W x C`` array back to the caller's layout."""

    if layout.flat:
        return img.reshape(layout.original_shape)

    return img
