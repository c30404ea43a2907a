"""
Shared helpers for the torch-based recursive bilateral filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import torch


@dataclass(frozen=True)
class TensorFormat:
    """Bookkeeping for tensor layout during filtering."""

    original_shape: Tuple[int, ...]
    channel_first: bool


def ensure_tensor(
    data,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.uint8,
) -> torch.Tensor:
    """
    Convert input data to a torch tensor on the requested device.
    """

    if isinstance(data, torch.Tensor):
        if data.dtype != dtype:
            raise ValueError(f"Expected {dtype} tensor, got {data.dtype}")
        tensor = data
        if device is not None:
            tensor = tensor.to(device)
        return tensor

    if isinstance(data, np.ndarray) and data.dtype != np.uint8 and dtype == torch.uint8:
        raise ValueError(f"Expected 8-bit samples (uint8), got {data.dtype}")

    tensor = torch.as_tensor(data, dtype=dtype, device=device)
    return tensor


def to_hwc(
    img: torch.Tensor,
) -> Tuple[torch.Tensor, TensorFormat]:
    """
    Reshape an image tensor to H×W×C.

    Accepts ``H x W x 3`` or a single-image batch ``1 x 3 x H x W``.
    """

    if img.dim() == 3:
        if img.shape[2] != 3:
            raise ValueError(f"Expected H×W×3 tensor, got shape {tuple(img.shape)}")
        channel_first = False
        img_hwc = img
    elif img.dim() == 4:
        if img.shape[0] != 1:
            raise ValueError("Batch size > 1 is not supported yet.")
        if img.shape[1] != 3:
            raise ValueError(f"Expected 1×3×H×W tensor, got shape {tuple(img.shape)}")
        channel_first = True
        img_hwc = img[0].permute(1, 2, 0)
    else:
        raise ValueError(f"Unsupported tensor rank {img.dim()} for image input.")

    if img_hwc.shape[0] == 0 or img_hwc.shape[1] == 0:
        raise ValueError(f"Image must not be empty, got shape {tuple(img.shape)}")

    fmt = TensorFormat(original_shape=tuple(img.shape), channel_first=channel_first)
    return img_hwc.contiguous(), fmt


def from_hwc(
    img: torch.Tensor,
    fmt: TensorFormat,
) -> torch.Tensor:
    """
    Convert an H×W×C tensor back to the original layout.
    """

    if img.dim() != 3:
        raise ValueError("Expected H×W×C tensor.")

    if fmt.channel_first:
        return img.permute(2, 0, 1).unsqueeze(0).contiguous()

    return img
