"""Recursive bilateral filtering (recbf).

Edge-preserving smoothing of 8-bit RGB images in time linear in the pixel
count and independent of the spatial smoothing radius.

Reference: Qingxiong Yang, Recursive Bilateral Filtering, ECCV 2012.
"""

from recbf.core.buffers import ScratchBuffers, required_buffer_size
from recbf.core.config import QuantizationMode, RecursiveBFConfig
from recbf.core.pipeline import (
    RecursiveBilateralFilter,
    recursive_bf,
    recursive_bf_inplace,
)
from recbf.utils.reference import exponential_blur

__all__ = [
    "RecursiveBilateralFilter",
    "RecursiveBFConfig",
    "QuantizationMode",
    "ScratchBuffers",
    "required_buffer_size",
    "recursive_bf",
    "recursive_bf_inplace",
    "exponential_blur",
]

try:  # Optional PyTorch backend
    from recbf.torch.filter import TorchRecursiveBilateralFilter, recursive_bf_torch  # type: ignore

    __all__.extend(["TorchRecursiveBilateralFilter", "recursive_bf_torch"])
except ImportError:  # pragma: no cover - torch not installed
    TorchRecursiveBilateralFilter = None  # type: ignore
    recursive_bf_torch = None  # type: ignore

__version__ = "1.0.0"
