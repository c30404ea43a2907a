"""Configuration, scratch memory and the filtering pipeline."""

from recbf.core.buffers import ScratchBuffers, required_buffer_size, resolve_buffers
from recbf.core.config import QuantizationMode, RecursiveBFConfig

__all__ = [
    "QuantizationMode",
    "RecursiveBFConfig",
    "ScratchBuffers",
    "required_buffer_size",
    "resolve_buffers",
]
