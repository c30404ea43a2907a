"""
Configuration primitives for recursive bilateral filtering.

Defines the quantization policy enum and a dataclass collecting the
filter parameters.
"""

import math
from dataclasses import dataclass
from enum import Enum


class QuantizationMode(Enum):
    """Float to 8-bit conversion policy."""

    TRUNCATE = "truncate"  # Bit-compatible with the reference kernel
    ROUND = "round"        # Round to nearest


@dataclass
class RecursiveBFConfig:
    """
    Complete configuration for one recursive bilateral filter.

    Defaults follow the reference demo (sigma_spatial=0.03, sigma_range=0.1).
    Both sigmas are relative: sigma_spatial is a fraction of the image
    width/height, sigma_range a fraction of the 0-255 range.
    """

    sigma_spatial: float = 0.03
    sigma_range: float = 0.1
    channel: int = 3  # RGB only

    quantization: QuantizationMode = QuantizationMode.TRUNCATE
    reuse_buffers: bool = True  # keep scratch memory between frames

    def validate(self) -> None:
        """Validate configuration parameters."""

        if not (math.isfinite(self.sigma_spatial) and self.sigma_spatial > 0):
            raise ValueError(f"sigma_spatial {self.sigma_spatial} must be a finite value > 0")

        if not (math.isfinite(self.sigma_range) and self.sigma_range > 0):
            raise ValueError(f"sigma_range {self.sigma_range} must be a finite value > 0")

        if self.channel != 3:
            raise ValueError(f"Channel count {self.channel} not supported, expected 3")

        if not isinstance(self.quantization, QuantizationMode):
            raise ValueError(f"Unknown quantization mode: {self.quantization}")
