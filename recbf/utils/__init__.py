"""Layout helpers and reference implementations."""

from recbf.utils.image import ImageLayout, as_image, restore_layout
from recbf.utils.reference import exponential_blur

__all__ = ["ImageLayout", "as_image", "restore_layout", "exponential_blur"]
