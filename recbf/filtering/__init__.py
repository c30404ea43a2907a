"""Recursive filtering kernels."""

from recbf.filtering.horizontal import horizontal_pass
from recbf.filtering.quantize import quantize
from recbf.filtering.range_table import (
    MAX_RANGE_DISTANCE,
    build_range_table,
    decay_coefficient,
    range_weights,
    range_distance,
)
from recbf.filtering.vertical import vertical_pass

__all__ = [
    "MAX_RANGE_DISTANCE",
    "build_range_table",
    "decay_coefficient",
    "range_weights",
    "range_distance",
    "horizontal_pass",
    "vertical_pass",
    "quantize",
]
