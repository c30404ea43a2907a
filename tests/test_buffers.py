"""
Tests for scratch buffer layout and the external buffer contract.
"""

from __future__ import annotations

import numpy as np
import pytest

from recbf import ScratchBuffers, required_buffer_size
from recbf.core.buffers import resolve_buffers


def test_required_buffer_size() -> None:
    assert required_buffer_size(4, 3) == 2 * (4 * 3 * 3 + 4 * 3 + 4 * 3 + 4)
    assert required_buffer_size(640, 480, 3) == 2 * (
        640 * 480 * 3 + 640 * 480 + 640 * 3 + 640
    )


def test_required_buffer_size_rejects_empty() -> None:
    with pytest.raises(ValueError):
        required_buffer_size(0, 4)


def test_allocated_views_shapes() -> None:
    buffers = ScratchBuffers.allocate(width=5, height=4)

    assert buffers.color_horizontal.shape == (4, 5, 3)
    assert buffers.color_vertical.shape == (4, 5, 3)
    assert buffers.factor_horizontal.shape == (4, 5)
    assert buffers.factor_vertical.shape == (4, 5)
    assert buffers.slice_current.shape == (5, 3)
    assert buffers.slice_previous.shape == (5, 3)
    assert buffers.line_current.shape == (5,)
    assert buffers.line_previous.shape == (5,)
    assert buffers.shape == (4, 5, 3)
    assert buffers.fits(5, 4)
    assert not buffers.fits(4, 5)
    assert not buffers.external


def test_views_tile_storage_without_overlap() -> None:
    buffers = ScratchBuffers.allocate(width=6, height=3)
    views = [
        buffers.color_horizontal,
        buffers.color_vertical,
        buffers.factor_horizontal,
        buffers.factor_vertical,
        buffers.slice_current,
        buffers.slice_previous,
        buffers.line_current,
        buffers.line_previous,
    ]

    for index, view in enumerate(views):
        assert np.shares_memory(view, buffers.storage)
        view[...] = index

    for index, view in enumerate(views):
        assert np.count_nonzero(buffers.storage == index) == view.size

    assert sum(view.size for view in views) == buffers.storage.size


def test_external_buffer_is_not_copied() -> None:
    buffer = np.zeros(required_buffer_size(4, 4), dtype=np.float32)
    buffers = ScratchBuffers.from_external(buffer, 4, 4)

    assert buffers.external
    assert buffers.storage is buffer
    buffers.line_previous[...] = 7.0
    assert buffer[-1] == 7.0


@pytest.mark.parametrize("delta", [-1, 1])
def test_external_buffer_wrong_size_rejected(delta: int) -> None:
    buffer = np.zeros(required_buffer_size(4, 4) + delta, dtype=np.float32)
    with pytest.raises(ValueError):
        ScratchBuffers.from_external(buffer, 4, 4)


def test_external_buffer_wrong_dtype_rejected() -> None:
    buffer = np.zeros(required_buffer_size(4, 4), dtype=np.float64)
    with pytest.raises(ValueError):
        ScratchBuffers.from_external(buffer, 4, 4)


def test_external_buffer_wrong_rank_rejected() -> None:
    buffer = np.zeros((2, required_buffer_size(4, 4) // 2), dtype=np.float32)
    with pytest.raises(ValueError):
        ScratchBuffers.from_external(buffer, 4, 4)


def test_resolve_buffers() -> None:
    fresh = resolve_buffers(None, 3, 2)
    assert fresh.fits(3, 2)

    assert resolve_buffers(fresh, 3, 2) is fresh
    with pytest.raises(ValueError):
        resolve_buffers(fresh, 2, 3)
