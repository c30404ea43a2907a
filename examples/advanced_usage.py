"""
Advanced recbf usage scenarios.
"""

from __future__ import annotations

import time

import numpy as np

from recbf import RecursiveBilateralFilter, recursive_bf, required_buffer_size


def example_external_buffer(n: int = 10) -> None:
    """Compare internal and caller-owned scratch memory over repeated frames."""

    height, width = 240, 320
    rng = np.random.default_rng(1)
    img = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    img_out = np.empty_like(img)

    start = time.perf_counter()
    for _ in range(n):
        recursive_bf(img, 0.03, 0.1, out=img_out)
    print(f"Internal Buffer: {(time.perf_counter() - start) / n:2.5f}secs")

    buffer = np.empty(required_buffer_size(width, height), dtype=np.float32)
    start = time.perf_counter()
    for _ in range(n):
        recursive_bf(img, 0.03, 0.1, buffer=buffer, out=img_out)
    print(f"External Buffer: {(time.perf_counter() - start) / n:2.5f}secs")


def example_video_frames(frames: int = 5) -> list:
    """Reuse one filter (and its cached scratch buffers) across frames."""

    rng = np.random.default_rng(2)
    rbf = RecursiveBilateralFilter()
    results = []
    for _ in range(frames):
        frame = rng.integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
        results.append(rbf.process(frame))
    print(f"Filtered {len(results)} frames")
    return results


def example_with_intermediate_results() -> dict:
    """Retrieve intermediate maps for inspection."""

    rng = np.random.default_rng(3)
    img = rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
    results = RecursiveBilateralFilter().process(img, return_intermediate=True)
    keys = ", ".join(results.keys())
    print(f"Intermediate results available: {keys}")
    return results


def example_torch_backend():
    """Run the PyTorch backend (requires torch)."""
    try:
        import torch
        from recbf.torch import TorchRecursiveBilateralFilter  # type: ignore
    except ImportError:  # pragma: no cover - torch optional
        print("PyTorch is not available; skipping torch example.")
        return None

    img = torch.randint(0, 256, (128, 128, 3), dtype=torch.uint8)
    device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
    img_out = TorchRecursiveBilateralFilter(device=device).process(img)
    print(f"Torch backend output on {device}: shape={tuple(img_out.shape)}")
    return img_out


if __name__ == "__main__":
    print("Running recbf advanced examples...")
    example_external_buffer()
    example_video_frames()
    example_with_intermediate_results()
    example_torch_backend()
