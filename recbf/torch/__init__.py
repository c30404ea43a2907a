"""
GPU-capable recursive bilateral filter backed by PyTorch.
"""

from recbf.torch.filter import TorchRecursiveBilateralFilter, recursive_bf_torch

__all__ = ["TorchRecursiveBilateralFilter", "recursive_bf_torch"]
