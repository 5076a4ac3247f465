"""Data operations: the caller-facing interface and per-provider partitioning."""
from __future__ import annotations

from dpmediator.operations.interface import DataOperation
from dpmediator.operations.partition import Partitioner, ProviderShare, reconstruct

__all__ = [
    "DataOperation",
    "Partitioner",
    "ProviderShare",
    "reconstruct",
]
