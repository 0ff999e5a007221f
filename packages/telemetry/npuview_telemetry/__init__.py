"""Telemetry models and recorded-snapshot sources for NPU tabs."""

from .models import NpuDevice, NpuSnapshot
from .replay import ReplayRecording, SnapshotReplay

__all__ = [
    "NpuDevice",
    "NpuSnapshot",
    "ReplayRecording",
    "SnapshotReplay",
]
