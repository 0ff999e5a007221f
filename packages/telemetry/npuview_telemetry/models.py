"""Typed telemetry models for NPU-class devices."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class NpuDevice:
    """Static description of one discovered device."""

    pci_slot: str
    name: str | None = None
    vendor: str | None = None
    driver: str = ""


@dataclass(frozen=True)
class NpuSnapshot:
    """One refresh tick of raw counters. Every reading is optional."""

    pci_slot: str
    usage_fraction: float | None = None
    memory_total: int | None = None
    memory_used: int | None = None
    core_clock: float | None = None  # Hz
    memory_clock: float | None = None  # Hz
    temperature: float | None = None  # °C
    power_draw: float | None = None  # W
    power_limit: float | None = None  # W
    power_limit_max: float | None = None  # W

    def __post_init__(self) -> None:
        # A non-finite reading is an unreadable counter.
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                object.__setattr__(self, f.name, None)

    @property
    def device_key(self) -> str:
        return self.pci_slot

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> "NpuSnapshot":
        pci_slot = raw.get("pci_slot")
        if not pci_slot or not isinstance(pci_slot, str):
            raise ValueError("sample without a pci_slot string")

        def _float(key: str) -> float | None:
            value = raw.get(key)
            return None if value is None else float(value)

        def _int(key: str) -> int | None:
            value = raw.get(key)
            if value is None:
                return None
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{key} is not a whole byte count: {value}")
            return int(value)

        return cls(
            pci_slot=pci_slot,
            usage_fraction=_float("usage_fraction"),
            memory_total=_int("memory_total"),
            memory_used=_int("memory_used"),
            core_clock=_float("core_clock"),
            memory_clock=_float("memory_clock"),
            temperature=_float("temperature"),
            power_draw=_float("power_draw"),
            power_limit=_float("power_limit"),
            power_limit_max=_float("power_limit_max"),
        )
