"""Replay of recorded NPU telemetry from JSONL files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .models import NpuDevice, NpuSnapshot


logger = logging.getLogger("npuview.telemetry")


@dataclass
class ReplayRecording:
    devices: list[NpuDevice] = field(default_factory=list)
    ticks: list[dict[str, NpuSnapshot]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def secondary_ords(self) -> dict[str, int]:
        """Enumeration order of each declared device."""
        return {device.pci_slot: idx for idx, device in enumerate(self.devices)}


class SnapshotReplay:
    """Parses ``device``/``sample``/``tick`` records into refresh ticks.

    Samples collected since the last ``tick`` record form one tick. A
    trailing group without a closing ``tick`` still counts as a tick.
    Malformed lines are reported in ``errors`` with their line number and
    skipped.
    """

    def parse(self, path: Path) -> ReplayRecording:
        recording = ReplayRecording()
        known: set[str] = set()
        pending: dict[str, NpuSnapshot] = {}

        for idx, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                obj = json.loads(stripped)
            except ValueError as exc:
                recording.errors.append(f"line {idx}: invalid json: {exc}")
                continue
            if not isinstance(obj, dict):
                recording.errors.append(f"line {idx}: expected object")
                continue

            kind = obj.get("type")
            if kind == "device":
                pci_slot = obj.get("pci_slot")
                if not pci_slot or not isinstance(pci_slot, str):
                    recording.errors.append(f"line {idx}: device without a pci_slot string")
                    continue
                if pci_slot in known:
                    recording.errors.append(f"line {idx}: duplicate device {pci_slot}")
                    continue
                known.add(pci_slot)
                recording.devices.append(
                    NpuDevice(
                        pci_slot=pci_slot,
                        name=obj.get("name") or None,
                        vendor=obj.get("vendor") or None,
                        driver=str(obj.get("driver") or ""),
                    )
                )
            elif kind == "sample":
                try:
                    snapshot = NpuSnapshot.from_mapping(obj)
                except (TypeError, ValueError, OverflowError) as exc:
                    recording.errors.append(f"line {idx}: bad sample: {exc}")
                    continue
                if snapshot.pci_slot not in known:
                    recording.errors.append(f"line {idx}: sample for unknown device {snapshot.pci_slot}")
                    continue
                pending[snapshot.pci_slot] = snapshot
            elif kind == "tick":
                recording.ticks.append(pending)
                pending = {}
            else:
                recording.errors.append(f"line {idx}: unknown record type {kind!r}")

        if pending:
            recording.ticks.append(pending)

        logger.info(
            "replay parsed",
            extra={"event": "replay_parsed", "devices": len(recording.devices), "ticks": len(recording.ticks)},
        )
        return recording
