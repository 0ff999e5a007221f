"""Tab registry that sets up pages once and refreshes them per tick."""

from __future__ import annotations

import time
from dataclasses import asdict
from typing import Any, Iterable, Mapping

from npuview_core.config import AppConfig
from npuview_core.logging_setup import event_logger
from npuview_core.units import UnitFormatter
from npuview_pages import NpuPage, sort_pages
from npuview_telemetry import NpuDevice, NpuSnapshot


logger = event_logger("monitor")


class TabMonitor:
    def __init__(self, cfg: AppConfig | None = None) -> None:
        self.config = cfg or AppConfig()
        self.units = UnitFormatter.from_config(self.config)
        self._pages: dict[str, NpuPage] = {}
        self.last_tick_ms = 0.0

    def __len__(self) -> int:
        return len(self._pages)

    def page(self, pci_slot: str) -> NpuPage | None:
        return self._pages.get(pci_slot)

    def discover(self, devices: Iterable[NpuDevice], secondary_ords: Mapping[str, int] | None = None) -> list[NpuPage]:
        """Create pages for devices not seen yet. Known devices keep their tab."""
        added: list[NpuPage] = []
        for idx, device in enumerate(devices):
            if device.pci_slot in self._pages:
                continue
            page = NpuPage(units=self.units, history_points=self.config.graphs.history_points)
            ordinal = secondary_ords.get(device.pci_slot, idx) if secondary_ords else idx
            page.init(device, ordinal)
            self._pages[device.pci_slot] = page
            added.append(page)
        return added

    def remove(self, pci_slot: str) -> bool:
        page = self._pages.pop(pci_slot, None)
        if page is None:
            return False
        page.teardown()
        return True

    def tick(self, snapshots: Mapping[str, NpuSnapshot]) -> int:
        """Refresh every page that has a snapshot this tick."""
        start = time.perf_counter()
        refreshed = 0
        for pci_slot, snapshot in snapshots.items():
            page = self._pages.get(pci_slot)
            if page is None:
                logger.warning(f"snapshot for unknown device {pci_slot}", event="unknown_device")
                continue
            page.refresh_page(snapshot)
            refreshed += 1
        self.last_tick_ms = (time.perf_counter() - start) * 1000.0
        return refreshed

    def pages(self) -> list[NpuPage]:
        return sort_pages(self._pages.values())

    def tab_payloads(self) -> list[dict[str, Any]]:
        return [tab_payload(page) for page in self.pages()]


def tab_payload(page: NpuPage) -> dict[str, Any]:
    view = page.state.view()
    derived = page.state.derived
    return {
        **asdict(view),
        "primary_ord": page.primary_ord,
        "secondary_ord": page.secondary_ord,
        "usage_visible": derived.usage_visible if derived else False,
        "memory_visible": derived.memory_visible if derived else False,
        "memory_fraction": derived.memory_fraction if derived else None,
        "subtitles": page.subtitles(),
    }
