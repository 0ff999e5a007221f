"""Qt view-models and the timer-driven refresh loop."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QObject, Property, QTimer, Signal, Slot

from npuview_core import PerformanceController, PerformanceTargets, load_config
from npuview_core.config import AppConfig
from npuview_core.logging_setup import configure_logging, event_logger, get_logger, install_crash_hooks
from npuview_pages import NpuPage, PresentationState
from npuview_telemetry import ReplayRecording, SnapshotReplay

from .monitor import TabMonitor


class NpuTabViewModel(QObject):
    """Exposes one tab's presentation fields as Qt properties."""

    tabNameChanged = Signal()
    tabDetailChanged = Signal()
    tabIdChanged = Signal()
    usageChanged = Signal()
    tabUsageStringChanged = Signal()
    subtitlesChanged = Signal()

    def __init__(self, page: NpuPage, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.page = page
        self._signals = {
            "tab_name": self.tabNameChanged,
            "tab_detail": self.tabDetailChanged,
            "tab_id": self.tabIdChanged,
            "usage": self.usageChanged,
            "tab_usage_string": self.tabUsageStringChanged,
            "subtitles": self.subtitlesChanged,
        }
        self._unsubscribe = page.state.subscribe(self._on_state_changed)

    def _on_state_changed(self, _state: PresentationState, changed: frozenset) -> None:
        for name in sorted(changed):
            signal = self._signals.get(name)
            if signal is not None:
                signal.emit()

    def detach(self) -> None:
        self._unsubscribe()

    @Property(str, notify=tabNameChanged)
    def tabName(self) -> str:
        return self.page.state.tab_name

    @Property(str, notify=tabDetailChanged)
    def tabDetail(self) -> str:
        return self.page.state.tab_detail

    @Property(str, notify=tabIdChanged)
    def tabId(self) -> str:
        return self.page.state.tab_id

    @Property(float, notify=usageChanged)
    def usage(self) -> float:
        return self.page.state.usage

    @Property(str, notify=tabUsageStringChanged)
    def tabUsageString(self) -> str:
        return self.page.state.tab_usage_string

    @Property(str, notify=subtitlesChanged)
    def subtitlesJson(self) -> str:
        return json.dumps(self.page.subtitles(), sort_keys=True, ensure_ascii=False)

    @Property(int, constant=True)
    def primaryOrd(self) -> int:
        return self.page.primary_ord

    @Property(int, constant=True)
    def secondaryOrd(self) -> int:
        return self.page.secondary_ord

    @Property(str, constant=True)
    def iconName(self) -> str:
        return self.page.icon_name

    @Property(bool, constant=True)
    def usesProgressBar(self) -> bool:
        return self.page.uses_progress_bar

    @Property(str, constant=True)
    def mainGraphColor(self) -> str:
        return self.page.usage_graph.color


class RefreshLoop(QObject):
    """Feeds recorded ticks into a ``TabMonitor`` on a ``QTimer``."""

    finished = Signal()

    def __init__(
        self,
        recording: ReplayRecording,
        cfg: AppConfig | None = None,
        loop: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.config = cfg or AppConfig()
        self.logger = event_logger("app")
        self.recording = recording
        self.loop = loop
        self.monitor = TabMonitor(self.config)
        self.monitor.discover(recording.devices, recording.secondary_ords())
        self.view_models = [NpuTabViewModel(page, self) for page in self.monitor.pages()]
        self.performance = PerformanceController(
            PerformanceTargets(
                cpu_percent_max=self.config.performance.cpu_percent_max,
                rss_mb_max=self.config.performance.rss_mb_max,
            )
        )
        self._poll_ms = self.config.refresh.poll_ms
        self._index = 0
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)

    @property
    def ticks_applied(self) -> int:
        return self._index

    @Slot()
    def start(self) -> None:
        self._timer.start(self._poll_ms)

    @Slot()
    def stop(self) -> None:
        self._timer.stop()

    def _tick(self) -> None:
        if self._index >= len(self.recording.ticks):
            if not self.loop or not self.recording.ticks:
                self.stop()
                self.finished.emit()
                return
            self._index = 0

        self.monitor.tick(self.recording.ticks[self._index])
        self._index += 1

        for vm in self.view_models:
            self.logger.info(vm.tabUsageString, event="tick", extra={"tab_id": vm.tabId})

        budget = self.performance.sample(self.monitor.last_tick_ms, self._poll_ms)
        if budget.recommended_poll_ms != self._poll_ms:
            self.logger.warning(
                f"refresh budget {budget.warning}: poll {self._poll_ms} -> {budget.recommended_poll_ms} ms",
                event="budget_adjust",
            )
            self._poll_ms = budget.recommended_poll_ms
            self._timer.setInterval(self._poll_ms)


def run_monitor(recording_path: Path, loop: bool = False) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    recording = SnapshotReplay().parse(recording_path)
    for error in recording.errors:
        logger.warning(error, extra={"event": "replay_error"})

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("NPUView")

    runner = RefreshLoop(recording, cfg=cfg, loop=loop)
    runner.finished.connect(app.quit)
    runner.start()

    exit_code = app.exec()
    logger.info("monitor shutdown", extra={"event": "shutdown", "exit_code": int(exit_code)})
    return int(exit_code)
