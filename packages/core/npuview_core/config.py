"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .units import STORAGE_BASES, TEMPERATURE_UNITS


CONFIG_VERSION = 2


@dataclass
class RefreshConfig:
    poll_ms: int = 1000


@dataclass
class UnitsConfig:
    temperature: str = "celsius"
    base: str = "decimal"


@dataclass
class GraphsConfig:
    history_points: int = 60


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    max_bundle_mb: int = 20


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 5.0
    rss_mb_max: float = 250.0


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    units: UnitsConfig = field(default_factory=UnitsConfig)
    graphs: GraphsConfig = field(default_factory=GraphsConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "NPUView"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "NPUView"
    return Path.home() / ".config" / "npuview"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_refresh(cfg: AppConfig) -> None:
    cfg.refresh.poll_ms = max(250, min(5000, int(cfg.refresh.poll_ms)))


def _normalize_units(cfg: AppConfig) -> None:
    if cfg.units.temperature not in TEMPERATURE_UNITS:
        cfg.units.temperature = "celsius"
    if cfg.units.base not in STORAGE_BASES:
        cfg.units.base = "decimal"


def _normalize_graphs(cfg: AppConfig) -> None:
    cfg.graphs.history_points = max(10, min(600, int(cfg.graphs.history_points)))


def _normalize_performance(cfg: AppConfig) -> None:
    cfg.performance.cpu_percent_max = float(max(1.0, cfg.performance.cpu_percent_max))
    cfg.performance.rss_mb_max = float(max(64.0, cfg.performance.rss_mb_max))


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v2 renames stream -> refresh and adds units/graphs sections.
        stream = dict(data.pop("stream", {}) or {})
        refresh = dict(data.get("refresh", {}) or {})
        if "poll_ms" in stream:
            refresh.setdefault("poll_ms", stream["poll_ms"])
        data["refresh"] = refresh
        data.setdefault("units", {})
        data.setdefault("graphs", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        refresh=_merge(RefreshConfig, data.get("refresh", {})),
        units=_merge(UnitsConfig, data.get("units", {})),
        graphs=_merge(GraphsConfig, data.get("graphs", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
        performance=_merge(PerformanceConfig, data.get("performance", {})),
    )

    _normalize_refresh(cfg)
    _normalize_units(cfg)
    _normalize_graphs(cfg)
    _normalize_performance(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
