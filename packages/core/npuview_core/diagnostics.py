"""Diagnostics export helpers for local support bundles."""

from __future__ import annotations

import json
import platform
import re
import tempfile
import zipfile
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .config import AppConfig, config_path
from .logging_setup import log_dir


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Path):
        return str(value)
    return value


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(str(k)):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def build_doctor_payload(
    cfg: AppConfig,
    devices: Iterable[Any] = (),
    recording_errors: Iterable[str] = (),
) -> dict[str, Any]:
    """Host, config and discovered NPUs, plus replay lines that were skipped."""
    devices = [_jsonable(d) for d in devices]
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "config": redact(asdict(cfg)),
        "npu_count": len(devices),
        "devices": devices,
        "recording_errors": list(recording_errors),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "NPUView") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        tab_states: list[dict[str, Any]] | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"npuview-diagnostics-{stamp}.zip"

        logs = sorted(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.redacted.json", json.dumps(redact(asdict(cfg)), indent=2, sort_keys=True))
            zf.writestr(
                "tab_states.json",
                json.dumps(redact(tab_states or []), indent=2, sort_keys=True, default=_jsonable),
            )

            for state in tab_states or []:
                name = str(state.get("tab_id") or "unknown").replace(":", "_")
                zf.writestr(f"tabs/{name}.json", json.dumps(redact(state), indent=2, sort_keys=True, default=_jsonable))

            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
