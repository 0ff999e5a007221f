from __future__ import annotations

import runpy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for sub in ("apps/desktop", "packages/core", "packages/telemetry", "packages/pages"):
    sys.path.insert(0, str(ROOT / sub))

import npuview_app.__main__ as desktop_main


def test_main_passes_through_args(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(desktop_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = desktop_main.main(["replay", "--recording", "rec.jsonl"])
    assert rc == 0
    assert calls == [["replay", "--recording", "rec.jsonl"]]


def test_main_reads_sys_argv(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(desktop_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)
    monkeypatch.setattr(sys, "argv", ["npuview", "doctor"])

    assert desktop_main.main() == 0
    assert calls == [["doctor"]]


def test_main_module_runpath_without_package_context() -> None:
    main_path = ROOT / "apps" / "desktop" / "npuview_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert "main" in result
