"""CLI entrypoints for the NPU monitor, recording replay and diagnostics."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from npuview_core import DiagnosticsExporter, build_doctor_payload, load_config
from npuview_core.logging_setup import configure_logging, get_logger
from npuview_telemetry import SnapshotReplay

from .monitor import TabMonitor


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str, ensure_ascii=False))


def cmd_run(args: argparse.Namespace) -> int:
    from .app import run_monitor

    return run_monitor(Path(args.recording), loop=args.loop)


def cmd_replay(args: argparse.Namespace) -> int:
    cfg = load_config()
    recording = SnapshotReplay().parse(Path(args.recording))
    monitor = TabMonitor(cfg)
    monitor.discover(recording.devices, recording.secondary_ords())
    for snapshots in recording.ticks:
        monitor.tick(snapshots)

    _print_json(
        {
            "success": not recording.errors,
            "ticks": len(recording.ticks),
            "errors": recording.errors,
            "tabs": monitor.tab_payloads(),
        }
    )
    return 0 if not recording.errors or args.no_strict else 2


def cmd_list_devices(args: argparse.Namespace) -> int:
    recording = SnapshotReplay().parse(Path(args.recording))
    ords = recording.secondary_ords()
    _print_json([{**asdict(d), "secondary_ord": ords[d.pci_slot]} for d in recording.devices])
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    devices = []
    tab_states = []
    recording_errors = []
    if args.recording:
        recording = SnapshotReplay().parse(Path(args.recording))
        devices = recording.devices
        recording_errors = recording.errors
        monitor = TabMonitor(cfg)
        monitor.discover(recording.devices, recording.secondary_ords())
        if recording.ticks:
            monitor.tick(recording.ticks[-1])
        tab_states = monitor.tab_payloads()

    payload = build_doctor_payload(cfg, devices, recording_errors)
    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, tab_states=tab_states, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)
        get_logger().info("diagnostics exported", extra={"event": "diagnostics_exported"})

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="npuview", description="NPU tab presentation monitor and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run the timer-driven monitor over a recording")
    run_cmd.add_argument("--recording", required=True, help="Path to JSONL telemetry recording")
    run_cmd.add_argument("--loop", action="store_true", help="Restart the recording when it ends")
    run_cmd.set_defaults(func=cmd_run)

    replay_cmd = sub.add_parser("replay", help="Derive every tick of a recording and print tab states")
    replay_cmd.add_argument("--recording", required=True, help="Path to JSONL telemetry recording")
    replay_cmd.add_argument("--no-strict", action="store_true", help="Exit 0 even when lines were rejected")
    replay_cmd.set_defaults(func=cmd_replay)

    list_cmd = sub.add_parser("list-devices", help="List devices declared in a recording")
    list_cmd.add_argument("--recording", required=True, help="Path to JSONL telemetry recording")
    list_cmd.set_defaults(func=cmd_list_devices)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.add_argument("--recording", default=None, help="Optional recording to include tab states from")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
