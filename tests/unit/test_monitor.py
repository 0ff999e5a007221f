import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))
sys.path.insert(0, str(ROOT / "packages" / "pages"))

from npuview_app.monitor import TabMonitor
from npuview_core.config import AppConfig
from npuview_telemetry import NpuDevice, NpuSnapshot, SnapshotReplay


class TabMonitorTests(unittest.TestCase):
    def _monitor(self):
        recording = SnapshotReplay().parse(ROOT / "tests" / "recordings" / "two_npus.jsonl")
        monitor = TabMonitor(AppConfig())
        monitor.discover(recording.devices, recording.secondary_ords())
        return monitor, recording

    def test_replay_final_state(self):
        monitor, recording = self._monitor()
        for snapshots in recording.ticks:
            self.assertEqual(monitor.tick(snapshots), 2)

        tabs = monitor.tab_payloads()
        self.assertEqual([t["tab_id"] for t in tabs], ["npu-0000:c1:00.1", "npu-0000:00:0b.0"])
        amd, intel = tabs
        self.assertEqual(amd["tab_usage_string"], "43 % · Memory: 50 % · 53 °C")
        self.assertEqual(amd["subtitles"]["power"], "4.5 W / 15.0 W")
        self.assertEqual(amd["tab_detail"], "Ryzen AI NPU")
        self.assertEqual(intel["tab_detail"], "")
        self.assertEqual(intel["tab_usage_string"], "10 %")
        self.assertEqual(intel["subtitles"]["core_clock"], "1.40 GHz")
        self.assertEqual(intel["secondary_ord"], 1)

    def test_discover_is_idempotent(self):
        monitor, recording = self._monitor()
        added = monitor.discover(recording.devices, recording.secondary_ords())
        self.assertEqual(added, [])
        self.assertEqual(len(monitor), 2)

    def test_unknown_snapshot_is_skipped(self):
        monitor, _ = self._monitor()
        self.assertEqual(monitor.tick({"0000:ff:00.0": NpuSnapshot(pci_slot="0000:ff:00.0")}), 0)

    def test_remove_keeps_gaps(self):
        monitor = TabMonitor()
        monitor.discover([NpuDevice(pci_slot="a"), NpuDevice(pci_slot="b"), NpuDevice(pci_slot="c")])
        self.assertTrue(monitor.remove("b"))
        self.assertFalse(monitor.remove("b"))
        self.assertEqual([p.secondary_ord for p in monitor.pages()], [0, 2])


if __name__ == "__main__":
    unittest.main()
