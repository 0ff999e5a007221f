import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from npuview_telemetry.models import NpuSnapshot
from npuview_telemetry.replay import SnapshotReplay


class ReplayTests(unittest.TestCase):
    def test_recording_devices_and_ticks(self):
        recording = SnapshotReplay().parse(ROOT / "tests" / "recordings" / "two_npus.jsonl")

        self.assertEqual(recording.errors, [])
        self.assertEqual([d.pci_slot for d in recording.devices], ["0000:c1:00.1", "0000:00:0b.0"])
        self.assertEqual(recording.secondary_ords(), {"0000:c1:00.1": 0, "0000:00:0b.0": 1})
        self.assertIsNone(recording.devices[1].name)
        self.assertEqual(len(recording.ticks), 2)

        second = recording.ticks[1]["0000:c1:00.1"]
        self.assertEqual(second.memory_used, 4_000_000_000)
        self.assertEqual(second.power_limit, 15.0)
        self.assertIsNone(recording.ticks[0]["0000:00:0b.0"].usage_fraction)

    def test_malformed_lines_are_reported(self):
        recording = SnapshotReplay().parse(ROOT / "tests" / "recordings" / "malformed.jsonl")

        self.assertEqual(len(recording.errors), 9)
        self.assertTrue(recording.errors[0].startswith("line 2:"))
        lines = [error.split(":")[0] for error in recording.errors]
        self.assertEqual(lines[-4:], ["line 7", "line 8", "line 9", "line 10"])
        self.assertEqual(len(recording.devices), 1)
        self.assertEqual(len(recording.ticks), 1)
        self.assertEqual(recording.ticks[0]["0000:c1:00.1"].usage_fraction, 0.5)


class SnapshotModelTests(unittest.TestCase):
    def test_from_mapping_requires_slot(self):
        with self.assertRaises(ValueError):
            NpuSnapshot.from_mapping({"usage_fraction": 0.1})

    def test_from_mapping_rejects_non_string_slot(self):
        with self.assertRaises(ValueError):
            NpuSnapshot.from_mapping({"pci_slot": ["0000:c1:00.1"]})

    def test_fractional_byte_count_is_rejected(self):
        with self.assertRaises(ValueError):
            NpuSnapshot.from_mapping({"pci_slot": "a", "memory_total": 8, "memory_used": 4.7})
        snap = NpuSnapshot.from_mapping({"pci_slot": "a", "memory_total": 8.0, "memory_used": 4})
        self.assertEqual(snap.memory_total, 8)

    def test_infinite_byte_count_is_rejected(self):
        with self.assertRaises(ValueError):
            NpuSnapshot.from_mapping({"pci_slot": "a", "memory_total": float("inf"), "memory_used": 1})

    def test_non_finite_readings_are_dropped(self):
        snap = NpuSnapshot(pci_slot="a", temperature=float("inf"), power_draw=float("nan"), usage_fraction=0.2)
        self.assertIsNone(snap.temperature)
        self.assertIsNone(snap.power_draw)
        self.assertEqual(snap.usage_fraction, 0.2)
        self.assertEqual(snap.device_key, "a")


if __name__ == "__main__":
    unittest.main()
