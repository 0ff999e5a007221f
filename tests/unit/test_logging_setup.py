import json
import logging
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))
sys.path.insert(0, str(ROOT / "packages" / "pages"))

from npuview_core.logging_setup import JsonFormatter, event_logger, get_logger
from npuview_pages.npu import NpuPage
from npuview_telemetry.models import NpuDevice, NpuSnapshot


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class EventLoggerTests(unittest.TestCase):
    def setUp(self):
        self.handler = _ListHandler()
        self.logger = get_logger("pages.npu")
        self.old_level = self.logger.level
        self.logger.setLevel(logging.DEBUG)
        self.logger.addHandler(self.handler)

    def tearDown(self):
        self.logger.removeHandler(self.handler)
        self.logger.setLevel(self.old_level)

    def test_page_records_carry_tab_id_and_event(self):
        page = NpuPage()
        page.init(NpuDevice(pci_slot="0000:c1:00.1", name="Ryzen AI NPU"), secondary_ord=0)
        page.refresh_page(NpuSnapshot(pci_slot="0000:c1:00.1", usage_fraction=0.25))
        page.teardown()

        events = [(r.event, r.tab_id) for r in self.handler.records]
        self.assertEqual(
            events,
            [
                ("tab_setup", "npu-0000:c1:00.1"),
                ("tab_refreshed", "npu-0000:c1:00.1"),
                ("tab_teardown", "npu-0000:c1:00.1"),
            ],
        )
        self.assertEqual(self.handler.records[1].getMessage(), "25 %")

    def test_bind_keeps_context_and_call_extra_wins(self):
        log = event_logger("pages.npu", tab_id="npu-a").bind(secondary_ord=2)
        log.info("hello", event="custom", extra={"tab_id": "npu-b"})
        record = self.handler.records[-1]
        self.assertEqual(record.event, "custom")
        self.assertEqual(record.tab_id, "npu-b")
        self.assertEqual(record.secondary_ord, 2)

    def test_json_formatter_includes_context_fields(self):
        event_logger("pages.npu", tab_id="npu-a").warning("slow", event="slow_tick")
        payload = json.loads(JsonFormatter().format(self.handler.records[-1]))
        self.assertEqual(payload["event"], "slow_tick")
        self.assertEqual(payload["tab_id"], "npu-a")
        self.assertEqual(payload["logger"], "npuview.pages.npu")
        self.assertEqual(payload["msg"], "slow")


if __name__ == "__main__":
    unittest.main()
