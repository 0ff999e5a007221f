"""NPU tab: identity, per-tick metric derivation and presentation state."""

from __future__ import annotations

from dataclasses import dataclass

from npuview_core.i18n import i18n, i18n_f
from npuview_core.logging_setup import event_logger
from npuview_core.numeric import finite_or_default, round_half_away
from npuview_core.units import DEFAULT_UNITS, UnitFormatter
from npuview_telemetry.models import NpuDevice, NpuSnapshot

from .ordering import NPU_PRIMARY_ORD, DeviceKind, PageOrder
from .series import GraphSeries
from .state import PresentationState


TAB_ID_PREFIX = "npu"
ICON_NAME = "npu-symbolic"
MAIN_GRAPH_COLOR = "#B527E3"
MEMORY_GRAPH_COLOR = "#9E0CCC"
SUMMARY_DELIMITER = " · "

logger = event_logger("pages.npu")


def not_available() -> str:
    return i18n("N/A")


@dataclass(frozen=True)
class DeviceIdentity:
    tab_id: str
    tab_detail: str = ""


def build_identity(bus_slot: str, model_name: str | None = None) -> DeviceIdentity:
    """Tab id from the bus slot; detail is the model name or empty."""
    return DeviceIdentity(tab_id=f"{TAB_ID_PREFIX}-{bus_slot}", tab_detail=model_name or "")


@dataclass(frozen=True)
class StaticLabels:
    manufacturer: str
    pci_slot: str
    driver: str


def build_static_labels(device: NpuDevice) -> StaticLabels:
    na = not_available()
    return StaticLabels(
        manufacturer=device.vendor or na,
        pci_slot=device.pci_slot or na,
        driver=device.driver or na,
    )


@dataclass(frozen=True)
class DerivedMetrics:
    usage_fraction_clamped: float
    usage_visible: bool
    memory_fraction: float | None
    memory_visible: bool
    usage_text: str
    memory_percentage_text: str
    memory_text: str
    temperature_text: str
    power_text: str
    core_clock_text: str
    memory_clock_text: str
    power_limit_max_text: str
    composite_summary: str


def format_percentage(fraction: float | None) -> str:
    if fraction is None:
        return not_available()
    return f"{round_half_away(fraction * 100.0)} %"


def memory_fraction(total: int | None, used: int | None) -> float | None:
    if total is None or used is None or total <= 0:
        return None
    return finite_or_default(used / total)


def derive_metrics(snapshot: NpuSnapshot, units: UnitFormatter = DEFAULT_UNITS) -> DerivedMetrics:
    """Reduce one snapshot to display-ready values. Pure and idempotent."""
    na = not_available()

    usage = snapshot.usage_fraction
    usage_text = format_percentage(usage)

    mem_fraction = memory_fraction(snapshot.memory_total, snapshot.memory_used)
    mem_percentage = format_percentage(mem_fraction)
    if mem_fraction is not None:
        memory_text = (
            f"{units.storage(snapshot.memory_used)} / {units.storage(snapshot.memory_total)}"
            f"{SUMMARY_DELIMITER}{mem_percentage}"
        )
    else:
        memory_text = na

    temperature_text = None if snapshot.temperature is None else units.temperature(snapshot.temperature)

    power_text = na if snapshot.power_draw is None else units.power(snapshot.power_draw)
    if snapshot.power_limit is not None:
        power_text += f" / {units.power(snapshot.power_limit)}"

    segments = [usage_text]
    if mem_fraction is not None:
        # Translators: shown in the sidebar, keep it as short as 'Memory'
        segments.append(i18n_f("Memory: {}", mem_percentage))
    if temperature_text is not None:
        segments.append(temperature_text)

    return DerivedMetrics(
        usage_fraction_clamped=0.0 if usage is None else usage,
        usage_visible=usage is not None,
        memory_fraction=mem_fraction,
        memory_visible=mem_fraction is not None,
        usage_text=usage_text,
        memory_percentage_text=mem_percentage,
        memory_text=memory_text,
        temperature_text=na if temperature_text is None else temperature_text,
        power_text=power_text,
        core_clock_text=na if snapshot.core_clock is None else units.frequency(snapshot.core_clock),
        memory_clock_text=na if snapshot.memory_clock is None else units.frequency(snapshot.memory_clock),
        power_limit_max_text=na if snapshot.power_limit_max is None else units.power(snapshot.power_limit_max),
        composite_summary=SUMMARY_DELIMITER.join(segments),
    )


class NpuPage:
    """One NPU tab. ``init`` once at discovery, then ``refresh_page`` per tick."""

    kind = DeviceKind.NPU
    primary_ord = NPU_PRIMARY_ORD
    icon_name = ICON_NAME
    uses_progress_bar = True
    graph_locked_max_y = True

    def __init__(self, units: UnitFormatter = DEFAULT_UNITS, history_points: int = 60) -> None:
        self.units = units
        self.secondary_ord = 0
        self.identity: DeviceIdentity | None = None
        self.log = logger
        na = not_available()
        self.labels = StaticLabels(manufacturer=na, pci_slot=na, driver=na)
        self.state = PresentationState(tab_name=i18n("NPU"))
        self.usage_graph = GraphSeries(i18n("Total Usage"), MAIN_GRAPH_COLOR, history_points, self.graph_locked_max_y)
        self.memory_graph = GraphSeries(i18n("Memory Usage"), MEMORY_GRAPH_COLOR, history_points, self.graph_locked_max_y)

    @property
    def tab_id(self) -> str:
        return self.state.tab_id

    @property
    def order(self) -> PageOrder:
        return PageOrder(self.primary_ord, self.secondary_ord)

    def init(self, device: NpuDevice, secondary_ord: int) -> None:
        self.secondary_ord = secondary_ord
        self.setup(device)

    def setup(self, device: NpuDevice) -> None:
        if self.identity is not None:
            # Identity is fixed for the session; first-seen values win.
            self.log.warning("ignoring repeated setup", event="setup_ignored")
            return

        self.identity = build_identity(device.pci_slot, device.name)
        self.labels = build_static_labels(device)
        self.state.set_identity(self.identity)
        self.log = logger.bind(tab_id=self.identity.tab_id)
        self.log.info(f"npu tab ready: {self.identity.tab_detail or device.pci_slot}", event="tab_setup")

    def refresh_page(self, snapshot: NpuSnapshot) -> DerivedMetrics:
        derived = derive_metrics(snapshot, self.units)

        self.usage_graph.push(derived.usage_fraction_clamped)
        self.usage_graph.visible = derived.usage_visible
        self.memory_graph.push(derived.memory_fraction or 0.0)
        self.memory_graph.visible = derived.memory_visible

        self.state.apply(derived)
        self.log.debug(derived.composite_summary, event="tab_refreshed")
        return derived

    def subtitles(self) -> dict[str, str]:
        """Display strings for every detail row of the tab."""
        derived = self.state.derived
        na = not_available()
        return {
            "usage": derived.usage_text if derived else na,
            "memory": derived.memory_text if derived else na,
            "temperature": derived.temperature_text if derived else na,
            "power": derived.power_text if derived else na,
            "core_clock": derived.core_clock_text if derived else na,
            "memory_clock": derived.memory_clock_text if derived else na,
            "max_power_limit": derived.power_limit_max_text if derived else na,
            "manufacturer": self.labels.manufacturer,
            "pci_slot": self.labels.pci_slot,
            "driver": self.labels.driver,
        }

    def teardown(self) -> None:
        self.state.clear_observers()
        self.usage_graph.clear()
        self.memory_graph.clear()
        self.log.info("npu tab removed", event="tab_teardown")
