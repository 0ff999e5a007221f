"""Device tab models: ordering, presentation state and the NPU tab."""

from .npu import (
    TAB_ID_PREFIX,
    DerivedMetrics,
    DeviceIdentity,
    NpuPage,
    StaticLabels,
    build_identity,
    derive_metrics,
)
from .ordering import NPU_PRIMARY_ORD, DeviceKind, PageOrder, sort_pages
from .series import GraphSeries
from .state import PresentationState, PresentationView

__all__ = [
    "DerivedMetrics",
    "DeviceIdentity",
    "DeviceKind",
    "GraphSeries",
    "NPU_PRIMARY_ORD",
    "NpuPage",
    "PageOrder",
    "PresentationState",
    "PresentationView",
    "StaticLabels",
    "TAB_ID_PREFIX",
    "build_identity",
    "derive_metrics",
    "sort_pages",
]
