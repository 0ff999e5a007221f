"""Observable presentation record read by the rendering layer."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .npu import DerivedMetrics, DeviceIdentity


@dataclass(frozen=True)
class PresentationView:
    tab_name: str
    tab_detail: str = ""
    tab_id: str = ""
    usage: float = 0.0
    tab_usage_string: str = ""


Observer = Callable[["PresentationState", frozenset], None]


def _changed(old: PresentationView, new: PresentationView) -> frozenset:
    return frozenset(f.name for f in fields(PresentationView) if getattr(old, f.name) != getattr(new, f.name))


class PresentationState:
    """Cached tab fields plus change observers.

    Fields live in one immutable ``PresentationView`` that is swapped as a
    whole, so ``view()`` always returns a consistent record.
    """

    def __init__(self, tab_name: str) -> None:
        self._view = PresentationView(tab_name=tab_name)
        self._derived: DerivedMetrics | None = None
        self._observers: list[Observer] = []

    @property
    def tab_name(self) -> str:
        return self._view.tab_name

    @property
    def tab_detail(self) -> str:
        return self._view.tab_detail

    @property
    def tab_id(self) -> str:
        return self._view.tab_id

    @property
    def usage(self) -> float:
        return self._view.usage

    @property
    def tab_usage_string(self) -> str:
        return self._view.tab_usage_string

    @property
    def derived(self) -> DerivedMetrics | None:
        return self._derived

    def view(self) -> PresentationView:
        return self._view

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def clear_observers(self) -> None:
        self._observers.clear()

    def set_identity(self, identity: DeviceIdentity) -> bool:
        """Store tab id and detail once. Returns False when already set."""
        if self._view.tab_id:
            return False
        self._swap(replace(self._view, tab_id=identity.tab_id, tab_detail=identity.tab_detail))
        return True

    def set_tab_name(self, tab_name: str) -> None:
        self._swap(replace(self._view, tab_name=tab_name))

    def apply(self, derived: DerivedMetrics) -> None:
        new_view = replace(
            self._view,
            usage=derived.usage_fraction_clamped,
            tab_usage_string=derived.composite_summary,
        )
        # Detail rows read from ``derived``; report them as "subtitles".
        extra = frozenset({"subtitles"}) if derived != self._derived else frozenset()
        self._derived = derived
        self._swap(new_view, extra)

    def _swap(self, new_view: PresentationView, extra: frozenset = frozenset()) -> None:
        changed = _changed(self._view, new_view) | extra
        self._view = new_view
        if not changed:
            return
        for observer in list(self._observers):
            observer(self, changed)
