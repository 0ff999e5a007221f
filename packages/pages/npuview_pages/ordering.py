"""Tab ordering across device kinds and same-kind instances."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, NamedTuple, Protocol, TypeVar


class DeviceKind(IntEnum):
    APPLICATIONS = 0
    PROCESSES = 1
    CPU = 2
    MEMORY = 3
    GPU = 4
    NPU = 5
    DRIVE = 6
    NETWORK = 7
    BATTERY = 8


NPU_PRIMARY_ORD = int(DeviceKind.NPU)


class PageOrder(NamedTuple):
    primary_ord: int
    secondary_ord: int


class Orderable(Protocol):
    @property
    def primary_ord(self) -> int: ...

    @property
    def secondary_ord(self) -> int: ...


T = TypeVar("T", bound=Orderable)


def order_key(page: Orderable) -> PageOrder:
    return PageOrder(page.primary_ord, page.secondary_ord)


def sort_pages(pages: Iterable[T]) -> list[T]:
    """Sort tabs ascending by ``(primary_ord, secondary_ord)``.

    The sort is stable, so duplicate secondary ranks keep insertion order.
    """
    return sorted(pages, key=order_key)
