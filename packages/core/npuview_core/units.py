"""Human-readable formatting for bytes, frequencies, power and temperatures."""

from __future__ import annotations

from dataclasses import dataclass

from .numeric import round_half_away


TEMPERATURE_UNITS = ("celsius", "fahrenheit", "kelvin")
STORAGE_BASES = ("decimal", "binary")

_DECIMAL_PREFIXES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")
_BINARY_PREFIXES = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")
_FREQUENCY_PREFIXES = ("Hz", "kHz", "MHz", "GHz", "THz")


def _scale(value: float, step: float, prefixes: tuple[str, ...]) -> tuple[float, str]:
    idx = 0
    while abs(value) >= step and idx < len(prefixes) - 1:
        value /= step
        idx += 1
    return value, prefixes[idx]


@dataclass(frozen=True)
class UnitFormatter:
    temperature_unit: str = "celsius"
    base: str = "decimal"

    @classmethod
    def from_config(cls, cfg) -> "UnitFormatter":
        return cls(temperature_unit=cfg.units.temperature, base=cfg.units.base)

    def storage(self, num_bytes: float) -> str:
        step = 1024.0 if self.base == "binary" else 1000.0
        prefixes = _BINARY_PREFIXES if self.base == "binary" else _DECIMAL_PREFIXES
        value, prefix = _scale(float(num_bytes), step, prefixes)
        if prefix == "B":
            return f"{int(value)} B"
        return f"{value:.1f} {prefix}"

    def frequency(self, hertz: float) -> str:
        value, prefix = _scale(float(hertz), 1000.0, _FREQUENCY_PREFIXES)
        if prefix == "Hz":
            return f"{value:.0f} Hz"
        return f"{value:.2f} {prefix}"

    def power(self, watts: float) -> str:
        watts = float(watts)
        if watts != 0 and abs(watts) < 1.0:
            return f"{watts * 1000.0:.0f} mW"
        if abs(watts) >= 1000.0:
            return f"{watts / 1000.0:.2f} kW"
        return f"{watts:.1f} W"

    def temperature(self, celsius: float) -> str:
        if self.temperature_unit == "fahrenheit":
            return f"{round_half_away(celsius * 9.0 / 5.0 + 32.0)} °F"
        if self.temperature_unit == "kelvin":
            return f"{round_half_away(celsius + 273.15)} K"
        return f"{round_half_away(celsius)} °C"


DEFAULT_UNITS = UnitFormatter()
