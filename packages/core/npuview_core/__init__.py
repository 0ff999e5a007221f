"""Core services for settings, logging, diagnostics, units and localization."""

from .config import AppConfig, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .i18n import i18n, i18n_f
from .numeric import finite_or_default
from .performance import BudgetStatus, PerformanceController, PerformanceTargets
from .units import DEFAULT_UNITS, UnitFormatter

__all__ = [
    "AppConfig",
    "BudgetStatus",
    "DEFAULT_UNITS",
    "DiagnosticsExporter",
    "PerformanceController",
    "PerformanceTargets",
    "UnitFormatter",
    "build_doctor_payload",
    "finite_or_default",
    "i18n",
    "i18n_f",
    "load_config",
    "save_config",
]
