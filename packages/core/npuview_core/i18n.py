"""Localized text lookup."""

from __future__ import annotations

import gettext
import os
from pathlib import Path


DOMAIN = "npuview"


def _locale_dir() -> Path:
    override = os.environ.get("NPUVIEW_LOCALEDIR")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent / "locale"


_translation = gettext.translation(DOMAIN, localedir=str(_locale_dir()), fallback=True)


def i18n(msgid: str) -> str:
    return _translation.gettext(msgid)


def i18n_f(msgid: str, *args: object) -> str:
    """Translate ``msgid`` then fill its ``{}`` placeholders in order."""
    return i18n(msgid).format(*args)
