"""Display settings shown on the login surface and their merge rules."""

from pydantic import BaseModel
from typing import Iterable, Optional, Tuple


class DisplaySettings(BaseModel):
    """Display strings for the login surface. Defaults are valid standalone."""

    site_name: str = "JailbreakLab"
    site_description: str = "AI Security Testing Suite"
    footer_text: str = "AI Pentesting Suite v2.0 • For authorized research only"
    login_subtitle: str = "Access your testing suite"


def default_display_settings() -> DisplaySettings:
    """Build a fresh default record for one surface activation."""
    return DisplaySettings()


def merge_display_settings(
    base: DisplaySettings, rows: Iterable[Tuple[str, Optional[str]]]
) -> DisplaySettings:
    """
    Overlay remote key/value rows on top of ``base``.

    Only keys that are fields of DisplaySettings are taken; unknown keys and
    null values are ignored. ``base`` is left untouched and a new record is
    returned, so merging the same rows twice gives the same result.
    """
    known = DisplaySettings.model_fields
    updates = {
        key: value for key, value in rows if key in known and value is not None
    }
    return base.model_copy(update=updates)
