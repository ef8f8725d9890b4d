"""Configurações centralizadas do dupwatch.

Uso típico:
    from dupwatch.config import get_settings
"""

from dupwatch.config.settings import (
    DEFAULT_REPLY_TEMPLATE,
    DEFAULT_TIMEZONE,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_REPLY_TEMPLATE",
    "DEFAULT_TIMEZONE",
]
