"""Core module - Configuration."""

from flowstack.core.config import get_settings, Settings, ProviderConfig

__all__ = [
    "get_settings",
    "Settings",
    "ProviderConfig",
]
