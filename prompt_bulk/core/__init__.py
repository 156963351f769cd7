"""Core configuration and factory components."""

from prompt_bulk.core.config import Settings, get_settings
from prompt_bulk.core.factory import ComponentFactory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
]
