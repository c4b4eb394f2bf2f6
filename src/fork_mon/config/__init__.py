"""Monitor configuration."""

from .config import ApiSettings, MonitorConfig

__all__ = [
    "ApiSettings",
    "MonitorConfig",
]
