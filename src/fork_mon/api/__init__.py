"""HTTP API serving the dashboard data and the browser UI."""

from .context import MONITOR_GETTER, get_monitor, json_response
from .routes import ROUTES
from .server import ApiServer, ApiServerConfig

__all__ = [
    "ApiServer",
    "ApiServerConfig",
    "MONITOR_GETTER",
    "ROUTES",
    "get_monitor",
    "json_response",
]
