"""HTTP services for slotvote."""

from .server import create_app, get_client_ip, run_local_server

__all__ = [
    "create_app",
    "get_client_ip",
    "run_local_server",
]
