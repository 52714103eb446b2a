"""
Entry point for the dashboard server.
"""

import uvicorn

from licdash.common.config import Config
from licdash.common.logging_config import setup_logging

from .core import DashboardServer


def start_server(config: Config | None = None) -> None:
    """Start the dashboard server."""
    if config is None:
        config = Config()
    setup_logging(config)
    server = DashboardServer(config=config)
    uvicorn.run(server.app, host=server.server_host, port=server.server_port)
