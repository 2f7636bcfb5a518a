"""Run the API on its own worker thread, apart from whatever owns the main thread."""
from __future__ import annotations

import errno
import os
import socket
import sys
import threading
from typing import Optional

import uvicorn

from .config import Config
from .logging_conf import get_logger
from .main import create_app

__all__ = ["HOST", "AgentServer", "check_port_available", "port_help_commands"]

HOST = "127.0.0.1"

logger = get_logger("server")


def port_help_commands(port: int) -> list[str]:
    """OS commands a user can run to find and stop whatever holds `port`."""
    if sys.platform.startswith("win"):
        return [f"netstat -ano | findstr :{port}", "taskkill /PID <PID> /F"]
    return [f"lsof -i :{port}", "kill <PID>"]


def check_port_available(host: str, port: int) -> Optional[OSError]:
    """Try binding `host:port`; return the bind error, or None if it is free."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        if os.name != "nt":
            # Same as uvicorn, so a port in TIME_WAIT doesn't count as busy.
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError as e:
        return e
    finally:
        sock.close()
    return None


class AgentServer:
    """Owns the uvicorn server and the thread it runs on.

    start() returns False when the port cannot be bound; the caller keeps
    running without an API. shutdown() is the hook a supervisor uses before
    restarting the process with new settings.
    """

    def __init__(self, config: Config, host: str = HOST):
        self.config = config
        self.host = host
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        err = check_port_available(self.host, self.config.port)
        if err is not None:
            in_use = err.errno in (errno.EADDRINUSE, getattr(errno, "WSAEADDRINUSE", -1))
            logger.error(
                "server.bind_failed",
                extra={
                    "event": "server_bind_failed",
                    "port": self.config.port,
                    "error": str(err),
                    "port_in_use": in_use,
                    "hint": "change the port in the settings file or stop the process using it",
                    "commands": port_help_commands(self.config.port),
                },
            )
            return False

        app = create_app(self.config)
        uv_config = uvicorn.Config(
            app,
            host=self.host,
            port=self.config.port,
            log_config=None,  # keep our JSON handlers
        )
        self._server = uvicorn.Server(uv_config)
        self._thread = threading.Thread(target=self._server.run, name="file-agent-api")
        self._thread.start()
        logger.info(
            "server.started",
            extra={
                "event": "server_started",
                "url": f"http://localhost:{self.config.port}",
            },
        )
        return True

    def shutdown(self, timeout: float = 5.0) -> None:
        """Ask uvicorn to exit and wait for the worker thread."""
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        logger.info(
            "server.stopped",
            extra={"event": "server_stopped", "clean": not self._thread.is_alive()},
        )
        self._server = None
        self._thread = None
