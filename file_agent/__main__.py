"""Process entry point: `python -m file_agent [--config PATH]`."""
from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .config import load_config
from .logging_conf import get_logger, setup_logging
from .server import AgentServer

setup_logging()
logger = get_logger("file_agent")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Local file agent (loopback HTTP API)")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="settings file (default: file_agent.ini beside the executable)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    config = load_config(args.config)
    logger.info(
        "agent.starting",
        extra={"event": "agent_starting", "port": config.port},
    )

    server = AgentServer(config)
    started = server.start()
    if not started:
        # No API, but the process stays up until interrupted.
        logger.warning("agent.no_api", extra={"event": "agent_no_api"})

    try:
        while True:
            if started and not server.running:
                break  # worker thread exited on its own
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info("agent.interrupted", extra={"event": "agent_interrupted"})
    finally:
        server.shutdown()


if __name__ == "__main__":
    main()
