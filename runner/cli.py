from __future__ import annotations

import argparse
import os
import tempfile
from pathlib import Path

from file_agent.config import DEFAULT_PORT, DEFAULT_TOKEN


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="File agent smoke runner")
    parser.add_argument(
        "--base-url", default=os.getenv("BASE_URL", f"http://127.0.0.1:{DEFAULT_PORT}")
    )
    parser.add_argument("--token", default=os.getenv("AGENT_TOKEN", DEFAULT_TOKEN))
    parser.add_argument(
        "--root",
        default=str(Path(tempfile.gettempdir()) / "file-agent-smoke"),
        help="scratch directory on the agent's machine; removed at the end",
    )
    parser.add_argument("--timeout", type=float, default=20.0)
    return parser.parse_args(argv)
