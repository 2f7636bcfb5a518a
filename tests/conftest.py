"""Shared fixtures: a configured app client and small directory trees."""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from file_agent.config import Config
from file_agent.main import create_app

TOKEN = "test-token-123"


@pytest.fixture
def token():
    return TOKEN


@pytest.fixture
def client():
    """TestClient for an app whose secret is TOKEN."""
    with TestClient(create_app(Config(token=TOKEN, port=8767))) as c:
        yield c


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A small tree:

    root/
      a.txt        "alpha"
      sub/
        b.bin      bytes 0..9
        deeper/
          c.txt    "gamma"
    """
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha", encoding="utf-8")
    (root / "sub" / "b.bin").write_bytes(bytes(range(10)))
    (root / "sub" / "deeper" / "c.txt").write_text("gamma", encoding="utf-8")
    return root
