from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from file_agent.logging_conf import get_logger
from runner.types import SmokeError, unwrap

logger = get_logger("runner.client")


async def wait_for_health(base_url: str, timeout_s: float = 20.0) -> None:
    """Ping /api/health until it reports success or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/api/health")
                if r.status_code == 200 and r.json().get("success") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except httpx.HTTPError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


class AgentClient:
    """Thin async client for the file agent API.

    Each method returns the envelope's `data` and raises EnvelopeError when
    the agent reports `success: false`. `call` gives access to the raw body.
    """

    def __init__(self, base_url: str, token: str, *, timeout: float = 30.0):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "AgentClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, endpoint: str, **fields: Any) -> dict[str, Any]:
        """POST `fields` plus the token to /api/<endpoint>, return the raw envelope."""
        r = await self._client.post(f"/api/{endpoint}", json={**fields, "token": self.token})
        r.raise_for_status()
        return r.json()

    async def _post(self, endpoint: str, **fields: Any) -> Any:
        return unwrap(endpoint, await self.call(endpoint, **fields))

    async def read(self, path: str) -> str:
        return await self._post("read", path=path)

    async def read_binary(self, path: str) -> str:
        return await self._post("read_binary", path=path)

    async def write(self, path: str, content: str) -> str:
        return await self._post("write", path=path, content=content)

    async def write_binary(self, path: str, content: str) -> str:
        return await self._post("write_binary", path=path, content=content)

    async def delete(self, path: str) -> str:
        return await self._post("delete", path=path)

    async def create(self, path: str, *, is_directory: bool = False) -> str:
        return await self._post("create", path=path, is_directory=is_directory)

    async def move(self, source: str, destination: str) -> str:
        return await self._post("move", source=source, destination=destination)

    async def copy(self, source: str, destination: str) -> str:
        return await self._post("copy", source=source, destination=destination)

    async def search(self, directory: str, pattern: str) -> list[dict[str, Any]]:
        return await self._post("search", directory=directory, pattern=pattern)

    async def list(self, path: str) -> list[dict[str, Any]]:
        r = await self._client.get("/api/list", params={"path": path, "token": self.token})
        r.raise_for_status()
        return unwrap("list", r.json())
