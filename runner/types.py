from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any


@dataclass
class StepResult:
    """Outcome of one smoke step against the agent."""

    name: str
    ok: bool
    elapsed_ms: float
    error: str | None = None


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class EnvelopeError(SmokeError):
    """Raised when the agent answers `success: false` to a step that must succeed."""

    def __init__(self, endpoint: str, error: str | None):
        super().__init__(f"{endpoint}: {error}")
        self.endpoint = endpoint
        self.error = error


class CheckError(SmokeError):
    """Raised when a step succeeded but returned the wrong data."""


def now_ms() -> float:
    """Monotonic clock in milliseconds, for step timings."""
    return time.perf_counter() * 1000.0


def unwrap(endpoint: str, body: dict[str, Any]) -> Any:
    """Return `data` from an envelope body or raise EnvelopeError."""
    if not body.get("success"):
        raise EnvelopeError(endpoint, body.get("error"))
    return body.get("data")
