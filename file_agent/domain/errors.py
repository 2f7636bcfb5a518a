from __future__ import annotations

__all__ = [
    "AgentError",
    "AuthError",
    "NotFoundError",
    "DecodeError",
]


class AgentError(Exception):
    """Base class for errors raised by the file agent.

    The message is the exact text handed back to the caller in the envelope's
    `error` field, so subclasses should format it fully when raising.
    """


class AuthError(AgentError):
    """The presented token does not match the secret digest."""


class NotFoundError(AgentError):
    """An explicit existence check failed before delete/move/copy."""


class DecodeError(AgentError):
    """A binary payload could not be decoded."""
