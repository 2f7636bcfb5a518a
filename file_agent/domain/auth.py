from __future__ import annotations

import hashlib

from .errors import AuthError

__all__ = [
    "AUTH_ERROR_MESSAGE",
    "compute_digest",
    "verify",
    "require_token",
]

AUTH_ERROR_MESSAGE = "authentication error: invalid token"


def compute_digest(token: str) -> str:
    """Return the lowercase hex SHA-256 digest of `token`.

    Computed once at startup for the configured token; candidate tokens go
    through the same function so both sides are fixed-length hex strings.
    Lone surrogates (legal in JSON strings) are encoded rather than rejected,
    so any str has a digest.
    """
    return hashlib.sha256(token.encode("utf-8", "surrogatepass")).hexdigest()


def verify(candidate: str, secret_digest: str) -> bool:
    """Return True when `candidate` hashes to `secret_digest`.

    Plain string equality, not constant-time. hmac.compare_digest on the
    digest bytes would close the timing side channel.
    """
    return compute_digest(candidate) == secret_digest


def require_token(candidate: str, secret_digest: str) -> None:
    """Raise AuthError unless `candidate` matches the secret digest."""
    if not verify(candidate, secret_digest):
        raise AuthError(AUTH_ERROR_MESSAGE)
