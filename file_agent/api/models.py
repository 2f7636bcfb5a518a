from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from ..domain.walker import FileInfo

__all__ = [
    "Envelope",
    "FileInfo",
    "PathRequest",
    "WriteRequest",
    "CreateRequest",
    "TransferRequest",
    "SearchRequest",
]

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform response body: `data` on success, `error` text on failure."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "Envelope[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "Envelope[T]":
        return cls(success=False, error=error)


class PathRequest(BaseModel):
    """Body for read, read_binary and delete."""
    path: str
    token: str


class WriteRequest(BaseModel):
    """Body for write (text) and write_binary (base64 text)."""
    path: str
    content: str
    token: str


class CreateRequest(BaseModel):
    path: str
    is_directory: bool
    token: str


class TransferRequest(BaseModel):
    """Body for move and copy."""
    source: str
    destination: str
    token: str


class SearchRequest(BaseModel):
    directory: str
    pattern: str
    token: str
