from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from starlette.concurrency import run_in_threadpool

from ..domain.auth import require_token
from ..domain.errors import AgentError
from ..logging_conf import get_logger
from ..service import file_service
from .models import (
    CreateRequest,
    Envelope,
    FileInfo,
    PathRequest,
    SearchRequest,
    TransferRequest,
    WriteRequest,
)

router = APIRouter(prefix="/api")
logger = get_logger("api")

TextEnvelope = Envelope[str]
ListEnvelope = Envelope[list[FileInfo]]


def get_secret_digest(request: Request) -> str:
    """Digest computed once in create_app(); shared read-only by all requests."""
    return request.app.state.secret_digest


async def _dispatch(
    model: type[Envelope],
    token: str,
    secret_digest: str,
    op: Callable[..., Any],
    **kwargs: Any,
) -> Envelope:
    """Authenticate, run `op` off the event loop, and wrap the outcome.

    Every failure becomes `success: false` with the error text; nothing is
    raised to the transport.
    """
    try:
        require_token(token, secret_digest)
        data = await run_in_threadpool(op, **kwargs)
    except (AgentError, OSError, ValueError) as e:
        logger.info(
            "operation.failed",
            extra={"event": "operation_failed", "operation": op.__name__, "error": str(e)},
        )
        return model.fail(str(e))
    return model.ok(data)


@router.post("/read", response_model=TextEnvelope, summary="Read a UTF-8 text file")
async def read(req: PathRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(TextEnvelope, req.token, secret_digest, file_service.read_text, path=req.path)


@router.post(
    "/read_binary",
    response_model=TextEnvelope,
    summary="Read a file as base64",
)
async def read_binary(req: PathRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(TextEnvelope, req.token, secret_digest, file_service.read_binary, path=req.path)


@router.post("/write", response_model=TextEnvelope, summary="Write a text file")
async def write(req: WriteRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(
        TextEnvelope,
        req.token,
        secret_digest,
        file_service.write_text,
        path=req.path,
        content=req.content,
    )


@router.post(
    "/write_binary",
    response_model=TextEnvelope,
    summary="Write a file from base64 content",
)
async def write_binary(req: WriteRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(
        TextEnvelope,
        req.token,
        secret_digest,
        file_service.write_binary,
        path=req.path,
        content=req.content,
    )


@router.post("/delete", response_model=TextEnvelope, summary="Delete a file or directory tree")
async def delete(req: PathRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(TextEnvelope, req.token, secret_digest, file_service.delete, path=req.path)


@router.post("/search", response_model=ListEnvelope, summary="Bounded name search")
async def search(req: SearchRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(
        ListEnvelope,
        req.token,
        secret_digest,
        file_service.search,
        directory=req.directory,
        pattern=req.pattern,
    )


@router.get("/list", response_model=ListEnvelope, summary="List a directory's children")
async def list_directory(
    path: str = Query(".", description="Directory to list"),
    token: str = Query(""),
    secret_digest: str = Depends(get_secret_digest),
):
    return await _dispatch(ListEnvelope, token, secret_digest, file_service.list_directory, path=path)


@router.post("/create", response_model=TextEnvelope, summary="Create a file or directory")
async def create(req: CreateRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(
        TextEnvelope,
        req.token,
        secret_digest,
        file_service.create,
        path=req.path,
        is_directory=req.is_directory,
    )


@router.post("/move", response_model=TextEnvelope, summary="Move (rename) a path")
async def move(req: TransferRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(
        TextEnvelope,
        req.token,
        secret_digest,
        file_service.move,
        source=req.source,
        destination=req.destination,
    )


@router.post("/copy", response_model=TextEnvelope, summary="Copy a file or directory tree")
async def copy(req: TransferRequest, secret_digest: str = Depends(get_secret_digest)):
    return await _dispatch(
        TextEnvelope,
        req.token,
        secret_digest,
        file_service.copy,
        source=req.source,
        destination=req.destination,
    )
