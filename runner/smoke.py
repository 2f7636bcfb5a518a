#!/usr/bin/env python3
"""End-to-end smoke run against a live agent.

Steps:
- wait for /api/health
- create a scratch tree and push the fixtures through write_binary
- read them back (binary and text), list, search
- copy the tree, move a file, check the auth guard
- delete the scratch tree and emit a compact summary + exit code
"""
from __future__ import annotations

import asyncio
import base64
import sys
from collections.abc import Awaitable, Callable

import httpx

from file_agent.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import AgentClient, wait_for_health
from runner.fixtures import EXPECTED_MATCHES, FILES, SEARCH_PATTERN
from runner.types import CheckError, StepResult, SmokeError, now_ms
from runner.utils import join, summarize

setup_logging()
logger = get_logger("runner")


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise CheckError(message)


async def _step(steps: list[StepResult], name: str, fn: Callable[[], Awaitable[None]]) -> None:
    start = now_ms()
    try:
        await fn()
    except (SmokeError, httpx.HTTPError) as e:
        steps.append(StepResult(name, False, now_ms() - start, str(e)))
        logger.warning("step.failed", extra={"event": "step_failed", "step": name, "error": str(e)})
        return
    steps.append(StepResult(name, True, now_ms() - start))


async def run_smoke(*, base_url: str, token: str, root: str, timeout_s: float = 20.0) -> int:
    await wait_for_health(base_url, timeout_s)
    steps: list[StepResult] = []
    src = join(root, "src")

    async with AgentClient(base_url, token) as agent:

        async def upload() -> None:
            for rel, data in FILES:
                path = join(src, rel)
                await agent.create(path)  # creates parent directories
                await agent.write_binary(path, base64.b64encode(data).decode("ascii"))

        async def read_back() -> None:
            for rel, data in FILES:
                got = base64.b64decode(await agent.read_binary(join(src, rel)))
                _check(got == data, f"binary mismatch for {rel}")

        async def text_round_trip() -> None:
            path = join(src, "docs", "unicode.txt")
            content = "línea 1\r\nline 2 ✓\n"
            await agent.write(path, content)
            _check(await agent.read(path) == content, "text mismatch")

        async def listing() -> None:
            names = {item["name"] for item in await agent.list(join(src, "docs"))}
            _check({"Report.txt", "report_old.csv", "notes.md"} <= names, f"list returned {names}")

        async def search() -> None:
            found = {item["name"] for item in await agent.search(src, SEARCH_PATTERN)}
            _check(found == EXPECTED_MATCHES, f"search returned {found}")

        async def copy_tree() -> None:
            dst = join(root, "copy")
            await agent.copy(src, dst)
            for rel, data in FILES:
                got = base64.b64decode(await agent.read_binary(join(dst, rel)))
                _check(got == data, f"copied {rel} differs")

        async def move_file() -> None:
            source = join(root, "copy", "data", "blob.bin")
            destination = join(root, "moved", "deep", "blob.bin")
            await agent.move(source, destination)
            body = await agent.call("read_binary", path=source)
            _check(body["success"] is False, "source still readable after move")
            await agent.read_binary(destination)

        async def auth_guard() -> None:
            async with AgentClient(base_url, token + "-wrong") as intruder:
                body = await intruder.call("read", path=join(src, "docs", "notes.md"))
            _check(body["success"] is False, "wrong token was accepted")

        async def cleanup() -> None:
            await agent.delete(root)
            body = await agent.call("delete", path=root)
            _check(body["error"] == "Path does not exist", f"unexpected delete error {body['error']}")

        for name, fn in [
            ("upload", upload),
            ("read_back", read_back),
            ("text_round_trip", text_round_trip),
            ("list", listing),
            ("search", search),
            ("copy_tree", copy_tree),
            ("move_file", move_file),
            ("auth_guard", auth_guard),
            ("cleanup", cleanup),
        ]:
            await _step(steps, name, fn)

    summary, exit_code = summarize(steps)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            token=args.token,
            root=args.root,
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
