"""Files the smoke run pushes through the agent, relative to its scratch root."""
from __future__ import annotations

import base64

# 1x1 transparent PNG, so at least one fixture is real binary.
_PNG_1x1 = base64.b64decode(
    b"iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAwMCAO6wZSYAAAAASUVORK5CYII="
)

FILES: list[tuple[str, bytes]] = [
    ("docs/Report.txt", b"quarterly report\n"),
    ("docs/report_old.csv", b"id,value\n1,alpha\n"),
    ("docs/notes.md", "# notes\n\n- café ✓\n".encode("utf-8")),
    ("img/image.png", _PNG_1x1),
    ("data/config.json", b"{\n  \"ok\": true\n}\n"),
    ("data/blob.bin", bytes(range(256))),
]

# Names containing "report", case-insensitively.
SEARCH_PATTERN = "REPORT"
EXPECTED_MATCHES = {"Report.txt", "report_old.csv"}
