"""HTTP-level tests: every endpoint answers 200 with a {success, data, error} envelope."""
import base64
import os
import sys
from pathlib import Path

import pytest

from file_agent.domain.auth import AUTH_ERROR_MESSAGE, compute_digest
from file_agent.main import HEALTH_MESSAGE, create_app

from fastapi.testclient import TestClient


def post(client, endpoint, **body):
    r = client.post(f"/api/{endpoint}", json=body)
    assert r.status_code == 200
    return r.json()


class TestHealth:
    def test_health_needs_no_token(self, client):
        r = client.get("/api/health")
        assert r.status_code == 200
        assert r.json() == {"success": True, "data": HEALTH_MESSAGE, "error": None}

    def test_request_id_is_echoed(self, client):
        r = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
        assert r.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_minted(self, client):
        r = client.get("/api/health")
        assert r.headers["X-Request-ID"]

    def test_cors_allows_any_origin(self, client):
        r = client.get("/api/health", headers={"Origin": "http://example.com"})
        assert r.headers["access-control-allow-origin"] == "*"


class TestAuth:
    def test_wrong_token_is_rejected_without_side_effects(self, client, tmp_path: Path):
        target = tmp_path / "nope.txt"
        body = post(client, "write", path=str(target), content="x", token="wrong")
        assert body == {"success": False, "data": None, "error": AUTH_ERROR_MESSAGE}
        assert not target.exists()

    def test_wrong_token_on_delete_keeps_file(self, client, tree: Path):
        body = post(client, "delete", path=str(tree), token="wrong")
        assert body["error"] == AUTH_ERROR_MESSAGE
        assert tree.exists()

    def test_unencodable_token_is_rejected(self, client, tree: Path):
        r = client.post(
            "/api/read",
            content=b'{"path": "x", "token": "\\ud800"}',
            headers={"content-type": "application/json"},
        )
        assert r.status_code == 200
        assert r.json() == {"success": False, "data": None, "error": AUTH_ERROR_MESSAGE}

    def test_list_without_token(self, client, tree: Path):
        r = client.get("/api/list", params={"path": str(tree)})
        assert r.status_code == 200
        assert r.json()["error"] == AUTH_ERROR_MESSAGE

    def test_injected_digest(self, tmp_path: Path):
        app = create_app(secret_digest=compute_digest("from-a-vault"))
        with TestClient(app) as c:
            (tmp_path / "f.txt").write_text("hi")
            body = c.post("/api/read", json={"path": str(tmp_path / "f.txt"), "token": "from-a-vault"}).json()
        assert body["data"] == "hi"


class TestEnvelope:
    def test_malformed_body_still_returns_200_envelope(self, client):
        r = client.post("/api/read", json={"path": "/tmp/x"})
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is False
        assert body["data"] is None
        assert "token" in body["error"]

    def test_invalid_json_returns_envelope(self, client):
        r = client.post(
            "/api/write",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert r.status_code == 200
        assert r.json()["success"] is False

    def test_os_error_is_passed_through(self, client, token, tmp_path: Path):
        body = post(client, "read", path=str(tmp_path / "missing.txt"), token=token)
        assert body["success"] is False
        assert body["data"] is None
        assert "No such file or directory" in body["error"] or "cannot find" in body["error"]


class TestFileEndpoints:
    def test_write_then_read(self, client, token, tmp_path: Path):
        path = str(tmp_path / "note.txt")
        content = "line one\r\nline two ✓\n"
        assert post(client, "write", path=path, content=content, token=token) == {
            "success": True,
            "data": "File written successfully",
            "error": None,
        }
        assert post(client, "read", path=path, token=token)["data"] == content

    def test_binary_round_trip(self, client, token, tmp_path: Path):
        path = str(tmp_path / "blob.bin")
        encoded = base64.b64encode(bytes(range(256))).decode("ascii")
        body = post(client, "write_binary", path=path, content=encoded, token=token)
        assert body["data"] == "Binary file written successfully"
        assert post(client, "read_binary", path=path, token=token)["data"] == encoded

    def test_write_binary_decode_error(self, client, token, tmp_path: Path):
        path = tmp_path / "blob.bin"
        body = post(client, "write_binary", path=str(path), content="@@@", token=token)
        assert body["success"] is False
        assert body["error"].startswith("Base64 decode error: ")
        assert not path.exists()

    def test_delete_missing(self, client, token, tmp_path: Path):
        body = post(client, "delete", path=str(tmp_path / "ghost"), token=token)
        assert body == {"success": False, "data": None, "error": "Path does not exist"}

    def test_delete_tree(self, client, token, tree: Path):
        assert post(client, "delete", path=str(tree), token=token)["data"] == "Deleted successfully"
        assert not tree.exists()

    def test_create_directory_chain(self, client, token, tmp_path: Path):
        target = tmp_path / "p" / "q" / "r"
        body = post(client, "create", path=str(target), is_directory=True, token=token)
        assert body["data"] == "Directory created successfully"
        assert target.is_dir()

    def test_create_file(self, client, token, tmp_path: Path):
        target = tmp_path / "p" / "empty.txt"
        body = post(client, "create", path=str(target), is_directory=False, token=token)
        assert body["data"] == "File created successfully"
        assert target.read_bytes() == b""

    def test_move(self, client, token, tree: Path, tmp_path: Path):
        destination = tmp_path / "new" / "home" / "a.txt"
        body = post(client, "move", source=str(tree / "a.txt"), destination=str(destination), token=token)
        assert body["data"] == "File moved successfully"
        assert not (tree / "a.txt").exists()
        assert destination.read_text() == "alpha"

    def test_move_missing_source(self, client, token, tmp_path: Path):
        body = post(client, "move", source=str(tmp_path / "x"), destination=str(tmp_path / "y"), token=token)
        assert body["error"] == "Source file does not exist"

    def test_copy_tree(self, client, token, tree: Path, tmp_path: Path):
        destination = tmp_path / "copy"
        body = post(client, "copy", source=str(tree), destination=str(destination), token=token)
        assert body["data"] == "File copied successfully"
        assert (destination / "sub" / "deeper" / "c.txt").read_text() == "gamma"
        assert (destination / "sub" / "b.bin").read_bytes() == bytes(range(10))


class TestDirectoryEndpoints:
    def test_search(self, client, token, tmp_path: Path):
        for name in ["Report.txt", "report_old.csv", "image.png"]:
            (tmp_path / name).write_text("data")
        body = post(client, "search", directory=str(tmp_path), pattern="report", token=token)
        assert body["success"] is True
        assert sorted(item["name"] for item in body["data"]) == ["Report.txt", "report_old.csv"]
        item = body["data"][0]
        assert set(item) == {"path", "name", "is_file", "size"}
        assert item["is_file"] is True
        assert item["size"] == 4

    def test_search_missing_directory_is_empty_success(self, client, token, tmp_path: Path):
        body = post(client, "search", directory=str(tmp_path / "nope"), pattern="x", token=token)
        assert body == {"success": True, "data": [], "error": None}

    def test_list(self, client, token, tmp_path: Path):
        for name in ["1.txt", "2.txt", "3.txt"]:
            (tmp_path / name).write_text("x")
        (tmp_path / "dir").mkdir()
        r = client.get("/api/list", params={"path": str(tmp_path), "token": token})
        assert r.status_code == 200
        data = r.json()["data"]
        assert len(data) == 4
        assert [d["name"] for d in data if not d["is_file"]] == ["dir"]
        assert {d["path"] for d in data} == {os.path.join(str(tmp_path), n) for n in ["1.txt", "2.txt", "3.txt", "dir"]}

    def test_list_missing_directory_fails(self, client, token, tmp_path: Path):
        r = client.get("/api/list", params={"path": str(tmp_path / "nope"), "token": token})
        body = r.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]

    @pytest.mark.skipif(
        os.name == "nt" or sys.platform == "darwin",
        reason="filesystem only accepts Unicode names",
    )
    def test_non_utf8_file_name_still_returns_envelope(self, client, token, tmp_path: Path):
        with open(os.path.join(os.fsencode(str(tmp_path)), b"bad\xff.txt"), "wb") as fh:
            fh.write(b"x")

        r = client.get("/api/list", params={"path": str(tmp_path), "token": token})
        assert r.status_code == 200
        assert r.json()["success"] is True
        assert [d["name"] for d in r.json()["data"]] == ["bad�.txt"]

        r = client.post("/api/search", json={"directory": str(tmp_path), "pattern": "bad", "token": token})
        assert r.status_code == 200
        assert [d["name"] for d in r.json()["data"]] == ["bad�.txt"]
