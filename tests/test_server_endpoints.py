"""Tests for the development server API endpoints."""

import base64
import hashlib

import pytest

from common.constants import HEADER_REQUEST_ID
from server.exceptions import LengthMismatchError
from server.storage import decode_cursor, encode_cursor


def _digest_header(data: bytes) -> str:
    return "SHA256 " + base64.b64encode(hashlib.sha256(data).digest()).decode()


def _upload(api, package_id, path, data, digest=None):
    return api.put(
        f"/packages/{package_id}/files/{path}",
        content=data,
        headers={"Digest": digest or _digest_header(data)},
    )


@pytest.fixture
def package_id(server_api):
    response = server_api.post("/packages")
    assert response.status_code == 201
    return response.json()["id"]


def test_root_endpoint(server_api):
    """Test health check endpoint."""
    response = server_api.get('/')
    assert response.status_code == 200
    assert response.json()['status'] == 'running'


def test_request_id_is_echoed(server_api):
    response = server_api.get('/', headers={HEADER_REQUEST_ID: "req-123"})
    assert response.headers[HEADER_REQUEST_ID] == "req-123"


def test_create_and_get_package(server_api, package_id):
    response = server_api.get(f"/packages/{package_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == package_id
    assert data["readonly"] is False
    assert "created" in data


def test_missing_package_returns_envelope(server_api):
    response = server_api.get("/packages/nope")

    assert response.status_code == 404
    data = response.json()
    assert data["code"] == 404
    assert "nope" in data["message"]


def test_upload_and_download(server_api, package_id):
    data = b"hello, heap"
    response = _upload(server_api, package_id, "dir/hello.txt", data)

    assert response.status_code == 201
    assert response.json()["size"] == len(data)
    assert response.json()["path"] == "dir/hello.txt"

    response = server_api.get(f"/packages/{package_id}/files/dir/hello.txt")
    assert response.status_code == 200
    assert response.content == data
    assert response.headers["Digest"] == _digest_header(data)


def test_upload_requires_digest(server_api, package_id):
    response = server_api.put(f"/packages/{package_id}/files/a.txt", content=b"abc")

    assert response.status_code == 400
    assert "Digest" in response.json()["message"]


def test_upload_rejects_digest_mismatch(server_api, package_id):
    response = _upload(server_api, package_id, "a.txt", b"abc", digest=_digest_header(b"xyz"))

    assert response.status_code == 400
    assert response.json()["message"] == "content does not match digest"
    assert "detail" in response.json()


def test_upload_rejects_unsupported_algorithm(server_api, package_id):
    response = _upload(server_api, package_id, "a.txt", b"abc", digest="MD5 " + base64.b64encode(b"x").decode())
    assert response.status_code == 400


def test_identical_content_is_stored_once(server_api, store, package_id):
    data = b"shared content"

    assert _upload(server_api, package_id, "one.txt", data).status_code == 201
    assert _upload(server_api, package_id, "two.txt", data).status_code == 200
    assert store.blob_count == 1


def test_head_returns_metadata(server_api, package_id):
    data = b"metadata"
    _upload(server_api, package_id, "m.txt", data)

    response = server_api.head(f"/packages/{package_id}/files/m.txt")

    assert response.status_code == 200
    assert response.headers["Content-Length"] == str(len(data))
    assert response.headers["Digest"] == _digest_header(data)
    assert response.headers["Last-Modified"].endswith("GMT")


def test_missing_file_returns_404(server_api, package_id):
    assert server_api.get(f"/packages/{package_id}/files/none.txt").status_code == 404
    assert server_api.head(f"/packages/{package_id}/files/none.txt").status_code == 404
    assert server_api.delete(f"/packages/{package_id}/files/none.txt").status_code == 404


@pytest.mark.parametrize(
    "range_value,expected,content_range",
    [
        ("bytes=2-4", b"234", "bytes 2-4/10"),
        ("bytes=7-", b"789", "bytes 7-9/10"),
        ("bytes=8-100", b"89", "bytes 8-9/10"),
    ],
)
def test_range_download(server_api, package_id, range_value, expected, content_range):
    _upload(server_api, package_id, "digits.txt", b"0123456789")

    response = server_api.get(
        f"/packages/{package_id}/files/digits.txt", headers={"Range": range_value}
    )

    assert response.status_code == 206
    assert response.content == expected
    assert response.headers["Content-Range"] == content_range


@pytest.mark.parametrize("range_value", ["bytes=10-", "bytes=5-2", "items=0-1"])
def test_unsatisfiable_range(server_api, package_id, range_value):
    _upload(server_api, package_id, "digits.txt", b"0123456789")

    response = server_api.get(
        f"/packages/{package_id}/files/digits.txt", headers={"Range": range_value}
    )

    assert response.status_code == 416
    assert response.json()["code"] == 416


def test_manifest_pages_and_prefix(server_api, package_id):
    for path in ("b/2.txt", "a/1.txt", "b/1.txt"):
        _upload(server_api, package_id, path, path.encode())

    first = server_api.get(f"/packages/{package_id}/manifest").json()
    assert [f["path"] for f in first["files"]] == ["a/1.txt", "b/1.txt"]
    assert first["cursor"]

    second = server_api.get(
        f"/packages/{package_id}/manifest", params={"cursor": first["cursor"]}
    ).json()
    assert [f["path"] for f in second["files"]] == ["b/2.txt"]
    assert second["cursor"] == ""

    filtered = server_api.get(
        f"/packages/{package_id}/manifest", params={"path": "a/"}
    ).json()
    assert [f["path"] for f in filtered["files"]] == ["a/1.txt"]
    assert filtered["cursor"] == ""


def test_manifest_invalid_cursor(server_api, package_id):
    response = server_api.get(f"/packages/{package_id}/manifest", params={"cursor": "a"})
    assert response.status_code == 400


def test_sealed_package_rejects_writes(server_api, package_id):
    _upload(server_api, package_id, "keep.txt", b"keep")

    response = server_api.patch(f"/packages/{package_id}", json={"readonly": True})
    assert response.status_code == 200
    assert response.json()["readonly"] is True

    assert _upload(server_api, package_id, "new.txt", b"new").status_code == 403
    assert server_api.delete(f"/packages/{package_id}/files/keep.txt").status_code == 403
    assert server_api.get(f"/packages/{package_id}/files/keep.txt").content == b"keep"


def test_seal_is_not_reversible(server_api, package_id):
    server_api.patch(f"/packages/{package_id}", json={"readonly": True})
    response = server_api.patch(f"/packages/{package_id}", json={"readonly": False})

    assert response.json()["readonly"] is True


def test_invalid_patch_body(server_api, package_id):
    response = server_api.patch(f"/packages/{package_id}", json={"readonly": "sometimes"})

    assert response.status_code == 400
    assert response.json()["message"] == "invalid request"


def test_delete_file_and_package(server_api, store, package_id):
    _upload(server_api, package_id, "a.txt", b"a")
    _upload(server_api, package_id, "b.txt", b"b")

    assert server_api.delete(f"/packages/{package_id}/files/a.txt").status_code == 204
    assert store.blob_count == 1

    assert server_api.delete(f"/packages/{package_id}").status_code == 204
    assert store.blob_count == 0
    assert server_api.get(f"/packages/{package_id}").status_code == 404


def test_store_rejects_length_mismatch(store):
    package = store.create_package()
    data = b"abc"

    with pytest.raises(LengthMismatchError):
        store.put_file(package.id, "a.txt", data, hashlib.sha256(data).digest(), length=5)


def test_cursor_encoding():
    assert decode_cursor(encode_cursor("dir/ü.txt")) == "dir/ü.txt"
