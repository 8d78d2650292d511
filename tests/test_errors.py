"""Tests for error decoding, the error hierarchy and wire models."""

import base64
import json
from datetime import datetime, timezone

import httpx
import pytest

from common.digest import encode_digest, parse_digest, sha256_digest
from common.models import ErrorBody, FileInfo, ManifestPage
from fileheap import (
    AlreadyUploaded,
    APIError,
    Cancelled,
    FileHeapError,
    FileNotFound,
    IteratorDone,
    ResponseDecodeError,
    TransportError,
)
from fileheap.responses import error_from_response, parse_response, raise_for_file


def _response(status_code, **kwargs):
    return httpx.Response(status_code, request=httpx.Request("GET", "http://fileheap.test/"), **kwargs)


class TestErrorFromResponse:
    """Tests for decoding error responses."""

    @pytest.mark.parametrize("status_code", [200, 201, 204, 206, 304])
    def test_success_passes(self, status_code):
        assert error_from_response(_response(status_code)) is None

    def test_envelope_becomes_api_error(self):
        response = _response(403, json={"code": 403, "message": "package is read-only", "detail": "pkg"})

        with pytest.raises(APIError) as exc_info:
            error_from_response(response)

        error = exc_info.value
        assert error.code == 403
        assert error.message == "package is read-only"
        assert error.detail == "pkg"
        assert str(error) == "package is read-only"

    def test_empty_body_uses_reason_phrase(self):
        with pytest.raises(APIError) as exc_info:
            error_from_response(_response(503))

        assert exc_info.value.code == 503
        assert exc_info.value.message == "service unavailable"
        assert exc_info.value.detail is None

    @pytest.mark.parametrize("body", [b"<html>bad gateway</html>", b'{"unexpected": true}'])
    def test_unparsable_body(self, body):
        with pytest.raises(ResponseDecodeError) as exc_info:
            error_from_response(_response(502, content=body))
        assert exc_info.value.status_code == 502

    def test_raise_for_file_maps_404(self):
        with pytest.raises(FileNotFound) as exc_info:
            raise_for_file(_response(404, json={"code": 404, "message": "file a not found"}))
        assert not isinstance(exc_info.value, APIError)

    def test_raise_for_file_decodes_other_errors(self):
        with pytest.raises(APIError):
            raise_for_file(_response(400, json={"code": 400, "message": "bad request"}))

    def test_parse_response_rejects_mismatched_body(self):
        with pytest.raises(ResponseDecodeError):
            parse_response(_response(200, json={"files": "nope"}), ManifestPage)


class TestHierarchy:
    """Tests for the exception hierarchy and sentinels."""

    def test_api_error_format(self):
        error = APIError(code=500, message="internal server error", detail="Traceback ...")

        assert error.format() == "internal server error"
        assert error.format(verbose=True) == "internal server error\nTraceback ..."
        assert APIError(code=500, message="boom").format(verbose=True) == "boom"

    def test_sentinels_are_file_heap_errors(self):
        for error in (FileNotFound(), AlreadyUploaded(), IteratorDone(), TransportError("x"), Cancelled("x")):
            assert isinstance(error, FileHeapError)

    def test_cancelled_is_transport_error(self):
        assert issubclass(Cancelled, TransportError)

    def test_iterator_done_is_stop_iteration(self):
        assert isinstance(IteratorDone(), StopIteration)

    def test_sentinel_messages(self):
        assert str(FileNotFound()) == "file not found"
        assert str(AlreadyUploaded()) == "file is already uploaded"
        assert str(IteratorDone()) == "no more items in iterator"


class TestModels:
    """Tests for the wire models."""

    def test_file_info_digest_is_base64_on_the_wire(self):
        digest = sha256_digest(b"hello")
        info = FileInfo(path="a", size=5, digest=digest, updated=datetime(2024, 1, 1, tzinfo=timezone.utc))

        dumped = json.loads(info.model_dump_json())
        assert dumped["digest"] == base64.b64encode(digest).decode()
        assert FileInfo.model_validate(dumped).digest == digest

    def test_manifest_page_null_fields(self):
        page = ManifestPage.model_validate({"files": None, "cursor": None})
        assert page.files == []
        assert page.cursor == ""

    def test_error_body_detail_optional(self):
        body = ErrorBody(code=404, message="not found")
        assert body.model_dump(exclude_none=True) == {"code": 404, "message": "not found"}


class TestDigest:
    """Tests for Digest header encoding."""

    def test_encode_and_parse(self):
        digest = sha256_digest(b"content")
        value = encode_digest(digest)

        assert value.startswith("SHA256 ")
        assert parse_digest(value) == ("SHA256", digest)

    def test_parse_normalizes_algorithm_case(self):
        digest = sha256_digest(b"content")
        value = "sha256 " + base64.b64encode(digest).decode()
        assert parse_digest(value) == ("SHA256", digest)

    def test_parse_rejects_invalid_base64(self):
        with pytest.raises(ValueError):
            parse_digest("SHA256 not*base64")
