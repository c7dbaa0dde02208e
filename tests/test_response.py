"""Tests for perch.http.response — Response chaining."""

import pytest

from perch.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type is None
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response().with_status(201).status == 201

    def test_with_header(self) -> None:
        r = Response().with_header("X-Custom", "value")
        assert r.headers == (("X-Custom", "value"),)

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_header("B", "2")
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/csv").content_type == "text/csv"

    def test_transformations_return_new_objects(self) -> None:
        original = Response("x")
        changed = original.with_status(404)
        assert original.status == 200
        assert changed is not original

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]

    def test_header_lookup_case_insensitive(self) -> None:
        r = Response(headers=(("Accept", "GET"),))
        assert r.header("accept") == "GET"
        assert r.header("Missing") is None

    @pytest.mark.parametrize(("status", "ok"), [(200, True), (204, True), (404, False)])
    def test_ok(self, status: int, ok: bool) -> None:
        assert Response(status=status).ok is ok

    def test_body_bytes_and_text(self) -> None:
        assert Response("Jörg").body_bytes == "Jörg".encode()
        assert Response(b"raw").text == "raw"
        assert Response(b"raw").body_bytes == b"raw"
