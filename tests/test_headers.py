from courier.networking.headers import Headers, flatten_headers


def test_from_raw_parses_header_block():
    headers = Headers.from_raw(
        "Content-Type: application/json\r\nSet-Cookie: a=1\r\nset-cookie: b=2\r\nbroken line\r\n"
    )

    assert headers["content-type"] == "application/json"
    assert headers["Set-Cookie"] == "a=1, b=2"
    assert len(headers) == 2


def test_from_raw_drops_none_and_normalizes_values():
    headers = Headers.from_raw({"X-Flag": True, "X-None": None, "X-List": ["a", "b"], "X-Num": 3})

    assert headers.to_dict() == {"X-Flag": "true", "X-List": "a, b", "X-Num": "3"}


def test_concat_later_sources_win():
    headers = Headers.concat({"Accept": "text/plain", "X-A": "1"}, None, "accept: application/json")

    assert headers == {"Accept": "application/json", "X-A": "1"}


def test_set_content_type_without_rewrite_keeps_existing():
    headers = Headers({"content-type": "application/json"})

    headers.set_content_type("text/plain", rewrite=False)
    assert headers.content_type == "application/json"

    headers.set_content_type("text/plain")
    assert headers.content_type == "text/plain"


def test_copy_is_independent():
    headers = Headers({"X-A": "1"})
    clone = headers.copy()
    clone["X-A"] = "2"

    assert isinstance(clone, Headers)
    assert headers["X-A"] == "1"


def test_flatten_merges_common_and_method_buckets():
    headers = flatten_headers(
        {
            "common": {"Accept": "*/*", "X-A": "1"},
            "post": {"X-A": "post"},
            "get": {"X-G": "g"},
            "X-Flat": "f",
        },
        "post",
    )

    assert headers == {"Accept": "*/*", "X-A": "post", "X-Flat": "f"}


def test_flatten_accepts_missing_headers():
    assert flatten_headers(None, "get") == {}
