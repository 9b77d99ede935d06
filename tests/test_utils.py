import pytest
from site_harvest.utils import blob_key, normalize_url, remove_duplicates, url_host


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://Ex.COM/Path", "https://ex.com/Path"),
        ("HTTP://ex.com", "http://ex.com/"),
        ("https://ex.com/a?b=2&a=1#frag", "https://ex.com/a?b=2&a=1"),
        ("https://user:Pw@EX.com:8080/x", "https://user:Pw@ex.com:8080/x"),
        ("  https://ex.com/a/  ", "https://ex.com/a/"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize("raw", ["", "ex.com/a", "/a", "ftp://ex.com", "https://", "http://ex.com:99999/"])
def test_normalize_url_rejects(raw):
    assert normalize_url(raw) is None


def test_url_host():
    assert url_host("https://Ex.com/a") == "ex.com"
    assert url_host("http://127.0.0.1:8080/a") == "127.0.0.1:8080"
    assert url_host("https://user@ex.com/") == "ex.com"
    assert url_host("nonsense") is None


def test_blob_key_is_url_safe_and_stable():
    url = "https://ex.com/a b?x=1&y=2"
    key = blob_key(url)
    assert key == "pages/https%3A%2F%2Fex.com%2Fa%20b%3Fx%3D1%26y%3D2"
    assert key == blob_key(url)
    assert "/" not in key[len("pages/"):]


def test_remove_duplicates_keeps_order():
    assert remove_duplicates(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
