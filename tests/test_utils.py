import pytest

from utils import extract_error, mask_secret, parse_json_body, safe_str, truncate


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("", ""),
        ("short", "***MASKED***"),
        ("pat_abcdefghijkl", "pat_***MASKED***"),
    ],
)
def test_mask_secret(value, expected):
    assert mask_secret(value) == expected


def test_truncate():
    assert truncate("abc", limit=5) == "abc"
    assert truncate("abcdefgh", limit=5) == "abcde..."
    assert truncate(None) == ""


def test_parse_json_body():
    assert parse_json_body('{"a": 1}') == {"a": 1}
    assert parse_json_body("not json") is None
    assert parse_json_body("") is None


def test_extract_error_shapes():
    assert extract_error({"error": {"type": "INVALID_PERMISSIONS", "message": "Nope"}}) == ("Nope", "INVALID_PERMISSIONS")
    assert extract_error({"error": {"type": "INVALID_PERMISSIONS"}}) == ("INVALID_PERMISSIONS", "INVALID_PERMISSIONS")
    assert extract_error({"error": "NOT_FOUND"}) == ("NOT_FOUND", "NOT_FOUND")
    assert extract_error({"message": "plain"}) == ("plain", None)
    assert extract_error(None, fallback="  raw text ") == ("raw text", None)
    assert extract_error(None) == (None, None)


def test_safe_str_handles_bad_str():
    class Bad:
        def __str__(self):
            raise RuntimeError("no")

    assert safe_str(Bad()) == ""
    assert safe_str(5) == "5"
