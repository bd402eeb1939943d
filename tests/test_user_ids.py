import pytest

from bookworm.services.user_ids import normalize_user_id

VALID = "3f2b8c1e-9d4a-4b6f-8e2a-1c5d7e9f0a1b"


def test_accepts_canonical_uuid():
    assert normalize_user_id(VALID) == VALID


def test_strips_whitespace_and_lowercases():
    assert normalize_user_id(f"  {VALID.upper()} ") == VALID


@pytest.mark.parametrize(
    "raw_value",
    [
        None,
        "",
        "   ",
        "not-an-id",
        "64b7f0c2e4b0a1a2b3c4d5e6",
        "{" + VALID + "}",
        "urn:uuid:" + VALID,
        VALID.replace("-", ""),
        VALID + "0",
    ],
)
def test_rejects_malformed_ids(raw_value):
    assert normalize_user_id(raw_value) == ""
