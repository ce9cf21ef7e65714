from __future__ import annotations

from endpoints.auth import gravatar_url, hash_password, mask_token, verify_password


def test_password_hash_roundtrip():
    encoded = hash_password("hunter2")
    assert encoded.startswith("$2b$")
    assert verify_password("hunter2", encoded)
    assert not verify_password("hunter3", encoded)
    assert hash_password("hunter2") != encoded  # salted


def test_verify_password_malformed_hash():
    assert verify_password("x", "not-a-hash") is False


def test_gravatar_url_normalises_email():
    assert gravatar_url(" Alice@Example.com ") == gravatar_url("alice@example.com")
    assert gravatar_url("alice@example.com") == (
        "https://www.gravatar.com/avatar/c160f8cc69a4f0bf2b0362752353d060"
    )


def test_mask_token():
    assert mask_token("") == ""
    assert mask_token("short") == "short"
    assert mask_token("a" * 16 + "b" * 20 + "c" * 8) == "a" * 16 + "..." + "c" * 8
