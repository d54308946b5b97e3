"""Tests for the SHA-256 content fingerprint."""

from sealvault.core.crypto.fingerprint import fingerprint, matches

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


def test_known_digest():
    assert fingerprint(b"hello") == HELLO_SHA256
    assert fingerprint(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_matches():
    assert matches(HELLO_SHA256, b"hello")
    assert matches(HELLO_SHA256.upper(), b"hello")
    assert not matches(HELLO_SHA256, b"hello!")


def test_matches_rejects_garbage():
    assert not matches("not a digest", b"hello")
    assert not matches("ünïcode", b"hello")
    assert not matches(None, b"hello")
