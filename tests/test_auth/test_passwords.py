"""Tests for PBKDF2 password hashing."""

from bopp.auth.passwords import ALGORITHM, hash_password, verify_password


def test_hash_format_and_salt() -> None:
    first = hash_password("hunter2", iterations=1_000)
    second = hash_password("hunter2", iterations=1_000)

    algorithm, iterations, salt_hex, hash_hex = first.split("$")
    assert algorithm == ALGORITHM
    assert iterations == "1000"
    assert len(bytes.fromhex(salt_hex)) == 16
    assert len(bytes.fromhex(hash_hex)) == 32
    assert first != second


def test_verify_round_trip() -> None:
    hashed = hash_password("hunter2", iterations=1_000)

    assert verify_password("hunter2", hashed) is True
    assert verify_password("hunter3", hashed) is False


def test_malformed_hash_never_verifies() -> None:
    assert verify_password("x", "") is False
    assert verify_password("x", "plaintext") is False
    assert verify_password("x", "md5$1$00$00") is False
    assert verify_password("x", "pbkdf2_sha256$many$zz$00") is False
