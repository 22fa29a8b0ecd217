"""Password hashing for admin accounts.

PBKDF2-HMAC-SHA256 with a random 16-byte salt per password. Hashes are
stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>`` so the
iteration count can be raised later without invalidating existing hashes.
Plaintext passwords are never persisted.
"""

import hashlib
import hmac
import os

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 100_000


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Hash ``password`` with a fresh salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{ALGORITHM}${iterations}${salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored hash in constant time.

    Malformed hashes never verify.
    """
    try:
        algorithm, iterations, salt_hex, hash_hex = hashed_password.split("$")
        if algorithm != ALGORITHM:
            return False
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(dk, stored_hash)
