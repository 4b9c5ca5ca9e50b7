"""
Key Derivation Module

Turns a password into a fixed-length AES key using PBKDF2.
The defaults (HMAC-SHA1, fixed 8-byte salt, 10000 iterations, 32-byte key)
must not change, or existing encrypted files become unreadable.
"""

from typing import Union

from Crypto.Protocol.KDF import PBKDF2
from Crypto.Hash import SHA1, SHA256, SHA512


class KeyDerivationError(Exception):
    """Raised when key derivation fails."""
    pass


# Shared by every invocation; changing it breaks existing files.
DEFAULT_SALT = b"12345678"
DEFAULT_ITERATIONS = 10_000
DEFAULT_KEY_LENGTH = 32
DEFAULT_HASH_ALGORITHM = "sha1"

HASH_MODULES = {
    "sha1": SHA1,
    "sha256": SHA256,
    "sha512": SHA512,
}


def derive_key(
    password: Union[str, bytes],
    salt: bytes = DEFAULT_SALT,
    iterations: int = DEFAULT_ITERATIONS,
    key_length: int = DEFAULT_KEY_LENGTH,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
) -> bytes:
    """
    Derive a cryptographic key from password using PBKDF2.

    Args:
        password: Password string or bytes
        salt: Salt bytes (default: the fixed program salt)
        iterations: Number of PBKDF2 iterations (default: 10000)
        key_length: Derived key length in bytes (default: 32)
        hash_algorithm: HMAC hash to use (sha1, sha256, sha512)

    Returns:
        Derived key bytes

    Raises:
        KeyDerivationError: If key derivation fails
    """
    if isinstance(password, str):
        password_bytes = password.encode('utf-8')
    elif isinstance(password, (bytes, bytearray)):
        password_bytes = bytes(password)
    else:
        raise KeyDerivationError(f"Password must be str or bytes, not {type(password).__name__}")

    hash_module = HASH_MODULES.get(str(hash_algorithm).lower())
    if hash_module is None:
        raise KeyDerivationError(f"Unsupported hash algorithm: {hash_algorithm}")

    if not isinstance(iterations, int) or iterations < 1:
        raise KeyDerivationError(f"Invalid iteration count: {iterations}")

    if not isinstance(key_length, int) or key_length < 1:
        raise KeyDerivationError(f"Invalid key length: {key_length}")

    try:
        return PBKDF2(
            password_bytes,
            salt,
            dkLen=key_length,
            count=iterations,
            hmac_hash_module=hash_module
        )
    except (TypeError, ValueError) as e:
        raise KeyDerivationError(f"Key derivation failed: {e}") from e


def wipe_memory(data: bytearray) -> None:
    """
    Securely wipe memory by overwriting with zeros.

    Args:
        data: Byte array to wipe
    """
    for i in range(len(data)):
        data[i] = 0
