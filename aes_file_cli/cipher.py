"""
Cipher Module

AES-256-CBC encryption and decryption of in-memory byte strings.
Padding is PKCS#7, so the ciphertext is always at least one block longer
than the plaintext rounded down to the block size.
"""

from typing import Union

from Crypto.Cipher import AES
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad


class EncryptionError(Exception):
    """Raised when encryption operations fail."""
    pass


class DecryptionError(Exception):
    """Raised when decryption operations fail."""
    pass


BLOCK_SIZE = AES.block_size  # 16
KEY_SIZE = 32  # AES-256

BytesLike = Union[bytes, bytearray]


def generate_iv() -> bytes:
    """Return a fresh random IV from the system CSPRNG."""
    return get_random_bytes(BLOCK_SIZE)


def _check_parameters(key: BytesLike, iv: BytesLike, error_class: type) -> None:
    if len(key) != KEY_SIZE:
        raise error_class(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(iv) != BLOCK_SIZE:
        raise error_class(f"IV must be {BLOCK_SIZE} bytes, got {len(iv)}")


def encrypt(plaintext: bytes, key: BytesLike, iv: BytesLike) -> bytes:
    """
    Encrypt plaintext with AES-256-CBC and PKCS#7 padding.

    Args:
        plaintext: Data to encrypt (may be empty)
        key: 32-byte key
        iv: 16-byte initialization vector

    Returns:
        Ciphertext, a non-zero multiple of the block size

    Raises:
        EncryptionError: If the parameters are invalid or the cipher fails
    """
    _check_parameters(key, iv, EncryptionError)

    try:
        cipher = AES.new(key, AES.MODE_CBC, iv=iv)
        return cipher.encrypt(pad(plaintext, BLOCK_SIZE))
    except (TypeError, ValueError) as e:
        raise EncryptionError(f"Encryption failed: {e}") from e


def decrypt(ciphertext: bytes, key: BytesLike, iv: BytesLike) -> bytes:
    """
    Decrypt AES-256-CBC ciphertext and strip its padding.

    Args:
        ciphertext: Data produced by encrypt()
        key: 32-byte key
        iv: 16-byte initialization vector used at encryption time

    Returns:
        Plaintext bytes

    Raises:
        DecryptionError: If the padding is invalid (usually a wrong password),
            the ciphertext is not block aligned, or the parameters are invalid
    """
    _check_parameters(key, iv, DecryptionError)

    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise DecryptionError(
            f"Ciphertext length {len(ciphertext)} is not a positive multiple of {BLOCK_SIZE}"
        )

    try:
        cipher = AES.new(key, AES.MODE_CBC, iv=iv)
        padded = cipher.decrypt(ciphertext)
    except (TypeError, ValueError) as e:
        raise DecryptionError(f"Decryption failed: {e}") from e

    try:
        return unpad(padded, BLOCK_SIZE)
    except ValueError as e:
        raise DecryptionError("Bad padding: wrong password or corrupted data") from e
