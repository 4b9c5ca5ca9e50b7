"""
Container Module

On-disk layout of an encrypted file: [IV:16][CIPHERTEXT:N].
There is no magic number or version field.
"""

from typing import Tuple

from .cipher import BLOCK_SIZE


class MalformedContainerError(Exception):
    """Raised when data is not a valid encrypted container."""
    pass


IV_LENGTH = BLOCK_SIZE


def pack(iv: bytes, ciphertext: bytes) -> bytes:
    """Prefix ciphertext with its IV."""
    if len(iv) != IV_LENGTH:
        raise MalformedContainerError(f"IV must be {IV_LENGTH} bytes, got {len(iv)}")
    return bytes(iv) + bytes(ciphertext)


def unpack(data: bytes) -> Tuple[bytes, bytes]:
    """
    Split a container into IV and ciphertext.

    Args:
        data: Container bytes

    Returns:
        Tuple of (iv, ciphertext); ciphertext may be any length

    Raises:
        MalformedContainerError: If data is too short to hold an IV
    """
    if len(data) < IV_LENGTH:
        raise MalformedContainerError(
            f"Not a valid encrypted file: {len(data)} bytes is shorter than the {IV_LENGTH}-byte IV"
        )

    return bytes(data[:IV_LENGTH]), bytes(data[IV_LENGTH:])


def validate_ciphertext(ciphertext: bytes) -> None:
    """
    Check that a container body can be decrypted at all.

    Raises:
        MalformedContainerError: If the body is empty or not block aligned
    """
    if not ciphertext:
        raise MalformedContainerError("Not a valid encrypted file: no ciphertext after the IV")

    if len(ciphertext) % BLOCK_SIZE:
        raise MalformedContainerError(
            f"Not a valid encrypted file: ciphertext length {len(ciphertext)} "
            f"is not a multiple of {BLOCK_SIZE}"
        )
