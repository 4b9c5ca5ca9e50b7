"""
Core Encryption Module

Encrypts and decrypts whole files in memory with a password-derived
AES-256-CBC key.

File format: [IV:16][CIPHERTEXT:N], N a non-zero multiple of 16.
"""

from dataclasses import dataclass
from typing import Union, Optional

from . import cipher, container
from .key_derivation import (
    derive_key,
    wipe_memory,
    DEFAULT_SALT,
    DEFAULT_ITERATIONS,
    DEFAULT_HASH_ALGORITHM,
)
from .utils import read_file, write_file, format_iv


@dataclass
class TransformResult:
    """Output of one encryption or decryption."""
    data: bytes
    iv: bytes


def _derive_key_buffer(password: Union[str, bytes], iterations: int, hash_algorithm: str) -> bytearray:
    key = derive_key(
        password,
        DEFAULT_SALT,
        iterations=iterations,
        key_length=cipher.KEY_SIZE,
        hash_algorithm=hash_algorithm
    )
    return bytearray(key)


def encrypt_data(
    data: bytes,
    password: Union[str, bytes],
    iterations: int = DEFAULT_ITERATIONS,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
    iv: Optional[bytes] = None
) -> TransformResult:
    """
    Encrypt data into a container.

    Args:
        data: Plaintext
        password: Password for key derivation
        iterations: PBKDF2 iterations (default: 10000)
        hash_algorithm: Hash algorithm for PBKDF2 (default: sha1)
        iv: IV to use instead of a fresh random one

    Returns:
        TransformResult holding the container bytes and the IV used

    Raises:
        KeyDerivationError: If key derivation fails
        EncryptionError: If encryption fails
    """
    key = _derive_key_buffer(password, iterations, hash_algorithm)
    try:
        if iv is None:
            iv = cipher.generate_iv()
        ciphertext = cipher.encrypt(data, key, iv)
        return TransformResult(container.pack(iv, ciphertext), bytes(iv))
    finally:
        wipe_memory(key)


def decrypt_data(
    encrypted_data: bytes,
    password: Union[str, bytes],
    iterations: int = DEFAULT_ITERATIONS,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
) -> TransformResult:
    """
    Decrypt a container.

    The container is checked before any key is derived, so a truncated file
    is reported as malformed rather than as a wrong password.

    Args:
        encrypted_data: Container bytes
        password: Password for key derivation
        iterations: PBKDF2 iterations (default: 10000)
        hash_algorithm: Hash algorithm for PBKDF2 (default: sha1)

    Returns:
        TransformResult holding the plaintext and the extracted IV

    Raises:
        MalformedContainerError: If the data is not a valid container
        KeyDerivationError: If key derivation fails
        DecryptionError: If decryption fails (bad padding, usually a wrong password)
    """
    iv, ciphertext = container.unpack(encrypted_data)
    container.validate_ciphertext(ciphertext)

    key = _derive_key_buffer(password, iterations, hash_algorithm)
    try:
        return TransformResult(cipher.decrypt(ciphertext, key, iv), iv)
    finally:
        wipe_memory(key)


def encrypt_file(
    input_path: str,
    output_path: str,
    password: Union[str, bytes],
    iterations: int = DEFAULT_ITERATIONS,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
) -> TransformResult:
    """
    Encrypt a file.

    The output is only written once the whole file has been encrypted.

    Args:
        input_path: Path to input file
        output_path: Path to output encrypted file
        password: Password for key derivation
        iterations: PBKDF2 iterations (default: 10000)
        hash_algorithm: Hash algorithm for PBKDF2 (default: sha1)

    Returns:
        TransformResult; data is the written container

    Raises:
        FileIOError: If the input cannot be read or the output cannot be written
        KeyDerivationError: If key derivation fails
        EncryptionError: If encryption fails
    """
    plaintext = read_file(input_path)
    result = encrypt_data(plaintext, password, iterations, hash_algorithm)
    write_file(output_path, result.data)
    return result


def decrypt_file(
    input_path: str,
    output_path: str,
    password: Union[str, bytes],
    iterations: int = DEFAULT_ITERATIONS,
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
) -> TransformResult:
    """
    Decrypt a file.

    No output file is created if decryption fails.

    Args:
        input_path: Path to encrypted file
        output_path: Path to output decrypted file
        password: Password for key derivation
        iterations: PBKDF2 iterations (default: 10000)
        hash_algorithm: Hash algorithm for PBKDF2 (default: sha1)

    Returns:
        TransformResult; data is the written plaintext

    Raises:
        FileIOError: If the input cannot be read or the output cannot be written
        MalformedContainerError: If the input is not a valid container
        KeyDerivationError: If key derivation fails
        DecryptionError: If decryption fails
    """
    encrypted_data = read_file(input_path)
    result = decrypt_data(encrypted_data, password, iterations, hash_algorithm)
    write_file(output_path, result.data)
    return result


def get_encrypted_file_info(input_path: str) -> dict:
    """
    Get information about an encrypted file.

    Args:
        input_path: Path to encrypted file

    Returns:
        Dictionary with file information

    Raises:
        FileIOError: If the file cannot be read
        MalformedContainerError: If the file is shorter than the IV
    """
    data = read_file(input_path)
    iv, ciphertext = container.unpack(data)

    try:
        container.validate_ciphertext(ciphertext)
        well_formed = True
    except container.MalformedContainerError:
        well_formed = False

    return {
        'file_size': len(data),
        'iv': format_iv(iv),
        'header_size': container.IV_LENGTH,
        'encrypted_data_size': len(ciphertext),
        'blocks': len(ciphertext) // cipher.BLOCK_SIZE,
        'well_formed': well_formed,
        'algorithm': 'AES-256-CBC',
        'kdf': 'PBKDF2'
    }
