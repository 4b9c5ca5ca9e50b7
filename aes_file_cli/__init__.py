"""
AES File CLI - Password-based File Encryption Tool

Encrypts or decrypts a single file with AES-256-CBC using a key derived from
a password with PBKDF2-HMAC-SHA1. Encrypted files are the 16-byte IV followed
by the padded ciphertext.

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .core import encrypt_file, decrypt_file, encrypt_data, decrypt_data, TransformResult
from .key_derivation import derive_key, KeyDerivationError
from .cipher import EncryptionError, DecryptionError
from .container import pack, unpack, MalformedContainerError
from .config import Config
from .utils import FileIOError

__all__ = [
    "encrypt_file",
    "decrypt_file",
    "encrypt_data",
    "decrypt_data",
    "TransformResult",
    "derive_key",
    "pack",
    "unpack",
    "Config",
    "KeyDerivationError",
    "EncryptionError",
    "DecryptionError",
    "MalformedContainerError",
    "FileIOError",
]
