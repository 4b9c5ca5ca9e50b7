"""
Test configuration and fixtures for pytest.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

from Crypto.Cipher import AES

from aes_file_cli.config import Config
from aes_file_cli.core import encrypt_data
from aes_file_cli.key_derivation import derive_key


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep user config files and AES_FILE_CLI_* variables out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for env_var in Config.ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def temp_directory():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def test_file(temp_directory):
    """Create a test file in temporary directory."""
    test_data = b"Hello World"
    file_path = Path(temp_directory) / "test_file.txt"

    with open(file_path, 'wb') as f:
        f.write(test_data)

    return file_path, test_data


@pytest.fixture
def sample_password():
    """Sample password for testing."""
    return "secret"


def _has_bad_padding(container: bytes, password: str) -> bool:
    key = derive_key(password)
    plaintext = AES.new(key, AES.MODE_CBC, iv=container[:16]).decrypt(container[16:])
    pad_len = plaintext[-1]
    return not (1 <= pad_len <= 16 and plaintext[-pad_len:] == bytes([pad_len]) * pad_len)


@pytest.fixture
def wrong_password_container():
    """
    Build a container that is guaranteed to fail padding under the wrong password.

    A wrong key yields valid-looking padding for roughly 1 in 256 IVs; those
    IVs are skipped so assertions on DecryptionError are deterministic.
    """
    def build(plaintext: bytes, password: str, wrong_password: str) -> bytes:
        for _ in range(100):
            container = encrypt_data(plaintext, password).data
            if _has_bad_padding(container, wrong_password):
                return container
        raise AssertionError("could not build a container with bad padding")

    return build
