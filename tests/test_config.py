"""
Tests for configuration loading.
"""

import json
import pytest
from pathlib import Path

import yaml

from aes_file_cli.config import Config, ConfigError, load_config


class TestConfig:
    """Test configuration sources and precedence."""

    def test_defaults(self):
        config = Config()
        assert config.get('output.verbose') is False
        assert config.get('output.color_output') is True
        assert config.get('output.show_iv') is True
        assert config.get('missing.key', 'fallback') == 'fallback'
        assert config.config_file is None

    def test_toml_file(self, temp_directory):
        path = Path(temp_directory) / "config.toml"
        path.write_text('[output]\nshow_iv = false\n')

        config = Config(str(path))
        assert config.get('output.show_iv') is False
        assert config.get('output.color_output') is True

    def test_yaml_file(self, temp_directory):
        path = Path(temp_directory) / "config.yaml"
        path.write_text(yaml.safe_dump({'output': {'verbose': True}}))

        assert Config(str(path)).get('output.verbose') is True

    def test_json_file(self, temp_directory):
        path = Path(temp_directory) / "config.json"
        path.write_text(json.dumps({'output': {'color_output': False}}))

        assert Config(str(path)).get('output.color_output') is False

    def test_empty_yaml_file(self, temp_directory):
        path = Path(temp_directory) / "config.yml"
        path.write_text("")

        assert Config(str(path)).get('output.show_iv') is True

    def test_default_location(self):
        Path("aes-file-cli.toml").write_text('[output]\nverbose = true\n')

        config = Config()
        assert config.get('output.verbose') is True
        assert config.config_file.endswith('aes-file-cli.toml')

    def test_home_location_wins(self, tmp_path):
        home_dir = tmp_path / "home" / ".aes-file-cli"
        home_dir.mkdir()
        (home_dir / "config.toml").write_text('[output]\nshow_iv = false\n')
        Path("aes-file-cli.toml").write_text('[output]\nshow_iv = true\n')

        assert Config().get('output.show_iv') is False

    def test_environment_overrides_file(self, temp_directory, monkeypatch):
        path = Path(temp_directory) / "config.toml"
        path.write_text('[output]\nshow_iv = true\nverbose = false\n')
        monkeypatch.setenv('AES_FILE_CLI_SHOW_IV', 'no')
        monkeypatch.setenv('AES_FILE_CLI_VERBOSE', 'on')

        config = Config(str(path))
        assert config.get('output.show_iv') is False
        assert config.get('output.verbose') is True

    def test_environment_can_be_ignored(self, monkeypatch):
        monkeypatch.setenv('AES_FILE_CLI_SHOW_IV', '0')
        assert Config(use_environment=False).get('output.show_iv') is True

    def test_kdf_environment_variables_are_ignored(self, monkeypatch):
        monkeypatch.setenv('AES_FILE_CLI_ITERATIONS', '1000')
        monkeypatch.setenv('AES_FILE_CLI_HASH_ALGORITHM', 'sha256')

        config = Config()
        assert config.get('encryption.iterations') is None
        assert config.get('encryption.hash_algorithm') is None
        config.validate()

    def test_missing_and_unsupported_files(self, temp_directory):
        with pytest.raises(ConfigError):
            Config(str(Path(temp_directory) / "missing.toml"))

        path = Path(temp_directory) / "config.ini"
        path.write_text("[output]\n")
        with pytest.raises(ConfigError, match="Unsupported"):
            Config(str(path))

    def test_malformed_file(self, temp_directory):
        path = Path(temp_directory) / "config.toml"
        path.write_text("this is = = not toml")
        with pytest.raises(ConfigError):
            Config(str(path))

    def test_non_mapping_file(self, temp_directory):
        path = Path(temp_directory) / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            Config(str(path))

    def test_validate(self, temp_directory):
        Config().validate()

        path = Path(temp_directory) / "config.toml"
        path.write_text('[encryption]\niterations = 1000\n')
        with pytest.raises(ConfigError, match="Unknown configuration section: encryption"):
            Config(str(path)).validate()

        path.write_text('[output]\ncolour = true\n')
        with pytest.raises(ConfigError, match="Unknown configuration key: output.colour"):
            Config(str(path)).validate()

        path.write_text('[output]\nshow_iv = "yes"\n')
        with pytest.raises(ConfigError, match="output.show_iv must be true or false"):
            Config(str(path)).validate()

        path.write_text('output = 1\n')
        with pytest.raises(ConfigError, match="must be a mapping"):
            Config(str(path)).validate()

    def test_load_config_validates(self, temp_directory):
        path = Path(temp_directory) / "config.toml"
        path.write_text('[encryption]\nhash_algorithm = "sha512"\n')
        with pytest.raises(ConfigError):
            load_config(str(path))

        path.write_text('[output]\nverbose = true\n')
        assert load_config(str(path)).get('output.verbose') is True
