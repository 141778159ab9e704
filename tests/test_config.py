"""Tests for registry configuration."""

import pytest

from uia_locators.config import RegistryConfig, ValidationConfig
from uia_locators.core.errors import ConfigError
from uia_locators.core.names import LengthValidator
from uia_locators.storage.formats import DocumentFormat


def test_missing_file_yields_defaults(tmp_path):
    config = RegistryConfig.load(tmp_path / "uia-locators.yaml")
    assert config.extension == "xml"
    assert config.default_format is DocumentFormat.XML
    assert config.validation.enabled is False


def test_load_resolves_relative_root(tmp_path):
    path = tmp_path / "uia-locators.yaml"
    path.write_text(
        "storage_root: pages\n"
        "default_format: json\n"
        "validation:\n"
        "  enabled: true\n"
        "  max_length: 64\n",
        encoding="utf-8",
    )
    config = RegistryConfig.load(path)
    assert config.storage_root == str(tmp_path / "pages")
    assert config.default_format is DocumentFormat.JSON
    assert config.validation.max_length == 64


def test_load_keeps_absolute_root(tmp_path):
    path = tmp_path / "cfg.yaml"
    absolute = tmp_path / "elsewhere"
    path.write_text(f"storage_root: '{absolute}'\n", encoding="utf-8")
    assert RegistryConfig.load(path).storage_root == str(absolute)


def test_empty_file_yields_defaults(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("", encoding="utf-8")
    assert RegistryConfig.load(path) == RegistryConfig()


@pytest.mark.parametrize(
    "content",
    [
        "storage_root: [unclosed\n",
        "- just\n- a list\n",
        "default_format: yaml\n",
        "validation:\n  max_length: 0\n",
    ],
)
def test_invalid_config_raises(tmp_path, content):
    path = tmp_path / "cfg.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        RegistryConfig.load(path)


def test_save_and_load(tmp_path):
    path = tmp_path / "cfg.yaml"
    config = RegistryConfig(
        storage_root=str(tmp_path / "store"),
        default_format=DocumentFormat.JSON,
        validation=ValidationConfig(enabled=True, max_length=10),
    )
    config.save(path)
    assert "default_format: json" in path.read_text(encoding="utf-8")
    assert RegistryConfig.load(path) == config


def test_build_validator():
    assert ValidationConfig().build_validator() is None
    validator = ValidationConfig(enabled=True, max_length=5).build_validator()
    assert isinstance(validator, LengthValidator)
    assert validator.max_length == 5
