"""Registry configuration (uia-locators.yaml)."""

from __future__ import annotations

import pathlib
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from uia_locators.constants import (
    CONFIG_FILE,
    DEFAULT_LOCATOR_DIR,
    DEFAULT_MAX_LENGTH,
    DOCUMENT_EXTENSION,
)
from uia_locators.core.errors import ConfigError
from uia_locators.core.names import InputValidator, LengthValidator
from uia_locators.storage.formats import DocumentFormat


class ValidationConfig(BaseModel):
    enabled: bool = False
    max_length: int = Field(default=DEFAULT_MAX_LENGTH, gt=0)

    def build_validator(self) -> Optional[InputValidator]:
        if not self.enabled:
            return None
        return LengthValidator(self.max_length)


class RegistryConfig(BaseModel):
    storage_root: str = DEFAULT_LOCATOR_DIR
    extension: str = DOCUMENT_EXTENSION
    default_format: DocumentFormat = DocumentFormat.XML
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @classmethod
    def load(cls, path: str | pathlib.Path | None = None) -> RegistryConfig:
        """Load from YAML; a missing file yields the defaults.

        A relative ``storage_root`` is resolved against the config file's
        directory.
        """
        path = pathlib.Path(path or CONFIG_FILE)
        if not path.exists():
            return cls()
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read config '{path}': {exc}") from exc
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigError(f"Config '{path}' must be a mapping")
        try:
            config = cls(**raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config '{path}': {exc}") from exc

        root = pathlib.Path(config.storage_root)
        if not root.is_absolute():
            config.storage_root = str(path.parent / root)
        return config

    def save(self, path: str | pathlib.Path | None = None) -> pathlib.Path:
        path = pathlib.Path(path or CONFIG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        return path
