"""Exception hierarchy and exit codes."""

from __future__ import annotations

# Exit codes
EXIT_OK = 0
EXIT_GENERAL_ERROR = 1
EXIT_NOT_FOUND = 2
EXIT_INVALID_NAME = 3
EXIT_MALFORMED_DOCUMENT = 4
EXIT_UNSUPPORTED_FORMAT = 5
EXIT_STORAGE_FAILURE = 6
EXIT_CONFIG_ERROR = 7
EXIT_DOCTOR_FAILURE = 10

_EXIT_DESCRIPTIONS = {
    EXIT_OK: "Success",
    EXIT_GENERAL_ERROR: "General error",
    EXIT_NOT_FOUND: "Page or locator not found",
    EXIT_INVALID_NAME: "Invalid page name, locator name or attribute value",
    EXIT_MALFORMED_DOCUMENT: "Locator document could not be decoded",
    EXIT_UNSUPPORTED_FORMAT: "Unsupported import/export format",
    EXIT_STORAGE_FAILURE: "Filesystem read/write/delete failed",
    EXIT_CONFIG_ERROR: "Configuration file is invalid",
    EXIT_DOCTOR_FAILURE: "Environment check failed (run `uia-locators doctor` for details)",
}


def exit_description(code: int) -> str:
    """Return a human-readable description for *code*."""
    return _EXIT_DESCRIPTIONS.get(code, f"Unknown error (code {code})")


class LocatorRegistryError(Exception):
    """Base exception; carries an exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class NotFoundError(LocatorRegistryError):
    """An operation referenced an unknown page or locator."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_NOT_FOUND)


class InvalidNameError(LocatorRegistryError):
    """A page name, locator name or attribute value was rejected."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message, EXIT_INVALID_NAME)
        self.errors = list(errors or [])


class MalformedDocumentError(LocatorRegistryError):
    """A locator document could not be decoded."""

    def __init__(self, message: str, source: str = ""):
        source_part = f" ({source})" if source else ""
        super().__init__(f"Malformed document{source_part}: {message}", EXIT_MALFORMED_DOCUMENT)
        self.source = source


class UnsupportedFormatError(LocatorRegistryError):
    """Import/export was requested with an unrecognized format token."""

    def __init__(self, format: object):
        super().__init__(
            f"Unsupported format: {format!r} (expected 'xml' or 'json')",
            EXIT_UNSUPPORTED_FORMAT,
        )
        self.format = format


class StorageError(LocatorRegistryError):
    """Filesystem failure while reading, writing or deleting a document."""

    def __init__(self, path: object, operation: str, reason: str = ""):
        reason_part = f": {reason}" if reason else ""
        super().__init__(
            f"Storage {operation} failed for '{path}'{reason_part}",
            EXIT_STORAGE_FAILURE,
        )
        self.path = str(path)
        self.operation = operation


class ConfigError(LocatorRegistryError):
    """Configuration file could not be loaded."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_CONFIG_ERROR)
