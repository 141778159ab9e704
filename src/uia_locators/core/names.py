"""Full-name handling, name rules and the input validation hook."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

from uia_locators.constants import DEFAULT_MAX_LENGTH, FULL_NAME_SEPARATOR
from uia_locators.core.errors import InvalidNameError

# Page names become file names: no separator, path parts or reserved characters.
_FORBIDDEN_PAGE_CHARS = re.compile(r'[\\/<>:"|?*\x00-\x1f]')

# Anything outside the XML 1.0 Char production, lone surrogates included.
_UNSTORABLE_CHARS = re.compile(r"[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


@dataclass
class ValidationResult:
    ok: bool = True
    errors: list[str] = field(default_factory=list)

    def add(self, error: str) -> None:
        self.errors.append(error)
        self.ok = False

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "errors": list(self.errors)}


@runtime_checkable
class InputValidator(Protocol):
    """Pluggable check run on untrusted strings before a save is accepted."""

    def validate(self, value: str, rules: Optional[dict[str, Any]] = None) -> ValidationResult:
        ...

    def sanitize(self, value: str) -> str:
        ...


class LengthValidator:
    """Minimal validator: rejects values longer than *max_length*."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH):
        self.max_length = max_length

    def validate(self, value: str, rules: Optional[dict[str, Any]] = None) -> ValidationResult:
        limit = (rules or {}).get("max_length", self.max_length)
        result = ValidationResult()
        if len(value) > limit:
            result.add(f"value is longer than {limit} characters")
        return result

    def sanitize(self, value: str) -> str:
        return value[: self.max_length]


def unstorable_char(value: str) -> Optional[str]:
    """First character a page document cannot hold, if any."""
    match = _UNSTORABLE_CHARS.search(value)
    return match.group() if match else None


def check_storable(value: str) -> str:
    bad = unstorable_char(value)
    if bad is not None:
        raise ValueError(f"contains a character that cannot be stored: {bad!r}")
    return value


def join_full_name(page_name: str, locator_name: str) -> str:
    return f"{page_name}{FULL_NAME_SEPARATOR}{locator_name}"


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split ``page.locator`` on the first separator.

    Page names never contain the separator, so everything after the first
    one belongs to the locator name.
    """
    page_name, sep, locator_name = full_name.partition(FULL_NAME_SEPARATOR)
    if not sep:
        raise InvalidNameError(
            f"Invalid locator name {full_name!r}: expected 'page{FULL_NAME_SEPARATOR}locator'"
        )
    if not page_name or not locator_name:
        raise InvalidNameError(f"Invalid locator name {full_name!r}: empty page or locator part")
    return page_name, locator_name


def page_name_errors(page_name: str) -> list[str]:
    errors = []
    if not page_name or not page_name.strip():
        return ["page name is required"]
    if FULL_NAME_SEPARATOR in page_name:
        errors.append(f"page name must not contain {FULL_NAME_SEPARATOR!r}")
    if _FORBIDDEN_PAGE_CHARS.search(page_name):
        errors.append("page name contains path or reserved characters")
    elif unstorable_char(page_name) is not None:
        errors.append("page name contains characters that cannot be stored")
    return errors


def locator_name_errors(locator_name: str) -> list[str]:
    if not locator_name or not locator_name.strip():
        return ["locator name is required"]
    if unstorable_char(locator_name) is not None:
        return ["locator name contains characters that cannot be stored"]
    return []


def validate_page_name(page_name: str) -> str:
    errors = page_name_errors(page_name)
    if errors:
        raise InvalidNameError(f"Invalid page name {page_name!r}: {'; '.join(errors)}", errors)
    return page_name


def validate_locator_name(locator_name: str) -> str:
    errors = locator_name_errors(locator_name)
    if errors:
        raise InvalidNameError(
            f"Invalid locator name {locator_name!r}: {'; '.join(errors)}", errors
        )
    return locator_name
