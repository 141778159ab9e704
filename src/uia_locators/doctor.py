"""Doctor command: validates configuration and locator storage."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from uia_locators.config import RegistryConfig
from uia_locators.constants import DOCUMENT_EXTENSION
from uia_locators.core.errors import ConfigError, MalformedDocumentError, StorageError
from uia_locators.storage.page_store import PageStore
from uia_locators.storage.xml_codec import decode_pages

MIN_PYTHON = (3, 10)


@dataclass
class CheckResult:
    name: str
    passed: bool
    message: str
    hint: Optional[str] = None


@dataclass
class DoctorReport:
    checks: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    def add(self, result: CheckResult) -> None:
        self.checks.append(result)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_python_version() -> CheckResult:
    """Verify that the running Python meets the minimum version requirement."""
    current = sys.version_info[:2]
    ver_str = f"{current[0]}.{current[1]}"
    min_str = f"{MIN_PYTHON[0]}.{MIN_PYTHON[1]}"
    if current >= MIN_PYTHON:
        return CheckResult(
            name="Python version",
            passed=True,
            message=f"Python {ver_str} ✓ (>= {min_str} required)",
        )
    return CheckResult(
        name="Python version",
        passed=False,
        message=f"Python {ver_str} is too old (need >= {min_str})",
        hint=f"Install Python {min_str}+ from https://python.org/downloads/",
    )


def check_config(config_path: Optional[str] = None) -> CheckResult:
    """Validate the YAML config file, if one exists."""
    if config_path is None:
        return CheckResult(
            name="Config",
            passed=True,
            message="No config file specified (defaults in use)",
        )
    p = Path(config_path)
    if not p.exists():
        return CheckResult(
            name="Config",
            passed=True,
            message=f"'{p}' not found (defaults in use)",
            hint="Run `uia-locators init` to write a config file.",
        )
    try:
        RegistryConfig.load(p)
    except ConfigError as exc:
        return CheckResult(
            name="Config",
            passed=False,
            message=str(exc),
            hint="Fix the YAML syntax or remove unknown values from the config file.",
        )
    return CheckResult(name="Config", passed=True, message=f"'{p}' is valid ✓")


def check_storage_root(root: str) -> CheckResult:
    """Verify that the locator directory exists (or can be created) and is writable."""
    p = Path(root)
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass  # reported below

    if p.is_dir() and os.access(p, os.W_OK):
        return CheckResult(
            name="Locator directory",
            passed=True,
            message=f"'{p}' is writable ✓",
        )
    if not p.exists():
        return CheckResult(
            name="Locator directory",
            passed=False,
            message=f"'{p}' does not exist and could not be created",
            hint=f"Create the directory manually: mkdir -p \"{p}\"",
        )
    return CheckResult(
        name="Locator directory",
        passed=False,
        message=f"'{p}' exists but is not a writable directory",
        hint=f"Fix permissions: chmod u+w \"{p}\"",
    )


def check_page_documents(root: str, extension: str = DOCUMENT_EXTENSION) -> List[CheckResult]:
    """Decode every page document; each broken one is a failed check."""
    store = PageStore(root, extension)
    if not store.root.is_dir():
        return []
    try:
        documents = store.list_documents()
    except StorageError as exc:
        return [CheckResult(name="Page documents", passed=False, message=str(exc))]

    results = []
    for path in documents:
        try:
            decode_pages(store.read(path), source=str(path))
        except (StorageError, MalformedDocumentError) as exc:
            results.append(
                CheckResult(
                    name=f"Page document: {path.name}",
                    passed=False,
                    message=str(exc),
                    hint="Fix or remove the file; it is skipped when the registry loads.",
                )
            )
    if not results:
        results.append(
            CheckResult(
                name="Page documents",
                passed=True,
                message=f"{len(documents)} document(s) decode cleanly ✓",
            )
        )
    return results


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def run_doctor(
    storage_root: str,
    config_path: Optional[str] = None,
    extension: str = DOCUMENT_EXTENSION,
) -> DoctorReport:
    """Run all checks and return a :class:`DoctorReport`."""
    report = DoctorReport()

    report.add(check_python_version())
    report.add(check_config(config_path))
    report.add(check_storage_root(storage_root))
    for result in check_page_documents(storage_root, extension):
        report.add(result)

    return report
