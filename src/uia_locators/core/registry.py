"""Locator registry: the page index and its persistence."""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from uia_locators.config import RegistryConfig
from uia_locators.constants import DEFAULT_LOCATOR_DIR, DOCUMENT_EXTENSION
from uia_locators.core.errors import (
    InvalidNameError,
    MalformedDocumentError,
    NotFoundError,
    StorageError,
)
from uia_locators.core.models import LocatorDescriptor, Page, Strategy
from uia_locators.core.names import (
    InputValidator,
    ValidationResult,
    locator_name_errors,
    page_name_errors,
    split_full_name,
    validate_locator_name,
    validate_page_name,
)
from uia_locators.core.resolution import best_selector, resolve_selectors
from uia_locators.storage.formats import (
    DocumentFormat,
    decode_collection,
    encode_collection,
    parse_format,
)
from uia_locators.storage.page_store import PageStore
from uia_locators.storage.xml_codec import decode_page, encode_page

logger = logging.getLogger(__name__)

_IDENTITY_KEYS = ("page_name", "locator_name", "pageName", "locatorName", "fullName")


@dataclass
class LoadReport:
    pages: list[str] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"pages": list(self.pages), "errors": list(self.errors)}


@dataclass
class ImportResult:
    pages: list[str] = field(default_factory=list)
    locators: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"pages": list(self.pages), "locators": self.locators}


class LocatorRegistry:
    """In-memory index of pages, persisted one document per page.

    Every mutation updates the index, then writes the affected page. A failed
    write rolls that page back to its previous in-memory state before the
    :class:`StorageError` propagates, so index and disk stay in agreement.

    Not thread-safe: callers must not run operations on the same page
    concurrently.
    """

    def __init__(
        self,
        storage_root: str | pathlib.Path = DEFAULT_LOCATOR_DIR,
        *,
        extension: str = DOCUMENT_EXTENSION,
        validator: Optional[InputValidator] = None,
    ):
        self.store = PageStore(storage_root, extension)
        self.validator = validator
        self._pages: dict[str, Page] = {}

    @classmethod
    def from_config(cls, config: RegistryConfig) -> LocatorRegistry:
        return cls(
            config.storage_root,
            extension=config.extension,
            validator=config.validation.build_validator(),
        )

    @property
    def storage_root(self) -> pathlib.Path:
        return self.store.root

    # ── Lifecycle ─────────────────────────────────────────────────

    def initialize(self) -> LoadReport:
        """(Re)load every page document under the storage root.

        Unreadable or undecodable documents are logged, recorded in the
        report and skipped. Only a storage root that cannot be created or
        listed raises.
        """
        self.store.ensure_root()
        documents = self.store.list_documents()
        self._pages = {}
        report = LoadReport()

        for path in documents:
            page_name = self.store.page_name_for(path)
            name_errors = page_name_errors(page_name)
            if name_errors:
                self._skip(report, path, f"invalid page name: {'; '.join(name_errors)}")
                continue
            try:
                text = self.store.read(path)
                page = decode_page(text, page_name, source=str(path))
            except (StorageError, MalformedDocumentError) as exc:
                self._skip(report, path, str(exc))
                continue
            if not page.locators:
                logger.debug("Page document %s has no locators", path)
                continue
            self._pages[page_name] = page
            report.pages.append(page_name)

        logger.info(
            "Loaded %d page(s) from %s (%d skipped)",
            len(report.pages), self.store.root, len(report.errors),
        )
        return report

    @staticmethod
    def _skip(report: LoadReport, path: pathlib.Path, error: str) -> None:
        logger.warning("Skipping page document %s: %s", path, error)
        report.errors.append({"path": str(path), "error": error})

    # ── Mutations ─────────────────────────────────────────────────

    def save_locator(
        self,
        page_name: str,
        locator_name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        strategies: Optional[Iterable[Strategy | Mapping[str, Any]]] = None,
    ) -> tuple[str, str]:
        """Insert or replace ``page_name.locator_name`` and persist its page."""
        validate_page_name(page_name)
        validate_locator_name(locator_name)
        descriptor = self._build_descriptor(page_name, locator_name, attributes, strategies)
        self._check_input(descriptor)

        current = self._pages.get(page_name)
        updated = Page(name=page_name, locators=dict(current.locators) if current else {})
        updated.put(descriptor)
        self._commit(page_name, updated)
        return page_name, locator_name

    def delete_locator(self, full_name: str) -> None:
        """Remove a locator; an emptied page loses its index entry and file.

        Raises :class:`NotFoundError` for an unknown page. An unknown locator
        inside a known page is a no-op.
        """
        page_name, locator_name = split_full_name(full_name)
        page = self._pages.get(page_name)
        if page is None:
            raise NotFoundError(f"Page '{page_name}' not found")
        if locator_name not in page.locators:
            logger.debug("Locator %s not present, nothing to delete", full_name)
            return

        remaining = {k: v for k, v in page.locators.items() if k != locator_name}
        self._commit(page_name, Page(name=page_name, locators=remaining) if remaining else None)

    def import_locators(
        self, data: str, format: DocumentFormat | str = DocumentFormat.XML
    ) -> ImportResult:
        """Replace pages wholesale from an XML or flat JSON document.

        The document is decoded and checked in full before the index is
        touched. Each imported page replaces any page of the same name; a page
        with no locators removes it.
        """
        fmt = parse_format(format)
        pages = decode_collection(data, fmt, source=f"import ({fmt.value})")

        merged: dict[str, Page] = {}
        for page in pages:
            validate_page_name(page.name)
            for descriptor in page.locators.values():
                validate_locator_name(descriptor.locator_name)
                self._check_input(descriptor)
            merged[page.name] = page

        for page_name, page in merged.items():
            self._commit(page_name, page if page.locators else None)

        result = ImportResult(
            pages=list(merged),
            locators=sum(len(p.locators) for p in merged.values()),
        )
        logger.info("Imported %d locator(s) into %d page(s)", result.locators, len(result.pages))
        return result

    def export_locators(self, format: DocumentFormat | str = DocumentFormat.XML) -> str:
        fmt = parse_format(format)
        return encode_collection(self._pages.values(), fmt)

    # ── Reads ─────────────────────────────────────────────────────

    def get_locator(self, full_name: str) -> Optional[LocatorDescriptor]:
        try:
            page_name, locator_name = split_full_name(full_name)
        except InvalidNameError:
            return None
        page = self._pages.get(page_name)
        if page is None:
            return None
        return page.locators.get(locator_name)

    def get_all_locators(self) -> list[LocatorDescriptor]:
        return [d for page in self._pages.values() for d in page.locators.values()]

    def get_pages(self) -> list[str]:
        return list(self._pages)

    def get_page_locators(self, page_name: str) -> dict[str, LocatorDescriptor]:
        page = self._pages.get(page_name)
        return dict(page.locators) if page else {}

    def search_locators(self, query: str) -> list[LocatorDescriptor]:
        """Case-insensitive substring search over names and identity attributes."""
        needle = query.lower()

        def _matches(d: LocatorDescriptor) -> bool:
            haystack = (d.full_name, d.description, d.automation_id, d.name, d.class_name)
            return any(value and needle in value.lower() for value in haystack)

        return [d for d in self.get_all_locators() if _matches(d)]

    def resolve_selectors(self, full_name: str) -> Optional[list[Strategy]]:
        descriptor = self.get_locator(full_name)
        if descriptor is None:
            return None
        return resolve_selectors(descriptor)

    def get_test_selector(self, full_name: str) -> str:
        """Best single selector string, or *full_name* when nothing resolves."""
        descriptor = self.get_locator(full_name)
        if descriptor is None:
            return full_name
        return best_selector(descriptor)

    def validate_locator(
        self, locator: LocatorDescriptor | Mapping[str, Any]
    ) -> ValidationResult:
        """Check a locator for completeness without saving it."""
        if isinstance(locator, LocatorDescriptor):
            data = locator.model_dump()
        else:
            data = _snake_keys(locator)

        result = ValidationResult()
        for error in page_name_errors(data.get("page_name") or ""):
            result.add(error)
        for error in locator_name_errors(data.get("locator_name") or ""):
            result.add(error)
        identifiers = ("automation_id", "name", "class_name", "control_type")
        if not any(data.get(k) for k in identifiers):
            result.add(
                "At least one identifier (automationId, name, className, or controlType) is required"
            )
        for strategy in data.get("strategies") or []:
            s = strategy.model_dump() if isinstance(strategy, Strategy) else dict(strategy)
            if not s.get("type"):
                result.add("Strategy type is required")
            if not s.get("value"):
                result.add("Strategy value is required")
            priority = s.get("priority", 0)
            if isinstance(priority, int) and priority < 0:
                result.add("Strategy priority must be non-negative")
        return result

    # ── Internals ─────────────────────────────────────────────────

    def _build_descriptor(
        self,
        page_name: str,
        locator_name: str,
        attributes: Optional[Mapping[str, Any]],
        strategies: Optional[Iterable[Strategy | Mapping[str, Any]]],
    ) -> LocatorDescriptor:
        data = {k: v for k, v in (attributes or {}).items() if k not in _IDENTITY_KEYS}
        if strategies is not None:
            data["strategies"] = list(strategies)
        try:
            return LocatorDescriptor.model_validate(
                {**data, "page_name": page_name, "locator_name": locator_name}
            )
        except ValidationError as exc:
            raise InvalidNameError(
                f"Invalid locator {page_name}.{locator_name}: {exc.error_count()} error(s)",
                [e["msg"] for e in exc.errors()],
            ) from exc

    def _check_input(self, descriptor: LocatorDescriptor) -> None:
        if self.validator is None:
            return
        values = [descriptor.page_name, descriptor.locator_name]
        values += [v for v in descriptor.attributes().values() if v is not None]
        for strategy in descriptor.strategies:
            values += [strategy.type, strategy.value]

        errors = []
        for value in values:
            result = self.validator.validate(value)
            errors += [f"{value[:40]!r}: {e}" for e in result.errors]
        if errors:
            raise InvalidNameError(
                f"Locator {descriptor.full_name} rejected by validator", errors
            )

    def _commit(self, page_name: str, updated: Optional[Page]) -> None:
        """Apply *updated* to the index and persist it; None removes the page."""
        previous = self._pages.get(page_name)
        if updated is None:
            self._pages.pop(page_name, None)
            self.store.delete(page_name)
            return

        self._pages[page_name] = updated
        try:
            self.store.write(page_name, encode_page(updated))
        except StorageError:
            if previous is None:
                self._pages.pop(page_name, None)
            else:
                self._pages[page_name] = previous
            logger.error("Persisting page %s failed, in-memory change rolled back", page_name)
            raise


def _snake_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    aliases = {
        "pageName": "page_name",
        "locatorName": "locator_name",
        "automationId": "automation_id",
        "className": "class_name",
        "controlType": "control_type",
    }
    return {aliases.get(k, k): v for k, v in data.items()}
