"""Flat interchange format (JSON).

``{pageName: {locatorName: {automationId, name, className, controlType,
description, strategies: [{type, value, priority}]}}}``

A JSON list of records that carry ``pageName``/``locatorName`` (the
``getAllLocators`` dump shape) is accepted on decode as well.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from pydantic import ValidationError

from uia_locators.core.errors import MalformedDocumentError
from uia_locators.core.models import LocatorDescriptor, Page

_IDENTITY_KEYS = ("pageName", "locatorName", "page_name", "locator_name", "fullName")


def encode_flat(pages: Iterable[Page]) -> str:
    data = {
        page.name: {
            locator_name: descriptor.to_record()
            for locator_name, descriptor in page.locators.items()
        }
        for page in pages
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def _descriptor(page_name: Any, locator_name: Any, record: Any, source: str) -> LocatorDescriptor:
    if not isinstance(record, dict):
        raise MalformedDocumentError(
            f"locator {page_name}.{locator_name} must be an object", source
        )
    strategies = record.get("strategies")
    if strategies is not None:
        if not isinstance(strategies, list) or not all(isinstance(s, dict) for s in strategies):
            raise MalformedDocumentError(
                f"strategies of {page_name}.{locator_name} must be a list of objects", source
            )
    data = {k: v for k, v in record.items() if k not in _IDENTITY_KEYS}
    try:
        return LocatorDescriptor.model_validate(
            {**data, "pageName": page_name, "locatorName": locator_name}
        )
    except ValidationError as exc:
        raise MalformedDocumentError(
            f"invalid locator {page_name}.{locator_name}: {exc.error_count()} error(s)", source
        ) from exc


def _page(page_name: str, source: str) -> Page:
    try:
        return Page(name=page_name)
    except ValidationError as exc:
        raise MalformedDocumentError(f"invalid page name {page_name!r}", source) from exc


def _pages_from_records(records: list[Any], source: str) -> list[Page]:
    pages: dict[str, Page] = {}
    for record in records:
        if not isinstance(record, dict):
            raise MalformedDocumentError("locator records must be objects", source)
        page_name = record.get("pageName")
        locator_name = record.get("locatorName")
        if not isinstance(page_name, str) or not isinstance(locator_name, str):
            raise MalformedDocumentError("record without pageName/locatorName", source)
        descriptor = _descriptor(page_name, locator_name, record, source)
        if page_name not in pages:
            pages[page_name] = _page(page_name, source)
        pages[page_name].put(descriptor)
    return list(pages.values())


def decode_flat(text: str, source: str = "") -> list[Page]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(str(exc), source) from exc

    if isinstance(data, list):
        return _pages_from_records(data, source)
    if not isinstance(data, dict):
        raise MalformedDocumentError("top level must be an object keyed by page name", source)

    pages = []
    for page_name, entries in data.items():
        if not page_name:
            raise MalformedDocumentError("empty page name", source)
        if not isinstance(entries, dict):
            raise MalformedDocumentError(f"page {page_name!r} must be an object", source)
        page = _page(page_name, source)
        for locator_name, record in entries.items():
            page.put(_descriptor(page_name, locator_name, record, source))
        pages.append(page)
    return pages
