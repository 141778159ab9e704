"""Native page document codec (XML).

Document shape::

    <locators>
      <page name="Login">
        <locator name="submit" automationId="btnSubmit" className="Button">
          <strategy type="xpath" value="//Button[1]" priority="0"/>
        </locator>
      </page>
    </locators>

The ``name`` attribute of ``<locator>`` is the locator name; the element's
UIA Name property is stored as ``elementName``. Strategies are written in
stored order, priority sorting happens at resolution time.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, Optional

from uia_locators.core.errors import MalformedDocumentError
from uia_locators.core.models import LocatorDescriptor, Page, Strategy

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# (document attribute, model field)
_LOCATOR_ATTRIBUTES = (
    ("automationId", "automation_id"),
    ("elementName", "name"),
    ("className", "class_name"),
    ("controlType", "control_type"),
    ("description", "description"),
)


def _page_element(page: Page) -> ET.Element:
    page_el = ET.Element("page", {"name": page.name})
    for locator_name, descriptor in page.locators.items():
        attrs = {"name": locator_name}
        for attr, fld in _LOCATOR_ATTRIBUTES:
            value = getattr(descriptor, fld)
            if value is not None:
                attrs[attr] = value
        locator_el = ET.SubElement(page_el, "locator", attrs)
        for strategy in descriptor.strategies:
            ET.SubElement(locator_el, "strategy", {
                "type": strategy.type,
                "value": strategy.value,
                "priority": str(strategy.priority),
            })
    return page_el


def encode_pages(pages: Iterable[Page]) -> str:
    """Serialize pages into one ``<locators>`` document, in the given order."""
    root = ET.Element("locators")
    for page in pages:
        root.append(_page_element(page))
    ET.indent(root, space="  ")
    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def encode_page(page: Page) -> str:
    return encode_pages([page])


def _parse_root(text: str, source: str) -> Optional[ET.Element]:
    if not text or not text.strip():
        return None
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedDocumentError(str(exc), source) from exc


def _decode_locator(page_name: str, locator_el: ET.Element, source: str) -> LocatorDescriptor:
    locator_name = locator_el.get("name")
    if not locator_name:
        raise MalformedDocumentError(
            f"<locator> without a name in page {page_name!r}", source
        )
    fields = {fld: locator_el.get(attr) for attr, fld in _LOCATOR_ATTRIBUTES}
    strategies = [
        Strategy(
            type=s.get("type"),
            value=s.get("value"),
            priority=s.get("priority"),
        )
        for s in locator_el.findall("strategy")
    ]
    return LocatorDescriptor(
        page_name=page_name,
        locator_name=locator_name,
        strategies=strategies,
        **fields,
    )


def decode_pages(text: str, source: str = "") -> list[Page]:
    """Parse every ``<page>`` entry of a document.

    An empty document, a root other than ``<locators>`` or a container with
    no pages yields an empty list. Unparseable XML and unnamed pages or
    locators raise :class:`MalformedDocumentError`.
    """
    root = _parse_root(text, source)
    if root is None or root.tag != "locators":
        return []

    pages = []
    for page_el in root.findall("page"):
        page_name = page_el.get("name")
        if not page_name:
            raise MalformedDocumentError("<page> without a name", source)
        page = Page(name=page_name)
        for locator_el in page_el.findall("locator"):
            page.put(_decode_locator(page_name, locator_el, source))
        pages.append(page)
    return pages


def decode_page(text: str, page_name: str, source: str = "") -> Page:
    """Decode a single-page document stored under *page_name*.

    Uses the entry named *page_name*, otherwise the first entry; any other
    entries are logged and ignored. Locators are re-keyed to *page_name* so
    the page always matches its backing file.
    """
    pages = decode_pages(text, source)
    if not pages:
        return Page(name=page_name)
    entry = next((p for p in pages if p.name == page_name), pages[0])
    dropped = [p.name for p in pages if p is not entry]
    if dropped:
        logger.warning(
            "Page document %s holds extra page entries, ignored: %s",
            source or page_name, ", ".join(dropped),
        )
    page = Page(name=page_name)
    for descriptor in entry.locators.values():
        page.put(descriptor.model_copy(update={"page_name": page_name}))
    return page
