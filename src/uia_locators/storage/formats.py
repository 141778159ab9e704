"""Import/export format selection."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from uia_locators.core.errors import UnsupportedFormatError
from uia_locators.core.models import Page
from uia_locators.storage.flat_codec import decode_flat, encode_flat
from uia_locators.storage.xml_codec import decode_pages, encode_pages


class DocumentFormat(str, Enum):
    XML = "xml"
    JSON = "json"


def parse_format(token: DocumentFormat | str) -> DocumentFormat:
    """Map a format token to :class:`DocumentFormat` or raise."""
    if isinstance(token, DocumentFormat):
        return token
    if isinstance(token, str):
        try:
            return DocumentFormat(token.strip().lower())
        except ValueError:
            pass
    raise UnsupportedFormatError(token)


def encode_collection(pages: Iterable[Page], fmt: DocumentFormat) -> str:
    if fmt is DocumentFormat.XML:
        return encode_pages(pages)
    return encode_flat(pages)


def decode_collection(text: str, fmt: DocumentFormat, source: str = "") -> list[Page]:
    if fmt is DocumentFormat.XML:
        return decode_pages(text, source)
    return decode_flat(text, source)
