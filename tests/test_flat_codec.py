"""Tests for the flat JSON interchange format."""

import json

import pytest

from uia_locators.core.errors import MalformedDocumentError, UnsupportedFormatError
from uia_locators.core.models import LocatorDescriptor, Page, Strategy
from uia_locators.storage.flat_codec import decode_flat, encode_flat
from uia_locators.storage.formats import DocumentFormat, parse_format


def _pages():
    login = Page(name="Login")
    login.put(LocatorDescriptor(
        page_name="Login",
        locator_name="submit",
        automation_id="btnSubmit",
        name="Submit",
        strategies=[Strategy(type="xpath", value="//Button", priority=2)],
    ))
    main = Page(name="Main")
    main.put(LocatorDescriptor(page_name="Main", locator_name="grid", class_name="DataGrid"))
    return [login, main]


def test_encode_shape():
    data = json.loads(encode_flat(_pages()))
    assert data == {
        "Login": {
            "submit": {
                "automationId": "btnSubmit",
                "name": "Submit",
                "strategies": [{"type": "xpath", "value": "//Button", "priority": 2}],
            }
        },
        "Main": {"grid": {"className": "DataGrid", "strategies": []}},
    }


def test_decode_inverts_encode():
    pages = _pages()
    assert decode_flat(encode_flat(pages)) == pages


def test_decode_record_list():
    text = json.dumps([
        {"fullName": "Login.ok", "pageName": "Login", "locatorName": "ok", "automationId": "btnOk"},
        {"fullName": "Login.cancel", "pageName": "Login", "locatorName": "cancel", "name": "Cancel"},
        {"fullName": "Main.grid", "pageName": "Main", "locatorName": "grid"},
    ])
    pages = decode_flat(text)
    assert [p.name for p in pages] == ["Login", "Main"]
    assert list(pages[0].locators) == ["ok", "cancel"]
    assert pages[0].locators["cancel"].name == "Cancel"


def test_decode_coerces_priority_strings():
    text = json.dumps({"P": {"a": {"strategies": [{"type": "name", "value": "A", "priority": "7"}]}}})
    assert decode_flat(text)[0].locators["a"].strategies[0].priority == 7


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "42",
        json.dumps({"P": []}),
        json.dumps({"P": {"a": "btn"}}),
        json.dumps({"P": {"a": {"strategies": "xpath"}}}),
        json.dumps({"P": {"a": {"strategies": ["xpath"]}}}),
        json.dumps({"P": {"": {}}}),
        json.dumps([{"pageName": "P"}]),
    ],
)
def test_decode_malformed(text):
    with pytest.raises(MalformedDocumentError):
        decode_flat(text)


def test_parse_format():
    assert parse_format("xml") is DocumentFormat.XML
    assert parse_format(" JSON ") is DocumentFormat.JSON
    assert parse_format(DocumentFormat.JSON) is DocumentFormat.JSON


@pytest.mark.parametrize("token", ["yaml", "", None, 3])
def test_parse_format_rejects(token):
    with pytest.raises(UnsupportedFormatError) as exc_info:
        parse_format(token)
    assert exc_info.value.format == token
