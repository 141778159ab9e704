"""Tests for full-name handling and name rules."""

import pytest

from uia_locators.core.errors import InvalidNameError
from uia_locators.core.names import (
    InputValidator,
    LengthValidator,
    join_full_name,
    split_full_name,
    unstorable_char,
    validate_locator_name,
    validate_page_name,
)


def test_split_on_first_separator():
    assert split_full_name("Login.submit") == ("Login", "submit")
    assert split_full_name("Login.form.submit") == ("Login", "form.submit")


@pytest.mark.parametrize("bad", ["Login", ".submit", "Login.", ""])
def test_split_rejects_incomplete_names(bad):
    with pytest.raises(InvalidNameError):
        split_full_name(bad)


def test_join_round_trips_with_split():
    assert split_full_name(join_full_name("Main", "grid.row")) == ("Main", "grid.row")


@pytest.mark.parametrize(
    "bad", ["", "   ", "a.b", "..", "dir/page", "dir\\page", "what?", "x\ny", "bad\ud800"]
)
def test_invalid_page_names(bad):
    with pytest.raises(InvalidNameError) as exc_info:
        validate_page_name(bad)
    assert exc_info.value.errors


def test_valid_page_name():
    assert validate_page_name("Login Page") == "Login Page"


def test_locator_name_may_contain_separator():
    assert validate_locator_name("form.submit") == "form.submit"
    with pytest.raises(InvalidNameError):
        validate_locator_name(" ")


def test_length_validator():
    v = LengthValidator(max_length=3)
    assert isinstance(v, InputValidator)
    assert v.validate("abc").ok is True
    result = v.validate("abcd")
    assert result.ok is False
    assert "3" in result.errors[0]
    assert v.validate("abcd", {"max_length": 10}).ok is True
    assert v.sanitize("abcdef") == "abc"


def test_locator_name_rejects_unstorable_characters():
    with pytest.raises(InvalidNameError) as exc_info:
        validate_locator_name("ok\x0b")
    assert "cannot be stored" in exc_info.value.errors[0]


def test_unstorable_char():
    assert unstorable_char("plain text\t\r\n é \U0001f600") is None
    assert unstorable_char("a\x01b") == "\x01"
    assert unstorable_char("\udcff") == "\udcff"
    assert unstorable_char("\uffff") == "\uffff"
