"""Locator data model: strategies, descriptors and pages."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from uia_locators.core.names import check_storable, join_full_name

ATTRIBUTE_FIELDS = ("automation_id", "name", "class_name", "control_type", "description")


def parse_priority(raw: Any) -> int:
    """Coerce a stored priority to a non-negative int; anything else is 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw >= 0 else 0
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() and raw >= 0 else 0
    if isinstance(raw, str):
        try:
            value = int(raw.strip(), 10)
        except ValueError:
            return 0
        return value if value >= 0 else 0
    return 0


class Strategy(BaseModel):
    """One way to locate a UI element. Lower priority is tried first."""

    type: str = ""
    value: str = ""
    priority: int = 0

    @field_validator("type", "value", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        return "" if v is None else check_storable(str(v))

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, v: Any) -> int:
        return parse_priority(v)


class LocatorDescriptor(BaseModel):
    """A named UI element: identity attributes plus fallback strategies.

    Field aliases are the camelCase keys used by documents and the flat
    interchange format; both spellings are accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    page_name: str = Field(alias="pageName", min_length=1)
    locator_name: str = Field(alias="locatorName", min_length=1)
    automation_id: Optional[str] = Field(default=None, alias="automationId")
    name: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="className")
    control_type: Optional[str] = Field(default=None, alias="controlType")
    description: Optional[str] = None
    strategies: list[Strategy] = Field(default_factory=list)

    @field_validator(*ATTRIBUTE_FIELDS, mode="before")
    @classmethod
    def _attribute_as_text(cls, v: Any) -> Optional[str]:
        return None if v is None else check_storable(str(v))

    @field_validator("page_name", "locator_name")
    @classmethod
    def _storable_names(cls, v: str) -> str:
        return check_storable(v)

    @field_validator("strategies", mode="before")
    @classmethod
    def _strategies_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def full_name(self) -> str:
        return join_full_name(self.page_name, self.locator_name)

    def attributes(self) -> dict[str, Optional[str]]:
        return {f: getattr(self, f) for f in ATTRIBUTE_FIELDS}

    def to_record(self) -> dict[str, Any]:
        """Attribute set keyed by document names, without the identity pair."""
        return self.model_dump(
            by_alias=True,
            exclude={"page_name", "locator_name"},
            exclude_none=True,
        )

    def to_summary(self) -> dict[str, Any]:
        """Record annotated with its page, locator and full name."""
        return {
            "fullName": self.full_name,
            "pageName": self.page_name,
            "locatorName": self.locator_name,
            **self.to_record(),
        }


class Page(BaseModel):
    """A named group of locators backed by one document."""

    name: str = Field(min_length=1)
    locators: dict[str, LocatorDescriptor] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _storable_name(cls, v: str) -> str:
        return check_storable(v)

    def put(self, descriptor: LocatorDescriptor) -> None:
        self.locators[descriptor.locator_name] = descriptor
