"""UI-Automation locator registry."""

__version__ = "0.1.0"
