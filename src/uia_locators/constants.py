"""Global constants."""

import pathlib


def _find_project_root() -> pathlib.Path:
    """Find the project root (directory containing uia-locators.yaml or .git).

    Search order:
      1. Walk up from cwd
      2. Walk up from the package source directory (editable install)
    Fallback: cwd
    """
    markers = ("uia-locators.yaml", ".git")

    def _search(start: pathlib.Path) -> pathlib.Path | None:
        for d in [start, *start.parents]:
            if any((d / m).exists() for m in markers):
                return d
        return None

    found = _search(pathlib.Path.cwd())
    if found:
        return found

    pkg_dir = pathlib.Path(__file__).resolve().parent  # src/uia_locators/
    found = _search(pkg_dir)
    if found:
        return found

    return pathlib.Path.cwd()


PROJECT_ROOT = _find_project_root()

CONFIG_FILE = str(PROJECT_ROOT / "uia-locators.yaml")
DEFAULT_LOCATOR_DIR = str(PROJECT_ROOT / "locators")
DOCUMENT_EXTENSION = "xml"
DEFAULT_MAX_LENGTH = 1000

FULL_NAME_SEPARATOR = "."

# Implicit selectors derived from identity attributes, in precedence order.
IMPLICIT_SELECTOR_PRIORITIES = (
    ("automationId", "automation_id", 1),
    ("name", "name", 2),
    ("className", "class_name", 3),
)
