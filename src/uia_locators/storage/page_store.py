"""File-per-page document storage."""

from __future__ import annotations

import logging
import os
import pathlib
import tempfile

from uia_locators.constants import DOCUMENT_EXTENSION
from uia_locators.core.errors import StorageError

logger = logging.getLogger(__name__)


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class PageStore:
    """Reads, atomically writes and deletes ``<root>/<page>.<ext>`` documents."""

    def __init__(self, root: str | pathlib.Path, extension: str = DOCUMENT_EXTENSION):
        self.root = pathlib.Path(root)
        self.extension = extension.lstrip(".")

    def path_for(self, page_name: str) -> pathlib.Path:
        return self.root / f"{page_name}.{self.extension}"

    def page_name_for(self, path: pathlib.Path) -> str:
        return path.name[: -(len(self.extension) + 1)]

    def ensure_root(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(self.root, "mkdir", str(exc)) from exc

    def list_documents(self) -> list[pathlib.Path]:
        try:
            return sorted(
                p for p in self.root.glob(f"*.{self.extension}") if p.is_file()
            )
        except OSError as exc:
            raise StorageError(self.root, "list", str(exc)) from exc

    def read(self, path: pathlib.Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(path, "read", str(exc)) from exc

    def write(self, page_name: str, text: str) -> pathlib.Path:
        """Write via a temp file in the same directory, then rename over."""
        path = self.path_for(page_name)
        tmp_path = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.root, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            # mkstemp creates owner-only files
            os.chmod(tmp_path, _default_file_mode())
            os.replace(tmp_path, path)
            tmp_path = None
        except (OSError, UnicodeError) as exc:
            raise StorageError(path, "write", str(exc)) from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        logger.debug("Wrote page document %s", path)
        return path

    def delete(self, page_name: str) -> bool:
        """Remove a page document. Failures are logged, never raised."""
        path = self.path_for(page_name)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Page document already absent: %s", path)
            return False
        except OSError as exc:
            logger.warning("Could not delete page document %s: %s", path, exc)
            return False
        logger.debug("Deleted page document %s", path)
        return True
