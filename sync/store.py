"""
JSON blob store rooted at a base directory.

Paths are POSIX-style and relative to ``base_dir``
(``"abilities/manifest.json"``).  Writes go to a temporary sibling first and
are then renamed over the target, so readers only ever see whole documents.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Any, Union

logger = logging.getLogger(__name__)


class BlobNotFoundError(FileNotFoundError):
    """No document exists at the requested path."""


class BlobFormatError(ValueError):
    """The document exists but is not valid UTF-8 JSON."""


class BlobReadError(OSError):
    """The document exists but could not be read (permissions, a directory …)."""


class JsonBlobStore:
    """Read / write / delete JSON documents under *base_dir*."""

    def __init__(self, base_dir: Union[str, Path]) -> None:
        self.base_dir = Path(base_dir)

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path.lstrip("/"))
        if ".." in relative.parts:
            raise ValueError(f"path escapes the store: {path}")
        return self.base_dir.joinpath(*relative.parts)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: str) -> Any:
        target = self._resolve(path)
        try:
            with open(target, encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError as exc:
            raise BlobNotFoundError(str(target)) from exc
        except ValueError as exc:
            raise BlobFormatError(f"{target}: {exc}") from exc
        except OSError as exc:
            raise BlobReadError(f"{target}: {exc}") from exc

    def write(self, path: str, data: Any) -> None:
        """Write *data* as indented JSON with a trailing newline, atomically."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, target)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug(f"Saved → {target}")

    def delete(self, path: str) -> bool:
        """
        Remove *path* if present.

        Best-effort: a missing file is a no-op and an OS error is logged, never
        raised.  Returns ``True`` only when a file was actually removed.
        """
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning(f"Could not delete {target}: {exc}")
            return False
        return True
