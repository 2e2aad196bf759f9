"""
PackageWriter - scoped writer session for one package archive.

Lifecycle:

    UNOPENED --initialize()--> INITIALIZED --put_*()--> WRITING --close()--> CLOSED

Once initialize() has opened the output file, the session always ends in
CLOSED: use it as a context manager and the file handle is released on
every exit path. If the block raises, the incomplete archive is removed.

Member timestamps are fixed; the archive content alone determines the
member bytes.
"""

from __future__ import annotations

import enum
import json
import logging
import zipfile
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from ..security.context import SecurityContext

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

# Earliest timestamp the ZIP format can represent.
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class WriterState(str, enum.Enum):
    UNOPENED = "unopened"
    INITIALIZED = "initialized"
    WRITING = "writing"
    CLOSED = "closed"


@dataclass(frozen=True)
class InstallationContext:
    """
    Who the package is being written as, and under which site.
    Recorded in the archive next to the format version.
    """

    user: str
    site: str
    created_at: str
    format_version: int = FORMAT_VERSION

    @classmethod
    def create(cls, context: SecurityContext) -> "InstallationContext":
        context.ensure_active()
        return cls(
            user=context.user.name,
            site=context.site,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class PackageWriter:
    """
    Writes entries into a single ZIP file at `path`.

    An existing file at `path` is replaced when the session is
    initialized.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.state = WriterState.UNOPENED
        self.installation: Optional[InstallationContext] = None
        self._zip: Optional[zipfile.ZipFile] = None
        self._entry_count = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, installation: InstallationContext) -> None:
        if self.state is not WriterState.UNOPENED:
            raise RuntimeError(f"Cannot initialize writer in state {self.state.value}")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._zip = zipfile.ZipFile(self.path, "w", zipfile.ZIP_DEFLATED)
        self.installation = installation
        self.state = WriterState.INITIALIZED
        logger.debug("Opened package writer at %s", self.path)

    def close(self) -> None:
        """
        Flush and release the output file. Safe to call more than once.
        """
        if self.state is WriterState.CLOSED:
            return
        try:
            if self._zip is not None:
                self._zip.close()
        finally:
            self._zip = None
            self.state = WriterState.CLOSED
            logger.debug("Closed package writer at %s (%d entries)", self.path, self._entry_count)

    def abort(self) -> None:
        """
        Close the session and delete the incomplete archive.
        """
        opened = self.state is not WriterState.UNOPENED
        try:
            self.close()
        finally:
            if opened and self.path.exists():
                self.path.unlink()
                logger.info("Removed incomplete package %s", self.path)

    def __enter__(self) -> "PackageWriter":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.abort()
        else:
            self.close()
        return False

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def put_entry(self, name: str, data: Union[bytes, str]) -> None:
        """
        Write one archive member. `name` is a POSIX relative path.
        """
        if self.state not in (WriterState.INITIALIZED, WriterState.WRITING):
            raise RuntimeError(f"Cannot write entries in state {self.state.value}")

        name = name.replace("\\", "/").lstrip("/")
        if not name or ".." in name.split("/"):
            raise ValueError(f"Invalid archive entry name: {name!r}")

        if isinstance(data, str):
            data = data.encode("utf-8")

        info = zipfile.ZipInfo(name, date_time=_FIXED_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = 0o644 << 16

        self.state = WriterState.WRITING
        self._zip.writestr(info, data)
        self._entry_count += 1

    def put_json(self, name: str, data: Any) -> None:
        """
        Write a JSON member with deterministic formatting.
        """
        text = json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True)
        self.put_entry(name, text)


__all__ = [
    "FORMAT_VERSION",
    "WriterState",
    "InstallationContext",
    "PackageWriter",
]
