"""
Filesystem content source

Reads one JSON quiz definition per file from a directory.
"""

import logging
from pathlib import Path
from typing import Iterator, Union

from .base import ContentSource, RawRecord, SourceError

logger = logging.getLogger(__name__)


class FilesystemSource(ContentSource):
    """Quiz files in a single directory, enumerated in filename order."""

    def __init__(self, directory: Union[str, Path], pattern: str = "*.json"):
        self.directory = Path(directory)
        self.pattern = pattern

    @property
    def name(self) -> str:
        return "filesystem"

    def records(self) -> Iterator[RawRecord]:
        if not self.directory.is_dir():
            raise SourceError(f"Quiz directory not found: {self.directory}")

        paths = sorted(p for p in self.directory.glob(self.pattern) if p.is_file())
        logger.debug(f"Found {len(paths)} quiz files in {self.directory}")

        for path in paths:
            yield RawRecord(
                name=str(path),
                reader=lambda path=path: path.read_text(encoding="utf-8"),
            )

    def __repr__(self) -> str:
        return f"FilesystemSource(directory={str(self.directory)!r}, pattern={self.pattern!r})"
