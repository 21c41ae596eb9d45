"""
Base protocol for quiz content sources

A content source enumerates raw quiz records. The loader never touches the
filesystem or network directly; it only iterates a source.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional


class SourceError(Exception):
    """The source as a whole cannot be enumerated."""
    pass


@dataclass(frozen=True)
class RawRecord:
    """
    One unparsed quiz definition.

    Either `payload` holds the content directly (a mapping or JSON text), or
    `reader` fetches it on demand. Deferring the read lets one unreadable
    record fail on its own.
    """
    name: str
    payload: Any = None
    reader: Optional[Callable[[], Any]] = None

    def read(self) -> Any:
        if self.reader is not None:
            return self.reader()
        return self.payload


class ContentSource(ABC):
    """
    Abstract base class for quiz content sources.

    `records()` must be restartable: every call begins a fresh enumeration.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name (e.g., 'filesystem', 'memory')."""
        pass

    @abstractmethod
    def records(self) -> Iterator[RawRecord]:
        """
        Enumerate raw records in a stable order.

        Raises:
            SourceError: If the source cannot be enumerated at all
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
