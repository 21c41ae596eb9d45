"""
In-memory content source

Serves quiz records supplied by the caller. Used for fixtures and tests.
"""

from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from .base import ContentSource, RawRecord


class MemorySource(ContentSource):
    """
    Records held in memory.

    Accepts either a mapping of name -> payload or a plain iterable of
    payloads (named `memory[0]`, `memory[1]`, ...). Payloads may be dicts or
    JSON text.
    """

    def __init__(self, records: Optional[Union[Mapping[str, Any], Iterable[Any]]] = None):
        if records is None:
            records = []
        if isinstance(records, Mapping):
            self._records = list(records.items())
        else:
            self._records = [(f"memory[{i}]", r) for i, r in enumerate(records)]

    @property
    def name(self) -> str:
        return "memory"

    def add(self, payload: Any, name: Optional[str] = None) -> None:
        """Append a record; visible from the next enumeration."""
        self._records.append((name or f"memory[{len(self._records)}]", payload))

    def records(self) -> Iterator[RawRecord]:
        for name, payload in list(self._records):
            yield RawRecord(name=name, payload=payload)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"MemorySource(records={len(self._records)})"
