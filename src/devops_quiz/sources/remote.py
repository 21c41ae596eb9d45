"""
Remote HTTP content source

Fetches a JSON index of quiz URLs, then each quiz on demand.
The index is either a list of URLs or an object with a "quizzes" list;
relative entries resolve against the index URL.
"""

import logging
from typing import Iterator, Optional

import httpx

from .base import ContentSource, RawRecord, SourceError

logger = logging.getLogger(__name__)


class RemoteSource(ContentSource):
    """Quiz definitions served over HTTP."""

    def __init__(
        self,
        index_url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize remote source.

        Args:
            index_url: URL of the JSON index listing quiz files
            timeout: Request timeout in seconds
            client: Optional preconfigured client (tests pass a MockTransport)
        """
        self.index_url = index_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    @property
    def name(self) -> str:
        return "remote"

    def _fetch_index(self) -> list[str]:
        client = self._get_client()
        try:
            response = client.get(self.index_url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceError(f"Quiz index returned {e.response.status_code}: {self.index_url}") from e
        except httpx.HTTPError as e:
            raise SourceError(f"Could not fetch quiz index {self.index_url}: {e}") from e
        except ValueError as e:
            raise SourceError(f"Quiz index is not valid JSON: {self.index_url}") from e

        entries = data.get("quizzes", []) if isinstance(data, dict) else data
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            raise SourceError(f"Quiz index must list quiz URLs: {self.index_url}")
        return entries

    def _fetch_quiz(self, url: str) -> str:
        try:
            response = self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SourceError(f"Could not fetch quiz {url}: {e}") from e
        return response.text

    def records(self) -> Iterator[RawRecord]:
        base = httpx.URL(self.index_url)
        entries = self._fetch_index()
        logger.debug(f"Quiz index {self.index_url} lists {len(entries)} entries")

        for entry in entries:
            url = str(base.join(entry))
            yield RawRecord(name=url, reader=lambda url=url: self._fetch_quiz(url))

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __repr__(self) -> str:
        return f"RemoteSource(index_url={self.index_url!r})"
