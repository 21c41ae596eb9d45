"""
Content sources for devops-quiz

Supplies raw quiz records to the loader.
Sources: filesystem directory, in-memory records, remote HTTP index
"""

from typing import Optional

from .base import ContentSource, RawRecord, SourceError
from .filesystem import FilesystemSource
from .memory import MemorySource
from .remote import RemoteSource
from ..config import Config, config as default_config

__all__ = [
    "ContentSource",
    "RawRecord",
    "SourceError",
    "FilesystemSource",
    "MemorySource",
    "RemoteSource",
    "get_source",
    "source_from_config",
]


def get_source(name: str, **kwargs) -> ContentSource:
    """
    Factory function to get a content source by name.

    Args:
        name: Source name ('filesystem', 'memory', 'remote')
        **kwargs: Source-specific options

    Returns:
        Configured ContentSource instance

    Raises:
        ValueError: If source name is unknown
    """
    sources = {
        "filesystem": FilesystemSource,
        "memory": MemorySource,
        "remote": RemoteSource,
    }

    if name not in sources:
        raise ValueError(f"Unknown source: {name}. Valid options: {list(sources.keys())}")

    return sources[name](**kwargs)


def source_from_config(cfg: Optional[Config] = None) -> ContentSource:
    """Build the content source described by config."""
    cfg = cfg or default_config
    content = cfg.content

    if content.source == "remote":
        if not content.index_url:
            raise ValueError("QUIZ_INDEX_URL must be set when QUIZ_SOURCE=remote")
        return get_source(
            "remote",
            index_url=content.index_url,
            timeout=content.http_timeout_seconds,
        )

    if content.source == "filesystem":
        return get_source(
            "filesystem",
            directory=content.quiz_dir,
            pattern=content.file_pattern,
        )

    raise ValueError(f"Unsupported QUIZ_SOURCE: {content.source}. Valid options: ['filesystem', 'remote']")
