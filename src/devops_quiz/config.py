"""
devops-quiz configuration

Content locations, catalog behavior and logging settings live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Union


@dataclass
class ContentConfig:
    """Where quiz definitions come from"""
    source: Literal["filesystem", "remote"] = os.getenv("QUIZ_SOURCE", "filesystem")
    quiz_dir: str = os.getenv("QUIZ_CONTENT_DIR", "content/quizzes")
    file_pattern: str = os.getenv("QUIZ_FILE_PATTERN", "*.json")
    index_url: str = os.getenv("QUIZ_INDEX_URL", "")
    http_timeout_seconds: float = float(os.getenv("QUIZ_HTTP_TIMEOUT", "10.0"))


@dataclass
class CatalogConfig:
    """Catalog and listing behavior"""
    max_recommendations: int = int(os.getenv("QUIZ_RECOMMENDATIONS", "3"))

    # Performance rating thresholds (percent of effective total points)
    RATING_THRESHOLDS = {
        "excellent": 90,
        "good": 75,
        "needs-improvement": 60,
    }


@dataclass
class LoggingConfig:
    """Log output"""
    level: str = os.getenv("QUIZ_LOG_LEVEL", "WARNING")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """Master config, import this"""
    content: ContentConfig = field(default_factory=ContentConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def for_directory(cls, directory: Union[str, Path]) -> "Config":
        """Filesystem content rooted at `directory`"""
        cfg = cls()
        cfg.content.source = "filesystem"
        cfg.content.quiz_dir = str(directory)
        return cfg


# Singleton
config = Config()
