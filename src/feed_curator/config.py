# feed_curator/config.py
"""Runtime configuration for the curator.

Defaults can be overridden through ``FEED_CURATOR_*`` environment variables
(a ``.env`` file in the working directory is honoured).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# Central model config: can be overridden by environment variable
DEFAULT_MODEL_REPO = os.getenv("FEED_CURATOR_MODEL_REPO", "sentence-transformers/all-MiniLM-L6-v2")
DEFAULT_PROBE_URL = os.getenv(
    "FEED_CURATOR_PROBE_URL",
    f"https://huggingface.co/{DEFAULT_MODEL_REPO}/resolve/main/config.json",
)
DEFAULT_THRESHOLD = float(os.getenv("FEED_CURATOR_THRESHOLD", "0.35"))
DEFAULT_LOG_CAPACITY = int(os.getenv("FEED_CURATOR_LOG_CAPACITY", "2000"))

# Acquisition timing (seconds)
PROBE_ATTEMPTS = 3
PROBE_BACKOFF_BASE = 1.0
PROBE_TIMEOUT = 30.0
DOWNLOAD_TIMEOUT = float(os.getenv("FEED_CURATOR_DOWNLOAD_TIMEOUT", "120"))
AUTO_RETRY_DELAY = float(os.getenv("FEED_CURATOR_AUTO_RETRY_DELAY", "120"))

KEEP_ALIVE_INTERVAL = 30.0
REINJECT_GRACE = 0.5
CLASSIFY_REQUEST_TIMEOUT = 10.0

# Hosts whose pages count as an eligible feed surface
FEED_HOSTS = ("x.com", "twitter.com")

# Spam keywords handed to the inference host along with the interests
DEFAULT_SPAM_KEYWORDS = ["promoted", "sponsored", "free crypto", "giveaway"]

# Seeded on first install
DEFAULT_INTERESTS = [
    "technology",
    "science",
    "finance",
    "ai",
    "music",
    "startups",
    "venture capital",
    "semiconductors",
    "gpus",
    "computer hardware",
    "computer software",
]


class CuratorConfig(BaseModel):
    """All tunables in one place; passed down to every component."""

    model_repo: str = Field(default=DEFAULT_MODEL_REPO, description="Embedding model identifier")
    probe_url: str = Field(default=DEFAULT_PROBE_URL, description="URL fetched to test connectivity")
    threshold: float = Field(default=DEFAULT_THRESHOLD, ge=-1.0, le=1.0, description="Minimum similarity to keep")
    spam_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_SPAM_KEYWORDS))
    log_capacity: int = Field(default=DEFAULT_LOG_CAPACITY, gt=0)

    probe_attempts: int = Field(default=PROBE_ATTEMPTS, ge=1)
    probe_backoff_base: float = Field(default=PROBE_BACKOFF_BASE, ge=0)
    probe_timeout: float = Field(default=PROBE_TIMEOUT, gt=0)
    download_timeout: float = Field(default=DOWNLOAD_TIMEOUT, gt=0)
    auto_retry_delay: float = Field(default=AUTO_RETRY_DELAY, ge=0)

    keep_alive_interval: float = Field(default=KEEP_ALIVE_INTERVAL, gt=0)
    reinject_grace: float = Field(default=REINJECT_GRACE, ge=0)
    classify_timeout: float = Field(default=CLASSIFY_REQUEST_TIMEOUT, gt=0)

    feed_hosts: tuple[str, ...] = Field(default=FEED_HOSTS)

    @classmethod
    def from_env(cls) -> CuratorConfig:
        """Build a config from the current environment, read at call time."""
        overrides: dict[str, object] = {}
        for field, (variable, cast) in _ENV_FIELDS.items():
            if value := os.getenv(variable):
                overrides[field] = cast(value)
        return cls(**overrides)


def _keyword_list(value: str) -> list[str]:
    return [k.strip().lower() for k in value.split(",") if k.strip()]


_ENV_FIELDS = {
    "model_repo": ("FEED_CURATOR_MODEL_REPO", str),
    "probe_url": ("FEED_CURATOR_PROBE_URL", str),
    "threshold": ("FEED_CURATOR_THRESHOLD", float),
    "log_capacity": ("FEED_CURATOR_LOG_CAPACITY", int),
    "probe_attempts": ("FEED_CURATOR_PROBE_ATTEMPTS", int),
    "probe_timeout": ("FEED_CURATOR_PROBE_TIMEOUT", float),
    "download_timeout": ("FEED_CURATOR_DOWNLOAD_TIMEOUT", float),
    "auto_retry_delay": ("FEED_CURATOR_AUTO_RETRY_DELAY", float),
    "keep_alive_interval": ("FEED_CURATOR_KEEP_ALIVE_INTERVAL", float),
    "classify_timeout": ("FEED_CURATOR_CLASSIFY_TIMEOUT", float),
    "spam_keywords": ("FEED_CURATOR_SPAM_KEYWORDS", _keyword_list),
}
