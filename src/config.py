"""
src/config.py
"""


import os
import sys
from loguru import logger


# LLM
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
CHAT_TEMPERATURE: float = 0.7
CHAT_MAX_TOKENS: int = 4096
SUMMARY_TEMPERATURE: float = 0.3            # Low randomness for summaries
SUMMARY_MAX_TOKENS: int = 1024

# Remote platform
PLATFORM_URL: str = os.getenv("PLATFORM_URL", "https://platform.adobe.io")
PLATFORM_API_KEY: str = os.getenv("PLATFORM_API_KEY", "")
PLATFORM_IMS_ORG: str = os.getenv("PLATFORM_IMS_ORG", "")
PLATFORM_SANDBOX: str = os.getenv("PLATFORM_SANDBOX", "prod")
PLATFORM_ACCESS_TOKEN: str = os.getenv("PLATFORM_ACCESS_TOKEN", "")
PLATFORM_TIMEOUT_SECONDS: float = float(os.getenv("PLATFORM_TIMEOUT_SECONDS", "30"))

# Turn handling
HISTORY_LIMIT: int = 20                     # Most recent messages sent to the model
RESULT_CHAR_LIMIT: int = 3000               # Per-tool JSON in the summary prompt

# Job polling
POLL_INTERVAL_SECONDS: float = 2.0
POLL_TIMEOUT_SECONDS: float = 30.0
DEFAULT_QUERY_DB: str = "prod:all"

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Replace loguru's default sink with a single stderr sink at `level`."""

    logger.remove()
    logger.add(sys.stderr, level=level.upper())
# EOF
