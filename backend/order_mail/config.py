"""
Extraction Configuration Management
Handles environment variables and validation for the LLM extraction path
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# .env lives in the backend directory
ENV_PATH = Path(__file__).parent.parent / ".env"

DEFAULT_MODEL = "claude-haiku-4-5"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_REVIEW_CONFIDENCE = 0.5


@dataclass
class ExtractionConfig:
    """LLM extraction configuration object"""
    api_key: str
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: Optional[float] = None  # None leaves timeouts to the caller
    debug: bool = False
    review_confidence: float = DEFAULT_REVIEW_CONFIDENCE

    def __post_init__(self):
        """Validate configuration after initialization"""
        self.validate()

    def validate(self):
        """Validate extraction configuration"""
        if not self.api_key:
            raise ValueError("LLM_API_KEY is required for agent extraction")

        if not self.model.startswith("claude"):
            raise ValueError(f"Invalid Anthropic model: {self.model}")

        if self.max_tokens <= 0:
            raise ValueError("LLM_MAX_TOKENS must be greater than 0")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("LLM_TIMEOUT must be greater than 0")

        if not 0 <= self.review_confidence <= 1:
            raise ValueError(
                f"EMAIL_REVIEW_CONFIDENCE must be between 0 and 1: {self.review_confidence}"
            )


def load_extraction_config() -> Optional[ExtractionConfig]:
    """
    Load extraction configuration from environment variables.

    Environment Variables:
    - LLM_API_KEY: Anthropic API key (falls back to ANTHROPIC_API_KEY)
    - LLM_MODEL: Claude model name (default: claude-haiku-4-5)
    - LLM_MAX_TOKENS: Response token limit (default: 4096)
    - LLM_TIMEOUT: Request timeout in seconds (default: unset)
    - LLM_DEBUG: Debug mode (default: false)
    - EMAIL_REVIEW_CONFIDENCE: Deterministic confidence below which the
      agent is consulted (default: 0.5)

    Returns:
        ExtractionConfig object or None if no API key is configured
    """
    # Reload .env file to pick up any changes
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH, override=True)

    api_key = os.getenv("LLM_API_KEY", "").strip()
    if not api_key:
        api_key = os.getenv("ANTHROPIC_API_KEY", "").strip()

    # Without a key the agent path is disabled
    if not api_key:
        return None

    model = os.getenv("LLM_MODEL", "").strip() or DEFAULT_MODEL
    max_tokens = int(os.getenv("LLM_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))

    timeout = None
    timeout_env = os.getenv("LLM_TIMEOUT", "").strip()
    if timeout_env:
        timeout = float(timeout_env)

    debug = os.getenv("LLM_DEBUG", "false").lower() == "true"
    review_confidence = float(
        os.getenv("EMAIL_REVIEW_CONFIDENCE", str(DEFAULT_REVIEW_CONFIDENCE))
    )

    return ExtractionConfig(
        api_key=api_key,
        model=model,
        max_tokens=max_tokens,
        timeout=timeout,
        debug=debug,
        review_confidence=review_confidence,
    )
