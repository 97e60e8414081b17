"""Core test fixtures for the email extraction tests.

Puts backend/ on the import path, isolates tests from any local .env or
LLM environment variables, and loads sample emails from fixtures/.
"""

import sys
from pathlib import Path

import pytest

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from order_mail.models import EmailContent  # noqa: E402

SAMPLE_EMAILS_DIR = Path(__file__).parent / "fixtures" / "sample_emails"

LLM_ENV_VARS = (
    "LLM_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLM_MODEL",
    "LLM_MAX_TOKENS",
    "LLM_TIMEOUT",
    "LLM_DEBUG",
    "EMAIL_REVIEW_CONFIDENCE",
)


@pytest.fixture(autouse=True)
def isolated_llm_env(monkeypatch, tmp_path):
    """Never read a developer's .env or API keys during tests."""
    for name in LLM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("order_mail.config.ENV_PATH", tmp_path / ".env")


@pytest.fixture
def load_sample_email():
    """Load a sample email body from fixtures/sample_emails."""

    def _load(filename: str) -> str:
        with open(SAMPLE_EMAILS_DIR / filename, encoding="utf-8") as f:
            return f.read()

    return _load


@pytest.fixture
def make_email():
    """Build an EmailContent with team defaults for the recipient."""

    def _make(sender, subject, html=None, text=None, to="ftc-5064@buildseason.org"):
        return EmailContent(sender=sender, to=to, subject=subject, html=html, text=text)

    return _make
