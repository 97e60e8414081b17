"""Vendor order email extraction for FTC team purchasing."""

from .email_parsing import parse_email, parse_email_with_agent, parse_with_fallback
from .models import EmailContent, ParsedEmail

__all__ = [
    "EmailContent",
    "ParsedEmail",
    "parse_email",
    "parse_with_fallback",
    "parse_email_with_agent",
]
