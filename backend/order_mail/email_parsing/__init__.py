"""
Vendor Email Parsing Package

Architecture:
- forwarded: Unwrap mentor-forwarded emails to find the original sender
- orchestrator: Vendor routing, failure isolation, agent fallback
- schema: Pydantic models for agent extraction output
- llm_extraction: Claude-powered extraction for any vendor
- adapter: Agent output -> ParsedEmail conversion
- utilities: HTML to text conversion

Public API:
- parse_email(email) - Deterministic vendor/carrier parse
- parse_with_fallback(email, config) - Deterministic parse with agent fallback
- parse_email_with_agent(email, api_key, config) - Agent extraction only
"""

from .adapter import normalize_carrier, to_parser_result, vendor_id_from_name
from .forwarded import (
    extract_email_address,
    extract_original_email,
    is_forwarded_email,
    parse_forwarded_email,
)
from .llm_extraction import (
    AgentParseFailure,
    AgentParseSuccess,
    parse_email_with_agent,
)
from .orchestrator import parse_email, parse_with_fallback
from .schema import (
    EXTRACTION_SCHEMA_DESCRIPTION,
    EXTRACTION_SCHEMA_VERSION,
    ExtractedEmail,
    LineItem,
    TrackingEntry,
    VendorInfo,
    validate_extraction,
)
from .utilities import html_to_text

__all__ = [
    # Orchestrator functions (primary API)
    "parse_email",
    "parse_with_fallback",
    # Forwarded email handling
    "is_forwarded_email",
    "parse_forwarded_email",
    "extract_original_email",
    "extract_email_address",
    # Agent extraction
    "parse_email_with_agent",
    "AgentParseSuccess",
    "AgentParseFailure",
    "to_parser_result",
    "normalize_carrier",
    "vendor_id_from_name",
    # Schema
    "ExtractedEmail",
    "LineItem",
    "TrackingEntry",
    "VendorInfo",
    "validate_extraction",
    "EXTRACTION_SCHEMA_DESCRIPTION",
    "EXTRACTION_SCHEMA_VERSION",
    "html_to_text",
]
