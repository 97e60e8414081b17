"""
Agent-based Email Extraction

Uses a Claude model to extract structured order data from vendor emails
that the deterministic parsers cannot handle: unknown vendors, mentor
notes about which items are for the team, and line items for inventory.

Failures are returned as AgentParseFailure values and never raised.
"""

import json
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import ValidationError

from order_mail.config import ExtractionConfig
from order_mail.error_tracking import ErrorStage, ErrorType, ParseError
from order_mail.llm_providers import AnthropicProvider
from order_mail.logging_config import get_logger
from order_mail.models import EmailContent
from order_mail.vendor_parsers import get_domain_from_email

from .schema import EXTRACTION_SCHEMA_DESCRIPTION, ExtractedEmail, validate_extraction
from .utilities import prompt_body

# Initialize logger
logger = get_logger(__name__)


EXTRACTION_SYSTEM_PROMPT = f"""You are an email parsing assistant for BuildSeason, a platform that helps FTC robotics teams track orders and inventory.

Your task is to extract structured data from vendor order emails. These emails are typically forwarded by team mentors and may include notes about which items are for the team.

IMPORTANT CONTEXT:
- FTC teams order parts from vendors like REV Robotics, goBILDA, AndyMark, Amazon, etc.
- Mentors often forward order confirmations and shipping notifications to track team purchases
- Sometimes a mentor's personal order includes items for multiple purposes - pay attention to any notes about which items are specifically for the team
- If the mentor says something like "only the USB cam was for the team" or "ignore the batteries, those are for another project", mark those items appropriately with forTeam: false

EXTRACTION RULES:
1. Extract ALL line items you can find, with part numbers when available
2. Convert all prices to cents (e.g., $12.99 becomes 1299)
3. For tracking numbers, identify the carrier (UPS starts with 1Z, FedEx is 12-22 digits, USPS starts with 94/93/92)
4. If the email is forwarded, look for the original vendor sender in the forwarded headers
5. Set confidence based on how complete/clear the extraction is
6. Use extractionNotes to flag any unclear or missing data

VENDOR INFO EXTRACTION:
Extract as much vendor contact info as you can find - this helps mentors contact vendors later:
- domain: Extract from the original sender's email address (e.g., "orders@revrobotics.com" -> "revrobotics.com")
- website: Look for website URLs in the email body or signature
- orderSupportEmail/Phone: Look for "order questions" or "customer service" contacts
- techSupportEmail/Phone: Look for "technical support" or "product questions" contacts
- returnsContact: Look for returns/RMA policy links or email addresses
- accountNumber: If the email shows "Account #" or "Customer ID", extract it

This info will be used to auto-create vendor records so agents can help mentors track down orders later.

OUTPUT FORMAT:
Return ONLY valid JSON matching this schema, no other text:
{EXTRACTION_SCHEMA_DESCRIPTION}"""

EXTRACTION_USER_PROMPT = """Extract data from this email. Return ONLY valid JSON, no explanation or markdown.

---EMAIL START---
From: {from}
To: {to}
Subject: {subject}

{body}
---EMAIL END---"""


@dataclass
class AgentParseSuccess:
    data: ExtractedEmail
    raw_response: str
    success: bool = True


@dataclass
class AgentParseFailure:
    """
    Agent extraction failure.

    error_type is one of NO_TEXT_RESPONSE, INVALID_JSON, SCHEMA_VALIDATION
    or API_ERROR. raw_response is attached when the model returned text.
    """
    error: str
    error_type: ErrorType
    raw_response: Optional[str] = None
    is_retryable: bool = False
    success: bool = False


AgentParseResult = Union[AgentParseSuccess, AgentParseFailure]


def build_user_prompt(email: EmailContent) -> str:
    """Fill the user prompt. Placeholders are replaced literally, once each."""
    return (
        EXTRACTION_USER_PROMPT
        .replace("{from}", email.sender, 1)
        .replace("{to}", email.to, 1)
        .replace("{subject}", email.subject, 1)
        .replace("{body}", prompt_body(email), 1)
    )


def strip_code_fence(raw_response: str) -> str:
    """Drop the first and last lines when the model wrapped JSON in a fence."""
    if raw_response.startswith("```"):
        lines = raw_response.split("\n")
        return "\n".join(lines[1:-1])
    return raw_response


def parse_email_with_agent(
    email: EmailContent,
    api_key: str,
    config: Optional[ExtractionConfig] = None,
) -> AgentParseResult:
    """
    Extract structured data from an email with one model call.

    Args:
        email: Inbound email (text part preferred for the prompt body)
        api_key: Anthropic API key
        config: Optional model/token/timeout settings

    Returns:
        AgentParseSuccess with the validated ExtractedEmail, or
        AgentParseFailure describing what went wrong
    """
    log_extra = {
        "parse_method": "llm",
        "sender_domain": get_domain_from_email(email.sender),
    }

    provider_kwargs = {"api_key": api_key}
    if config:
        provider_kwargs.update(
            model=config.model,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
            debug=config.debug,
        )

    try:
        provider = AnthropicProvider(**provider_kwargs)
        response = provider.complete(
            build_user_prompt(email), system_prompt=EXTRACTION_SYSTEM_PROMPT
        )
    except Exception as e:
        error = ParseError.from_exception(e, ErrorStage.LLM_PARSE, context=log_extra)
        error.log()
        return AgentParseFailure(
            error=f"API call failed: {e}",
            error_type=ErrorType.API_ERROR,
            is_retryable=error.is_retryable,
        )

    if response.content is None:
        logger.warning("Model returned no text block", extra=log_extra)
        return AgentParseFailure(
            error="No text response from model",
            error_type=ErrorType.NO_TEXT_RESPONSE,
        )

    raw_response = response.content.strip()
    json_str = strip_code_fence(raw_response)

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError:
        logger.warning("Model returned invalid JSON", extra=log_extra)
        return AgentParseFailure(
            error=f"Invalid JSON response: {json_str[:200]}...",
            error_type=ErrorType.INVALID_JSON,
            raw_response=raw_response,
        )

    try:
        extraction = validate_extraction(parsed)
    except ValidationError as e:
        logger.warning(f"Agent output failed schema validation: {e.error_count()} errors", extra=log_extra)
        return AgentParseFailure(
            error=f"Schema validation failed: {e}",
            error_type=ErrorType.SCHEMA_VALIDATION,
            raw_response=raw_response,
        )

    logger.info(
        f"Agent extraction succeeded: {extraction.email_type} "
        f"(confidence {extraction.confidence}, ${response.cost:.4f})",
        extra=log_extra,
    )
    return AgentParseSuccess(data=extraction, raw_response=raw_response)
