"""
Email Parser Orchestrator

Main parsing coordination.
Orchestrates the parsing flow: direct vendor lookup → forwarded unwrap →
vendor lookup on the original → parse, with the agent as a fallback for
results that need review.
"""

from typing import Optional

from order_mail.config import ExtractionConfig, load_extraction_config
from order_mail.error_tracking import ErrorStage, ParseError
from order_mail.logging_config import get_logger
from order_mail.models import EmailContent, ParsedEmail
from order_mail.vendor_parsers import find_parser, get_domain_from_email

from .adapter import to_parser_result
from .forwarded import extract_original_email, is_forwarded_email, parse_forwarded_email
from .llm_extraction import parse_email_with_agent

# Initialize logger
logger = get_logger(__name__)


def parse_email(email: EmailContent) -> ParsedEmail:
    """
    Parse an email with the matching vendor or carrier parser.

    Flow:
    1. Direct lookup by sender domain (email is from the vendor)
    2. If nothing matched and the email looks forwarded, unwrap it and
       look up the original sender
    3. Run the parser; a parser exception yields an unknown result

    Never raises for malformed input.

    Args:
        email: Inbound email

    Returns:
        ParsedEmail (type "unknown", confidence 0 when no parser applies)
    """
    parser = find_parser(email)
    email_to_process = email

    if not parser and is_forwarded_email(email):
        logger.debug(
            "Detected forwarded email, extracting original",
            extra={"sender_domain": get_domain_from_email(email.sender)},
        )
        forwarded = parse_forwarded_email(email)
        if forwarded:
            email_to_process = extract_original_email(forwarded, email)
            parser = find_parser(email_to_process)
            logger.debug(
                f"Extracted original from: {forwarded.original_from}",
                extra={"sender_domain": get_domain_from_email(forwarded.original_from)},
            )
        else:
            logger.debug("Could not extract forwarded content")

    if not parser:
        return ParsedEmail.unknown()

    log_extra = {
        "vendor": parser.vendor_id,
        "parse_method": f"vendor_{parser.vendor_id}",
        "sender_domain": get_domain_from_email(email_to_process.sender),
    }

    try:
        result = parser.parse(email_to_process)
    except Exception as e:
        ParseError.from_exception(e, ErrorStage.VENDOR_PARSE, context=log_extra).log()
        return ParsedEmail.unknown(vendor=parser.vendor_id)

    logger.info(
        f"Parsed with {parser.vendor_id}: type={result.type}, "
        f"order={result.order_number or 'none'}",
        extra=log_extra,
    )
    return result


def parse_with_fallback(
    email: EmailContent,
    config: Optional[ExtractionConfig] = None,
) -> ParsedEmail:
    """
    Deterministic parse, escalating to the agent when the result needs review.

    The agent runs only when confidence is below the review threshold and an
    API key is configured. An agent failure keeps the deterministic result.

    Args:
        email: Inbound email
        config: Extraction settings; loaded from the environment when omitted

    Returns:
        ParsedEmail, or AgentParsedEmail when the agent result was used
    """
    result = parse_email(email)

    if config is None:
        config = load_extraction_config()

    threshold = config.review_confidence if config else 0.5
    if result.confidence >= threshold:
        return result

    if not config:
        logger.debug("Agent extraction not configured, keeping deterministic result")
        return result

    agent_result = parse_email_with_agent(email, config.api_key, config)
    if not agent_result.success:
        logger.warning(
            f"Agent fallback failed ({agent_result.error_type.value}), "
            "keeping deterministic result",
            extra={"vendor": result.vendor, "parse_method": "llm"},
        )
        return result

    return to_parser_result(agent_result.data)
