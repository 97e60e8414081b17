"""
Vendor Parser Base - Shared Utilities and Registry

Contains:
- Parser registry and decorator for vendor-specific parsers
- Sender domain matching
- Email type, order number and total heuristics shared by vendors
- Confidence scoring
"""

import math
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from order_mail.models import (
    ORDER_CONFIRMATION,
    SHIPPING_NOTIFICATION,
    UNKNOWN,
    EmailContent,
    ParsedEmail,
    TrackingInfo,
)


# Type alias for parser functions
ParseFunction = Callable[[EmailContent], ParsedEmail]

# Subject patterns are tried before body patterns (higher precision)
SUBJECT_ORDER_PATTERN = r'Order\s*#?\s*(\d+)'
BODY_ORDER_PATTERN = r'Order\s*(?:#|Number:?)\s*(\d+)'

BASE_CONFIDENCE = 0.5


@dataclass(frozen=True)
class VendorParser:
    """A registered parser: identity, sender domains and parse function."""

    vendor_id: str
    vendor_name: str
    domains: tuple[str, ...]
    parse_func: ParseFunction
    priority: int

    def can_handle(self, email: EmailContent) -> bool:
        return any(is_from_domain(email.sender, domain) for domain in self.domains)

    def parse(self, email: EmailContent) -> ParsedEmail:
        return self.parse_func(email)


# Ordered registry; first parser whose can_handle() matches wins
VENDOR_PARSERS: list[VendorParser] = []


def register_vendor(vendor_id: str, vendor_name: str, domains: list[str], priority: int):
    """Decorator to register a parser for specific sender domains."""
    def decorator(func: ParseFunction):
        VENDOR_PARSERS.append(
            VendorParser(
                vendor_id=vendor_id,
                vendor_name=vendor_name,
                domains=tuple(domains),
                parse_func=func,
                priority=priority,
            )
        )
        VENDOR_PARSERS.sort(key=lambda parser: parser.priority)
        return func
    return decorator


def find_parser(email: EmailContent) -> Optional[VendorParser]:
    """
    Find the first registered parser that can handle the email.

    Args:
        email: Inbound email

    Returns:
        VendorParser or None if no sender domain matches
    """
    for parser in VENDOR_PARSERS:
        if parser.can_handle(email):
            return parser
    return None


def get_domain_from_email(address: str) -> str:
    """
    Get domain from an email address.

    Handles "orders@revrobotics.com" and "REV Robotics <orders@revrobotics.com>".
    """
    match = re.search(r'@([^>]+)', address or '')
    return match.group(1).strip().lower() if match else ''


def is_from_domain(address: str, domain: str) -> bool:
    """Check if an address is from a domain or one of its subdomains."""
    sender_domain = get_domain_from_email(address)
    return sender_domain == domain or sender_domain.endswith(f'.{domain}')


def determine_email_type(
    email: EmailContent,
    shipping_subject: Iterable[str] = ('shipped', 'shipping', 'on its way'),
    shipping_body: Iterable[str] = ('has shipped', 'tracking number'),
    confirmation_subject: Iterable[str] = (
        'order confirmation', 'order received', 'thank you for your order',
    ),
    confirmation_body: Iterable[str] = ('order confirmation',),
) -> str:
    """
    Classify an email from keyword phrases in the subject and body.

    Shipping phrases are checked first so a shipped order that repeats its
    confirmation wording still classifies as a shipping notification.
    """
    subject = (email.subject or '').lower()
    content = email.body.lower()

    if any(p in subject for p in shipping_subject) or any(p in content for p in shipping_body):
        return SHIPPING_NOTIFICATION

    if any(p in subject for p in confirmation_subject) or any(p in content for p in confirmation_body):
        return ORDER_CONFIRMATION

    return UNKNOWN


def extract_order_number(
    email: EmailContent,
    subject_pattern: str = SUBJECT_ORDER_PATTERN,
    body_patterns: Iterable[str] = (BODY_ORDER_PATTERN,),
) -> Optional[str]:
    """Subject first, then body patterns in order; first match wins."""
    match = re.search(subject_pattern, email.subject or '', re.IGNORECASE)
    if match:
        return match.group(1)

    content = email.body
    for pattern in body_patterns:
        match = re.search(pattern, content, re.IGNORECASE)
        if match:
            return match.group(1)

    return None


def to_cents(amount: float) -> int:
    """Round a dollar amount to cents, halves rounding up."""
    return math.floor(amount * 100 + 0.5)


def extract_total_cents(content: str, pattern: str) -> Optional[int]:
    """
    Extract an order total in cents.

    Returns None when nothing matches so a genuine $0.00 total is not
    confused with a missing one.
    """
    match = re.search(pattern, content or '', re.IGNORECASE)
    if not match:
        return None

    try:
        amount = float(match.group(1).replace(',', ''))
    except ValueError:
        return None
    return to_cents(amount)


def score_confidence(
    order_number: Optional[str],
    email_type: str,
    tracking_numbers: list[TrackingInfo],
) -> float:
    """Additive confidence for a domain-matched vendor email, capped at 1.0."""
    confidence = BASE_CONFIDENCE
    if order_number:
        confidence += 0.2
    if email_type != UNKNOWN:
        confidence += 0.2
    if tracking_numbers:
        confidence += 0.1
    return min(confidence, 1.0)


def build_vendor_result(
    vendor_id: str,
    email_type: str,
    order_number: Optional[str],
    tracking_numbers: list[TrackingInfo],
    total_cents: Optional[int],
) -> ParsedEmail:
    """Assemble a vendor ParsedEmail with its confidence score."""
    return ParsedEmail(
        type=email_type,
        vendor=vendor_id,
        order_number=order_number,
        tracking_numbers=tracking_numbers or None,
        total_cents=total_cents,
        confidence=score_confidence(order_number, email_type, tracking_numbers),
    )
