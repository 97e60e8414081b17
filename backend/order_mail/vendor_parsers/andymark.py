"""
AndyMark Parser

AndyMark uses numeric order ids, "Grand Total" summaries, and often ships
with FedEx.
"""

from order_mail.models import EmailContent, ParsedEmail

from .base import (
    BODY_ORDER_PATTERN,
    build_vendor_result,
    determine_email_type,
    extract_order_number,
    extract_total_cents,
    register_vendor,
)
from .tracking import (
    extract_fedex_after_keyword,
    extract_fedex_after_tracking,
    extract_tracking_numbers,
    extract_ups,
    extract_usps,
)


ANDYMARK_ORDER_PATTERNS = (
    BODY_ORDER_PATTERN,
    r'Invoice\s*(?:#|Number:?)\s*(\d+)',
)

ANDYMARK_TOTAL_PATTERN = r'(?:Grand\s+)?Total:?\s*\$?([\d,]+\.?\d*)'


@register_vendor('andymark', 'AndyMark', ['andymark.com'], priority=30)
def parse_andymark_email(email: EmailContent) -> ParsedEmail:
    """
    Parse AndyMark emails.

    FedEx numbers are taken after a "fedex"/"tracking" keyword, with a
    shorter 12-15 digit fallback after "tracking".
    """
    email_type = determine_email_type(
        email,
        shipping_subject=('shipped', 'shipping', 'on the way'),
    )
    order_number = extract_order_number(email, body_patterns=ANDYMARK_ORDER_PATTERNS)
    tracking_numbers = extract_tracking_numbers(
        email.body,
        [extract_ups, extract_usps, extract_fedex_after_keyword, extract_fedex_after_tracking],
    )
    total_cents = extract_total_cents(email.body, ANDYMARK_TOTAL_PATTERN)

    return build_vendor_result('andymark', email_type, order_number, tracking_numbers, total_cents)
