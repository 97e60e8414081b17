"""
REV Robotics Parser

Order confirmations ("Your REV Robotics Order #123456") and shipping
notifications ("Your REV Robotics order has shipped").
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
    extract_fedex_before_keyword,
    extract_tracking_numbers,
    extract_ups,
    extract_usps,
)


REV_ORDER_PATTERNS = (
    BODY_ORDER_PATTERN,
    r'order_id[=:]\s*(\d+)',
)

REV_TOTAL_PATTERN = r'(?:Order\s+)?Total:?\s*\$?([\d,]+\.?\d*)'


@register_vendor('rev', 'REV Robotics', ['revrobotics.com'], priority=10)
def parse_rev_email(email: EmailContent) -> ParsedEmail:
    """
    Parse REV Robotics emails.

    Extracts: email type, order number (subject, body, order_id= links),
    UPS/FedEx/USPS tracking numbers, order total.
    """
    email_type = determine_email_type(
        email,
        confirmation_body=('order confirmation', 'we received your order'),
    )
    order_number = extract_order_number(email, body_patterns=REV_ORDER_PATTERNS)
    tracking_numbers = extract_tracking_numbers(
        email.body,
        [extract_ups, extract_usps, extract_fedex_before_keyword],
    )
    total_cents = extract_total_cents(email.body, REV_TOTAL_PATTERN)

    return build_vendor_result('rev', email_type, order_number, tracking_numbers, total_cents)
