"""
goBILDA Parser

goBILDA order numbers may carry a "GB-" prefix ("Your goBILDA Order #GB-54321").
"""

from order_mail.models import EmailContent, ParsedEmail

from .base import (
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


GOBILDA_SUBJECT_ORDER_PATTERN = r'Order\s*#?\s*(GB-\d+|\d+)'
GOBILDA_ORDER_PATTERNS = (
    r'Order\s*(?:#|Number:?)\s*(GB-\d+|\d+)',
)

# Word boundary keeps "Subtotal" from being read as the order total
GOBILDA_TOTAL_PATTERN = r'(?:Order\s+)?\bTotal:?\s*\$?([\d,]+\.?\d*)'


@register_vendor('gobilda', 'goBILDA', ['gobilda.com'], priority=20)
def parse_gobilda_email(email: EmailContent) -> ParsedEmail:
    email_type = determine_email_type(email)
    order_number = extract_order_number(
        email,
        subject_pattern=GOBILDA_SUBJECT_ORDER_PATTERN,
        body_patterns=GOBILDA_ORDER_PATTERNS,
    )
    if order_number:
        order_number = order_number.upper()
    tracking_numbers = extract_tracking_numbers(
        email.body,
        [extract_ups, extract_usps, extract_fedex_before_keyword],
    )
    total_cents = extract_total_cents(email.body, GOBILDA_TOTAL_PATTERN)

    return build_vendor_result('gobilda', email_type, order_number, tracking_numbers, total_cents)
