"""
Shipping Carrier Parser

Shipping notifications sent directly by UPS (ups.com), FedEx (fedex.com)
and USPS (usps.com, usps.gov). These carry no order details and are used to
update tracking on existing orders.
"""

import re
from typing import Optional

from order_mail.models import SHIPPING_NOTIFICATION, EmailContent, ParsedEmail

from .base import is_from_domain, register_vendor
from .tracking import (
    extract_fedex_ground,
    extract_fedex_legacy,
    extract_tracking_numbers,
    extract_ups,
    extract_usps,
    extract_usps_express,
)


CARRIER_DOMAINS = {
    'ups': ('ups.com',),
    'fedex': ('fedex.com',),
    'usps': ('usps.com', 'usps.gov'),
}

CARRIER_EXTRACTORS = {
    'ups': [extract_ups],
    'fedex': [extract_fedex_ground, extract_fedex_legacy],
    'usps': [extract_usps, extract_usps_express],
}

DELIVERY_PATTERNS = [
    # Scheduled Delivery: Monday, 01/20/2025
    r'Scheduled Delivery:?\s*([A-Za-z]+,?\s*\d{1,2}/\d{1,2}/\d{2,4})',
    r'Expected Delivery:?\s*([A-Za-z]+,?\s*\d{1,2}/\d{1,2}/\d{2,4})',
    r'Delivery:?\s*([A-Za-z]+,?\s*\d{1,2}/\d{1,2}/\d{2,4})',
    # arriving Tuesday, January 21
    r'arriving\s+([A-Za-z]+,?\s*[A-Za-z]+\s+\d{1,2})',
]


def detect_carrier(email: EmailContent) -> Optional[str]:
    """Carrier id from the sending domain, or None for non-carrier senders."""
    for carrier, domains in CARRIER_DOMAINS.items():
        if any(is_from_domain(email.sender, domain) for domain in domains):
            return carrier
    return None


def extract_delivery_estimate(content: str) -> Optional[str]:
    for pattern in DELIVERY_PATTERNS:
        match = re.search(pattern, content or '', re.IGNORECASE)
        if match:
            return match.group(1)
    return None


@register_vendor(
    'carrier', 'Shipping Carrier',
    [domain for domains in CARRIER_DOMAINS.values() for domain in domains],
    priority=40,
)
def parse_carrier_email(email: EmailContent) -> ParsedEmail:
    """
    Parse a carrier shipping notification.

    Always a shipping notification; the vendor is the carrier id.
    Confidence is 0.9 when a tracking number was found, otherwise 0.5.
    """
    carrier = detect_carrier(email)
    content = email.body

    tracking_numbers = extract_tracking_numbers(content, CARRIER_EXTRACTORS.get(carrier, []))

    return ParsedEmail(
        type=SHIPPING_NOTIFICATION,
        vendor=carrier or 'carrier',
        tracking_numbers=tracking_numbers or None,
        estimated_delivery=extract_delivery_estimate(content),
        confidence=0.9 if tracking_numbers else 0.5,
    )
