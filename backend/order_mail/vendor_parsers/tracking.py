"""
Carrier Tracking Number Grammars

Regex extractors for UPS, FedEx and USPS tracking identifiers and the
carrier tracking URL templates. The same templates are used by the LLM
result adapter so both paths produce identical URLs.
"""

import re
from typing import Callable, Iterable, Optional

from order_mail.models import TrackingInfo


TRACKING_URL_TEMPLATES = {
    'ups': 'https://www.ups.com/track?tracknum={number}',
    'fedex': 'https://www.fedex.com/fedextrack/?trknbr={number}',
    'usps': 'https://tools.usps.com/go/TrackConfirmAction?tLabels={number}',
    'dhl': 'https://www.dhl.com/en/express/tracking.html?AWB={number}',
}

UPS_PATTERN = re.compile(r'\b(1Z[A-Z0-9]{16,18})\b', re.IGNORECASE)
USPS_PATTERN = re.compile(r'\b((?:92|93|94|95)\d{18,20})\b')
USPS_EXPRESS_PATTERN = re.compile(r'\b(E[ABC]\d{9}US)\b', re.IGNORECASE)

# FedEx numbers are bare digit runs, so vendors only trust them near a keyword
FEDEX_BEFORE_KEYWORD_PATTERN = re.compile(r'\b(\d{12,22})\b(?=.*(?:fedex|tracking))', re.IGNORECASE)
FEDEX_AFTER_KEYWORD_PATTERN = re.compile(r'(?:fedex|tracking)[^\d]*(\d{12,22})', re.IGNORECASE)
FEDEX_AFTER_TRACKING_PATTERN = re.compile(r'tracking[^0-9]*(\d{12,15})(?!\d)', re.IGNORECASE)
FEDEX_GROUND_PATTERN = re.compile(r'\b(\d{12,15})\b')
FEDEX_LEGACY_PATTERN = re.compile(r'\b(\d{34})\b')

TrackingExtractor = Callable[[str], list[TrackingInfo]]


def build_tracking_url(carrier: str, tracking_number: str) -> Optional[str]:
    """Carrier tracking URL, or None for carriers without a template."""
    template = TRACKING_URL_TEMPLATES.get((carrier or '').lower())
    if not template:
        return None
    return template.format(number=tracking_number)


def make_tracking(carrier: str, tracking_number: str) -> TrackingInfo:
    return TrackingInfo(
        carrier=carrier,
        tracking_number=tracking_number,
        tracking_url=build_tracking_url(carrier, tracking_number),
    )


def _collect(pattern: re.Pattern, content: str, carrier: str, upper: bool = False) -> list[TrackingInfo]:
    results = []
    for match in pattern.finditer(content or ''):
        number = match.group(1).upper() if upper else match.group(1)
        results.append(make_tracking(carrier, number))
    return results


def extract_ups(content: str) -> list[TrackingInfo]:
    """UPS: 1Z followed by 16-18 alphanumerics, upper-cased."""
    return _collect(UPS_PATTERN, content, 'ups', upper=True)


def extract_usps(content: str) -> list[TrackingInfo]:
    """USPS: 20-22 digits starting with 92, 93, 94 or 95."""
    return _collect(USPS_PATTERN, content, 'usps')


def extract_usps_express(content: str) -> list[TrackingInfo]:
    """USPS Priority Mail Express: EA/EB/EC + 9 digits + US."""
    return _collect(USPS_EXPRESS_PATTERN, content, 'usps', upper=True)


def extract_fedex_before_keyword(content: str) -> list[TrackingInfo]:
    """12-22 digits followed later on the same line by 'fedex' or 'tracking'."""
    return _collect(FEDEX_BEFORE_KEYWORD_PATTERN, content, 'fedex')


def extract_fedex_after_keyword(content: str) -> list[TrackingInfo]:
    """12-22 digits preceded by 'fedex' or 'tracking'."""
    return _collect(FEDEX_AFTER_KEYWORD_PATTERN, content, 'fedex')


def extract_fedex_after_tracking(content: str) -> list[TrackingInfo]:
    """12-15 digits after 'tracking' that are not the head of a longer number."""
    return _collect(FEDEX_AFTER_TRACKING_PATTERN, content, 'fedex')


def extract_fedex_ground(content: str) -> list[TrackingInfo]:
    """FedEx Ground/Express: bare 12-15 digit runs (carrier emails only)."""
    return _collect(FEDEX_GROUND_PATTERN, content, 'fedex')


def extract_fedex_legacy(content: str) -> list[TrackingInfo]:
    """FedEx Express legacy 34-digit form (carrier emails only)."""
    return _collect(FEDEX_LEGACY_PATTERN, content, 'fedex')


def extract_tracking_numbers(content: str, extractors: Iterable[TrackingExtractor]) -> list[TrackingInfo]:
    """
    Run each extractor and union the results.

    Duplicates are dropped by literal tracking number; the first extractor
    to report a number decides its carrier.
    """
    seen = set()
    results = []
    for extractor in extractors:
        for info in extractor(content):
            if info.tracking_number in seen:
                continue
            seen.add(info.tracking_number)
            results.append(info)
    return results


def detect_carrier_from_number(tracking_number: str) -> Optional[str]:
    """
    Carrier whose grammar matches the whole tracking number.

    UPS and USPS forms are checked before FedEx because FedEx accepts any
    digit run of the right length.
    """
    number = (tracking_number or '').strip()
    if not number:
        return None
    if UPS_PATTERN.fullmatch(number):
        return 'ups'
    if USPS_PATTERN.fullmatch(number) or USPS_EXPRESS_PATTERN.fullmatch(number):
        return 'usps'
    if re.fullmatch(r'\d{12,22}|\d{34}', number):
        return 'fedex'
    return None
