"""
Agent Result Adapter

Converts an ExtractedEmail into the ParsedEmail contract used by the
deterministic parsers, so downstream order logic handles both paths alike.
"""

import re
from typing import Optional

from order_mail.models import AgentParsedEmail, ParsedItem, TrackingInfo
from order_mail.vendor_parsers import build_tracking_url, detect_carrier_from_number

from .schema import ExtractedEmail


# Substrings of free-form carrier names, checked in order
CARRIER_ALIASES = (
    ('usps', 'usps'),
    ('postal', 'usps'),
    ('fedex', 'fedex'),
    ('federal express', 'fedex'),
    ('dhl', 'dhl'),
    ('ups', 'ups'),
    ('united parcel', 'ups'),
)


def vendor_id_from_name(vendor: str) -> str:
    """'REV Robotics' -> 'rev_robotics'"""
    return re.sub(r'\s+', '_', vendor.lower())


def normalize_carrier(carrier: Optional[str], tracking_number: str) -> str:
    """
    Map the model's carrier name onto ups/fedex/usps/dhl/other.

    Unrecognised names fall back to the tracking number's format.
    """
    name = (carrier or '').strip().lower()
    for alias, carrier_id in CARRIER_ALIASES:
        if alias in name:
            return carrier_id
    return detect_carrier_from_number(tracking_number) or 'other'


def to_parser_result(extraction: ExtractedEmail) -> AgentParsedEmail:
    tracking_numbers = []
    for entry in extraction.tracking:
        carrier = normalize_carrier(entry.carrier, entry.tracking_number)
        tracking_numbers.append(
            TrackingInfo(
                carrier=carrier,
                tracking_number=entry.tracking_number,
                tracking_url=build_tracking_url(carrier, entry.tracking_number),
            )
        )

    items = [
        ParsedItem(
            name=item.description,
            quantity=item.quantity,
            sku=item.part_number,
            price_cents=item.unit_price_cents,
            for_team=item.for_team,
        )
        for item in extraction.items
    ]

    estimated_delivery = next(
        (entry.estimated_delivery for entry in extraction.tracking if entry.estimated_delivery),
        None,
    )

    return AgentParsedEmail(
        type=extraction.email_type,
        vendor=vendor_id_from_name(extraction.vendor),
        confidence=extraction.confidence,
        order_number=extraction.order_number,
        tracking_numbers=tracking_numbers or None,
        total_cents=extraction.total_cents,
        estimated_delivery=estimated_delivery,
        items=items or None,
        mentor_notes=extraction.mentor_notes,
        extraction_notes=extraction.extraction_notes,
    )
