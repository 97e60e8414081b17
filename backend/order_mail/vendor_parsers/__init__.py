"""
Vendor Parsers - Sender-Specific Email Parsers

This package contains the deterministic parsers for FTC parts vendors and
shipping carriers:
- rev.py: REV Robotics
- gobilda.py: goBILDA
- andymark.py: AndyMark
- carriers.py: UPS, FedEx, USPS shipping notifications
- tracking.py: carrier tracking-number grammars and URL templates

Usage:
    from order_mail.vendor_parsers import find_parser

    parser = find_parser(email)
    if parser:
        result = parser.parse(email)
"""

# Import registry and utilities from base
from .base import (
    VENDOR_PARSERS,
    VendorParser,
    find_parser,
    get_domain_from_email,
    is_from_domain,
)
from .tracking import build_tracking_url, detect_carrier_from_number

# Import vendor modules to trigger @register_vendor decorators
from . import rev
from . import gobilda
from . import andymark
from . import carriers

__all__ = [
    'VENDOR_PARSERS',
    'VendorParser',
    'find_parser',
    'get_domain_from_email',
    'is_from_domain',
    'build_tracking_url',
    'detect_carrier_from_number',
]
