"""
Email Parsing Data Model

Value types shared by the deterministic vendor parsers, the forwarded-email
unwrapper and the LLM result adapter. All records are short-lived and
created per incoming email.
"""

from dataclasses import dataclass
from typing import Optional


# Email types produced by the deterministic parsers
ORDER_CONFIRMATION = "order_confirmation"
SHIPPING_NOTIFICATION = "shipping_notification"
UNKNOWN = "unknown"

# Carrier ids used in TrackingInfo.carrier
CARRIERS = ("ups", "fedex", "usps", "dhl", "other")


@dataclass(frozen=True)
class EmailContent:
    """Raw inbound email. `sender` is the RFC-loose From address."""

    sender: str
    to: str
    subject: str
    html: Optional[str] = None
    text: Optional[str] = None

    @property
    def body(self) -> str:
        """Body the parsers scan: HTML when present, otherwise plain text."""
        return self.html or self.text or ""

    @classmethod
    def from_dict(cls, payload: dict) -> "EmailContent":
        """Build from the wire shape ({from, to, subject, html?, text?})."""
        return cls(
            sender=payload.get("from") or payload.get("sender") or "",
            to=payload.get("to") or "",
            subject=payload.get("subject") or "",
            html=payload.get("html"),
            text=payload.get("text"),
        )


@dataclass
class TrackingInfo:
    carrier: str
    tracking_number: str
    tracking_url: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"carrier": self.carrier, "trackingNumber": self.tracking_number}
        if self.tracking_url:
            result["trackingUrl"] = self.tracking_url
        return result


@dataclass
class ParsedItem:
    """Line item from an order (deterministic or adapted from the LLM)."""

    name: str
    quantity: int = 1
    sku: Optional[str] = None
    price_cents: Optional[int] = None
    for_team: bool = True

    def to_dict(self) -> dict:
        result = {"name": self.name, "quantity": self.quantity, "forTeam": self.for_team}
        if self.sku is not None:
            result["sku"] = self.sku
        if self.price_cents is not None:
            result["priceCents"] = self.price_cents
        return result


@dataclass
class ParsedEmail:
    """
    Output contract of the deterministic pipeline.

    confidence is 0 only for unknown results where no parser matched or
    the matched parser raised. Fields not found in the email stay None;
    a total of 0 is a real total.
    """

    type: str
    vendor: str
    confidence: float
    order_number: Optional[str] = None
    tracking_numbers: Optional[list[TrackingInfo]] = None
    total_cents: Optional[int] = None
    estimated_delivery: Optional[str] = None
    items: Optional[list[ParsedItem]] = None

    @classmethod
    def unknown(cls, vendor: str = UNKNOWN) -> "ParsedEmail":
        return cls(type=UNKNOWN, vendor=vendor, confidence=0)

    def to_dict(self) -> dict:
        """Render the camelCase wire shape, omitting absent fields."""
        result = {
            "type": self.type,
            "vendor": self.vendor,
            "confidence": self.confidence,
        }
        if self.order_number is not None:
            result["orderNumber"] = self.order_number
        if self.tracking_numbers:
            result["trackingNumbers"] = [t.to_dict() for t in self.tracking_numbers]
        if self.total_cents is not None:
            result["totalCents"] = self.total_cents
        if self.estimated_delivery is not None:
            result["estimatedDelivery"] = self.estimated_delivery
        if self.items:
            result["items"] = [item.to_dict() for item in self.items]
        return result


@dataclass
class AgentParsedEmail(ParsedEmail):
    """ParsedEmail produced from an LLM extraction, with the agent's notes."""

    mentor_notes: Optional[str] = None
    extraction_notes: Optional[str] = None

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.mentor_notes is not None:
            result["mentorNotes"] = self.mentor_notes
        if self.extraction_notes is not None:
            result["extractionNotes"] = self.extraction_notes
        return result


@dataclass
class ForwardedEmailContent:
    """Original message recovered from a forwarding envelope. Never persisted."""

    original_from: str
    original_body: str
    is_html: bool
    original_subject: Optional[str] = None
    original_date: Optional[str] = None
