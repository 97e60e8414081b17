"""
Extraction Schema

Pydantic models for the structured data the extraction agent returns.
Field names are snake_case in Python and camelCase on the wire; JSON null
is accepted for every optional field and becomes None.

EXTRACTION_SCHEMA_DESCRIPTION is the contract embedded in the prompt.
Changing it requires bumping EXTRACTION_SCHEMA_VERSION.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


EXTRACTION_SCHEMA_VERSION = "1"

EmailType = Literal[
    "order_confirmation",
    "shipping_notification",
    "delivery_confirmation",
    "order_update",
    "invoice",
    "unknown",
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LineItem(CamelModel):
    """Single line item from an order."""
    part_number: Optional[str] = None
    description: str
    quantity: StrictInt = Field(gt=0)
    unit_price_cents: Optional[StrictInt] = None  # 1299 = $12.99
    for_team: bool = True  # False when the mentor says the item is not for the team


class TrackingEntry(CamelModel):
    carrier: str  # free-form from the model; normalized by the adapter
    tracking_number: str
    estimated_delivery: Optional[str] = None


class VendorInfo(CamelModel):
    """Vendor contact details used to create or update vendor records."""
    name: str
    domain: Optional[str] = None
    website: Optional[str] = None
    order_support_email: Optional[str] = None
    order_support_phone: Optional[str] = None
    tech_support_email: Optional[str] = None
    tech_support_phone: Optional[str] = None
    returns_contact: Optional[str] = None
    account_number: Optional[str] = None


class ExtractedEmail(CamelModel):
    """Complete extraction result. All currency values are integer cents."""
    email_type: EmailType
    vendor: str
    vendor_info: Optional[VendorInfo] = None
    order_number: Optional[str] = None
    order_date: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal_cents: Optional[StrictInt] = None
    tax_cents: Optional[StrictInt] = None
    shipping_cents: Optional[StrictInt] = None
    total_cents: Optional[StrictInt] = None
    tracking: List[TrackingEntry] = Field(default_factory=list)
    shipping_address: Optional[str] = None
    mentor_notes: Optional[str] = None
    # strict: numeric strings are rejected, JSON integers still pass
    confidence: StrictFloat = Field(ge=0, le=1)
    extraction_notes: Optional[str] = None


EXTRACTION_SCHEMA_DESCRIPTION = """
{
  "emailType": "order_confirmation" | "shipping_notification" | "delivery_confirmation" | "order_update" | "invoice" | "unknown",
  "vendor": "string - vendor name like 'REV Robotics', 'goBILDA', 'AndyMark', 'Amazon'",
  "vendorInfo": {
    "name": "string - vendor name",
    "domain": "string - domain from sender email (e.g., 'revrobotics.com')",
    "website": "string - vendor website URL if mentioned",
    "orderSupportEmail": "string - order/sales support email if found in email",
    "orderSupportPhone": "string - order/sales support phone if found",
    "techSupportEmail": "string - tech support email if found",
    "techSupportPhone": "string - tech support phone if found",
    "returnsContact": "string - returns/RMA email or URL if found",
    "accountNumber": "string - customer account number if visible in email"
  },
  "orderNumber": "string - the order ID/number from the vendor",
  "orderDate": "string - order date in ISO format if mentioned",
  "items": [
    {
      "partNumber": "string - SKU or part number",
      "description": "string - item description",
      "quantity": "number - quantity ordered",
      "unitPriceCents": "number - price in cents (e.g., 1299 for $12.99)",
      "forTeam": "boolean - true if this item is for the team, false if mentor says it's not"
    }
  ],
  "subtotalCents": "number - subtotal in cents before tax/shipping",
  "taxCents": "number - tax amount in cents",
  "shippingCents": "number - shipping cost in cents",
  "totalCents": "number - total order amount in cents",
  "tracking": [
    {
      "carrier": "string - carrier name: 'ups', 'fedex', 'usps', 'dhl'",
      "trackingNumber": "string - tracking number",
      "estimatedDelivery": "string - estimated delivery date if mentioned"
    }
  ],
  "shippingAddress": "string - shipping address if mentioned",
  "mentorNotes": "string - any notes from the forwarding mentor about this order",
  "confidence": "number 0-1 - how confident you are in this extraction",
  "extractionNotes": "string - any warnings or notes about unclear data"
}
"""


def validate_extraction(data) -> ExtractedEmail:
    """
    Validate decoded agent output against the schema.

    Raises:
        pydantic.ValidationError: when required fields are missing or a
            value is out of range
    """
    return ExtractedEmail.model_validate(data)
