"""Tests for forwarded email unwrapping.

Mentors forward vendor emails from Gmail, Outlook and Apple Mail. The
unwrapper must recover the original vendor sender so the right parser
runs on the original content.
"""

import pytest

from order_mail.email_parsing import (
    extract_email_address,
    extract_original_email,
    is_forwarded_email,
    parse_email,
    parse_forwarded_email,
)
from order_mail.email_parsing.forwarded import html_to_plain_lines, parse_forward_headers

MENTOR = "Coach Smith <coach@example.com>"

# ============================================================================
# DETECTION
# ============================================================================


@pytest.mark.parametrize("subject", ["Fwd: Your order", "FW: Your order", "fw: Your order"])
def test_forward_subject_prefixes_are_detected(make_email, subject):
    assert is_forwarded_email(make_email(MENTOR, subject, text=""))


@pytest.mark.parametrize(
    "body",
    [
        "---------- Forwarded message ---------\nFrom: a@b.com",
        "-----Original Message-----\nFrom: a@b.com",
        "Begin forwarded message:\n\nFrom: a@b.com",
    ],
)
def test_forward_banners_are_detected(make_email, body):
    assert is_forwarded_email(make_email(MENTOR, "Parts order", text=body))


def test_direct_vendor_email_is_not_forwarded(make_email):
    email = make_email("orders@revrobotics.com", "Your REV Robotics Order #1", text="Order Number: 1")

    assert not is_forwarded_email(email)


@pytest.mark.parametrize(
    "value,address",
    [
        ("REV Robotics <Orders@RevRobotics.com>", "orders@revrobotics.com"),
        ("<orders@gobilda.com>", "orders@gobilda.com"),
        ("orders@andymark.com", "orders@andymark.com"),
        ("No address here", None),
    ],
)
def test_extract_email_address(value, address):
    assert extract_email_address(value) == address


# ============================================================================
# HEADER PARSING
# ============================================================================


def test_parse_forward_headers_stops_at_first_blank_line():
    content = "\n\nFrom: orders@revrobotics.com\nSubject: Order #1\n\nSubject: not a header\n"

    headers = parse_forward_headers(content, 0)

    assert headers["from"] == "orders@revrobotics.com"
    assert headers["subject"] == "Order #1"
    assert content[headers["header_end"]:] == "Subject: not a header\n"


def test_html_to_plain_lines_keeps_header_lines():
    html = "From: <b>REV</b> &lt;orders@revrobotics.com&gt;<br>Subject: Order&nbsp;#1</div>"

    text = html_to_plain_lines(html)

    assert text.splitlines() == ["From: REV <orders@revrobotics.com>", "Subject: Order #1"]


def test_html_to_plain_lines_decodes_all_entities():
    html = (
        "<table><tr><td>From:</td><td>AndyMark &amp; Co &#60;orders&#64;andymark.com&gt;</td></tr>"
        "<tr><td>Subject:</td><td>Order&#x20;#98765</td></tr></table>"
    )

    text = html_to_plain_lines(html)

    assert text.splitlines() == ["From: AndyMark & Co <orders@andymark.com>", "Subject: Order #98765"]


def test_forward_subject_needs_colon(make_email):
    assert not is_forwarded_email(make_email(MENTOR, "Fwd order details", text=""))


# ============================================================================
# CLIENT FORMATS
# ============================================================================


def test_gmail_text_forward(make_email, load_sample_email):
    email = make_email(MENTOR, "Fwd: Your REV Robotics Order #123456", text=load_sample_email("gmail_forward_rev.txt"))

    forwarded = parse_forwarded_email(email)

    assert forwarded.original_from == "orders@revrobotics.com"
    assert forwarded.original_subject == "Your REV Robotics Order #123456"
    assert forwarded.original_date == "Mon, Jan 13, 2025 at 10:15 AM"
    assert forwarded.is_html is False
    assert forwarded.original_body.startswith("Order Confirmation")


def test_gmail_html_forward(make_email, load_sample_email):
    email = make_email(MENTOR, "Fwd: Your REV Robotics Order #123456", html=load_sample_email("gmail_forward_rev.html"))

    forwarded = parse_forwarded_email(email)

    assert forwarded.original_from == "orders@revrobotics.com"
    assert forwarded.original_subject == "Your REV Robotics Order #123456"
    assert forwarded.is_html is True
    assert "Order Total: $156.99" in forwarded.original_body
    assert "Hey team" not in forwarded.original_body


def test_outlook_forward_uses_sent_as_date(make_email, load_sample_email):
    email = make_email(MENTOR, "FW: Your goBILDA Order #GB-54321", text=load_sample_email("outlook_forward_gobilda.txt"))

    forwarded = parse_forwarded_email(email)

    assert forwarded.original_from == "orders@gobilda.com"
    assert forwarded.original_date == "Tuesday, January 14, 2025 9:00 AM"


def test_apple_mail_forward(make_email, load_sample_email):
    email = make_email(MENTOR, "Fwd: AndyMark Order Confirmation #98765", text=load_sample_email("apple_forward_andymark.txt"))

    forwarded = parse_forwarded_email(email)

    assert forwarded.original_from == "orders@andymark.com"
    assert forwarded.original_subject == "AndyMark Order Confirmation #98765"


def test_generic_forward_without_banner_uses_vendor_from_line(make_email):
    text = (
        "FYI for the team\n\n"
        "From: orders@revrobotics.com\n"
        "Subject: Your REV Robotics order has shipped\n\n"
        "Your order #789012 has shipped!\n"
        "Tracking Number: 1Z999AA10123456784\n"
    )
    email = make_email(MENTOR, "Fwd: shipped", text=text)

    forwarded = parse_forwarded_email(email)

    assert forwarded.original_from == "orders@revrobotics.com"
    assert forwarded.original_body.startswith("Your order #789012")


def test_forward_without_original_sender_returns_none(make_email):
    email = make_email(MENTOR, "Fwd: lunch", text="---------- Forwarded message ---------\nSee you at noon")

    assert parse_forwarded_email(email) is None


def test_extract_original_email_keeps_outer_recipient(make_email, load_sample_email):
    email = make_email(MENTOR, "Fwd: order", text=load_sample_email("gmail_forward_rev.txt"))

    original = extract_original_email(parse_forwarded_email(email), email)

    assert original.sender == "orders@revrobotics.com"
    assert original.to == email.to
    assert original.html is None
    assert original.text.startswith("Order Confirmation")


# ============================================================================
# PIPELINE ROUND TRIP
# ============================================================================


@pytest.mark.parametrize("part", ["text", "html"])
def test_gmail_forwarded_rev_order_parses_as_rev(make_email, load_sample_email, part):
    filename = "gmail_forward_rev.txt" if part == "text" else "gmail_forward_rev.html"
    email = make_email(MENTOR, "Fwd: Your REV Robotics Order #123456", **{part: load_sample_email(filename)})

    result = parse_email(email)

    assert result.type == "order_confirmation"
    assert result.vendor == "rev"
    assert result.order_number == "123456"
    assert result.total_cents == 15699


def test_outlook_forwarded_gobilda_order(make_email, load_sample_email):
    email = make_email(MENTOR, "FW: Your goBILDA Order #GB-54321", text=load_sample_email("outlook_forward_gobilda.txt"))

    result = parse_email(email)

    assert result.vendor == "gobilda"
    assert result.order_number == "GB-54321"
    assert result.total_cents == 8999


def test_apple_forwarded_andymark_order(make_email, load_sample_email):
    email = make_email(MENTOR, "Fwd: AndyMark Order Confirmation #98765", text=load_sample_email("apple_forward_andymark.txt"))

    result = parse_email(email)

    assert result.type == "order_confirmation"
    assert result.vendor == "andymark"
    assert result.total_cents == 24500


def test_forward_from_unknown_vendor_is_unknown(make_email):
    text = "---------- Forwarded message ---------\nFrom: Shop <sales@example-store.com>\nSubject: Order #5\n\nThanks"

    result = parse_email(make_email(MENTOR, "Fwd: Order #5", text=text))

    assert result.vendor == "unknown"
    assert result.confidence == 0
