"""
Forwarded Email Unwrapping

Detects mail-client forwarding envelopes and recovers the original sender,
subject, date and body so vendor matching can run on the real source.

Supported formats:
- Gmail: "---------- Forwarded message ---------"
- Outlook: "-----Original Message-----"
- Apple Mail: "Begin forwarded message:"
- Generic: a "From:" header naming a known vendor or carrier
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

from order_mail.models import EmailContent, ForwardedEmailContent


GMAIL_MARKER = re.compile(r'-{5,}\s*Forwarded message\s*-{5,}', re.IGNORECASE)
OUTLOOK_MARKER = re.compile(r'-{5,}\s*Original Message\s*-{5,}', re.IGNORECASE)
APPLE_MARKER = re.compile(r'Begin forwarded message:', re.IGNORECASE)
FORWARD_MARKERS = (GMAIL_MARKER, OUTLOOK_MARKER, APPLE_MARKER)

SUBJECT_FORWARD = re.compile(r'^Fwd?:\s*', re.IGNORECASE)

# Substrings of vendor/carrier sender domains used when no banner is present
KNOWN_SENDER_HINTS = 'revrobotics|gobilda|andymark|ups|fedex|usps'

VENDOR_FROM_BRACKETED = re.compile(
    rf'From:\s*[^<\n]*<([^>]*(?:{KNOWN_SENDER_HINTS})[^>]*)>',
    re.IGNORECASE,
)
VENDOR_FROM_TEXT = re.compile(
    rf'From:\s*[^<\n]*(?:<[^>]*(?:{KNOWN_SENDER_HINTS})[^>]*>|[^\s]*(?:{KNOWN_SENDER_HINTS})[^\s]*)',
    re.IGNORECASE,
)

HEADER_LINE = re.compile(r'^(From|Subject|Date|Sent|To|Cc):\s*(.*)', re.IGNORECASE)
BRACKETED_ADDRESS = re.compile(r'<([^>]+@[^>]+)>')
BARE_ADDRESS = re.compile(r'([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})')

HEADER_SCAN_CHARS = 1000
HEADER_SCAN_LINES = 20

def is_forwarded_email(email: EmailContent) -> bool:
    """Check the subject prefix and the body for forwarding banners."""
    if email.subject and SUBJECT_FORWARD.match(email.subject):
        return True

    content = email.body
    return any(marker.search(content) for marker in FORWARD_MARKERS)


def extract_email_address(from_value: str) -> Optional[str]:
    """
    Extract the address from a From: header value.

    Handles "Name <email@domain.com>", "<email@domain.com>" and bare addresses.
    """
    match = BRACKETED_ADDRESS.search(from_value)
    if match:
        return match.group(1).strip().lower()

    match = BARE_ADDRESS.search(from_value)
    if match:
        return match.group(1).lower()

    return None


def find_banner_end(content: str) -> Optional[int]:
    """Offset just past the earliest forwarding banner, or None."""
    matches = [m for m in (marker.search(content) for marker in FORWARD_MARKERS) if m]
    if not matches:
        return None
    return min(matches, key=lambda m: m.start()).end()


def html_to_plain_lines(html: str) -> str:
    """
    Convert forwarded HTML to text that keeps header lines intact.

    Line breaks and block ends become newlines so "From:"/"Subject:" headers
    land on their own lines; only horizontal whitespace is collapsed.
    """
    if not html:
        return ''

    soup = BeautifulSoup(html, 'lxml')

    for element in soup(['script', 'style', 'head', 'meta', 'noscript']):
        element.decompose()

    for br in soup.find_all('br'):
        br.replace_with('\n')
    for block in soup.find_all(['div', 'p', 'tr']):
        block.append('\n')
    for cell in soup.find_all('td'):
        cell.append(' ')

    text = soup.get_text('')
    text = re.sub(r'[^\S\n]+', ' ', text)
    text = re.sub(r' ?\n ?', '\n', text)
    return text


def parse_forward_headers(content: str, start: int) -> dict:
    """
    Parse the forwarded header block that begins at `start`.

    Scans at most 20 lines / 1000 characters. Leading blank lines are
    skipped; the first blank line after a header ends the block.

    Returns:
        Dict with optional 'from', 'subject', 'date' and the absolute
        'header_end' offset in `content`.
    """
    lines = content[start:start + HEADER_SCAN_CHARS].splitlines(keepends=True)
    headers = {}
    seen_header = False
    end_line = 0

    for index, raw_line in enumerate(lines[:HEADER_SCAN_LINES]):
        line = raw_line.strip()

        if not line:
            if seen_header:
                end_line = index + 1
                break
            continue

        match = HEADER_LINE.match(line)
        if not match:
            continue

        name = match.group(1).lower()
        value = match.group(2).strip()
        seen_header = True
        end_line = index + 1

        if name == 'from':
            address = extract_email_address(value)
            if address:
                headers['from'] = address
        elif name == 'subject' and value:
            headers['subject'] = value
        elif name in ('date', 'sent') and value:
            headers['date'] = value

    headers['header_end'] = start + sum(len(line) for line in lines[:end_line])
    return headers


def _parse_html_forward(html: str) -> Optional[ForwardedEmailContent]:
    marker_pos = find_banner_end(html)
    if marker_pos is None:
        match = VENDOR_FROM_BRACKETED.search(html)
        if not match:
            return None
        marker_pos = match.start()

    # Raw tag soup breaks the header-line regex, so re-scan as plain text
    text = html_to_plain_lines(html)
    text_start = find_banner_end(text)
    if text_start is None:
        match = VENDOR_FROM_TEXT.search(text)
        text_start = match.start() if match else 0

    headers = parse_forward_headers(text, text_start)
    if not headers.get('from'):
        return None

    return ForwardedEmailContent(
        original_from=headers['from'],
        original_subject=headers.get('subject'),
        original_date=headers.get('date'),
        original_body=html[marker_pos:],
        is_html=True,
    )


def _parse_text_forward(text: str) -> Optional[ForwardedEmailContent]:
    marker_pos = find_banner_end(text)
    if marker_pos is None:
        match = VENDOR_FROM_TEXT.search(text)
        if not match:
            return None
        marker_pos = match.start()

    headers = parse_forward_headers(text, marker_pos)
    if not headers.get('from'):
        return None

    return ForwardedEmailContent(
        original_from=headers['from'],
        original_subject=headers.get('subject'),
        original_date=headers.get('date'),
        original_body=text[headers['header_end']:],
        is_html=False,
    )


def parse_forwarded_email(email: EmailContent) -> Optional[ForwardedEmailContent]:
    """
    Recover the original message from a forwarded email.

    HTML is tried first, then plain text.

    Returns:
        ForwardedEmailContent, or None when no original sender was found
    """
    if email.html:
        result = _parse_html_forward(email.html)
        if result:
            return result

    if email.text:
        result = _parse_text_forward(email.text)
        if result:
            return result

    return None


def extract_original_email(forwarded: ForwardedEmailContent, email: EmailContent) -> EmailContent:
    """Build the EmailContent the vendor parsers should see for a forward."""
    return EmailContent(
        sender=forwarded.original_from,
        to=email.to,
        subject=forwarded.original_subject or email.subject,
        html=forwarded.original_body if forwarded.is_html else None,
        text=None if forwarded.is_html else forwarded.original_body,
    )
