"""
Email Parsing Utilities

HTML to text conversion for the agent prompt body.
"""

import re

from bs4 import BeautifulSoup

from order_mail.models import EmailContent


def html_to_text(html: str) -> str:
    """
    Convert HTML to plain text.

    Args:
        html: HTML content

    Returns:
        Plain text content
    """
    if not html:
        return ''

    soup = BeautifulSoup(html, 'lxml')

    # Remove script and style elements
    for element in soup(['script', 'style', 'head', 'meta', 'noscript']):
        element.decompose()

    # Get text and clean up whitespace
    text = soup.get_text(separator=' ')
    text = re.sub(r'\s+', ' ', text)

    return text.strip()


def prompt_body(email: EmailContent) -> str:
    """Text part when present, otherwise the HTML part flattened to text."""
    if email.text:
        return email.text
    return html_to_text(email.html or '')
