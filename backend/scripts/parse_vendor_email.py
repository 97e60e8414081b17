#!/usr/bin/env python3
"""
Parse vendor emails from JSON files and print the extracted data.

Each file holds one email in the inbound shape:
    {"from": "...", "to": "...", "subject": "...", "html": "...", "text": "..."}

Usage:
    # Deterministic vendor/carrier parse
    python parse_vendor_email.py email.json

    # Deterministic parse with agent fallback for low-confidence results
    python parse_vendor_email.py email.json --fallback

    # Agent extraction only (requires LLM_API_KEY)
    python parse_vendor_email.py email.json --agent
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Load environment
load_dotenv(override=True)

from order_mail.config import load_extraction_config
from order_mail.email_parsing import (
    is_forwarded_email,
    parse_email,
    parse_email_with_agent,
    parse_forwarded_email,
    parse_with_fallback,
)
from order_mail.models import EmailContent


def load_email(path: str) -> EmailContent:
    with open(path, encoding="utf-8") as f:
        return EmailContent.from_dict(json.load(f))


def parse_file(path: str, mode: str = "vendor", verbose: bool = False) -> dict:
    """
    Parse one email file.

    Args:
        path: JSON file with the email
        mode: "vendor", "fallback" or "agent"
        verbose: Print forwarded-email details

    Returns:
        Result dict for printing
    """
    email = load_email(path)

    if verbose and is_forwarded_email(email):
        forwarded = parse_forwarded_email(email)
        if forwarded:
            print(f"↪️  Forwarded from: {forwarded.original_from}")
            print(f"   Subject: {forwarded.original_subject or '(none)'}")
        else:
            print("↪️  Looks forwarded, but no original sender found")

    if mode == "vendor":
        return parse_email(email).to_dict()

    config = load_extraction_config()

    if mode == "fallback":
        return parse_with_fallback(email, config).to_dict()

    if not config:
        return {"error": "Agent extraction not configured. Set LLM_API_KEY in your .env file."}

    result = parse_email_with_agent(email, config.api_key, config)
    if result.success:
        return result.data.model_dump(by_alias=True)
    return {
        "error": result.error,
        "errorType": result.error_type.value,
        "rawResponse": result.raw_response,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Parse vendor order emails and print the extracted data"
    )
    parser.add_argument("files", nargs="+", help="JSON files, one email each")
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--agent",
        action="store_true",
        help="Use agent extraction only",
    )
    mode_group.add_argument(
        "--fallback",
        action="store_true",
        help="Fall back to the agent when confidence is low",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show forwarded-email details"
    )

    args = parser.parse_args()

    mode = "agent" if args.agent else "fallback" if args.fallback else "vendor"

    exit_code = 0
    for path in args.files:
        print("\n" + "=" * 70)
        print(f"📧 {path}")
        print("=" * 70)
        try:
            result = parse_file(path, mode=mode, verbose=args.verbose)
        except (OSError, json.JSONDecodeError) as e:
            print(f"❌ Could not read {path}: {e}")
            exit_code = 1
            continue
        print(json.dumps(result, indent=2))

    sys.exit(exit_code)
