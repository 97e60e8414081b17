"""Tests for agent-based email extraction.

The Anthropic client is mocked; no network calls are made.
"""

import json
from unittest.mock import Mock

import pytest

from order_mail.config import ExtractionConfig
from order_mail.email_parsing import parse_email_with_agent
from order_mail.email_parsing.llm_extraction import (
    EXTRACTION_SYSTEM_PROMPT,
    build_user_prompt,
    strip_code_fence,
)
from order_mail.error_tracking import ErrorType

# ============================================================================
# TEST FIXTURES
# ============================================================================

EXTRACTION_JSON = {
    "emailType": "order_confirmation",
    "vendor": "REV Robotics",
    "vendorInfo": {"name": "REV Robotics", "domain": "revrobotics.com", "website": None},
    "orderNumber": "123456",
    "orderDate": None,
    "items": [
        {"partNumber": "REV-41-1291", "description": "HD Hex Motor", "quantity": 2, "unitPriceCents": 3500},
        {"partNumber": None, "description": "Slim Battery", "quantity": 1, "unitPriceCents": None, "forTeam": False},
    ],
    "subtotalCents": 14500,
    "taxCents": None,
    "shippingCents": 1199,
    "totalCents": 15699,
    "tracking": [],
    "shippingAddress": None,
    "mentorNotes": "Only the motors are for the team",
    "confidence": 0.92,
    "extractionNotes": None,
}


def make_response(text=None, block_type="text"):
    response = Mock()
    response.content = [Mock(type=block_type, text=text)]
    response.usage = Mock(input_tokens=1200, output_tokens=300)
    return response


@pytest.fixture
def mock_anthropic(mocker):
    """Patch the SDK client class and return the client instance."""
    mock_client = Mock()
    mocker.patch("anthropic.Anthropic", return_value=mock_client)
    return mock_client


@pytest.fixture
def forwarded_email(make_email):
    return make_email(
        "coach@example.com",
        "Fwd: Your REV Robotics Order #123456",
        text="Only the motors are for the team.\n\nOrder Number: 123456\nOrder Total: $156.99",
    )


# ============================================================================
# SUCCESS PATH
# ============================================================================


def test_agent_extraction_success(mock_anthropic, forwarded_email):
    mock_anthropic.messages.create.return_value = make_response(json.dumps(EXTRACTION_JSON))

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.success is True
    data = result.data
    assert data.email_type == "order_confirmation"
    assert data.order_number == "123456"
    assert data.total_cents == 15699
    assert data.vendor_info.domain == "revrobotics.com"
    assert data.items[0].for_team is True
    assert data.items[1].for_team is False
    assert data.items[1].part_number is None
    assert data.tax_cents is None


def test_agent_uses_single_call_without_sdk_retries(mocker, forwarded_email):
    mock_client = Mock()
    mock_client.messages.create.return_value = make_response(json.dumps(EXTRACTION_JSON))
    client_class = mocker.patch("anthropic.Anthropic", return_value=mock_client)

    parse_email_with_agent(forwarded_email, "test-key")

    client_class.assert_called_once_with(api_key="test-key", max_retries=0)
    assert mock_client.messages.create.call_count == 1
    kwargs = mock_client.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-haiku-4-5"
    assert kwargs["max_tokens"] == 4096
    assert kwargs["system"] == EXTRACTION_SYSTEM_PROMPT
    assert "timeout" not in kwargs


def test_agent_passes_configured_model_and_timeout(mock_anthropic, forwarded_email):
    mock_anthropic.messages.create.return_value = make_response(json.dumps(EXTRACTION_JSON))
    config = ExtractionConfig(api_key="test-key", model="claude-sonnet-4-5", max_tokens=2048, timeout=20.0)

    parse_email_with_agent(forwarded_email, "test-key", config)

    kwargs = mock_anthropic.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-sonnet-4-5"
    assert kwargs["max_tokens"] == 2048
    assert kwargs["timeout"] == 20.0


def test_agent_strips_json_code_fence(mock_anthropic, forwarded_email):
    fenced = "```json\n" + json.dumps(EXTRACTION_JSON) + "\n```"
    mock_anthropic.messages.create.return_value = make_response(fenced)

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.success is True
    assert result.raw_response == fenced


def test_strip_code_fence_leaves_plain_json():
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'


# ============================================================================
# FAILURE PATHS
# ============================================================================


def test_agent_invalid_json_keeps_raw_response(mock_anthropic, forwarded_email):
    mock_anthropic.messages.create.return_value = make_response("I could not find an order in this email.")

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.success is False
    assert result.error_type == ErrorType.INVALID_JSON
    assert result.error.startswith("Invalid JSON response: I could not find")
    assert result.error.endswith("...")
    assert result.raw_response == "I could not find an order in this email."


def test_agent_invalid_json_message_is_truncated(mock_anthropic, forwarded_email):
    mock_anthropic.messages.create.return_value = make_response("x" * 500)

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.error == "Invalid JSON response: " + "x" * 200 + "..."


def test_agent_schema_violation(mock_anthropic, forwarded_email):
    bad = dict(EXTRACTION_JSON, confidence=1.5)
    mock_anthropic.messages.create.return_value = make_response(json.dumps(bad))

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.success is False
    assert result.error_type == ErrorType.SCHEMA_VALIDATION
    assert result.error.startswith("Schema validation failed:")
    assert result.raw_response is not None


def test_agent_no_text_block(mock_anthropic, forwarded_email):
    mock_anthropic.messages.create.return_value = make_response(block_type="tool_use")

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.success is False
    assert result.error == "No text response from model"
    assert result.error_type == ErrorType.NO_TEXT_RESPONSE
    assert result.raw_response is None


def test_agent_api_failure_is_returned_not_raised(mock_anthropic, forwarded_email):
    mock_anthropic.messages.create.side_effect = Exception("Connection refused")

    result = parse_email_with_agent(forwarded_email, "test-key")

    assert result.success is False
    assert result.error == "API call failed: Connection refused"
    assert result.error_type == ErrorType.API_ERROR
    assert result.is_retryable is True


# ============================================================================
# PROMPTS
# ============================================================================


def test_user_prompt_embeds_email_between_markers(make_email):
    email = make_email("orders@revrobotics.com", "Order {subject}", text="Total: {body}")

    prompt = build_user_prompt(email)

    assert "---EMAIL START---\nFrom: orders@revrobotics.com\n" in prompt
    assert "Subject: Order {subject}\n" in prompt
    assert "Total: {body}\n---EMAIL END---" in prompt


def test_user_prompt_flattens_html_when_no_text(make_email):
    email = make_email("orders@revrobotics.com", "Order", html="<p>Order <b>Total</b>: $5.00</p><script>x()</script>")

    prompt = build_user_prompt(email)

    assert "Order Total : $5.00" in prompt
    assert "x()" not in prompt
