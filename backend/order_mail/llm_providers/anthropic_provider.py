"""
Anthropic Provider Implementation
Uses Claude models via Anthropic API
"""

from typing import Optional

import anthropic

from order_mail.logging_config import get_logger

from .base_provider import BaseLLMProvider, LLMResponse

logger = get_logger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider implementation"""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-haiku-4-5",
        max_tokens: int = 4096,
        timeout: Optional[float] = None,
        debug: bool = False,
    ):
        """
        Initialize Anthropic provider.

        The SDK's own retries are disabled: one call per email, the caller
        owns retry and backoff.

        Args:
            api_key: Anthropic API key
            model: Claude model to use
            max_tokens: Response token limit
            timeout: Request timeout in seconds (None = no client timeout)
            debug: Enable debug logging
        """
        super().__init__(api_key, model, max_tokens, timeout, debug)
        self.client = anthropic.Anthropic(api_key=api_key, max_retries=0)

    def complete(self, prompt: str, system_prompt: str = None) -> LLMResponse:
        """
        Simple completion API for single prompt.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt

        Returns:
            LLMResponse whose content is the first text block (or None)
        """
        kwargs = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        if system_prompt:
            kwargs["system"] = system_prompt
        if self.timeout:
            kwargs["timeout"] = self.timeout

        try:
            response = self.client.messages.create(**kwargs)
        except Exception as e:
            if self.debug:
                logger.debug(f"Anthropic completion error: {e}")
            raise

        # Extract usage information
        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens

        content = next(
            (block.text for block in response.content if getattr(block, "type", None) == "text"),
            None,
        )

        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            cost=self.calculate_cost(input_tokens, output_tokens),
        )

    def calculate_cost(self, tokens_in: int, tokens_out: int) -> float:
        """
        Calculate cost for Anthropic API call.

        Args:
            tokens_in: Input tokens used
            tokens_out: Output tokens generated

        Returns:
            Estimated cost in USD
        """
        # Model-specific pricing per 1K tokens
        pricing = {
            "claude-haiku-4-5": {"input": 0.001, "output": 0.005},
            "claude-sonnet-4": {"input": 0.003, "output": 0.015},
            "claude-opus-4": {"input": 0.015, "output": 0.075},
            "claude-3-5-haiku": {"input": 0.0008, "output": 0.004},
            "claude-3-5-sonnet": {"input": 0.003, "output": 0.015},
        }

        # Default to Haiku 4.5
        input_cost_per_1k = 0.001
        output_cost_per_1k = 0.005

        for model_name, costs in pricing.items():
            if model_name in self.model:
                input_cost_per_1k = costs["input"]
                output_cost_per_1k = costs["output"]
                break

        total_cost = (tokens_in / 1000) * input_cost_per_1k + (tokens_out / 1000) * output_cost_per_1k

        return round(total_cost, 6)
