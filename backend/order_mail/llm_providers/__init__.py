"""LLM Provider implementations"""

from .anthropic_provider import AnthropicProvider
from .base_provider import BaseLLMProvider, LLMResponse

__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "AnthropicProvider",
]
