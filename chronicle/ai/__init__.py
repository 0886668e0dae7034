"""
LLM integration for Chronicle.

The LLM is ADVISORY ONLY: it narrates and classifies, while dice, outcomes
and state changes belong to the rules engine.

Components:
- LLM Provider: abstraction over LLM APIs with retries
- Relevance: consequence triggering and state inference from narrative
"""

from chronicle.ai.llm_provider import (
    AnthropicClient,
    BaseLLMClient,
    LLMConfig,
    LLMManager,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    LLMRole,
    MockLLMClient,
    OpenAIClient,
)
from chronicle.ai.relevance import (
    InferredStateChange,
    RelevanceChecker,
    RelevanceError,
    RelevanceResult,
    StateInferrer,
    extract_json,
)

__all__ = [
    "AnthropicClient",
    "BaseLLMClient",
    "InferredStateChange",
    "LLMConfig",
    "LLMManager",
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "LLMRole",
    "MockLLMClient",
    "OpenAIClient",
    "RelevanceChecker",
    "RelevanceError",
    "RelevanceResult",
    "StateInferrer",
    "extract_json",
]
