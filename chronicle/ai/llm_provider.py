"""
LLM provider abstraction for Chronicle.

This module provides a small interface to LLM services with:
- Support for multiple providers (Anthropic Claude, OpenAI, Mock)
- Retry logic
- A length cap on replies

The LLM is ADVISORY ONLY. Dice, success and failure, and every state change
belong to the rules engine; the LLM narrates and classifies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import logging
import os
import time

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    MOCK = "mock"  # For testing

    @classmethod
    def parse(cls, text: Optional[str]) -> "LLMProvider":
        if not text:
            return cls.MOCK
        try:
            return cls(text.strip().lower())
        except ValueError:
            logger.warning(f"Unknown LLM provider '{text}', using mock")
            return cls.MOCK


class LLMRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class LLMMessage:
    role: LLMRole
    content: str

    @classmethod
    def user(cls, content: str) -> "LLMMessage":
        return cls(LLMRole.USER, content)


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    provider: LLMProvider
    usage: dict[str, int] = field(default_factory=dict)
    raw_response: Optional[Any] = None

    # Set when the reply is a placeholder rather than model output
    failed: bool = False
    error: Optional[str] = None
    truncated: bool = False


@dataclass
class LLMConfig:
    """Configuration for an LLM provider."""

    provider: LLMProvider = LLMProvider.ANTHROPIC
    model: str = DEFAULT_ANTHROPIC_MODEL
    max_tokens: int = 1024
    temperature: float = 0.7
    api_key: Optional[str] = None

    # Retries
    max_retries: int = 3
    retry_delay: float = 1.0

    # Response constraints
    max_response_length: int = 4000


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    def complete(
        self,
        messages: list[LLMMessage],
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        """Generate a completion from the LLM."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""

    def _placeholder(self, content: str, reason: str, provider: LLMProvider) -> LLMResponse:
        return LLMResponse(
            content=content,
            model=self.config.model,
            provider=provider,
            failed=True,
            error=reason,
        )


class AnthropicClient(BaseLLMClient):
    """Client for the Anthropic Claude API."""

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._client = None
        self._initialize_client()

    def _initialize_client(self) -> None:
        try:
            import anthropic

            api_key = self.config.api_key or os.getenv("ANTHROPIC_API_KEY")
            if api_key:
                self._client = anthropic.Anthropic(api_key=api_key)
            else:
                logger.warning(
                    "ANTHROPIC_API_KEY not set. Set the environment variable or pass api_key in config."
                )
        except ImportError:
            logger.warning(
                "anthropic package not installed. Install with: pip install chronicle-engine[anthropic]"
            )
        except Exception as e:
            logger.error(f"Failed to initialize Anthropic client: {e}")

    def is_available(self) -> bool:
        return self._client is not None

    def complete(
        self,
        messages: list[LLMMessage],
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        if not self._client:
            return self._placeholder(
                "[LLM unavailable]", "client_unavailable", LLMProvider.ANTHROPIC
            )

        anthropic_messages = [
            {"role": msg.role.value, "content": msg.content}
            for msg in messages
            if msg.role != LLMRole.SYSTEM
        ]

        for attempt in range(self.config.max_retries):
            try:
                response = self._client.messages.create(
                    model=self.config.model,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    system=system_prompt or "",
                    messages=anthropic_messages,
                )
                content = response.content[0].text if response.content else ""
                return LLMResponse(
                    content=content,
                    model=self.config.model,
                    provider=LLMProvider.ANTHROPIC,
                    usage={
                        "input_tokens": response.usage.input_tokens,
                        "output_tokens": response.usage.output_tokens,
                    },
                    raw_response=response,
                )
            except Exception as e:
                logger.warning(f"Anthropic API attempt {attempt + 1} failed: {e}")
                if attempt < self.config.max_retries - 1:
                    time.sleep(self.config.retry_delay * (attempt + 1))

        return self._placeholder(
            "[LLM request failed after retries]", "request_failed", LLMProvider.ANTHROPIC
        )


class OpenAIClient(BaseLLMClient):
    """Client for the OpenAI API."""

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._client = None
        self._initialize_client()

    def _initialize_client(self) -> None:
        try:
            import openai

            api_key = self.config.api_key or os.getenv("OPENAI_API_KEY")
            if api_key:
                self._client = openai.OpenAI(api_key=api_key)
            else:
                logger.warning(
                    "OPENAI_API_KEY not set. Set the environment variable or pass api_key in config."
                )
        except ImportError:
            logger.warning(
                "openai package not installed. Install with: pip install chronicle-engine[openai]"
            )
        except Exception as e:
            logger.error(f"Failed to initialize OpenAI client: {e}")

    def is_available(self) -> bool:
        return self._client is not None

    def complete(
        self,
        messages: list[LLMMessage],
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        if not self._client:
            return self._placeholder("[LLM unavailable]", "client_unavailable", LLMProvider.OPENAI)

        openai_messages = []
        if system_prompt:
            openai_messages.append({"role": "system", "content": system_prompt})
        for msg in messages:
            openai_messages.append({"role": msg.role.value, "content": msg.content})

        for attempt in range(self.config.max_retries):
            try:
                response = self._client.chat.completions.create(
                    model=self.config.model,
                    messages=openai_messages,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                )
                content = response.choices[0].message.content or ""
                return LLMResponse(
                    content=content,
                    model=self.config.model,
                    provider=LLMProvider.OPENAI,
                    usage={
                        "prompt_tokens": response.usage.prompt_tokens,
                        "completion_tokens": response.usage.completion_tokens,
                    },
                    raw_response=response,
                )
            except Exception as e:
                logger.warning(f"OpenAI API attempt {attempt + 1} failed: {e}")
                if attempt < self.config.max_retries - 1:
                    time.sleep(self.config.retry_delay * (attempt + 1))

        return self._placeholder(
            "[LLM request failed after retries]", "request_failed", LLMProvider.OPENAI
        )


class MockLLMClient(BaseLLMClient):
    """
    Mock LLM client for testing.

    Replies cycle through the canned responses; every request is recorded
    in `calls` as (messages, system_prompt).
    """

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._responses: list[str] = []
        self._response_index = 0
        self.calls: list[tuple[list[LLMMessage], Optional[str]]] = []

    def set_responses(self, responses: list[str]) -> None:
        self._responses = responses
        self._response_index = 0

    def is_available(self) -> bool:
        return True

    def complete(
        self,
        messages: list[LLMMessage],
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        self.calls.append((list(messages), system_prompt))
        if self._responses:
            content = self._responses[self._response_index % len(self._responses)]
            self._response_index += 1
        else:
            content = "[Mock LLM response]"

        return LLMResponse(
            content=content,
            model="mock",
            provider=LLMProvider.MOCK,
            usage={"tokens": 100},
        )


class LLMManager:
    """
    Central manager for LLM interactions.

    Picks the client for the configured provider and caps reply length.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        """
        Initialize the LLM manager.

        Args:
            config: LLM configuration. If None, uses defaults.
        """
        self.config = config or LLMConfig()
        self._client: Optional[BaseLLMClient] = None
        self._initialize_client()

    def _initialize_client(self) -> None:
        if self.config.provider == LLMProvider.ANTHROPIC:
            self._client = AnthropicClient(self.config)
        elif self.config.provider == LLMProvider.OPENAI:
            self._client = OpenAIClient(self.config)
        else:
            self._client = MockLLMClient(self.config)

    @property
    def client(self) -> Optional[BaseLLMClient]:
        return self._client

    def is_available(self) -> bool:
        return self._client is not None and self._client.is_available()

    def complete(
        self,
        messages: list[LLMMessage],
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate an LLM completion.

        Args:
            messages: Conversation messages
            system_prompt: System prompt to prepend

        Returns:
            LLMResponse, truncated to max_response_length
        """
        if not self.is_available():
            return LLMResponse(
                content="[No LLM available]",
                model="none",
                provider=LLMProvider.MOCK,
                failed=True,
                error="no_provider_available",
            )

        response = self._client.complete(messages, system_prompt)

        if len(response.content) > self.config.max_response_length:
            response.content = response.content[: self.config.max_response_length] + "..."
            response.truncated = True
            logger.debug(f"Truncated LLM reply to {self.config.max_response_length} characters")
        return response
