"""
Tests for the LLM provider layer.
"""

import pytest

from chronicle.ai.llm_provider import (
    AnthropicClient,
    LLMConfig,
    LLMManager,
    LLMMessage,
    LLMProvider,
    LLMRole,
    MockLLMClient,
    OpenAIClient,
)


class TestProviderSelection:
    @pytest.mark.parametrize(
        "text, expected",
        [("anthropic", LLMProvider.ANTHROPIC), (" OpenAI ", LLMProvider.OPENAI), ("llama", LLMProvider.MOCK),
         (None, LLMProvider.MOCK)],
    )
    def test_parse(self, text, expected):
        assert LLMProvider.parse(text) == expected

    def test_mock_client(self, mock_llm_manager):
        assert isinstance(mock_llm_manager.client, MockLLMClient)
        assert mock_llm_manager.is_available()

    def test_anthropic_without_key_is_unavailable(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        manager = LLMManager(LLMConfig(provider=LLMProvider.ANTHROPIC))
        assert isinstance(manager.client, AnthropicClient)
        assert not manager.is_available()

    def test_openai_without_key_is_unavailable(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        manager = LLMManager(LLMConfig(provider=LLMProvider.OPENAI, model="gpt-4o-mini"))
        assert isinstance(manager.client, OpenAIClient)
        assert not manager.is_available()

    def test_unavailable_manager_returns_failed_placeholder(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        response = LLMManager(LLMConfig()).complete([LLMMessage.user("Hello")])
        assert response.failed
        assert response.error == "no_provider_available"


class TestMockClient:
    def test_default_reply(self, mock_llm_manager):
        assert mock_llm_manager.complete([LLMMessage.user("Hi")]).content == "[Mock LLM response]"

    def test_responses_cycle_and_calls_are_recorded(self, mock_llm_manager):
        mock_llm_manager.client.set_responses(["one", "two"])
        replies = [
            mock_llm_manager.complete([LLMMessage.user(str(n))], system_prompt="sys").content
            for n in range(3)
        ]
        assert replies == ["one", "two", "one"]
        messages, system_prompt = mock_llm_manager.client.calls[2]
        assert messages[0].role == LLMRole.USER
        assert messages[0].content == "2"
        assert system_prompt == "sys"


class TestReplyLength:
    def test_short_reply_is_untouched(self, mock_llm_manager):
        mock_llm_manager.client.set_responses(["The troll lumbers out of the cave."])
        response = mock_llm_manager.complete([LLMMessage.user("narrate")])
        assert response.content == "The troll lumbers out of the cave."
        assert not response.truncated

    def test_long_reply_is_truncated(self):
        manager = LLMManager(LLMConfig(provider=LLMProvider.MOCK, max_response_length=10))
        manager.client.set_responses(["a" * 25])
        response = manager.complete([LLMMessage.user("narrate")])
        assert response.content == "a" * 10 + "..."
        assert response.truncated
