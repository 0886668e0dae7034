"""
Tests for session configuration.
"""

from pathlib import Path

import pytest

from chronicle.ai.llm_provider import DEFAULT_ANTHROPIC_MODEL, DEFAULT_OPENAI_MODEL, LLMProvider
from chronicle.ai.relevance import RELEVANCE_MAX_TOKENS, RELEVANCE_MODEL
from chronicle.config import ChronicleConfig

_ENV_NAMES = (
    "SAVE_DIR", "CAMPAIGN", "LLM_PROVIDER", "LLM_MODEL", "RELEVANCE_MODEL",
    "RELEVANCE_MAX_TOKENS", "FACT_WINDOW", "DICE_SEED", "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(f"CHRONICLE_{name}", raising=False)
    return monkeypatch


class TestChronicleConfig:
    def test_defaults(self, clean_env):
        config = ChronicleConfig.from_env()
        assert config == ChronicleConfig()
        assert config.story_memory_path == Path("saves") / "default_story_memory.json"

    def test_string_save_dir_becomes_path(self):
        assert ChronicleConfig(save_dir="/tmp/games").save_dir == Path("/tmp/games")

    def test_from_env(self, clean_env):
        clean_env.setenv("CHRONICLE_SAVE_DIR", "/tmp/chronicle")
        clean_env.setenv("CHRONICLE_CAMPAIGN", "shire")
        clean_env.setenv("CHRONICLE_LLM_PROVIDER", "openai")
        clean_env.setenv("CHRONICLE_DICE_SEED", "42")
        clean_env.setenv("CHRONICLE_FACT_WINDOW", "5")
        config = ChronicleConfig.from_env()
        assert config.story_memory_path == Path("/tmp/chronicle") / "shire_story_memory.json"
        assert config.llm_provider == "openai"
        assert config.dice_seed == 42
        assert config.recent_fact_window == 5

    def test_bad_integer_keeps_default(self, clean_env):
        clean_env.setenv("CHRONICLE_RELEVANCE_MAX_TOKENS", "lots")
        clean_env.setenv("CHRONICLE_DICE_SEED", "")
        config = ChronicleConfig.from_env()
        assert config.relevance_max_tokens == RELEVANCE_MAX_TOKENS
        assert config.dice_seed is None


class TestLLMConfig:
    def test_anthropic_uses_relevance_model(self):
        llm = ChronicleConfig(llm_provider="anthropic", llm_model="ignored").to_llm_config()
        assert llm.provider == LLMProvider.ANTHROPIC
        assert llm.model == RELEVANCE_MODEL
        assert llm.temperature == 0.0
        assert llm.max_tokens == RELEVANCE_MAX_TOKENS

    def test_openai_default_model(self):
        llm = ChronicleConfig(llm_provider="openai").to_llm_config()
        assert llm.model == DEFAULT_OPENAI_MODEL

    def test_mock_provider(self):
        llm = ChronicleConfig().to_llm_config()
        assert llm.provider == LLMProvider.MOCK
        assert llm.model == DEFAULT_ANTHROPIC_MODEL
