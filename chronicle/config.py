"""
Configuration and logging setup for a Chronicle session.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging
import os

from chronicle.ai.llm_provider import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_OPENAI_MODEL,
    LLMConfig,
    LLMProvider,
)
from chronicle.ai.relevance import RELEVANCE_MAX_TOKENS, RELEVANCE_MODEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ENV_PREFIX = "CHRONICLE_"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure root logging for an application embedding Chronicle."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass
class ChronicleConfig:
    """Configuration for a Chronicle session."""

    save_dir: Path = field(default_factory=lambda: Path("saves"))
    campaign_name: str = "default"

    # LLM configuration
    llm_provider: str = "mock"  # mock, anthropic, openai
    llm_model: Optional[str] = None
    relevance_model: str = RELEVANCE_MODEL
    relevance_max_tokens: int = RELEVANCE_MAX_TOKENS

    # Story memory
    recent_fact_window: int = 10

    # Runtime options
    dice_seed: Optional[int] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if isinstance(self.save_dir, str):
            self.save_dir = Path(self.save_dir)

    @property
    def story_memory_path(self) -> Path:
        return self.save_dir / f"{self.campaign_name}_story_memory.json"

    @classmethod
    def from_env(cls) -> "ChronicleConfig":
        """
        Build a config from CHRONICLE_* environment variables.

        Recognized: CHRONICLE_SAVE_DIR, CHRONICLE_CAMPAIGN, CHRONICLE_LLM_PROVIDER,
        CHRONICLE_LLM_MODEL, CHRONICLE_RELEVANCE_MODEL, CHRONICLE_RELEVANCE_MAX_TOKENS,
        CHRONICLE_FACT_WINDOW, CHRONICLE_DICE_SEED, CHRONICLE_LOG_LEVEL.
        Unset variables keep the defaults.
        """
        config = cls()

        def env(name: str) -> Optional[str]:
            value = os.getenv(ENV_PREFIX + name)
            return value if value else None

        def env_int(name: str, default: Optional[int]) -> Optional[int]:
            value = env(name)
            if value is None:
                return default
            try:
                return int(value)
            except ValueError:
                logging.getLogger(__name__).warning(
                    f"Ignoring {ENV_PREFIX}{name}={value!r}: not an integer"
                )
                return default

        if env("SAVE_DIR"):
            config.save_dir = Path(env("SAVE_DIR"))
        config.campaign_name = env("CAMPAIGN") or config.campaign_name
        config.llm_provider = env("LLM_PROVIDER") or config.llm_provider
        config.llm_model = env("LLM_MODEL") or config.llm_model
        config.relevance_model = env("RELEVANCE_MODEL") or config.relevance_model
        config.relevance_max_tokens = env_int("RELEVANCE_MAX_TOKENS", config.relevance_max_tokens)
        config.recent_fact_window = env_int("FACT_WINDOW", config.recent_fact_window)
        config.dice_seed = env_int("DICE_SEED", config.dice_seed)
        config.log_level = env("LOG_LEVEL") or config.log_level
        return config

    def to_llm_config(self) -> LLMConfig:
        """
        LLM settings for the relevance checker and state inferrer.

        Classification runs at temperature 0. With the Anthropic provider the
        relevance model is used; otherwise llm_model, or the provider default.
        """
        provider = LLMProvider.parse(self.llm_provider)
        if provider == LLMProvider.ANTHROPIC:
            model = self.relevance_model
        elif provider == LLMProvider.OPENAI:
            model = self.llm_model or DEFAULT_OPENAI_MODEL
        else:
            model = self.llm_model or DEFAULT_ANTHROPIC_MODEL
        return LLMConfig(
            provider=provider,
            model=model,
            max_tokens=self.relevance_max_tokens,
            temperature=0.0,
        )
