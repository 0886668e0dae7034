"""
Pytest fixtures for the Chronicle test suite.

Provides reusable fixtures for dice, characters, the game world, story
memory and LLM mocking.
"""

import random

import pytest

from chronicle.ai.llm_provider import LLMConfig, LLMManager, LLMProvider
from chronicle.dice import DiceRoller
from chronicle.rules.effects import EffectApplier
from chronicle.rules.engine import RulesEngine
from chronicle.story_memory import StoryMemory
from chronicle.world import CharacterClass, GameWorld, create_character
from chronicle.world.combat import Combatant


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    DiceRoller.clear_roll_log()
    DiceRoller.set_seed(42)
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture
def clean_dice():
    """Provide a clean DiceRoller without seed."""
    DiceRoller.clear_roll_log()
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture
def fixed_rolls(monkeypatch):
    """Force every die to land on a given face (clamped to the die size)."""

    def _fix(face):
        monkeypatch.setattr(random, "randint", lambda low, high: max(low, min(face, high)))

    DiceRoller.clear_roll_log()
    yield _fix
    DiceRoller.clear_roll_log()


# =============================================================================
# CHARACTER AND WORLD FIXTURES
# =============================================================================


@pytest.fixture
def fighter():
    """Level 1 fighter with the standard array (11 HP)."""
    return create_character("Aria", CharacterClass.FIGHTER)


@pytest.fixture
def world(fighter):
    """A fresh world with a fighter as the player character."""
    return GameWorld(player_character=fighter, campaign_name="Test Campaign")


@pytest.fixture
def make_world():
    """Factory for worlds built around a character of any class and level."""

    def _make(character_class=CharacterClass.FIGHTER, level=1, name="Aria"):
        return GameWorld(player_character=create_character(name, character_class, level))

    return _make


@pytest.fixture
def combat_world(world):
    """World in combat against a single goblin (7 HP, AC 13)."""
    combat = world.start_combat()
    character = world.player_character
    combat.add_combatant(
        Combatant(
            id=character.id,
            name=character.name,
            initiative=15,
            is_player=True,
            current_hp=character.hit_points.current,
            max_hp=character.hit_points.maximum,
            armor_class=character.armor_class(),
        )
    )
    combat.add_combatant(
        Combatant(id="goblin-1", name="Goblin", initiative=10, current_hp=7, max_hp=7, armor_class=13)
    )
    return world


# =============================================================================
# RULES AND MEMORY FIXTURES
# =============================================================================


@pytest.fixture
def engine():
    return RulesEngine()


@pytest.fixture
def memory():
    return StoryMemory()


@pytest.fixture
def applier(world, memory):
    return EffectApplier(world, memory)


# =============================================================================
# LLM FIXTURES
# =============================================================================


@pytest.fixture
def mock_llm_manager():
    """LLM manager backed by the mock client; set replies via manager.client.set_responses."""
    return LLMManager(LLMConfig(provider=LLMProvider.MOCK, model="mock"))
