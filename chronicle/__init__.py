"""
Chronicle rules engine.

Turns narrator intents into deterministic effects applied to a game world,
and keeps a long-lived story memory of entities, facts, consequences,
knowledge and scheduled events.

Components:
- dice: Dice notation parsing and rolling
- world: Mutable game state (character, combat, locations, NPCs, quests)
- rules: Intent -> Resolution engine and the effect applier
- story_memory: Append-only narrative consistency store
- ai: LLM provider abstraction and relevance checking
- tools: Tool-call parsing and read-only info queries
- session: Turn processing glue
"""

__version__ = "0.4.0"
