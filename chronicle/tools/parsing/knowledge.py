"""
Knowledge tracking: who knows what, and how sure they are.
"""

from typing import Optional

from chronicle.rules.types import Intent, ShareKnowledge
from chronicle.tools.parsing.fields import ToolInput, optional_str, required_str, run_parser
from chronicle.world.game_world import GameWorld


def _share_knowledge(data: ToolInput, world: GameWorld) -> Intent:
    return ShareKnowledge(
        knowing_entity=required_str(data, "knowing_entity"),
        content=required_str(data, "content"),
        source=required_str(data, "source"),
        verification=optional_str(data, "verification", "unknown"),
        context=optional_str(data, "context"),
    )


_PARSERS = {"share_knowledge": _share_knowledge}


def parse_knowledge_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
