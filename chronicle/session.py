"""
Turn processing.

A turn is the set of tool calls the narrator made in answer to one player
input. Turns follow a single-writer model: each player input takes a new
request id from begin_turn(), and when a newer turn has begun the older
turn's tool calls are dropped rather than applied.

Per tool call:
1. Read-only info tools are answered directly from world and story memory
2. Everything else is parsed into an intent, resolved by the rules engine,
   and its effects applied in order

After the last call, scheduled events that have come due are triggered and
the story memory turn counter advances.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Optional
import logging

from chronicle.rules.effects import EffectApplier
from chronicle.rules.engine import RulesEngine
from chronicle.rules.types import Effect, EventTriggered
from chronicle.story_memory import StoryMemory
from chronicle.tools.info import execute_info_tool
from chronicle.tools.parsing import parse_tool_call
from chronicle.world.game_world import GameWorld

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCall:
    """One tool call from the narrator: a tool name and its decoded JSON input."""

    name: str
    input: dict[str, Any] = field(default_factory=dict)


@dataclass
class TurnResult:
    """
    Outcome of one completed turn.

    - narratives: rules narration, one entry per resolved intent, then one per triggered event
    - effects: every effect applied this turn, in application order
    - info: answers to read-only info tools
    - rejected: names of tool calls that could not be parsed
    """

    narratives: list[str] = field(default_factory=list)
    effects: list[Effect] = field(default_factory=list)
    info: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)

    def effect_kinds(self) -> list[str]:
        return [e.kind for e in self.effects]

    def to_dict(self) -> dict[str, Any]:
        return {
            "narratives": list(self.narratives),
            "effects": [{"kind": e.kind, **asdict(e)} for e in self.effects],
            "info": list(self.info),
            "rejected": list(self.rejected),
        }


class TurnProcessor:
    def __init__(
        self,
        world: GameWorld,
        memory: StoryMemory,
        engine: Optional[RulesEngine] = None,
    ):
        self.world = world
        self.memory = memory
        self.engine = engine or RulesEngine()
        self._applier = EffectApplier(world, memory)
        self._latest_request = 0

    @property
    def latest_request(self) -> int:
        return self._latest_request

    def begin_turn(self) -> int:
        """Start a turn and return its request id. Ids strictly increase."""
        self._latest_request += 1
        return self._latest_request

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest_request

    def complete_turn(
        self, request_id: int, tool_calls: Iterable[ToolCall]
    ) -> Optional[TurnResult]:
        """
        Apply the tool calls of a turn.

        Args:
            request_id: Id returned by begin_turn() for this turn
            tool_calls: Narrator tool calls, applied in order

        Returns:
            The turn result, or None when a newer turn has begun since
            request_id was issued (nothing is applied in that case)
        """
        if not self.is_current(request_id):
            logger.info(
                f"Discarding stale turn {request_id} (latest is {self._latest_request})"
            )
            return None

        result = TurnResult()
        for call in tool_calls:
            self._handle_call(call, result)

        self._trigger_due_events(result)
        self.memory.tick_turn()
        return result

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _handle_call(self, call: ToolCall, result: TurnResult) -> None:
        info = execute_info_tool(call.name, call.input, self.world, self.memory)
        if info is not None:
            result.info.append(info)
            return

        intent = parse_tool_call(call.name, call.input, self.world)
        if intent is None:
            logger.warning(f"Rejected tool call '{call.name}'")
            result.rejected.append(call.name)
            return

        resolution = self.engine.resolve(intent, self.world)
        self._applier.apply_all(resolution.effects)
        result.narratives.append(resolution.narrative)
        result.effects.extend(resolution.effects)

    def _trigger_due_events(self, result: TurnResult) -> None:
        for event in self.memory.due_events(self.world.game_time):
            effect = EventTriggered(event.description, event.location, event.id)
            self._applier.apply(effect)
            result.effects.append(effect)
            where = f" at {event.location}" if event.location else ""
            result.narratives.append(f"Scheduled event: {event.description}{where}")
