"""
Rules engine: turns an Intent into a Resolution.

Resolution is pure. The engine reads the world and rolls dice, but every
change it wants to make is expressed as an Effect in the returned
Resolution; the effect applier is the only code that mutates state.
"""

from typing import Callable, Optional
import logging

from chronicle.rules.resolve import DOMAINS
from chronicle.rules.types import Intent, Resolution
from chronicle.world.game_world import GameWorld

logger = logging.getLogger(__name__)

Resolver = Callable[[Intent, GameWorld], Resolution]


class RulesEngine:
    """
    Dispatches each intent to the resolver named after its kind.

    Resolvers live in the domain modules of chronicle.rules.resolve as
    `resolve_<kind>` functions.
    """

    def __init__(self):
        self._resolvers: dict[str, Resolver] = {}

    def _resolver_for(self, kind: str) -> Optional[Resolver]:
        if kind in self._resolvers:
            return self._resolvers[kind]
        for module in DOMAINS:
            handler = getattr(module, f"resolve_{kind}", None)
            if handler is not None:
                self._resolvers[kind] = handler
                return handler
        return None

    def resolve(self, intent: Intent, world: GameWorld) -> Resolution:
        """
        Resolve an intent against the current world.

        Args:
            intent: The requested action
            world: Game world, read only

        Returns:
            Resolution with narrative and the ordered effects to apply
        """
        handler = self._resolver_for(intent.kind)
        if handler is None:
            logger.warning(f"No resolver for intent kind: {intent.kind}")
            return Resolution(f"Unsupported action: {intent.kind}")

        resolution = handler(intent, world)
        logger.debug(f"Resolved {intent.kind}: {len(resolution.effects)} effect(s)")
        return resolution
