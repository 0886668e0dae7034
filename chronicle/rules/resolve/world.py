"""
World-building resolvers: NPCs, locations, travel and asserted state.
"""

from typing import Optional

from chronicle.rules.helpers import character_for
from chronicle.rules.types import (
    AssertState,
    ChangeLocation,
    ConnectLocations,
    CreateLocation,
    CreateNpc,
    LocationChanged,
    LocationCreated,
    LocationsConnected,
    LocationUpdated,
    Move,
    MoveNpc,
    NpcCreated,
    NpcMoved,
    NpcRemoved,
    NpcUpdated,
    RemoveNpc,
    Resolution,
    StateAsserted,
    StateType,
    UpdateLocation,
    UpdateNpc,
)
from chronicle.world.conditions import Condition
from chronicle.world.game_world import GameWorld


def _npc_not_found(name: str) -> Resolution:
    return Resolution(f"NPC '{name}' not found in the world")


# =============================================================================
# NPCS
# =============================================================================


def resolve_create_npc(intent: CreateNpc, world: GameWorld) -> Resolution:
    existing = world.find_npc(intent.name)
    if existing is not None:
        return Resolution(
            f"DUPLICATE NPC ERROR: An NPC named '{existing.name}' already exists "
            f"(disposition: {existing.disposition.value}). Use 'update_npc' instead to modify "
            "their disposition, add information, or change their description. "
            "Do NOT call create_npc again for this character."
        )

    occupation = f" ({intent.occupation})" if intent.occupation else ""
    location = f" at {intent.location}" if intent.location else ""
    return Resolution(
        f"NPC {intent.name} ({intent.disposition.value}){occupation}{location} enters the world",
        [
            NpcCreated(
                name=intent.name,
                location=intent.location,
                description=intent.description,
                personality=intent.personality,
                occupation=intent.occupation,
                disposition=intent.disposition,
                known_information=intent.known_information,
            )
        ],
    )


def resolve_update_npc(intent: UpdateNpc, world: GameWorld) -> Resolution:
    if world.find_npc(intent.npc_name) is None:
        return _npc_not_found(intent.npc_name)

    changes = []
    if intent.disposition is not None:
        changes.append("disposition changed")
    if intent.add_information:
        changes.append("new information learned")
    if intent.new_description is not None:
        changes.append("description updated")
    if intent.new_personality is not None:
        changes.append("personality updated")
    changes_text = ", ".join(changes) if changes else "no changes"

    return Resolution(
        f"NPC {intent.npc_name} updated: {changes_text}",
        [
            NpcUpdated(
                npc_name=intent.npc_name,
                changes=changes_text,
                disposition=intent.disposition,
                add_information=intent.add_information,
                new_description=intent.new_description,
                new_personality=intent.new_personality,
            )
        ],
    )


def resolve_move_npc(intent: MoveNpc, world: GameWorld) -> Resolution:
    npc = world.find_npc(intent.npc_name)
    if npc is None:
        return _npc_not_found(intent.npc_name)

    reason = f" ({intent.reason})" if intent.reason else ""
    return Resolution(
        f"NPC {npc.name} moves to {intent.destination}{reason}",
        [NpcMoved(npc.name, world.npc_location_name(npc), intent.destination)],
    )


def resolve_remove_npc(intent: RemoveNpc, world: GameWorld) -> Resolution:
    npc = world.find_npc(intent.npc_name)
    if npc is None:
        return _npc_not_found(intent.npc_name)

    permanence = "permanently" if intent.permanent else "temporarily"
    return Resolution(
        f"NPC {npc.name} {permanence} removed: {intent.reason}",
        [NpcRemoved(npc.name, intent.reason, intent.permanent)],
    )


# =============================================================================
# LOCATIONS
# =============================================================================


def resolve_create_location(intent: CreateLocation, world: GameWorld) -> Resolution:
    parent = f" in {intent.parent_location}" if intent.parent_location else ""
    items = f" with items: {', '.join(intent.items)}" if intent.items else ""
    npcs = f" featuring NPCs: {', '.join(intent.npcs_present)}" if intent.npcs_present else ""
    return Resolution(
        f"New location created: {intent.name} ({intent.location_type.value})"
        f"{parent}{items}{npcs} - {intent.description}",
        [
            LocationCreated(
                name=intent.name,
                location_type=intent.location_type,
                description=intent.description,
                parent_location=intent.parent_location,
                items=intent.items,
                npcs_present=intent.npcs_present,
            )
        ],
    )


def resolve_connect_locations(intent: ConnectLocations, world: GameWorld) -> Resolution:
    direction = f" ({intent.direction} direction)" if intent.direction else ""
    travel = (
        f", {intent.travel_time_minutes} minutes travel time"
        if intent.travel_time_minutes is not None
        else ""
    )
    way = " (bidirectional)" if intent.bidirectional else " (one-way)"
    return Resolution(
        f"Locations connected: {intent.from_location} to {intent.to_location}{direction}{travel}{way}",
        [
            LocationsConnected(
                intent.from_location,
                intent.to_location,
                intent.direction,
                intent.travel_time_minutes,
                intent.bidirectional,
            )
        ],
    )


def resolve_update_location(intent: UpdateLocation, world: GameWorld) -> Resolution:
    name = intent.location_name
    exists = world.find_location(name) is not None or world.current_location.name.lower() == name.lower()
    if not exists:
        return Resolution(f"Location '{name}' not found in the world")

    changes = []
    if intent.new_description is not None:
        changes.append("description updated")
    if intent.add_items:
        changes.append(f"added items: {', '.join(intent.add_items)}")
    if intent.remove_items:
        changes.append(f"removed items: {', '.join(intent.remove_items)}")
    if intent.add_npcs:
        changes.append(f"NPCs arrived: {', '.join(intent.add_npcs)}")
    if intent.remove_npcs:
        changes.append(f"NPCs left: {', '.join(intent.remove_npcs)}")
    changes_text = "; ".join(changes) if changes else "no changes"

    return Resolution(
        f"Location {name} updated: {changes_text}",
        [
            LocationUpdated(
                location_name=name,
                changes=changes_text,
                new_description=intent.new_description,
                add_items=intent.add_items,
                remove_items=intent.remove_items,
                add_npcs=intent.add_npcs,
                remove_npcs=intent.remove_npcs,
            )
        ],
    )


def resolve_change_location(intent: ChangeLocation, world: GameWorld) -> Resolution:
    previous = world.current_location.name
    return Resolution(
        f"You travel from {previous} to {intent.new_location}.",
        [
            LocationChanged(
                previous_location=previous,
                new_location=intent.new_location,
                location_type=intent.location_type,
                description=intent.description,
            )
        ],
    )


def resolve_move(intent: Move, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    if character.has_condition(Condition.UNCONSCIOUS):
        return Resolution(f"{character.name} is unconscious and cannot move!")

    distance = intent.distance_feet
    if distance is None:
        return Resolution(f"{character.name} moves to {intent.destination}.")
    if world.in_combat() and distance > character.speed:
        return Resolution(
            f"{character.name} can only move {character.speed} feet this turn "
            f"({distance} feet requested)."
        )
    return Resolution(f"{character.name} moves {distance} feet to {intent.destination}.")


# =============================================================================
# ASSERTED STATE
# =============================================================================


def _old_value(world: GameWorld, entity_name: str, state_type: StateType) -> Optional[str]:
    npc = world.find_npc(entity_name)
    if npc is None:
        return None
    if state_type == StateType.DISPOSITION:
        return npc.disposition.value
    if state_type == StateType.LOCATION:
        return world.npc_location_name(npc)
    return None


def resolve_assert_state(intent: AssertState, world: GameWorld) -> Resolution:
    name = intent.entity_name
    value = intent.new_value
    reason = intent.reason
    state_type = intent.state_type

    if state_type == StateType.DISPOSITION:
        narrative = f"{name}'s disposition is now {value} (reason: {reason})"
    elif state_type == StateType.LOCATION:
        narrative = f"{name} is now at {value} (reason: {reason})"
    elif state_type == StateType.STATUS:
        narrative = f"{name}'s status is now {value} (reason: {reason})"
    elif state_type == StateType.KNOWLEDGE:
        narrative = f"{name} now knows: {value} (reason: {reason})"
    elif intent.target_entity:
        narrative = (
            f"{name}'s relationship with {intent.target_entity} is now {value} (reason: {reason})"
        )
    else:
        narrative = f"{name}'s relationship status: {value} (reason: {reason})"

    return Resolution(
        narrative,
        [
            StateAsserted(
                entity_name=name,
                state_type=state_type,
                old_value=_old_value(world, name, state_type),
                new_value=value,
                reason=reason,
                target_entity=intent.target_entity,
            )
        ],
    )
