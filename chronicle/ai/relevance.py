"""
Relevance checking and state inference.

Both classes send a small classification prompt to a fast, cheap model and
read back JSON. The classifier is treated as unreliable: ids and names it
returns that the story memory does not know are dropped with a warning, and
only a reply that is not JSON at all raises RelevanceError.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import json
import logging

from chronicle.ai.llm_provider import LLMManager, LLMMessage
from chronicle.rules.types import AssertState, StateType
from chronicle.story_memory.store import StoryMemory

logger = logging.getLogger(__name__)

RELEVANCE_MODEL = "claude-3-5-haiku-20241022"
RELEVANCE_MAX_TOKENS = 500

# Narratives shorter than this are not worth a classifier call
MIN_NARRATIVE_LENGTH = 20

DEFAULT_CONFIDENCE_THRESHOLD = 0.7


class RelevanceError(Exception):
    """The classifier reply could not be parsed as JSON."""


def extract_json(text: str) -> str:
    """
    Strip a markdown code fence from a reply, if there is one.

    Handles ```json fences, bare ``` fences and text before the fence;
    anything else is returned trimmed.
    """
    text = text.strip()

    start = text.find("```json")
    if start != -1:
        content_start = start + len("```json")
        end = text.find("```", content_start)
        if end != -1:
            return text[content_start:end].strip()

    start = text.find("```")
    if start != -1:
        content_start = start + 3
        end = text.find("```", content_start)
        if end != -1:
            return text[content_start:end].strip()

    return text


def _load_json_object(text: str) -> dict[str, Any]:
    json_str = extract_json(text)
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise RelevanceError(f"Failed to parse classifier response: {e}: {json_str}") from e
    if not isinstance(data, dict):
        raise RelevanceError(f"Classifier response is not a JSON object: {json_str}")
    return data


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list):
        logger.warning(f"Classifier field '{key}' is not a list, ignoring it")
        return []
    return [str(v) for v in value]


# =============================================================================
# RELEVANCE
# =============================================================================


@dataclass
class RelevanceResult:
    triggered_consequences: list[str] = field(default_factory=list)
    relevant_facts: list[str] = field(default_factory=list)
    relevant_entities: list[str] = field(default_factory=list)
    explanation: Optional[str] = None

    def has_triggered_consequences(self) -> bool:
        return bool(self.triggered_consequences)

    def has_relevant_context(self) -> bool:
        return bool(self.relevant_facts or self.relevant_entities)

    def is_empty(self) -> bool:
        """An explanation on its own does not make a result non-empty."""
        return not (self.triggered_consequences or self.relevant_facts or self.relevant_entities)


_RELEVANCE_PROMPT = """You are checking if any pending consequences should trigger based on a player's action in a tabletop role-playing game.

## Player Action
"{player_input}"

## Current Location
{current_location}

## Pending Consequences
{consequences}

## Instructions
Analyze the player's action and determine:
1. Which consequences (if any) should TRIGGER based on this action
2. Which entities/NPCs might be relevant even if not explicitly mentioned

A consequence should trigger if the player's action matches or is closely related to its trigger condition. Be generous with semantic matching - "I enter the village" should trigger a consequence about "entering Riverside" if Riverside is a village.

Respond with ONLY a JSON object (no markdown, no explanation outside the JSON):
{{
  "triggered_consequences": ["id1", "id2"],
  "relevant_entities": ["Baron Aldric", "Town Guards"],
  "explanation": "Brief explanation of matches"
}}

If nothing is relevant, return empty arrays."""


class RelevanceChecker:
    """
    Decides which pending consequences a player action triggers.

    Args:
        llm_manager: Manager configured for the relevance model
            (see ChronicleConfig.to_llm_config)
    """

    def __init__(self, llm_manager: LLMManager):
        self.llm_manager = llm_manager

    def check_relevance(
        self,
        player_input: str,
        current_location: str,
        memory: StoryMemory,
    ) -> RelevanceResult:
        """
        Classify a player action against the pending consequences.

        Returns an empty result, without calling the model, when nothing is
        pending.

        Raises:
            RelevanceError: The reply was not JSON
        """
        if not memory.pending_consequences():
            return RelevanceResult()

        prompt = _RELEVANCE_PROMPT.format(
            player_input=player_input,
            current_location=current_location,
            consequences=memory.build_consequences_for_relevance(),
        )
        response = self.llm_manager.complete([LLMMessage.user(prompt)])
        if response.failed:
            raise RelevanceError(f"Relevance check failed: {response.content}")
        return self.parse_response(response.content, memory)

    def parse_response(self, text: str, memory: StoryMemory) -> RelevanceResult:
        data = _load_json_object(text)
        explanation = data.get("explanation")
        result = RelevanceResult(explanation=str(explanation) if explanation is not None else None)

        pending = {c.id for c in memory.pending_consequences()}
        for consequence_id in _string_list(data, "triggered_consequences"):
            if consequence_id in pending:
                if consequence_id not in result.triggered_consequences:
                    result.triggered_consequences.append(consequence_id)
            else:
                logger.warning(f"Classifier named unknown consequence id: {consequence_id}")

        for name in _string_list(data, "relevant_entities"):
            entity_id = memory.find_entity_id(name)
            if entity_id is None:
                logger.warning(f"Classifier named unknown entity: {name}")
            elif entity_id not in result.relevant_entities:
                result.relevant_entities.append(entity_id)

        return result


# =============================================================================
# STATE INFERENCE
# =============================================================================


@dataclass
class InferredStateChange:
    """A state change implied by narrative text but never recorded with a tool."""

    entity_name: str
    state_type: str
    new_value: str
    evidence: str
    confidence: float
    target_entity: Optional[str] = None

    def to_intent(self) -> Optional[AssertState]:
        """The assert_state intent for this change, or None for an unknown state type."""
        state_type = StateType.parse(self.state_type)
        if state_type is None:
            return None
        return AssertState(
            entity_name=self.entity_name,
            state_type=state_type,
            new_value=self.new_value,
            reason=f"Inferred from narrative: {self.evidence}",
            target_entity=self.target_entity,
        )


_INFERENCE_PROMPT = """Analyze this tabletop role-playing narrative for implied state changes that weren't explicitly recorded.

## Narrative
"{narrative}"

## Known Entities
{entities}

## Instructions
Look for IMPLIED state changes in the narrative:
- Disposition: attitude changes (smiles, glares, thanks warmly, becomes hostile)
- Location: movement (storms off, follows, arrives at)
- Status: condition changes (injured, recovered, disappeared)
- Relationship: connection changes (befriends, betrays, owes a debt to)

Only report changes with high confidence (>0.7). Require explicit evidence in the text.

Respond with ONLY a JSON object (no markdown):
{{
  "inferred_changes": [
    {{
      "entity_name": "Mira",
      "state_type": "disposition",
      "new_value": "friendly",
      "evidence": "She smiles warmly and thanks you",
      "confidence": 0.9,
      "target_entity": null
    }}
  ]
}}

If no state changes are implied, return empty array: {{"inferred_changes": []}}"""


class StateInferrer:
    """Infers entity state changes from the narrator's prose."""

    def __init__(self, llm_manager: LLMManager):
        self.llm_manager = llm_manager

    def infer_state_changes(
        self,
        narrative: str,
        known_entities: list[str],
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ) -> list[InferredStateChange]:
        """
        Ask the classifier for implied state changes.

        Skips the call for short narratives or when no entities are known.
        Changes below confidence_threshold and malformed entries are dropped.

        Raises:
            RelevanceError: The reply was not JSON
        """
        if len(narrative) < MIN_NARRATIVE_LENGTH or not known_entities:
            return []

        prompt = _INFERENCE_PROMPT.format(narrative=narrative, entities=", ".join(known_entities))
        response = self.llm_manager.complete([LLMMessage.user(prompt)])
        if response.failed:
            raise RelevanceError(f"State inference failed: {response.content}")

        data = _load_json_object(response.content)
        raw_changes = data.get("inferred_changes") or []
        if not isinstance(raw_changes, list):
            logger.warning("Classifier field 'inferred_changes' is not a list, ignoring it")
            return []

        changes = []
        for raw in raw_changes:
            try:
                change = InferredStateChange(
                    entity_name=str(raw["entity_name"]),
                    state_type=str(raw["state_type"]),
                    new_value=str(raw["new_value"]),
                    evidence=str(raw.get("evidence", "")),
                    confidence=float(raw["confidence"]),
                    target_entity=raw.get("target_entity"),
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed inferred change {raw!r}: {e}")
                continue
            if change.confidence >= confidence_threshold:
                changes.append(change)
        return changes
