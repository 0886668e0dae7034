"""
Tests for turn processing.
"""

import pytest

from chronicle.session import ToolCall, TurnProcessor, TurnResult


@pytest.fixture
def processor(world, memory, engine):
    return TurnProcessor(world, memory, engine)


class TestRequestIds:
    def test_ids_increase(self, processor):
        first = processor.begin_turn()
        second = processor.begin_turn()
        assert second > first
        assert processor.latest_request == second
        assert processor.is_current(second)
        assert not processor.is_current(first)

    def test_stale_turn_is_discarded(self, processor, world, memory):
        stale = processor.begin_turn()
        processor.begin_turn()
        result = processor.complete_turn(stale, [ToolCall("give_item", {"item_name": "Rope"})])
        assert result is None
        assert world.player_character.inventory.items == []
        assert memory.current_turn == 0

    def test_current_turn_is_applied(self, processor, world, memory):
        request = processor.begin_turn()
        result = processor.complete_turn(request, [ToolCall("give_item", {"item_name": "Rope", "quantity": 2})])
        assert isinstance(result, TurnResult)
        assert result.effect_kinds() == ["item_added"]
        assert world.player_character.inventory.find_item("Rope").quantity == 2
        assert memory.current_turn == 1


class TestToolCalls:
    def test_calls_apply_in_order(self, processor, world):
        request = processor.begin_turn()
        calls = [
            ToolCall("give_item", {"item_name": "Rope"}),
            ToolCall("remove_item", {"item_name": "Rope"}),
        ]
        result = processor.complete_turn(request, calls)
        assert result.effect_kinds() == ["item_added", "item_removed"]
        assert len(result.narratives) == 2
        assert world.player_character.inventory.find_item("Rope") is None

    def test_invalid_call_is_rejected(self, processor):
        request = processor.begin_turn()
        result = processor.complete_turn(
            request,
            [ToolCall("summon_dragon"), ToolCall("skill_check", {"skill": "juggling", "dc": 10})],
        )
        assert result.rejected == ["summon_dragon", "skill_check"]
        assert result.effects == []
        assert result.narratives == []

    def test_info_tool_produces_text_only(self, processor):
        request = processor.begin_turn()
        result = processor.complete_turn(request, [ToolCall("show_inventory")])
        assert len(result.info) == 1
        assert result.info[0].startswith("=== Aria's Inventory ===")
        assert result.effects == []

    def test_to_dict(self, processor):
        request = processor.begin_turn()
        result = processor.complete_turn(request, [ToolCall("advance_time", {"minutes": 30})])
        data = result.to_dict()
        assert data["effects"] == [{"kind": "time_advanced", "minutes": 30}]
        assert data["narratives"] == ["30 minutes pass."]
        assert data["rejected"] == []


class TestDueEvents:
    def test_event_fires_when_time_passes(self, processor, memory):
        processor.complete_turn(
            processor.begin_turn(),
            [ToolCall("schedule_event", {"description": "Riders arrive", "hours": 1, "location": "Bree"})],
        )
        event = memory.get_event(1)
        assert event.is_pending()

        result = processor.complete_turn(processor.begin_turn(), [ToolCall("advance_time", {"minutes": 90})])
        assert result.effect_kinds() == ["time_advanced", "event_triggered"]
        assert result.narratives[-1] == "Scheduled event: Riders arrive at Bree"
        assert not memory.get_event(1).is_pending()

    def test_event_not_yet_due(self, processor, memory):
        processor.complete_turn(
            processor.begin_turn(),
            [ToolCall("schedule_event", {"description": "Market", "hours": 2})],
        )
        result = processor.complete_turn(processor.begin_turn(), [ToolCall("advance_time", {"minutes": 60})])
        assert "event_triggered" not in result.effect_kinds()
        assert memory.get_event(1).is_pending()
