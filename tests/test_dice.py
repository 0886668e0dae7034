"""
Unit tests for the dice engine: notation parsing, rolling, advantage and
the roll log.
"""

import pytest

from chronicle.dice import (
    ROLL_LOG_LIMIT,
    Advantage,
    DiceError,
    DiceRoller,
    RollResult,
    parse,
    roll_d20,
)
from chronicle.rules.helpers import roll_with_fallback


class TestParse:
    """Tests for dice notation parsing."""

    def test_simple_notation(self):
        expression = parse("2d6+3")
        assert len(expression.groups) == 1
        assert expression.groups[0].count == 2
        assert expression.groups[0].sides == 6
        assert expression.modifier == 3

    def test_implicit_count(self):
        expression = parse("d20")
        assert expression.groups[0].count == 1

    def test_negative_modifier(self):
        assert parse("1d8-2").modifier == -2

    def test_keep_highest(self):
        group = parse("4d6kh3").groups[0]
        assert group.keep == "kh"
        assert group.keep_count == 3

    def test_chained_groups(self):
        expression = parse("2d6 + 1d4 + 3")
        assert [g.sides for g in expression.groups] == [6, 4]
        assert expression.modifier == 3

    @pytest.mark.parametrize("notation", ["", "   ", "abc", "2d", "1d6*2", "5"])
    def test_invalid_notation_raises(self, notation):
        with pytest.raises(DiceError):
            parse(notation)

    def test_subtracting_dice_rejected(self):
        with pytest.raises(DiceError):
            parse("1d20-1d4")

    def test_keep_more_than_rolled_rejected(self):
        with pytest.raises(DiceError):
            parse("2d6kh3")

    def test_dice_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse("not dice")


class TestDiceRoller:
    """Tests for DiceRoller."""

    def test_singleton_pattern(self):
        assert DiceRoller() is DiceRoller()

    def test_roll_multiple_dice(self, seeded_dice):
        result = seeded_dice.roll("3d6", "attribute roll")
        assert len(result.rolls) == 3
        assert all(1 <= r <= 6 for r in result.rolls)
        assert result.total == sum(result.rolls)

    def test_roll_with_modifier(self, seeded_dice):
        result = seeded_dice.roll("1d20+5", "attack roll")
        assert result.modifier == 5
        assert result.total == result.rolls[0] + 5

    def test_keep_highest_keeps_best_faces(self, seeded_dice):
        result = seeded_dice.roll("4d6kh3", "ability score")
        group = result.groups[0]
        assert len(group.rolls) == 4
        assert len(group.kept) == 3
        assert sorted(group.kept) == sorted(group.rolls)[1:]
        assert result.total == sum(group.kept)

    def test_keep_lowest(self, seeded_dice):
        result = seeded_dice.roll("2d20kl1")
        group = result.groups[0]
        assert group.kept == [min(group.rolls)]

    def test_components_alias_groups(self, seeded_dice):
        result = seeded_dice.roll("1d6+1d4")
        assert result.components is result.groups

    def test_seeded_reproducibility(self):
        DiceRoller.set_seed(12345)
        first = [DiceRoller.roll("1d20").total for _ in range(5)]
        DiceRoller.set_seed(12345)
        second = [DiceRoller.roll("1d20").total for _ in range(5)]
        assert first == second

    def test_roll_log(self, clean_dice):
        DiceRoller.roll("1d6", "first")
        DiceRoller.roll("1d8", "second")
        log = DiceRoller.get_roll_log()
        assert [r.reason for r in log] == ["first", "second"]

    def test_roll_log_is_a_copy(self, clean_dice):
        DiceRoller.roll("1d6")
        DiceRoller.get_roll_log().clear()
        assert len(DiceRoller.get_roll_log()) == 1

    def test_roll_log_keeps_only_recent_rolls(self, clean_dice):
        for n in range(ROLL_LOG_LIMIT + 5):
            DiceRoller.roll("1d4", f"roll {n}")
        log = DiceRoller.get_roll_log()
        assert len(log) == ROLL_LOG_LIMIT
        assert log[0].reason == "roll 5"
        assert log[-1].reason == f"roll {ROLL_LOG_LIMIT + 4}"

    def test_invalid_roll_raises(self, seeded_dice):
        with pytest.raises(DiceError):
            seeded_dice.roll("xd6")

    def test_roll_d20_helper(self, seeded_dice):
        result = roll_d20(3, reason="check")
        assert result.total == result.natural + 3


class TestAdvantage:
    """Tests for advantage and disadvantage."""

    def test_advantage_rolls_twice_keeps_higher(self, clean_dice):
        DiceRoller.set_seed(7)
        result = DiceRoller.roll_with_advantage("1d20", Advantage.ADVANTAGE)
        first, second = DiceRoller.get_roll_log()
        assert result.total == max(first.total, second.total)

    def test_disadvantage_keeps_lower(self, clean_dice):
        DiceRoller.set_seed(7)
        result = DiceRoller.roll_with_advantage("1d20", Advantage.DISADVANTAGE)
        first, second = DiceRoller.get_roll_log()
        assert result.total == min(first.total, second.total)

    def test_normal_rolls_once(self, clean_dice):
        DiceRoller.roll_with_advantage("1d20", Advantage.NORMAL)
        assert len(DiceRoller.get_roll_log()) == 1

    def test_disadvantage_wins_when_combined(self):
        assert Advantage.ADVANTAGE.combine(Advantage.DISADVANTAGE) == Advantage.DISADVANTAGE
        assert Advantage.NORMAL.combine(Advantage.ADVANTAGE) == Advantage.ADVANTAGE
        assert Advantage.NORMAL.combine(Advantage.NORMAL) == Advantage.NORMAL

    def test_from_flags(self):
        assert Advantage.from_flags(advantage=True) == Advantage.ADVANTAGE
        assert Advantage.from_flags(advantage=True, disadvantage=True) == Advantage.DISADVANTAGE
        assert Advantage.from_flags() == Advantage.NORMAL


class TestRollResult:
    """Tests for RollResult helpers."""

    def test_minimal_result(self):
        result = RollResult.minimal("fallback")
        assert result.total == 1
        assert result.rolls == [1]
        assert result.expression == "1d4"

    def test_natural_faces(self):
        result = RollResult.minimal()
        assert not result.natural_20
        assert not result.natural_1
        assert result.natural == 1

    def test_str_includes_modifier(self, seeded_dice):
        result = seeded_dice.roll("1d6+2")
        assert str(result).endswith(f"+ 2 = {result.total}")


class TestRollWithFallback:
    def test_valid_primary(self, fixed_rolls):
        fixed_rolls(3)
        assert roll_with_fallback("1d8", "1d4").total == 3

    def test_invalid_primary_uses_fallback(self, fixed_rolls):
        fixed_rolls(6)
        result = roll_with_fallback("lots of damage", "2d6")
        assert result.expression == "2d6"
        assert result.total == 12

    def test_both_invalid_gives_minimal_roll(self):
        result = roll_with_fallback("???", "also bad")
        assert result.total == 1
        assert result.expression == "1d4"
