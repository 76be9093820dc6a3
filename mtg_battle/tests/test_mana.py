"""
Test suite for the mana system.

Tests cover:
- ManaCost parsing and formatting
- ManaPool payment rules (colored, generic, choice units)
- The resource ledger deriving mana from untapped permanents
- Auto-tapping lands
"""
import pytest

from ..engine.mana import (
    ManaCost, ManaPool, auto_tap_lands, available_mana, produced_mana, untapped_lands,
)
from ..engine.types import Color, PlayerKey

YOU = PlayerKey.PLAYER


class TestManaCost:
    """Parsing mana cost strings."""

    @pytest.mark.parametrize("text,cmc", [
        ("{2}{R}{R}", 4),
        ("{W}{U}", 2),
        ("{X}{G}", 1),
        ("", 0),
        (None, 0),
    ])
    def test_cmc(self, text, cmc):
        assert ManaCost.parse(text).cmc == cmc

    def test_colored_requirements(self):
        cost = ManaCost.parse("{3}{G}{G}")
        assert cost.generic == 3
        assert cost.colored == {Color.GREEN: 2}

    def test_str_round_trip(self):
        assert str(ManaCost.parse("{1}{G}")) == "{1}{G}"
        assert str(ManaCost()) == "{0}"

    def test_from_dict_rejects_unknown_symbol(self):
        with pytest.raises(ValueError):
            ManaCost.from_dict({"Q": 1})


class TestManaPool:
    """Payment rules."""

    def test_colored_and_generic(self):
        pool = ManaPool()
        pool.add(Color.RED, 2)
        assert pool.can_pay(ManaCost.parse("{1}{R}"))
        assert not pool.can_pay(ManaCost.parse("{G}"))
        assert not pool.can_pay(ManaCost.parse("{2}{R}"))

    def test_generic_never_pays_colored(self):
        pool = ManaPool()
        pool.add(Color.COLORLESS, 3)
        assert pool.can_pay(ManaCost.parse("{3}"))
        assert not pool.can_pay(ManaCost.parse("{R}"))

    def test_choice_unit_counts_once(self):
        """A '{R} or {G}' source is one mana of either color."""
        pool = ManaPool()
        pool.add_choice({Color.RED, Color.GREEN})
        assert pool.total() == 1
        assert pool.can_pay(ManaCost.parse("{G}"))
        assert not pool.can_pay(ManaCost.parse("{R}{G}"))

    def test_as_dict(self):
        pool = ManaPool()
        pool.add(Color.GREEN)
        assert pool.as_dict()["G"] == 1
        assert "any" not in pool.as_dict()


class TestLedger:
    """Available mana derived from permanents."""

    def test_untapped_lands_produce_their_color(self, state, put_land):
        put_land(YOU, "Mountain")
        put_land(YOU, "Forest")
        pool = available_mana(state, YOU)
        assert pool.get_amount(Color.RED) == 1
        assert pool.get_amount(Color.GREEN) == 1
        assert pool.total() == 2

    def test_tapped_lands_produce_nothing(self, state, put_land):
        mountain = put_land(YOU, "Mountain")
        mountain.tapped = True
        assert available_mana(state, YOU).total() == 0

    def test_creature_mana_source(self, state, put_creature):
        """Non-land permanents with '{T}: Add' text count as sources."""
        elf = put_creature(YOU, 1, 1, text="{T}: Add {G}.")
        assert produced_mana(elf) == [frozenset({Color.GREEN})]
        assert available_mana(state, YOU).get_amount(Color.GREEN) == 1

    def test_exclude_source(self, state, put_land):
        mountain = put_land(YOU, "Mountain")
        assert available_mana(state, YOU, exclude=(mountain.instance_id,)).total() == 0

    def test_state_pool_refreshed(self, state, put_land):
        put_land(YOU, "Forest")
        assert state.player(YOU).mana_pool.total() == 1


class TestAutoTap:
    """Paying costs by tapping lands."""

    def test_taps_exact_amount(self, state, put_land):
        lands = [put_land(YOU, "Forest") for _ in range(3)]
        assert auto_tap_lands(state, YOU, 2)
        assert [land.tapped for land in lands] == [True, True, False]
        assert state.player(YOU).mana_pool.total() == 1

    def test_not_enough_lands_taps_nothing(self, state, put_land):
        forest = put_land(YOU, "Forest")
        assert not auto_tap_lands(state, YOU, 2)
        assert not forest.tapped

    def test_excluded_land_is_skipped(self, state, put_land):
        first = put_land(YOU, "Forest")
        second = put_land(YOU, "Forest")
        assert auto_tap_lands(state, YOU, 1, exclude=(first.instance_id,))
        assert not first.tapped
        assert second.tapped
        assert untapped_lands(state, YOU) == [first]
