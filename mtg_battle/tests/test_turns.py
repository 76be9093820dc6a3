"""
Test suite for the turn/phase state machine and zone handling.
"""
from ..engine.turns import advance_phase, begin_turn, next_phase, timing_reason
from ..engine.types import Phase, PlayerKey, Zone
from ..engine.zones import check_zone_integrity, draw_card, draw_cards, move_card

YOU = PlayerKey.PLAYER
AI = PlayerKey.AI


class TestPhaseOrder:
    """Beginning -> Main 1 -> Combat -> Main 2 -> End."""

    def test_next_phase(self):
        assert next_phase(Phase.BEGINNING) is Phase.MAIN1
        assert next_phase(Phase.MAIN1) is Phase.COMBAT
        assert next_phase(Phase.COMBAT) is Phase.MAIN2
        assert next_phase(Phase.MAIN2) is Phase.END
        assert next_phase(Phase.END) is None

    def test_full_turn_passes_to_opponent(self, game):
        """Ending the End phase hands the turn over and the new owner draws."""
        state = game.state
        for _ in range(4):
            advance_phase(state)
        assert state.phase is Phase.END

        advance_phase(state)
        assert state.turn_owner is AI
        assert state.turn_number == 2
        assert state.phase is Phase.BEGINNING
        assert len(state.player(AI).hand) == 1

    def test_no_draw_on_first_turn(self, game):
        assert game.state.player(YOU).hand == []
        assert len(game.state.player(YOU).library) == 20


class TestBeginning:
    """Untap, sickness and land counter reset."""

    def test_untaps_only_turn_owner(self, state, put_creature, put_land):
        mine = put_creature(YOU, sick=True)
        land = put_land(YOU)
        theirs = put_creature(AI)
        for card in (mine, land, theirs):
            card.tapped = True
        state.player(YOU).lands_played_this_turn = 1

        begin_turn(state)
        assert not mine.tapped and not land.tapped
        assert not mine.summoning_sick
        assert theirs.tapped
        assert state.player(YOU).lands_played_this_turn == 0
        assert state.player(YOU).mana_pool.total() == 1


class TestTiming:
    """When cards may be played."""

    def test_land_outside_main_phase(self, state, in_hand):
        forest = in_hand(YOU, "Forest")
        state.phase = Phase.COMBAT
        assert timing_reason(forest, YOU, state) == "Lands can only be played during your main phase"

    def test_creature_on_opponents_turn(self, state, in_hand):
        bear = in_hand(YOU, "Grizzly Bears")
        state.turn_owner = AI
        state.phase = Phase.MAIN1
        assert timing_reason(bear, YOU, state) == "Not your turn"

    def test_instant_any_time(self, state, in_hand):
        bolt = in_hand(YOU, "Lightning Bolt")
        state.turn_owner = AI
        state.phase = Phase.COMBAT
        assert timing_reason(bolt, YOU, state) is None

    def test_main_phase_is_fine(self, state, in_hand):
        bear = in_hand(YOU, "Grizzly Bears")
        state.phase = Phase.MAIN2
        assert timing_reason(bear, YOU, state) is None


class TestZones:
    """Zone moves and draws."""

    def test_draw_moves_front_of_library(self, game):
        state = game.state
        front = state.player(YOU).library[0]
        card = draw_card(state, YOU)
        assert card.instance_id == front
        assert card.zone is Zone.HAND
        assert state.player(YOU).hand == [front]
        assert check_zone_integrity(state) == []

    def test_draw_from_empty_library_loses(self, state):
        draw_card(state, AI)
        assert state.game_over
        assert state.result.winner is YOU
        assert state.result.reason == "decked"

    def test_draw_cards_stops_at_game_over(self, game):
        state = game.state
        assert draw_cards(state, YOU, 25) == 20
        assert state.game_over

    def test_move_card_position(self, game):
        state = game.state
        drawn = draw_card(state, YOU)
        move_card(state, drawn.instance_id, Zone.LIBRARY, position=0)
        assert state.player(YOU).library[0] == drawn.instance_id
        assert len(state.player(YOU).library) == 20
