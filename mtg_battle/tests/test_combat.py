"""
Test suite for the combat engine.

Tests cover:
- Attack and block legality (summoning sickness, Haste, Defender, Flying/Reach, Menace)
- First Strike / Double Strike damage steps
- Deathtouch, Trample, Lifelink, Indestructible
- Removed blockers and game over during combat
- Non-creature cards in a damage exchange
"""
from ..engine.combat import can_attack, can_block, resolve_combat, resolve_combat_damage
from ..engine.objects import CardDefinition
from ..engine.sba import check_game_over
from ..engine.types import Keyword, PlayerKey, Zone
from ..engine.zones import create_instance, move_card, put_onto_battlefield

YOU = PlayerKey.PLAYER
AI = PlayerKey.AI


# =============================================================================
# ATTACK / BLOCK LEGALITY
# =============================================================================

class TestCanAttack:
    """Attack legality for a single creature."""

    def test_untapped_creature_can_attack(self, state, put_creature):
        """A creature that has been under control since the turn began can attack."""
        bear = put_creature(YOU)
        assert can_attack(bear, YOU, state)

    def test_summoning_sick_creature_cannot_attack(self, state, put_creature):
        """A creature that just arrived cannot attack."""
        bear = put_creature(YOU, sick=True)
        check = can_attack(bear, YOU, state)
        assert not check
        assert check.reason == "Summoning sickness"

    def test_haste_ignores_summoning_sickness(self, state, put_creature):
        """Haste lets a new creature attack."""
        goblin = put_creature(YOU, text="Haste", sick=True)
        assert can_attack(goblin, YOU, state)

    def test_defender_cannot_attack(self, state, put_creature):
        """Defender creatures never attack."""
        wall = put_creature(YOU, 0, 4, text="Defender")
        assert can_attack(wall, YOU, state).reason == "Has defender"

    def test_tapped_creature_cannot_attack(self, state, put_creature):
        """A tapped creature cannot attack."""
        bear = put_creature(YOU)
        bear.tapped = True
        assert not can_attack(bear, YOU, state)

    def test_cannot_attack_twice(self, state, put_creature):
        """A creature already in the attacker list is rejected."""
        bear = put_creature(YOU, text="Vigilance")
        state.combat.add_attacker(bear.instance_id, YOU)
        assert can_attack(bear, YOU, state).reason == "Already attacking"

    def test_cannot_attack_with_opponents_creature(self, state, put_creature):
        """Only your own creatures can attack for you."""
        bear = put_creature(AI)
        assert not can_attack(bear, YOU, state)


class TestCanBlock:
    """Block legality, including evasion keywords."""

    def _attack(self, state, put_creature, text=""):
        attacker = put_creature(YOU, 2, 2, text=text)
        state.combat.add_attacker(attacker.instance_id, YOU)
        return attacker

    def test_plain_block(self, state, put_creature):
        """An untapped creature can block a plain attacker."""
        attacker = self._attack(state, put_creature)
        blocker = put_creature(AI)
        assert can_block(blocker, attacker, state)

    def test_flying_needs_flying_or_reach(self, state, put_creature):
        """Flying attackers are blocked only by Flying or Reach."""
        attacker = self._attack(state, put_creature, "Flying")
        ground = put_creature(AI)
        spider = put_creature(AI, 2, 4, text="Reach")
        bird = put_creature(AI, 1, 1, text="Flying")

        assert not can_block(ground, attacker, state)
        assert can_block(spider, attacker, state)
        assert can_block(bird, attacker, state)

    def test_menace_cannot_be_blocked_by_one_creature(self, state, put_creature):
        """With single blocks, Menace makes a creature unblockable."""
        attacker = self._attack(state, put_creature, "Menace")
        blocker = put_creature(AI)
        assert not can_block(blocker, attacker, state)

    def test_tapped_creature_cannot_block(self, state, put_creature):
        """Tapped creatures cannot block."""
        attacker = self._attack(state, put_creature)
        blocker = put_creature(AI)
        blocker.tapped = True
        assert not can_block(blocker, attacker, state)

    def test_one_blocker_per_attacker(self, state, put_creature):
        """An attacker already blocked cannot be blocked again."""
        attacker = self._attack(state, put_creature)
        first = put_creature(AI)
        second = put_creature(AI)
        state.combat.add_block(attacker.instance_id, first.instance_id)
        assert can_block(second, attacker, state).reason == "Attacker is already blocked"

    def test_non_attacker_cannot_be_blocked(self, state, put_creature):
        """Only declared attackers can be blocked."""
        bystander = put_creature(YOU)
        blocker = put_creature(AI)
        assert not can_block(blocker, bystander, state)


# =============================================================================
# DAMAGE
# =============================================================================

class TestUnblockedDamage:
    """Unblocked attackers hit the defending player."""

    def test_unblocked_damage(self, state, put_creature):
        """An unblocked 3/3 takes 3 life."""
        giant = put_creature(YOU, 3, 3)
        resolve_combat_damage(giant, None, YOU, state)
        assert state.player(AI).life == 17

    def test_unblocked_double_strike_hits_once(self, state, put_creature):
        """The second Double Strike hit only applies to a surviving blocker."""
        knight = put_creature(YOU, 3, 3, text="Double strike")
        resolve_combat_damage(knight, None, YOU, state)
        assert state.player(AI).life == 17

    def test_lifelink_gains_damage_dealt(self, state, put_creature):
        """Lifelink gains as much life as the damage dealt."""
        cleric = put_creature(YOU, 3, 3, text="Lifelink")
        resolve_combat_damage(cleric, None, YOU, state)
        assert state.player(AI).life == 17
        assert state.player(YOU).life == 23

    def test_zero_power_deals_nothing(self, state, put_creature):
        """A 0-power attacker leaves life totals alone."""
        wall = put_creature(YOU, 0, 4)
        messages = resolve_combat_damage(wall, None, YOU, state)
        assert state.player(AI).life == 20
        assert messages == []

    def test_lethal_damage_ends_game(self, state, put_creature):
        """Dropping the defender to 0 ends the game for the attacker."""
        state.player(AI).life = 3
        giant = put_creature(YOU, 5, 5)
        resolve_combat_damage(giant, None, YOU, state)
        assert state.game_over
        assert state.result.winner is YOU
        assert state.result.reason == "life"


class TestBlockedDamage:
    """Damage exchange between an attacker and its blocker."""

    def test_trade(self, state, put_creature):
        """Two 2/2s trade."""
        attacker = put_creature(YOU)
        blocker = put_creature(AI)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert attacker.zone is Zone.GRAVEYARD
        assert blocker.zone is Zone.GRAVEYARD
        assert state.player(AI).life == 20

    def test_first_strike_kills_before_damage_back(self, state, put_creature):
        """First Strike kills a 2/2 blocker without taking damage."""
        attacker = put_creature(YOU, 2, 2, text="First strike")
        blocker = put_creature(AI)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert blocker.zone is Zone.GRAVEYARD
        assert attacker.zone is Zone.BATTLEFIELD
        assert attacker.toughness == 2

    def test_first_strike_on_both_sides_is_simultaneous(self, state, put_creature):
        """If both have First Strike, damage is exchanged normally."""
        attacker = put_creature(YOU, 2, 2, text="First strike")
        blocker = put_creature(AI, 2, 2, text="First strike")
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert attacker.zone is Zone.GRAVEYARD
        assert blocker.zone is Zone.GRAVEYARD

    def test_blocker_survives_first_strike_and_hits_back(self, state, put_creature):
        """A blocker that survives first-strike damage still deals its damage."""
        attacker = put_creature(YOU, 2, 2, text="First strike")
        blocker = put_creature(AI, 3, 3)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert blocker.zone is Zone.BATTLEFIELD
        assert blocker.toughness == 1
        assert attacker.zone is Zone.GRAVEYARD

    def test_double_strike_second_hit(self, state, put_creature):
        """Double Strike hits again in the regular step if both survive."""
        attacker = put_creature(YOU, 2, 4, text="Double strike")
        blocker = put_creature(AI, 3, 3)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert blocker.zone is Zone.GRAVEYARD
        assert attacker.zone is Zone.BATTLEFIELD
        assert attacker.toughness == 1

    def test_double_strike_trample_on_first_hit(self, state, put_creature):
        """Excess first-strike damage tramples over a killed blocker."""
        attacker = put_creature(YOU, 3, 3, text="Double strike\nTrample")
        blocker = put_creature(AI, 2, 2)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert blocker.zone is Zone.GRAVEYARD
        assert attacker.toughness == 3
        assert state.player(AI).life == 19

    def test_deathtouch_kills_any_blocker(self, state, put_creature):
        """Any damage from a Deathtouch attacker is lethal."""
        attacker = put_creature(YOU, 1, 1, text="Deathtouch")
        blocker = put_creature(AI, 5, 5)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert blocker.zone is Zone.GRAVEYARD
        assert attacker.zone is Zone.GRAVEYARD

    def test_deathtouch_on_blocker_has_no_effect(self, state, put_creature):
        """Deathtouch only applies to the attacking creature."""
        attacker = put_creature(YOU, 5, 5)
        blocker = put_creature(AI, 1, 1, text="Deathtouch")
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert attacker.zone is Zone.BATTLEFIELD
        assert attacker.toughness == 4

    def test_trample_excess(self, state, put_creature):
        """Trample deals power minus blocker toughness to the player."""
        attacker = put_creature(YOU, 5, 5, text="Trample")
        blocker = put_creature(AI, 2, 2)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert state.player(AI).life == 17

    def test_trample_without_excess(self, state, put_creature):
        """A blocker that survives absorbs all trample damage."""
        attacker = put_creature(YOU, 3, 3, text="Trample")
        blocker = put_creature(AI, 1, 4)
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert state.player(AI).life == 20
        assert blocker.zone is Zone.BATTLEFIELD

    def test_lifelink_on_blocker(self, state, put_creature):
        """A Lifelink blocker gains life for its controller."""
        attacker = put_creature(YOU, 2, 5)
        blocker = put_creature(AI, 2, 2, text="Lifelink")
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert state.player(AI).life == 22

    def test_indestructible_blocker_survives(self, state, put_creature):
        """Indestructible creatures stay on the battlefield at 0 or less toughness."""
        attacker = put_creature(YOU, 3, 3)
        blocker = put_creature(AI, 1, 1, text="Indestructible")
        resolve_combat_damage(attacker, blocker, YOU, state)
        assert blocker.zone is Zone.BATTLEFIELD
        assert blocker.toughness <= 0


class TestNonCreatureCombatants:
    """Damage resolution with a card that has no power or toughness."""

    @staticmethod
    def put_artifact(state, key):
        definition = CardDefinition.from_dict({"name": "Ornament", "type_line": "Artifact"})
        card = create_instance(state, definition, key, Zone.HAND)
        put_onto_battlefield(state, card.instance_id)
        return card

    def test_non_creature_blocker_takes_no_damage(self, state, put_creature):
        attacker = put_creature(YOU, 3, 3, text="Trample")
        ornament = self.put_artifact(state, AI)
        messages = resolve_combat_damage(attacker, ornament, YOU, state)
        assert messages == []
        assert ornament.zone is Zone.BATTLEFIELD
        assert ornament.toughness is None
        assert attacker.toughness == 3
        assert state.player(AI).life == 20

    def test_non_creature_attacker_deals_nothing(self, state, put_creature):
        ornament = self.put_artifact(state, YOU)
        blocker = put_creature(AI, 2, 2)
        resolve_combat_damage(ornament, blocker, YOU, state)
        assert ornament.zone is Zone.BATTLEFIELD
        assert blocker.toughness == 2

    def test_double_strike_against_non_creature(self, state, put_creature):
        attacker = put_creature(YOU, 2, 2, text="Double strike")
        ornament = self.put_artifact(state, AI)
        resolve_combat_damage(attacker, ornament, YOU, state)
        assert ornament.zone is Zone.BATTLEFIELD
        assert attacker.zone is Zone.BATTLEFIELD


class TestResolveCombat:
    """Resolving the pending combat state."""

    def test_resolves_in_declaration_order_and_clears(self, state, put_creature):
        """All attackers deal damage and the combat state is emptied."""
        first = put_creature(YOU, 2, 2)
        second = put_creature(YOU, 3, 3)
        state.combat.add_attacker(first.instance_id, YOU)
        state.combat.add_attacker(second.instance_id, YOU)
        resolve_combat(state)
        assert state.player(AI).life == 15
        assert not state.combat.has_attackers
        assert state.combat.blocks == {}

    def test_removed_blocker_keeps_attacker_blocked(self, state, put_creature):
        """An attacker whose blocker left the battlefield deals no damage."""
        attacker = put_creature(YOU, 3, 3)
        blocker = put_creature(AI)
        state.combat.add_attacker(attacker.instance_id, YOU)
        state.combat.add_block(attacker.instance_id, blocker.instance_id)
        move_card(state, blocker.instance_id, Zone.GRAVEYARD)

        resolve_combat(state)
        assert state.player(AI).life == 20

    def test_removed_blocker_with_trample(self, state, put_creature):
        """A trampler whose blocker left assigns all damage to the player."""
        attacker = put_creature(YOU, 3, 3, text="Trample")
        blocker = put_creature(AI)
        state.combat.add_attacker(attacker.instance_id, YOU)
        state.combat.add_block(attacker.instance_id, blocker.instance_id)
        move_card(state, blocker.instance_id, Zone.GRAVEYARD)

        resolve_combat(state)
        assert state.player(AI).life == 17

    def test_stops_once_game_is_over(self, state, put_creature):
        """No further damage is dealt after the game ends."""
        state.player(AI).life = 2
        state.player(YOU).life = 10
        first = put_creature(YOU, 2, 2)
        second = put_creature(YOU, 2, 2, text="Lifelink")
        state.combat.add_attacker(first.instance_id, YOU)
        state.combat.add_attacker(second.instance_id, YOU)

        resolve_combat(state)
        assert state.game_over
        assert state.player(AI).life == 0
        assert state.player(YOU).life == 10


class TestGameOver:
    """Win-condition checks around life totals."""

    def test_both_players_dead_is_a_draw(self, state):
        """Both players at 0 or less at once is a draw."""
        state.player(YOU).life = 0
        state.player(AI).life = -2
        assert check_game_over(state)
        assert state.result.winner is None
        assert state.result.is_draw
        assert state.result.final_life == {"player": 0, "ai": -2}


class TestKeywordFlags:
    """Keyword flags set from rules text."""

    def test_keywords_are_flags_on_the_instance(self, put_creature):
        """Keyword text becomes flags when the creature enters."""
        angel = put_creature(YOU, 4, 4, text="Flying, vigilance")
        assert angel.has_keyword(Keyword.FLYING)
        assert angel.has_keyword(Keyword.VIGILANCE)
