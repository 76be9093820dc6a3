"""MTG Battle - Combat Engine

Handles attack legality, blocking and combat damage between one attacker
and at most one blocker.

Damage order for a blocked attacker:
1. First strike step (only when the attacker has it and the blocker does not)
2. Regular damage step (both sides, unless the attacker already struck)
3. Double strike step (attacker hits a surviving blocker again)

Deathtouch, lifelink and trample are applied inside whichever step the
damage is dealt in. Indestructible creatures can be reduced to 0 or less
toughness but are never put into the graveyard by damage. Cards without a
toughness value (non-creatures) take no damage.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

from .keywords.static import get_registry
from .types import InstanceId, Keyword, PlayerKey, Zone

if TYPE_CHECKING:
    from .objects import CardInstance
    from .state import GameState


# =============================================================================
# Combat State
# =============================================================================

@dataclass
class CombatState:
    """
    Pending combat for the current turn.

    Attributes:
        attackers: Attacking instance ids, in declaration order
        blocks: Attacker id -> blocker id
        attacking_player: Seat that declared the attackers
    """
    attackers: List[InstanceId] = field(default_factory=list)
    blocks: Dict[InstanceId, InstanceId] = field(default_factory=dict)
    attacking_player: Optional[PlayerKey] = None

    @property
    def has_attackers(self) -> bool:
        return bool(self.attackers)

    def add_attacker(self, instance_id: InstanceId, key: PlayerKey) -> None:
        self.attacking_player = key
        if instance_id not in self.attackers:
            self.attackers.append(instance_id)

    def add_block(self, attacker_id: InstanceId, blocker_id: InstanceId) -> None:
        self.blocks[attacker_id] = blocker_id

    def is_attacking(self, instance_id: InstanceId) -> bool:
        return instance_id in self.attackers

    def is_blocking(self, instance_id: InstanceId) -> bool:
        return instance_id in self.blocks.values()

    def blocker_for(self, attacker_id: InstanceId) -> Optional[InstanceId]:
        return self.blocks.get(attacker_id)

    def forget(self, instance_id: InstanceId) -> None:
        """Drop a creature that left the battlefield from the attacker list.

        Blocks made by it are kept so its attacker stays blocked.
        """
        if instance_id in self.attackers:
            self.attackers.remove(instance_id)
            self.blocks.pop(instance_id, None)

    def clear(self) -> None:
        self.attackers.clear()
        self.blocks.clear()
        self.attacking_player = None


@dataclass(frozen=True)
class AttackCheck:
    """Outcome of an attack or block legality check."""
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


# =============================================================================
# Legality
# =============================================================================

def has_first_strike(card: "CardInstance") -> bool:
    """First Strike or Double Strike grants first-strike damage."""
    return card.has_first_strike


def can_attack(card: "CardInstance", owner: PlayerKey, state: "GameState") -> AttackCheck:
    """
    Check whether a creature may be declared as an attacker.

    Only the creature's own characteristics are checked here; phase and
    turn ownership are validated by the action API.
    """
    if card.controller is not owner or card.zone is not Zone.BATTLEFIELD:
        return AttackCheck(False, "Not on your battlefield")
    if not card.is_creature:
        return AttackCheck(False, "Not a creature")
    if card.has_keyword(Keyword.DEFENDER):
        return AttackCheck(False, "Has defender")
    if card.summoning_sick and not card.has_keyword(Keyword.HASTE):
        return AttackCheck(False, "Summoning sickness")
    if card.tapped:
        return AttackCheck(False, "Already tapped")
    if state.combat.is_attacking(card.instance_id):
        return AttackCheck(False, "Already attacking")
    return AttackCheck(True)


def can_block(blocker: "CardInstance", attacker: "CardInstance", state: "GameState") -> AttackCheck:
    """Check whether `blocker` may block `attacker`."""
    if blocker.zone is not Zone.BATTLEFIELD or not blocker.is_creature:
        return AttackCheck(False, "Not a creature on the battlefield")
    if blocker.controller is attacker.controller:
        return AttackCheck(False, "Cannot block your own creature")
    if blocker.tapped:
        return AttackCheck(False, "Tapped creatures cannot block")
    if not state.combat.is_attacking(attacker.instance_id):
        return AttackCheck(False, "That creature is not attacking")
    if state.combat.blocker_for(attacker.instance_id) is not None:
        return AttackCheck(False, "Attacker is already blocked")
    if state.combat.is_blocking(blocker.instance_id):
        return AttackCheck(False, "Already blocking")
    registry = get_registry()
    if registry.get_minimum_blockers(attacker) > 1:
        return AttackCheck(False, "Menace: cannot be blocked by one creature")
    if not registry.can_be_blocked_by(attacker, blocker):
        return AttackCheck(False, "Cannot block a creature with flying")
    return AttackCheck(True)


def legal_blockers(state: "GameState", attacker: "CardInstance") -> List["CardInstance"]:
    defender = attacker.controller.opponent
    return [c for c in state.creatures(defender) if can_block(c, attacker, state)]


# =============================================================================
# Damage
# =============================================================================

def _is_lethal(card: "CardInstance") -> bool:
    """Only cards with a toughness value can be dealt lethal damage."""
    return card.toughness is not None and card.toughness <= 0


class _Encounter:
    """Damage bookkeeping for one attacker and its blocker."""

    def __init__(self, attacker: "CardInstance", blocker: Optional["CardInstance"],
                 attacker_owner: PlayerKey, state: "GameState"):
        self.attacker = attacker
        self.blocker = blocker
        self.attacker_owner = attacker_owner
        self.defender_owner = attacker_owner.opponent
        self.state = state
        self.messages: List[str] = []

    def emit(self, message: str) -> None:
        self.messages.append(message)
        self.state.log(message)

    def lifelink(self, source: "CardInstance", amount: int) -> None:
        if amount > 0 and source.has_keyword(Keyword.LIFELINK):
            self.state.player(source.controller).gain_life(amount)
            self.emit(f"{source.controller.display_name} gained {amount} life from lifelink")

    def hit_player(self, amount: int) -> None:
        if amount <= 0:
            return
        self.state.player(self.defender_owner).lose_life(amount)
        self.emit(f"{self.attacker.name} deals {amount} damage to {self.defender_owner.display_name}")
        self.lifelink(self.attacker, amount)

    def hit_creature(self, source: "CardInstance", target: "CardInstance") -> int:
        amount = max(source.power or 0, 0)
        if amount <= 0 or target.toughness is None:
            return 0
        target.toughness -= amount
        self.emit(f"{source.name} deals {amount} damage to {target.name}")
        if source is self.attacker and source.has_keyword(Keyword.DEATHTOUCH) and target.toughness > 0:
            target.toughness = 0
            self.emit(f"{source.name}'s deathtouch destroys {target.name}")
        self.lifelink(source, amount)
        return amount

    def trample(self, toughness_before: int) -> None:
        if not self.attacker.has_keyword(Keyword.TRAMPLE):
            return
        excess = max((self.attacker.power or 0) - max(toughness_before, 0), 0)
        if excess > 0:
            self.state.player(self.defender_owner).lose_life(excess)
            self.emit(f"{self.attacker.name} tramples for {excess} damage")

    def bury(self, card: "CardInstance") -> bool:
        """Destroy a creature with lethal damage. Returns True if it died."""
        from .zones import destroy_permanent

        if card.zone is not Zone.BATTLEFIELD or not _is_lethal(card):
            return False
        return destroy_permanent(self.state, card.instance_id)


def resolve_combat_damage(
    attacker: "CardInstance",
    blocker: Optional["CardInstance"],
    attacker_owner: PlayerKey,
    state: "GameState",
) -> List[str]:
    """
    Resolve combat damage between an attacker and an optional blocker.

    The caller is responsible for combat legality. The game-over check runs
    once damage has been dealt.

    Args:
        attacker: The attacking creature
        blocker: The blocking creature, or None if unblocked
        attacker_owner: Seat of the attacking player
        state: The game state

    Returns:
        Event messages in the order they happened
    """
    from .sba import check_game_over

    encounter = _Encounter(attacker, blocker, attacker_owner, state)
    double_strike = attacker.has_keyword(Keyword.DOUBLE_STRIKE)

    if blocker is None:
        encounter.hit_player(max(attacker.power or 0, 0))
        check_game_over(state)
        return encounter.messages

    pre_combat_toughness = blocker.toughness
    struck_first = False

    # First strike step
    if has_first_strike(attacker) and not has_first_strike(blocker):
        struck_first = True
        encounter.hit_creature(attacker, blocker)
        if _is_lethal(blocker):
            encounter.trample(pre_combat_toughness)
            if encounter.bury(blocker):
                encounter.emit(f"{blocker.name} is destroyed by first strike")
                check_game_over(state)
                return encounter.messages

    # Regular damage step
    if not struck_first:
        encounter.hit_creature(attacker, blocker)
    encounter.hit_creature(blocker, attacker)
    if not struck_first and _is_lethal(blocker):
        encounter.trample(pre_combat_toughness)
    encounter.bury(blocker)
    attacker_died = encounter.bury(attacker)

    # Double strike step
    if double_strike and not attacker_died and blocker.zone is Zone.BATTLEFIELD \
            and (blocker.toughness or 0) > 0 and not check_game_over(state):
        toughness_before = blocker.toughness
        encounter.emit(f"{attacker.name} deals double strike damage")
        encounter.hit_creature(attacker, blocker)
        if _is_lethal(blocker):
            encounter.trample(toughness_before)
        encounter.bury(blocker)

    check_game_over(state)
    return encounter.messages


def resolve_combat(state: "GameState") -> List[str]:
    """
    Resolve every pending attacker in declaration order.

    Stops as soon as the game is over and clears the combat state.
    """
    combat = state.combat
    owner = combat.attacking_player
    messages: List[str] = []

    for attacker_id in list(combat.attackers):
        if state.game_over:
            break
        attacker = state.find_card(attacker_id)
        if attacker is None or attacker.zone is not Zone.BATTLEFIELD:
            continue

        blocker_id = combat.blocker_for(attacker_id)
        blocker = state.find_card(blocker_id) if blocker_id else None
        if blocker_id and (blocker is None or blocker.zone is not Zone.BATTLEFIELD):
            # Removed blocker: the attacker stays blocked
            if not attacker.has_keyword(Keyword.TRAMPLE):
                message = f"{attacker.name} was blocked and deals no damage"
                state.log(message)
                messages.append(message)
                continue
            blocker = None

        messages.extend(resolve_combat_damage(attacker, blocker, owner, state))

    combat.clear()
    return messages
