"""MTG Battle - Player State

A PlayerState holds one seat's life total, zone lists and per-turn
counters. Zone lists store instance ids only; the instances themselves
live in the GameState arena.
"""
from dataclasses import dataclass, field
from typing import List

from .mana import ManaPool
from .types import InstanceId, PlayerKey, Zone


@dataclass
class PlayerState:
    """
    State of one player.

    Attributes:
        key: Which seat this is
        life: Life total (may go negative before the game-over check)
        hand: Ordered instance ids
        battlefield: Instance ids, order not meaningful
        graveyard: Ordered instance ids, most recent last
        library: Ordered instance ids, front = next draw
        mana_pool: Derived snapshot, recomputed by the mana ledger
        lands_played_this_turn: Reset to 0 at the start of this player's turn
        max_mana: Number of lands played over the game
        mulligans_taken: Opening-hand mulligans so far
    """
    key: PlayerKey
    life: int = 20
    hand: List[InstanceId] = field(default_factory=list)
    battlefield: List[InstanceId] = field(default_factory=list)
    graveyard: List[InstanceId] = field(default_factory=list)
    library: List[InstanceId] = field(default_factory=list)
    mana_pool: ManaPool = field(default_factory=ManaPool)
    lands_played_this_turn: int = 0
    max_mana: int = 0
    mulligans_taken: int = 0

    def zone_list(self, zone: Zone) -> List[InstanceId]:
        """Get the id list backing a zone."""
        if zone is Zone.HAND:
            return self.hand
        if zone is Zone.BATTLEFIELD:
            return self.battlefield
        if zone is Zone.GRAVEYARD:
            return self.graveyard
        if zone is Zone.LIBRARY:
            return self.library
        raise ValueError(f"Unknown zone: {zone}")

    def lose_life(self, amount: int) -> int:
        if amount <= 0:
            return 0
        self.life -= amount
        return amount

    def gain_life(self, amount: int) -> int:
        if amount <= 0:
            return 0
        self.life += amount
        return amount

    @property
    def name(self) -> str:
        return self.key.display_name
