"""
MTG Battle - AI Decision Procedure.

Provides the AIAgent base class and the AIController used for the AI
seat (and as the autopilot for the human seat in headless runs).

The agent never touches the game state directly: it reads the state and
acts only through the Game action API it is handed, so every move it
makes goes through the same validation as a human's. Illegal or
unaffordable actions simply fail and are skipped.
"""

import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

from ..engine.combat import can_attack, legal_blockers
from ..engine.effects.parser import parse_spell_effects
from ..engine.mana import available_mana
from ..engine.types import EffectKind, Phase, PlayerKey, Zone

if TYPE_CHECKING:
    from ..engine.game import Game
    from ..engine.objects import CardInstance
    from ..engine.player import PlayerState


class Difficulty(Enum):
    """AI difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def aggressiveness(self) -> float:
        """Chance used when deciding whether to attack."""
        return _AGGRESSIVENESS[self]

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        """
        Accept a Difficulty or its name, case-insensitively.

        Raises:
            ValueError: For unknown names
        """
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r} (expected easy, medium or hard)")


_AGGRESSIVENESS: Dict[Difficulty, float] = {
    Difficulty.EASY: 0.3,
    Difficulty.MEDIUM: 0.6,
    Difficulty.HARD: 0.9,
}

CREATURE_BASE_VALUE = 10
BURN_FINISHER_VALUE = 100
BURN_VALUE = 15
SPELL_VALUE = 12
LOW_LIFE = 5


class AIAgent(ABC):
    """Abstract base class for AI agents."""

    def __init__(self, key: PlayerKey):
        self.key = key

    @abstractmethod
    def take_turn(self, game: "Game") -> None:
        """Play out the agent's turn through the action API."""
        pass

    @abstractmethod
    def assign_blocks(self, game: "Game", attacker_ids: Sequence[str]) -> None:
        """Declare blockers against the given attackers."""
        pass

    @abstractmethod
    def should_mulligan(self, hand: List["CardInstance"], player: "PlayerState") -> bool:
        """Decide whether to mulligan an opening hand."""
        pass


class AIController(AIAgent):
    """
    Rule-of-thumb AI.

    Each main phase it plays a land if it can and then at most one card;
    in combat it picks attackers according to its difficulty.

    Attributes:
        key: The seat this agent plays
        difficulty: Difficulty tier
        rng: Random source for attack decisions
    """

    def __init__(self, key: PlayerKey = PlayerKey.AI,
                 difficulty: Difficulty = Difficulty.MEDIUM,
                 rng: Optional[random.Random] = None):
        super().__init__(key)
        self.difficulty = Difficulty.parse(difficulty)
        self.rng = rng or random.Random()

    @property
    def aggressiveness(self) -> float:
        return self.difficulty.aggressiveness

    # =========================================================================
    # TURN
    # =========================================================================

    def take_turn(self, game: "Game") -> None:
        """
        Main 1 (land + one card), combat, Main 2 (one card), then pass.

        Stops as soon as the game ends or the turn leaves this seat.
        """
        state = game.state
        turn = state.turn_number

        def still_my_turn() -> bool:
            return (not state.game_over and state.turn_owner is self.key
                    and state.turn_number == turn)

        while still_my_turn():
            phase = state.phase
            if phase.is_main:
                self.main_phase(game)
            elif phase is Phase.COMBAT:
                self.combat_phase(game)
            if not still_my_turn():
                break
            game.pause()
            game.end_phase(self.key)

    def main_phase(self, game: "Game") -> None:
        self.play_land(game)
        if not game.state.game_over:
            self.play_best_card(game)

    def combat_phase(self, game: "Game") -> None:
        for attacker in self.select_attackers(game):
            if game.state.game_over:
                return
            game.pause()
            game.declare_attacker(attacker.instance_id, self.key)

    # =========================================================================
    # CARDS
    # =========================================================================

    def play_land(self, game: "Game") -> bool:
        player = game.state.player(self.key)
        if player.lands_played_this_turn != 0:
            return False
        for card in game.state.cards_in(self.key, Zone.HAND):
            if card.is_land:
                game.pause()
                return bool(game.play_card(card.instance_id, self.key))
        return False

    def evaluate_card(self, card: "CardInstance", game: "Game") -> float:
        """
        Heuristic value of casting a card, per mana spent.

        Creatures are worth power + toughness plus a flat bonus. Burn is
        worth a lot when the opponent is at 5 life or less.
        """
        value = 0.0
        if card.is_creature:
            value = (card.power or 0) + (card.toughness or 0) + CREATURE_BASE_VALUE
        elif card.definition.is_instant or card.definition.is_sorcery:
            if self._is_burn(card):
                opponent_life = game.state.player(self.key.opponent).life
                value = BURN_FINISHER_VALUE if opponent_life <= LOW_LIFE else BURN_VALUE
            else:
                value = SPELL_VALUE

        if card.cmc > 0:
            value = value / card.cmc
        return value

    @staticmethod
    def _is_burn(card: "CardInstance") -> bool:
        return any(
            e.kind is EffectKind.DAMAGE and e.target == "opponent"
            for e in parse_spell_effects(card)
        )

    def playable_cards(self, game: "Game") -> List["CardInstance"]:
        """Non-land cards in hand affordable with current mana, best first."""
        total = available_mana(game.state, self.key).total()
        cards = [
            c for c in game.state.cards_in(self.key, Zone.HAND)
            if not c.is_land and c.cmc <= total
        ]
        if self.difficulty is Difficulty.EASY:
            return sorted(cards, key=lambda c: c.cmc)
        return sorted(cards, key=lambda c: self.evaluate_card(c, game), reverse=True)

    def play_best_card(self, game: "Game") -> Optional["CardInstance"]:
        """Play the first playable card that the engine accepts."""
        for card in self.playable_cards(game):
            game.pause()
            if game.play_card(card.instance_id, self.key):
                return card
        return None

    # =========================================================================
    # COMBAT
    # =========================================================================

    def select_attackers(self, game: "Game") -> List["CardInstance"]:
        state = game.state
        creatures = [
            c for c in state.creatures(self.key)
            if can_attack(c, self.key, state)
        ]
        if not creatures:
            return []

        if self.difficulty is Difficulty.EASY:
            if self.rng.random() < self.aggressiveness:
                return [creatures[0]]
            return []

        if self.difficulty is Difficulty.MEDIUM:
            return [c for c in creatures if self.rng.random() < self.aggressiveness]

        opponent = self.key.opponent
        blockers = [c for c in state.creatures(opponent) if not c.tapped]
        if not blockers:
            return creatures

        opponent_life = state.player(opponent).life
        attackers = []
        for creature in creatures:
            power = creature.power or 0
            toughness = creature.toughness or 0
            if power >= 3 or opponent_life <= LOW_LIFE or (
                self.rng.random() < self.aggressiveness and toughness >= 3
            ):
                attackers.append(creature)
        return attackers

    def select_blocker(self, attacker: "CardInstance",
                       candidates: Sequence["CardInstance"]) -> Optional["CardInstance"]:
        """First candidate tough enough to survive the attacker's power."""
        for candidate in candidates:
            if (candidate.toughness or 0) >= (attacker.power or 0):
                return candidate
        return None

    def assign_blocks(self, game: "Game", attacker_ids: Sequence[str]) -> None:
        state = game.state
        for attacker_id in attacker_ids:
            attacker = state.find_card(attacker_id)
            if attacker is None:
                continue
            candidates = legal_blockers(state, attacker)
            blocker = self.select_blocker(attacker, candidates)
            if blocker is not None:
                game.declare_blocker(blocker.instance_id, attacker_id, self.key)

    # =========================================================================
    # MULLIGAN
    # =========================================================================

    def should_mulligan(self, hand: List["CardInstance"], player: "PlayerState") -> bool:
        """Mulligan once if the opening hand has 1 or fewer, or 6 or more, lands."""
        if player.mulligans_taken > 0:
            return False
        lands = sum(1 for c in hand if c.is_land)
        return lands <= 1 or lands >= 6
