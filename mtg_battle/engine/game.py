"""MTG Battle - Game Session and Action API

The Game class is the single mutation surface for one game. Every action
validates first and mutates second: a rejected action returns an
ActionResult with error "IllegalAction" and leaves the state untouched.
Once the game is over, every action is rejected with "TerminalState".

The computer opponent is driven synchronously: when the human passes the
turn, the AI's whole turn runs before end_phase returns.
"""
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Set, TYPE_CHECKING, Union

from .combat import can_attack, can_block
from .effects.activated import activate_ability as _activate_ability
from .effects.parser import parse_spell_effects
from .effects.triggered import apply_static, trigger_attack, trigger_etb
from .mana import auto_tap_lands, available_mana, refresh_mana_pool, untapped_lands
from .objects import CardDefinition
from .results import ActionResult, TERMINAL_STATE
from .sba import check_game_over, end_in_draw, lose_game
from .snapshot import GameSnapshot, take_snapshot
from .stack import SpellOnStack, Stack
from .state import GameResult, GameState
from .turns import advance_phase, begin_turn, timing_reason
from .types import InstanceId, Keyword, Phase, PlayerKey, Zone
from .zones import build_library, draw_cards, move_card, put_onto_battlefield, shuffle_library

if TYPE_CHECKING:
    from ..ai.agent import AIAgent, Difficulty

__all__ = ["ActionResult", "Game", "GameConfig", "GameResult", "start_game"]

BlockProvider = Callable[["Game", List[InstanceId]], None]
DeckSource = Union[Sequence[CardDefinition], Any, None]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class GameConfig:
    """
    Configuration settings for a game.

    Attributes:
        starting_life: Initial life total for each player (default 20)
        starting_hand_size: Cards drawn for the opening hand (default 7)
        max_mulligans: Opening-hand mulligans allowed per player (default 2)
        first_player: Seat that takes the first turn
        ai_delay: Seconds the AI pauses between actions (default 0)
        auto_run_ai: Run the AI's turn as soon as the human passes
        max_turns: Turn number after which the game is called a draw
        verbose: Enable debug output in the runner
    """
    starting_life: int = 20
    starting_hand_size: int = 7
    max_mulligans: int = 2
    first_player: PlayerKey = PlayerKey.PLAYER
    ai_delay: float = 0.0
    auto_run_ai: bool = True
    max_turns: int = 200
    verbose: bool = False


# =============================================================================
# GAME SESSION
# =============================================================================

class Game:
    """
    One game between the human seat and the AI.

    Attributes:
        state: The live GameState (read it, mutate it only through actions)
        config: Game configuration
        rng: Random source for shuffles and AI choices
        ai: The agent playing the AI seat
        block_provider: Called with the attacking creature ids when the AI
            attacks, so the human seat can declare blockers
        stack: Spells waiting to resolve
    """

    def __init__(
        self,
        state: GameState,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        ai: Optional["AIAgent"] = None,
        block_provider: Optional[BlockProvider] = None,
    ):
        from ..ai.agent import AIController

        self.state = state
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.ai = ai or AIController(PlayerKey.AI, rng=self.rng)
        self.block_provider = block_provider
        self.stack = Stack()
        self._acted: Set[PlayerKey] = set()
        self._running_ai = False

    # =========================================================================
    # HELPERS
    # =========================================================================

    def log(self, message: str, level: str = "info") -> None:
        self.state.log(message, level)

    @property
    def is_over(self) -> bool:
        return self.state.game_over

    @property
    def result(self) -> Optional[GameResult]:
        return self.state.result

    def _reject(self, reason: str) -> ActionResult:
        self.log(f"Rejected: {reason}", "debug")
        return ActionResult.illegal(reason)

    def _terminal(self) -> Optional[ActionResult]:
        if self.state.game_over:
            return ActionResult.illegal(TERMINAL_STATE)
        return None

    def _card_in(self, instance_id: InstanceId, key: PlayerKey, zone: Zone):
        card = self.state.find_card(instance_id)
        if card is None or card.controller is not key or card.zone is not zone:
            return None
        return card

    def pause(self) -> None:
        """Pacing delay between AI actions."""
        if self.config.ai_delay > 0:
            time.sleep(self.config.ai_delay)

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def play_card(self, instance_id: InstanceId, key: Union[PlayerKey, str],
                  target_id: Optional[InstanceId] = None) -> ActionResult:
        """
        Play a card from hand.

        Lands go straight onto the battlefield (one per turn, no mana).
        Other cards are paid for by auto-tapping lands; permanents enter
        the battlefield, instants and sorceries resolve and then go to the
        graveyard.

        Args:
            instance_id: The card to play
            key: The player playing it
            target_id: Optional explicit target for "target creature" spells

        Returns:
            ActionResult describing the outcome
        """
        terminal = self._terminal()
        if terminal is not None:
            return terminal
        key = PlayerKey.parse(key)
        state = self.state
        player = state.player(key)

        card = self._card_in(instance_id, key, Zone.HAND)
        if card is None:
            return self._reject("Card not found in hand")
        reason = timing_reason(card, key, state)
        if reason:
            return self._reject(reason)
        if target_id is not None and state.find_card(target_id) is None:
            return self._reject("Invalid target")

        if card.is_land:
            if player.lands_played_this_turn != 0:
                return self._reject("You can only play one land per turn")
            put_onto_battlefield(state, instance_id)
            player.lands_played_this_turn += 1
            player.max_mana += 1
            apply_static(card, state)
            refresh_mana_pool(state, key)
            self.log(f"{key.display_name} played {card.name}")
            trigger_etb(card, key, state)
            self._acted.add(key)
            return ActionResult.ok(f"Played {card.name}")

        cost = card.definition.mana_cost
        pool = available_mana(state, key)
        if cost.cmc > pool.total():
            return self._reject(f"Not enough mana! Need {cost.cmc}, have {pool.total()}")
        if not pool.can_pay(cost):
            return self._reject(f"Cannot pay {cost} with available colors")
        if len(untapped_lands(state, key)) < cost.cmc:
            return self._reject("Not enough untapped lands")

        auto_tap_lands(state, key, cost.cmc)
        self.log(f"{key.display_name} cast {card.name}")

        if card.is_permanent:
            put_onto_battlefield(state, instance_id)
            apply_static(card, state)
            trigger_etb(card, key, state)
        else:
            self.stack.push(SpellOnStack(
                card_id=instance_id,
                controller=key,
                effects=parse_spell_effects(card),
                target_id=target_id,
            ))
            self.stack.resolve_all(state)

        refresh_mana_pool(state, key)
        check_game_over(state)
        self._acted.add(key)
        return ActionResult.ok(f"Cast {card.name}")

    def declare_attacker(self, instance_id: InstanceId, key: Union[PlayerKey, str]) -> ActionResult:
        """Declare one creature as an attacker during its controller's combat."""
        terminal = self._terminal()
        if terminal is not None:
            return terminal
        key = PlayerKey.parse(key)
        state = self.state

        card = state.find_card(instance_id)
        if card is None:
            return self._reject("Card not found")
        if state.turn_owner is not key:
            return self._reject("Not your turn")
        if state.phase is not Phase.COMBAT:
            return self._reject("Can only attack during combat phase")
        check = can_attack(card, key, state)
        if not check:
            return self._reject(check.reason)

        if not card.has_keyword(Keyword.VIGILANCE):
            card.tapped = True
        state.combat.add_attacker(instance_id, key)
        self.log(f"{key.display_name} attacked with {card.name}!")
        trigger_attack(card, key, state)
        refresh_mana_pool(state, key)
        check_game_over(state)
        self._acted.add(key)
        return ActionResult.ok(f"{card.name} is attacking")

    def declare_blocker(self, blocker_id: InstanceId, attacker_id: InstanceId,
                        key: Union[PlayerKey, str]) -> ActionResult:
        """Block an attacking creature with one untapped creature."""
        terminal = self._terminal()
        if terminal is not None:
            return terminal
        key = PlayerKey.parse(key)
        state = self.state

        if state.phase is not Phase.COMBAT or state.turn_owner is not key.opponent:
            return self._reject("Can only block during your opponent's combat")
        blocker = self._card_in(blocker_id, key, Zone.BATTLEFIELD)
        attacker = state.find_card(attacker_id)
        if blocker is None or attacker is None:
            return self._reject("Card not found")
        check = can_block(blocker, attacker, state)
        if not check:
            return self._reject(check.reason)

        state.combat.add_block(attacker_id, blocker_id)
        self._acted.add(key)
        self.log(f"{blocker.name} blocks {attacker.name}")
        return ActionResult.ok(f"{blocker.name} blocks {attacker.name}")

    def activate_ability(self, instance_id: InstanceId, ability_index: int,
                         key: Union[PlayerKey, str]) -> ActionResult:
        """Activate a permanent's activated ability by index."""
        terminal = self._terminal()
        if terminal is not None:
            return terminal
        key = PlayerKey.parse(key)

        card = self._card_in(instance_id, key, Zone.BATTLEFIELD)
        if card is None:
            return self._reject("Card not found on your battlefield")
        result = _activate_ability(card, ability_index, key, self.state)
        if not result:
            self.log(f"Rejected: {result.reason}", "debug")
            return result
        check_game_over(self.state)
        self._acted.add(key)
        return result

    def end_phase(self, key: Union[PlayerKey, str]) -> GameSnapshot:
        """
        Advance to the next phase.

        Ending Combat collects blocks and resolves damage; ending the End
        phase passes the turn. Only the turn owner can end a phase; other
        calls change nothing.

        Returns:
            Snapshot of the state after the transition
        """
        key = PlayerKey.parse(key)
        state = self.state
        if state.game_over or state.turn_owner is not key:
            self.log(f"{key.display_name} cannot end this phase", "debug")
            return self.get_snapshot()

        if state.phase is Phase.COMBAT and state.combat.has_attackers:
            self._collect_blocks()
        self._acted.add(key)
        advance_phase(state)

        if not state.game_over and state.turn_number > self.config.max_turns:
            end_in_draw(state, "turn_limit")

        if (not state.game_over and state.turn_owner is self.ai.key
                and self.config.auto_run_ai and not self._running_ai):
            self.run_ai_turn()
        return self.get_snapshot()

    def mulligan(self, key: Union[PlayerKey, str]) -> ActionResult:
        """
        Shuffle the hand back and draw one card fewer.

        Only allowed during the seat's first turn, before it has acted.
        """
        terminal = self._terminal()
        if terminal is not None:
            return terminal
        key = PlayerKey.parse(key)
        player = self.state.player(key)

        first_turn = 1 if key is self.config.first_player else 2
        if key in self._acted or self.state.turn_number > first_turn:
            return self._reject("Mulligans are only allowed before the first action")
        if player.mulligans_taken >= self.config.max_mulligans:
            return self._reject(f"Maximum of {self.config.max_mulligans} mulligans")

        for instance_id in list(player.hand):
            move_card(self.state, instance_id, Zone.LIBRARY)
        shuffle_library(self.state, key, self.rng)
        player.mulligans_taken += 1
        size = self.config.starting_hand_size - player.mulligans_taken
        draw_cards(self.state, key, size)
        self.log(f"{key.display_name} mulliganed to {size} cards")
        return ActionResult.ok(f"Mulligan to {size}")

    def concede(self, key: Union[PlayerKey, str]) -> ActionResult:
        terminal = self._terminal()
        if terminal is not None:
            return terminal
        key = PlayerKey.parse(key)
        self.log(f"{key.display_name} conceded")
        lose_game(self.state, key, "concede")
        return ActionResult.ok("Conceded")

    def get_snapshot(self) -> GameSnapshot:
        return take_snapshot(self.state)

    # =========================================================================
    # AI
    # =========================================================================

    def run_ai_turn(self) -> None:
        """Let the AI play out its turn."""
        if self._running_ai:
            return
        self._running_ai = True
        try:
            self.ai.take_turn(self)
        finally:
            self._running_ai = False

    def _collect_blocks(self) -> None:
        """Ask the defending side for blocks before combat damage."""
        state = self.state
        attackers = list(state.combat.attackers)
        defender = state.turn_owner.opponent
        if defender is self.ai.key:
            self.ai.assign_blocks(self, attackers)
        elif self.block_provider is not None:
            self.block_provider(self, attackers)


# =============================================================================
# SETUP
# =============================================================================

def _expand(deck: DeckSource) -> List[CardDefinition]:
    if deck is None:
        from ..cards.database import basic_deck
        deck = basic_deck()
    if hasattr(deck, "expand"):
        return list(deck.expand())
    return list(deck)


def start_game(
    player_deck: DeckSource,
    ai_deck: DeckSource,
    difficulty: Union["Difficulty", str] = "medium",
    config: Optional[GameConfig] = None,
    rng: Optional[random.Random] = None,
    block_provider: Optional[BlockProvider] = None,
) -> Game:
    """
    Create a game, shuffle both decks, draw opening hands and start turn 1.

    Args:
        player_deck: Deck for the human seat (Deck, list of definitions, or
            None for the starter deck)
        ai_deck: Deck for the AI seat
        difficulty: "easy", "medium" or "hard"
        config: Game configuration
        rng: Random source; pass a seeded Random for reproducible games
        block_provider: Callback letting the human seat block AI attacks

    Returns:
        The Game session, at turn 1 Beginning for the first player

    Raises:
        ValueError: If a deck is smaller than the opening hand
    """
    from ..ai.agent import AIController, Difficulty

    config = config or GameConfig()
    rng = rng or random.Random()
    difficulty = Difficulty.parse(difficulty)

    state = GameState.new(config.starting_life, config.first_player)
    for key, deck in ((PlayerKey.PLAYER, player_deck), (PlayerKey.AI, ai_deck)):
        definitions = _expand(deck)
        if len(definitions) < config.starting_hand_size:
            raise ValueError(
                f"{key.display_name} deck has {len(definitions)} cards, "
                f"fewer than the opening hand of {config.starting_hand_size}"
            )
        build_library(state, key, definitions)
        shuffle_library(state, key, rng)

    ai = AIController(PlayerKey.AI, difficulty=difficulty, rng=rng)
    game = Game(state, config=config, rng=rng, ai=ai, block_provider=block_provider)
    state.log(f"Game started ({difficulty.value} AI)")

    for key in (config.first_player, config.first_player.opponent):
        draw_cards(state, key, config.starting_hand_size)

    if ai.should_mulligan(state.cards_in(PlayerKey.AI, Zone.HAND), state.player(PlayerKey.AI)):
        game.mulligan(PlayerKey.AI)

    begin_turn(state)
    if config.first_player is ai.key and config.auto_run_ai:
        game.run_ai_turn()
    return game
