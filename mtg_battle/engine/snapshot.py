"""MTG Battle - Read-only Snapshots

A GameSnapshot is a frozen projection of the game state for renderers.
It copies values out of the live state, so holding one never lets a
caller mutate the game, and two snapshots taken without an intervening
action compare equal.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

from .types import PlayerKey, Zone

if TYPE_CHECKING:
    from .objects import CardInstance
    from .state import GameState


@dataclass(frozen=True)
class CardView:
    instance_id: str
    name: str
    type_line: str
    mana_cost: str
    cmc: int
    text: str
    power: Optional[int]
    toughness: Optional[int]
    tapped: bool
    summoning_sick: bool
    keywords: Tuple[str, ...]
    is_token: bool

    @classmethod
    def of(cls, card: "CardInstance") -> "CardView":
        definition = card.definition
        return cls(
            instance_id=card.instance_id,
            name=card.name,
            type_line=definition.type_line,
            mana_cost=str(definition.mana_cost),
            cmc=card.cmc,
            text=definition.text,
            power=card.power,
            toughness=card.toughness,
            tapped=card.tapped,
            summoning_sick=card.summoning_sick,
            keywords=tuple(sorted(k.value for k in card.keywords)),
            is_token=card.is_token,
        )


@dataclass(frozen=True)
class PlayerView:
    """
    One player's side of the table.

    Attributes:
        key: Seat value ("player" / "ai")
        life: Life total
        hand: Cards in hand, in order
        battlefield: Permanents
        graveyard: Graveyard, most recent last
        library_count: Cards left in the library
        mana: Available mana by symbol
        lands_played_this_turn: Lands played this turn
        max_mana: Lands played over the game
    """
    key: str
    life: int
    hand: Tuple[CardView, ...]
    battlefield: Tuple[CardView, ...]
    graveyard: Tuple[CardView, ...]
    library_count: int
    mana: Tuple[Tuple[str, int], ...]
    lands_played_this_turn: int
    max_mana: int


@dataclass(frozen=True)
class GameSnapshot:
    turn_number: int
    phase: str
    turn_owner: str
    game_over: bool
    winner: Optional[str]
    end_reason: Optional[str]
    players: Tuple[PlayerView, ...]
    attackers: Tuple[str, ...]
    blocks: Tuple[Tuple[str, str], ...]
    messages: Tuple[str, ...]

    def player(self, key: PlayerKey) -> PlayerView:
        for view in self.players:
            if view.key == key.value:
                return view
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict/list form for renderers."""
        data = asdict(self)
        data["players"] = {view["key"]: view for view in data["players"]}
        for view in data["players"].values():
            view["mana"] = dict(view["mana"])
        data["blocks"] = dict(data["blocks"])
        return data


def _player_view(state: "GameState", key: PlayerKey) -> PlayerView:
    player = state.player(key)
    views = {
        zone: tuple(CardView.of(c) for c in state.cards_in(key, zone))
        for zone in (Zone.HAND, Zone.BATTLEFIELD, Zone.GRAVEYARD)
    }
    return PlayerView(
        key=key.value,
        life=player.life,
        hand=views[Zone.HAND],
        battlefield=views[Zone.BATTLEFIELD],
        graveyard=views[Zone.GRAVEYARD],
        library_count=len(player.library),
        mana=tuple(sorted(player.mana_pool.as_dict().items())),
        lands_played_this_turn=player.lands_played_this_turn,
        max_mana=player.max_mana,
    )


def take_snapshot(state: "GameState") -> GameSnapshot:
    """Project the live state into a frozen snapshot."""
    result = state.result
    return GameSnapshot(
        turn_number=state.turn_number,
        phase=state.phase.value,
        turn_owner=state.turn_owner.value,
        game_over=state.game_over,
        winner=result.winner.value if result and result.winner else None,
        end_reason=result.reason if result else None,
        players=tuple(_player_view(state, key) for key in PlayerKey),
        attackers=tuple(state.combat.attackers),
        blocks=tuple(sorted(state.combat.blocks.items())),
        messages=tuple(state.messages),
    )
