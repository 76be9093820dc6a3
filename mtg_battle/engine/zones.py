"""MTG Battle - Zone Management

Zone changes are the only way a card instance's zone field changes. Each
move removes the id from exactly one zone list and inserts it into
another before returning, so callers never observe a card in two zones or
in none.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence, TYPE_CHECKING

from .objects import CardDefinition, CardInstance
from .types import InstanceId, PlayerKey, Zone

if TYPE_CHECKING:
    from .state import GameState


def create_instance(
    state: "GameState",
    definition: CardDefinition,
    controller: PlayerKey,
    zone: Zone = Zone.LIBRARY,
    is_token: bool = False,
) -> CardInstance:
    """Create a new instance in the arena and append it to a zone."""
    card = CardInstance(
        instance_id=state.next_instance_id(),
        definition=definition,
        controller=controller,
        zone=zone,
        is_token=is_token,
    )
    state.cards[card.instance_id] = card
    state.player(controller).zone_list(zone).append(card.instance_id)
    return card


def build_library(
    state: "GameState",
    key: PlayerKey,
    definitions: Sequence[CardDefinition],
) -> List[CardInstance]:
    """Create one library instance per definition, in order."""
    return [create_instance(state, d, key, Zone.LIBRARY) for d in definitions]


def move_card(
    state: "GameState",
    instance_id: InstanceId,
    to_zone: Zone,
    position: Optional[int] = None,
) -> Optional[CardInstance]:
    """
    Move an instance between zones of its controller.

    Leaving the battlefield resets the instance's battlefield state.
    Tokens that leave the battlefield stop existing and are removed from
    the arena.

    Args:
        state: The game state
        instance_id: The instance to move
        to_zone: Destination zone
        position: Insert index in the destination list (default: end)

    Returns:
        The moved instance, or None if a token ceased to exist

    Raises:
        KeyError: If the id is unknown or not in its recorded zone
    """
    card = state.card(instance_id)
    player = state.player(card.controller)
    source = player.zone_list(card.zone)
    if instance_id not in source:
        raise KeyError(f"{instance_id} is not in {card.controller.value}'s {card.zone.value}")

    leaving_battlefield = card.zone is Zone.BATTLEFIELD and to_zone is not Zone.BATTLEFIELD
    source.remove(instance_id)

    if leaving_battlefield:
        card.reset_characteristics()
        state.combat.forget(instance_id)
        if card.is_token:
            del state.cards[instance_id]
            return None

    destination = player.zone_list(to_zone)
    if position is None:
        destination.append(instance_id)
    else:
        destination.insert(position, instance_id)
    card.zone = to_zone
    return card


def draw_card(state: "GameState", key: PlayerKey) -> Optional[CardInstance]:
    """
    Draw the front card of a player's library into their hand.

    Drawing from an empty library loses the game for the drawing player.

    Returns:
        The drawn instance, or None if the library was empty
    """
    from .sba import lose_game

    player = state.player(key)
    if not player.library:
        state.log(f"{key.display_name} tried to draw from an empty library!")
        lose_game(state, key, "decked")
        return None

    card = move_card(state, player.library[0], Zone.HAND)
    if key is PlayerKey.PLAYER:
        state.log(f"You drew: {card.name}")
    else:
        state.log("AI drew a card")
    return card


def draw_cards(state: "GameState", key: PlayerKey, count: int) -> int:
    """Draw up to `count` cards, stopping if the game ends."""
    drawn = 0
    for _ in range(count):
        if state.game_over or draw_card(state, key) is None:
            break
        drawn += 1
    return drawn


def shuffle_library(state: "GameState", key: PlayerKey, rng: random.Random) -> None:
    rng.shuffle(state.player(key).library)


def put_onto_battlefield(
    state: "GameState",
    instance_id: InstanceId,
) -> CardInstance:
    """Move a card onto the battlefield with fresh summoning sickness."""
    card = move_card(state, instance_id, Zone.BATTLEFIELD)
    card.tapped = False
    card.summoning_sick = card.is_creature
    return card


def create_token(
    state: "GameState",
    controller: PlayerKey,
    name: str,
    power: int,
    toughness: int,
) -> CardInstance:
    """Create a creature token directly on the battlefield."""
    from .types import CardType

    definition = CardDefinition(
        name=name,
        types=frozenset({CardType.CREATURE}),
        power=power,
        toughness=toughness,
        rarity="token",
    )
    token = create_instance(state, definition, controller, Zone.BATTLEFIELD, is_token=True)
    token.summoning_sick = True
    return token


def check_zone_integrity(state: "GameState") -> List[str]:
    """
    Verify every arena instance sits in exactly one zone list.

    Returns:
        A list of problems; empty when the invariant holds
    """
    problems: List[str] = []
    seen = {}
    for key, player in state.players.items():
        for zone in Zone:
            for instance_id in player.zone_list(zone):
                if instance_id in seen:
                    problems.append(f"{instance_id} appears in {seen[instance_id]} and {key.value}:{zone.value}")
                seen[instance_id] = f"{key.value}:{zone.value}"
                card = state.find_card(instance_id)
                if card is None:
                    problems.append(f"{instance_id} in {key.value}:{zone.value} is not in the arena")
                elif card.zone is not zone or card.controller is not key:
                    problems.append(f"{instance_id} records {card.zone.value} but sits in {zone.value}")
    for instance_id in state.cards:
        if instance_id not in seen:
            problems.append(f"{instance_id} is in no zone")
    return problems


def destroy_permanent(state: "GameState", instance_id: InstanceId) -> bool:
    """
    Put a permanent into its owner's graveyard.

    Indestructible permanents stay where they are.

    Returns:
        True if the permanent left the battlefield
    """
    card = state.card(instance_id)
    if card.zone is not Zone.BATTLEFIELD:
        return False
    if card.is_indestructible:
        state.log(f"{card.name} is indestructible and survives")
        return False
    name = card.name
    move_card(state, instance_id, Zone.GRAVEYARD)
    state.log(f"{name} was destroyed")
    return True
