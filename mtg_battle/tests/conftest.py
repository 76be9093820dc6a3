"""
Shared pytest fixtures for MTG Battle tests.

This module provides:
- A bare GameState and a Game session over it (AI auto-run disabled)
- Factories that put creatures and lands straight onto the battlefield
- A factory that puts any catalog card into a hand
"""
import random

import pytest

from ..cards.database import default_catalog
from ..engine.game import Game, GameConfig
from ..engine.objects import CardDefinition
from ..engine.effects.triggered import apply_static
from ..engine.mana import refresh_mana_pool
from ..engine.state import GameState
from ..engine.turns import begin_turn
from ..engine.types import PlayerKey, Zone
from ..engine.zones import build_library, create_instance, put_onto_battlefield


def creature_definition(name="Test Creature", power=2, toughness=2, text="", mana_cost="{1}{G}"):
    return CardDefinition.from_dict({
        "name": name,
        "type_line": "Creature - Test",
        "mana_cost": mana_cost,
        "power": power,
        "toughness": toughness,
        "text": text,
    })


# =============================================================================
# State Fixtures
# =============================================================================

@pytest.fixture
def state():
    """An empty two-player state at turn 1, Beginning, human to act."""
    return GameState.new()


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def game(state, catalog):
    """
    A Game over the `state` fixture.

    Both libraries hold 20 Grizzly Bears, hands are empty and the AI does
    not run on its own, so tests drive both seats explicitly.
    """
    bears = catalog.get("Grizzly Bears")
    for key in PlayerKey:
        build_library(state, key, [bears] * 20)
    config = GameConfig(auto_run_ai=False)
    session = Game(state, config=config, rng=random.Random(1))
    begin_turn(state)
    return session


# =============================================================================
# Card Factories
# =============================================================================

@pytest.fixture
def put_creature(state):
    """
    Put a creature onto a battlefield.

    Usage:
        bear = put_creature(PlayerKey.PLAYER, 2, 2, text="Flying")
    """
    def _put(key, power=2, toughness=2, text="", name=None, sick=False):
        definition = creature_definition(name or f"Creature {power}/{toughness}", power, toughness, text)
        card = create_instance(state, definition, key, Zone.HAND)
        put_onto_battlefield(state, card.instance_id)
        apply_static(card, state)
        card.summoning_sick = sick
        return card
    return _put


@pytest.fixture
def put_land(state, catalog):
    """Put a basic land (by name) onto a battlefield, untapped."""
    def _put(key, name="Mountain"):
        card = create_instance(state, catalog.get(name), key, Zone.HAND)
        put_onto_battlefield(state, card.instance_id)
        refresh_mana_pool(state, key)
        return card
    return _put


@pytest.fixture
def in_hand(state, catalog):
    """Put a card into a hand, by catalog name or as a CardDefinition."""
    def _add(key, card):
        definition = catalog.get(card) if isinstance(card, str) else card
        return create_instance(state, definition, key, Zone.HAND)
    return _add
