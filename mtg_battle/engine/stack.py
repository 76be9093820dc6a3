"""
MTG Battle - Minimal Stack

A last-in-first-out queue of instants and sorceries waiting to resolve.
There is no priority passing: a spell is pushed when it is cast and the
stack is resolved straight away, so responses are not modelled.

A spell card stays in its controller's hand while it is on the stack and
moves to the graveyard once its effects have resolved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, TYPE_CHECKING

from .effects.descriptors import Effect
from .effects.resolver import resolve_effect
from .types import InstanceId, PlayerKey, Zone
from .zones import move_card

if TYPE_CHECKING:
    from .state import GameState


@dataclass
class SpellOnStack:
    """
    A spell waiting to resolve.

    Attributes:
        card_id: The spell card's instance id
        controller: Who cast it
        effects: Parsed effects, resolved in order
        target_id: Explicit target chosen when cast, if any
    """
    card_id: InstanceId
    controller: PlayerKey
    effects: Tuple[Effect, ...] = field(default_factory=tuple)
    target_id: Optional[InstanceId] = None


class Stack:
    """LIFO spell stack for one game."""

    def __init__(self):
        self._objects: List[SpellOnStack] = []

    def push(self, obj: SpellOnStack) -> None:
        self._objects.append(obj)

    def pop(self) -> Optional[SpellOnStack]:
        return self._objects.pop() if self._objects else None

    def top(self) -> Optional[SpellOnStack]:
        return self._objects[-1] if self._objects else None

    def is_empty(self) -> bool:
        return not self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[SpellOnStack]:
        """Iterate from top to bottom."""
        return reversed(self._objects)

    def resolve_top(self, state: "GameState") -> List[str]:
        """
        Resolve the top spell and put its card into the graveyard.

        Returns:
            Messages produced by the spell's effects
        """
        spell = self.pop()
        if spell is None:
            return []

        card = state.card(spell.card_id)
        target = state.find_card(spell.target_id) if spell.target_id else None
        messages = []
        for effect in spell.effects:
            if state.game_over:
                break
            message = resolve_effect(effect, card, spell.controller, state, target)
            if message:
                messages.append(message)

        if card.zone is Zone.HAND:
            move_card(state, spell.card_id, Zone.GRAVEYARD)
        return messages

    def resolve_all(self, state: "GameState") -> List[str]:
        messages = []
        while not self.is_empty():
            messages.extend(self.resolve_top(state))
        return messages
