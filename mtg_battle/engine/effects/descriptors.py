"""Ability descriptors.

Parsing a card's rules text produces a tuple of these frozen values. They
describe what the text means; resolving them against a game is the job of
the resolver, triggered and activated modules.
"""
import re
from dataclasses import dataclass, field
from typing import Union

from ..mana import ManaCost, MANA_SYMBOL_PATTERN
from ..types import AbilityKind, EffectKind, Keyword, TriggerEvent


# =============================================================================
# Effect
# =============================================================================

@dataclass(frozen=True)
class Effect:
    """
    One recognised effect shape.

    Attributes:
        kind: Which shape matched
        amount: Cards drawn, life gained, damage dealt or tokens created
        power: Buff or token power
        toughness: Buff or token toughness
        target: "opponent", "creature", "permanent" or "self"
        token_name: Name given to created tokens
        text: The clause the effect was parsed from
    """
    kind: EffectKind
    amount: int = 0
    power: int = 0
    toughness: int = 0
    target: str = ""
    token_name: str = ""
    text: str = ""

    @property
    def is_custom(self) -> bool:
        return self.kind is EffectKind.CUSTOM

    @property
    def targets_creature(self) -> bool:
        return self.target in ("creature", "permanent")


# =============================================================================
# Cost
# =============================================================================

TAP_SYMBOL = re.compile(r"\{T\}|\btap\b", re.IGNORECASE)


@dataclass(frozen=True)
class AbilityCost:
    """
    The part of an activated ability before the colon.

    Attributes:
        mana_cost: Mana to pay
        tap: True if the source must tap ({T})
    """
    mana_cost: ManaCost = field(default_factory=ManaCost)
    tap: bool = False

    @classmethod
    def from_string(cls, cost_string: str) -> "AbilityCost":
        """
        Parse a cost such as "{2}{G}, {T}" or "Tap".

        Args:
            cost_string: The cost text before the colon
        """
        tap = bool(TAP_SYMBOL.search(cost_string))
        symbols = "".join(
            f"{{{s}}}" for s in MANA_SYMBOL_PATTERN.findall(cost_string) if s.upper() != "T"
        )
        return cls(mana_cost=ManaCost.parse(symbols), tap=tap)

    def __str__(self) -> str:
        parts = []
        if not self.mana_cost.is_free:
            parts.append(str(self.mana_cost))
        if self.tap:
            parts.append("{T}")
        return ", ".join(parts) or "{0}"


# =============================================================================
# Descriptors
# =============================================================================

@dataclass(frozen=True)
class StaticAbility:
    """A keyword granting a standing characteristic."""
    keyword: Keyword
    kind: AbilityKind = field(default=AbilityKind.STATIC, init=False)

    @property
    def name(self) -> str:
        return self.keyword.value


@dataclass(frozen=True)
class TriggeredAbility:
    """An effect that fires when its event happens."""
    event: TriggerEvent
    effect: Effect
    text: str = ""
    kind: AbilityKind = field(default=AbilityKind.TRIGGERED, init=False)


@dataclass(frozen=True)
class ActivatedAbility:
    """A "cost: effect" ability its controller can activate."""
    cost: AbilityCost
    effect: Effect
    text: str = ""
    kind: AbilityKind = field(default=AbilityKind.ACTIVATED, init=False)

    @property
    def requires_tap(self) -> bool:
        return self.cost.tap


AbilityDescriptor = Union[StaticAbility, TriggeredAbility, ActivatedAbility]
