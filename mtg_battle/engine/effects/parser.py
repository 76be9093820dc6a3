"""Rules-text parser.

Turns a card's rules text into ability descriptors by matching a closed
vocabulary of patterns. This is deliberately not a rules interpreter:
text that matches nothing produces no descriptor, and an effect clause
that matches no known shape becomes a CUSTOM effect that is logged and
never executed.

Recognised shapes, first match wins:
    draw N cards, gain N life, N damage, destroy target creature/permanent,
    +X/+Y buff, create N P/T token(s)
"""
import re
from functools import lru_cache
from typing import List, Tuple, Union

from ..keywords.static import get_registry
from ..mana import MANA_ABILITY_PATTERN
from ..objects import CardDefinition, CardInstance
from ..types import EffectKind, TriggerEvent
from .descriptors import (
    AbilityCost, AbilityDescriptor, ActivatedAbility, Effect, StaticAbility,
    TriggeredAbility,
)

CardLike = Union[CardInstance, CardDefinition]

_WORD_NUMBERS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}
_NUMBER = r"(\d+|a|an|one|two|three|four|five|six|seven|eight|nine|ten)"

CLAUSE_SPLIT = re.compile(r"\n+|(?<=[.!])\s+")
REMINDER_TEXT = re.compile(r"\([^)]*\)")

DRAW_PATTERN = re.compile(rf"\bdraws?\s+{_NUMBER}\s+cards?\b", re.IGNORECASE)
DRAW_WORD = re.compile(r"\bdraws?\b", re.IGNORECASE)
LIFE_PATTERN = re.compile(r"\bgains?\s+(\d+)\s+life\b", re.IGNORECASE)
DAMAGE_PATTERN = re.compile(r"(\d+)\s+damage\b", re.IGNORECASE)
BUFF_PATTERN = re.compile(r"([+-]\d+)\s*/\s*([+-]\d+)")
TOKEN_PATTERN = re.compile(
    rf"\bcreates?\s+{_NUMBER}\s+(\d+)\s*/\s*(\d+)\s+(?:[a-z]+\s+)*?(?P<name>[A-Za-z]+)?\s*creature\s+tokens?",
    re.IGNORECASE,
)
ACTIVATED_PATTERN = re.compile(r"^(?P<cost>[^:]+):\s*(?P<effect>.+)$")
ETB_PATTERN = re.compile(r"^when(?:ever)?\b.*?\benters\b(?:\s+the\s+battlefield)?[^,]*,\s*(?P<effect>.+)$",
                         re.IGNORECASE)
ATTACK_PATTERN = re.compile(r"^when(?:ever)?\b.*?\battacks\b[^,]*,\s*(?P<effect>.+)$", re.IGNORECASE)

_COLOR_WORDS = {"white", "blue", "black", "red", "green", "colorless"}


def _number(value: str) -> int:
    value = value.lower()
    return int(value) if value.isdigit() else _WORD_NUMBERS.get(value, 1)


def _text_of(card: CardLike) -> str:
    definition = getattr(card, "definition", card)
    return definition.text or ""


def split_clauses(text: str) -> List[str]:
    """Split rules text into clauses on newlines and sentence ends.

    Parenthesised reminder text is dropped.
    """
    if not text:
        return []
    cleaned = REMINDER_TEXT.sub("", text)
    return [c.strip() for c in CLAUSE_SPLIT.split(cleaned) if c and c.strip()]


# =============================================================================
# Effects
# =============================================================================

def parse_effect(clause: str) -> Effect:
    """
    Match one effect clause against the known shapes.

    Args:
        clause: Text such as "draw two cards" or "deal 3 damage to any target"

    Returns:
        The matching Effect, or a CUSTOM effect carrying the clause text
    """
    text = clause.strip()
    lowered = text.lower()
    targets_creature = "target creature" in lowered

    if DRAW_WORD.search(text):
        match = DRAW_PATTERN.search(text)
        return Effect(EffectKind.DRAW, amount=_number(match.group(1)) if match else 1, text=text)

    if "gain" in lowered and "life" in lowered:
        match = LIFE_PATTERN.search(text)
        return Effect(EffectKind.GAIN_LIFE, amount=int(match.group(1)) if match else 1, text=text)

    if "damage" in lowered:
        match = DAMAGE_PATTERN.search(text)
        return Effect(
            EffectKind.DAMAGE,
            amount=int(match.group(1)) if match else 1,
            target="creature" if targets_creature else "opponent",
            text=text,
        )

    if "destroy" in lowered:
        return Effect(
            EffectKind.DESTROY,
            target="creature" if "creature" in lowered else "permanent",
            text=text,
        )

    match = BUFF_PATTERN.search(text)
    if match:
        return Effect(
            EffectKind.BUFF,
            power=int(match.group(1)),
            toughness=int(match.group(2)),
            target="creature" if targets_creature else "self",
            text=text,
        )

    if "create" in lowered and "token" in lowered:
        match = TOKEN_PATTERN.search(text)
        if match:
            name = match.group("name") or ""
            if name.lower() in _COLOR_WORDS:
                name = ""
            return Effect(
                EffectKind.CREATE_TOKEN,
                amount=_number(match.group(1)),
                power=int(match.group(2)),
                toughness=int(match.group(3)),
                token_name=name.capitalize() or "Token",
                text=text,
            )
        return Effect(EffectKind.CREATE_TOKEN, amount=1, power=1, toughness=1,
                      token_name="Token", text=text)

    return Effect(EffectKind.CUSTOM, text=text)


# =============================================================================
# Abilities
# =============================================================================

def _parse_clause(clause: str) -> List[AbilityDescriptor]:
    if MANA_ABILITY_PATTERN.search(clause):
        return []

    match = ETB_PATTERN.match(clause)
    if match:
        return [TriggeredAbility(TriggerEvent.ENTERS_BATTLEFIELD, parse_effect(match.group("effect")), clause)]

    match = ATTACK_PATTERN.match(clause)
    if match:
        return [TriggeredAbility(TriggerEvent.ATTACKS, parse_effect(match.group("effect")), clause)]

    match = ACTIVATED_PATTERN.match(clause)
    if match and ("{" in match.group("cost") or "tap" in match.group("cost").lower()):
        cost = AbilityCost.from_string(match.group("cost"))
        return [ActivatedAbility(cost, parse_effect(match.group("effect")), clause)]

    return [StaticAbility(k) for k in get_registry().match(clause)]


@lru_cache(maxsize=1024)
def _parse_text(text: str) -> Tuple[AbilityDescriptor, ...]:
    abilities: List[AbilityDescriptor] = []
    for clause in split_clauses(text):
        for ability in _parse_clause(clause):
            if ability not in abilities:
                abilities.append(ability)
    return tuple(abilities)


def parse_abilities(card: CardLike) -> Tuple[AbilityDescriptor, ...]:
    """
    Parse a card's rules text into ability descriptors.

    Mana abilities are left to the mana ledger and are not returned.

    Args:
        card: A CardInstance or CardDefinition

    Returns:
        Descriptors in the order they appear in the text
    """
    return _parse_text(_text_of(card))


def static_abilities(card: CardLike) -> List[StaticAbility]:
    return [a for a in parse_abilities(card) if isinstance(a, StaticAbility)]


def triggered_abilities(card: CardLike, event: TriggerEvent) -> List[TriggeredAbility]:
    return [a for a in parse_abilities(card) if isinstance(a, TriggeredAbility) and a.event is event]


def activated_abilities(card: CardLike) -> List[ActivatedAbility]:
    """Activated abilities only, indexed as activate_ability expects."""
    return [a for a in parse_abilities(card) if isinstance(a, ActivatedAbility)]


def parse_spell_effects(card: CardLike) -> Tuple[Effect, ...]:
    """
    Effects of an instant or sorcery, one per clause.

    Keyword lines such as "Flash" are skipped.
    """
    registry = get_registry()
    effects = []
    for clause in split_clauses(_text_of(card)):
        if registry.lookup(clause.rstrip(".")) is not None:
            continue
        effects.append(parse_effect(clause))
    return tuple(effects)
