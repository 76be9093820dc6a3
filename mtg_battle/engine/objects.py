"""MTG Battle - Card Objects

This module defines the two card shapes the engine works with:

- CardDefinition: immutable catalog data (name, cost, type line, text, ...)
- CardInstance: one physical copy in a game, with its own mutable state
  (tapped, summoning sickness, current power/toughness, keyword flags,
  zone and controller).
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set, Tuple

from .mana import ManaCost
from .types import CardType, Color, COLOR_NAMES, InstanceId, Keyword, PlayerKey, Zone


TYPE_LINE_SPLIT = re.compile(r"\s+[-—–]+\s+")


def parse_type_line(type_line: str) -> Tuple[FrozenSet[CardType], str]:
    """Split "Legendary Creature - Elf Druid" into types and subtype text.

    Words that are not card types (supertypes such as Basic or Legendary)
    are dropped.

    Returns:
        (set of CardType, subtype string)
    """
    if not type_line:
        return frozenset(), ""
    parts = TYPE_LINE_SPLIT.split(type_line.strip(), maxsplit=1)
    types = set()
    for word in parts[0].split():
        card_type = CardType.from_name(word)
        if card_type is not None:
            types.add(card_type)
    subtype = parts[1].strip() if len(parts) > 1 else ""
    return frozenset(types), subtype


def _parse_stat(value: Any) -> Optional[int]:
    """Power/toughness from catalog data; "*" and "X" count as 0."""
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def _parse_colors(values: Iterable[str]) -> FrozenSet[Color]:
    colors = set()
    for value in values or ():
        color = Color.from_symbol(value) if len(value) == 1 else COLOR_NAMES.get(value.lower())
        if color is not None and color is not Color.COLORLESS:
            colors.add(color)
    return frozenset(colors)


# =============================================================================
# Card Definition
# =============================================================================

@dataclass(frozen=True)
class CardDefinition:
    """
    Static card data as supplied by the card catalog.

    Attributes:
        name: Card name
        mana_cost: Structured mana cost
        types: Set of card types (Land, Creature, Instant, ...)
        subtype: Free-text subtype (e.g. "Elf Druid", "Forest")
        power: Base power (creatures only)
        toughness: Base toughness (creatures only)
        text: Rules text, used by the ability parser
        colors: Color identity
        rarity: Rarity string
    """
    name: str
    mana_cost: ManaCost = field(default_factory=ManaCost)
    types: FrozenSet[CardType] = frozenset()
    subtype: str = ""
    power: Optional[int] = None
    toughness: Optional[int] = None
    text: str = ""
    colors: FrozenSet[Color] = frozenset()
    rarity: str = "common"

    @property
    def cmc(self) -> int:
        return self.mana_cost.cmc

    @property
    def type_line(self) -> str:
        main = " ".join(t.value for t in sorted(self.types, key=_type_order))
        return f"{main} - {self.subtype}" if self.subtype else main

    @property
    def is_land(self) -> bool:
        return CardType.LAND in self.types

    @property
    def is_creature(self) -> bool:
        return CardType.CREATURE in self.types

    @property
    def is_instant(self) -> bool:
        return CardType.INSTANT in self.types

    @property
    def is_sorcery(self) -> bool:
        return CardType.SORCERY in self.types

    @property
    def is_permanent(self) -> bool:
        """True if the card stays on the battlefield when played."""
        return any(t.is_permanent_type() for t in self.types)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CardDefinition":
        """Create a definition from a catalog record.

        Accepts either a "type_line" string or "types" (list) plus
        "subtype". A numeric "cmc" with no "mana_cost" becomes a generic
        cost.

        Raises:
            ValueError: If the record has no name.
        """
        name = (data.get("name") or "").strip()
        if not name:
            raise ValueError("Card record has no name")

        if data.get("type_line") or data.get("type"):
            types, subtype = parse_type_line(data.get("type_line") or data.get("type"))
        else:
            types = frozenset(
                t for t in (CardType.from_name(n) for n in data.get("types", [])) if t
            )
            subtype = data.get("subtype", "") or ""

        cost_value = data.get("mana_cost", data.get("manaCost"))
        if isinstance(cost_value, dict):
            mana_cost = ManaCost.from_dict(cost_value)
        elif cost_value:
            mana_cost = ManaCost.parse(cost_value)
        else:
            mana_cost = ManaCost(generic=int(data.get("cmc", 0) or 0))

        return cls(
            name=name,
            mana_cost=mana_cost,
            types=types,
            subtype=subtype,
            power=_parse_stat(data.get("power")),
            toughness=_parse_stat(data.get("toughness")),
            text=data.get("text", data.get("oracle_text", "")) or "",
            colors=_parse_colors(data.get("colors", [])),
            rarity=data.get("rarity", "common") or "common",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a catalog record."""
        result: Dict[str, Any] = {
            "name": self.name,
            "mana_cost": str(self.mana_cost) if not self.mana_cost.is_free else "",
            "type_line": self.type_line,
            "text": self.text,
            "colors": sorted(c.value for c in self.colors),
            "rarity": self.rarity,
        }
        if self.power is not None:
            result["power"] = self.power
        if self.toughness is not None:
            result["toughness"] = self.toughness
        return result


def _type_order(card_type: CardType) -> int:
    return list(CardType).index(card_type)


# =============================================================================
# Card Instance
# =============================================================================

@dataclass(eq=False)
class CardInstance:
    """
    One copy of a card inside a game.

    Power and toughness are tracked as absolute current values: combat
    damage lowers toughness directly and buffs raise both. They are reset
    to the definition's values whenever the instance leaves the battlefield.

    Attributes:
        instance_id: Opaque id, stable for the game's duration
        definition: The immutable card data
        controller: The seat that owns and controls this instance
        zone: Current zone (changed only by zones.move_card)
        tapped: Tapped state
        summoning_sick: True from entering the battlefield until its
            controller's next untap
        power: Current power (None for non-creatures)
        toughness: Current toughness (None for non-creatures)
        keywords: Keyword flags applied when it entered the battlefield
        is_token: Tokens stop existing when they leave the battlefield
    """
    instance_id: InstanceId
    definition: CardDefinition
    controller: PlayerKey
    zone: Zone = Zone.LIBRARY
    tapped: bool = False
    summoning_sick: bool = False
    power: Optional[int] = None
    toughness: Optional[int] = None
    keywords: Set[Keyword] = field(default_factory=set)
    is_token: bool = False

    def __post_init__(self):
        if self.power is None:
            self.power = self.definition.power
        if self.toughness is None:
            self.toughness = self.definition.toughness

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def cmc(self) -> int:
        return self.definition.cmc

    @property
    def is_land(self) -> bool:
        return self.definition.is_land

    @property
    def is_creature(self) -> bool:
        return self.definition.is_creature

    @property
    def is_permanent(self) -> bool:
        return self.definition.is_permanent

    def has_keyword(self, keyword: Keyword) -> bool:
        return keyword in self.keywords

    @property
    def has_first_strike(self) -> bool:
        return bool(self.keywords & {Keyword.FIRST_STRIKE, Keyword.DOUBLE_STRIKE})

    @property
    def is_indestructible(self) -> bool:
        return Keyword.INDESTRUCTIBLE in self.keywords

    def reset_characteristics(self) -> None:
        """Forget everything gained on the battlefield."""
        self.tapped = False
        self.summoning_sick = False
        self.keywords.clear()
        self.power = self.definition.power
        self.toughness = self.definition.toughness

    def __repr__(self) -> str:
        stats = ""
        if self.power is not None:
            stats = f" {self.power}/{self.toughness}"
        tapped = " (tapped)" if self.tapped else ""
        return f"CardInstance({self.instance_id} {self.name}{stats}{tapped})"
