"""MTG Battle - Mana System (Resource Ledger)

This module implements mana costs, mana pools and the resource ledger that
derives a player's available mana from the permanents they control.

The ledger never keeps mana floating between actions: a player's pool is a
snapshot recomputed from their untapped mana sources every time something
taps or untaps.

Payment rules:
- Each colored requirement must be met by mana of that color.
- Any leftover mana (colored or colorless) may pay the generic part.
- Generic mana never pays a colored requirement.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import (
    Dict, FrozenSet, Iterable, List, Optional, Sequence, TYPE_CHECKING
)

from .types import Color, InstanceId, PlayerKey

if TYPE_CHECKING:
    from .objects import CardInstance
    from .state import GameState


# =============================================================================
# Constants
# =============================================================================

BASIC_LAND_MANA: Dict[str, Color] = {
    "Plains": Color.WHITE,
    "Island": Color.BLUE,
    "Swamp": Color.BLACK,
    "Mountain": Color.RED,
    "Forest": Color.GREEN,
}

MANA_SYMBOL_PATTERN = re.compile(r"\{([^}]+)\}")

# "{T}: Add {G}", "Tap: Add {R} or {G}", "{T}: Add one mana of any color"
MANA_ABILITY_PATTERN = re.compile(
    r"(?:\{T\}|\btap\b)\s*:\s*add\b(?P<produced>[^.\n]*)",
    re.IGNORECASE,
)

_COLOR_FIELDS: Dict[Color, str] = {
    Color.WHITE: "white",
    Color.BLUE: "blue",
    Color.BLACK: "black",
    Color.RED: "red",
    Color.GREEN: "green",
    Color.COLORLESS: "colorless",
}


# =============================================================================
# Mana Cost
# =============================================================================

@dataclass(frozen=True)
class ManaCost:
    """An immutable structured mana cost.

    Examples:
        - "{2}{R}{R}" -> generic=2, red=2 (cmc 4)
        - "{W}{U}"    -> white=1, blue=1 (cmc 2)
        - "{C}"       -> colorless=1 (must be paid with colorless mana)

    Attributes:
        generic: Amount payable with mana of any kind.
        white, blue, black, red, green: Colored pip counts.
        colorless: Pips that specifically require colorless mana.
    """
    generic: int = 0
    white: int = 0
    blue: int = 0
    black: int = 0
    red: int = 0
    green: int = 0
    colorless: int = 0

    @classmethod
    def parse(cls, cost_str: Optional[str]) -> "ManaCost":
        """Parse a mana cost string such as "{2}{U}{U}".

        X counts as zero. A hybrid symbol like "{R/G}" counts toward its
        first color, and "{2/W}" toward its colored half. Unknown symbols
        are ignored.

        Args:
            cost_str: The cost string (may be None or empty for free cards).

        Returns:
            The parsed ManaCost.
        """
        if not cost_str:
            return cls()

        amounts: Dict[str, int] = {"generic": 0}
        for raw in MANA_SYMBOL_PATTERN.findall(cost_str):
            symbol = raw.strip().upper()
            if symbol.isdigit():
                amounts["generic"] += int(symbol)
                continue
            if symbol in ("X", "Y", "Z", "T", "Q"):
                continue
            if "/" in symbol:
                halves = [part for part in symbol.split("/") if part not in ("P",)]
                colored = [h for h in halves if Color.from_symbol(h)]
                symbol = colored[0] if colored else ""
            color = Color.from_symbol(symbol) if symbol else None
            if color is None:
                continue
            name = _COLOR_FIELDS[color]
            amounts[name] = amounts.get(name, 0) + 1
        return cls(**amounts)

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> "ManaCost":
        """Build a cost from {"generic": 2, "R": 1} style mappings."""
        amounts: Dict[str, int] = {}
        for key, value in data.items():
            if key == "generic":
                amounts["generic"] = int(value)
                continue
            color = Color.from_symbol(key)
            if color is None:
                raise ValueError(f"Unknown mana symbol in cost: {key!r}")
            amounts[_COLOR_FIELDS[color]] = int(value)
        return cls(**amounts)

    def amount(self, color: Color) -> int:
        """Get the number of pips of a specific color."""
        return getattr(self, _COLOR_FIELDS[color])

    @property
    def colored(self) -> Dict[Color, int]:
        """Non-zero colored (and specific colorless) requirements."""
        return {c: self.amount(c) for c in Color if self.amount(c) > 0}

    @property
    def cmc(self) -> int:
        """Converted mana cost: the total regardless of color."""
        return self.generic + sum(self.colored.values())

    @property
    def is_free(self) -> bool:
        return self.cmc == 0

    def to_dict(self) -> Dict[str, int]:
        result = {"generic": self.generic}
        result.update({c.value: n for c, n in self.colored.items()})
        return result

    def __str__(self) -> str:
        parts = []
        if self.generic or not self.colored:
            parts.append(f"{{{self.generic}}}")
        for color in (Color.COLORLESS,) + Color.colored():
            parts.extend(f"{{{color.value}}}" for _ in range(self.amount(color)))
        return "".join(parts)


# =============================================================================
# Mana Pool
# =============================================================================

@dataclass
class ManaPool:
    """Mana a player could produce right now.

    Fixed units are counted per color. A source that can make one mana of
    several colors ("{R} or {G}", "any color") contributes a single choice
    unit instead, so the total is never inflated.
    """
    white: int = 0
    blue: int = 0
    black: int = 0
    red: int = 0
    green: int = 0
    colorless: int = 0
    choices: List[FrozenSet[Color]] = field(default_factory=list)

    def add(self, color: Color, amount: int = 1) -> None:
        """Add fixed mana of one color."""
        if amount <= 0:
            return
        name = _COLOR_FIELDS[color]
        setattr(self, name, getattr(self, name) + amount)

    def add_choice(self, colors: Iterable[Color]) -> None:
        """Add one mana that can be any one of the given colors."""
        options = frozenset(colors)
        if not options:
            return
        if len(options) == 1:
            self.add(next(iter(options)))
        else:
            self.choices.append(options)

    def get_amount(self, color: Color) -> int:
        """Fixed mana of a specific color (choice units excluded)."""
        return getattr(self, _COLOR_FIELDS[color])

    def total(self) -> int:
        """Total mana, each choice unit counted once."""
        return sum(self.get_amount(c) for c in Color) + len(self.choices)

    def as_dict(self) -> Dict[str, int]:
        """Counts keyed by mana symbol, plus "any" for choice units."""
        result = {c.value: self.get_amount(c) for c in Color.colored()}
        result[Color.COLORLESS.value] = self.colorless
        if self.choices:
            result["any"] = len(self.choices)
        return result

    def can_pay(self, cost: ManaCost) -> bool:
        """Check whether this pool covers a cost.

        Colored requirements are taken from fixed units first, remaining
        colored shortfalls are matched against choice units, and whatever
        is left over must cover the generic requirement.
        """
        fixed = {c: self.get_amount(c) for c in Color}
        shortfall: Dict[Color, int] = {}

        for color, needed in cost.colored.items():
            used = min(fixed[color], needed)
            fixed[color] -= used
            if needed > used:
                shortfall[color] = needed - used

        if sum(shortfall.values()) > len(self.choices):
            return False
        if not _assign_choices(shortfall, list(self.choices)):
            return False

        leftover = sum(fixed.values()) + len(self.choices) - sum(shortfall.values())
        return leftover >= cost.generic

    def __str__(self) -> str:
        parts = [f"{k}:{v}" for k, v in self.as_dict().items() if v]
        return "ManaPool(" + ", ".join(parts) + ")"


def _assign_choices(shortfall: Dict[Color, int], units: List[FrozenSet[Color]]) -> bool:
    """Backtracking match of colored shortfalls onto choice units."""
    color = next((c for c, n in shortfall.items() if n > 0), None)
    if color is None:
        return True
    for index, unit in enumerate(units):
        if color not in unit:
            continue
        shortfall[color] -= 1
        remaining = units[:index] + units[index + 1:]
        if _assign_choices(shortfall, remaining):
            shortfall[color] += 1
            return True
        shortfall[color] += 1
    return False


def can_pay(pool: ManaPool, cost: ManaCost) -> bool:
    """Module-level form of ManaPool.can_pay."""
    return pool.can_pay(cost)


# =============================================================================
# Mana Sources
# =============================================================================

def get_land_mana_color(land_name: str, subtype: str = "") -> Color:
    """Get the mana color a land produces from its basic land type.

    Returns COLORLESS for lands without a basic type so they can still
    tap for mana.
    """
    for name, color in BASIC_LAND_MANA.items():
        if name in subtype or name in land_name:
            return color
    return Color.COLORLESS


def produced_mana(card: "CardInstance") -> List[FrozenSet[Color]]:
    """Mana units a permanent produces when tapped.

    Each entry is the set of colors that unit may be; single-color
    entries are fixed mana.
    """
    text = card.definition.text or ""
    match = MANA_ABILITY_PATTERN.search(text)
    if match:
        produced = match.group("produced")
        lowered = produced.lower()
        if "any color" in lowered:
            return [frozenset(Color.colored())]
        symbols = [Color.from_symbol(s) for s in MANA_SYMBOL_PATTERN.findall(produced)]
        symbols = [s for s in symbols if s is not None]
        if not symbols:
            return [frozenset({Color.COLORLESS})]
        if " or " in lowered:
            return [frozenset(symbols)]
        return [frozenset({s}) for s in symbols]

    if card.is_land:
        return [frozenset({get_land_mana_color(card.name, card.definition.subtype)})]
    return []


def available_mana(
    state: "GameState",
    key: PlayerKey,
    exclude: Sequence[InstanceId] = (),
) -> ManaPool:
    """Compute the mana a player can produce from untapped permanents.

    Args:
        state: The game state.
        key: Whose battlefield to scan.
        exclude: Permanents to leave out (e.g. a source about to tap
            for its own ability).

    Returns:
        A fresh ManaPool; the game state is not modified.
    """
    pool = ManaPool()
    for card in state.battlefield_cards(key):
        if card.tapped or card.instance_id in exclude:
            continue
        for unit in produced_mana(card):
            pool.add_choice(unit)
    return pool


def refresh_mana_pool(state: "GameState", key: PlayerKey) -> ManaPool:
    """Recompute and store a player's mana pool snapshot."""
    pool = available_mana(state, key)
    state.player(key).mana_pool = pool
    return pool


def untapped_lands(
    state: "GameState",
    key: PlayerKey,
    exclude: Sequence[InstanceId] = (),
) -> List["CardInstance"]:
    return [
        card for card in state.battlefield_cards(key)
        if card.is_land and not card.tapped and card.instance_id not in exclude
    ]


def auto_tap_lands(
    state: "GameState",
    key: PlayerKey,
    amount: int,
    exclude: Sequence[InstanceId] = (),
) -> bool:
    """Tap exactly `amount` untapped lands to pay a cost.

    Lands are picked in battlefield order; there is no color-aware
    optimisation. Nothing is tapped if fewer than `amount` lands are
    available.

    Args:
        state: The game state.
        key: The paying player.
        amount: Number of lands to tap.
        exclude: Instance ids that must not be tapped (e.g. the source
            of an ability being activated).

    Returns:
        True if the lands were tapped, False if there were not enough.
    """
    if amount <= 0:
        return True

    lands = untapped_lands(state, key, exclude)
    if len(lands) < amount:
        return False

    for land in lands[:amount]:
        land.tapped = True
        state.log(f"{key.display_name} tapped {land.name} for mana", "debug")

    refresh_mana_pool(state, key)
    return True
