"""MTG Battle - Core Types and Enumerations

This module defines the fundamental types, enumerations, and type aliases
used throughout the battle engine: seats, zones, phases, card types,
colors, keywords and the tags used by the ability resolver.
"""
from enum import Enum, auto
from typing import Dict, Optional, Tuple


# =============================================================================
# Type Aliases
# =============================================================================

InstanceId = str
LifeTotal = int
DamageAmount = int
Power = int
Toughness = int


# =============================================================================
# Seats
# =============================================================================

class PlayerKey(Enum):
    """
    The two seats at the table.

    The human always sits at PLAYER, the computer opponent at AI.
    """
    PLAYER = "player"
    AI = "ai"

    @property
    def opponent(self) -> "PlayerKey":
        """The other seat."""
        return PlayerKey.AI if self is PlayerKey.PLAYER else PlayerKey.PLAYER

    @property
    def display_name(self) -> str:
        """Name used in log messages ("You" / "AI")."""
        return "You" if self is PlayerKey.PLAYER else "AI"

    @classmethod
    def parse(cls, value: "str | PlayerKey") -> "PlayerKey":
        """Accept either a PlayerKey or its string value."""
        if isinstance(value, PlayerKey):
            return value
        return cls(str(value).strip().lower())


# =============================================================================
# Zones
# =============================================================================

class Zone(Enum):
    """
    Locations a card instance can occupy.

    Library is ordered (front = next draw), hand is ordered,
    battlefield is unordered, graveyard is ordered most-recent-last.
    """
    LIBRARY = "library"
    HAND = "hand"
    BATTLEFIELD = "battlefield"
    GRAVEYARD = "graveyard"


# =============================================================================
# Turn Structure
# =============================================================================

class Phase(Enum):
    """The five phases of a turn, in order."""
    BEGINNING = "beginning"
    MAIN1 = "main1"
    COMBAT = "combat"
    MAIN2 = "main2"
    END = "end"

    @property
    def display_name(self) -> str:
        return PHASE_NAMES[self]

    @property
    def is_main(self) -> bool:
        return self in (Phase.MAIN1, Phase.MAIN2)


PHASE_ORDER: Tuple[Phase, ...] = (
    Phase.BEGINNING,
    Phase.MAIN1,
    Phase.COMBAT,
    Phase.MAIN2,
    Phase.END,
)

PHASE_NAMES: Dict[Phase, str] = {
    Phase.BEGINNING: "Beginning Phase",
    Phase.MAIN1: "Main Phase",
    Phase.COMBAT: "Combat Phase",
    Phase.MAIN2: "Second Main Phase",
    Phase.END: "End Phase",
}


# =============================================================================
# Card Types
# =============================================================================

class CardType(Enum):
    """Card types that may appear on a type line."""
    LAND = "Land"
    CREATURE = "Creature"
    INSTANT = "Instant"
    SORCERY = "Sorcery"
    ENCHANTMENT = "Enchantment"
    ARTIFACT = "Artifact"
    PLANESWALKER = "Planeswalker"

    def is_permanent_type(self) -> bool:
        """Returns True if cards of this type stay on the battlefield."""
        return self not in (CardType.INSTANT, CardType.SORCERY)

    @classmethod
    def from_name(cls, name: str) -> Optional["CardType"]:
        """Look up a card type by its (case-insensitive) name."""
        lowered = name.strip().lower()
        for card_type in cls:
            if card_type.value.lower() == lowered:
                return card_type
        return None


# =============================================================================
# Colors
# =============================================================================

class Color(Enum):
    """
    The five colors plus colorless, keyed by their mana symbol.

    The WUBRG ordering follows official convention.
    """
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"
    COLORLESS = "C"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Color"]:
        """Convert a one-letter mana symbol to a Color, or None."""
        try:
            return cls(symbol.strip().upper())
        except ValueError:
            return None

    @classmethod
    def colored(cls) -> Tuple["Color", ...]:
        """The five real colors (excludes COLORLESS)."""
        return (cls.WHITE, cls.BLUE, cls.BLACK, cls.RED, cls.GREEN)


COLOR_NAMES: Dict[str, Color] = {
    "white": Color.WHITE,
    "blue": Color.BLUE,
    "black": Color.BLACK,
    "red": Color.RED,
    "green": Color.GREEN,
    "colorless": Color.COLORLESS,
}


# =============================================================================
# Abilities
# =============================================================================

class Keyword(Enum):
    """Keyword abilities understood by the engine."""
    FLYING = "Flying"
    TRAMPLE = "Trample"
    HASTE = "Haste"
    FIRST_STRIKE = "First Strike"
    DOUBLE_STRIKE = "Double Strike"
    DEATHTOUCH = "Deathtouch"
    LIFELINK = "Lifelink"
    VIGILANCE = "Vigilance"
    HEXPROOF = "Hexproof"
    INDESTRUCTIBLE = "Indestructible"
    MENACE = "Menace"
    REACH = "Reach"
    DEFENDER = "Defender"
    FLASH = "Flash"


class AbilityKind(Enum):
    """Tag of an AbilityDescriptor variant."""
    STATIC = "static"
    TRIGGERED = "triggered"
    ACTIVATED = "activated"


class TriggerEvent(Enum):
    """Events that triggered abilities can listen for."""
    ENTERS_BATTLEFIELD = "enters_battlefield"
    ATTACKS = "attacks"


class EffectKind(Enum):
    """Effect shapes recognised in rules text."""
    DRAW = auto()
    GAIN_LIFE = auto()
    DAMAGE = auto()
    DESTROY = auto()
    BUFF = auto()
    CREATE_TOKEN = auto()
    CUSTOM = auto()
