"""
Static keyword abilities.

Each keyword is a small class carrying its category, reminder text and
the rule hook the engine asks it about (blocking, targeting, timing).
Keyword flags are set on a CardInstance when it enters the battlefield;
the registry turns those flags back into keyword objects when a rule
needs them.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Type, TYPE_CHECKING

from ..types import Keyword, PlayerKey

if TYPE_CHECKING:
    from ..objects import CardInstance


class KeywordCategory(Enum):
    """Categories of static keywords."""
    EVASION = auto()
    COMBAT = auto()
    PROTECTION = auto()
    CASTING = auto()


@dataclass
class StaticKeyword:
    """
    Base class for static keyword abilities.

    Attributes:
        keyword: Which keyword this is
        source: The card instance that has it (None for registry lookups)
        category: Rules category
        reminder: Short reminder text shown to players
    """
    keyword: Keyword = field(default=None, init=False)
    source: Optional["CardInstance"] = None
    category: KeywordCategory = field(default=KeywordCategory.COMBAT, init=False)
    reminder: str = field(default="", init=False)

    @property
    def name(self) -> str:
        return self.keyword.value

    def can_be_blocked_by(self, blocker: "CardInstance") -> bool:
        return True

    def minimum_blockers_required(self) -> int:
        return 1


# =============================================================================
# EVASION
# =============================================================================

@dataclass
class Flying(StaticKeyword):
    keyword: Keyword = field(default=Keyword.FLYING, init=False)
    category: KeywordCategory = field(default=KeywordCategory.EVASION, init=False)
    reminder: str = field(default="Can only be blocked by creatures with flying or reach.", init=False)

    def can_be_blocked_by(self, blocker: "CardInstance") -> bool:
        return blocker.has_keyword(Keyword.FLYING) or blocker.has_keyword(Keyword.REACH)


@dataclass
class Menace(StaticKeyword):
    """Menace: needs two or more blockers, so no single creature can block it."""
    keyword: Keyword = field(default=Keyword.MENACE, init=False)
    category: KeywordCategory = field(default=KeywordCategory.EVASION, init=False)
    reminder: str = field(default="Can't be blocked except by two or more creatures.", init=False)

    def minimum_blockers_required(self) -> int:
        return 2


@dataclass
class Reach(StaticKeyword):
    keyword: Keyword = field(default=Keyword.REACH, init=False)
    reminder: str = field(default="Can block creatures with flying.", init=False)


# =============================================================================
# COMBAT
# =============================================================================

@dataclass
class FirstStrike(StaticKeyword):
    keyword: Keyword = field(default=Keyword.FIRST_STRIKE, init=False)
    reminder: str = field(default="Deals combat damage before creatures without first strike.", init=False)


@dataclass
class DoubleStrike(StaticKeyword):
    keyword: Keyword = field(default=Keyword.DOUBLE_STRIKE, init=False)
    reminder: str = field(default="Deals both first-strike and regular combat damage.", init=False)


@dataclass
class Trample(StaticKeyword):
    keyword: Keyword = field(default=Keyword.TRAMPLE, init=False)
    reminder: str = field(default="Excess combat damage is dealt to the defending player.", init=False)


@dataclass
class Deathtouch(StaticKeyword):
    keyword: Keyword = field(default=Keyword.DEATHTOUCH, init=False)
    reminder: str = field(default="Any damage this deals to a creature is lethal.", init=False)


@dataclass
class Lifelink(StaticKeyword):
    keyword: Keyword = field(default=Keyword.LIFELINK, init=False)
    reminder: str = field(default="Damage dealt by this also causes you to gain that much life.", init=False)


@dataclass
class Vigilance(StaticKeyword):
    keyword: Keyword = field(default=Keyword.VIGILANCE, init=False)
    reminder: str = field(default="Attacking doesn't cause this to tap.", init=False)


@dataclass
class Haste(StaticKeyword):
    keyword: Keyword = field(default=Keyword.HASTE, init=False)
    reminder: str = field(default="Can attack and tap the turn it comes under your control.", init=False)


@dataclass
class Defender(StaticKeyword):
    keyword: Keyword = field(default=Keyword.DEFENDER, init=False)
    reminder: str = field(default="Can't attack.", init=False)


# =============================================================================
# PROTECTION
# =============================================================================

@dataclass
class Hexproof(StaticKeyword):
    keyword: Keyword = field(default=Keyword.HEXPROOF, init=False)
    category: KeywordCategory = field(default=KeywordCategory.PROTECTION, init=False)
    reminder: str = field(default="Can't be the target of opponents' spells or abilities.", init=False)

    def can_be_targeted_by(self, controller: PlayerKey) -> bool:
        if self.source is None:
            return True
        return controller is self.source.controller


@dataclass
class Indestructible(StaticKeyword):
    keyword: Keyword = field(default=Keyword.INDESTRUCTIBLE, init=False)
    category: KeywordCategory = field(default=KeywordCategory.PROTECTION, init=False)
    reminder: str = field(default="Damage and effects that say \"destroy\" don't destroy this.", init=False)


# =============================================================================
# CASTING
# =============================================================================

@dataclass
class Flash(StaticKeyword):
    keyword: Keyword = field(default=Keyword.FLASH, init=False)
    category: KeywordCategory = field(default=KeywordCategory.CASTING, init=False)
    reminder: str = field(default="You may cast this any time you could cast an instant.", init=False)


# =============================================================================
# REGISTRY
# =============================================================================

class KeywordRegistry:
    """
    Registry of the keyword vocabulary the rules-text parser understands.

    The vocabulary is closed: text that names anything not registered here
    grants nothing.
    """

    def __init__(self):
        self.keywords: Dict[Keyword, Type[StaticKeyword]] = {}
        self._patterns: Dict[Keyword, "re.Pattern[str]"] = {}
        self._register_default_keywords()

    def _register_default_keywords(self) -> None:
        # Evasion
        self.register(Flying)
        self.register(Menace)
        self.register(Reach)

        # Combat
        self.register(FirstStrike)
        self.register(DoubleStrike)
        self.register(Trample)
        self.register(Deathtouch)
        self.register(Lifelink)
        self.register(Vigilance)
        self.register(Haste)
        self.register(Defender)

        # Protection
        self.register(Hexproof)
        self.register(Indestructible)

        # Casting
        self.register(Flash)

    def register(self, keyword_class: Type[StaticKeyword]) -> None:
        """
        Register a keyword class.

        Args:
            keyword_class: A StaticKeyword subclass with a fixed `keyword`
        """
        keyword = keyword_class().keyword
        self.keywords[keyword] = keyword_class
        words = r"\s+".join(re.escape(w) for w in keyword.value.split())
        self._patterns[keyword] = re.compile(rf"\b{words}\b", re.IGNORECASE)

    def get(self, keyword: Keyword, source: Optional["CardInstance"] = None) -> Optional[StaticKeyword]:
        keyword_class = self.keywords.get(keyword)
        if keyword_class is None:
            return None
        return keyword_class(source=source)

    def lookup(self, name: str) -> Optional[Keyword]:
        """Find a registered keyword by name, case-insensitively."""
        lowered = name.strip().lower()
        for keyword in self.keywords:
            if keyword.value.lower() == lowered:
                return keyword
        return None

    def match(self, text: str) -> List[Keyword]:
        """
        Find every registered keyword named in a piece of rules text.

        "First strike" inside "Double strike" text is not reported as a
        separate keyword.

        Returns:
            Keywords in registration order
        """
        if not text:
            return []
        found = [k for k, pattern in self._patterns.items() if pattern.search(text)]
        if Keyword.DOUBLE_STRIKE in found and Keyword.FIRST_STRIKE in found:
            stripped = self._patterns[Keyword.DOUBLE_STRIKE].sub("", text)
            if not self._patterns[Keyword.FIRST_STRIKE].search(stripped):
                found.remove(Keyword.FIRST_STRIKE)
        return found

    def get_keywords(self, card: "CardInstance") -> List[StaticKeyword]:
        """Keyword objects for the flags a card currently has."""
        return [self.get(k, card) for k in self.keywords if card.has_keyword(k)]

    def can_be_blocked_by(self, attacker: "CardInstance", blocker: "CardInstance") -> bool:
        """Check the attacker's evasion against one potential blocker."""
        for kw in self.get_keywords(attacker):
            if kw.category is KeywordCategory.EVASION and not kw.can_be_blocked_by(blocker):
                return False
        return True

    def get_minimum_blockers(self, attacker: "CardInstance") -> int:
        return max((kw.minimum_blockers_required() for kw in self.get_keywords(attacker)), default=1)

    def can_be_targeted_by(self, card: "CardInstance", controller: PlayerKey) -> bool:
        for kw in self.get_keywords(card):
            if isinstance(kw, Hexproof) and not kw.can_be_targeted_by(controller):
                return False
        return True

    def reminder_text(self, keyword: Keyword) -> str:
        keyword_class = self.keywords.get(keyword)
        return keyword_class().reminder if keyword_class else ""


_registry: Optional[KeywordRegistry] = None


def get_registry() -> KeywordRegistry:
    """Shared registry instance."""
    global _registry
    if _registry is None:
        _registry = KeywordRegistry()
    return _registry
