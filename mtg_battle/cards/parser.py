"""MTG Battle - Deck Parser (MTGO format)

Parses MTGO-style decklists, resolves them against a card catalog and
provides game-ready Deck objects. Decks are the external collaborator the
game setup consumes: all the engine needs is Deck.expand(), the ordered
multiset of card definitions.

MTGO Format:
    [Deck Name]_AI

    4 Card Name
    3 Another Card
    // Comment

    Sideboard
    2 Sideboard Card
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from ..engine.objects import CardDefinition
from .database import BASIC_DECK, CardCatalog, default_catalog

BASIC_LANDS = frozenset({"Plains", "Island", "Swamp", "Mountain", "Forest", "Wastes"})


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class DecklistEntry:
    """
    A single entry in a decklist.

    Attributes:
        count: Number of copies
        card_name: The name of the card
        is_sideboard: True if this entry belongs to the sideboard
    """
    count: int
    card_name: str
    is_sideboard: bool = False

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"Card count must be at least 1, got {self.count}")
        if not self.card_name or not self.card_name.strip():
            raise ValueError("Card name cannot be empty")
        self.card_name = self.card_name.strip()

    def __repr__(self) -> str:
        sb_marker = " (SB)" if self.is_sideboard else ""
        return f"DecklistEntry({self.count}x {self.card_name}{sb_marker})"


@dataclass
class Decklist:
    """
    A parsed decklist: card names and counts, not yet resolved.

    Attributes:
        name: The name of the deck
        entries: All entries (main and sideboard) in file order
    """
    name: str
    entries: List[DecklistEntry] = field(default_factory=list)

    @property
    def mainboard(self) -> List[DecklistEntry]:
        return [e for e in self.entries if not e.is_sideboard]

    @property
    def sideboard(self) -> List[DecklistEntry]:
        return [e for e in self.entries if e.is_sideboard]

    @property
    def mainboard_count(self) -> int:
        return sum(e.count for e in self.mainboard)

    @property
    def sideboard_count(self) -> int:
        return sum(e.count for e in self.sideboard)

    def get_card_counts(self) -> Dict[str, int]:
        """Map card name to total count across main and sideboard."""
        counts: Dict[str, int] = {}
        for entry in self.entries:
            counts[entry.card_name] = counts.get(entry.card_name, 0) + entry.count
        return counts

    def validate(self, min_size: int = 60, max_copies: int = 4) -> Tuple[bool, List[str]]:
        """
        Check constructed deck rules.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors: List[str] = []
        if self.mainboard_count < min_size:
            errors.append(f"Mainboard has {self.mainboard_count} cards, minimum is {min_size}")
        if self.sideboard_count > 15:
            errors.append(f"Sideboard has {self.sideboard_count} cards, maximum is 15")
        for card_name, count in self.get_card_counts().items():
            if card_name not in BASIC_LANDS and count > max_copies:
                errors.append(f"{card_name} has {count} copies, maximum is {max_copies}")
        return (not errors, errors)

    def add_entry(self, count: int, card_name: str, is_sideboard: bool = False):
        self.entries.append(DecklistEntry(count, card_name, is_sideboard))

    def __repr__(self) -> str:
        return (f"Decklist({self.name}: {self.mainboard_count} main, "
                f"{self.sideboard_count} sideboard)")


# =============================================================================
# Decklist Parser
# =============================================================================

class DecklistParser:
    """
    Parser for MTGO-format decklists.

    Rules:
        - Lines starting with // or # are comments
        - Empty lines are ignored
        - "Sideboard" or "SB:" starts the sideboard section
        - Card entries are "N Card Name"
        - The first non-card line (or a line ending in _AI) names the deck
    """

    CARD_PATTERN = re.compile(r'^(\d+)x?\s+(.+)$')
    SIDEBOARD_MARKERS = {'sideboard', 'sb:', 'side:', 'side board'}
    COMMENT_PREFIXES = ('//', '#')

    def parse(self, text: str, deck_name: Optional[str] = None) -> Decklist:
        """
        Parse an MTGO-format decklist from text.

        Args:
            text: The decklist text
            deck_name: Optional deck name (detected from the text if omitted)

        Returns:
            Parsed Decklist
        """
        entries: List[DecklistEntry] = []
        in_sideboard = False
        detected_name = deck_name

        for line in text.strip().splitlines():
            line = line.strip()
            if not line:
                continue
            if line.startswith(self.COMMENT_PREFIXES):
                continue

            if self._is_sideboard_marker(line):
                in_sideboard = True
                continue

            match = self.CARD_PATTERN.match(line)
            if match is None:
                if detected_name is None:
                    detected_name = line.replace('_AI', '').replace('_', ' ').strip()
                continue

            card_name = match.group(2).strip()
            if card_name.lower().startswith('sb:'):
                card_name = card_name[3:].strip()
                in_sideboard = True
            entries.append(DecklistEntry(int(match.group(1)), card_name, in_sideboard))

        if not detected_name:
            main_count = sum(e.count for e in entries if not e.is_sideboard)
            detected_name = f"Unnamed Deck ({main_count} cards)"
        return Decklist(name=detected_name, entries=entries)

    def parse_file(self, path: str) -> Decklist:
        """
        Parse a decklist file; the file stem names the deck.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        filepath = Path(path)
        if not filepath.exists():
            raise FileNotFoundError(f"Decklist file not found: {path}")

        name = filepath.stem.replace('_AI', '').replace('_', ' ')
        with open(filepath, 'r', encoding='utf-8') as f:
            return self.parse(f.read(), deck_name=name)

    def _is_sideboard_marker(self, line: str) -> bool:
        line_lower = line.lower().strip()
        return line_lower in self.SIDEBOARD_MARKERS or line_lower.startswith('sideboard')


# =============================================================================
# Deck (Game-Ready)
# =============================================================================

@dataclass
class DeckCard:
    definition: CardDefinition
    count: int


@dataclass
class Deck:
    """
    A decklist resolved against a catalog.

    Attributes:
        name: Deck name
        cards: Mainboard definitions with their counts, in list order
    """
    name: str
    cards: List[DeckCard] = field(default_factory=list)

    @classmethod
    def from_decklist(cls, decklist: Decklist, catalog: Optional[CardCatalog] = None,
                      strict: bool = True) -> "Deck":
        """
        Resolve every mainboard entry against the catalog.

        Args:
            decklist: Parsed decklist
            catalog: Card source (the built-in catalog if omitted)
            strict: Raise on unknown cards instead of skipping them

        Raises:
            KeyError: If strict and a card is not in the catalog
        """
        catalog = catalog or default_catalog()
        cards: List[DeckCard] = []
        missing: List[str] = []
        for entry in decklist.mainboard:
            definition = catalog.get(entry.card_name)
            if definition is None:
                missing.append(entry.card_name)
                continue
            cards.append(DeckCard(definition, entry.count))
        if missing and strict:
            raise KeyError(f"Cards not found in catalog: {', '.join(missing)}")
        return cls(name=decklist.name, cards=cards)

    @classmethod
    def from_text(cls, text: str, catalog: Optional[CardCatalog] = None) -> "Deck":
        return cls.from_decklist(DecklistParser().parse(text), catalog)

    @property
    def size(self) -> int:
        return sum(c.count for c in self.cards)

    def expand(self) -> List[CardDefinition]:
        """One definition per physical copy, in list order."""
        result: List[CardDefinition] = []
        for deck_card in self.cards:
            result.extend([deck_card.definition] * deck_card.count)
        return result

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"Deck({self.name}: {self.size} cards)"


# =============================================================================
# Deck Store
# =============================================================================

class DeckStore(ABC):
    """Abstract source of decks by id."""

    @abstractmethod
    def load(self, deck_id: str) -> Deck:
        """
        Load a deck.

        Raises:
            KeyError: If no deck has this id
        """
        pass


class InMemoryDeckStore(DeckStore):
    """Decks held in a dict; seeded with the starter deck under "basic"."""

    def __init__(self, catalog: Optional[CardCatalog] = None):
        self.catalog = catalog or default_catalog()
        self._decks: Dict[str, Deck] = {}
        basic = Decklist("Basic")
        for name, count in BASIC_DECK:
            basic.add_entry(count, name)
        self.save("basic", Deck.from_decklist(basic, self.catalog))

    def save(self, deck_id: str, deck: Deck) -> None:
        self._decks[deck_id] = deck

    def save_text(self, deck_id: str, text: str) -> Deck:
        """Parse a decklist and store it under deck_id."""
        deck = Deck.from_decklist(DecklistParser().parse(text), self.catalog)
        self.save(deck_id, deck)
        return deck

    def load(self, deck_id: str) -> Deck:
        if deck_id not in self._decks:
            raise KeyError(f"Unknown deck: {deck_id}")
        return self._decks[deck_id]

    def __contains__(self, deck_id: str) -> bool:
        return deck_id in self._decks

    def __iter__(self) -> Iterator[str]:
        return iter(self._decks)
