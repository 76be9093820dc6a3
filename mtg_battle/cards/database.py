"""MTG Battle - Card Catalog

The engine only needs CardDefinitions; where they come from is the
catalog's business. CardCatalog is the abstract lookup interface and
CardDatabase is the in-memory implementation, loadable from JSON.

Query syntax for lookup():
    "bolt"          name or rules text contains "bolt"
    "t:creature"    type line contains "creature"
    "t:land forest" both terms must match
"""
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ..engine.objects import CardDefinition


class CardCatalog(ABC):
    """Abstract source of card definitions."""

    @abstractmethod
    def lookup(self, query: str) -> List[CardDefinition]:
        """Find definitions matching a search query."""
        pass

    @abstractmethod
    def get(self, name: str) -> Optional[CardDefinition]:
        """Get one definition by exact name (case-insensitive)."""
        pass


class CardDatabase(CardCatalog):
    """
    In-memory card catalog.

    Attributes:
        cards: Definitions keyed by card name
    """

    def __init__(self, definitions: Optional[List[CardDefinition]] = None):
        self.cards: Dict[str, CardDefinition] = {}
        self._name_index: Dict[str, str] = {}  # lowercase -> actual name
        for definition in definitions or ():
            self.add(definition)

    def add(self, card: CardDefinition) -> None:
        """Add or replace a definition."""
        self.cards[card.name] = card
        self._name_index[card.name.lower()] = card.name

    def remove(self, name: str) -> bool:
        actual = self._name_index.pop(name.lower(), None)
        if actual is None:
            return False
        del self.cards[actual]
        return True

    def get(self, name: str) -> Optional[CardDefinition]:
        actual = self._name_index.get(name.strip().lower())
        return self.cards.get(actual) if actual else None

    def lookup(self, query: str) -> List[CardDefinition]:
        """
        Search definitions by name, rules text and type.

        Args:
            query: Space-separated terms; "t:<type>" terms match the type
                line, other terms match name or rules text

        Returns:
            Matching definitions sorted by name
        """
        terms = query.lower().split()
        results = []
        for card in self.cards.values():
            if all(self._matches(card, term) for term in terms):
                results.append(card)
        return sorted(results, key=lambda c: c.name)

    @staticmethod
    def _matches(card: CardDefinition, term: str) -> bool:
        if term.startswith("t:"):
            return term[2:] in card.type_line.lower()
        return term in card.name.lower() or term in card.text.lower()

    def load_from_json(self, path: str) -> int:
        """
        Load definitions from a JSON file.

        The file holds either a list of card records or an object keyed by
        card name.

        Returns:
            Number of cards loaded

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If a record is malformed
        """
        path_obj = Path(path)
        if not path_obj.exists():
            raise FileNotFoundError(f"JSON file not found: {path}")

        with open(path_obj, "r", encoding="utf-8") as f:
            data = json.load(f)

        records: List[Dict[str, Any]]
        if isinstance(data, list):
            records = data
        elif isinstance(data, dict):
            records = [dict(record, name=record.get("name", name)) for name, record in data.items()]
        else:
            raise ValueError(f"Unsupported catalog format in {path}")

        for record in records:
            self.add(CardDefinition.from_dict(record))
        return len(records)

    def save_to_json(self, path: str, indent: int = 2) -> None:
        data = {name: card.to_dict() for name, card in sorted(self.cards.items())}
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._name_index

    def __iter__(self) -> Iterator[CardDefinition]:
        return iter(self.cards.values())


# =============================================================================
# Built-in cards
# =============================================================================

BASIC_CARDS: List[Dict[str, Any]] = [
    {"name": "Mountain", "type_line": "Basic Land - Mountain", "text": "{T}: Add {R}."},
    {"name": "Forest", "type_line": "Basic Land - Forest", "text": "{T}: Add {G}."},
    {"name": "Plains", "type_line": "Basic Land - Plains", "text": "{T}: Add {W}."},
    {"name": "Island", "type_line": "Basic Land - Island", "text": "{T}: Add {U}."},
    {"name": "Swamp", "type_line": "Basic Land - Swamp", "text": "{T}: Add {B}."},
    {"name": "Grizzly Bears", "mana_cost": "{1}{G}", "type_line": "Creature - Bear",
     "power": 2, "toughness": 2, "colors": ["G"]},
    {"name": "Runeclaw Bear", "mana_cost": "{1}{G}", "type_line": "Creature - Bear",
     "power": 2, "toughness": 2, "colors": ["G"]},
    {"name": "Giant Spider", "mana_cost": "{3}{G}", "type_line": "Creature - Spider",
     "power": 2, "toughness": 4, "text": "Reach", "colors": ["G"]},
    {"name": "Hill Giant", "mana_cost": "{3}{R}", "type_line": "Creature - Giant",
     "power": 3, "toughness": 3, "colors": ["R"]},
    {"name": "Lightning Bolt", "mana_cost": "{R}", "type_line": "Instant",
     "text": "Lightning Bolt deals 3 damage to any target.", "colors": ["R"]},
    {"name": "Shock", "mana_cost": "{R}", "type_line": "Instant",
     "text": "Shock deals 2 damage to any target.", "colors": ["R"]},
    {"name": "Giant Growth", "mana_cost": "{G}", "type_line": "Instant",
     "text": "Target creature gets +3/+3 until end of turn.", "colors": ["G"]},
]

# Starter deck: name -> copies, in the order the library is built
BASIC_DECK: List[tuple] = [
    ("Mountain", 12),
    ("Forest", 12),
    ("Grizzly Bears", 8),
    ("Giant Spider", 6),
    ("Hill Giant", 6),
    ("Lightning Bolt", 4),
    ("Giant Growth", 3),
    ("Shock", 3),
    ("Runeclaw Bear", 6),
]


def default_catalog() -> CardDatabase:
    """A fresh catalog holding the built-in cards."""
    return CardDatabase([CardDefinition.from_dict(record) for record in BASIC_CARDS])


def basic_deck(catalog: Optional[CardCatalog] = None) -> List[CardDefinition]:
    """The 60-card Mountain/Forest starter deck as an ordered list of definitions."""
    catalog = catalog or default_catalog()
    cards: List[CardDefinition] = []
    for name, count in BASIC_DECK:
        definition = catalog.get(name)
        if definition is None:
            raise KeyError(f"Starter card missing from catalog: {name}")
        cards.extend([definition] * count)
    return cards
