"""
Test suite for the card catalog and decklist handling.
"""
import pytest

from ..cards.database import CardDatabase, basic_deck, default_catalog
from ..cards.parser import Deck, Decklist, DecklistEntry, DecklistParser, InMemoryDeckStore
from ..engine.objects import CardDefinition
from ..engine.types import CardType, Color

DECK_TEXT = """
Red Green Stompy_AI

// creatures
4 Grizzly Bears
4 Hill Giant
# burn
4 Lightning Bolt
10 Mountain
10 Forest

Sideboard
2 Shock
"""


class TestCardDefinition:
    """Catalog records to definitions."""

    def test_from_dict(self):
        card = CardDefinition.from_dict({
            "name": "Giant Spider", "mana_cost": "{3}{G}", "type_line": "Creature - Spider",
            "power": 2, "toughness": 4, "text": "Reach", "colors": ["G"],
        })
        assert card.is_creature
        assert card.cmc == 4
        assert card.subtype == "Spider"
        assert card.colors == frozenset({Color.GREEN})

    def test_supertypes_are_dropped(self):
        card = CardDefinition.from_dict({"name": "Forest", "type_line": "Basic Land - Forest"})
        assert card.types == frozenset({CardType.LAND})
        assert card.is_land and card.is_permanent

    def test_generic_cmc_fallback(self):
        card = CardDefinition.from_dict({"name": "Blob", "type_line": "Creature", "cmc": 3})
        assert card.cmc == 3

    def test_missing_name(self):
        with pytest.raises(ValueError):
            CardDefinition.from_dict({"type_line": "Instant"})


class TestCardDatabase:
    """In-memory catalog."""

    def test_get_is_case_insensitive(self, catalog):
        assert catalog.get("lightning bolt").name == "Lightning Bolt"
        assert catalog.get("Black Lotus") is None
        assert "FOREST" in catalog

    def test_lookup_by_type(self, catalog):
        names = [c.name for c in catalog.lookup("t:creature")]
        assert names == ["Giant Spider", "Grizzly Bears", "Hill Giant", "Runeclaw Bear"]

    def test_lookup_by_text(self, catalog):
        assert [c.name for c in catalog.lookup("damage")] == ["Lightning Bolt", "Shock"]
        assert [c.name for c in catalog.lookup("t:instant giant")] == ["Giant Growth"]

    def test_json_round_trip(self, catalog, tmp_path):
        path = tmp_path / "cards.json"
        catalog.save_to_json(str(path))

        loaded = CardDatabase()
        assert loaded.load_from_json(str(path)) == len(catalog)
        assert loaded.get("Giant Spider") == catalog.get("Giant Spider")

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CardDatabase().load_from_json(str(tmp_path / "nope.json"))

    def test_basic_deck(self):
        deck = basic_deck()
        assert len(deck) == 60
        assert sum(1 for c in deck if c.name == "Mountain") == 12
        assert sum(1 for c in deck if c.is_land) == 24


class TestDecklistParser:
    """MTGO-format decklists."""

    def test_parse(self):
        decklist = DecklistParser().parse(DECK_TEXT)
        assert decklist.name == "Red Green Stompy"
        assert decklist.mainboard_count == 32
        assert [e.card_name for e in decklist.sideboard] == ["Shock"]

    def test_inline_sideboard_prefix(self):
        decklist = DecklistParser().parse("4 Shock\n2 SB: Lightning Bolt")
        assert decklist.sideboard[0].card_name == "Lightning Bolt"

    def test_parse_file_uses_stem(self, tmp_path):
        path = tmp_path / "Mono_Green_AI.txt"
        path.write_text("20 Forest\n4 Grizzly Bears\n", encoding="utf-8")
        decklist = DecklistParser().parse_file(str(path))
        assert decklist.name == "Mono Green"
        assert decklist.mainboard_count == 24

    def test_entry_validation(self):
        with pytest.raises(ValueError):
            DecklistEntry(0, "Forest")

    def test_validate_copy_limit(self):
        decklist = Decklist("Too many bolts")
        decklist.add_entry(8, "Lightning Bolt")
        decklist.add_entry(52, "Mountain")
        valid, errors = decklist.validate()
        assert not valid
        assert errors == ["Lightning Bolt has 8 copies, maximum is 4"]


class TestDeck:
    """Resolving decklists against the catalog."""

    def test_expand_keeps_order(self):
        deck = Deck.from_text("2 Forest\n1 Shock")
        assert [c.name for c in deck.expand()] == ["Forest", "Forest", "Shock"]
        assert len(deck) == 3

    def test_unknown_card(self):
        decklist = DecklistParser().parse("4 Black Lotus\n20 Forest")
        with pytest.raises(KeyError):
            Deck.from_decklist(decklist)
        lenient = Deck.from_decklist(decklist, default_catalog(), strict=False)
        assert lenient.size == 20

    def test_deck_store(self):
        store = InMemoryDeckStore()
        assert store.load("basic").size == 60
        store.save_text("burn", "30 Mountain\n30 Shock")
        assert "burn" in store
        assert store.load("burn").name.startswith("Unnamed Deck")
        with pytest.raises(KeyError):
            store.load("missing")
