"""Card catalog and decklists"""
from .database import CardCatalog, CardDatabase, basic_deck, default_catalog
from .parser import Deck, Decklist, DecklistEntry, DecklistParser, DeckStore, InMemoryDeckStore
