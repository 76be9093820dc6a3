"""MTG Battle - Human vs. AI trading-card battle engine"""
from .engine.game import Game, GameConfig, GameResult, start_game
from .engine.results import ActionResult
from .engine.types import Phase, PlayerKey
from .cards.parser import Deck, DecklistParser
from .cards.database import CardDatabase, basic_deck

__version__ = "1.0.0"
__all__ = ["Game", "GameConfig", "GameResult", "start_game", "ActionResult",
           "Phase", "PlayerKey", "Deck", "DecklistParser", "CardDatabase", "basic_deck"]
