#!/usr/bin/env python3
"""
MTG Battle - Headless Match Runner

Plays games against the AI with the human seat driven by an autopilot
agent. Useful for smoke-testing decks and AI difficulty tiers.

Usage:
    python -m mtg_battle.run_match [--player-deck FILE] [--ai-deck FILE]
        [--difficulty easy|medium|hard] [--games N] [--seed N] [--verbose]

Example:
    python -m mtg_battle.run_match --ai-deck decks/Red_AI.txt --games 5 --seed 7
"""
import argparse
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .ai.agent import AIController, Difficulty
from .cards.database import CardDatabase, default_catalog
from .cards.parser import Deck, DecklistParser
from .engine.game import Game, GameConfig, start_game
from .engine.types import PlayerKey
from .utils.logger import setup_logger


def load_deck(path: Optional[str], catalog: CardDatabase) -> Optional[Deck]:
    """
    Load and validate a deck file, or None for the built-in starter deck.

    Raises:
        ValueError: If the decklist breaks the deck construction rules
        KeyError: If a card is missing from the catalog
    """
    if path is None:
        return None
    decklist = DecklistParser().parse_file(path)
    is_valid, errors = decklist.validate()
    if not is_valid:
        raise ValueError(f"Invalid deck {decklist.name}: {'; '.join(errors)}")
    return Deck.from_decklist(decklist, catalog)


def play_autopilot_game(game: Game, autopilot: AIController) -> None:
    """Drive the human seat with the autopilot until the game ends."""
    while not game.is_over:
        if game.state.turn_owner is autopilot.key:
            autopilot.take_turn(game)
        else:
            game.run_ai_turn()


def run_single_game(player_deck: Optional[Deck], ai_deck: Optional[Deck],
                    difficulty: Difficulty, seed: Optional[int],
                    verbose: bool = False) -> Dict[str, Any]:
    """Run a single game and return the result."""
    rng = random.Random(seed)
    autopilot = AIController(PlayerKey.PLAYER, difficulty, rng=random.Random(rng.random()))
    config = GameConfig(verbose=verbose)

    game = start_game(
        player_deck, ai_deck,
        difficulty=difficulty,
        config=config,
        rng=rng,
        block_provider=autopilot.assign_blocks,
    )
    play_autopilot_game(game, autopilot)

    result = game.result
    return {
        'winner': result.winner.value if result.winner else None,
        'turns': result.turns_played,
        'reason': result.reason,
        'final_life': result.final_life,
    }


def run_match(player_deck: Optional[Deck], ai_deck: Optional[Deck],
              num_games: int = 3, difficulty: Difficulty = Difficulty.MEDIUM,
              seed: Optional[int] = None, verbose: bool = False) -> Dict[str, Any]:
    """Run several games and print a summary."""
    player_name = player_deck.name if player_deck else "Starter deck"
    ai_name = ai_deck.name if ai_deck else "Starter deck"

    print("=" * 60)
    print("MTG BATTLE - Match Simulation")
    print("=" * 60)
    print(f"\n{player_name} (autopilot) vs {ai_name} ({difficulty.value} AI)")
    print(f"{num_games} games\n")

    wins = {'player': 0, 'ai': 0, 'draw': 0}
    game_results: List[Dict[str, Any]] = []

    for game_number in range(1, num_games + 1):
        print(f"--- Game {game_number} ---")
        game_seed = None if seed is None else seed + game_number - 1
        result = run_single_game(player_deck, ai_deck, difficulty, game_seed, verbose)
        game_results.append(result)
        wins[result['winner'] or 'draw'] += 1

        life = result['final_life']
        print(f"  Winner: {result['winner'] or 'draw'}")
        print(f"  Turns: {result['turns']}")
        print(f"  Reason: {result['reason']}")
        print(f"  Final Life: You={life.get('player', 0)}, AI={life.get('ai', 0)}")
        print()

    print("=" * 60)
    print("MATCH RESULT")
    print("=" * 60)
    print(f"\n{player_name}: {wins['player']} wins")
    print(f"{ai_name}: {wins['ai']} wins")
    if wins['draw']:
        print(f"Draws: {wins['draw']}")
    print()

    return {'wins': wins, 'games': game_results}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Run headless games against the AI')
    parser.add_argument('--player-deck', help='Deck file for the autopilot seat')
    parser.add_argument('--ai-deck', help='Deck file for the AI')
    parser.add_argument('--catalog', help='JSON card catalog (default: built-in cards)')
    parser.add_argument('--difficulty', default='medium', choices=[d.value for d in Difficulty],
                        help='AI difficulty (default: medium)')
    parser.add_argument('--games', type=int, default=3, help='Number of games (default: 3)')
    parser.add_argument('--seed', type=int, help='Random seed for reproducible games')
    parser.add_argument('--log-file', help='Write the full engine log to this file')
    parser.add_argument('--verbose', action='store_true', help='Show detailed game output')

    args = parser.parse_args(argv)
    setup_logger("mtg_battle", log_file=args.log_file, verbose=args.verbose)

    for path in (args.player_deck, args.ai_deck, args.catalog):
        if path and not Path(path).exists():
            print(f"Error: file not found: {path}")
            return 1

    catalog = default_catalog()
    if args.catalog:
        catalog.load_from_json(args.catalog)

    try:
        player_deck = load_deck(args.player_deck, catalog)
        ai_deck = load_deck(args.ai_deck, catalog)
    except (KeyError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    run_match(player_deck, ai_deck, args.games, Difficulty.parse(args.difficulty),
              args.seed, args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
