"""
Command line entry point

    arcade-games breakout
    arcade-games pong --difficulty hard --seed 7
    arcade-games snake --random 5 --store ~/.arcade_games/best.json
    arcade-games --list
"""

from __future__ import annotations

import argparse
import os
from typing import List, Optional

from .engine.persistence import JsonFileStore
from .games import GAMES

DIFFICULTY_GAMES = ("pong", "memory")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="arcade-games", description="Play the arcade games collection")
    parser.add_argument(
        "game", nargs="?", choices=sorted(GAMES),
        help="Game to play"
    )
    parser.add_argument(
        "--difficulty", type=str, choices=["easy", "medium", "hard"],
        help="Difficulty (pong and memory only)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for the game's random source"
    )
    parser.add_argument(
        "--random", type=int, default=0, metavar="N",
        help="Run N headless episodes with random actions instead of opening a window"
    )
    parser.add_argument(
        "--max-steps", type=int, default=3600,
        help="Step limit per headless episode"
    )
    parser.add_argument(
        "--store", type=str, default=None,
        help="JSON file for best scores / best times"
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0,
        help="Print loop events"
    )
    parser.add_argument(
        "--list", action="store_true",
        help="List games and exit"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        print(f"\nGames ({len(GAMES)}):")
        for name, rules_cls in sorted(GAMES.items()):
            print(f"  {name:16} | actions: {', '.join(rules_cls.actions)}")
        return 0

    if args.game is None:
        parser.error("a game is required unless --list is given")

    overrides = {}
    if args.difficulty is not None:
        if args.game not in DIFFICULTY_GAMES:
            parser.error(f"--difficulty is only supported for {', '.join(DIFFICULTY_GAMES)}")
        overrides["difficulty"] = args.difficulty

    store = JsonFileStore(os.path.expanduser(args.store)) if args.store else None

    if args.random > 0:
        from .env import run_random_episode

        returns = []
        for episode in range(args.random):
            seed = None if args.seed is None else args.seed + episode
            total = run_random_episode(args.game, seed=seed, max_steps=args.max_steps,
                                       store=store, verbose=args.verbose, **overrides)
            returns.append(total)
            print(f"Episode {episode + 1}/{args.random}: return = {total:.1f}")
        print(f"Mean return over {len(returns)} episodes: {sum(returns) / len(returns):.2f}")
        return 0

    # arcade needs a display; headless runs never import it
    from .render import play

    play(args.game, store=store, seed=args.seed, verbose=args.verbose, **overrides)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
