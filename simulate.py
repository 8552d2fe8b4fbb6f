import argparse
import time
from collections import Counter

from loguru import logger

from ludo_rules import AIDifficulty, Color, GameConfig, GameMode, Simulator


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate AI-vs-AI Ludo games")
    parser.add_argument("--players", type=int, choices=(2, 3, 4), default=4)
    parser.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in AIDifficulty],
        default=AIDifficulty.MEDIUM.value,
        help="Difficulty used by every seat",
    )
    parser.add_argument("--games", type=int, default=1)
    parser.add_argument("--seed", type=int, default=42)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    difficulty = AIDifficulty(args.difficulty)
    # Local mode: no seat is flagged AI, the simulator drives all of them
    game_config = GameConfig(
        mode=GameMode.LOCAL,
        player_count=args.players,
        ai_difficulty=None,
        human_player_color=Color.RED,
    )

    logger.info(
        f"Simulating {args.games} game(s): {args.players} players, {difficulty.value} AI, seed {args.seed}"
    )
    start_time = time.time()
    winners: Counter = Counter()
    total_turns = 0

    for game_idx in range(args.games):
        sim = Simulator(
            game_config, seed=args.seed + game_idx, default_difficulty=difficulty
        )
        result = sim.run()
        total_turns += result.turns
        winners[result.winner] += 1
        logger.info(
            f"Game {game_idx + 1}: rankings={list(result.rankings)} turns={result.turns}"
            f" captures={result.captures} penalties={result.penalties}"
        )

    logger.info("--- SIMULATION COMPLETE ---")
    logger.info(f"Average turns: {total_turns / max(args.games, 1):.1f}")
    for player_id, wins in winners.most_common():
        logger.info(f"{player_id}: {wins} win(s)")
    logger.info(f"Simulation Time: {time.time() - start_time:.2f} seconds")


if __name__ == "__main__":
    main()
