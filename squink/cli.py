"""
Squink CLI - Command-line interface for the engine.

Usage:
    squink simulate --width 5 --height 5 --players corner,random   Local match
    squink serve --port 8000                                        Run the REST API
    squink drive --url http://host:8000 --player alice              Play turns remotely
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Squink-Splash - Turn-based grid painting game",
        prog="squink",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a local match")
    simulate_parser.add_argument("--width", type=int, default=5)
    simulate_parser.add_argument("--height", type=int, default=5)
    simulate_parser.add_argument("--rounds", type=int, default=10)
    simulate_parser.add_argument("--buy-in", type=int, default=0)
    simulate_parser.add_argument("--forming-rounds", type=int, default=0)
    simulate_parser.add_argument(
        "--players", default="corner,random",
        help="Comma separated policy names, one per player (base, random, corner)",
    )
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed for random policies")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Drive command
    drive_parser = subparsers.add_parser("drive", help="Submit turns for one player")
    drive_parser.add_argument("--url", required=True, help="Base URL of the API")
    drive_parser.add_argument("--player", required=True, help="Registered player id")
    drive_parser.add_argument("--policy", default="corner")
    drive_parser.add_argument("--seed", type=int, default=None)
    drive_parser.add_argument("--poll-interval", type=float, default=1.0)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "serve":
        return cmd_serve(args)
    elif args.command == "drive":
        return cmd_drive(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Play a local match and print the results."""
    from .bots import create_policy
    from .engine_core import GameConfig, GameError
    from .session import MatchRunner

    names = [n.strip() for n in args.players.split(",") if n.strip()]
    if not names:
        print("Error: at least one player is needed")
        sys.exit(1)

    try:
        config = GameConfig(
            dimensions=(args.width, args.height),
            buy_in=args.buy_in,
            forming_rounds=args.forming_rounds,
            rounds=args.rounds,
        )
        runner = MatchRunner(config)
        for i, name in enumerate(names):
            seed = None if args.seed is None else args.seed + i
            runner.add_player(f"{name}-{i + 1}", create_policy(name, seed=seed))
        result = runner.play()
    except (GameError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Game {result.game_id} finished after {result.rounds_played} round(s)")
    print(_render_board(runner.engine.query_state()))
    print("\nLeaderboard:")
    for rank, player in enumerate(result.leaderboard, start=1):
        print(f"  {rank}. {player.player_id:<16} {player.score}")

    winners = ", ".join(p.player_id for p in result.winners)
    if result.is_tie:
        print(f"\nTie between: {winners}")
    else:
        print(f"\nWinner: {winners}")
    return 0


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("squink.api.app:app", host=args.host, port=args.port)
    return 0


def cmd_drive(args):
    """Drive one player's turns against a remote game."""
    from .bots import create_policy
    from .session import HttpGameClient, TurnDriver, DriverOutcome

    driver = TurnDriver(
        HttpGameClient(args.url),
        args.player,
        create_policy(args.policy, seed=args.seed),
        poll_interval=args.poll_interval,
    )
    try:
        report = driver.run()
    except KeyboardInterrupt:
        driver.stop()
        print("\nInterrupted")
        return 130

    print(f"{report.player_id}: {report.outcome.value} after {report.turns_submitted} turn(s)")
    if report.error:
        print(f"  {report.error_code.value}: {report.error}")
    return 0 if report.outcome in (DriverOutcome.GAME_FINISHED, DriverOutcome.NO_LEGAL_MOVE) else 1


def _render_board(state) -> str:
    """Text board: one symbol per owner, '.' for unclaimed cells."""
    symbols = {p.player_id: chr(ord("A") + i % 26) for i, p in enumerate(state.players)}
    cells = state.grid.snapshot()
    width = state.grid.width
    rows = []
    for y in range(state.grid.height):
        row = cells[y * width:(y + 1) * width]
        rows.append(" ".join(symbols.get(owner, "?") if owner else "." for owner in row))
    return "\n".join(rows)


if __name__ == "__main__":
    sys.exit(main())
