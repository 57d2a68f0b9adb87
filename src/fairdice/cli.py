"""fairdice CLI — play the dice game, print the odds, verify a reveal.

Usage:
    python -m fairdice.cli play 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3
    python -m fairdice.cli table 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3
    python -m fairdice.cli verify --digest <hex> --value 3 --key <hex>

This is the only place failures are turned into exit codes.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from fairdice.config import ProtocolConfig
from fairdice.crypto.commitment import ALLOWED_ALGORITHMS, verify_reveal
from fairdice.errors import EntropyFailure, InvalidArgument, ProtocolViolation, RoundAborted
from fairdice.game.console import ConsolePlayer
from fairdice.game.parser import USAGE_EXAMPLE, parse_dice
from fairdice.game.render import render_help_table, render_outcome
from fairdice.game.session import ComputerStrategy, DiceGame


DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "config"

logger = logging.getLogger("fairdice")


def _load_config(config_dir: Path) -> ProtocolConfig:
    return ProtocolConfig.from_config_dir(config_dir).with_env_overrides()


def cmd_play(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    dice = parse_dice(args.dice, config.min_faces, config.min_dice)
    player = ConsolePlayer(dice)
    game = DiceGame(dice, player, config=config, strategy=ComputerStrategy(args.strategy))
    print("Let's determine who makes the first move.")
    try:
        outcome = game.play()
    except RoundAborted:
        print("Exiting...")
        return 0
    print(render_outcome(outcome))
    problems = game.transcript.verify()
    for problem in problems:
        print(f"Transcript check failed: {problem}", file=sys.stderr)
    return 1 if problems else 0


def cmd_table(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    dice = parse_dice(args.dice, config.min_faces, config.min_dice)
    print(render_help_table(dice))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Independently recompute a digest from a reveal."""
    if verify_reveal(args.digest, args.value, args.key, args.algorithm):
        print("OK: reveal matches digest")
        return 0
    print("MISMATCH: reveal does not match digest", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fairdice",
        description="Provably-fair non-transitive dice game",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.getenv("FAIRDICE_CONFIG_DIR", str(DEFAULT_CONFIG))),
        help="Path to config directory (default: config/)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # play
    p_play = sub.add_parser("play", help="Play a game against the computer")
    p_play.add_argument("dice", nargs="*", help="Dice as comma-separated faces")
    p_play.add_argument(
        "--strategy", default=ComputerStrategy.RANDOM.value,
        choices=[s.value for s in ComputerStrategy],
        help="How the computer picks its die (default: random)",
    )

    # table
    p_table = sub.add_parser("table", help="Print the win probability table")
    p_table.add_argument("dice", nargs="*", help="Dice as comma-separated faces")

    # verify
    p_verify = sub.add_parser("verify", help="Verify a revealed value against its HMAC")
    p_verify.add_argument("--digest", required=True, help="Published HMAC (hex)")
    p_verify.add_argument("--value", required=True, help="Revealed value text")
    p_verify.add_argument("--key", required=True, help="Revealed key (hex)")
    p_verify.add_argument(
        "--algorithm", default="sha256", choices=sorted(ALLOWED_ALGORITHMS),
        help="Digest algorithm (default: sha256)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "play": cmd_play,
        "table": cmd_table,
        "verify": cmd_verify,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    try:
        return handler(args)
    except InvalidArgument as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(f"Usage: {USAGE_EXAMPLE}", file=sys.stderr)
        return 1
    except ProtocolViolation as exc:
        logger.error("protocol violation: %s", exc)
        print(f"Protocol violation: {exc}", file=sys.stderr)
        return 2
    except EntropyFailure as exc:
        logger.critical("entropy failure: %s", exc)
        print(f"Fatal: {exc}", file=sys.stderr)
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
