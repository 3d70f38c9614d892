"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m mmr_cli append <value>... [--json]
    python -m mmr_cli peaks [--elements-count N] [--json]
    python -m mmr_cli proof <position> [--elements-count N] [--abi] [--out PATH]
    python -m mmr_cli verify <proof_path> [--abi] [--json]
    python -m mmr_cli batch [COUNT] [--values "a;b"] [--proofs] [--final-only]
    python -m mmr_cli config --init|--show

Environment Variables:
    MMR_HASHER                  Hasher name: keccak, sha256 (default: keccak)
    MMR_STORE_PATH              Journal file (default: mmr.jsonl)
    MMR_STORE_FSYNC             fsync after each append (default: false)
    MMR_ALLOW_INTERNAL_PROOFS   Allow proofs of internal nodes (default: false)
    MMR_LOG_LEVEL               Log level (default: INFO)
    MMR_LOG_FILE                Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import get_default_config_template
from core.crypto.hasher import HASHERS
from core.schemas.errors import AccumulatorException
from mmr_cli import __version__
from mmr_cli.commands import append, peaks, proof, verify, batch
from mmr_cli.config import load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mmr",
        description="Merkle Mountain Range accumulator - append values, build and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./mmr.yaml or ~/.config/mmr/config.yaml)",
    )
    parser.add_argument(
        "--store", "-s",
        type=str,
        default=None,
        help="Journal file to operate on (overrides config)",
    )
    parser.add_argument(
        "--hasher",
        type=str,
        default=None,
        choices=sorted(HASHERS),
        help="Hash scheme (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- append command ---
    append_parser = subparsers.add_parser(
        "append",
        help="Append values to the accumulator",
        description="Encode each value as a 32-byte integer and append it as a leaf.",
    )
    append_parser.add_argument(
        "values",
        nargs="+",
        type=str,
        help="Integer values (decimal or 0x-hex)",
    )
    append_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    append_parser.set_defaults(func=append.append_cmd)

    # --- peaks command ---
    peaks_parser = subparsers.add_parser(
        "peaks",
        help="Show peaks and bagged root",
    )
    peaks_parser.add_argument(
        "--elements-count", "-n",
        type=int,
        default=None,
        help="Earlier tree size to report (default: current)",
    )
    peaks_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    peaks_parser.set_defaults(func=peaks.peaks_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Generate an inclusion proof",
        description="Build a proof in the on-chain verifier's (index, value, proof, peaks, pos, rootHash) shape.",
    )
    proof_parser.add_argument(
        "position",
        type=int,
        help="Element position to prove",
    )
    proof_parser.add_argument(
        "--elements-count", "-n",
        type=int,
        default=None,
        help="Prove against this earlier tree size (default: current)",
    )
    proof_parser.add_argument(
        "--abi",
        action="store_true",
        default=False,
        help="Output ABI-encoded hex instead of JSON",
    )
    proof_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof to this file instead of stdout",
    )
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof offline",
        description="Recompute the root from a proof file without touching any store.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to a proof file produced by 'mmr proof'",
    )
    verify_parser.add_argument(
        "--abi",
        action="store_true",
        default=False,
        help="Proof file holds ABI-encoded hex",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- batch command ---
    batch_parser = subparsers.add_parser(
        "batch",
        help="Append a run of values to a fresh accumulator and print ABI output",
    )
    batch_parser.add_argument(
        "count",
        type=int,
        nargs="?",
        default=None,
        help="Append 1..COUNT",
    )
    batch_parser.add_argument(
        "--values",
        type=str,
        default=None,
        help="';'-separated values to append instead of 1..COUNT",
    )
    batch_parser.add_argument(
        "--proofs",
        action="store_true",
        default=False,
        help="Emit ';'-joined ABI-encoded proofs for every append",
    )
    batch_parser.add_argument(
        "--final-only",
        action="store_true",
        default=False,
        help="Emit only the final root",
    )
    batch_parser.set_defaults(func=batch.batch_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show effective configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="mmr.yaml",
        help="Configuration file path for --init (default: mmr.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (MMR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: mmr config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.store:
        config.store.path = args.store
    if args.hasher:
        config.hasher.name = args.hasher

    setup_logging(level=args.log_level or config.logging.level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except AccumulatorException as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
