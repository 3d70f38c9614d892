"""
CLI Verify Command

Verify a SolidityProof offline, exactly as the contract would.

Usage:
    mmr verify proof.json [--abi] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from eth_abi.exceptions import DecodingError
from pydantic import ValidationError

from core.crypto.hasher import get_hasher
from core.crypto.hashing import from_hex
from core.mmr.solidity import SolidityProof
from core.schemas.errors import InvalidInputException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_proof(path: Path, abi: bool = False) -> SolidityProof:
    """Read a proof from JSON, or from ABI hex when ``abi`` is set."""
    text = path.read_text().strip()
    if abi:
        return SolidityProof.abi_decode(from_hex(text))
    return SolidityProof.model_validate(json.loads(text))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 if the proof checks out, 2 if it does not, 1 on unreadable input
    """
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proof = load_proof(proof_path, abi=args.abi)
    except (ValueError, ValidationError, DecodingError) as e:
        print(f"Error loading proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    hasher = get_hasher(args.runtime_config.hasher.name)
    try:
        ok = proof.verify(hasher)
    except InvalidInputException as e:
        print(f"Error: malformed proof: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({"ok": ok, "index": proof.index, "pos": proof.pos, "hasher": hasher.name}))
    else:
        print(f"index: {proof.index}")
        print(f"pos: {proof.pos}")
        print(f"ok: {str(ok).lower()}")

    if ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
