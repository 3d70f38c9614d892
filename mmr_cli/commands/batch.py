"""
CLI Batch Command

Append 1..COUNT (or explicit values) to a fresh in-memory accumulator and
print ABI-encoded roots or proofs for contract test harnesses.

Usage:
    mmr batch 10                     # abi.encode(bytes32[] roots)
    mmr batch 10 --final-only        # abi.encode(bytes32 root)
    mmr batch 10 --proofs            # ';'-joined ABI-encoded proofs
    mmr batch --values "7;8;9" --proofs
"""

from __future__ import annotations

import sys
from argparse import Namespace

from core.crypto.hasher import get_hasher
from core.mmr.batch import batch_values, encode_batch_output, run_batch


EXIT_SUCCESS = 0


def batch_cmd(args: Namespace) -> int:
    """Execute the batch command."""
    values = batch_values(args.count, args.values)
    result = run_batch(
        values,
        generate_proofs=args.proofs,
        hasher=get_hasher(args.runtime_config.hasher.name),
    )
    output = encode_batch_output(result, final_root_only=args.final_only)
    sys.stdout.write(output + "\n")
    return EXIT_SUCCESS
