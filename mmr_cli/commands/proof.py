"""
CLI Proof Command

Produce an inclusion proof in the on-chain verifier's shape.

Usage:
    mmr proof POSITION [--elements-count N] [--abi] [--out proof.json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import to_hex
from core.mmr.solidity import SolidityProof
from mmr_cli.config import open_accumulator


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Leaves are emitted as a SolidityProof (JSON or ABI hex). Internal
    nodes, when enabled in config, have no value and are emitted as the
    raw proof plus root.
    """
    mmr = open_accumulator(args.runtime_config)
    try:
        proof = mmr.get_proof(args.position, args.elements_count)
        root = mmr.get_root(proof.elements_count)
        node = mmr.get_node(args.position)
    finally:
        mmr.store.close()

    if node.value is None:
        data = proof.model_dump()
        data["root_hash"] = to_hex(root)
        output = json.dumps(data, indent=2)
    else:
        solidity = SolidityProof.from_proof(node.value, proof, root)
        if args.abi:
            output = to_hex(solidity.abi_encode())
        else:
            output = json.dumps(solidity.model_dump(by_alias=True), indent=2)

    if args.out:
        Path(args.out).write_text(output + "\n")
        logger.info("Wrote proof for position %d to %s", args.position, args.out)
    else:
        print(output)
    return EXIT_SUCCESS
