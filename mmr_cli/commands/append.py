"""
CLI Append Command

Append one or more integer values to the journal.

Usage:
    mmr append 1 2 3 [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from mmr_cli.config import open_accumulator


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0


def append_cmd(args: Namespace) -> int:
    """
    Execute the append command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    mmr = open_accumulator(args.runtime_config)
    results = []
    try:
        for value in args.values:
            results.append(mmr.append_value(value))
    finally:
        mmr.store.close()

    logger.info("Appended %d values, elements_count=%d", len(results), results[-1].elements_count)

    if args.json:
        print(json.dumps([r.model_dump() for r in results], indent=2))
    else:
        for value, result in zip(args.values, results):
            print(
                f"value={value} leaf_index={result.leaf_index} "
                f"position={result.element_position} "
                f"elements_count={result.elements_count} root={result.root_hash}"
            )
    return EXIT_SUCCESS
