"""
CLI Peaks Command

Show the peaks and bagged root, now or at an earlier tree size.

Usage:
    mmr peaks [--elements-count N] [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace

from core.crypto.hashing import to_hex
from mmr_cli.config import open_accumulator


EXIT_SUCCESS = 0


def peaks_cmd(args: Namespace) -> int:
    """Execute the peaks command."""
    mmr = open_accumulator(args.runtime_config)
    try:
        count = args.elements_count if args.elements_count is not None else mmr.elements_count
        peaks = mmr.get_peaks(count)
        root = mmr.bag_peaks(peaks, count)
    finally:
        mmr.store.close()

    if args.json:
        print(json.dumps({
            "elements_count": count,
            "peaks": [to_hex(p) for p in peaks],
            "root_hash": to_hex(root),
        }, indent=2))
    else:
        print(f"elements_count: {count}")
        print(f"root_hash: {to_hex(root)}")
        print(f"peaks ({len(peaks)}):")
        for peak in peaks:
            print(f"  {to_hex(peak)}")
    return EXIT_SUCCESS
