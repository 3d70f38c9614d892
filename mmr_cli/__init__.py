"""
MMR CLI

Command-line interface for the Merkle Mountain Range accumulator.

Usage:
    python -m mmr_cli --store mmr.jsonl append 1 2 3
    python -m mmr_cli peaks
    python -m mmr_cli proof 4 --abi
    python -m mmr_cli verify proof.json
    python -m mmr_cli batch 10 --proofs
"""

__version__ = "0.1.0"
