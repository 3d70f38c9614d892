"""
CLI command modules.
"""

from mmr_cli.commands import append, peaks, proof, verify, batch

__all__ = ["append", "peaks", "proof", "verify", "batch"]
