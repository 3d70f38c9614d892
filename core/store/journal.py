"""
Journal Node Store

Durable store backed by an append-only JSON-lines file.

File layout:
    line 1:  {"format":"mmr-journal","hasher":"keccak","version":"v1"}
    line N:  {"elements_count":7,"nodes":[{...},{...},{...}]}

Every committed transaction (one append with all its merges) is exactly
one line, written with a single write call. On open the journal is
replayed into memory. A final line without its trailing newline is a torn
write from a crash: it is dropped and the file truncated back to the last
complete line. Any other unreadable line means the journal is corrupted.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Sequence

from core.schemas.canonical import dumps_canonical
from core.schemas.errors import ConfigurationException, ErrorCodes, StoreFailureException
from core.schemas.versioning import (
    JOURNAL_FORMAT,
    JOURNAL_VERSION,
    is_compatible_journal_version,
)
from core.store.base import NodeStore
from core.store.models import Node


logger = logging.getLogger(__name__)


class JournalNodeStore(NodeStore):
    """
    JSON-lines journal store.

    Args:
        path: Journal file; created with a header on first use.
        hasher_name: Hasher the journal is bound to. A journal written with
            one hasher cannot be reopened with another.
        fsync: fsync after every commit.
    """

    def __init__(
        self,
        path: str | Path,
        hasher_name: str = "keccak",
        fsync: bool = False,
    ) -> None:
        super().__init__()
        self.path = Path(path)
        self.hasher_name = hasher_name
        self.fsync = fsync
        self._nodes: dict[int, Node] = {}
        self._count = 0

        if self.path.exists() and self.path.stat().st_size > 0:
            self._replay()
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._append_line(self._header())

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _header(self) -> dict[str, Any]:
        return {
            "format": JOURNAL_FORMAT,
            "version": JOURNAL_VERSION,
            "hasher": self.hasher_name,
        }

    def _corrupted(self, line_no: int, reason: str) -> StoreFailureException:
        return StoreFailureException(
            f"Journal {self.path} corrupted at line {line_no}: {reason}",
            code=ErrorCodes.JOURNAL_CORRUPTED,
            details={"path": str(self.path), "line": line_no},
        )

    def _replay(self) -> None:
        raw = self.path.read_bytes()
        lines = raw.split(b"\n")
        torn = lines.pop()  # empty when the file ends with a newline

        if torn:
            valid_size = len(raw) - len(torn)
            logger.warning(
                "Dropping torn journal record (%d bytes) at end of %s",
                len(torn), self.path,
            )
            with open(self.path, "r+b") as fh:
                fh.truncate(valid_size)

        if not lines:
            # Crashed while writing the header itself
            self._append_line(self._header())
            return

        self._check_header(lines[0])
        for line_no, line in enumerate(lines[1:], start=2):
            self._apply_record(line_no, line)

        logger.debug("Replayed %s: %d elements", self.path, self._count)

    def _check_header(self, line: bytes) -> None:
        try:
            header = json.loads(line)
        except ValueError as e:
            raise self._corrupted(1, f"unreadable header ({e})") from e

        if not isinstance(header, dict) or header.get("format") != JOURNAL_FORMAT:
            raise self._corrupted(1, "not an MMR journal")
        if not is_compatible_journal_version(str(header.get("version"))):
            raise self._corrupted(1, f"unsupported version {header.get('version')!r}")
        if header.get("hasher") != self.hasher_name:
            raise ConfigurationException(
                f"Journal {self.path} was written with hasher "
                f"'{header.get('hasher')}', not '{self.hasher_name}'",
                details={"path": str(self.path), "hasher": header.get("hasher")},
            )

    def _apply_record(self, line_no: int, line: bytes) -> None:
        try:
            record = json.loads(line)
            nodes = [Node.from_dict(item) for item in record["nodes"]]
            elements_count = int(record["elements_count"])
        except (ValueError, KeyError, TypeError) as e:
            raise self._corrupted(line_no, str(e)) from e

        expected = self._count + 1
        for node in nodes:
            if node.position != expected:
                raise self._corrupted(
                    line_no, f"expected position {expected}, found {node.position}"
                )
            self._nodes[node.position] = node
            expected += 1

        if elements_count != expected - 1:
            raise self._corrupted(line_no, "element count does not match nodes")
        self._count = elements_count

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    def _append_line(self, record: dict[str, Any]) -> None:
        data = (dumps_canonical(record) + "\n").encode("utf-8")
        with open(self.path, "ab") as fh:
            fh.write(data)
            fh.flush()
            if self.fsync:
                os.fsync(fh.fileno())

    def _load(self, position: int) -> Optional[Node]:
        return self._nodes.get(position)

    def _commit(self, nodes: Sequence[Node], elements_count: int) -> None:
        self._append_line({
            "elements_count": elements_count,
            "nodes": [node.to_dict() for node in nodes],
        })
        for node in nodes:
            self._nodes[node.position] = node
        self._count = elements_count

    def _committed_count(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"JournalNodeStore(path={str(self.path)!r}, elements_count={self._count})"


__all__ = ["JournalNodeStore"]
