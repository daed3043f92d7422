"""
chain.py - Ledger page management for hashledger.
"""

import logging
from enum import Enum
from threading import Lock
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .blocks import Block
from .exceptions import PageFinalizedError, ParseError
from .metrics import BLOCKS_APPENDED, PAGE_VERIFICATIONS
from .utils import load_json_object, require_str, to_canonical_json

logger = logging.getLogger(__name__)


class PageState(Enum):
    EMPTY = "empty"
    NON_EMPTY = "non_empty"
    FINALIZED = "finalized"


class LedgerPage:
    """
    An append-only sequence of Blocks where each block's parent hash is the
    previous block's hash, and the first block's parent hash is the page's
    genesis anchor.

    The page is not thread-safe; share it through SynchronizedLedgerPage.

    Example:
        page = LedgerPage("MA==")
        page.add_transaction("Hello World")
        page.add_transaction("Hello World Again")
        assert page.verify()
    """

    def __init__(self, initial_parent_hash: str) -> None:
        self._entries: List[Block] = []
        self._first_hash = initial_parent_hash
        self._last_hash: Optional[str] = None
        self._finalized = False

    @property
    def entries(self) -> Tuple[Block, ...]:
        return tuple(self._entries)

    @property
    def first_hash(self) -> str:
        return self._first_hash

    @property
    def last_hash(self) -> Optional[str]:
        return self._last_hash

    @property
    def state(self) -> PageState:
        if self._finalized:
            return PageState.FINALIZED
        return PageState.NON_EMPTY if self._entries else PageState.EMPTY

    def is_finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> None:
        """Close the page to further appends. Calling it again has no effect."""
        if not self._finalized:
            logger.debug("Finalizing ledger page with %d entries", len(self._entries))
        self._finalized = True

    def add_transaction(self, transactions: str) -> Block:
        """
        Append a new block holding ``transactions`` to the end of the page.

        Raises:
            PageFinalizedError: if the page has been finalized.
            DecodeError: if the tail hash or genesis anchor is not valid base64.
            EncodingError: if ``transactions`` cannot be encoded as UTF-8.
        """
        if self._finalized:
            raise PageFinalizedError("Cannot add a transaction to a finalized ledger page.")
        parent_hash = self._entries[-1].hash if self._entries else self._first_hash
        block = Block(parent_hash, transactions)
        self._entries.append(block)
        self._last_hash = block.hash
        BLOCKS_APPENDED.inc()
        logger.debug("Appended block %d with hash %s", len(self._entries) - 1, block.hash)
        return block

    def verify(self) -> bool:
        """
        Check every block's hash and that each block links to its predecessor.

        Linkage means ``entries[0].parent_hash == first_hash`` and
        ``entries[n].hash == entries[n + 1].parent_hash``. An empty page verifies.
        """
        parent_hash = self._first_hash
        is_verified = True
        for index, block in enumerate(self._entries):
            if block.parent_hash != parent_hash or not block.verify():
                if is_verified:
                    logger.warning("Ledger page integrity check failed at entry %d", index)
                is_verified = False
            parent_hash = block.hash
        PAGE_VERIFICATIONS.labels(result="valid" if is_verified else "invalid").inc()
        return is_verified

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "entries": [block.to_dict() for block in self._entries],
            "first_hash": self._first_hash,
            "last_hash": self._last_hash,
        }
        if self._finalized:
            data["finalized"] = True
        return data

    def to_json(self) -> str:
        """Return the canonical compact JSON form of the page."""
        return to_canonical_json(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LedgerPage":
        """
        Rebuild a page from its serialized fields without verifying it.

        Raises:
            ParseError: if ``data`` does not match the page schema.
        """
        if not isinstance(data, Mapping):
            raise ParseError(f"LedgerPage must be an object, got {type(data).__name__}")
        entries = data.get("entries")
        if not isinstance(entries, list):
            raise ParseError("LedgerPage field 'entries' must be a list")
        first_hash = require_str(data, "first_hash", "LedgerPage")
        if "last_hash" not in data:
            raise ParseError("LedgerPage is missing field 'last_hash'")
        last_hash = data["last_hash"]
        if last_hash is not None and not isinstance(last_hash, str):
            raise ParseError("LedgerPage field 'last_hash' must be a string or null")
        finalized = data.get("finalized", False)
        if not isinstance(finalized, bool):
            raise ParseError("LedgerPage field 'finalized' must be a boolean")

        page = cls(first_hash)
        page._entries = [Block.from_dict(entry) for entry in entries]
        page._last_hash = last_hash
        page._finalized = finalized
        logger.debug("Loaded ledger page with %d entries", len(page._entries))
        return page

    @classmethod
    def from_json(cls, text: str) -> "LedgerPage":
        return cls.from_dict(load_json_object(text, "LedgerPage"))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Block]:
        return iter(tuple(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LedgerPage):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return (
            f"LedgerPage(first_hash={self._first_hash!r}, last_hash={self._last_hash!r}, "
            f"entries={len(self._entries)}, state={self.state.value})"
        )


class SynchronizedLedgerPage:
    """
    Serializes access to a LedgerPage shared between threads.
    """

    def __init__(self, page: LedgerPage) -> None:
        self.page = page
        self.lock = Lock()

    def add_transaction(self, transactions: str) -> Block:
        with self.lock:
            return self.page.add_transaction(transactions)

    def finalize(self) -> None:
        with self.lock:
            self.page.finalize()

    def verify(self) -> bool:
        with self.lock:
            return self.page.verify()

    def to_json(self) -> str:
        with self.lock:
            return self.page.to_json()

    @property
    def last_hash(self) -> Optional[str]:
        with self.lock:
            return self.page.last_hash

    def __len__(self) -> int:
        with self.lock:
            return len(self.page)
