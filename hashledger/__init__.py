"""
hashledger - Append-only, hash-chained ledger pages.

This package provides the Block and LedgerPage entities with their hashing,
verification and canonical JSON serialization.
"""

from .blocks import Block
from .chain import LedgerPage, PageState, SynchronizedLedgerPage
from .exceptions import HashLedgerError, DecodeError, EncodingError, ParseError, PageFinalizedError
from .metrics import start_metrics_server
from .config import Settings, get_settings

__all__ = [
    "Block",
    "LedgerPage",
    "PageState",
    "SynchronizedLedgerPage",
    "HashLedgerError",
    "DecodeError",
    "EncodingError",
    "ParseError",
    "PageFinalizedError",
    "start_metrics_server",
    "Settings",
    "get_settings",
]

__version__ = "0.1.0"
