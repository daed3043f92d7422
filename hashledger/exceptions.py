"""
exceptions.py - Custom exceptions for the hashledger package.
"""


class HashLedgerError(Exception):
    """Base exception for hashledger errors."""
    pass


class DecodeError(HashLedgerError, ValueError):
    """Raised when a parent hash or genesis anchor is not valid base64."""

    def __init__(self, value: str, message: str = "") -> None:
        self.value = value
        super().__init__(message or f"Invalid base64 hash: {value!r}")


class ParseError(HashLedgerError, ValueError):
    """Raised when serialized data does not match the block or page schema."""
    pass


class PageFinalizedError(HashLedgerError):
    """Raised when appending to a finalized ledger page."""
    pass


class EncodingError(HashLedgerError, ValueError):
    """Raised when a payload cannot be encoded as UTF-8."""
    pass
