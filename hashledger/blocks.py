"""
blocks.py - Block definition for hashledger pages.
"""
import logging
from typing import Any, Dict, Mapping

from .exceptions import DecodeError, EncodingError, ParseError
from .utils import digest, load_json_object, require_str, to_canonical_json

logger = logging.getLogger(__name__)


class Block:
    """
    An immutable record binding a parent hash to a payload via SHA-256.

    The hash is ``base64(SHA256(base64_decode(parent_hash) + utf8(transactions)))``.

    Example:
        block = Block("MA==", "Hello World")
        block.hash  # 'RGUWhlfUKobrBmf5xjKPHUCBVe2wuP+FbDrLfQXEz2g='
    """

    __slots__ = ("_parent_hash", "_transactions", "_hash")

    def __init__(self, parent_hash: str, transactions: str):
        """
        Args:
            parent_hash: Base64 hash of the previous block, or the genesis anchor.
            transactions: Opaque payload captured in the block.

        Raises:
            DecodeError: if ``parent_hash`` is not valid base64.
            EncodingError: if ``transactions`` cannot be encoded as UTF-8.
        """
        self._set(parent_hash, transactions, self.compute_hash(parent_hash, transactions))

    def _set(self, parent_hash: str, transactions: str, hash_: str) -> None:
        object.__setattr__(self, "_parent_hash", parent_hash)
        object.__setattr__(self, "_transactions", transactions)
        object.__setattr__(self, "_hash", hash_)

    @classmethod
    def _restore(cls, parent_hash: str, transactions: str, hash_: str) -> "Block":
        # Trusts the stored hash; only verify() checks it.
        block = cls.__new__(cls)
        block._set(parent_hash, transactions, hash_)
        return block

    @staticmethod
    def compute_hash(parent_hash: str, transactions: str) -> str:
        """
        Compute the base64 SHA-256 hash for a parent hash and payload.
        """
        return digest(parent_hash, transactions)

    @property
    def parent_hash(self) -> str:
        return self._parent_hash

    @property
    def transactions(self) -> str:
        return self._transactions

    @property
    def hash(self) -> str:
        return self._hash

    def verify(self) -> bool:
        """
        Check that the stored hash matches the stored parent hash and payload.

        Never raises: an undecodable parent hash or payload counts as a mismatch.
        """
        try:
            expected = self.compute_hash(self._parent_hash, self._transactions)
        except (DecodeError, EncodingError) as e:
            logger.debug("Block cannot be rehashed: %s", e)
            return False
        return self._hash == expected

    def to_dict(self) -> Dict[str, str]:
        return {
            "parent_hash": self._parent_hash,
            "transactions": self._transactions,
            "hash": self._hash,
        }

    def to_json(self) -> str:
        """Return the canonical compact JSON form of the block."""
        return to_canonical_json(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Block":
        """
        Build a block from its serialized fields without verifying it.

        Raises:
            ParseError: if ``data`` is not a mapping of three string fields.
        """
        if not isinstance(data, Mapping):
            raise ParseError(f"Block must be an object, got {type(data).__name__}")
        return cls._restore(
            require_str(data, "parent_hash", "Block"),
            require_str(data, "transactions", "Block"),
            require_str(data, "hash", "Block"),
        )

    @classmethod
    def from_json(cls, text: str) -> "Block":
        return cls.from_dict(load_json_object(text, "Block"))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (Block._restore, (self._parent_hash, self._transactions, self._hash))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Block):
            return NotImplemented
        return (
            self._parent_hash == other._parent_hash
            and self._transactions == other._transactions
            and self._hash == other._hash
        )

    def __hash__(self) -> int:
        return hash((self._parent_hash, self._transactions, self._hash))

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"Block(parent_hash={self._parent_hash!r}, transactions={self._transactions!r}, hash={self._hash!r})"
