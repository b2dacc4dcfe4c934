"""
Account Store Module

Persistent keyed storage addressed by deterministic derived keys. An
address is a SHA-256 digest over a namespace tag and a list of seeds, so
the same inputs always name the same record and different namespaces
can never collide.
"""

from typing import Any, Dict, List, Union
import hashlib

from .errors import NotFound, AlreadyExists
from .storage import StorageInterface


# Namespace tags
ASSET_NAMESPACE = "asset"
MINT_NAMESPACE = "mint"
HOLDING_NAMESPACE = "holding"
AUTHORITY_NAMESPACE = "authority"

Seed = Union[str, bytes]


def _seed_bytes(seed: Seed) -> bytes:
    if isinstance(seed, bytes):
        return seed
    return seed.encode("utf-8")


def derive_address(namespace: str, *seeds: Seed) -> str:
    """
    Derive a storage address from a namespace tag and seeds

    Each component is length-prefixed before hashing so that
    ("ab", "c") and ("a", "bc") derive different addresses.

    Returns:
        64-character hex digest
    """
    digest = hashlib.sha256()
    for part in (namespace, *seeds):
        data = _seed_bytes(part)
        digest.update(len(data).to_bytes(4, "big"))
        digest.update(data)
    return digest.hexdigest()


class AccountStore:
    """Keyed record store with create/read/write semantics"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def create(self, table: str, address: str, record: Dict[str, Any]) -> None:
        """Allocate a new record; fails if the address is taken"""
        if self.storage.exists(table, address):
            raise AlreadyExists(f"{table} record already exists at {address}")
        self.storage.save(table, address, record)

    def read(self, table: str, address: str) -> Dict[str, Any]:
        """Read a record; fails if nothing is stored at the address"""
        record = self.storage.load(table, address)
        if record is None:
            raise NotFound(f"No {table} record at {address}")
        return record

    def write(self, table: str, address: str, record: Dict[str, Any]) -> None:
        """Overwrite an existing record"""
        if not self.storage.exists(table, address):
            raise NotFound(f"No {table} record at {address}")
        self.storage.save(table, address, record)

    def exists(self, table: str, address: str) -> bool:
        return self.storage.exists(table, address)

    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self.storage.find(table, filters)

    def atomic(self):
        """Transaction boundary of the underlying storage backend"""
        return self.storage.atomic()
