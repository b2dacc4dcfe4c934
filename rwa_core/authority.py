"""
Derived Signing Authority Module

A MintAuthority is the capability the core presents to the unit ledger
when it mints or burns units for an asset. It is derived deterministically
from the asset address and the program secret, so the core can re-derive
it for every call without storing a private key, and no human identity
ever holds it.
"""

from dataclasses import dataclass, field
import hashlib
import hmac

from .store import derive_address, AUTHORITY_NAMESPACE


@dataclass(frozen=True)
class MintAuthority:
    """Capability bound to a single seed address (an asset or the treasury)"""
    address: str
    key: str = field(repr=False)

    @property
    def fingerprint(self) -> str:
        """Public commitment to the key, stored by the ledger on the mint"""
        return fingerprint_key(self.key)


def fingerprint_key(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def derive_authority(seed_address: str, program_secret: str) -> MintAuthority:
    """
    Derive the mint/burn authority for a seed address

    Args:
        seed_address: Address the authority is bound to
        program_secret: Secret known only to this program

    Returns:
        MintAuthority whose key is HMAC-SHA256(secret, derived address)
    """
    authority_address = derive_address(AUTHORITY_NAMESPACE, seed_address)
    key = hmac.new(
        program_secret.encode("utf-8"),
        authority_address.encode("utf-8"),
        hashlib.sha256
    ).hexdigest()
    return MintAuthority(address=authority_address, key=key)
