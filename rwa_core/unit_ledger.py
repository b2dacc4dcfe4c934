"""
Unit Ledger Module

Fungible-unit ledger holding balances for every mint: one mint per asset
for ownership units, plus one for the settlement currency. Each mint
records the fingerprint of the only authority allowed to mint or burn
its units. Every call is atomic and authority-checked here, so callers
never re-validate holder signatures or mint authority themselves.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import List

from .authority import MintAuthority
from .errors import LedgerError, NotFound
from .logging_config import get_logger
from .storage import StorageRecord
from .store import AccountStore, derive_address, HOLDING_NAMESPACE
from .units import is_u64, checked_add, checked_sub


@dataclass
class TokenMint(StorageRecord):
    """A unit type with its authority commitment and outstanding supply"""
    label: str
    decimals: int
    authority_fingerprint: str
    supply: int = 0


@dataclass
class UnitAccount(StorageRecord):
    """Balance of one mint's units held by one identity"""
    mint: str
    holder: str
    balance: int = 0

    @property
    def address(self) -> str:
        return self.id


class UnitLedger:
    """
    Balance storage with atomic mint, burn and transfer primitives
    """

    def __init__(self, store: AccountStore):
        self.store = store
        self.mints_table = "mints"
        self.accounts_table = "unit_accounts"
        self.logger = get_logger("rwa.ledger")

    # Mints

    def create_mint(self, mint_address: str, authority: MintAuthority, decimals: int, label: str) -> TokenMint:
        """
        Provision a new mint whose sole mint/burn authority is `authority`

        Raises:
            AlreadyExists: If a mint is already allocated at the address
        """
        now = datetime.now(timezone.utc)
        token_mint = TokenMint(
            id=mint_address,
            created_at=now,
            updated_at=now,
            label=label,
            decimals=decimals,
            authority_fingerprint=authority.fingerprint
        )
        self.store.create(self.mints_table, mint_address, token_mint.to_dict())
        self.logger.debug(f"Mint {mint_address} provisioned for {label}")
        return token_mint

    def get_mint(self, mint_address: str) -> TokenMint:
        """Get mint by address (raises NotFound)"""
        return TokenMint.from_dict(self.store.read(self.mints_table, mint_address))

    def mint_exists(self, mint_address: str) -> bool:
        return self.store.exists(self.mints_table, mint_address)

    # Accounts

    def account_address(self, mint_address: str, holder: str) -> str:
        """Deterministic address of holder's account for a mint"""
        return derive_address(HOLDING_NAMESPACE, mint_address, holder)

    def open_account(self, mint_address: str, holder: str) -> UnitAccount:
        """
        Open holder's account for a mint, returning the existing one if present

        Raises:
            NotFound: If the mint does not exist
        """
        address = self.account_address(mint_address, holder)
        with self.store.atomic():
            if self.store.exists(self.accounts_table, address):
                return self.get_account(address)

            self.get_mint(mint_address)

            now = datetime.now(timezone.utc)
            account = UnitAccount(
                id=address,
                created_at=now,
                updated_at=now,
                mint=mint_address,
                holder=holder
            )
            self.store.create(self.accounts_table, address, account.to_dict())
            return account

    def get_account(self, account_address: str) -> UnitAccount:
        """Get account by address (raises NotFound)"""
        return UnitAccount.from_dict(self.store.read(self.accounts_table, account_address))

    def balance_of(self, account_address: str) -> int:
        """Current balance of an account; unknown accounts hold nothing"""
        try:
            return self.get_account(account_address).balance
        except NotFound:
            return 0

    def accounts_for_holder(self, holder: str) -> List[UnitAccount]:
        records = self.store.find(self.accounts_table, {"holder": holder})
        return [UnitAccount.from_dict(data) for data in records]

    def accounts_for_mint(self, mint_address: str) -> List[UnitAccount]:
        records = self.store.find(self.accounts_table, {"mint": mint_address})
        return [UnitAccount.from_dict(data) for data in records]

    # Primitives

    def mint(self, authority: MintAuthority, destination_account: str, amount: int) -> None:
        """
        Mint units into an account, authorized by the mint's authority

        Raises:
            LedgerError: On unknown account, authority mismatch or overflow
        """
        self._require_amount(amount)
        with self.store.atomic():
            account = self._load_account(destination_account)
            token_mint = self._load_mint(account.mint)
            self._require_authority(token_mint, authority)

            new_balance = checked_add(account.balance, amount)
            new_supply = checked_add(token_mint.supply, amount)
            if new_balance is None or new_supply is None:
                raise LedgerError(f"Minting {amount} overflows mint {token_mint.id}")

            account.balance = new_balance
            token_mint.supply = new_supply
            self._save_account(account)
            self._save_mint(token_mint)

        self.logger.debug(f"Minted {amount} of {account.mint} to {destination_account}")

    def burn(self, authority: MintAuthority, source_account: str, amount: int) -> None:
        """
        Burn units from an account, authorized by the mint's authority

        Raises:
            LedgerError: On unknown account, authority mismatch or insufficient balance
        """
        self._require_amount(amount)
        with self.store.atomic():
            account = self._load_account(source_account)
            token_mint = self._load_mint(account.mint)
            self._require_authority(token_mint, authority)

            new_balance = checked_sub(account.balance, amount)
            new_supply = checked_sub(token_mint.supply, amount)
            if new_balance is None or new_supply is None:
                raise LedgerError(f"Account {source_account} holds {account.balance}, cannot burn {amount}")

            account.balance = new_balance
            token_mint.supply = new_supply
            self._save_account(account)
            self._save_mint(token_mint)

        self.logger.debug(f"Burned {amount} of {account.mint} from {source_account}")

    def transfer(self, authorizing_identity: str, source_account: str, destination_account: str, amount: int) -> None:
        """
        Move units between two accounts of the same mint

        Raises:
            LedgerError: If the identity does not hold the source account,
                the mints differ, or the balance is insufficient
        """
        self._require_amount(amount)
        with self.store.atomic():
            source = self._load_account(source_account)
            destination = self._load_account(destination_account)

            if source.holder != authorizing_identity:
                raise LedgerError(f"{authorizing_identity} is not the holder of account {source_account}")
            if source.mint != destination.mint:
                raise LedgerError("Source and destination accounts belong to different mints")
            if source.balance < amount:
                raise LedgerError(f"Account {source_account} holds {source.balance}, cannot transfer {amount}")

            if source.id == destination.id:
                return

            new_destination_balance = checked_add(destination.balance, amount)
            if new_destination_balance is None:
                raise LedgerError(f"Transfer overflows account {destination_account}")

            source.balance -= amount
            destination.balance = new_destination_balance
            self._save_account(source)
            self._save_account(destination)

        self.logger.debug(f"Transferred {amount} from {source_account} to {destination_account}")

    # Internals

    def _require_amount(self, amount: int) -> None:
        if not is_u64(amount) or amount == 0:
            raise LedgerError(f"Invalid ledger amount {amount!r}")

    def _require_authority(self, token_mint: TokenMint, authority: MintAuthority) -> None:
        if authority.fingerprint != token_mint.authority_fingerprint:
            raise LedgerError(f"Authority {authority.address} may not mint or burn {token_mint.id}")

    def _load_account(self, account_address: str) -> UnitAccount:
        try:
            return self.get_account(account_address)
        except NotFound:
            raise LedgerError(f"Unknown unit account {account_address}")

    def _load_mint(self, mint_address: str) -> TokenMint:
        try:
            return self.get_mint(mint_address)
        except NotFound:
            raise LedgerError(f"Unknown mint {mint_address}")

    def _save_account(self, account: UnitAccount) -> None:
        account.updated_at = datetime.now(timezone.utc)
        self.store.write(self.accounts_table, account.id, account.to_dict())

    def _save_mint(self, token_mint: TokenMint) -> None:
        token_mint.updated_at = datetime.now(timezone.utc)
        self.store.write(self.mints_table, token_mint.id, token_mint.to_dict())
