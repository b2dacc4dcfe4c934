"""
Test suite for the unit ledger

Tests mint provisioning, account opening and the authority-checked
mint, burn and transfer primitives.
"""

import pytest

from rwa_core.authority import derive_authority
from rwa_core.errors import AlreadyExists, LedgerError, NotFound
from rwa_core.storage import InMemoryStorage
from rwa_core.store import AccountStore
from rwa_core.unit_ledger import UnitLedger
from rwa_core.units import U64_MAX


class TestDerivedAuthority:
    """Test derivation of mint authorities"""

    def test_deterministic(self):
        assert derive_authority("asset_1", "secret") == derive_authority("asset_1", "secret")

    def test_bound_to_seed_and_secret(self):
        base = derive_authority("asset_1", "secret")
        assert derive_authority("asset_2", "secret").fingerprint != base.fingerprint
        assert derive_authority("asset_1", "other-secret").fingerprint != base.fingerprint

    def test_key_not_in_repr(self):
        authority = derive_authority("asset_1", "secret")
        assert authority.key not in repr(authority)


class TestUnitLedger:
    """Test ledger primitives"""

    def setup_method(self):
        self.storage = InMemoryStorage()
        self.ledger = UnitLedger(AccountStore(self.storage))
        self.authority = derive_authority("asset_1", "secret")
        self.mint = self.ledger.create_mint("mint_1", self.authority, decimals=6, label="Farm")
        self.alice = self.ledger.open_account("mint_1", "alice").address
        self.bob = self.ledger.open_account("mint_1", "bob").address

    def test_create_mint(self):
        token_mint = self.ledger.get_mint("mint_1")
        assert token_mint.label == "Farm"
        assert token_mint.supply == 0
        assert token_mint.authority_fingerprint == self.authority.fingerprint

    def test_create_mint_twice_fails(self):
        with pytest.raises(AlreadyExists):
            self.ledger.create_mint("mint_1", self.authority, decimals=6, label="Farm")

    def test_open_account_is_idempotent(self):
        self.ledger.mint(self.authority, self.alice, 10)

        account = self.ledger.open_account("mint_1", "alice")
        assert account.address == self.alice
        assert account.balance == 10

    def test_open_account_unknown_mint(self):
        with pytest.raises(NotFound):
            self.ledger.open_account("missing_mint", "alice")

    def test_account_address_is_deterministic(self):
        assert self.ledger.account_address("mint_1", "alice") == self.alice
        assert self.ledger.account_address("mint_1", "bob") != self.alice

    def test_balance_of_unknown_account(self):
        assert self.ledger.balance_of("nowhere") == 0

    def test_mint(self):
        self.ledger.mint(self.authority, self.alice, 100)

        assert self.ledger.balance_of(self.alice) == 100
        assert self.ledger.get_mint("mint_1").supply == 100

    def test_mint_wrong_authority(self):
        intruder = derive_authority("asset_2", "secret")

        with pytest.raises(LedgerError):
            self.ledger.mint(intruder, self.alice, 100)
        assert self.ledger.balance_of(self.alice) == 0

    def test_mint_unknown_account(self):
        with pytest.raises(LedgerError):
            self.ledger.mint(self.authority, "nowhere", 1)

    def test_mint_overflow(self):
        self.ledger.mint(self.authority, self.alice, U64_MAX)

        with pytest.raises(LedgerError):
            self.ledger.mint(self.authority, self.bob, 1)
        assert self.ledger.balance_of(self.bob) == 0

    @pytest.mark.parametrize("amount", [0, -1])
    def test_mint_invalid_amount(self, amount):
        with pytest.raises(LedgerError):
            self.ledger.mint(self.authority, self.alice, amount)

    def test_burn(self):
        self.ledger.mint(self.authority, self.alice, 100)
        self.ledger.burn(self.authority, self.alice, 40)

        assert self.ledger.balance_of(self.alice) == 60
        assert self.ledger.get_mint("mint_1").supply == 60

    def test_burn_more_than_balance(self):
        self.ledger.mint(self.authority, self.alice, 10)

        with pytest.raises(LedgerError):
            self.ledger.burn(self.authority, self.alice, 11)
        assert self.ledger.balance_of(self.alice) == 10

    def test_transfer(self):
        self.ledger.mint(self.authority, self.alice, 100)
        self.ledger.transfer("alice", self.alice, self.bob, 30)

        assert self.ledger.balance_of(self.alice) == 70
        assert self.ledger.balance_of(self.bob) == 30
        assert self.ledger.get_mint("mint_1").supply == 100

    def test_transfer_requires_holder(self):
        self.ledger.mint(self.authority, self.alice, 100)

        with pytest.raises(LedgerError, match="not the holder"):
            self.ledger.transfer("bob", self.alice, self.bob, 30)
        assert self.ledger.balance_of(self.alice) == 100

    def test_transfer_insufficient_balance(self):
        self.ledger.mint(self.authority, self.alice, 10)

        with pytest.raises(LedgerError):
            self.ledger.transfer("alice", self.alice, self.bob, 11)

    def test_transfer_between_mints(self):
        other_authority = derive_authority("asset_2", "secret")
        self.ledger.create_mint("mint_2", other_authority, decimals=6, label="Art")
        other = self.ledger.open_account("mint_2", "bob").address
        self.ledger.mint(self.authority, self.alice, 10)

        with pytest.raises(LedgerError, match="different mints"):
            self.ledger.transfer("alice", self.alice, other, 5)

    def test_self_transfer_is_noop(self):
        self.ledger.mint(self.authority, self.alice, 10)
        self.ledger.transfer("alice", self.alice, self.alice, 10)

        assert self.ledger.balance_of(self.alice) == 10

    def test_accounts_for_holder_and_mint(self):
        assert {a.address for a in self.ledger.accounts_for_mint("mint_1")} == {self.alice, self.bob}
        assert [a.address for a in self.ledger.accounts_for_holder("alice")] == [self.alice]
