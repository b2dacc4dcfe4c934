"""
Test suite for unit transfers
"""

import pytest

from rwa_core.assets import AssetType
from rwa_core.audit import AuditEventType
from rwa_core.config import RwaConfig
from rwa_core.errors import InvalidAmount, LedgerError
from rwa_core.program import RwaTokenProgram
from rwa_core.storage import InMemoryStorage


class TestTransferOperation:
    """Test moving units between holder accounts"""

    def setup_method(self):
        self.program = RwaTokenProgram(
            storage=InMemoryStorage(),
            config=RwaConfig(database_url="memory://", authority_secret="test-secret")
        )
        self.asset = self.program.create_asset(
            owner="alice", name="Painting", description="Oil on canvas", valuation=50_000,
            asset_type=AssetType.ART, metadata_uri="ipfs://painting", total_supply=100
        )
        self.program.mint(self.asset.address, "alice", 60)
        self.alice = self.program.open_unit_account(self.asset.address, "alice").address
        self.bob = self.program.open_unit_account(self.asset.address, "bob").address

    def test_transfer(self):
        self.program.transfer(self.alice, self.bob, "alice", 25)

        assert self.program.unit_balance(self.asset.address, "alice") == 35
        assert self.program.unit_balance(self.asset.address, "bob") == 25
        assert self.program.get_asset(self.asset.address).minted_supply == 60

    def test_zero_amount(self):
        with pytest.raises(InvalidAmount):
            self.program.transfer(self.alice, self.bob, "alice", 0)

    def test_ledger_enforces_holder(self):
        with pytest.raises(LedgerError):
            self.program.transfer(self.alice, self.bob, "bob", 10)

        assert self.program.unit_balance(self.asset.address, "alice") == 60

    def test_insufficient_balance(self):
        with pytest.raises(LedgerError):
            self.program.transfer(self.alice, self.bob, "alice", 61)

    def test_transfer_is_audited(self):
        self.program.transfer(self.alice, self.bob, "alice", 5)

        events = self.program.audit_trail.get_events_for_entity("unit_account", self.alice)
        assert [e.event_type for e in events] == [AuditEventType.UNITS_TRANSFERRED]
        assert events[0].metadata["to_account"] == self.bob

    def test_rejected_transfer_is_not_audited(self):
        with pytest.raises(LedgerError):
            self.program.transfer(self.alice, self.bob, "bob", 10)

        assert self.program.audit_trail.get_events_by_type(AuditEventType.UNITS_TRANSFERRED) == []
