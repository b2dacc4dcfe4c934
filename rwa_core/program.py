"""
RWA Token Program

Wires storage, the account store, the unit ledger and the core
controllers into one object exposing the five user-facing operations
(create_asset, mint, transfer, buy_fraction, redeem) plus read-only
queries for assets and holdings.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .assets import Asset, AssetRegistry, AssetType
from .audit import AuditTrail, AuditEventType
from .authority import derive_authority
from .config import RwaConfig, get_config
from .errors import NotFound
from .logging_config import get_logger, log_action
from .metadata import AssetMetadata, MetadataStore
from .minting import MintController
from .purchases import PurchaseEngine, PurchaseQuote
from .redemptions import RedemptionController
from .storage import StorageInterface, create_storage
from .store import AccountStore, derive_address, MINT_NAMESPACE
from .transfers import TransferOperation
from .unit_ledger import UnitLedger, UnitAccount
from .units import UnitAmount, require_positive_amount


@dataclass
class AssetSummary:
    """Asset together with its derived market figures"""
    asset: Asset
    unit_price: int
    market_cap: int
    available_supply: int
    ledger_supply: int


@dataclass
class AssetWithMetadata(AssetSummary):
    """Asset summary plus its resolved metadata document, if any"""
    metadata: Optional[AssetMetadata] = None


@dataclass
class Position:
    asset_address: str
    asset_name: str
    account: str
    balance: int


@dataclass
class Holdings:
    """Settlement balance and unit positions of one identity"""
    identity: str
    settlement_account: str
    settlement_balance: int
    positions: List[Position] = field(default_factory=list)


class RwaTokenProgram:
    """RWA fractional ownership system with all components initialized"""

    def __init__(self, storage: Optional[StorageInterface] = None, config: Optional[RwaConfig] = None):
        self.config = config or get_config()
        self.storage = storage or create_storage(self.config.database_url)
        self.logger = get_logger("rwa.program")

        self.store = AccountStore(self.storage)
        self.audit_trail = AuditTrail(self.storage, enabled=self.config.enable_audit_logging)
        self.unit_ledger = UnitLedger(self.store)
        self.registry = AssetRegistry(
            self.store, self.unit_ledger, self.audit_trail,
            authority_secret=self.config.authority_secret,
            unit_decimals=self.config.unit_decimals
        )
        self.mint_controller = MintController(self.registry, self.unit_ledger, self.audit_trail)
        self.transfer_operation = TransferOperation(self.unit_ledger, self.audit_trail)
        self.redemption_controller = RedemptionController(self.registry, self.unit_ledger, self.audit_trail)
        self.metadata_store = MetadataStore(self.storage)

        self.settlement_mint = derive_address(MINT_NAMESPACE, "settlement", self.config.settlement_symbol)
        self.purchase_engine = PurchaseEngine(
            self.registry, self.unit_ledger, self.audit_trail,
            settlement_mint=self.settlement_mint,
            floor_percent=self.config.slippage_floor_percent
        )
        self._treasury_authority = derive_authority(
            derive_address("treasury", self.config.treasury_identity),
            self.config.authority_secret
        )
        self._ensure_settlement_mint()

    def _ensure_settlement_mint(self) -> None:
        with self.store.atomic():
            if not self.unit_ledger.mint_exists(self.settlement_mint):
                self.unit_ledger.create_mint(
                    self.settlement_mint,
                    self._treasury_authority,
                    decimals=self.config.settlement_decimals,
                    label=self.config.settlement_symbol
                )

    # Operations

    def create_asset(
        self,
        owner: str,
        name: str,
        description: str,
        valuation: int,
        asset_type: AssetType,
        metadata_uri: str,
        total_supply: int
    ) -> Asset:
        return self.registry.create_asset(
            owner, name, description, valuation, asset_type, metadata_uri, total_supply
        )

    def mint(self, asset_address: str, requested_by: str, amount: int,
             destination_account: Optional[str] = None) -> Asset:
        return self.mint_controller.mint(asset_address, requested_by, amount, destination_account)

    def transfer(self, from_account: str, to_account: str, authorizing_identity: str, amount: int) -> None:
        self.transfer_operation.transfer(from_account, to_account, authorizing_identity, amount)

    def buy_fraction(
        self,
        asset_address: str,
        buyer: str,
        currency_from: str,
        currency_to_owner: str,
        unit_to_buyer: str,
        currency_amount: int,
        expected_units: int
    ) -> Asset:
        return self.purchase_engine.buy_fraction(
            asset_address, buyer, currency_from, currency_to_owner,
            unit_to_buyer, currency_amount, expected_units
        )

    def redeem(self, asset_address: str, holder: str, amount: int,
               holder_account: Optional[str] = None) -> Asset:
        return self.redemption_controller.redeem(asset_address, holder, amount, holder_account)

    # Queries

    def get_asset(self, asset_address: str) -> Asset:
        return self.registry.get_asset(asset_address)

    def list_assets(self, owner: Optional[str] = None, asset_type: Optional[AssetType] = None,
                    active_only: bool = False) -> List[Asset]:
        return self.registry.list_assets(owner=owner, asset_type=asset_type, active_only=active_only)

    def get_asset_summary(self, asset_address: str) -> AssetSummary:
        asset = self.registry.get_asset(asset_address)
        return AssetSummary(
            asset=asset,
            unit_price=asset.unit_price,
            market_cap=asset.market_cap,
            available_supply=asset.available_supply,
            ledger_supply=self.unit_ledger.get_mint(asset.mint).supply
        )

    def get_asset_with_metadata(self, asset_address: str) -> AssetWithMetadata:
        """
        Asset summary with its metadata document resolved

        metadata is None when the URI is not a ``local://`` URI or the
        document it names is missing.
        """
        summary = self.get_asset_summary(asset_address)
        return AssetWithMetadata(
            asset=summary.asset,
            unit_price=summary.unit_price,
            market_cap=summary.market_cap,
            available_supply=summary.available_supply,
            ledger_supply=summary.ledger_supply,
            metadata=self.metadata_store.resolve(summary.asset.metadata_uri)
        )

    # Metadata documents

    def publish_metadata(self, document: AssetMetadata) -> str:
        """Store a metadata document and return the URI to register an asset with"""
        return self.metadata_store.uri_for(self.metadata_store.upload(document))

    def get_metadata(self, document_id: str) -> AssetMetadata:
        """Fetch a stored metadata document (raises NotFound)"""
        document = self.metadata_store.fetch(document_id)
        if document is None:
            raise NotFound(f"No metadata document {document_id}")
        return document

    def quote(self, asset_address: str, expected_units: int) -> PurchaseQuote:
        return self.purchase_engine.quote(asset_address, expected_units)

    def open_unit_account(self, asset_address: str, holder: str) -> UnitAccount:
        """Open (or return) holder's unit account for an asset"""
        asset = self.registry.get_asset(asset_address)
        return self.unit_ledger.open_account(asset.mint, holder)

    def open_settlement_account(self, holder: str) -> UnitAccount:
        return self.unit_ledger.open_account(self.settlement_mint, holder)

    def unit_balance(self, asset_address: str, holder: str) -> int:
        asset = self.registry.get_asset(asset_address)
        return self.unit_ledger.balance_of(self.unit_ledger.account_address(asset.mint, holder))

    def settlement_balance(self, holder: str) -> int:
        return self.unit_ledger.balance_of(self.unit_ledger.account_address(self.settlement_mint, holder))

    def get_holdings(self, identity: str) -> Holdings:
        """Wallet view: settlement balance plus every unit position"""
        holdings = Holdings(
            identity=identity,
            settlement_account=self.unit_ledger.account_address(self.settlement_mint, identity),
            settlement_balance=self.settlement_balance(identity)
        )

        assets_by_mint = {asset.mint: asset for asset in self.registry.list_assets()}
        for account in self.unit_ledger.accounts_for_holder(identity):
            asset = assets_by_mint.get(account.mint)
            if asset is None:
                continue
            holdings.positions.append(Position(
                asset_address=asset.address,
                asset_name=asset.name,
                account=account.address,
                balance=account.balance
            ))

        return holdings

    def fund_settlement(self, holder: str, amount: int) -> UnitAccount:
        """
        Issue settlement currency from the treasury to a holder

        Stands in for deposits from outside the system.
        """
        require_positive_amount(amount)
        with self.store.atomic():
            account = self.unit_ledger.open_account(self.settlement_mint, holder)
            self.unit_ledger.mint(self._treasury_authority, account.address, amount)

            self.audit_trail.log_event(
                event_type=AuditEventType.SETTLEMENT_FUNDED,
                entity_type="unit_account",
                entity_id=account.address,
                identity=self.config.treasury_identity,
                metadata={"holder": holder, "amount": amount}
            )

        log_action(
            self.logger, "info",
            f"Funded {UnitAmount(amount, self.config.settlement_decimals).to_string(self.config.settlement_symbol)}",
            identity=self.config.treasury_identity, action="fund_settlement",
            resource=f"unit_account:{account.address}"
        )
        return self.unit_ledger.get_account(account.address)

    def close(self) -> None:
        self.storage.close()
