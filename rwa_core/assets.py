"""
Asset Registry Module

Creates and looks up Asset records. Each asset lives at an address derived
from its owner and name, and owns a unit mint whose only mint/burn
authority is derived from the asset address itself.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum

from .audit import AuditTrail, AuditEventType
from .authority import MintAuthority, derive_authority
from .errors import ValidationError, AssetInactive, NotFound
from .logging_config import get_logger, log_action
from .storage import StorageRecord
from .store import AccountStore, derive_address, ASSET_NAMESPACE, MINT_NAMESPACE
from .unit_ledger import UnitLedger
from .units import is_u64, DEFAULT_DECIMALS


MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500
MAX_METADATA_URI_LENGTH = 200


class AssetType(Enum):
    """Closed set of real-world asset categories"""
    LAND = "Land"
    ART = "Art"
    CARBON = "Carbon"
    REAL_ESTATE = "RealEstate"
    COMMODITY = "Commodity"
    OTHER = "Other"


def _encoded_length(value: str) -> int:
    # Limits are byte limits on the UTF-8 encoding
    return len(value.encode("utf-8"))


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value:
        return datetime.fromisoformat(value)
    return None


@dataclass
class Asset(StorageRecord):
    """
    Registered real-world asset with its unit supply accounting

    `minted_supply` mirrors units minted minus units burned on the asset's
    mint and never exceeds `total_supply`.
    """
    owner: str
    name: str
    description: str
    valuation: int  # Smallest settlement-currency unit
    asset_type: AssetType
    metadata_uri: str
    total_supply: int
    mint: str
    minted_supply: int = 0
    last_mint_at: Optional[datetime] = None
    last_redeem_at: Optional[datetime] = None
    is_active: bool = True

    @property
    def address(self) -> str:
        return self.id

    @property
    def unit_price(self) -> int:
        """Settlement-currency price of one unit, truncated"""
        return self.valuation // self.total_supply

    @property
    def market_cap(self) -> int:
        return self.unit_price * self.total_supply

    @property
    def available_supply(self) -> int:
        return self.total_supply - self.minted_supply

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['asset_type'] = self.asset_type.value
        result['last_mint_at'] = self.last_mint_at.isoformat() if self.last_mint_at else None
        result['last_redeem_at'] = self.last_redeem_at.isoformat() if self.last_redeem_at else None
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Asset':
        data['asset_type'] = AssetType(data['asset_type'])
        data['last_mint_at'] = _parse_timestamp(data.get('last_mint_at'))
        data['last_redeem_at'] = _parse_timestamp(data.get('last_redeem_at'))
        return super().from_dict(data)


def ensure_active(asset: Asset) -> None:
    """Reject any mutation of a deactivated asset"""
    if not asset.is_active:
        raise AssetInactive(f"Asset {asset.address} is inactive")


class AssetRegistry:
    """
    Registers assets and provisions their unit mints
    """

    def __init__(
        self,
        store: AccountStore,
        unit_ledger: UnitLedger,
        audit_trail: AuditTrail,
        authority_secret: str,
        unit_decimals: int = DEFAULT_DECIMALS
    ):
        self.store = store
        self.unit_ledger = unit_ledger
        self.audit_trail = audit_trail
        self.unit_decimals = unit_decimals
        self.table_name = "assets"
        self.logger = get_logger("rwa.assets")
        self._authority_secret = authority_secret

    def asset_address(self, owner: str, name: str) -> str:
        return derive_address(ASSET_NAMESPACE, owner, name)

    def mint_address(self, asset_address: str) -> str:
        return derive_address(MINT_NAMESPACE, asset_address)

    def authority_for(self, asset: Asset) -> MintAuthority:
        """Derived mint/burn authority of an asset; only core operations call this"""
        return derive_authority(asset.address, self._authority_secret)

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
        """
        Register a new asset and provision its unit mint

        Args:
            owner: Identity of the issuer; immutable afterwards
            name: Asset name (at most 50 bytes)
            description: Asset description (at most 500 bytes)
            valuation: Valuation in smallest settlement-currency units
            asset_type: Asset category
            metadata_uri: Pointer to off-system metadata (at most 200 bytes)
            total_supply: Cap on units that may ever be outstanding

        Returns:
            Created Asset with no units minted

        Raises:
            ValidationError: If a field violates its constraint
            AlreadyExists: If owner already registered an asset with this name
        """
        self._validate_fields(name, description, valuation, metadata_uri, total_supply)

        now = datetime.now(timezone.utc)
        address = self.asset_address(owner, name)

        asset = Asset(
            id=address,
            created_at=now,
            updated_at=now,
            owner=owner,
            name=name,
            description=description,
            valuation=valuation,
            asset_type=AssetType(asset_type),
            metadata_uri=metadata_uri,
            total_supply=total_supply,
            mint=self.mint_address(address)
        )

        with self.store.atomic():
            self.store.create(self.table_name, address, asset.to_dict())
            self.unit_ledger.create_mint(
                asset.mint,
                self.authority_for(asset),
                decimals=self.unit_decimals,
                label=name
            )

            self.audit_trail.log_event(
                event_type=AuditEventType.ASSET_CREATED,
                entity_type="asset",
                entity_id=address,
                identity=owner,
                metadata={
                    "name": name,
                    "asset_type": asset.asset_type.value,
                    "valuation": valuation,
                    "total_supply": total_supply,
                    "mint": asset.mint
                }
            )

        log_action(
            self.logger, "info", f"Asset created: {name}",
            identity=owner, action="create_asset", resource=f"asset:{address}",
            asset=address,
            extra={"valuation": valuation, "total_supply": total_supply, "asset_type": asset.asset_type.value}
        )

        return asset

    def get_asset(self, address: str) -> Asset:
        """Get asset by address (raises NotFound)"""
        return Asset.from_dict(self.store.read(self.table_name, address))

    def find_asset(self, owner: str, name: str) -> Optional[Asset]:
        """Look up an asset by the seeds of its address"""
        try:
            return self.get_asset(self.asset_address(owner, name))
        except NotFound:
            return None

    def list_assets(
        self,
        owner: Optional[str] = None,
        asset_type: Optional[AssetType] = None,
        active_only: bool = False
    ) -> List[Asset]:
        """List assets, oldest first, optionally filtered"""
        filters: Dict[str, Any] = {}
        if owner:
            filters["owner"] = owner
        if asset_type:
            filters["asset_type"] = AssetType(asset_type).value
        if active_only:
            filters["is_active"] = True

        assets = [Asset.from_dict(data) for data in self.store.find(self.table_name, filters)]
        assets.sort(key=lambda a: a.created_at)
        return assets

    def save_asset(self, asset: Asset) -> None:
        """Persist a mutated asset; callers hold the atomic() boundary"""
        asset.updated_at = datetime.now(timezone.utc)
        self.store.write(self.table_name, asset.address, asset.to_dict())

    def _validate_fields(
        self,
        name: str,
        description: str,
        valuation: int,
        metadata_uri: str,
        total_supply: int
    ) -> None:
        if _encoded_length(name) > MAX_NAME_LENGTH:
            raise ValidationError("name", f"Name is too long (max {MAX_NAME_LENGTH} bytes)")
        if _encoded_length(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError("description", f"Description is too long (max {MAX_DESCRIPTION_LENGTH} bytes)")
        if _encoded_length(metadata_uri) > MAX_METADATA_URI_LENGTH:
            raise ValidationError("metadata_uri", f"Metadata URI is too long (max {MAX_METADATA_URI_LENGTH} bytes)")
        if not is_u64(total_supply) or total_supply == 0:
            raise ValidationError("total_supply", "Total supply must be a positive 64-bit integer")
        if not is_u64(valuation) or valuation == 0:
            raise ValidationError("valuation", "Valuation must be a positive 64-bit integer")
