"""
Mint Controller Module

Owner-gated, supply-bounded issuance of ownership units. Every
precondition is checked before the ledger is called, and the ledger mint
and the minted_supply update commit in one atomic() boundary.
"""

from datetime import datetime, timezone
from typing import Optional

from .assets import Asset, AssetRegistry, ensure_active
from .audit import AuditTrail, AuditEventType
from .errors import SupplyExceeded, Unauthorized
from .logging_config import get_logger, log_action, rejections_logged
from .unit_ledger import UnitLedger
from .units import checked_add, require_positive_amount


def ensure_mintable(asset: Asset, amount: int) -> int:
    """
    Check that `amount` more units fit under the asset's supply cap

    Returns:
        The minted supply after the mint

    Raises:
        SupplyExceeded: If the addition overflows u64 or exceeds total_supply
    """
    new_supply = checked_add(asset.minted_supply, amount)
    if new_supply is None or new_supply > asset.total_supply:
        raise SupplyExceeded(
            f"Minting {amount} would exceed total supply "
            f"({asset.minted_supply}/{asset.total_supply} minted)"
        )
    return new_supply


def issue_units(
    registry: AssetRegistry,
    unit_ledger: UnitLedger,
    asset: Asset,
    destination_account: str,
    amount: int
) -> Asset:
    """
    Mint units to an account and record them on the asset

    Callers must already hold the atomic() boundary and have validated
    the amount; the supply cap is re-checked here.
    """
    new_supply = ensure_mintable(asset, amount)
    unit_ledger.mint(registry.authority_for(asset), destination_account, amount)

    asset.minted_supply = new_supply
    asset.last_mint_at = datetime.now(timezone.utc)
    registry.save_asset(asset)
    return asset


class MintController:
    """
    Authorizes and performs supply-bounded minting
    """

    def __init__(self, registry: AssetRegistry, unit_ledger: UnitLedger, audit_trail: AuditTrail):
        self.registry = registry
        self.unit_ledger = unit_ledger
        self.audit_trail = audit_trail
        self.logger = get_logger("rwa.minting")

    def mint(
        self,
        asset_address: str,
        requested_by: str,
        amount: int,
        destination_account: Optional[str] = None
    ) -> Asset:
        """
        Mint units of an asset

        Args:
            asset_address: Asset to mint against
            requested_by: Verified identity of the caller; must be the owner
            amount: Units to mint
            destination_account: Unit account to credit; defaults to the
                requester's own account for the asset, opened if needed

        Returns:
            Updated Asset

        Raises:
            AssetInactive, InvalidAmount, SupplyExceeded, Unauthorized,
            LedgerError
        """
        with rejections_logged(
            self.logger, "mint", identity=requested_by, asset=asset_address, extra={"amount": amount}
        ):
            with self.registry.store.atomic():
                asset = self.registry.get_asset(asset_address)
                self._check_preconditions(asset, requested_by, amount)

                if destination_account is None:
                    destination_account = self.unit_ledger.open_account(asset.mint, requested_by).address

                issue_units(self.registry, self.unit_ledger, asset, destination_account, amount)

                self.audit_trail.log_event(
                    event_type=AuditEventType.UNITS_MINTED,
                    entity_type="asset",
                    entity_id=asset.address,
                    identity=requested_by,
                    metadata={
                        "amount": amount,
                        "destination": destination_account,
                        "minted_supply": asset.minted_supply
                    }
                )

        log_action(
            self.logger, "info", f"Minted {amount} units",
            identity=requested_by, action="mint", resource=f"unit_account:{destination_account}",
            asset=asset.address,
            extra={"amount": amount, "minted_supply": asset.minted_supply, "total_supply": asset.total_supply}
        )
        return asset

    def _check_preconditions(self, asset: Asset, requested_by: str, amount: int) -> None:
        ensure_active(asset)
        require_positive_amount(amount)
        ensure_mintable(asset, amount)
        if requested_by != asset.owner:
            raise Unauthorized(f"{requested_by} is not the owner of asset {asset.address}")
