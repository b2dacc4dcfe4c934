"""
Redemption Controller Module

Burns a holder's units (the holder exits the asset) and decrements the
asset's minted supply. The holder balance is read inside the same atomic()
boundary as the burn.
"""

from datetime import datetime, timezone
from typing import Optional

from .assets import Asset, AssetRegistry, ensure_active
from .audit import AuditTrail, AuditEventType
from .errors import InsufficientTokens, Unauthorized, NotFound
from .logging_config import get_logger, log_action, rejections_logged
from .unit_ledger import UnitLedger
from .units import checked_sub, require_positive_amount


class RedemptionController:
    """
    Burns units and keeps minted_supply in step with the ledger
    """

    def __init__(self, registry: AssetRegistry, unit_ledger: UnitLedger, audit_trail: AuditTrail):
        self.registry = registry
        self.unit_ledger = unit_ledger
        self.audit_trail = audit_trail
        self.logger = get_logger("rwa.redemptions")

    def redeem(
        self,
        asset_address: str,
        holder: str,
        amount: int,
        holder_account: Optional[str] = None
    ) -> Asset:
        """
        Redeem units of an asset

        Args:
            asset_address: Asset being redeemed
            holder: Verified identity of the holder
            amount: Units to burn
            holder_account: Holder's unit account; defaults to the holder's
                account for the asset's mint

        Returns:
            Updated Asset

        Raises:
            AssetInactive, InvalidAmount, Unauthorized, InsufficientTokens,
            LedgerError
        """
        with rejections_logged(
            self.logger, "redeem", identity=holder, asset=asset_address, extra={"amount": amount}
        ):
            with self.registry.store.atomic():
                asset = self.registry.get_asset(asset_address)
                ensure_active(asset)
                require_positive_amount(amount)

                if holder_account is None:
                    holder_account = self.unit_ledger.account_address(asset.mint, holder)

                balance = self._holder_balance(holder_account, holder)
                if balance < amount:
                    raise InsufficientTokens(f"Account {holder_account} holds {balance}, cannot redeem {amount}")

                new_supply = checked_sub(asset.minted_supply, amount)
                if new_supply is None:
                    raise InsufficientTokens(
                        f"Redeeming {amount} exceeds the {asset.minted_supply} units minted for {asset.address}"
                    )

                self.unit_ledger.burn(self.registry.authority_for(asset), holder_account, amount)

                asset.minted_supply = new_supply
                asset.last_redeem_at = datetime.now(timezone.utc)
                self.registry.save_asset(asset)

                self.audit_trail.log_event(
                    event_type=AuditEventType.UNITS_REDEEMED,
                    entity_type="asset",
                    entity_id=asset.address,
                    identity=holder,
                    metadata={
                        "amount": amount,
                        "source": holder_account,
                        "minted_supply": asset.minted_supply
                    }
                )

        log_action(
            self.logger, "info", f"Redeemed {amount} units",
            identity=holder, action="redeem", resource=f"unit_account:{holder_account}",
            asset=asset.address,
            extra={"amount": amount, "minted_supply": asset.minted_supply}
        )
        return asset

    def _holder_balance(self, holder_account: str, holder: str) -> int:
        """Balance snapshot of the holder's account; an unopened account holds nothing"""
        try:
            account = self.unit_ledger.get_account(holder_account)
        except NotFound:
            return 0
        if account.holder != holder:
            raise Unauthorized(f"{holder} is not the holder of account {holder_account}")
        return account.balance
