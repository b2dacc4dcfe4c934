"""
Purchase Engine Module

Sells newly minted units for settlement currency at a price derived from
the asset valuation. A purchase is two ledger legs (currency transfer to
the seller, unit mint to the buyer) applied atomically.

Pricing truncates: unit_price = valuation // total_supply. The payment
floor protects the seller; a buyer may always pay more than nominal.
"""

from dataclasses import dataclass

from .assets import Asset, AssetRegistry, ensure_active
from .audit import AuditTrail, AuditEventType
from .errors import LedgerError, NotFound, SlippageExceeded, Unauthorized
from .logging_config import get_logger, log_action, rejections_logged
from .minting import ensure_mintable, issue_units
from .unit_ledger import UnitLedger, UnitAccount
from .units import require_positive_amount

DEFAULT_SLIPPAGE_FLOOR_PERCENT = 99


def calculate_unit_price(valuation: int, total_supply: int) -> int:
    """Price of one unit in smallest settlement-currency units, rounded down"""
    if total_supply == 0:
        return 0
    return valuation // total_supply


@dataclass(frozen=True)
class PurchaseQuote:
    """Nominal cost of a number of units and the least a buyer may pay"""
    units: int
    unit_price: int
    nominal_cost: int
    minimum_payment: int

    def accepts(self, currency_amount: int) -> bool:
        return currency_amount >= self.minimum_payment


def quote(asset: Asset, expected_units: int, floor_percent: int = DEFAULT_SLIPPAGE_FLOOR_PERCENT) -> PurchaseQuote:
    unit_price = calculate_unit_price(asset.valuation, asset.total_supply)
    nominal_cost = expected_units * unit_price
    return PurchaseQuote(
        units=expected_units,
        unit_price=unit_price,
        nominal_cost=nominal_cost,
        minimum_payment=nominal_cost * floor_percent // 100
    )


class PurchaseEngine:
    """
    Prices, bounds and settles fractional purchases
    """

    def __init__(
        self,
        registry: AssetRegistry,
        unit_ledger: UnitLedger,
        audit_trail: AuditTrail,
        settlement_mint: str,
        floor_percent: int = DEFAULT_SLIPPAGE_FLOOR_PERCENT
    ):
        self.registry = registry
        self.unit_ledger = unit_ledger
        self.audit_trail = audit_trail
        self.settlement_mint = settlement_mint
        self.floor_percent = floor_percent
        self.logger = get_logger("rwa.purchases")

    def quote(self, asset_address: str, expected_units: int) -> PurchaseQuote:
        """Quote the cost of `expected_units` units of an asset"""
        require_positive_amount(expected_units, "expected_units")
        asset = self.registry.get_asset(asset_address)
        return quote(asset, expected_units, self.floor_percent)

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
        """
        Buy newly minted units of an asset

        Args:
            asset_address: Asset being bought into
            buyer: Verified identity paying; must hold `currency_from`
            currency_from: Buyer's settlement-currency account
            currency_to_owner: Settlement-currency account receiving payment
            unit_to_buyer: Unit account receiving the minted units
            currency_amount: Settlement currency paid
            expected_units: Units requested

        Returns:
            Updated Asset

        Raises:
            AssetInactive, InvalidAmount, SlippageExceeded, SupplyExceeded,
            Unauthorized, LedgerError
        """
        with rejections_logged(
            self.logger, "buy_fraction", identity=buyer, asset=asset_address,
            extra={"currency_amount": currency_amount, "expected_units": expected_units}
        ):
            with self.registry.store.atomic():
                asset = self.registry.get_asset(asset_address)
                ensure_active(asset)
                require_positive_amount(currency_amount, "currency_amount")
                require_positive_amount(expected_units, "expected_units")

                purchase_quote = quote(asset, expected_units, self.floor_percent)
                if not purchase_quote.accepts(currency_amount):
                    raise SlippageExceeded(
                        f"Payment {currency_amount} is below the minimum "
                        f"{purchase_quote.minimum_payment} for {expected_units} units"
                    )
                ensure_mintable(asset, expected_units)
                self._check_payment_accounts(asset, currency_from, currency_to_owner)

                self.unit_ledger.transfer(buyer, currency_from, currency_to_owner, currency_amount)
                issue_units(self.registry, self.unit_ledger, asset, unit_to_buyer, expected_units)

                self.audit_trail.log_event(
                    event_type=AuditEventType.FRACTION_PURCHASED,
                    entity_type="asset",
                    entity_id=asset.address,
                    identity=buyer,
                    metadata={
                        "currency_amount": currency_amount,
                        "units": expected_units,
                        "unit_price": purchase_quote.unit_price,
                        "currency_to": currency_to_owner,
                        "unit_to": unit_to_buyer,
                        "minted_supply": asset.minted_supply
                    }
                )

        log_action(
            self.logger, "info", f"Purchased {expected_units} units for {currency_amount}",
            identity=buyer, action="buy_fraction", resource=f"unit_account:{unit_to_buyer}",
            asset=asset.address,
            extra={"unit_price": purchase_quote.unit_price, "minted_supply": asset.minted_supply}
        )
        return asset

    def _check_payment_accounts(self, asset: Asset, currency_from: str, currency_to_owner: str) -> None:
        """
        Payment must move settlement currency between two distinct accounts,
        the receiving one held by the asset owner
        """
        if currency_from == currency_to_owner:
            raise LedgerError("Payment source and destination must be different accounts")

        self._settlement_account(currency_from)
        payee = self._settlement_account(currency_to_owner)
        if payee.holder != asset.owner:
            raise Unauthorized(
                f"Account {currency_to_owner} is not held by {asset.owner}, the owner of {asset.address}"
            )

    def _settlement_account(self, account_address: str) -> UnitAccount:
        try:
            account = self.unit_ledger.get_account(account_address)
        except NotFound:
            raise LedgerError(f"Unknown unit account {account_address}")
        if account.mint != self.settlement_mint:
            raise LedgerError(f"Account {account_address} does not hold settlement currency")
        return account
