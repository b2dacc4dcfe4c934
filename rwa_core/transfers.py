"""
Transfer Operation Module

Moves ownership units between holder accounts. The only local rule is a
non-zero amount; holder authority is enforced by the unit ledger.
"""

from .audit import AuditTrail, AuditEventType
from .logging_config import get_logger, log_action, rejections_logged
from .unit_ledger import UnitLedger
from .units import require_positive_amount


class TransferOperation:
    """Non-zero-amount check in front of the ledger transfer primitive"""

    def __init__(self, unit_ledger: UnitLedger, audit_trail: AuditTrail):
        self.unit_ledger = unit_ledger
        self.audit_trail = audit_trail
        self.logger = get_logger("rwa.transfers")

    def transfer(self, from_account: str, to_account: str, authorizing_identity: str, amount: int) -> None:
        """
        Transfer units from one account to another

        Raises:
            InvalidAmount: If amount is zero
            LedgerError: If the ledger refuses the transfer
        """
        with rejections_logged(
            self.logger, "transfer", identity=authorizing_identity,
            resource=f"unit_account:{from_account}", extra={"amount": amount}
        ):
            require_positive_amount(amount)
            with self.unit_ledger.store.atomic():
                self.unit_ledger.transfer(authorizing_identity, from_account, to_account, amount)

                self.audit_trail.log_event(
                    event_type=AuditEventType.UNITS_TRANSFERRED,
                    entity_type="unit_account",
                    entity_id=from_account,
                    identity=authorizing_identity,
                    metadata={"to_account": to_account, "amount": amount}
                )

        log_action(
            self.logger, "info", f"Transferred {amount} units",
            identity=authorizing_identity, action="transfer",
            resource=f"unit_account:{from_account}",
            extra={"to_account": to_account, "amount": amount}
        )
