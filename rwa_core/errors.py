"""
Error Kinds Module

Typed failures surfaced verbatim to callers. Every error subclasses
ValueError so callers that only care about "bad request" can catch that.
"""

from typing import Optional


class RwaError(ValueError):
    """Base class for all local validation and state failures"""

    code = "rwa_error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message())

    def default_message(self) -> str:
        return self.code.replace("_", " ").capitalize()


class ValidationError(RwaError):
    """An asset field failed creation-time validation"""

    code = "validation_error"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid value for field '{field}'")


class InvalidAmount(RwaError):
    code = "invalid_amount"


class SupplyExceeded(RwaError):
    code = "supply_exceeded"


class Unauthorized(RwaError):
    code = "unauthorized"


class AssetInactive(RwaError):
    code = "asset_inactive"


class SlippageExceeded(RwaError):
    code = "slippage_exceeded"


class InsufficientTokens(RwaError):
    code = "insufficient_tokens"


class NotFound(RwaError):
    """Raised by the account store when an address holds no record"""

    code = "not_found"


class AlreadyExists(RwaError):
    """Raised by the account store when an address is already allocated"""

    code = "already_exists"


class LedgerError(RwaError):
    """The unit ledger refused a mint, burn or transfer"""

    code = "ledger_error"
