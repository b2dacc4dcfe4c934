"""
Holder endpoints: accounts, settlement funding and wallet balances
"""

from fastapi import APIRouter, Depends, HTTPException, status

from .auth import get_current_identity, get_program, get_settings
from .schemas import (
    OpenAccountRequest, FundRequest, account_to_response, holdings_to_response
)
from ..config import RwaConfig
from ..program import RwaTokenProgram


router = APIRouter()


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
async def open_account(
    request: OpenAccountRequest,
    identity: str = Depends(get_current_identity),
    program: RwaTokenProgram = Depends(get_program)
):
    """Open the caller's unit account for an asset, or settlement account"""
    if request.asset_address:
        account = program.open_unit_account(request.asset_address, identity)
    else:
        account = program.open_settlement_account(identity)
    return account_to_response(account)


@router.post("/fund")
async def fund_settlement(
    request: FundRequest,
    identity: str = Depends(get_current_identity),
    settings: RwaConfig = Depends(get_settings),
    program: RwaTokenProgram = Depends(get_program)
):
    """Issue settlement currency (treasury only)"""
    if identity != settings.treasury_identity:
        raise HTTPException(status_code=403, detail="Only the treasury may issue settlement currency")
    account = program.fund_settlement(request.holder, request.amount)
    return account_to_response(account)


@router.get("/{identity}")
async def get_holdings(identity: str, program: RwaTokenProgram = Depends(get_program)):
    """Settlement balance and unit positions of an identity"""
    return holdings_to_response(program.get_holdings(identity))
