"""
Transfer endpoints
"""

from fastapi import APIRouter, Depends

from .auth import get_current_identity, get_program
from .schemas import TransferRequest
from ..program import RwaTokenProgram


router = APIRouter()


@router.post("")
async def transfer_units(
    request: TransferRequest,
    identity: str = Depends(get_current_identity),
    program: RwaTokenProgram = Depends(get_program)
):
    """Transfer units between accounts; the caller must hold the source account"""
    program.transfer(request.from_account, request.to_account, identity, request.amount)
    return {
        "from_account": request.from_account,
        "to_account": request.to_account,
        "amount": request.amount,
        "message": "Transfer completed successfully"
    }
