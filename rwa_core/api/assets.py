"""
Asset endpoints: registration, queries, minting, purchases and redemptions
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status

from .auth import get_current_identity, get_program
from .schemas import (
    CreateAssetRequest, MintRequest, BuyFractionRequest, RedeemRequest,
    asset_to_response, summary_to_response, asset_with_metadata_to_response
)
from ..assets import AssetType
from ..program import RwaTokenProgram


router = APIRouter()


def _parse_asset_type(value: str) -> AssetType:
    try:
        return AssetType(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown asset type: {value}")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_asset(
    request: CreateAssetRequest,
    identity: str = Depends(get_current_identity),
    program: RwaTokenProgram = Depends(get_program)
):
    """Register a new asset owned by the caller"""
    asset = program.create_asset(
        owner=identity,
        name=request.name,
        description=request.description,
        valuation=request.valuation,
        asset_type=_parse_asset_type(request.asset_type),
        metadata_uri=request.metadata_uri,
        total_supply=request.total_supply
    )

    return {
        "address": asset.address,
        "mint": asset.mint,
        "message": "Asset created successfully"
    }


@router.get("")
async def list_assets(
    owner: Optional[str] = None,
    asset_type: Optional[str] = None,
    active_only: bool = False,
    program: RwaTokenProgram = Depends(get_program)
):
    """List registered assets"""
    assets = program.list_assets(
        owner=owner,
        asset_type=_parse_asset_type(asset_type) if asset_type else None,
        active_only=active_only
    )
    return {"assets": [asset_to_response(asset) for asset in assets]}


@router.get("/{address}")
async def get_asset(address: str, program: RwaTokenProgram = Depends(get_program)):
    """Get asset details"""
    return asset_to_response(program.get_asset(address))


@router.get("/{address}/summary")
async def get_asset_summary(address: str, program: RwaTokenProgram = Depends(get_program)):
    """Get asset details with unit price, market cap and available supply"""
    return summary_to_response(program.get_asset_summary(address))


@router.get("/{address}/details")
async def get_asset_details(address: str, program: RwaTokenProgram = Depends(get_program)):
    """Asset summary with its metadata document resolved"""
    return asset_with_metadata_to_response(program.get_asset_with_metadata(address))


@router.get("/{address}/quote")
async def get_quote(address: str, units: int, program: RwaTokenProgram = Depends(get_program)):
    """Quote the nominal cost and minimum payment for a number of units"""
    purchase_quote = program.quote(address, units)
    return {
        "units": purchase_quote.units,
        "unit_price": purchase_quote.unit_price,
        "nominal_cost": purchase_quote.nominal_cost,
        "minimum_payment": purchase_quote.minimum_payment
    }


@router.post("/{address}/mint")
async def mint_units(
    address: str,
    request: MintRequest,
    identity: str = Depends(get_current_identity),
    program: RwaTokenProgram = Depends(get_program)
):
    """Mint units of an asset (owner only)"""
    asset = program.mint(address, identity, request.amount, request.destination_account)
    return {
        "minted_supply": asset.minted_supply,
        "message": "Units minted successfully"
    }


@router.post("/{address}/buy")
async def buy_fraction(
    address: str,
    request: BuyFractionRequest,
    identity: str = Depends(get_current_identity),
    program: RwaTokenProgram = Depends(get_program)
):
    """Buy newly minted units with settlement currency"""
    asset = program.get_asset(address)

    currency_from = request.currency_from or program.open_settlement_account(identity).address
    currency_to_owner = request.currency_to_owner or program.open_settlement_account(asset.owner).address
    unit_to_buyer = request.unit_to_buyer or program.open_unit_account(address, identity).address

    asset = program.buy_fraction(
        asset_address=address,
        buyer=identity,
        currency_from=currency_from,
        currency_to_owner=currency_to_owner,
        unit_to_buyer=unit_to_buyer,
        currency_amount=request.currency_amount,
        expected_units=request.expected_units
    )
    return {
        "minted_supply": asset.minted_supply,
        "unit_account": unit_to_buyer,
        "message": "Purchase completed successfully"
    }


@router.post("/{address}/redeem")
async def redeem_units(
    address: str,
    request: RedeemRequest,
    identity: str = Depends(get_current_identity),
    program: RwaTokenProgram = Depends(get_program)
):
    """Redeem (burn) the caller's units"""
    asset = program.redeem(address, identity, request.amount, request.holder_account)
    return {
        "minted_supply": asset.minted_supply,
        "message": "Units redeemed successfully"
    }
