"""
Pydantic schemas for API requests and responses
"""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from ..assets import Asset
from ..program import AssetSummary, AssetWithMetadata, Holdings
from ..unit_ledger import UnitAccount


# Asset schemas
class CreateAssetRequest(BaseModel):
    name: str
    description: str
    valuation: int = Field(..., description="Valuation in smallest settlement-currency units")
    asset_type: str = Field(..., description="Land, Art, Carbon, RealEstate, Commodity or Other")
    metadata_uri: str
    total_supply: int


class MintRequest(BaseModel):
    amount: int
    destination_account: Optional[str] = None


class BuyFractionRequest(BaseModel):
    currency_amount: int
    expected_units: int
    currency_from: Optional[str] = Field(None, description="Defaults to the buyer's settlement account")
    currency_to_owner: Optional[str] = Field(None, description="Defaults to the owner's settlement account")
    unit_to_buyer: Optional[str] = Field(None, description="Defaults to the buyer's unit account")


class RedeemRequest(BaseModel):
    amount: int
    holder_account: Optional[str] = None


# Holder schemas
class TransferRequest(BaseModel):
    from_account: str
    to_account: str
    amount: int


class OpenAccountRequest(BaseModel):
    asset_address: Optional[str] = Field(None, description="Omit to open a settlement-currency account")


class FundRequest(BaseModel):
    holder: str
    amount: int


# Metadata schemas
class MetadataAttributeModel(BaseModel):
    trait_type: str
    value: Union[str, int, float]


class BuildMetadataRequest(BaseModel):
    name: str
    description: str
    image: str
    attributes: List[MetadataAttributeModel] = Field(default_factory=list)
    external_url: Optional[str] = None


def asset_to_response(asset: Asset) -> Dict[str, Any]:
    return {
        "address": asset.address,
        "owner": asset.owner,
        "name": asset.name,
        "description": asset.description,
        "valuation": asset.valuation,
        "asset_type": asset.asset_type.value,
        "metadata_uri": asset.metadata_uri,
        "total_supply": asset.total_supply,
        "minted_supply": asset.minted_supply,
        "mint": asset.mint,
        "is_active": asset.is_active,
        "created_at": asset.created_at.isoformat(),
        "last_mint_at": asset.last_mint_at.isoformat() if asset.last_mint_at else None,
        "last_redeem_at": asset.last_redeem_at.isoformat() if asset.last_redeem_at else None
    }


def summary_to_response(summary: AssetSummary) -> Dict[str, Any]:
    result = asset_to_response(summary.asset)
    result.update({
        "unit_price": summary.unit_price,
        "market_cap": summary.market_cap,
        "available_supply": summary.available_supply,
        "ledger_supply": summary.ledger_supply
    })
    return result


def asset_with_metadata_to_response(view: AssetWithMetadata) -> Dict[str, Any]:
    result = summary_to_response(view)
    result["metadata"] = view.metadata.model_dump() if view.metadata else None
    return result


def account_to_response(account: UnitAccount) -> Dict[str, Any]:
    return {
        "address": account.address,
        "mint": account.mint,
        "holder": account.holder,
        "balance": account.balance
    }


def holdings_to_response(holdings: Holdings) -> Dict[str, Any]:
    return {
        "identity": holdings.identity,
        "settlement_account": holdings.settlement_account,
        "settlement_balance": holdings.settlement_balance,
        "positions": [
            {
                "asset_address": position.asset_address,
                "asset_name": position.asset_name,
                "account": position.account,
                "balance": position.balance
            }
            for position in holdings.positions
        ]
    }
