"""Pydantic request/response models for the configuration API."""

from pydantic import BaseModel, Field

from buyback.models.types import Address


class SetPoolRequest(BaseModel):
    """Configure the pool for a project and settlement token."""

    settlement_token: Address = Field(alias="settlementToken", description="Token payments arrive in")
    fee: int = Field(ge=0, lt=2**24, description="Pool fee tier (e.g., 3000 for 0.3%)")
    twap_window: int = Field(alias="twapWindow", description="TWAP window in seconds")
    twap_slippage_tolerance: int = Field(
        alias="twapSlippageTolerance", description="Basis points removed from TWAP quotes"
    )

    model_config = {"populate_by_name": True}


class SetPoolResponse(BaseModel):
    pool_id: Address = Field(alias="poolId")

    model_config = {"populate_by_name": True}


class SetTwapWindowRequest(BaseModel):
    twap_window: int = Field(alias="twapWindow")

    model_config = {"populate_by_name": True}


class SetTwapSlippageToleranceRequest(BaseModel):
    twap_slippage_tolerance: int = Field(alias="twapSlippageTolerance")

    model_config = {"populate_by_name": True}


class TwapParamsResponse(BaseModel):
    twap_window: int = Field(alias="twapWindow")
    twap_slippage_tolerance: int = Field(alias="twapSlippageTolerance")

    model_config = {"populate_by_name": True}


class PoolConfigResponse(BaseModel):
    """Full configuration of a (project, settlement token) pair."""

    pool_id: Address = Field(alias="poolId")
    project_token: Address = Field(alias="projectToken")
    settlement_token: Address = Field(alias="settlementToken")
    twap_window: int = Field(alias="twapWindow")
    twap_slippage_tolerance: int = Field(alias="twapSlippageTolerance")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """TWAP-derived minimum; "0" means no oracle is available."""

    minimum_swap_amount_out: str = Field(
        alias="minimumSwapAmountOut", description="Amount as decimal string"
    )

    model_config = {"populate_by_name": True}
