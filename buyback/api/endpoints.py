"""API endpoints for buyback configuration."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from buyback.api.auth import get_caller
from buyback.api.schemas import (
    PoolConfigResponse,
    QuoteResponse,
    SetPoolRequest,
    SetPoolResponse,
    SetTwapSlippageToleranceRequest,
    SetTwapWindowRequest,
    TwapParamsResponse,
)
from buyback.hook import BuybackHook
from buyback.models.types import validate_uint256

logger = structlog.get_logger()

router = APIRouter(prefix="/projects")


def get_hook(request: Request) -> BuybackHook:
    """Dependency provider for the hook instance.

    The embedding service sets `app.state.hook`. Override this in tests:
        app.dependency_overrides[get_hook] = lambda: hook
    """
    hook = getattr(request.app.state, "hook", None)
    if hook is None:
        raise HTTPException(status_code=503, detail="Buyback hook not configured")
    return hook


@router.post("/{project_id}/pools", response_model=SetPoolResponse)
def set_pool(
    project_id: int,
    body: SetPoolRequest,
    caller: str = Depends(get_caller),
    hook: BuybackHook = Depends(get_hook),
) -> SetPoolResponse:
    """Configure the pool the hook buys from for a settlement token."""
    pool_id = hook.registry.set_pool(
        caller,
        project_id,
        body.settlement_token,
        body.fee,
        body.twap_window,
        body.twap_slippage_tolerance,
    )
    logger.info("api_pool_set", project_id=project_id, pool=pool_id, caller=caller)
    return SetPoolResponse(pool_id=pool_id)


@router.put("/{project_id}/twap-window", response_model=TwapParamsResponse)
def set_twap_window(
    project_id: int,
    body: SetTwapWindowRequest,
    caller: str = Depends(get_caller),
    hook: BuybackHook = Depends(get_hook),
) -> TwapParamsResponse:
    """Change the project's TWAP window."""
    hook.registry.set_twap_window(caller, project_id, body.twap_window)
    return _twap_params(hook, project_id)


@router.put("/{project_id}/twap-slippage-tolerance", response_model=TwapParamsResponse)
def set_twap_slippage_tolerance(
    project_id: int,
    body: SetTwapSlippageToleranceRequest,
    caller: str = Depends(get_caller),
    hook: BuybackHook = Depends(get_hook),
) -> TwapParamsResponse:
    """Change the project's TWAP slippage tolerance."""
    hook.registry.set_twap_slippage_tolerance(caller, project_id, body.twap_slippage_tolerance)
    return _twap_params(hook, project_id)


@router.get("/{project_id}/twap", response_model=TwapParamsResponse)
def get_twap_params(project_id: int, hook: BuybackHook = Depends(get_hook)) -> TwapParamsResponse:
    """Current TWAP window and slippage tolerance for a project."""
    return _twap_params(hook, project_id)


@router.get("/{project_id}/pools/{settlement_token}", response_model=PoolConfigResponse)
def get_pool_config(
    project_id: int,
    settlement_token: str,
    hook: BuybackHook = Depends(get_hook),
) -> PoolConfigResponse:
    """Pool configuration for a project and settlement token."""
    config = hook.registry.get_config(project_id, settlement_token)
    if config is None:
        raise HTTPException(status_code=404, detail="No pool configured")
    return PoolConfigResponse(
        pool_id=config.pool_id,
        project_token=config.project_token,
        settlement_token=config.settlement_token,
        twap_window=config.twap_window,
        twap_slippage_tolerance=config.twap_slippage_tolerance,
    )


@router.get("/{project_id}/quote", response_model=QuoteResponse)
def get_quote(
    project_id: int,
    settlement_token: str = Query(alias="settlementToken"),
    amount_in: str = Query(alias="amountIn", description="Amount as decimal string"),
    hook: BuybackHook = Depends(get_hook),
) -> QuoteResponse:
    """TWAP-derived minimum swap output for a prospective payment."""
    try:
        amount = validate_uint256(amount_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    amount_out = hook.quote(project_id, amount, settlement_token)
    return QuoteResponse(minimum_swap_amount_out=str(amount_out))


def _twap_params(hook: BuybackHook, project_id: int) -> TwapParamsResponse:
    params = hook.registry.twap_params_of(project_id)
    if params is None:
        raise HTTPException(status_code=404, detail="No TWAP parameters configured")
    return TwapParamsResponse(
        twap_window=params.window,
        twap_slippage_tolerance=params.slippage_tolerance,
    )
