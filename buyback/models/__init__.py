"""Data models for the buyback hook."""

from buyback.models.metadata import (
    build_payer_metadata,
    decode_payer_quote,
    encode_metadata,
    encode_payer_quote,
    get_metadata,
)
from buyback.models.payment import (
    MintDirect,
    PayerQuote,
    PaymentContext,
    PayParams,
    RoutingResult,
    SwapOutcome,
    SwapThenSettle,
)
from buyback.models.pool_config import ProjectPoolConfig, TwapParams
from buyback.models.types import Address, normalize_address, validate_uint256

__all__ = [
    "Address",
    "normalize_address",
    "validate_uint256",
    "PayerQuote",
    "PaymentContext",
    "MintDirect",
    "SwapThenSettle",
    "RoutingResult",
    "PayParams",
    "SwapOutcome",
    "ProjectPoolConfig",
    "TwapParams",
    "encode_metadata",
    "get_metadata",
    "encode_payer_quote",
    "decode_payer_quote",
    "build_payer_metadata",
]
