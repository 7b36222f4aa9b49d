"""Configuration for the buyback hook."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import structlog

from buyback.constants import (
    BUYBACK_METADATA_TAG,
    NATIVE_TOKEN,
    POOL_INIT_CODE_HASH,
    UNISWAP_V3_FACTORY,
    WETH,
)
from buyback.models.types import normalize_address, same_address


@dataclass(frozen=True)
class HookConfig:
    """Deployment-specific settings for the buyback hook.

    Attributes:
        factory: Uniswap V3 factory that pool identifiers are derived from
        pool_init_code_hash: Init code hash of the factory's pools (hex)
        wrapped_native_token: Wrapped form of the native currency (e.g. WETH)
        native_token: Sentinel terminals use for the native currency
        metadata_tag: 4-byte tag of the buyback block in payment metadata
    """

    factory: str = UNISWAP_V3_FACTORY
    pool_init_code_hash: str = POOL_INIT_CODE_HASH
    wrapped_native_token: str = WETH
    native_token: str = NATIVE_TOKEN
    metadata_tag: bytes = BUYBACK_METADATA_TAG

    def __post_init__(self) -> None:
        if len(self.metadata_tag) != 4:
            raise ValueError(f"metadata_tag must be 4 bytes, got {len(self.metadata_tag)}")
        for name in ("factory", "wrapped_native_token", "native_token"):
            object.__setattr__(self, name, normalize_address(getattr(self, name), validate=True))

    def is_native(self, token: str) -> bool:
        return same_address(token, self.native_token)

    def pricing_token(self, token: str) -> str:
        """Token used for pool lookup and pricing (native -> wrapped)."""
        if self.is_native(token):
            return self.wrapped_native_token
        return normalize_address(token)

    @classmethod
    def from_env(cls) -> HookConfig:
        """Build a config from BUYBACK_* environment variables, defaulting to mainnet."""
        tag = os.environ.get("BUYBACK_METADATA_TAG")
        return cls(
            factory=os.environ.get("BUYBACK_UNISWAP_FACTORY", UNISWAP_V3_FACTORY),
            pool_init_code_hash=os.environ.get("BUYBACK_POOL_INIT_CODE_HASH", POOL_INIT_CODE_HASH),
            wrapped_native_token=os.environ.get("BUYBACK_WRAPPED_NATIVE_TOKEN", WETH),
            native_token=os.environ.get("BUYBACK_NATIVE_TOKEN", NATIVE_TOKEN),
            metadata_tag=bytes.fromhex(tag.removeprefix("0x")) if tag else BUYBACK_METADATA_TAG,
        )


# Default configuration instance
DEFAULT_HOOK_CONFIG = HookConfig()


def configure_logging(level: int = logging.INFO, *, json: bool = False) -> None:
    """Configure structlog for services embedding the hook."""
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


__all__ = ["HookConfig", "DEFAULT_HOOK_CONFIG", "configure_logging"]
