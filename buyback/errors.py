"""Buyback hook error classes.

Configuration, authorization, payment-input and slippage errors abort the
whole operation. PoolError is raised by pool collaborators and is handled
locally: the quote engine degrades to a zero quote and the swap executor
falls back to minting.
"""


class BuybackError(Exception):
    """Base error for buyback hook operations."""

    pass


# --- Configuration ---


class ConfigurationError(BuybackError):
    """Pool or TWAP configuration was rejected."""

    pass


class InvalidTwapWindow(ConfigurationError):
    """TWAP window is outside [MIN_TWAP_WINDOW, MAX_TWAP_WINDOW]."""

    pass


class InvalidTwapSlippageTolerance(ConfigurationError):
    """TWAP slippage tolerance is outside [MIN_TWAP_SLIPPAGE_TOLERANCE, MAX_TWAP_SLIPPAGE_TOLERANCE]."""

    pass


class NoProjectToken(ConfigurationError):
    """The project has not issued a token yet."""

    pass


class PoolAlreadySet(ConfigurationError):
    """A pool is already configured for this project and settlement token."""

    pass


class PoolNotSet(ConfigurationError):
    """TWAP parameters were changed before any pool was configured."""

    pass


# --- Authorization ---


class AuthorizationError(BuybackError):
    """Caller is not allowed to perform the operation."""

    pass


class Unauthorized(AuthorizationError):
    """Caller is not the expected terminal, pool, or permission holder."""

    pass


# --- Payment input ---


class PaymentInputError(BuybackError):
    """Payer-supplied data is inconsistent with the payment."""

    pass


class InsufficientPayAmount(PaymentInputError):
    """Payer asked to swap more than was actually paid."""

    pass


class MalformedMetadata(PaymentInputError):
    """Payment metadata could not be decoded."""

    pass


# --- Slippage ---


class SlippageError(BuybackError):
    """Swap output fell short of a payer commitment."""

    pass


class SpecifiedSlippageExceeded(SlippageError):
    """Swap returned less than the payer's explicit minimum."""

    def __init__(self, amount_received: int, minimum_swap_amount_out: int) -> None:
        super().__init__(
            f"Swap returned {amount_received}, below payer minimum {minimum_swap_amount_out}"
        )
        self.amount_received = amount_received
        self.minimum_swap_amount_out = minimum_swap_amount_out


# --- Pool collaborator ---


class PoolError(BuybackError):
    """A pool call reverted (not initialized, locked, no liquidity, ...)."""

    pass


__all__ = [
    "BuybackError",
    "ConfigurationError",
    "InvalidTwapWindow",
    "InvalidTwapSlippageTolerance",
    "NoProjectToken",
    "PoolAlreadySet",
    "PoolNotSet",
    "AuthorizationError",
    "Unauthorized",
    "PaymentInputError",
    "InsufficientPayAmount",
    "MalformedMetadata",
    "SlippageError",
    "SpecifiedSlippageExceeded",
    "PoolError",
]
