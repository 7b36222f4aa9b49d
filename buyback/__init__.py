"""Buyback hook - mint-or-swap routing for project payments."""

from buyback.hook import BuybackHook

__version__ = "0.1.0"
__all__ = ["BuybackHook", "__version__"]
