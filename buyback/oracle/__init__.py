"""TWAP oracle package."""

from .quote import QuoteEngine

__all__ = ["QuoteEngine"]
