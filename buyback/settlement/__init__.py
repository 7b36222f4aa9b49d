"""Swap execution and settlement package."""

from .callback import FundRequest
from .executor import SwapExecutor

__all__ = ["FundRequest", "SwapExecutor"]
