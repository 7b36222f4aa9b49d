"""Payment routing package."""

from .decision import RoutingDecision

__all__ = ["RoutingDecision"]
