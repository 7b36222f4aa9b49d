"""Pytest configuration and fixtures."""

import pytest

from tests.helpers.world import World, build_world


@pytest.fixture
def world() -> World:
    """Fresh hook with PROJECT_TOKEN issued and TERMINAL registered, no pool yet."""
    return build_world()


@pytest.fixture
def world_with_pool(world: World) -> World:
    """`world` with a 1:1 PROJECT_TOKEN/WETH pool configured (TWAP quote = 90% of input)."""
    world.configure_pool()
    return world
