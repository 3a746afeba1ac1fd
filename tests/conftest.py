import asyncio
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """Ensure `src/` is on sys.path so tests can import `wildfire.*`.

    This repo uses the common `src/` layout but is not necessarily installed as a package
    in the active environment.
    """

    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


class FixedRoller:
    """Randomizer that always rolls the same total and records every formula."""

    def __init__(self, total: int):
        self.total = total
        self.calls: list[str] = []

    def roll(self, formula: str) -> int:
        self.calls.append(formula)
        return self.total


@pytest.fixture
def fixed_roller():
    """Factory for rollers returning a fixed total."""
    return FixedRoller


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


@pytest.fixture
def scene():
    """A 10x10 scene with 50 px cells and a seeded random generator."""
    from wildfire.scene import Scene

    return Scene(rows=10, cols=10, cell_size=50, seed=42)


@pytest.fixture
def ignite():
    """Place a token of the given hazard in a cell."""
    from wildfire.constants import HAZARD_FLAG
    from wildfire.scene import TokenData

    def _ignite(scene, hazard_id, row, col):
        x, y = scene.geometry.pixel_of((row, col))
        return scene.add_token(TokenData(x=x, y=y).with_flag(HAZARD_FLAG, hazard_id))

    return _ignite
