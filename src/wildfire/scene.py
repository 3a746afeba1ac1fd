"""The scene: a mesa model holding tokens and regions on a grid.

The scene is the source of truth for which cells are burning. Tokens are
placed on the backing mesa grid at the cell containing their top-left pixel,
regions are kept as an ordered list. Mutations are coroutines, the same shape
as a remote entity store.
"""

from __future__ import annotations

import asyncio
import copy
import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

import numpy as np
from mesa import Agent, Model

from .constants import (
    DEFAULT_CELL_SIZE,
    FIRE_TOKEN_IMG,
    FIRE_TOKEN_NAME,
    HAZARD_FLAG,
    MODULE_NAMESPACE,
)
from .geometry import Cell, GridGeometry
from .region import FlammableRegion, intersects

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenData:
    """Everything needed to create a token. ``flags`` is keyed by module namespace."""

    name: str = FIRE_TOKEN_NAME
    img: str = FIRE_TOKEN_IMG
    width: int = 1
    height: int = 1
    hidden: bool = False
    x: float = 0
    y: float = 0
    flags: dict[str, dict[str, Any]] = field(default_factory=dict)

    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.flags.get(MODULE_NAMESPACE, {}).get(key, default)

    def with_flag(self, key: str, value: Any) -> TokenData:
        """Return a copy with ``key`` set under the module namespace."""
        flags = copy.deepcopy(self.flags)
        flags.setdefault(MODULE_NAMESPACE, {})[key] = value
        return replace(self, flags=flags)

    def at(self, x: float, y: float) -> TokenData:
        """Return a copy placed at ``(x, y)``."""
        return replace(self, x=x, y=y, flags=copy.deepcopy(self.flags))


class Token(Agent):
    """A token placed on the scene."""

    def __init__(self, model: Scene, data: TokenData):
        super().__init__(model)
        self.data = data

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def x(self) -> float:
        return self.data.x

    @property
    def y(self) -> float:
        return self.data.y

    @property
    def cell(self) -> Cell:
        return self.model.geometry.cell_of(self.x, self.y)

    @property
    def hazard_id(self) -> int | None:
        return self.data.get_flag(HAZARD_FLAG)

    def is_hazard(self, hazard_id: int | None = None) -> bool:
        """True for tokens belonging to a hazard, or to the given hazard."""
        if self.hazard_id is None:
            return False
        return hazard_id is None or self.hazard_id == hazard_id

    def __repr__(self) -> str:
        return f"Token({self.unique_id}, {self.name!r}, x={self.x}, y={self.y})"


class Scene(Model):
    """A grid scene with tokens and regions."""

    def __init__(
        self,
        rows: int,
        cols: int,
        cell_size: int = DEFAULT_CELL_SIZE,
        diagonals: bool = True,
        seed: int | None = None,
    ):
        """
        Initialize the scene.

        Args:
            rows: Number of grid rows
            cols: Number of grid columns
            cell_size: Size of a grid space in pixels
            diagonals: Whether diagonal cells count as neighbours
            seed: Seed for the model's random number generator
        """
        super().__init__(seed=seed)
        self.geometry = GridGeometry(rows, cols, cell_size=cell_size, diagonals=diagonals)
        self.regions: list[FlammableRegion] = []
        self._region_ids = itertools.count(1)

        # What the user currently has selected
        self.controlled_tokens: list[Token] = []
        self.controlled_regions: list[FlammableRegion] = []

    @property
    def tokens(self) -> list[Token]:
        return [agent for agent in self.agents if isinstance(agent, Token)]

    def get_token(self, token_id: int) -> Token | None:
        for token in self.tokens:
            if token.unique_id == token_id:
                return token
        return None

    def hazard_tokens(self, hazard_id: int | None = None) -> list[Token]:
        """Tokens marked as part of a hazard, optionally a specific one."""
        return [token for token in self.tokens if token.is_hazard(hazard_id)]

    def flammable_regions(self) -> list[FlammableRegion]:
        return [region for region in self.regions if region.is_flammable()]

    def add_token(self, data: TokenData) -> Token:
        """Place a token immediately."""
        token = Token(self, data)
        cell = token.cell
        if self.geometry.contains(cell):
            self.geometry.grid.place_agent(token, (cell.col, cell.row))
        else:
            logger.warning(f"{token} lies outside the grid and was not placed on it")
        return token

    def add_region(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        flammable: bool = False,
    ) -> FlammableRegion:
        region = FlammableRegion(x, y, width, height, flammable=flammable, id=next(self._region_ids))
        self.regions.append(region)
        return region

    async def create_tokens(self, records: Iterable[TokenData]) -> list[Token]:
        """
        Create one token per record and return the created tokens.

        Records are created in order. When one fails the tokens created
        before it stay on the scene.
        """
        await asyncio.sleep(0)
        created = [self.add_token(record) for record in records]
        logger.debug(f"Created {len(created)} tokens")
        return created

    async def update_tokens(self, tokens: Iterable[Token], **flags: Any) -> list[Token]:
        """Set module flags on each token."""
        await asyncio.sleep(0)
        updated = []
        for token in tokens:
            data = token.data
            for key, value in flags.items():
                data = data.with_flag(key, value)
            token.data = data
            updated.append(token)
        return updated

    async def update_regions(
        self, regions: Iterable[FlammableRegion], flammable: bool = True
    ) -> list[FlammableRegion]:
        """Set the flammable marker on each region and return the new records."""
        await asyncio.sleep(0)
        wanted = {region.id for region in regions}
        updated = []
        for index, region in enumerate(self.regions):
            if region.id in wanted:
                self.regions[index] = region.with_flammable(flammable)
                updated.append(self.regions[index])
        return updated

    def burning_mask(self, hazard_id: int | None = None) -> np.ndarray:
        """Boolean ``(rows, cols)`` array of cells holding a hazard token."""
        mask = np.zeros((self.geometry.rows, self.geometry.cols), dtype=bool)
        for token in self.hazard_tokens(hazard_id):
            cell = token.cell
            if self.geometry.contains(cell):
                mask[cell.row, cell.col] = True
        return mask

    def flammable_mask(self) -> np.ndarray:
        """Boolean ``(rows, cols)`` array of cells overlapping a flammable region."""
        mask = np.zeros((self.geometry.rows, self.geometry.cols), dtype=bool)
        regions = self.flammable_regions()
        for cell in self.geometry.cells():
            rect = self.geometry.cell_rect(cell)
            mask[cell.row, cell.col] = any(intersects(region, rect) for region in regions)
        return mask
