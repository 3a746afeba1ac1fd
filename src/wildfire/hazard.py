"""The spreading hazard and its spread step."""

from __future__ import annotations

import copy
import logging
from typing import Iterable

from .constants import HAZARD_FLAG
from .dice import Chance, DiceRoller, Randomizer
from .geometry import Cell
from .notifications import Notifier
from .region import FlammableRegion, intersects
from .scene import Scene, Token, TokenData

logger = logging.getLogger(__name__)


class Wildfire:
    """
    A hazard that spreads across a scene one step at a time.

    Every token marked with this hazard's id is a burning cell. A spread
    step rolls once for each flammable neighbour of a burning cell and
    creates a copy of the template token in every cell that caught fire.
    """

    def __init__(
        self,
        scene: Scene,
        prototype: Token | TokenData,
        chance: Chance | None = None,
        roller: Randomizer | None = None,
        notifier: Notifier | None = None,
        hazard_id: int | None = None,
    ):
        """
        Initialize a wildfire.

        Args:
            scene: The scene the fire spreads across
            prototype: Token (or token data) copied for every new fire
            chance: Default chance used when :meth:`spread` gets none
            roller: Randomizer for dice formulas, defaults to the scene's RNG
            notifier: Where to report the outcome of each step
            hazard_id: Id marking this fire's tokens, defaults to the
                prototype token's id
        """
        if hazard_id is None:
            if not isinstance(prototype, Token):
                raise ValueError("hazard_id is required when the prototype is not a token")
            hazard_id = prototype.unique_id
        self.id = hazard_id
        self.scene = scene
        self.template = prototype
        self.chance = chance or Chance()
        self.roller = roller or DiceRoller(scene.random)
        self.notifier = notifier or Notifier()

        # New fires that have not yet been created on the scene
        self.pending_ignitions: list[TokenData] = []
        self._pending_cells: set[Cell] = set()
        # True while a spread step is in progress, further steps are dropped
        self.spreading = False

    @property
    def template(self) -> TokenData:
        """A fresh copy of the data every new fire is created from."""
        return copy.deepcopy(self._template)

    @template.setter
    def template(self, prototype: Token | TokenData) -> None:
        data = prototype.data if isinstance(prototype, Token) else prototype
        self._template = copy.deepcopy(data).with_flag(HAZARD_FLAG, self.id)

    @property
    def real_fires(self) -> list[Token]:
        """Fire tokens of this hazard already on the scene."""
        return self.scene.hazard_tokens(self.id)

    def burning_cells(self) -> set[Cell]:
        return {token.cell for token in self.real_fires}

    def pending_cells(self) -> set[Cell]:
        return set(self._pending_cells)

    def clear_pending(self) -> None:
        self.pending_ignitions = []
        self._pending_cells = set()

    def is_burning(self, cell: Cell, burning: set[Cell] | None = None) -> bool:
        """Check whether the cell holds a fire, created or pending."""
        if burning is None:
            burning = self.burning_cells()
        return cell in burning or cell in self._pending_cells

    def is_flammable(
        self,
        cell: Cell,
        burning: set[Cell] | None = None,
        regions: Iterable[FlammableRegion] | None = None,
    ) -> bool:
        """Check whether the cell can be set on fire."""
        if self.is_burning(cell, burning):
            return False
        if regions is None:
            regions = self.scene.flammable_regions()
        box = self.scene.geometry.cell_rect(cell)
        return any(intersects(region, box) for region in regions)

    def light(self, cell: Cell) -> TokenData:
        """Queue a new fire in ``cell``."""
        x, y = self.scene.geometry.pixel_of(cell)
        data = self._template.at(x, y)
        self.pending_ignitions.append(data)
        self._pending_cells.add(cell)
        return data

    def spread_to_cell(
        self,
        cell: Cell,
        chance: Chance,
        burning: set[Cell] | None = None,
        regions: Iterable[FlammableRegion] | None = None,
    ) -> bool:
        """Roll for the fire to spread into ``cell`` if it can burn. Returns True when lit."""
        if not self.is_flammable(cell, burning, regions):
            return False
        total = self.roller.roll(chance.formula)
        if not chance.succeeds(total):
            logger.debug(f"Hazard {self.id}: {cell} resisted ({total} < {chance.target})")
            return False
        logger.debug(f"Hazard {self.id}: {cell} caught fire ({total} >= {chance.target})")
        self.light(cell)
        return True

    def spread_to_neighbors(
        self,
        cell: Cell,
        chance: Chance,
        burning: set[Cell] | None = None,
        regions: Iterable[FlammableRegion] | None = None,
        evaluated: set[Cell] | None = None,
    ) -> int:
        """
        Spread from ``cell`` to each of its neighbours.

        Args:
            cell: A burning cell
            chance: The chance of spreading into each neighbour
            burning: Burning cells at the start of the step
            regions: Flammable regions at the start of the step
            evaluated: Cells already considered this step, updated in place
                so no cell is rolled for twice

        Returns:
            Number of neighbours that caught fire
        """
        if burning is None:
            burning = self.burning_cells()
        if regions is None:
            regions = self.scene.flammable_regions()
        if evaluated is None:
            evaluated = set()

        lit = 0
        for neighbor in self.scene.geometry.neighbors_of(cell):
            if neighbor in evaluated:
                continue
            evaluated.add(neighbor)
            if self.spread_to_cell(neighbor, chance, burning, regions):
                lit += 1
        return lit

    async def spread(self, chance: Chance | None = None) -> list[Token]:
        """
        Run one spread step.

        Does nothing and returns an empty list while another step of this
        hazard is in progress. Errors from rolling or from creating the new
        tokens are raised to the caller; either way the pending fires are
        dropped and the hazard is ready for the next step.

        Args:
            chance: Chance for this step, defaults to the hazard's own

        Returns:
            The tokens created for the new fires
        """
        if self.spreading:
            logger.debug(f"Hazard {self.id} is already spreading, step skipped")
            return []
        self.spreading = True
        try:
            chance = chance or self.chance
            burning = self.burning_cells()
            regions = self.scene.flammable_regions()
            evaluated: set[Cell] = set(burning)
            for cell in sorted(burning):
                self.spread_to_neighbors(cell, chance, burning, regions, evaluated)
            return await self.create_new_fires()
        finally:
            self.clear_pending()
            self.spreading = False

    async def create_new_fires(self) -> list[Token]:
        """Create tokens for every pending fire and clear the queue."""
        records = self.pending_ignitions
        if not records:
            self.notifier.info("WILDFIRE.SpreadNone")
            return []
        try:
            created = await self.scene.create_tokens(records)
        except Exception as exc:
            logger.error(f"Hazard {self.id}: creating {len(records)} fires failed: {exc}")
            raise
        finally:
            self.clear_pending()
        logger.info(f"Hazard {self.id}: spread into {len(created)} cells")
        self.notifier.info("WILDFIRE.SpreadComplete", count=len(created))
        return created

    def __repr__(self) -> str:
        return f"Wildfire(id={self.id}, chance={self.chance})"
