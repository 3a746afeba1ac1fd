"""Actions behind the scene controls: starting a fire and marking tiles flammable."""

from __future__ import annotations

import logging
from typing import Sequence

from .constants import DEFAULT_CHANCE_FORMULA, DEFAULT_CHANCE_TARGET, HAZARD_FLAG
from .dice import Chance
from .errors import PreconditionError
from .hazard import Wildfire
from .notifications import Notifier
from .region import FlammableRegion
from .registry import HazardRegistry
from .scene import Scene, Token

logger = logging.getLogger(__name__)


async def create_hazard(
    scene: Scene,
    source: Token | None,
    formula: str = DEFAULT_CHANCE_FORMULA,
    target: int = DEFAULT_CHANCE_TARGET,
    registry: HazardRegistry | None = None,
    notifier: Notifier | None = None,
) -> Wildfire:
    """
    Turn ``source`` into the origin of a new wildfire.

    The source token is marked as part of the hazard, so it is the first
    burning cell, and its data becomes the template for every new fire.

    Raises:
        PreconditionError: No source token was given
    """
    if source is None:
        raise PreconditionError("No token selected as the source of the fire", key="WILDFIRE.NoSource")

    await scene.update_tokens([source], **{HAZARD_FLAG: source.unique_id})
    hazard = Wildfire(scene, source, chance=Chance(formula, target), notifier=notifier)
    if registry is not None:
        registry.register(hazard)
    logger.info(f"Created hazard {hazard.id} from {source}")
    hazard.notifier.info("WILDFIRE.HazardCreated", name=source.name, formula=formula, target=target)
    return hazard


async def mark_regions_flammable(
    scene: Scene, regions: Sequence[FlammableRegion]
) -> list[FlammableRegion]:
    """
    Mark ``regions`` as flammable.

    Raises:
        PreconditionError: No regions were given
    """
    if not regions:
        raise PreconditionError("No tiles selected to mark as flammable", key="WILDFIRE.NoRegions")
    updated = await scene.update_regions(regions, flammable=True)
    logger.info(f"Marked {len(updated)} regions as flammable")
    return updated


async def create_hazard_from_selection(
    scene: Scene,
    registry: HazardRegistry,
    notifier: Notifier,
    formula: str = DEFAULT_CHANCE_FORMULA,
    target: int = DEFAULT_CHANCE_TARGET,
) -> Wildfire | None:
    """Start a fire from the first controlled token, warning the user when there is none."""
    source = scene.controlled_tokens[0] if scene.controlled_tokens else None
    try:
        return await create_hazard(scene, source, formula, target, registry=registry, notifier=notifier)
    except PreconditionError as exc:
        logger.warning(str(exc))
        notifier.warn(exc.key)
        return None


async def mark_selected_regions_flammable(
    scene: Scene, notifier: Notifier
) -> list[FlammableRegion]:
    """Mark the controlled regions flammable, warning the user when none are selected."""
    try:
        updated = await mark_regions_flammable(scene, scene.controlled_regions)
    except PreconditionError as exc:
        logger.warning(str(exc))
        notifier.warn(exc.key)
        return []
    notifier.info("WILDFIRE.RegionsMarked", count=len(updated))
    return updated
