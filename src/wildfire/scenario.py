"""Building a scene, its hazards and turn order from a JSON scenario.

Example scenario::

    {
        "grid": {"rows": 10, "cols": 10, "cell_size": 100, "diagonals": true},
        "seed": 42,
        "regions": [{"x": 0, "y": 0, "width": 600, "height": 400, "flammable": true}],
        "tokens": [
            {"name": "Fire", "x": 200, "y": 200,
             "hazard": {"formula": "1d6", "target": 5}}
        ]
    }

A token with a ``hazard`` entry becomes the origin of a wildfire that takes a
turn in the turn order.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import DEFAULT_CELL_SIZE, DEFAULT_CHANCE_FORMULA, DEFAULT_CHANCE_TARGET
from .controls import create_hazard
from .hazard import Wildfire
from .notifications import Notifier
from .scene import Scene, TokenData
from .turns import TurnTracker, TurnTrigger

logger = logging.getLogger(__name__)

_TOKEN_FIELDS = ("name", "img", "width", "height", "hidden")


@dataclass
class Scenario:
    scene: Scene
    tracker: TurnTracker
    hazards: list[Wildfire]
    notifier: Notifier


def load_config(path: str | Path) -> dict[str, Any]:
    with open(path, "r") as f:
        return json.load(f)


def _require(config: dict[str, Any], key: str, where: str) -> Any:
    if key not in config:
        raise ValueError(f"Scenario {where} is missing required key '{key}'")
    return config[key]


async def build_scenario(config: dict[str, Any], notifier: Notifier | None = None) -> Scenario:
    """
    Create the scene, regions, tokens and hazards described by ``config``.

    Raises:
        ValueError: A required key is missing
    """
    notifier = notifier or Notifier()
    grid = _require(config, "grid", "config")
    scene = Scene(
        rows=int(_require(grid, "rows", "grid")),
        cols=int(_require(grid, "cols", "grid")),
        cell_size=int(grid.get("cell_size", DEFAULT_CELL_SIZE)),
        diagonals=bool(grid.get("diagonals", True)),
        seed=config.get("seed"),
    )

    for region in config.get("regions", []):
        scene.add_region(
            float(_require(region, "x", "region")),
            float(_require(region, "y", "region")),
            float(_require(region, "width", "region")),
            float(_require(region, "height", "region")),
            flammable=bool(region.get("flammable", False)),
        )

    tracker = TurnTracker()
    TurnTrigger.bind(tracker)
    hazards = []
    for entry in config.get("tokens", []):
        data = TokenData(
            x=float(_require(entry, "x", "token")),
            y=float(_require(entry, "y", "token")),
            **{key: entry[key] for key in _TOKEN_FIELDS if key in entry},
        )
        token = scene.add_token(data)
        hazard_config = entry.get("hazard")
        if hazard_config is None:
            continue
        hazard = await create_hazard(
            scene,
            token,
            formula=str(hazard_config.get("formula", DEFAULT_CHANCE_FORMULA)),
            target=int(hazard_config.get("target", DEFAULT_CHANCE_TARGET)),
            notifier=notifier,
        )
        tracker.add_hazard(hazard)
        hazards.append(hazard)

    logger.info(
        f"Scenario ready: {scene.geometry.rows}x{scene.geometry.cols} grid, "
        f"{len(scene.regions)} regions, {len(hazards)} hazards"
    )
    return Scenario(scene=scene, tracker=tracker, hazards=hazards, notifier=notifier)


async def load_scenario(path: str | Path, notifier: Notifier | None = None) -> Scenario:
    return await build_scenario(load_config(path), notifier=notifier)
