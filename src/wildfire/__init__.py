"""
Wildfire: turn-based hazard spread on a grid scene.

A hazard such as a fire spreads from its burning cells into neighbouring
cells of flammable regions, with a dice roll deciding each spread.
"""

from .dice import Chance, DiceRoller, Roll
from .errors import DiceFormulaError, PreconditionError, WildfireError
from .geometry import Cell, GridGeometry
from .hazard import Wildfire
from .region import FlammableRegion, Rect, intersects
from .registry import HazardRegistry
from .scene import Scene, Token, TokenData
from .turns import Combatant, TurnTracker, TurnTrigger

__version__ = "0.1.0"

__all__ = [
    "Cell",
    "Chance",
    "Combatant",
    "DiceFormulaError",
    "DiceRoller",
    "FlammableRegion",
    "GridGeometry",
    "HazardRegistry",
    "PreconditionError",
    "Rect",
    "Roll",
    "Scene",
    "Token",
    "TokenData",
    "TurnTracker",
    "TurnTrigger",
    "Wildfire",
    "WildfireError",
    "intersects",
]
