#!/usr/bin/env python3
"""Main script to run the wildfire simulation."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from wildfire.scenario import Scenario, load_scenario
from wildfire.scene import Scene

DEFAULT_SCENARIO = Path(__file__).parent / "examples" / "meadow.json"


def print_grid(scene: Scene) -> None:
    """
    Print a simple representation of the scene to console.

    Args:
        scene: The Scene to visualize
    """
    burning = scene.burning_mask()
    flammable = scene.flammable_mask()
    grid_str = ""
    for row in range(scene.geometry.rows):
        for col in range(scene.geometry.cols):
            if burning[row, col]:
                grid_str += "🔥"
            elif flammable[row, col]:
                grid_str += "🌲"
            else:
                grid_str += "⬛"
        grid_str += "\n"
    print(grid_str)


async def run(scenario: Scenario, turns: int) -> None:
    scene = scenario.scene
    tracker = scenario.tracker

    print("--- INITIAL STATE ---")
    print_grid(scene)

    for i in range(turns):
        combatant = await tracker.next_turn()
        if combatant is None:
            print("Nobody is taking turns.")
            break
        print(f"\n--- ROUND {tracker.round}, TURN OF {combatant.name.upper()} ---")
        print_grid(scene)

        if not (scene.flammable_mask() & ~scene.burning_mask()).any():
            print("\nEverything that can burn is burning.")
            break


async def main() -> None:
    """Run the wildfire simulation."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("scenario", nargs="?", default=str(DEFAULT_SCENARIO), help="Scenario JSON file")
    parser.add_argument("--turns", type=int, default=20, help="Number of turns to run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every roll")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    print("--- LOADING SCENARIO ---")
    scenario = await load_scenario(args.scenario)
    await run(scenario, args.turns)
    await scenario.tracker.end()


if __name__ == "__main__":
    asyncio.run(main())
