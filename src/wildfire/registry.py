"""Registry of the hazards active in a session."""

import logging
from typing import Iterator

from .hazard import Wildfire

logger = logging.getLogger(__name__)


class HazardRegistry:
    """Active hazards keyed by hazard id.

    A registry belongs to one session (see ``TurnTracker``) and is cleared
    when that session ends.
    """

    def __init__(self):
        self._hazards: dict[int, Wildfire] = {}

    def register(self, hazard: Wildfire) -> Wildfire:
        if hazard.id in self._hazards:
            logger.warning(f"Replacing registered hazard {hazard.id}")
        self._hazards[hazard.id] = hazard
        return hazard

    def unregister(self, hazard_id: int) -> Wildfire | None:
        return self._hazards.pop(hazard_id, None)

    def get(self, hazard_id: int | None) -> Wildfire | None:
        if hazard_id is None:
            return None
        return self._hazards.get(hazard_id)

    def clear(self) -> None:
        self._hazards.clear()

    def __contains__(self, hazard_id: object) -> bool:
        return hazard_id in self._hazards

    def __iter__(self) -> Iterator[Wildfire]:
        return iter(list(self._hazards.values()))

    def __len__(self) -> int:
        return len(self._hazards)
