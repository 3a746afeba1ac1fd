"""Turn order and the binding that spreads a hazard on its turn."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from .constants import MODULE_NAMESPACE
from .dice import Chance
from .hazard import Wildfire
from .registry import HazardRegistry
from .scene import Token

logger = logging.getLogger(__name__)

TurnListener = Callable[["Combatant"], Awaitable[Any]]


@dataclass
class Combatant:
    """A participant in the turn order, optionally linked to a token."""

    id: int
    name: str
    token_id: int | None = None
    flags: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def chance(self) -> Chance | None:
        """The spread chance stored on this participant, if any."""
        return Chance.from_flags(self.flags.get(MODULE_NAMESPACE, {}))


class TurnTracker:
    """
    Cycles through combatants and tells listeners whose turn it is.

    The tracker owns the session's hazard registry; ending the session
    clears it.
    """

    def __init__(self, registry: HazardRegistry | None = None):
        self.registry = registry if registry is not None else HazardRegistry()
        self.combatants: list[Combatant] = []
        self.round = 0
        self.turn: int | None = None
        self._listeners: list[TurnListener] = []
        self._ids = itertools.count(1)

    @property
    def started(self) -> bool:
        return self.turn is not None

    @property
    def current(self) -> Combatant | None:
        if self.turn is None or not self.combatants:
            return None
        return self.combatants[self.turn]

    def on_turn(self, listener: TurnListener) -> TurnListener:
        """Register a coroutine function called with each new active combatant."""
        self._listeners.append(listener)
        return listener

    def add_combatant(
        self,
        name: str,
        token: Token | None = None,
        chance: Chance | None = None,
    ) -> Combatant:
        flags = {MODULE_NAMESPACE: chance.to_flags()} if chance is not None else {}
        combatant = Combatant(
            id=next(self._ids),
            name=name,
            token_id=token.unique_id if token is not None else None,
            flags=flags,
        )
        self.combatants.append(combatant)
        return combatant

    def add_hazard(self, hazard: Wildfire, name: str | None = None) -> Combatant:
        """Add a combatant taking turns for ``hazard`` and register the hazard."""
        self.registry.register(hazard)
        combatant = Combatant(
            id=next(self._ids),
            name=name or hazard.template.name,
            token_id=hazard.id,
            flags={MODULE_NAMESPACE: hazard.chance.to_flags()},
        )
        self.combatants.append(combatant)
        return combatant

    async def start(self) -> Combatant | None:
        """Begin round 1 with the first combatant."""
        if not self.combatants:
            logger.warning("Cannot start turn order without combatants")
            return None
        self.round = 1
        self.turn = 0
        await self._notify()
        return self.current

    async def next_turn(self) -> Combatant | None:
        """
        Advance to the next combatant and notify listeners.

        Errors raised by a listener propagate; the turn has already advanced.
        """
        if not self.started:
            return await self.start()
        self.turn += 1
        if self.turn >= len(self.combatants):
            self.turn = 0
            self.round += 1
            logger.debug(f"Round {self.round} begins")
        await self._notify()
        return self.current

    async def end(self) -> None:
        """End the session, discarding combatants and registered hazards."""
        self.combatants.clear()
        self.registry.clear()
        self.round = 0
        self.turn = None

    async def _notify(self) -> None:
        combatant = self.current
        logger.debug(f"Round {self.round}, turn of {combatant.name}")
        for listener in self._listeners:
            await listener(combatant)


class TurnTrigger:
    """Spreads a registered hazard when its combatant's turn comes up."""

    def __init__(self, registry: HazardRegistry):
        self.registry = registry

    async def __call__(self, combatant: Combatant) -> list[Token]:
        hazard = self.registry.get(combatant.token_id)
        if hazard is None:
            return []
        logger.info(f"Turn of {combatant.name}, spreading hazard {hazard.id}")
        return await hazard.spread(combatant.chance)

    @classmethod
    def bind(cls, tracker: TurnTracker) -> TurnTrigger:
        """Create a trigger for the tracker's registry and listen to its turns."""
        trigger = cls(tracker.registry)
        tracker.on_turn(trigger)
        return trigger
