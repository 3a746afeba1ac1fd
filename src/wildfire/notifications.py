"""User-facing status messages.

Messages are looked up by key in a localization table and then logged. Each
notifier also keeps the messages it produced so a front end (or a test) can
show them.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

MESSAGES = {
    "WILDFIRE.SpreadComplete": "The fire spread into {count} new spaces.",
    "WILDFIRE.SpreadNone": "The fire did not spread this turn.",
    "WILDFIRE.HazardCreated": "{name} will now spread with {formula} (success on {target} or higher).",
    "WILDFIRE.RegionsMarked": "Marked {count} tiles as flammable.",
    "WILDFIRE.NoSource": "Select a token to use as the source of the fire.",
    "WILDFIRE.NoRegions": "Select one or more tiles to mark as flammable.",
}


class Notifier:
    """Reports localized status messages at info or warning level."""

    def __init__(self, messages: dict[str, str] | None = None):
        self.messages = dict(MESSAGES)
        if messages:
            self.messages.update(messages)
        self.history: list[tuple[str, str]] = []

    def localize(self, key: str, **data: Any) -> str:
        """Format the message for ``key``; unknown keys are returned as-is."""
        template = self.messages.get(key)
        if template is None:
            return key
        return template.format(**data)

    def _notify(self, level: int, key: str, **data: Any) -> str:
        message = self.localize(key, **data)
        self.history.append((logging.getLevelName(level).lower(), message))
        logger.log(level, message)
        return message

    def info(self, key: str, **data: Any) -> str:
        return self._notify(logging.INFO, key, **data)

    def warn(self, key: str, **data: Any) -> str:
        return self._notify(logging.WARNING, key, **data)
