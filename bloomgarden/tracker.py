"""Spawn counter for BloomGarden.

Counts planted flowers for the on-screen counter and hands out the preset's
milestone messages when the count hits one of its thresholds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

logger = logging.getLogger(__name__)


@dataclass
class SpawnEvent:
    """What the overlay should do after one spawn."""

    count: int
    first: bool = False
    message: Optional[str] = None


@dataclass
class SpawnTracker:
    """Tracks how many flowers were planted in this session."""

    milestones: Dict[int, str] = field(default_factory=dict)
    count: int = 0
    # Thresholds already announced, so each message shows once.
    reached: Set[int] = field(default_factory=set)

    def reset(self) -> None:
        self.count = 0
        self.reached.clear()

    def handle_spawn(self) -> SpawnEvent:
        """Record one spawn.

        The first spawn is flagged so the intro can be hidden and the counter
        box shown.
        """

        self.count += 1
        event = SpawnEvent(count=self.count, first=self.count == 1)
        event.message = self._maybe_milestone()
        return event

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _maybe_milestone(self) -> Optional[str]:
        message = self.milestones.get(self.count)
        if message is None or self.count in self.reached:
            return None
        self.reached.add(self.count)
        logger.info("Milestone reached at %d flowers", self.count)
        return message

    @property
    def latest_message(self) -> Optional[str]:
        """The most recent milestone message reached, if any."""

        if not self.reached:
            return None
        return self.milestones[max(self.reached)]
