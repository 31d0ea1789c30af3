# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Analytics signals raised by the generation pipeline.

Events are kept in a bounded in-memory log and handed to any registered
listeners. Shipping them anywhere is up to the listeners.
"""

import logging
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional


WORD_GENERATION_SOURCE = "word_generation_source"
API_GENERATION_FAILED = "api_generation_failed"
WORD_MODE_CHANGED = "word_mode_changed"
UNLIMITED_MODE_ENABLED = "unlimited_mode_enabled"


@dataclass
class AnalyticsEvent:
    name: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class AnalyticsRecorder:
    """
    Records analytics events.

    Usage:
        analytics = AnalyticsRecorder()
        analytics.add_listener(lambda event: send(event))
        analytics.track(WORD_GENERATION_SOURCE, source='cache', difficulty=2)
    """

    def __init__(
        self,
        max_events: int = 1000,
        logger: Optional[logging.Logger] = None
    ):
        self._events: Deque[AnalyticsEvent] = deque(maxlen=max_events)
        self._totals: Counter = Counter()
        self._listeners: List[Callable[[AnalyticsEvent], None]] = []
        self.logger = logger if logger else logging.getLogger(__name__)

    def add_listener(self, listener: Callable[[AnalyticsEvent], None]):
        self._listeners.append(listener)

    def track(self, name: str, **data: Any) -> AnalyticsEvent:
        event = AnalyticsEvent(name=name, data=data)
        self._events.append(event)
        self._totals[name] += 1
        self.logger.debug(f"Analytics event: {name} {data}")

        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                # A broken listener must not break generation
                self.logger.warning(f"Analytics listener failed on {name}: {e}")

        return event

    def events(self, name: Optional[str] = None) -> List[AnalyticsEvent]:
        if name is None:
            return list(self._events)
        return [e for e in self._events if e.name == name]

    def count(self, name: str) -> int:
        """Total events of this name since the last clear()."""
        return self._totals[name]

    def clear(self):
        self._events.clear()
        self._totals.clear()
