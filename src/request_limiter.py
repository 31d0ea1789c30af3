# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Call limiter for word-source traffic.

Bounds how many remote requests the word sources may make in one session
and keeps success/failure statistics per source.
"""

import time
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Optional


@dataclass
class CallRecord:
    """Record of a single word-source request."""
    source: str
    timestamp: float
    success: bool = True
    elapsed_ms: float = 0.0
    error: Optional[str] = None


@dataclass
class CallLimiter:
    """
    Tracks and bounds word-source requests.

    Check can_call() before every request and record_call() after it.

    Usage:
        limiter = CallLimiter(max_total=500, limits={'datamuse': 300})

        if limiter.can_call('datamuse'):
            word = fetch()
            limiter.record_call('datamuse', elapsed_ms=42.0)
    """
    max_total: int = 500
    limits: Dict[str, int] = field(default_factory=dict)
    history_size: int = 100
    counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    failures: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    total_calls: int = 0
    recent: Deque[CallRecord] = field(default_factory=deque)
    start_time: float = field(default_factory=time.time)

    def can_call(self, source: str) -> bool:
        if self.total_calls >= self.max_total:
            return False
        return self.counts[source] < self.limits.get(source, self.max_total)

    def record_call(
        self,
        source: str,
        success: bool = True,
        elapsed_ms: float = 0.0,
        error: Optional[str] = None
    ) -> None:
        """
        Record that a request was made.

        Args:
            source: Word source name
            success: Whether the request produced a usable word
            elapsed_ms: Request duration
            error: Error message for failed requests
        """
        self.counts[source] += 1
        self.total_calls += 1
        if not success:
            self.failures[source] += 1

        self.recent.append(CallRecord(
            source=source,
            timestamp=time.time(),
            success=success,
            elapsed_ms=elapsed_ms,
            error=error,
        ))
        while len(self.recent) > self.history_size:
            self.recent.popleft()

    def get_remaining(self, source: Optional[str] = None) -> int:
        total_remaining = self.max_total - self.total_calls
        if source is None:
            return total_remaining
        source_remaining = self.limits.get(source, self.max_total) - self.counts[source]
        return min(source_remaining, total_remaining)

    def is_exhausted(self) -> bool:
        return self.total_calls >= self.max_total

    def success_rate(self, source: Optional[str] = None) -> float:
        if source is None:
            calls = self.total_calls
            failed = sum(self.failures.values())
        else:
            calls = self.counts.get(source, 0)
            failed = self.failures.get(source, 0)
        if calls == 0:
            return 1.0
        return (calls - failed) / calls

    def get_stats(self) -> Dict[str, Any]:
        elapsed = [r.elapsed_ms for r in self.recent]
        return {
            'total_calls': self.total_calls,
            'remaining_calls': self.get_remaining(),
            'calls_by_source': dict(self.counts),
            'failures_by_source': dict(self.failures),
            'success_rate': self.success_rate(),
            'avg_elapsed_ms': sum(elapsed) / len(elapsed) if elapsed else 0.0,
            'uptime_seconds': time.time() - self.start_time,
        }

    def reset(self) -> None:
        self.counts = defaultdict(int)
        self.failures = defaultdict(int)
        self.total_calls = 0
        self.recent = deque()
        self.start_time = time.time()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'CallLimiter':
        return cls(
            max_total=config.get('max_calls', 500),
            limits=config.get('limits', {}),
        )
