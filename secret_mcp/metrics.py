"""In-process counters for tool outcomes and chain health (single process only)."""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Dict, Optional


class MetricsRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._requests = 0
        self._tool_success: Counter[str] = Counter()
        self._tool_error: Counter[str] = Counter()
        self._tool_duration_ms: Dict[str, float] = {}
        self._last_health: Optional[Dict[str, bool]] = None

    def incr_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_tool(self, tool: str, *, success: bool, duration_ms: Optional[float] = None) -> None:
        with self._lock:
            if success:
                self._tool_success[tool] += 1
            else:
                self._tool_error[tool] += 1
            if duration_ms is not None:
                self._tool_duration_ms[tool] = duration_ms

    def record_health(self, status: Dict[str, bool]) -> None:
        with self._lock:
            self._last_health = dict(status)

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "requests": self._requests,
                "tool_success": dict(self._tool_success),
                "tool_error": dict(self._tool_error),
                "last_tool_duration_ms": dict(self._tool_duration_ms),
                "last_health": dict(self._last_health) if self._last_health is not None else None,
            }

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._tool_success.clear()
            self._tool_error.clear()
            self._tool_duration_ms.clear()
            self._last_health = None


default_metrics = MetricsRecorder()
