# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Metrics — In-memory counters for widget observability.

Keys are "<name>:<label>". Emitted by the widget:

  Counters
    access_verdict:blocked|allowed
    tenant_resolve:ok|not_found|lookup_failed
    render_config_degraded:branding|roles
    submit:<form_type>
    submit_outcome:<kind>        success, verification_pending, database_error, ...
    gateway_error:<form_type>    transport or undecodable gateway responses

  Histograms (ms)
    gateway_latency:<form_type>

  Gauges
    sessions_active
"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Dict

HISTOGRAM_WINDOW = 1000


class Metrics:
    """Simple in-memory metrics collector."""

    def __init__(self):
        self._counters: Dict[str, int] = defaultdict(int)
        self._gauges: Dict[str, float] = {}
        self._histograms: Dict[str, list] = defaultdict(list)
        self._start_time = time.time()

    # ── Counters ────────────────────────────────────────────────

    def inc(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    # ── Gauges ──────────────────────────────────────────────────

    def set_gauge(self, name: str, value: float) -> None:
        self._gauges[name] = value

    def add_gauge(self, name: str, delta: float) -> None:
        self._gauges[name] = self._gauges.get(name, 0.0) + delta

    def get_gauge(self, name: str) -> float:
        return self._gauges.get(name, 0.0)

    # ── Histograms (for latency) ────────────────────────────────

    def observe(self, name: str, value: float) -> None:
        """Record an observation (e.g. gateway latency in ms)."""
        self._histograms[name].append(value)
        if len(self._histograms[name]) > HISTOGRAM_WINDOW:
            self._histograms[name] = self._histograms[name][-HISTOGRAM_WINDOW:]

    # ── Export ──────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Export all metrics as a dict."""
        result = {
            "uptime_seconds": round(time.time() - self._start_time, 1),
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
        }
        for name, values in self._histograms.items():
            if values:
                result[f"histogram_{name}"] = {
                    "count": len(values),
                    "avg": round(sum(values) / len(values), 2),
                    "max": round(max(values), 2),
                    "min": round(min(values), 2),
                }
        return result

    def reset(self) -> None:
        self._counters.clear()
        self._gauges.clear()
        self._histograms.clear()


# Global singleton
widget_metrics = Metrics()
