"""
Observability Metrics
Counters for bundle post-processing runs
"""
from typing import Any, Dict, Optional
import logging
import threading
from collections import Counter

logger = logging.getLogger(__name__)

POST_PROCESS_COUNTERS = (
    "runs",
    "bundles",
    "links",
    "children_requested",
    "children_found",
    "children_missing",
)

# Per-SKU missing counts kept for the most frequently missing children only
MAX_TRACKED_MISSING_CHILDREN = 200


class MetricsCollector:
    """Collects and aggregates post-processing metrics"""

    def __init__(self, max_tracked_missing: int = MAX_TRACKED_MISSING_CHILDREN):
        self.counters: Dict[str, int] = {name: 0 for name in POST_PROCESS_COUNTERS}
        self.max_tracked_missing = max_tracked_missing
        self.missing_children: Counter = Counter()  # child sku -> times reported missing
        self.last_summary: Optional[Dict[str, Any]] = None

        # Thread-safe lock
        self._lock = threading.Lock()

    def record_post_process(self, summary: Dict[str, Any]) -> None:
        """Accumulate the summary of one processing call."""
        with self._lock:
            self.counters["runs"] += 1
            for name in POST_PROCESS_COUNTERS[1:]:
                self.counters[name] += int(summary.get(name, 0) or 0)
            for sku in summary.get("missing_skus", ()):
                self.missing_children[sku] += 1
            if len(self.missing_children) > self.max_tracked_missing:
                self.missing_children = Counter(dict(self.missing_children.most_common(self.max_tracked_missing)))
            self.last_summary = summary

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self.counters)

    def reset(self) -> None:
        with self._lock:
            self.counters = {name: 0 for name in POST_PROCESS_COUNTERS}
            self.missing_children.clear()
            self.last_summary = None
        logger.info("Post-process metrics reset")


# Global metrics collector instance
metrics_collector = MetricsCollector()
