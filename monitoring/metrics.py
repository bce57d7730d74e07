"""
Run metrics for the news harvester.
"""
import json
import os
import time
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger


class CrawlMetrics:
    """Collects per-run and process-lifetime crawl counters."""

    def __init__(self, metrics_dir: Optional[str] = None):
        """Initialize the metrics collector.

        Args:
            metrics_dir: Directory for per-run JSON files; nothing is written when omitted
        """
        self.metrics_dir = metrics_dir
        if self.metrics_dir:
            os.makedirs(os.path.join(self.metrics_dir, 'runs'), exist_ok=True)

        self.current_run_metrics: Dict[str, Any] = {}
        self.current_run_start: Optional[float] = None
        self.last_run_metrics: Optional[Dict[str, Any]] = None

        # Reset on application restart
        self.running_metrics = {
            "app_start_time": datetime.now().isoformat(),
            "runs_completed": 0,
            "runs_stopped": 0,
            "runs_failed": 0,
            "total_pages_fetched": 0,
            "total_pages_failed": 0,
            "total_articles_saved": 0,
            "total_articles_skipped": 0,
        }

    @property
    def run_active(self) -> bool:
        return bool(self.current_run_metrics)

    def start_run(self, run_id: Optional[str] = None) -> str:
        """Start tracking a new crawl run.

        Args:
            run_id: Optional ID for the run, or generate a timestamp-based ID

        Returns:
            The run ID
        """
        if not run_id:
            run_id = f"run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        self.current_run_start = time.monotonic()
        self.current_run_metrics = {
            "run_id": run_id,
            "start_time": datetime.now().isoformat(),
            "status": "running",
            "pages_fetched": 0,
            "pages_failed": 0,
            "articles_saved": 0,
            "articles_skipped": 0,
            "sources": {},
            "errors": [],
            "duration_seconds": 0,
        }

        logger.info(f"Started metrics collection for run: {run_id}")
        return run_id

    def _source_entry(self, source: str) -> Dict[str, int]:
        sources = self.current_run_metrics["sources"]
        if source not in sources:
            sources[source] = {
                "pages_fetched": 0,
                "pages_failed": 0,
                "articles_saved": 0,
                "articles_skipped": 0,
            }
        return sources[source]

    def record_page(self, source: str, success: bool) -> None:
        if not self.current_run_metrics:
            return
        key = "pages_fetched" if success else "pages_failed"
        self.current_run_metrics[key] += 1
        self.running_metrics[f"total_{key}"] += 1
        self._source_entry(source)[key] += 1

    def record_articles(self, source: str, saved: int, skipped: int = 0) -> None:
        """Record the outcome of one saved batch.

        Args:
            source: Source name
            saved: Articles actually inserted
            skipped: Articles that failed to download or parse
        """
        if not self.current_run_metrics:
            return
        entry = self._source_entry(source)
        for key, value in (("articles_saved", saved), ("articles_skipped", skipped)):
            self.current_run_metrics[key] += value
            self.running_metrics[f"total_{key}"] += value
            entry[key] += value

    def record_error(self, source: str, error_message: str) -> None:
        if not self.current_run_metrics:
            return
        self.current_run_metrics["errors"].append({
            "source": source,
            "message": error_message,
            "timestamp": datetime.now().isoformat(),
        })

    def end_run(self, status: str = "completed") -> Optional[Dict[str, Any]]:
        """End the current run and keep its summary.

        Args:
            status: One of "completed", "stopped" or "failed"

        Returns:
            The finished run's metrics, or None if no run was started
        """
        if not self.current_run_metrics or self.current_run_start is None:
            logger.warning("Attempted to end run but no run was started")
            return None

        duration = time.monotonic() - self.current_run_start
        self.current_run_metrics["duration_seconds"] = round(duration, 2)
        self.current_run_metrics["end_time"] = datetime.now().isoformat()
        self.current_run_metrics["status"] = status

        counter = f"runs_{status}"
        if counter in self.running_metrics:
            self.running_metrics[counter] += 1

        self._save_run_metrics()

        finished = self.current_run_metrics
        logger.info(
            f"Run {finished['run_id']} {status} in {duration:.2f}s: "
            f"{finished['articles_saved']} articles saved, "
            f"{finished['pages_failed']} pages failed"
        )

        self.last_run_metrics = finished
        self.current_run_metrics = {}
        self.current_run_start = None
        return finished

    def _save_run_metrics(self) -> None:
        if not self.metrics_dir:
            return
        path = os.path.join(self.metrics_dir, 'runs', f"{self.current_run_metrics['run_id']}.json")
        try:
            with open(path, 'w') as f:
                json.dump(self.current_run_metrics, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save run metrics: {e}")

