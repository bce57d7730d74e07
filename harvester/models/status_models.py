"""
Status models handed to the web layer.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class RunStatus(BaseModel):
    """Whether a crawl run is active, plus a summary of the last one."""

    in_progress: bool
    stop_requested: bool = False
    last_run: Optional[Dict[str, Any]] = None


class AutoScheduleStatus(BaseModel):
    """Auto-crawl state; ``interval`` uses the ``XdYhZm`` notation."""

    enabled: bool
    interval: Optional[str] = None
    next_run_at: Optional[datetime] = None
