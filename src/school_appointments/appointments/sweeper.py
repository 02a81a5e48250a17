from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..core.constants import AUTO_CANCEL_INTERVAL_SECONDS
from .service import AppointmentService

logger = logging.getLogger(__name__)

JOB_ID = "auto_cancel_expired"


class AutoCancelSweeper:
    """Scheduled job cancelling pending appointments whose date has passed.

    Every sweep is a single bulk update, so overlapping sweepers (several
    app processes) only repeat a no-op.
    """

    def __init__(self, service: AppointmentService, *, interval: float = AUTO_CANCEL_INTERVAL_SECONDS):
        self._service = service
        self._interval = interval
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def sweep_once(self) -> int:
        try:
            return self._service.cancel_expired()
        except Exception:
            logger.exception("auto-cancel sweep failed")
            return 0

    def start(self) -> None:
        if self.running:
            return
        scheduler = BackgroundScheduler(daemon=True)
        # first pass right away, then every interval
        scheduler.add_job(
            func=self.sweep_once,
            trigger=IntervalTrigger(seconds=self._interval),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(scheduler.timezone),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("auto-cancel sweeper started (every %ss)", self._interval)

    def stop(self, wait: bool = True) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=wait)
            self._scheduler = None
        logger.info("auto-cancel sweeper stopped")
