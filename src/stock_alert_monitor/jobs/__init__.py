"""Scheduled jobs."""
from stock_alert_monitor.jobs.scheduler import (CYCLE_JOB_ID, STARTUP_JOB_ID,
                                                CycleTrigger,
                                                create_scheduler)

__all__ = ["CYCLE_JOB_ID", "STARTUP_JOB_ID", "CycleTrigger", "create_scheduler"]
