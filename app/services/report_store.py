"""In-process storage for finished assessment reports."""
import logging
import threading
from typing import Dict

from app.core.exceptions import ReportNotFoundError
from app.schemas.interview import Report

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Maps report ids to reports for the lifetime of the process.

    Supports create and lookup only: no enumeration, deletion or expiry, so
    the mapping grows for as long as the process runs. A lock guards the
    dict because sync endpoints run on the threadpool alongside the event loop.
    """

    def __init__(self):
        self._reports: Dict[str, Report] = {}
        self._lock = threading.Lock()

    def put(self, report: Report) -> None:
        with self._lock:
            if report.id in self._reports:
                logger.warning(f"Report id collision, overwriting {report.id}")
            self._reports[report.id] = report
        logger.info(f"Stored report {report.id}")

    def get(self, report_id: str) -> Report:
        with self._lock:
            report = self._reports.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)
