"""Scheduled report generation."""

import structlog
from celery import shared_task

from modules.reports.repositories.django_repository import ReportDjangoRepository
from modules.reports.services import SalesReportService

logger = structlog.get_logger(__name__)


@shared_task(name="reports.generate_automatic_reports")
def generate_automatic_reports(weeks=None):
    """Generate the missing weekly reports; failures propagate to Celery."""
    service = SalesReportService(repository=ReportDjangoRepository())
    try:
        reports = service.generate_automatic_reports(weeks)
    except Exception:
        logger.exception("report.automatic_failed", weeks=weeks)
        raise
    return {"generated": [report.period_key for report in reports]}
