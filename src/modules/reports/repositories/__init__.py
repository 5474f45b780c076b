"""Report repositories package."""

from modules.reports.repositories.django_repository import ReportDjangoRepository
from modules.reports.repositories.interfaces import IReportRepository

__all__ = ["IReportRepository", "ReportDjangoRepository"]
