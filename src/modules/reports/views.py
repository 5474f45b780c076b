"""Sales report and dashboard API views (admin only)."""

from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdmin
from modules.reports.exceptions import ReportGenerationError, ReportNotFound
from modules.reports.models import WeeklySalesReport
from modules.reports.repositories.django_repository import ReportDjangoRepository
from modules.reports.serializers import (
    AutomaticReportsSerializer,
    DailyProfitQuerySerializer,
    DailyProfitReportSerializer,
    DashboardQuerySerializer,
    DashboardSerializer,
    LatestQuerySerializer,
    WeeklyReportRequestSerializer,
    WeeklySalesReportSerializer,
    YearQuerySerializer,
)
from modules.reports.services import DashboardService, SalesReportService


class ReportViewSet(GenericViewSet):
    queryset = WeeklySalesReport.objects.all()
    serializer_class = WeeklySalesReportSerializer
    permission_classes = [IsAdmin]
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = ReportDjangoRepository()
        self._service = SalesReportService(repository=repository)
        self._dashboard = DashboardService(repository=repository)

    def list(self, request: Request) -> Response:
        """GET /api/v1/reports/?year=2025"""
        query = YearQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reports = self._service.list_reports_by_year(query.validated_data["year"])
        return Response(WeeklySalesReportSerializer(reports, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/reports/{pk}/"""
        try:
            report = self._service.get_report(pk)
        except ReportNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(WeeklySalesReportSerializer(report).data)

    @action(detail=False, methods=["post"])
    def weekly(self, request: Request) -> Response:
        """POST /api/v1/reports/weekly/"""
        payload = WeeklyReportRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        start = payload.validated_data["start_date"]
        end = payload.validated_data["end_date"]

        try:
            report = self._service.generate_weekly_report(start, end)
        except ReportGenerationError as exc:
            code = (
                status.HTTP_400_BAD_REQUEST
                if start > end
                else status.HTTP_500_INTERNAL_SERVER_ERROR
            )
            return Response({"detail": str(exc)}, status=code)
        return Response(WeeklySalesReportSerializer(report).data)

    @action(detail=False, methods=["post"])
    def automatic(self, request: Request) -> Response:
        """POST /api/v1/reports/automatic/"""
        payload = AutomaticReportsSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        try:
            reports = self._service.generate_automatic_reports(
                payload.validated_data.get("weeks")
            )
        except ReportGenerationError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response(WeeklySalesReportSerializer(reports, many=True).data)

    @action(detail=False, methods=["get"])
    def latest(self, request: Request) -> Response:
        """GET /api/v1/reports/latest/?limit=10"""
        query = LatestQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reports = self._service.list_latest_reports(query.validated_data["limit"])
        return Response(WeeklySalesReportSerializer(reports, many=True).data)

    @action(detail=False, methods=["get"], url_path="daily-profit")
    def daily_profit(self, request: Request) -> Response:
        """GET /api/v1/reports/daily-profit/?date=2025-01-15 (default today)."""
        query = DailyProfitQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        day = query.validated_data.get("date") or timezone.localdate()
        report = self._service.generate_daily_profit_report(day)
        return Response(DailyProfitReportSerializer(report.model_dump()).data)

    @action(detail=False, methods=["get"])
    def dashboard(self, request: Request) -> Response:
        """GET /api/v1/reports/dashboard/?low_stock=10&recent=10"""
        query = DashboardQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        dashboard = self._dashboard.get_dashboard(
            low_stock_threshold=query.validated_data.get("low_stock"),
            recent_limit=query.validated_data.get("recent"),
        )
        return Response(DashboardSerializer(dashboard.model_dump()).data)
