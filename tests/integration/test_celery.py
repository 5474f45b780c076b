"""Integration tests for the Celery configuration and scheduled reports."""

import pytest
from freezegun import freeze_time

from modules.reports.models import WeeklySalesReport

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously inside the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "farmaya"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "farmaya"

    def test_celery_broker_url_configured(self, settings):
        assert settings.CELERY_BROKER_URL is not None
        assert "redis" in settings.CELERY_BROKER_URL

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_weekly_reports_scheduled(self, settings):
        tasks = [entry["task"] for entry in settings.CELERY_BEAT_SCHEDULE.values()]
        assert "reports.generate_automatic_reports" in tasks


class TestGenerateAutomaticReportsTask:
    @freeze_time("2025-01-22 17:00:00")
    def test_generates_missing_weeks(self):
        from modules.reports.tasks import generate_automatic_reports

        result = generate_automatic_reports.delay(weeks=2)

        assert result.successful()
        assert result.result == {"generated": ["2025-W04", "2025-W03"]}
        assert WeeklySalesReport.objects.count() == 2

    @freeze_time("2025-01-22 17:00:00")
    def test_second_run_generates_nothing(self):
        from modules.reports.tasks import generate_automatic_reports

        generate_automatic_reports(weeks=2)

        assert generate_automatic_reports(weeks=2) == {"generated": []}

    def test_failure_propagates(self):
        from modules.reports.exceptions import ReportGenerationError
        from modules.reports.tasks import generate_automatic_reports

        with pytest.raises(ReportGenerationError):
            generate_automatic_reports.delay(weeks=0)

    def test_registered_under_stable_name(self):
        from config.celery import app
        from modules.reports.tasks import generate_automatic_reports

        assert generate_automatic_reports.name == "reports.generate_automatic_reports"
        assert generate_automatic_reports.name in app.tasks
