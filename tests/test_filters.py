from datetime import date, datetime, timezone

from ticketdesk.reports.filters import (
    ReportFilters,
    ReportTab,
    apply_filters,
    filter_by_actor,
    matches_date_range,
    tab_reports,
)
from ticketdesk.session import ActorContext

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)

REPORTS = [
    {"id": 1, "type": "Task", "status": "completed", "createdAt": "2024-03-09T08:00:00Z",
     "createdBy": "u1", "parameters": {"departmentId": "d1"}},
    {"id": 2, "type": "department", "status": "pending", "createdAt": "2024-03-01T08:00:00Z",
     "createdBy": "u2", "parameters": {"departmentId": "d1"}},
    {"id": 3, "type": "department", "status": "completed", "createdAt": "2024-02-01T08:00:00Z",
     "createdBy": "u3", "parameters": {"departmentId": "d2"}},
    {"id": 4, "type": "user", "status": "completed", "createdAt": "garbage",
     "createdBy": "u1", "parameters": {}},
]


def _ids(reports):
    return [r["id"] for r in reports]


def test_no_filters_keeps_everything():
    assert not ReportFilters().is_active
    assert _ids(apply_filters(REPORTS, ReportFilters())) == [1, 2, 3, 4]


def test_type_is_case_insensitive_and_status_exact():
    assert _ids(apply_filters(REPORTS, ReportFilters(type="task"))) == [1]
    assert _ids(apply_filters(REPORTS, ReportFilters(status="completed"))) == [1, 3, 4]
    assert _ids(apply_filters(REPORTS, ReportFilters(status="Completed"))) == []


def test_filters_combine_with_and():
    filters = ReportFilters(type="department", status="completed")
    assert filters.is_active
    assert _ids(apply_filters(REPORTS, filters)) == [3]


def test_date_only_end_bound_covers_whole_day():
    report = {"createdAt": "2024-03-05T23:30:00Z"}
    assert matches_date_range(report, "2024-03-05", "2024-03-05")
    assert matches_date_range(report, date(2024, 3, 5), date(2024, 3, 5))
    assert not matches_date_range(report, "2024-03-06", None)
    assert not matches_date_range(report, None, "2024-03-05T12:00:00Z")


def test_unparseable_created_at_fails_active_range():
    assert not matches_date_range({"createdAt": "garbage"}, "2024-01-01", None)
    assert matches_date_range({"createdAt": "garbage"})
    assert _ids(apply_filters(REPORTS, ReportFilters(start_date="2024-02-15"))) == [1, 2]


def test_filter_by_actor_roles():
    admin = ActorContext(id="u9", role="admin")
    head = ActorContext(id="u3", role="department_head", department_id="d1")
    employee = ActorContext(id="u1", role="employee", department_id="d1")
    assert _ids(filter_by_actor(REPORTS, admin)) == [1, 2, 3, 4]
    assert _ids(filter_by_actor(REPORTS, head)) == [1, 2, 3]
    assert _ids(filter_by_actor(REPORTS, employee)) == [1, 4]


def test_tabs():
    admin = ActorContext(id="u9", role="admin")
    assert _ids(tab_reports(REPORTS, ReportTab.ALL, admin, now=NOW)) == [1, 2, 3, 4]
    assert _ids(tab_reports(REPORTS, ReportTab.RECENT, admin, now=NOW)) == [1]
    assert _ids(tab_reports(REPORTS, ReportTab.RECENT, admin, now=NOW, recent_days=30)) == [1, 2]
    assert _ids(tab_reports(REPORTS, "department-summary", admin, now=NOW)) == [2, 3]
    assert ReportTab.DEPARTMENT_SUMMARY.label == "Department Summary"
