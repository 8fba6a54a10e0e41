from ticketdesk.reports.models import NewReportForm
from ticketdesk.reports.validation import all_custom_report_fields, validate_new_report


def _fields(errors):
    return [e.field for e in errors]


def test_valid_task_report():
    assert validate_new_report(NewReportForm(title="Weekly tasks")) == []


def test_unknown_and_missing_type():
    assert _fields(validate_new_report(NewReportForm(title="x", type=""))) == ["type"]
    (error,) = validate_new_report(NewReportForm(title="x", type="sales"))
    assert error.message == "Unknown report type: sales."


def test_user_and_custom_rules():
    assert _fields(validate_new_report(NewReportForm(title="x", type="user"))) == ["userId"]
    assert validate_new_report(NewReportForm(title="x", type="user"), selected_user_id=4) == []
    assert _fields(validate_new_report(NewReportForm(type="custom"))) == ["title", "selectedFields"]
    form = NewReportForm(title="x", type="custom", parameters={"selectedFields": ["totalTickets"]})
    assert validate_new_report(form) == []


def test_custom_field_catalogue():
    keys = [f["key"] for f in all_custom_report_fields()]
    assert "totalTasks" in keys
    assert "priorityDistribution" in keys
    assert len(keys) == len(set(keys))
