from datetime import date

from ticketdesk.reports.presentation import (
    default_download_filename,
    export_filename,
    format_date,
    format_duration,
    format_number,
    format_value,
    prettify_key,
    priority_color,
    report_target,
    status_color,
    type_display,
)


def test_type_display_table():
    assert type_display("ticket").label == "Ticket Report"
    assert type_display("custom").color == "info"
    assert type_display("department").icon == "🏢"
    unknown = type_display("weird")
    assert (unknown.label, unknown.color) == ("Report", "default")
    assert type_display(None).label == "Report"


def test_status_and_priority_colors():
    assert status_color("completed") == "success"
    assert status_color("In Progress") == "info"
    assert status_color("in_progress") == "info"
    assert status_color(None) == "default"
    assert priority_color("Critical") == "error"
    assert priority_color("unknown") == "default"


def test_report_target():
    assert report_target({"type": "user", "parameters": {"userName": "Ann"}}) == "Ann"
    assert report_target({"type": "user", "title": "User Report - Ben Ode - March"}) == "Ben Ode"
    assert report_target({"type": "user", "title": "Monthly"}) == "User Report"
    assert report_target({"type": "department", "title": "Department Report - IT - Q1"}) == "IT"
    assert report_target({"type": "task", "parameters": {"global": True}}) == "All Departments"
    assert report_target({"type": "ticket"}) == "Filtered"
    assert report_target({"type": "custom"}) == "Custom Scope"
    assert report_target({}) == "N/A"


def test_format_date():
    assert format_date("2024-03-05T14:30:00") == "Mar 5, 2024, 2:30 PM"
    assert format_date("2024-12-01T00:05:00") == "Dec 1, 2024, 12:05 AM"
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_date("yesterday") == "Invalid Date"


def test_format_duration():
    assert format_duration(1.5) == "1d 12h"
    assert format_duration(2) == "2d"
    assert format_duration(0.125) == "3h"
    assert format_duration(0.015625) == "22m"
    assert format_duration(0.0001) == "< 1m"
    assert format_duration(0) == "0 days"
    assert format_duration(-1) == "No data"
    assert format_duration(None) == "No data"
    assert format_duration("3") == "No data"
    assert format_duration(True) == "No data"


def test_format_number_and_value():
    assert format_number(1234567) == "1,234,567"
    assert format_number(12345678901234567) == "12,345,678,901,234,567"
    assert format_number(1234.5) == "1,234.5"
    assert format_number(2.0) == "2"
    assert format_value(True) == "Yes"
    assert format_value(None) == "N/A"
    assert format_value([1, 2, 3]) == "3"
    assert format_value("open") == "open"


def test_prettify_key():
    assert prettify_key("averageTaskCompletionTime") == "Average Task Completion Time"
    assert prettify_key("total") == "Total"
    assert prettify_key("") == ""


def test_export_filenames():
    report = {"id": 7, "title": "Q1 Tasks/Summary"}
    assert export_filename(report, "csv", date(2024, 3, 5)) == "Q1_Tasks_Summary_2024-03-05.csv"
    assert export_filename({}, "excel", date(2024, 3, 5)) == "report_2024-03-05.xlsx"
    assert default_download_filename(report) == "report-7.pdf"


def test_type_shortcuts():
    from ticketdesk.reports.presentation import type_color, type_icon, type_label

    assert type_label("user") == "User Report"
    assert type_color("TASK") == "secondary"
    assert type_icon(None) == "📄"
