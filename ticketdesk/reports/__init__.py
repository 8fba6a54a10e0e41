"""Reports area: store/controller, deduplication, filtering and display helpers."""

from .controller import Notification, ReportController, build_create_payload
from .dedup import dedup_key, dedupe_reports
from .filters import ReportFilters, ReportTab, apply_filters, filter_by_actor, tab_reports
from .insights import format_insight, insight_rows
from .models import NewReportForm, ReportDownload, merge_detail, parse_detail_response
from .presentation import (
    export_filename,
    format_date,
    format_duration,
    format_value,
    prettify_key,
    priority_color,
    report_target,
    status_color,
    type_display,
)
from .validation import CUSTOM_REPORT_FIELDS, validate_new_report
from .views import ReportView, build_report_view

__all__ = [
    "Notification",
    "ReportController",
    "build_create_payload",
    "dedup_key",
    "dedupe_reports",
    "ReportFilters",
    "ReportTab",
    "apply_filters",
    "filter_by_actor",
    "tab_reports",
    "format_insight",
    "insight_rows",
    "NewReportForm",
    "ReportDownload",
    "merge_detail",
    "parse_detail_response",
    "export_filename",
    "format_date",
    "format_duration",
    "format_value",
    "prettify_key",
    "priority_color",
    "report_target",
    "status_color",
    "type_display",
    "CUSTOM_REPORT_FIELDS",
    "validate_new_report",
    "ReportView",
    "build_report_view",
]
