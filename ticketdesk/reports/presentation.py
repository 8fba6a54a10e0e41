"""Display helpers for report records.

Every function here is total: unknown types, statuses or malformed values
fall back to a generic label or sentinel string instead of raising.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from numbers import Number
from typing import Any, Dict, Optional

from .models import export_extension, report_parameters, report_title

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class TypeDisplay:
    label: str
    color: str
    icon: str


TYPE_DISPLAY: Dict[str, TypeDisplay] = {
    "ticket": TypeDisplay("Ticket Report", "primary", "🎫"),
    "task": TypeDisplay("Task Report", "secondary", "📋"),
    "user": TypeDisplay("User Report", "success", "👤"),
    "department": TypeDisplay("Department Report", "warning", "🏢"),
    "custom": TypeDisplay("Custom Report", "info", "📊"),
}
DEFAULT_TYPE_DISPLAY = TypeDisplay("Report", "default", "📄")

STATUS_COLORS = {
    "completed": "success",
    "resolved": "success",
    "pending": "warning",
    "in_progress": "info",
    "in progress": "info",
    "declined": "error",
    "overdue": "error",
}

PRIORITY_COLORS = {
    "critical": "error",
    "high": "warning",
    "medium": "info",
    "low": "success",
}


def _lower(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def type_display(report_type: Any) -> TypeDisplay:
    return TYPE_DISPLAY.get(_lower(report_type), DEFAULT_TYPE_DISPLAY)


def type_label(report_type: Any) -> str:
    return type_display(report_type).label


def type_color(report_type: Any) -> str:
    return type_display(report_type).color


def type_icon(report_type: Any) -> str:
    return type_display(report_type).icon


def status_color(status: Any) -> str:
    return STATUS_COLORS.get(_lower(status), "default")


def priority_color(priority: Any) -> str:
    return PRIORITY_COLORS.get(_lower(priority), "default")


def _name_from_title(title: str, kind: str) -> Optional[str]:
    pattern = f"{kind} Report -"
    if not title or pattern not in title:
        return None
    match = re.search(re.escape(pattern) + r" (.+?) -", title)
    return match.group(1) if match else None


def report_target(report: Dict[str, Any]) -> str:
    """Describe what a report is about (a user, a department, a scope)."""
    report_type = report.get("type")
    params = report_parameters(report)
    title = report_title(report)

    if report_type == "user":
        return params.get("userName") or _name_from_title(title, "User") or "User Report"
    if report_type == "department":
        return params.get("departmentName") or _name_from_title(title, "Department") or "Department Report"
    if report_type in ("task", "ticket"):
        return "All Departments" if params.get("global") else "Filtered"
    if report_type == "custom":
        return "Custom Scope"
    return "N/A"


# ---------------- Dates and durations ----------------


def _display_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, Number) and not isinstance(value, bool):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc).astimezone()
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone()
        except (OverflowError, OSError, ValueError):
            return None
    return parsed


def format_date(value: Any) -> str:
    """Render a timestamp like ``Mar 5, 2024, 2:30 PM``.

    Aware timestamps are shown in local time; naive ones as given.
    """
    if value is None or value == "":
        return "N/A"
    dt = _display_datetime(value)
    if dt is None:
        return "Invalid Date"
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}, {hour}:{dt.minute:02d} {suffix}"


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def format_duration(days: Any) -> str:
    """Render a fractional day count as ``1d 12h`` / ``3h 20m`` / ``< 1m``."""
    if not _is_number(days):
        return "No data"
    days = float(days)
    if math.isnan(days) or math.isinf(days) or days < 0:
        return "No data"
    if days == 0:
        return "0 days"

    total_minutes = days * 24 * 60
    days_part = math.floor(days)
    hours_part = math.floor((days - days_part) * 24)
    minutes_part = math.floor(total_minutes - days_part * 24 * 60 - hours_part * 60)

    parts = []
    if days_part > 0:
        parts.append(f"{days_part}d")
    if hours_part > 0:
        parts.append(f"{hours_part}h")
    if minutes_part > 0 and days_part == 0:
        parts.append(f"{minutes_part}m")
    return " ".join(parts) if parts else "< 1m"


# ---------------- Values and keys ----------------


def format_number(value: Any) -> str:
    """Group thousands; floats keep at most three decimals."""
    if isinstance(value, bool) or not _is_number(value):
        return str(value)
    if isinstance(value, int):
        return f"{value:,}"
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return "N/A"
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def format_value(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if _is_number(value):
        return format_number(value)
    if isinstance(value, (list, tuple, dict)):
        return str(len(value))
    if isinstance(value, str):
        return value
    return str(value)


_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def prettify_key(key: Any) -> str:
    """``averageTaskCompletionTime`` -> ``Average Task Completion Time``."""
    text = _CAMEL_BOUNDARY.sub(r" \1", str(key or "")).strip()
    return text[:1].upper() + text[1:]


def is_time_key(key: Any) -> bool:
    lowered = str(key or "").lower()
    return "time" in lowered or "duration" in lowered


# ---------------- Export file names ----------------


_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def export_filename(report: Dict[str, Any], fmt: str = "pdf", today: Optional[date] = None) -> str:
    """``<safe title>_<YYYY-MM-DD>.<ext>`` for a report export."""
    safe = _UNSAFE_FILENAME_CHARS.sub("_", report_title(report) or "report")
    today = today or datetime.now(timezone.utc).date()
    return f"{safe}_{today.isoformat()}.{export_extension(fmt)}"


def default_download_filename(report: Dict[str, Any], fmt: str = "pdf") -> str:
    return f"report-{report.get('id')}.{export_extension(fmt)}"
