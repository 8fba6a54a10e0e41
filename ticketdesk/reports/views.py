"""Normalize a merged report record into display-ready sections.

``build_report_view`` only fills the sections the record actually carries,
so the page can render whatever subset the backend returned for a given
report type.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .insights import insight_rows
from .models import report_body, report_creator, report_title
from .presentation import (
    TypeDisplay,
    format_date,
    format_duration,
    format_value,
    is_time_key,
    prettify_key,
    priority_color,
    report_target,
    status_color,
    type_display,
)

ENTITY_KEYS = ("tasks", "tickets", "users", "departments")
ENTITY_PREVIEW_LIMIT = 10

Row = Tuple[str, str]


@dataclass(frozen=True)
class BreakdownRow:
    label: str
    count: Any
    percentage: Optional[float]
    color: str


@dataclass(frozen=True)
class Cell:
    text: str
    color: Optional[str] = None


@dataclass
class Table:
    columns: List[str]
    rows: List[List[Cell]]


@dataclass
class EntityList:
    name: str
    total: int
    items: List[Dict[str, Any]]

    @property
    def truncated(self) -> bool:
        return self.total > len(self.items)


@dataclass
class ReportView:
    title: str
    type: TypeDisplay
    target: str
    created_by: str
    created_at: str
    status: Optional[str] = None
    status_color: str = "default"
    description: str = ""
    filters_applied: List[Row] = field(default_factory=list)
    summary: List[Row] = field(default_factory=list)
    status_breakdown: List[BreakdownRow] = field(default_factory=list)
    priority_breakdown: List[BreakdownRow] = field(default_factory=list)
    profile_title: Optional[str] = None
    profile: List[Row] = field(default_factory=list)
    custom_metrics: List[Row] = field(default_factory=list)
    details: Optional[Table] = None
    activity: Optional[Table] = None
    entities: List[EntityList] = field(default_factory=list)
    insights: List[Row] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any((
            self.summary, self.status_breakdown, self.priority_breakdown, self.profile,
            self.custom_metrics, self.details, self.activity, self.entities, self.insights,
        ))


def _structured_text(value: Any) -> str:
    """Lists comma-joined, mappings as JSON, numbers as-is."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    if value is None:
        return "N/A"
    return str(value)


def _numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def summary_rows(mapping: Any) -> List[Row]:
    if not isinstance(mapping, dict):
        return []
    rows = []
    for key, value in mapping.items():
        if is_time_key(key) and _numeric(value):
            text = format_duration(value)
        else:
            text = format_value(value)
        rows.append((prettify_key(key), text))
    return rows


def profile_rows(mapping: Any) -> List[Row]:
    if not isinstance(mapping, dict):
        return []
    rows = []
    for key, value in mapping.items():
        if is_time_key(key) and _numeric(value):
            text = format_duration(value)
        else:
            text = _structured_text(value)
        rows.append((prettify_key(key), text))
    return rows


def breakdown_rows(items: Any, label_key: str) -> List[BreakdownRow]:
    if not isinstance(items, list):
        return []
    color_of = status_color if label_key == "status" else priority_color
    rows = []
    for item in items:
        if not isinstance(item, dict):
            continue
        label = item.get(label_key)
        pct = item.get("percentage")
        rows.append(BreakdownRow(
            label=str(label) if label is not None else "N/A",
            count=item.get("count", 0),
            percentage=float(pct) if _numeric(pct) else None,
            color=color_of(label),
        ))
    return rows


def _cell(column: str, value: Any) -> Cell:
    lowered = column.lower()
    if "status" in lowered:
        return Cell(_structured_text(value), status_color(value))
    if "priority" in lowered:
        return Cell(_structured_text(value), priority_color(value))
    if "date" in lowered:
        return Cell(format_date(value))
    if value is None or value == "":
        return Cell("N/A")
    return Cell(_structured_text(value))


def build_table(rows: Any) -> Optional[Table]:
    """Tabular section; columns come from the first row."""
    if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
        return None
    columns = list(rows[0].keys())
    body = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        body.append([_cell(col, row.get(col)) for col in columns])
    return Table(columns=[prettify_key(c) for c in columns], rows=body)


def build_report_view(record: Dict[str, Any]) -> ReportView:
    record = record or {}
    body = report_body(record)
    report_type = record.get("type")
    status = record.get("status")

    view = ReportView(
        title=report_title(record) or "Untitled report",
        type=type_display(report_type),
        target=report_target(record),
        created_by=_structured_text(report_creator(record)),
        created_at=format_date(record.get("createdAt")),
        status=str(status) if status else None,
        status_color=status_color(status),
        description=str(record.get("description") or ""),
    )

    filters_applied = record.get("filtersApplied") or body.get("filtersApplied")
    if isinstance(filters_applied, dict):
        view.filters_applied = [(prettify_key(k), _structured_text(v)) for k, v in filters_applied.items()]

    view.summary = summary_rows(body.get("summary"))
    view.status_breakdown = breakdown_rows(body.get("statusBreakdown"), "status")
    view.priority_breakdown = breakdown_rows(body.get("priorityBreakdown"), "priority")

    if isinstance(body.get("userProfile"), dict):
        view.profile_title = "User Profile"
        view.profile = profile_rows(body["userProfile"])
    elif isinstance(body.get("departmentProfile"), dict):
        view.profile_title = "Department Profile"
        view.profile = profile_rows(body["departmentProfile"])

    if report_type == "custom":
        view.custom_metrics = summary_rows(body.get("customMetrics"))
        for key in ENTITY_KEYS:
            items = body.get(key)
            if isinstance(items, list) and items:
                view.entities.append(EntityList(
                    name=key,
                    total=len(items),
                    items=[i for i in items[:ENTITY_PREVIEW_LIMIT] if isinstance(i, dict)],
                ))

    view.details = build_table(body.get("details"))
    view.activity = build_table(body.get("activity"))
    view.insights = insight_rows(body.get("insights") or {})
    return view
