"""Client-side report filtering and tab segmentation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from ticketdesk.session import ActorContext

from .models import parse_timestamp, report_parameters, same_id

ALL = "all"

DateBound = Union[None, str, date, datetime]


@dataclass(frozen=True)
class ReportFilters:
    type: str = ALL
    status: str = ALL
    start_date: DateBound = None
    end_date: DateBound = None

    @property
    def is_active(self) -> bool:
        return (
            (self.type or ALL) != ALL
            or (self.status or ALL) != ALL
            or bool(self.start_date)
            or bool(self.end_date)
        )


def _is_date_only(value: DateBound) -> bool:
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and len(value.strip()) == 10


def _lower_bound(value: DateBound) -> Optional[datetime]:
    return parse_timestamp(value) if value else None


def _upper_bound(value: DateBound) -> Optional[datetime]:
    if not value:
        return None
    parsed = parse_timestamp(value)
    if parsed is not None and _is_date_only(value):
        # a bare date covers the whole day
        parsed = datetime.combine(parsed.date(), time.max, tzinfo=parsed.tzinfo)
    return parsed


def matches_type(report: Dict[str, Any], wanted: str) -> bool:
    if not wanted or wanted == ALL:
        return True
    return str(report.get("type") or "").lower() == wanted.lower()


def matches_status(report: Dict[str, Any], wanted: str) -> bool:
    if not wanted or wanted == ALL:
        return True
    return report.get("status") == wanted


def matches_date_range(report: Dict[str, Any], start: DateBound = None, end: DateBound = None) -> bool:
    lower = _lower_bound(start)
    upper = _upper_bound(end)
    if lower is None and upper is None:
        return True
    created = parse_timestamp(report.get("createdAt"))
    if created is None:
        return False
    if lower is not None and created < lower:
        return False
    if upper is not None and created > upper:
        return False
    return True


def apply_filters(reports: Iterable[Dict[str, Any]], filters: ReportFilters) -> List[Dict[str, Any]]:
    return [
        r for r in reports
        if matches_type(r, filters.type)
        and matches_status(r, filters.status)
        and matches_date_range(r, filters.start_date, filters.end_date)
    ]


def filter_by_actor(reports: Iterable[Dict[str, Any]], actor: Optional[ActorContext]) -> List[Dict[str, Any]]:
    """Restrict reports to what the actor's role may see."""
    reports = list(reports)
    if actor is None or actor.is_admin:
        return reports
    if actor.is_department_head:
        return [
            r for r in reports
            if same_id(report_parameters(r).get("departmentId"), actor.department_id)
            or same_id(r.get("createdBy"), actor.id)
        ]
    return [r for r in reports if same_id(r.get("createdBy"), actor.id)]


class ReportTab(str, Enum):
    ALL = "all"
    RECENT = "recent"
    DEPARTMENT_SUMMARY = "department-summary"

    @property
    def label(self) -> str:
        return {
            ReportTab.ALL: "All Reports",
            ReportTab.RECENT: "Recent",
            ReportTab.DEPARTMENT_SUMMARY: "Department Summary",
        }[self]


def tab_reports(
    reports: Iterable[Dict[str, Any]],
    tab: Union[ReportTab, str],
    actor: Optional[ActorContext],
    *,
    now: Optional[datetime] = None,
    recent_days: int = 7,
) -> List[Dict[str, Any]]:
    visible = filter_by_actor(reports, actor)
    try:
        tab = ReportTab(tab)
    except ValueError:
        return visible

    if tab is ReportTab.RECENT:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        cutoff = now - timedelta(days=recent_days)
        recent = []
        for r in visible:
            created = parse_timestamp(r.get("createdAt"))
            if created is not None and created >= cutoff:
                recent.append(r)
        return recent
    if tab is ReportTab.DEPARTMENT_SUMMARY:
        return [r for r in visible if r.get("type") == "department"]
    return visible
