from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .models import REPORT_TYPES, NewReportForm

CUSTOM_REPORT_FIELDS: Dict[str, List[Dict[str, str]]] = {
    "taskMetrics": [
        {"key": "totalTasks", "label": "Total Tasks"},
        {"key": "pendingTasks", "label": "Pending Tasks"},
        {"key": "inProgressTasks", "label": "In Progress Tasks"},
        {"key": "completedTasks", "label": "Completed Tasks"},
        {"key": "overdueTasks", "label": "Overdue Tasks"},
        {"key": "taskCompletionRate", "label": "Task Completion Rate"},
        {"key": "averageTaskCompletionTime", "label": "Average Task Completion Time"},
    ],
    "ticketMetrics": [
        {"key": "totalTickets", "label": "Total Tickets"},
        {"key": "pendingTickets", "label": "Pending Tickets"},
        {"key": "inProgressTickets", "label": "In Progress Tickets"},
        {"key": "completedTickets", "label": "Completed Tickets"},
        {"key": "declinedTickets", "label": "Declined Tickets"},
        {"key": "ticketResolutionRate", "label": "Ticket Resolution Rate"},
        {"key": "averageTicketResolutionTime", "label": "Average Ticket Resolution Time"},
        {"key": "priorityDistribution", "label": "Priority Distribution"},
    ],
}


def all_custom_report_fields() -> List[Dict[str, str]]:
    return [f for fields in CUSTOM_REPORT_FIELDS.values() for f in fields]


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


def validate_new_report(form: NewReportForm, selected_user_id: Optional[Any] = None) -> List[FieldError]:
    """Check a report creation form before anything is sent to the backend."""
    errors: List[FieldError] = []

    if not (form.title or "").strip():
        errors.append(FieldError("title", "Report name is required."))

    if not form.type:
        errors.append(FieldError("type", "Report type is required."))
    elif form.type not in REPORT_TYPES:
        errors.append(FieldError("type", f"Unknown report type: {form.type}."))

    if form.type == "user" and selected_user_id in (None, ""):
        errors.append(FieldError("userId", "User selection is required for user reports."))

    if form.type == "custom" and not form.selected_fields:
        errors.append(FieldError("selectedFields", "At least one field must be selected for custom reports."))

    return errors
