"""Report store/controller.

Owns the local view of the report collection for one user session and
mediates every backend round-trip for the Reports page. Operations never
raise to the caller: failures are recorded in ``error`` and in the
transient ``message``/``message_severity`` notification.

Streamlit reruns a page script per interaction, so one controller is kept
per browser session and its flags (``is_loading_reports``,
``is_creating_report``, ``deleting_report_id``, ``report_loading``) are what
the page uses to disable controls while a request is in flight.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ticketdesk.api.client import failure_message
from ticketdesk.api.endpoints import DepartmentsApi, ReportsApi, UsersApi
from ticketdesk.config import TicketDeskConfig, get_config
from ticketdesk.session import ActorContext, SessionContext, department_id_of

from .dedup import dedupe_reports, same_key_set
from .filters import ReportFilters, ReportTab, apply_filters, tab_reports
from .models import (
    DEFAULT_EXPORT_FORMAT,
    EXPORT_FORMATS,
    NewReportForm,
    ReportDownload,
    merge_detail,
    parse_detail_response,
    same_id,
)
from .presentation import default_download_filename
from .validation import FieldError, validate_new_report

logger = logging.getLogger(__name__)

SEVERITIES = ("success", "error", "info", "warning")

MISSING_DEPARTMENT = "User information not available. Please refresh the page."


@dataclass(frozen=True)
class Notification:
    text: str
    severity: str
    created_at: datetime


def build_create_payload(
    form: NewReportForm,
    department_id: Any,
    selected_user_id: Any = None,
    selected_department_id: Any = None,
) -> Dict[str, Any]:
    """Request body for report creation.

    ``userId`` is only sent for user reports; ``selectedDepartmentId`` is
    never sent for department or ticket reports.
    """
    parameters = dict(form.parameters)
    parameters["departmentId"] = department_id
    if form.type == "user" and selected_user_id:
        parameters["userId"] = selected_user_id
    if form.type not in ("department", "ticket") and selected_department_id:
        parameters["selectedDepartmentId"] = selected_department_id
    return {
        "name": form.title.strip(),
        "description": form.description or "",
        "type": form.type,
        "parameters": parameters,
    }


class ReportController:
    def __init__(
        self,
        reports_api: ReportsApi,
        session: SessionContext,
        *,
        users_api: Optional[UsersApi] = None,
        departments_api: Optional[DepartmentsApi] = None,
        config: Optional[TicketDeskConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.api = reports_api
        self.session = session
        self.users_api = users_api
        self.departments_api = departments_api
        self.config = config or get_config()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._view_generation = 0

        self.reset()
        session.on_teardown(self.reset)

    def reset(self) -> None:
        """Drop all per-user state (called on logout)."""
        self.reports: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.field_errors: Dict[str, str] = {}
        self.notification: Optional[Notification] = None

        self.is_loading_reports = False
        self.is_creating_report = False
        self.deleting_report_id: Any = None
        self.report_loading = False

        self.new_report_dialog_open = False
        self.new_report = NewReportForm.initial()
        self.selected_user_id: Any = ""
        self.selected_department_id: Any = ""

        self.view_dialog_open = False
        self.selected_report: Optional[Dict[str, Any]] = None
        self.report_data: Optional[Dict[str, Any]] = None
        self._view_generation += 1

        self.filters = ReportFilters()
        self.active_tab = ReportTab.ALL

        self.users: List[Dict[str, Any]] = []
        self.departments: List[Dict[str, Any]] = []

    @property
    def actor(self) -> Optional[ActorContext]:
        return self.session.actor

    @property
    def can_manage_reports(self) -> bool:
        return bool(self.actor and self.actor.can_manage_reports)

    # ---------------- Loading ----------------

    def load_reports(self) -> None:
        """Fetch, deduplicate and store the report collection.

        A call made while another load is still in flight returns at once.
        The stored list is only replaced when the set of distinct reports
        changed, so an unchanged reload keeps the same list object.
        """
        with self._lock:
            if self.is_loading_reports:
                logger.debug("Report load already in flight; skipping")
                return
            self.is_loading_reports = True
            self.loading = True

        try:
            resp = self.api.list_reports()
            if not resp.ok:
                logger.warning("Loading reports failed: %s", resp.error, extra={"action": "load_reports"})
                self.error = "Failed to load reports."
                return

            data = resp.data if isinstance(resp.data, list) else []
            unique = dedupe_reports(data)
            if not same_key_set(self.reports, unique):
                self.reports = unique
            self.error = None
            logger.info(
                "Loaded %d reports (%d after dedup)", len(data), len(unique),
                extra={"action": "load_reports"},
            )
        finally:
            with self._lock:
                self.loading = False
                self.is_loading_reports = False

    def load_admin_data(self) -> None:
        """Users of the actor's department and the department list for the creation form."""
        if self.users_api is None or self.departments_api is None:
            return
        actor = self.actor
        if actor is None:
            return

        users_resp = self.users_api.list()
        departments_resp = self.departments_api.list()
        if not users_resp.ok or not departments_resp.ok:
            logger.warning(
                "Loading admin data failed: users=%s departments=%s",
                users_resp.error, departments_resp.error,
            )
            return

        users = users_resp.data if isinstance(users_resp.data, list) else []
        users = [
            u for u in users
            if isinstance(u, dict) and same_id(department_id_of(u), actor.department_id)
        ]
        if actor.id is not None and not any(same_id(u.get("id"), actor.id) for u in users):
            users.insert(0, actor.to_user_dict())

        departments = departments_resp.data if isinstance(departments_resp.data, list) else []
        self.users = users
        self.departments = [d for d in departments if isinstance(d, dict)]

    # ---------------- Creation ----------------

    def open_new_report_dialog(self) -> None:
        self.new_report = NewReportForm.initial(self.departments)
        self.field_errors = {}
        self.new_report_dialog_open = True

    def close_new_report_dialog(self) -> None:
        self.new_report_dialog_open = False
        self.new_report = NewReportForm.initial(self.departments)
        self.selected_user_id = ""
        self.selected_department_id = ""
        self.field_errors = {}

    def update_new_report(self, **changes: Any) -> NewReportForm:
        """Apply form edits; ``parameters`` is merged rather than replaced."""
        form = self.new_report.copy()
        parameters = changes.pop("parameters", None)
        for name, value in changes.items():
            if not hasattr(form, name):
                raise AttributeError(f"Unknown report form field: {name}")
            setattr(form, name, value)
        if parameters:
            form.parameters.update(parameters)
        self.new_report = form
        return form

    def _validate(self) -> List[FieldError]:
        errors = validate_new_report(self.new_report, self.selected_user_id)
        department_id = self.actor.department_id if self.actor else None
        if department_id in (None, ""):
            errors.append(FieldError("departmentId", MISSING_DEPARTMENT))
        return errors

    def create_report(self) -> bool:
        """Validate the creation form, submit it and reload on success."""
        if self.is_creating_report:
            return False
        self.is_creating_report = True
        self.error = None
        self.field_errors = {}
        try:
            errors = self._validate()
            if errors:
                self.field_errors = {e.field: e.message for e in errors}
                self.error = " ".join(e.message for e in errors)
                return False

            payload = build_create_payload(
                self.new_report,
                self.actor.department_id,
                self.selected_user_id,
                self.selected_department_id,
            )
            resp = self.api.create_report(payload)
            if not resp.ok:
                message = failure_message(resp, "create report")
                logger.warning("Creating report failed: %s", message, extra={"action": "create_report"})
                self.error = message
                self.set_message(message, "error")
                return False

            logger.info("Report created: %s", payload["name"], extra={"action": "create_report"})
            self.load_reports()
            self.set_message("Report generated successfully", "success")
            self.close_new_report_dialog()
            return True
        finally:
            self.is_creating_report = False

    def edit_report(self, report: Dict[str, Any]) -> None:
        # TODO: wire to an update endpoint once the backend defines what a report edit may change.
        logger.info("Editing reports is not supported", extra={"report_id": (report or {}).get("id")})

    # ---------------- Deletion ----------------

    def delete_report(self, report_id: Any) -> bool:
        with self._lock:
            if self.deleting_report_id is not None:
                logger.debug("Delete of report %s already in flight; ignoring", self.deleting_report_id)
                return False
            self.deleting_report_id = report_id
        self.error = None
        try:
            resp = self.api.delete_report(report_id)
            if not resp.ok:
                logger.warning(
                    "Deleting report failed: %s", resp.error,
                    extra={"action": "delete_report", "report_id": report_id},
                )
                self.error = "Failed to delete report."
                self.set_message("Failed to delete report.", "error")
                return False
            self.load_reports()
            self.set_message("Report deleted successfully", "success")
            return True
        finally:
            with self._lock:
                self.deleting_report_id = None

    # ---------------- Viewing ----------------

    def view_report(self, report: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Open the detail view and fetch the full report body.

        A result that arrives after the view was closed or switched to
        another report is dropped.
        """
        self._view_generation += 1
        generation = self._view_generation
        self.selected_report = report
        self.report_data = None
        self.view_dialog_open = True
        self.report_loading = True
        report_id = (report or {}).get("id")
        try:
            resp = self.api.get_report(report_id)
            if generation != self._view_generation:
                logger.info("Discarding stale detail for report %s", report_id, extra={"report_id": report_id})
                return None
            if not resp.ok:
                logger.warning("Loading report details failed: %s", resp.error, extra={"report_id": report_id})
                self.error = "Failed to load report details."
                return None
            detail = parse_detail_response(resp.data)
            if detail is None:
                self.error = "Failed to load report details."
                return None
            self.report_data = merge_detail(detail)
            return self.report_data
        finally:
            if generation == self._view_generation:
                self.report_loading = False

    def close_view_dialog(self) -> None:
        self._view_generation += 1
        self.view_dialog_open = False
        self.selected_report = None
        self.report_data = None
        self.report_loading = False

    # ---------------- Export ----------------

    def download_report(
        self,
        report: Dict[str, Any],
        filename: Optional[str] = None,
        fmt: str = DEFAULT_EXPORT_FORMAT,
    ) -> Optional[ReportDownload]:
        if fmt not in EXPORT_FORMATS:
            self.error = f"Unsupported export format: {fmt}."
            return None
        report_id = (report or {}).get("id")
        resp = self.api.export_report(report_id, fmt)
        if not resp.ok or resp.content is None:
            logger.warning(
                "Downloading report failed: %s", resp.error,
                extra={"action": "download_report", "report_id": report_id},
            )
            self.error = "Failed to download report."
            return None
        _ext, mime_type = EXPORT_FORMATS[fmt]
        return ReportDownload(
            filename=filename or default_download_filename(report, fmt),
            content=resp.content,
            mime_type=mime_type,
        )

    # ---------------- Filters and tabs ----------------

    def set_filters(self, **changes: Any) -> ReportFilters:
        self.filters = replace(self.filters, **changes)
        return self.filters

    def clear_filters(self) -> None:
        self.filters = ReportFilters()

    @property
    def filtered_reports(self) -> List[Dict[str, Any]]:
        return apply_filters(self.reports, self.filters)

    def reports_for_tab(self, tab: Optional[ReportTab] = None, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        return tab_reports(
            self.reports,
            tab or self.active_tab,
            self.actor,
            now=now or self._clock(),
            recent_days=self.config.recent_days,
        )

    def visible_reports(self, tab: Optional[ReportTab] = None, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Reports of a tab narrowed by the active filters."""
        return apply_filters(self.reports_for_tab(tab, now), self.filters)

    # ---------------- Notifications ----------------

    def set_message(self, text: Optional[str], severity: str = "success") -> None:
        if not text:
            self.notification = None
            return
        if severity not in SEVERITIES:
            severity = "info"
        self.notification = Notification(text=text, severity=severity, created_at=self._clock())

    def clear_message(self) -> None:
        self.notification = None

    def current_message(self, now: Optional[datetime] = None) -> Optional[Notification]:
        """The pending notification, or None once it has expired."""
        if self.notification is None:
            return None
        lifetime = self.config.message_seconds
        if lifetime > 0:
            now = now or self._clock()
            if now - self.notification.created_at >= timedelta(seconds=lifetime):
                self.notification = None
        return self.notification

    @property
    def message(self) -> Optional[str]:
        return self.notification.text if self.notification else None

    @property
    def message_severity(self) -> Optional[str]:
        return self.notification.severity if self.notification else None
