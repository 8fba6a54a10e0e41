from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ticketdesk.api.client import ApiResponse
from ticketdesk.config import TicketDeskConfig
from ticketdesk.reports.controller import ReportController
from ticketdesk.session import SessionContext


def ok(data=None, content=None, method="GET"):
    return ApiResponse(ok=True, status_code=200, url="http://backend.test", method=method, data=data, content=content)


def failed(status=500, data=None, error="boom", method="GET"):
    return ApiResponse(ok=False, status_code=status, url="http://backend.test", method=method, data=data, error=error)


def make_config(**overrides) -> TicketDeskConfig:
    values = dict(
        api_base_url="http://backend.test/api",
        api_token=None,
        verify_ssl=True,
        timeout_seconds=5,
        message_seconds=6,
        recent_days=7,
        log_level="INFO",
        log_json=False,
    )
    values.update(overrides)
    return TicketDeskConfig(**values)


class FakeReportsApi:
    """In-memory stand-in for ReportsApi that records every call."""

    def __init__(self, reports=None):
        self.reports = list(reports or [])
        self.calls = []
        self.list_response = None
        self.detail_response = None
        self.create_response = None
        self.delete_response = None
        self.export_response = None
        self.on_list = None
        self.on_delete = None
        self.on_get = None

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)

    def list_reports(self):
        self.calls.append(("list",))
        if self.on_list:
            self.on_list()
        return self.list_response or ok([dict(r) for r in self.reports])

    def get_report(self, report_id):
        self.calls.append(("get", report_id))
        if self.on_get:
            self.on_get()
        return self.detail_response or ok({"id": report_id})

    def create_report(self, payload):
        self.calls.append(("create", payload))
        return self.create_response or ok({"id": "new"}, method="POST")

    def delete_report(self, report_id):
        self.calls.append(("delete", report_id))
        if self.on_delete:
            self.on_delete()
        return self.delete_response or ok(None, method="DELETE")

    def export_report(self, report_id, fmt):
        self.calls.append(("export", report_id, fmt))
        return self.export_response or ok(None, content=b"%PDF-1.4")


class FakeListApi:
    def __init__(self, response):
        self.response = response

    def list(self, params=None):
        return self.response


NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session():
    s = SessionContext()
    s.start({"id": "u1", "role": "department_head", "departmentId": "d1", "name": "Dana"}, "token-1")
    return s


@pytest.fixture
def api():
    return FakeReportsApi()


@pytest.fixture
def controller(api, session):
    return ReportController(api, session, config=make_config(), clock=lambda: NOW)
