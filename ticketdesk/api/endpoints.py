"""Endpoint groups of the TicketDesk backend used by the front end."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .client import ApiClient, ApiResponse


class ReportsApi:
    """Report listing, detail, creation, deletion and export.

    The backend scopes ``list_reports`` by the caller's role and department.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def list_reports(self) -> ApiResponse:
        return self.client.get("/analytics/reports")

    def get_report(self, report_id: Any) -> ApiResponse:
        return self.client.get(f"/analytics/reports/{report_id}")

    def create_report(self, payload: Dict[str, Any]) -> ApiResponse:
        return self.client.post("/analytics/reports", json_body=payload)

    def delete_report(self, report_id: Any) -> ApiResponse:
        return self.client.delete(f"/analytics/reports/{report_id}")

    def export_report(self, report_id: Any, fmt: str) -> ApiResponse:
        return self.client.get(
            f"/analytics/reports/{report_id}/export",
            params={"format": fmt},
            headers={"Accept": "*/*"},
        )


class AuthApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def login(self, email: str, password: str) -> ApiResponse:
        return self.client.post("/auth/login", json_body={"email": email, "password": password})

    def logout(self) -> ApiResponse:
        return self.client.post("/auth/logout")


class UsersApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def list(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.client.get("/users", params=params)


class DepartmentsApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def list(self) -> ApiResponse:
        return self.client.get("/departments")
