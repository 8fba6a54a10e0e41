"""Report record helpers.

Report records come from the backend as plain dicts whose shape depends on
``type``; the helpers here read them without assuming optional keys exist.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

REPORT_TYPES = ("ticket", "task", "user", "department", "custom")

# format -> (file extension, MIME type)
EXPORT_FORMATS: Dict[str, tuple] = {
    "pdf": ("pdf", "application/pdf"),
    "excel": ("xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    "csv": ("csv", "text/csv"),
}

DEFAULT_EXPORT_FORMAT = "pdf"


def export_extension(fmt: str) -> str:
    ext, _mime = EXPORT_FORMATS.get(fmt, (fmt, None))
    return ext


def report_title(report: Dict[str, Any]) -> str:
    return str(report.get("title") or report.get("name") or "")


def report_body(report: Dict[str, Any]) -> Dict[str, Any]:
    body = report.get("data") or report.get("metrics") or {}
    return body if isinstance(body, dict) else {}


def report_parameters(report: Dict[str, Any]) -> Dict[str, Any]:
    params = report.get("parameters")
    return params if isinstance(params, dict) else {}


def report_creator(report: Dict[str, Any]) -> Any:
    creator = report.get("createdBy")
    if creator in (None, ""):
        creator = report.get("generatedBy")
    return creator


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------- Detail responses ----------------


@dataclass(frozen=True)
class FlatDetail:
    """Detail endpoint answered with the report record itself."""

    report: Dict[str, Any]


@dataclass(frozen=True)
class EnvelopeDetail:
    """Detail endpoint answered with ``{"report": {...}, "data": {...}}``."""

    report: Dict[str, Any]
    data: Optional[Dict[str, Any]] = None


DetailResponse = Union[FlatDetail, EnvelopeDetail]


def parse_detail_response(payload: Any) -> Optional[DetailResponse]:
    if not isinstance(payload, dict):
        return None
    if isinstance(payload.get("report"), dict):
        data = payload.get("data")
        return EnvelopeDetail(report=payload["report"], data=data if isinstance(data, dict) and data else None)
    return FlatDetail(report=payload)


def merge_detail(detail: DetailResponse) -> Dict[str, Any]:
    """Collapse a detail response into one report record.

    The computed body of an envelope becomes ``metrics``; ``filtersApplied``
    is taken from the body first, then from the report part.
    """
    if isinstance(detail, FlatDetail):
        return dict(detail.report)
    merged = dict(detail.report)
    if detail.data is None:
        return merged
    merged["metrics"] = detail.data
    merged["filtersApplied"] = detail.data.get("filtersApplied") or detail.report.get("filtersApplied")
    return merged


# ---------------- Creation form ----------------


def _initial_parameters(departments: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    first = (departments or [{}])[0] or {}
    return {
        "startDate": "",
        "endDate": "",
        "departmentId": first.get("id", ""),
        "userId": "",
        "selectedFields": [],
    }


@dataclass
class NewReportForm:
    title: str = ""
    description: str = ""
    type: str = "task"
    parameters: Dict[str, Any] = field(default_factory=_initial_parameters)

    @classmethod
    def initial(cls, departments: Optional[List[Dict[str, Any]]] = None) -> "NewReportForm":
        return cls(parameters=_initial_parameters(departments))

    @property
    def selected_fields(self) -> List[str]:
        fields = self.parameters.get("selectedFields") or []
        return list(fields) if isinstance(fields, (list, tuple)) else []

    def copy(self) -> "NewReportForm":
        return NewReportForm(
            title=self.title,
            description=self.description,
            type=self.type,
            parameters=copy.deepcopy(self.parameters),
        )


@dataclass(frozen=True)
class ReportDownload:
    filename: str
    content: bytes
    mime_type: str


def same_id(a: Any, b: Any) -> bool:
    """Compare backend ids that may arrive as int or str."""
    if a in (None, "") or b in (None, ""):
        return False
    return str(a) == str(b)
