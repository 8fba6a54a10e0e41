from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

_MAX_TEXT = 2000


@dataclass(frozen=True)
class ApiResponse:
    ok: bool
    status_code: int
    url: str
    method: str
    data: Any = None
    text: Optional[str] = None
    error: Optional[str] = None
    content: Optional[bytes] = None
    content_type: Optional[str] = None


class ApiClient:
    """Client for the TicketDesk REST backend.

    ``request`` never raises; transport errors come back as a failed
    ``ApiResponse`` with ``status_code`` 0.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        verify_ssl: bool = True,
        timeout_seconds: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.verify_ssl = bool(verify_ssl)
        self.timeout_seconds = int(timeout_seconds)

        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "ApiClient":
        return cls(
            base_url=config.api_base_url,
            token=config.api_token,
            verify_ssl=config.verify_ssl,
            timeout_seconds=config.timeout_seconds,
        )

    def set_token(self, token: Optional[str]) -> None:
        self.token = token or None

    def _build_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {
            "Accept": "application/json",
        }
        if self.token:
            merged["Authorization"] = f"Bearer {self.token}"
        if headers:
            merged.update({k: str(v) for k, v in headers.items()})
        return merged

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout_seconds: Optional[int] = None,
    ) -> ApiResponse:
        method_u = (method or "GET").upper().strip()
        path = path or ""
        if not path.startswith("/"):
            path = "/" + path
        url = f"{self.base_url}{path}"

        try:
            resp = self._session.request(
                method_u,
                url,
                params=params,
                json=json_body,
                headers=self._build_headers(headers),
                verify=self.verify_ssl,
                timeout=(timeout_seconds or self.timeout_seconds),
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method_u, url, exc)
            return ApiResponse(
                ok=False,
                status_code=0,
                url=url,
                method=method_u,
                error=str(exc),
            )

        content_type = (resp.headers.get("Content-Type") or "").lower()
        content = resp.content
        text = None
        parsed: Any = None

        if "application/json" in content_type:
            try:
                parsed = resp.json()
            except ValueError:
                parsed = None
            text = resp.text
        elif content_type.startswith("text/") or not content_type:
            text = resp.text
            # Some endpoints answer text/plain even when the body is JSON.
            if text:
                try:
                    parsed = json.loads(text)
                except ValueError:
                    parsed = None

        status = int(resp.status_code)
        if 200 <= status < 300:
            return ApiResponse(
                ok=True,
                status_code=status,
                url=url,
                method=method_u,
                data=parsed if parsed is not None else text,
                content=content,
                content_type=content_type or None,
            )

        logger.warning("%s %s returned HTTP %s", method_u, url, status)
        error_detail: Any = None
        if isinstance(parsed, dict):
            error_detail = parsed
        elif text:
            error_detail = text[:_MAX_TEXT]

        return ApiResponse(
            ok=False,
            status_code=status,
            url=url,
            method=method_u,
            data=parsed,
            text=text[:_MAX_TEXT] if text else None,
            error=str(error_detail) if error_detail is not None else f"HTTP {status}",
            content_type=content_type or None,
        )

    def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("DELETE", path, **kwargs)


def failure_message(response: Optional[ApiResponse], action: str) -> str:
    """Turn a failed response into the text shown to the user.

    Structured validation errors (``{"errors": [{"msg": ...}]}``) are joined,
    a plain ``{"error": "..."}`` string is shown verbatim, anything else
    falls back to a generic message.
    """
    generic = f"Failed to {action}."
    if response is None or not isinstance(response.data, dict):
        return generic

    errors = response.data.get("errors")
    if isinstance(errors, list) and errors:
        messages = []
        for item in errors:
            if isinstance(item, dict):
                msg = item.get("msg") or item.get("message")
            else:
                msg = item
            if msg:
                messages.append(str(msg))
        if messages:
            return f"Validation errors: {', '.join(messages)}"

    error = response.data.get("error")
    if isinstance(error, str) and error.strip():
        return error
    return generic
