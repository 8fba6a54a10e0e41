"""Per-browser-session wiring of the API client, session and controllers.

Streamlit re-executes page scripts on every interaction; the objects built
here are stored in ``st.session_state`` so they survive reruns.
"""

from __future__ import annotations

from typing import Any, MutableMapping, Optional

from ticketdesk.api import ApiClient, AuthApi, DepartmentsApi, ReportsApi, UsersApi
from ticketdesk.config import TicketDeskConfig, get_config
from ticketdesk.reports.controller import ReportController
from ticketdesk.session import SessionContext, get_session

CLIENT_KEY = "ticketdesk_api_client"
REPORTS_KEY = "ticketdesk_report_controller"


def get_api_client(session_state: MutableMapping[str, Any], config: Optional[TicketDeskConfig] = None) -> ApiClient:
    client = session_state.get(CLIENT_KEY)
    if client is None:
        client = ApiClient.from_config(config or get_config())
        session_state[CLIENT_KEY] = client
    session = get_session(session_state)
    if session.token and client.token != session.token:
        client.set_token(session.token)
    return client


def get_auth_api(session_state: MutableMapping[str, Any]) -> AuthApi:
    return AuthApi(get_api_client(session_state))


def get_report_controller(
    session_state: MutableMapping[str, Any],
    config: Optional[TicketDeskConfig] = None,
) -> ReportController:
    controller = session_state.get(REPORTS_KEY)
    if controller is None:
        config = config or get_config()
        client = get_api_client(session_state, config)
        session: SessionContext = get_session(session_state)
        controller = ReportController(
            ReportsApi(client),
            session,
            users_api=UsersApi(client),
            departments_api=DepartmentsApi(client),
            config=config,
        )
        session_state[REPORTS_KEY] = controller
    return controller
