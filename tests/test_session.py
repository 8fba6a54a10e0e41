from unittest.mock import MagicMock

from conftest import failed, ok

from ticketdesk.session import (
    SESSION_KEY,
    ActorContext,
    SessionContext,
    department_id_of,
    get_session,
    is_logged_in,
    login,
    logout,
)


def _auth_api(response):
    auth_api = MagicMock()
    auth_api.login.return_value = response
    auth_api.logout.return_value = ok(None, method="POST")
    return auth_api


def test_login_success():
    session = SessionContext()
    auth_api = _auth_api(ok({"token": "t-1", "user": {"id": 5, "role": "admin", "departmentId": 2}}, method="POST"))
    assert login(auth_api, session, " ann@example.com ", "secret") is None
    auth_api.login.assert_called_once_with("ann@example.com", "secret")
    auth_api.client.set_token.assert_called_once_with("t-1")
    assert session.is_authenticated
    assert session.actor.is_admin
    assert session.actor.department_id == 2


def test_login_failure():
    session = SessionContext()
    auth_api = _auth_api(failed(401, method="POST"))
    assert login(auth_api, session, "ann@example.com", "wrong") == "Invalid email or password."
    assert not session.is_authenticated


def test_login_server_error_and_malformed_answer():
    session = SessionContext()
    assert login(_auth_api(failed(502)), session, "a@b.c", "x") == "Login failed. Please try again."
    assert login(_auth_api(ok({"token": "t"})), session, "a@b.c", "x") == "Login failed. Please try again."
    assert session.actor is None


def test_login_requires_credentials():
    auth_api = _auth_api(ok({}))
    assert login(auth_api, SessionContext(), "  ", "x") == "Email and password are required."
    assert login(auth_api, SessionContext(), "a@b.c", "") == "Email and password are required."
    auth_api.login.assert_not_called()


def test_logout_runs_teardown_and_clears_token():
    session = SessionContext()
    session.start({"id": 1, "role": "employee"}, "tok")
    calls = []
    session.on_teardown(lambda: calls.append("reset"))
    auth_api = _auth_api(ok({}))
    logout(auth_api, session)
    auth_api.logout.assert_called_once_with()
    auth_api.client.set_token.assert_called_once_with(None)
    assert calls == ["reset"]
    assert session.actor is None
    assert session.token is None


def test_teardown_callbacks_registered_once_and_kept():
    session = SessionContext()
    calls = []

    def callback():
        calls.append(1)

    session.on_teardown(callback)
    session.on_teardown(callback)
    session.end()
    session.end()
    assert calls == [1, 1]


def test_department_id_variants():
    assert department_id_of({"departmentId": "d1"}) == "d1"
    assert department_id_of({"department_id": 3}) == 3
    assert department_id_of({"department": {"id": "d9", "name": "IT"}}) == "d9"
    assert department_id_of({"department": "IT"}) is None
    assert department_id_of({}) is None


def test_actor_roles_and_name():
    head = ActorContext.from_user({"id": 1, "role": "department_head", "firstName": "Dana", "lastName": "Lee"})
    assert head.name == "Dana Lee"
    assert head.can_manage_reports
    assert not head.is_admin

    employee = ActorContext.from_user({"id": 2, "role": "employee"})
    assert not employee.can_manage_reports
    assert employee.to_user_dict()["id"] == 2


def test_session_state_helpers():
    state = {}
    session = get_session(state)
    assert state[SESSION_KEY] is session
    assert get_session(state) is session
    assert not is_logged_in(state)
    session.start({"id": 1}, "tok")
    assert is_logged_in(state)
