from conftest import make_config

from ticketdesk.app_state import get_api_client, get_report_controller
from ticketdesk.session import get_session


def test_objects_are_kept_per_session_state():
    state = {}
    config = make_config()
    controller = get_report_controller(state, config)
    assert get_report_controller(state, config) is controller
    assert controller.config is config
    assert get_api_client(state, config) is controller.api.client


def test_client_follows_session_token():
    state = {}
    config = make_config()
    client = get_api_client(state, config)
    assert client.token is None
    get_session(state).start({"id": 1, "role": "admin"}, "tok-2")
    assert get_api_client(state, config).token == "tok-2"
    assert client.base_url == "http://backend.test/api"
