import streamlit as st

from ticketdesk.app_state import get_auth_api
from ticketdesk.config import get_config
from ticketdesk.logging_config import setup_logging
from ticketdesk.session import get_session, login, logout
from ticketdesk.theme import set_theme

config = get_config()
setup_logging(config.log_level, config.log_json)
set_theme()

session = get_session(st.session_state)
auth_api = get_auth_api(st.session_state)

st.markdown(
    '<div class="td-hero"><h1>TicketDesk</h1>'
    "<p>Tickets, tasks and the reports that summarise them.</p></div>",
    unsafe_allow_html=True,
)

if session.is_authenticated:
    actor = session.actor
    st.success(f"Signed in as {actor.name or actor.email or actor.id} ({actor.role or 'user'}).")
    st.markdown("Use the sidebar to open **Reports**.")
    if st.button("Log out"):
        logout(auth_api, session)
        st.rerun()
else:
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        error = login(auth_api, session, email, password)
        if error:
            st.error(error)
        else:
            st.rerun()

with st.sidebar.expander("Connection"):
    st.json(config.to_dict())
