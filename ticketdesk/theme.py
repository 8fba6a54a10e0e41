import html
import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

CHIP_COLORS = ("default", "primary", "secondary", "success", "warning", "info", "error")


def set_theme(
    page_title: str = "TicketDesk",
    page_icon: str = "🎫",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
):
    """Configure the Streamlit page and inject the TicketDesk CSS.

    Safe to call once at the top of each page. Streamlit only honours the
    first set_page_config per run; the CSS is injected every time.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # set_page_config can only be called once per run
        pass

    theme_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "theme.css")
    try:
        with open(theme_file, "r", encoding="utf-8") as f:
            st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        st.error(f"Theme file not found at {theme_file}.")


def chip(text, color="default"):
    """HTML for a small colored label; ``color`` is one of the mapper's color tags."""
    if color not in CHIP_COLORS:
        color = "default"
    return f'<span class="td-chip td-chip-{color}">{html.escape(str(text))}</span>'


def kpi(label, value):
    return (
        '<div class="td-kpi">'
        f'<div class="td-kpi-label">{html.escape(str(label))}</div>'
        f'<div class="td-kpi-value">{html.escape(str(value))}</div>'
        "</div>"
    )
