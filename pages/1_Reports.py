import html
from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from ticketdesk.app_state import get_report_controller
from ticketdesk.reports import (
    CUSTOM_REPORT_FIELDS,
    ReportTab,
    build_report_view,
    export_filename,
    format_date,
    prettify_key,
    report_target,
    type_display,
)
from ticketdesk.reports.models import EXPORT_FORMATS, REPORT_TYPES, report_creator, report_title
from ticketdesk.session import is_logged_in
from ticketdesk.theme import chip, kpi, set_theme

set_theme(page_title="Reports", page_icon="📊")

if not is_logged_in(st.session_state):
    st.warning("Please sign in on the home page to view reports.")
    st.stop()

ctrl = get_report_controller(st.session_state)
actor = ctrl.actor

# Load once per sign-in; later loads happen after create/delete or on refresh.
loaded_for = (actor.id, ctrl.session.token)
if st.session_state.get("reports_loaded_for") != loaded_for:
    with st.spinner("Loading reports..."):
        ctrl.load_reports()
        if ctrl.can_manage_reports:
            ctrl.load_admin_data()
    st.session_state.reports_loaded_for = loaded_for


# ----- Header -----
head_l, head_r = st.columns([4, 1])
with head_l:
    st.title("📊 Reports")
    st.caption("Generate and manage comprehensive reports")
with head_r:
    st.write("")
    if st.button("➕ Generate Report", disabled=ctrl.loading or ctrl.is_creating_report, use_container_width=True):
        ctrl.open_new_report_dialog()
    if st.button("🔄 Refresh", disabled=ctrl.is_loading_reports, use_container_width=True):
        ctrl.load_reports()

if ctrl.error and not ctrl.new_report_dialog_open:
    st.error(ctrl.error)

note = ctrl.current_message()
if note:
    n_l, n_r = st.columns([12, 1])
    with n_l:
        getattr(st, note.severity, st.info)(note.text)
    with n_r:
        if st.button("✕", key="dismiss_message"):
            ctrl.clear_message()
            st.rerun()


# ----- New report form -----
def render_new_report_form():
    form = ctrl.new_report
    with st.container(border=True):
        st.subheader("Generate Report")
        title = st.text_input("Report name", value=form.title)
        description = st.text_area("Description", value=form.description, height=80)
        report_type = st.selectbox(
            "Report type",
            REPORT_TYPES,
            index=REPORT_TYPES.index(form.type) if form.type in REPORT_TYPES else 1,
            format_func=lambda t: f"{type_display(t).icon} {type_display(t).label}",
        )
        d_l, d_r = st.columns(2)
        with d_l:
            start = st.date_input("Start date", value=None, key="new_report_start")
        with d_r:
            end = st.date_input("End date", value=None, key="new_report_end")

        if report_type == "user":
            user_ids = [u.get("id") for u in ctrl.users]
            names = {u.get("id"): u.get("name") or u.get("email") or str(u.get("id")) for u in ctrl.users}
            if user_ids:
                ctrl.selected_user_id = st.selectbox(
                    "User", user_ids, format_func=lambda i: names.get(i, str(i)), key="new_report_user",
                )
            else:
                st.info("No users available in your department.")

        if report_type not in ("department", "ticket") and ctrl.departments and actor.is_admin:
            dept_ids = [""] + [d.get("id") for d in ctrl.departments]
            dept_names = {d.get("id"): d.get("name") or str(d.get("id")) for d in ctrl.departments}
            ctrl.selected_department_id = st.selectbox(
                "Department (optional)", dept_ids,
                format_func=lambda i: dept_names.get(i, "My department") if i else "My department",
                key="new_report_department",
            )

        selected_fields = form.selected_fields
        if report_type == "custom":
            st.markdown("**Fields to include**")
            picked = []
            for category, fields in CUSTOM_REPORT_FIELDS.items():
                labels = {f["key"]: f["label"] for f in fields}
                picked.extend(st.multiselect(
                    prettify_key(category),
                    list(labels),
                    default=[k for k in selected_fields if k in labels],
                    format_func=labels.get,
                    key=f"fields_{category}",
                ))
            selected_fields = picked

        for message in ctrl.field_errors.values():
            st.error(message)

        b_l, b_r, _ = st.columns([1, 1, 4])
        with b_l:
            submit = st.button("Generate", type="primary", disabled=ctrl.is_creating_report)
        with b_r:
            cancel = st.button("Cancel")

        if cancel:
            ctrl.close_new_report_dialog()
            st.rerun()
        if submit:
            ctrl.update_new_report(
                title=title,
                description=description,
                type=report_type,
                parameters={
                    "startDate": start.isoformat() if isinstance(start, date) else "",
                    "endDate": end.isoformat() if isinstance(end, date) else "",
                    "selectedFields": selected_fields,
                },
            )
            with st.spinner("Generating report..."):
                created = ctrl.create_report()
            if created:
                st.rerun()


if ctrl.new_report_dialog_open:
    render_new_report_form()


# ----- Filters -----
with st.expander("🔍 Filters", expanded=ctrl.filters.is_active):
    f1, f2, f3, f4 = st.columns(4)
    with f1:
        type_options = ["all"] + list(REPORT_TYPES)
        f_type = st.selectbox(
            "Type", type_options,
            index=type_options.index(ctrl.filters.type) if ctrl.filters.type in type_options else 0,
            format_func=lambda t: "All Types" if t == "all" else type_display(t).label,
        )
    with f2:
        statuses = ["all"] + sorted({str(r["status"]) for r in ctrl.reports if r.get("status")})
        f_status = st.selectbox(
            "Status", statuses,
            index=statuses.index(ctrl.filters.status) if ctrl.filters.status in statuses else 0,
            format_func=lambda s: "All Statuses" if s == "all" else s,
        )
    with f3:
        f_start = st.date_input("From", value=ctrl.filters.start_date or None, key="filter_start")
    with f4:
        f_end = st.date_input("To", value=ctrl.filters.end_date or None, key="filter_end")
    ctrl.set_filters(type=f_type, status=f_status, start_date=f_start, end_date=f_end)
    if st.button("Clear filters"):
        ctrl.clear_filters()
        for key in ("filter_start", "filter_end"):
            st.session_state.pop(key, None)
        st.rerun()


# ----- Report list -----
export_format = st.radio(
    "Export format", list(EXPORT_FORMATS), horizontal=True,
    format_func=lambda f: {"pdf": "PDF", "excel": "Excel", "csv": "CSV"}.get(f, f),
)


def render_report_row(report, tab):
    rid = report.get("id")
    display = type_display(report.get("type"))
    c_icon, c_title, c_target, c_by, c_created, c_actions = st.columns([0.5, 3, 1.5, 1.5, 1.8, 2.2])
    with c_icon:
        st.markdown(f"### {display.icon}")
    with c_title:
        st.markdown(f"**{report_title(report) or 'Untitled report'}**")
        st.markdown(chip(display.label, display.color), unsafe_allow_html=True)
    with c_target:
        st.write(report_target(report))
    with c_by:
        st.write(str(report_creator(report) or "N/A"))
    with c_created:
        st.write(format_date(report.get("createdAt")))
    with c_actions:
        a1, a2, a3 = st.columns(3)
        with a1:
            if st.button("👁️", key=f"view_{tab}_{rid}", help="View report"):
                ctrl.view_report(report)
        with a2:
            if st.button("⬇️", key=f"prep_{tab}_{rid}", help="Prepare download"):
                download = ctrl.download_report(report, export_filename(report, export_format), export_format)
                st.session_state[f"download_{rid}"] = download
        with a3:
            if ctrl.can_manage_reports and st.button(
                "🗑️", key=f"del_{tab}_{rid}", help="Delete report",
                disabled=ctrl.deleting_report_id is not None,
            ):
                st.session_state.confirm_delete_id = rid

        download = st.session_state.get(f"download_{rid}")
        if download is not None:
            st.download_button(
                "Save file", data=download.content, file_name=download.filename,
                mime=download.mime_type, key=f"save_{tab}_{rid}",
            )

    if st.session_state.get("confirm_delete_id") == rid:
        st.warning(f"Delete report '{report_title(report)}'? This cannot be undone.")
        y, n, _ = st.columns([1, 1, 6])
        with y:
            if st.button("Delete", key=f"confirm_{tab}_{rid}", type="primary"):
                ctrl.delete_report(rid)
                st.session_state.confirm_delete_id = None
                st.rerun()
        with n:
            if st.button("Cancel", key=f"cancel_{tab}_{rid}"):
                st.session_state.confirm_delete_id = None
                st.rerun()
    st.divider()


tabs = list(ReportTab)
for tab, container in zip(tabs, st.tabs([t.label for t in tabs])):
    with container:
        reports = ctrl.visible_reports(tab)
        if ctrl.loading:
            st.info("Loading reports...")
        elif not reports:
            st.markdown("#### No reports found")
            st.caption("Generate your first report to get started.")
        else:
            for report in reports:
                render_report_row(report, tab.value)


# ----- Report detail -----
def _rows_frame(rows):
    return pd.DataFrame(rows, columns=["Field", "Value"])


def _breakdown_chart(rows, title):
    frame = pd.DataFrame([{"label": r.label, "count": r.count} for r in rows])
    fig = px.bar(frame, x="label", y="count", title=title)
    fig.update_layout(height=280, margin=dict(l=10, r=10, t=40, b=10), xaxis_title="", yaxis_title="")
    st.plotly_chart(fig, use_container_width=True)


def _table_frame(table):
    return pd.DataFrame([[cell.text for cell in row] for row in table.rows], columns=table.columns)


def render_report_detail():
    record = ctrl.report_data or ctrl.selected_report or {}
    view = build_report_view(record)
    with st.container(border=True):
        t_l, t_r = st.columns([6, 1])
        with t_l:
            st.subheader(f"{view.type.icon} {view.title}")
            badges = chip(view.type.label, view.type.color)
            if view.status:
                badges += " " + chip(view.status, view.status_color)
            st.markdown(badges, unsafe_allow_html=True)
            st.markdown(
                '<span class="td-muted">' + html.escape(f"{view.target} · generated by {view.created_by} · {view.created_at}") + "</span>",
                unsafe_allow_html=True,
            )
        with t_r:
            if st.button("Close", key="close_detail"):
                ctrl.close_view_dialog()
                st.rerun()

        if ctrl.report_loading:
            st.info("Loading report details...")
            return
        if view.description:
            st.write(view.description)

        if view.filters_applied:
            st.markdown("##### Filters Applied")
            st.dataframe(_rows_frame(view.filters_applied), hide_index=True, use_container_width=True)

        if view.summary:
            st.markdown("##### Summary")
            cols = st.columns(min(4, len(view.summary)))
            for i, (label, value) in enumerate(view.summary):
                with cols[i % len(cols)]:
                    st.markdown(kpi(label, value), unsafe_allow_html=True)

        if view.status_breakdown or view.priority_breakdown:
            b_l, b_r = st.columns(2)
            if view.status_breakdown:
                with b_l:
                    _breakdown_chart(view.status_breakdown, "Status Breakdown")
            if view.priority_breakdown:
                with b_r:
                    _breakdown_chart(view.priority_breakdown, "Priority Breakdown")

        if view.profile:
            st.markdown(f"##### {view.profile_title}")
            st.dataframe(_rows_frame(view.profile), hide_index=True, use_container_width=True)

        if view.custom_metrics:
            st.markdown("##### Custom Metrics")
            st.dataframe(_rows_frame(view.custom_metrics), hide_index=True, use_container_width=True)

        for name, table in (("Details", view.details), ("Activity", view.activity)):
            if table is not None:
                st.markdown(f"##### {name}")
                st.dataframe(_table_frame(table), hide_index=True, use_container_width=True)

        for entities in view.entities:
            st.markdown(f"##### {prettify_key(entities.name)} ({entities.total})")
            st.dataframe(pd.json_normalize(entities.items), hide_index=True, use_container_width=True)
            if entities.truncated:
                st.caption(f"Showing first {len(entities.items)} of {entities.total} {entities.name}")

        if view.insights:
            st.markdown("##### Insights")
            cols = st.columns(3)
            for i, (label, value) in enumerate(view.insights):
                with cols[i % 3]:
                    st.markdown(kpi(label, value), unsafe_allow_html=True)

        if view.is_empty and not view.filters_applied:
            st.caption("This report has no computed data yet.")


if ctrl.view_dialog_open:
    render_report_detail()
