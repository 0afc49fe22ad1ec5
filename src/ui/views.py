"""Streamlit renderers for the console views.

Renderers read AppState and call AppController intents; they never touch the
HTTP clients or mutate the state directly.
"""

from __future__ import annotations

from datetime import date

import streamlit as st

from src.domains.models import BLOOD_TYPES, GENDERS, Donor
from src.domains.stock import blood_type_color, classify_stock, status_colors
from src.orchestration.app_state import (
    DASHBOARD,
    DONORS,
    FIND,
    INVENTORY,
    REGISTER,
    RESULTS,
    SEARCHING,
    VIEWS,
    AppState,
)
from src.orchestration.controller import ERROR, AppController
from src.utils.logger import get_logger

logger = get_logger()

_MIN_BIRTH_DATE = date(1900, 1, 1)


def _colored(text: str, color: str, size: str = "1.1em") -> str:
    return f"<span style='color:{color};font-weight:700;font-size:{size}'>{text}</span>"


def _blood_type_badge(blood_type: str, size: str = "1.25em") -> str:
    return _colored(blood_type, blood_type_color(blood_type), size)


def render_header() -> None:
    left, right = st.columns([3, 1])
    with left:
        st.markdown(
            _colored("🩸 Blood Donation Management System", "#dc2626", "1.75em"),
            unsafe_allow_html=True,
        )
    with right:
        st.caption(f"Welcome, Admin | Today: {date.today().strftime('%d %b %Y')}")


def render_navigation(state: AppState, controller: AppController) -> None:
    cols = st.columns(len(VIEWS))
    for col, (key, label) in zip(cols, VIEWS.items()):
        with col:
            if st.button(
                label,
                key=f"nav_{key}",
                type="primary" if state.view == key else "secondary",
                use_container_width=True,
            ):
                controller.set_view(key)
                st.rerun()


def render_connectivity_banner(state: AppState, controller: AppController) -> None:
    if not state.connectivity_fault:
        return
    msg_col, btn_col = st.columns([5, 1])
    with msg_col:
        st.error(f"**Connection Error**\n\n{state.connectivity_fault}", icon="⚠️")
    with btn_col:
        label = "Retrying..." if state.is_retrying else "🔄 Retry"
        if st.button(label, key="retry_connection", disabled=state.is_retrying, use_container_width=True):
            with st.spinner("Retrying..."):
                controller.retry_connection()
            st.rerun()


@st.fragment(run_every=1.0)
def render_notification(controller: AppController) -> None:
    """Toast area; re-runs every second so notifications disappear on their own."""
    n = controller.active_notification()
    if n is None:
        return
    msg_col, close_col = st.columns([12, 1])
    with msg_col:
        if n.kind == ERROR:
            st.error(n.message)
        else:
            st.success(n.message)
    with close_col:
        if st.button("✕", key="dismiss_notification"):
            controller.dismiss_notification()
            st.rerun()


def _metric_row(summary: dict[str, int]) -> None:
    c1, c2, c3 = st.columns(3)
    c1.metric("Total Donors", summary["total_donors"])
    c2.metric("Eligible Donors", summary["eligible_donors"])
    c3.metric("Low Stock Items", summary["low_stock_items"])


def _inventory_status_row(blood_type: str, units: int) -> None:
    status = classify_stock(units)
    color, bg = status_colors(status)
    st.markdown(
        f"<div style='display:flex;justify-content:space-between;padding:0.6em;"
        f"border-radius:8px;background:{bg};margin-bottom:0.4em'>"
        f"<div>{_blood_type_badge(blood_type)}</div>"
        f"<div style='text-align:right'><b>{units} units</b><br>"
        f"<span style='color:{color}'>{status}</span></div></div>",
        unsafe_allow_html=True,
    )


def render_dashboard(state: AppState, controller: AppController) -> None:
    _metric_row(controller.dashboard_summary())

    ideas_col, stock_col = st.columns([2, 1])
    with ideas_col:
        with st.container(border=True):
            st.subheader("✨ AI-Powered Campaign Generator")
            st.caption(
                "Need inspiration for your next donation drive? Let AI help you craft the "
                "perfect message based on your current inventory needs."
            )
            low = [item.blood_type for item in controller.low_stock_inventory()]
            if low:
                st.caption(f"Currently low: {', '.join(low)}")
            if st.button(
                "Generating Ideas..." if state.is_generating_campaign else "Generate Campaign Ideas",
                key="generate_campaigns",
                disabled=state.is_generating_campaign,
                use_container_width=True,
            ):
                with st.spinner("Generating ideas..."):
                    controller.generate_campaign_ideas()
                st.rerun()
            if state.campaign_ideas:
                if state.campaign_error:
                    st.warning(state.campaign_ideas)
                else:
                    st.markdown(state.campaign_ideas)
    with stock_col:
        with st.container(border=True):
            st.subheader("Blood Inventory Status")
            if not state.inventory:
                st.caption("No inventory data.")
            for item in state.inventory:
                _inventory_status_row(item.blood_type, item.units)


def _parse_date(value: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def render_registration(state: AppState, controller: AppController) -> None:
    draft = state.draft
    v = state.draft_version
    with st.container(border=True):
        st.subheader("Register New Donor")
        left, right = st.columns(2)
        with left:
            first_name = st.text_input("First Name", value=draft.first_name, key=f"first_name_{v}")
            email = st.text_input("Email", value=draft.email, key=f"email_{v}")
            blood_type = st.selectbox(
                "Blood Type",
                BLOOD_TYPES,
                index=BLOOD_TYPES.index(draft.blood_type),
                key=f"blood_type_{v}",
            )
            gender = st.selectbox(
                "Gender", GENDERS, index=GENDERS.index(draft.gender), key=f"gender_{v}"
            )
            city = st.text_input("City", value=draft.city, key=f"city_{v}")
        with right:
            last_name = st.text_input("Last Name", value=draft.last_name, key=f"last_name_{v}")
            phone = st.text_input("Phone", value=draft.phone, key=f"phone_{v}")
            dob = st.date_input(
                "Date of Birth",
                value=_parse_date(draft.date_of_birth),
                min_value=_MIN_BIRTH_DATE,
                max_value=date.today(),
                key=f"date_of_birth_{v}",
            )
            region = st.text_input("State", value=draft.state, key=f"state_{v}")

        controller.update_draft(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            blood_type=blood_type,
            date_of_birth=dob.isoformat() if isinstance(dob, date) else "",
            gender=gender,
            city=city,
            state=region,
        )
        if st.button("Register Donor", key="register_donor", type="primary", use_container_width=True):
            controller.submit_registration()
            st.rerun()


def _donor_row(donor: Donor) -> None:
    with st.container(border=True):
        info, bt, badge = st.columns([2, 1, 1])
        with info:
            st.markdown(f"**{donor.full_name}**")
            st.caption(donor.email)
            st.caption(f"{donor.city}, {donor.state}")
        with bt:
            st.markdown(_blood_type_badge(donor.blood_type, "1.4em"), unsafe_allow_html=True)
        with badge:
            if donor.is_eligible:
                st.success("Eligible")
            else:
                st.error("Not Eligible")


def render_donor_list(state: AppState, controller: AppController) -> None:
    st.subheader("Donor Management")
    term = st.text_input(
        "Search",
        value=state.search_term,
        placeholder="Search donors by name, email, or blood type...",
        key="donor_search",
        label_visibility="collapsed",
    )
    controller.set_search_term(term)
    donors = controller.filtered_donors()
    if not donors:
        st.caption("No donors match." if state.donors else "No donors registered yet.")
    for donor in donors:
        _donor_row(donor)


def render_inventory(state: AppState) -> None:
    st.subheader("Blood Inventory Management")
    if not state.inventory:
        st.caption("No inventory data.")
        return
    per_row = 4
    for start in range(0, len(state.inventory), per_row):
        cols = st.columns(per_row)
        for col, item in zip(cols, state.inventory[start : start + per_row]):
            status = classify_stock(item.units)
            color, bg = status_colors(status)
            col.markdown(
                f"<div style='text-align:center;padding:1.2em;border-radius:8px;"
                f"background:{bg};border:2px solid {color}'>"
                f"{_blood_type_badge(item.blood_type, '2em')}"
                f"<div style='font-size:1.5em;font-weight:700'>{item.units}</div>"
                f"<div style='color:#4b5563'>units</div>"
                f"<div style='color:{color};font-weight:600'>{status}</div></div>",
                unsafe_allow_html=True,
            )


def _render_outreach(state: AppState, controller: AppController) -> None:
    finder = state.finder
    if controller.can_generate_outreach():
        if st.button(
            "Generating..." if finder.is_generating else "✨ Generate Outreach Message",
            key="generate_outreach",
            disabled=finder.is_generating,
        ):
            with st.spinner("Generating..."):
                controller.generate_outreach_message()
            st.rerun()
    if finder.generated_message:
        st.code(finder.generated_message, language=None, wrap_lines=True)
        if finder.generation_error:
            st.caption("The message service could not be reached.")
        else:
            st.caption("Use the copy icon on the message to copy it.")


def render_finder(state: AppState, controller: AppController) -> None:
    finder = state.finder
    with st.container(border=True):
        st.subheader("Find Available Donors")
        c1, c2, c3 = st.columns([2, 2, 1], vertical_alignment="bottom")
        with c1:
            region = st.text_input(
                "State", value=finder.criteria.state, placeholder="e.g., CA", key="finder_state"
            )
        with c2:
            city = st.text_input(
                "City", value=finder.criteria.city, placeholder="e.g., Los Angeles", key="finder_city"
            )
        controller.update_criteria(state=region, city=city)
        with c3:
            searching = finder.phase == SEARCHING
            if st.button(
                "Searching..." if searching else "🔍 Find Donors",
                key="finder_search",
                disabled=searching,
                use_container_width=True,
            ):
                with st.spinner("Searching..."):
                    controller.finder_search()
                st.rerun()

    if finder.phase != RESULTS:
        st.info("Please enter a location to find donors.")
        return

    head, clear = st.columns([4, 1])
    head.markdown(f"#### {len(finder.results)} eligible donor(s) found")
    if clear.button("Clear results", key="finder_clear"):
        controller.reset_finder()
        st.rerun()
    _render_outreach(state, controller)
    for donor in finder.results:
        with st.container(border=True):
            name, bt, loc = st.columns(3)
            name.markdown(f"**{donor.first_name}**")
            bt.markdown(_blood_type_badge(donor.blood_type, "1.5em"), unsafe_allow_html=True)
            loc.markdown(f"{donor.city}, {donor.state}")


def render_page(controller: AppController) -> None:
    """Render the whole page for the controller's current state."""
    state = controller.state
    render_connectivity_banner(state, controller)
    render_notification(controller)
    render_header()
    render_navigation(state, controller)
    st.divider()
    if state.view == REGISTER:
        render_registration(state, controller)
    elif state.view == DONORS:
        render_donor_list(state, controller)
    elif state.view == INVENTORY:
        render_inventory(state)
    elif state.view == FIND:
        render_finder(state, controller)
    else:
        if state.view != DASHBOARD:
            logger.warning("Unknown view %r; showing dashboard", state.view)
        render_dashboard(state, controller)
