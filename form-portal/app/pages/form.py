"""Form Portal -- protected multi-section form view.

Requires a cached identity (see shared.auth). On first entry fetches the
form assigned to the identity's roll number, then renders it one section at
a time with Previous / Next / Submit controls.
"""

from __future__ import annotations

import html as html_mod
import sys
import time
from datetime import datetime
from pathlib import Path

import streamlit as st

_TOOL_DIR = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(_TOOL_DIR.parent))
sys.path.insert(0, str(_TOOL_DIR))

from app.config import get_settings
from app.form_flow import last_submitted_at, open_form, submit
from app.remote_client import FormServiceError, get_client
from app.renderer import render_field
from app.session_state import FormSession, TransitionState
from shared.auth import IdentityStore, LoginRequired, hard_logout, render_logout, require_identity
from shared.theme import render_nav_bar, render_theme_css

# -- Page config --------------------------------------------------------------

st.set_page_config(
    page_title="Student Portal -- Form",
    layout="centered",
    initial_sidebar_state="collapsed",
)

render_theme_css()

identities = IdentityStore()
identity = require_identity(identities)


# -- Helpers ------------------------------------------------------------------

def _clear_form_state() -> None:
    for key in ("form_session", "form_load_error", "form_owner"):
        st.session_state.pop(key, None)


def _logout(exc: LoginRequired) -> None:
    _clear_form_state()
    hard_logout(exc.message, store=identities)


# -- One-shot load ------------------------------------------------------------

# A different identity than the one the form was loaded for starts over
if st.session_state.get("form_owner") != identity["rollNumber"]:
    _clear_form_state()
    st.session_state.form_owner = identity["rollNumber"]

session: FormSession | None = st.session_state.get("form_session")

if session is None and not st.session_state.get("form_load_error"):
    with st.spinner("Loading form..."):
        try:
            session = open_form(get_client(), identities)
        except LoginRequired as exc:
            _logout(exc)
        except FormServiceError as exc:
            st.session_state.form_load_error = exc.message
        else:
            st.session_state.form_session = session

render_nav_bar("Student Portal", identity.get("name") or identity["rollNumber"])
render_logout(identities, on_logout=_clear_form_state)

# -- Load failure: block the whole view ---------------------------------------

load_error = st.session_state.get("form_load_error")
if load_error or session is None:
    st.markdown("### Error loading form")
    st.error(load_error or "Please try again later or contact support")
    if st.button("Try Again", type="primary"):
        st.session_state.pop("form_load_error", None)
        st.rerun()
    st.stop()

# -- Progress -----------------------------------------------------------------

st.markdown(
    f'<div class="progress-meta">'
    f"<span>Section {session.current_section + 1} of {session.section_count}</span>"
    f"<span>{session.progress_display}%</span>"
    f"</div>"
    f'<div class="progress-bar" role="progressbar" aria-valuenow="{session.progress_display}" '
    f'aria-valuemin="0" aria-valuemax="100">'
    f'<div class="progress-fill" style="width:{session.progress}%"></div></div>',
    unsafe_allow_html=True,
)

# -- Heading ------------------------------------------------------------------

esc = html_mod.escape
st.markdown(
    f'<div class="form-title">{esc(session.schema.form_title)}</div>'
    f'<div class="form-version">Version {esc(session.schema.version)}</div>',
    unsafe_allow_html=True,
)

if session.api_error:
    st.error(session.api_error)
elif session.submitted:
    st.success("Form submitted successfully")

last_submitted = last_submitted_at(identity["rollNumber"])
if last_submitted:
    stamp = datetime.fromisoformat(last_submitted).strftime("%Y-%m-%d %H:%M UTC")
    st.caption(f"Last submitted {stamp}")

section = session.section
st.markdown(
    f'<div class="section-header {session.transition_effect}">'
    f"<h3>{esc(section.title)}</h3>"
    f"<p>{esc(section.description)}</p>"
    f"</div>",
    unsafe_allow_html=True,
)

# -- Fields -------------------------------------------------------------------

for field_def in section.fields:
    render_field(field_def, session)

# -- Navigation ---------------------------------------------------------------

# Clicks only record intent in callbacks; the buttons below are drawn from
# that state, so they are already disabled while a move or call is pending.
delay = get_settings().transition_delay
moving = session.transition is TransitionState.TRANSITIONING

st.markdown("---")
nav_left, nav_right = st.columns(2)
with nav_left:
    if not session.is_first_section:
        st.button(
            "Previous",
            use_container_width=True,
            key="nav_prev",
            disabled=moving or session.submit_locked,
            on_click=session.request_prev if delay > 0 else session.prev_section,
        )
with nav_right:
    if session.can_go_next:
        st.button(
            "Next",
            type="primary",
            use_container_width=True,
            key="nav_next",
            disabled=moving,
            on_click=session.request_next if delay > 0 else session.next_section,
        )
    else:
        st.button(
            "Submitting..." if session.submit_locked else "Submit",
            type="primary",
            use_container_width=True,
            disabled=session.submit_locked,
            key="nav_submit",
            on_click=session.request_submit,
        )

# -- Queued submission --------------------------------------------------------

if session.submit_requested:
    with st.spinner("Submitting..."):
        try:
            submit(get_client(), identities, session)
        except LoginRequired as exc:
            _logout(exc)
    st.rerun()

# -- Pending transition -------------------------------------------------------

if moving:
    time.sleep(delay)
    session.settle()
    st.rerun()
