"""Form Portal -- Streamlit login view.

Entry point of the portal: ``streamlit run form-portal/app/dashboard.py``.
Collects a roll number and name, registers them with the form service,
caches the identity for this browser session and switches to the form page.
"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

_TOOL_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_TOOL_DIR.parent))
sys.path.insert(0, str(_TOOL_DIR))

from app.form_flow import sign_in
from app.remote_client import get_client
from app.validation import validate_identity
from shared.auth import FORM_PAGE, IdentityStore, pop_login_notice
from shared.theme import render_theme_css

# -- Page config --------------------------------------------------------------

st.set_page_config(
    page_title="Student Portal -- Login",
    layout="centered",
    initial_sidebar_state="collapsed",
)

render_theme_css()

# -- Session state defaults ---------------------------------------------------

_DEFAULTS: dict = {
    "login_roll_number": "",
    "login_name": "",
    "login_touched": {"rollNumber": False, "name": False},
    "login_error": "",
    "login_loading": False,
}
for _k, _v in _DEFAULTS.items():
    if _k not in st.session_state:
        st.session_state[_k] = _v


# -- Helpers ------------------------------------------------------------------

def _on_edit(widget_key: str, field_name: str) -> None:
    """Trim the edited value, mark the field touched and clear the banner."""
    st.session_state[widget_key] = (st.session_state.get(widget_key) or "").strip()
    st.session_state.login_touched[field_name] = True
    st.session_state.login_error = ""


def _request_login() -> None:
    if st.session_state.login_loading:
        return
    if validate_identity(st.session_state.login_roll_number, st.session_state.login_name):
        return
    st.session_state.login_error = ""
    st.session_state.login_loading = True


def _inline_error(field_name: str, message: str, value: str) -> None:
    if st.session_state.login_touched.get(field_name) and not value.strip():
        st.markdown(
            f'<div class="field-error" id="{field_name}-error" role="alert">{message}</div>',
            unsafe_allow_html=True,
        )


# -- Card ---------------------------------------------------------------------

st.markdown(
    '<div class="login-card">'
    "<h2>Student Portal</h2>"
    "<p>Welcome back! Please login to continue</p>"
    "</div>",
    unsafe_allow_html=True,
)

notice = pop_login_notice()
if notice:
    st.warning(notice)

if st.session_state.login_error:
    st.error(st.session_state.login_error)

roll_number = st.text_input(
    "Roll Number",
    placeholder="Enter your roll number",
    key="login_roll_number",
    on_change=_on_edit,
    args=("login_roll_number", "rollNumber"),
)
_inline_error("rollNumber", "Roll number is required", roll_number)

name = st.text_input(
    "Name",
    placeholder="Enter your name",
    key="login_name",
    on_change=_on_edit,
    args=("login_name", "name"),
)
_inline_error("name", "Name is required", name)

form_is_valid = not validate_identity(roll_number, name)

# The click only raises login_loading; the button is drawn disabled from it
# before the request goes out further down this run.
st.button(
    "Processing..." if st.session_state.login_loading else "Login",
    type="primary",
    use_container_width=True,
    key="login_submit",
    disabled=st.session_state.login_loading or not form_is_valid,
    on_click=_request_login,
)

if st.session_state.login_loading:
    try:
        with st.spinner("Processing..."):
            ok, message = sign_in(get_client(), IdentityStore(), roll_number, name)
    finally:
        st.session_state.login_loading = False

    if ok:
        st.switch_page(FORM_PAGE)
    st.session_state.login_error = message
    st.rerun()
