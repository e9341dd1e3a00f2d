"""Session-scoped identity cache and the gate in front of protected views.

The login view stores the signed-in identity with IdentityStore.save().
Every protected page calls require_identity() right after
st.set_page_config() and CSS. If no identity is cached, it switches to the
login page so no protected UI appears.

Identities live in st.session_state under a fixed key, so they last as long
as the browser tab's session and are never written to disk. Tests and
non-Streamlit callers pass any dict-like storage instead.
"""

from __future__ import annotations

from collections.abc import MutableMapping

import streamlit as st

SESSION_KEY = "userData"
_NOTICE_KEY = "_auth_notice"

LOGIN_PAGE = "dashboard.py"
FORM_PAGE = "pages/form.py"


class LoginRequired(Exception):
    """No usable identity is cached; the user must sign in again."""

    def __init__(self, message: str = "Please login to access the form") -> None:
        self.message = message
        super().__init__(message)


class IdentityStore:
    """Read/write the cached ``{rollNumber, name}`` record."""

    def __init__(self, storage: MutableMapping | None = None) -> None:
        self._storage = storage

    @property
    def storage(self) -> MutableMapping:
        # Resolved lazily: st.session_state only exists inside a script run
        return self._storage if self._storage is not None else st.session_state

    def load(self) -> dict | None:
        """Return the cached record, or None if missing or incomplete."""
        record = self.storage.get(SESSION_KEY)
        if not isinstance(record, dict):
            return None
        if not str(record.get("rollNumber") or "").strip():
            return None
        return dict(record)

    def save(self, roll_number: str, name: str) -> dict:
        record = {"rollNumber": roll_number.strip(), "name": name.strip()}
        self.storage[SESSION_KEY] = record
        return dict(record)

    def clear(self) -> None:
        self.storage.pop(SESSION_KEY, None)


# ── Public API ───────────────────────────────────────────────────────────────


def require_identity(store: IdentityStore | None = None) -> dict:
    """Gate the current page behind a cached identity.

    Returns the identity record. Without one, switches to the login page
    and the rest of the page never runs.
    """
    store = store or IdentityStore()
    record = store.load()
    if record is None:
        st.switch_page(LOGIN_PAGE)
        st.stop()
    return record


def hard_logout(message: str = "", store: IdentityStore | None = None) -> None:
    """Drop the cached identity and return to the login page.

    *message* is shown once on the login page.
    """
    store = store or IdentityStore()
    store.clear()
    if message:
        st.session_state[_NOTICE_KEY] = message
    st.switch_page(LOGIN_PAGE)


def pop_login_notice() -> str:
    """Return and clear the message left by hard_logout(), if any."""
    return st.session_state.pop(_NOTICE_KEY, "") or ""


def render_logout(store: IdentityStore | None = None, on_logout=None) -> None:
    """Render a small right-aligned Log Out button."""
    store = store or IdentityStore()
    if store.load() is None:
        return
    cols = st.columns([8, 1])
    with cols[1]:
        if st.button("Log Out", key="_auth_logout", type="tertiary"):
            if on_logout is not None:
                on_logout()
            hard_logout(store=store)
