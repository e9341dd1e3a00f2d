"""Centralized CSS and navigation bar for the portal views.

Import `render_theme_css` and `render_nav_bar` instead of inlining CSS in
each page.
"""

from __future__ import annotations

import html as html_mod

import streamlit as st

# ---------------------------------------------------------------------------
# Shared CSS
# ---------------------------------------------------------------------------

_BASE_CSS = """\
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap');

/* Hide Streamlit chrome and the multipage sidebar */
#MainMenu, footer,
div[data-testid="stToolbar"] { display: none !important; }
section[data-testid="stSidebar"],
div[data-testid="stSidebarNav"] { display: none !important; }

.stApp {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
    background: linear-gradient(160deg, #f8f9fc 0%, #eef1f8 50%, #e8edf6 100%);
}

/* Navigation bar */
.nav-bar {
    display: flex;
    align-items: center;
    padding: 10px 4px;
    margin: -1rem 0 1.2rem 0;
    border-bottom: 1px solid rgba(0,0,0,0.07);
}
.nav-title {
    flex: 1;
    text-align: center;
    font-family: 'Inter', sans-serif;
    font-size: 1.15rem;
    font-weight: 700;
    color: #1a2744;
    letter-spacing: -0.02em;
}
.nav-sub {
    font-weight: 400;
    color: #86868b;
    font-size: 0.85rem;
    margin-left: 8px;
}

/* Login card */
.login-card {
    max-width: 400px;
    margin: 6vh auto 0;
    padding: 2.5rem 2rem 2rem;
    background: white;
    border-radius: 16px;
    box-shadow: 0 2px 12px rgba(0,0,0,0.08);
    text-align: center;
}
.login-card h2 {
    font-weight: 700;
    color: #1a2744;
    margin: 0 0 0.25rem;
    font-size: 1.4rem;
    letter-spacing: -0.02em;
}
.login-card p {
    color: #86868b;
    font-size: 0.9rem;
    margin: 0;
}

/* Progress */
.progress-meta {
    display: flex;
    justify-content: space-between;
    font-size: 0.75rem;
    font-weight: 600;
    color: #4f46e5;
    text-transform: uppercase;
    margin-bottom: 6px;
}
.progress-bar {
    background: #e0e7ff;
    border-radius: 6px;
    height: 8px;
    overflow: hidden;
    margin-bottom: 1.2rem;
}
.progress-fill {
    height: 100%;
    background: #4f46e5;
    border-radius: 6px;
    transition: width 0.5s ease;
}

/* Form heading */
.form-title {
    font-size: 1.5rem;
    font-weight: 700;
    color: #1a2744;
    margin-bottom: 0;
}
.form-version {
    font-size: 0.82rem;
    color: #86868b;
    margin-bottom: 1rem;
}

/* Section header and slide transitions */
.section-header h3 {
    font-size: 1.15rem;
    font-weight: 600;
    color: #1a2744;
    margin: 0.5rem 0 0.2rem;
}
.section-header p {
    color: #5a6a85;
    font-size: 0.9rem;
}
.section-header { transition: all 0.3s ease; }
.slide-out-left { transform: translateX(-24px); opacity: 0; }
.slide-out-right { transform: translateX(24px); opacity: 0; }
.slide-in-right { animation: slide-in-right 0.3s ease; }
.slide-in-left { animation: slide-in-left 0.3s ease; }
@keyframes slide-in-right { from { transform: translateX(24px); opacity: 0; } to { transform: none; opacity: 1; } }
@keyframes slide-in-left { from { transform: translateX(-24px); opacity: 0; } to { transform: none; opacity: 1; } }

/* Fields */
.field-label {
    font-size: 0.88rem;
    font-weight: 500;
    color: #374151;
    margin-top: 10px;
    margin-bottom: -6px;
}
.required-marker { color: #ef4444; }
.field-error {
    font-size: 0.82rem;
    color: #c62828;
    margin-top: -8px;
    margin-bottom: 8px;
}
"""


def render_theme_css() -> None:
    """Inject the shared stylesheet; call once per page after set_page_config."""
    st.markdown(f"<style>\n{_BASE_CSS}\n</style>", unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Navigation bar
# ---------------------------------------------------------------------------

def render_nav_bar(title: str, subtitle: str = "Student Portal") -> None:
    """Render the shared navigation bar with a centered title."""
    st.markdown(
        f'<div class="nav-bar">'
        f'    <div class="nav-title">{html_mod.escape(title)}'
        f'<span class="nav-sub">&mdash; {html_mod.escape(subtitle)}</span></div>'
        f'</div>',
        unsafe_allow_html=True,
    )
