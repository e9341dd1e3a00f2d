"""Sign-in, form loading and submission, independent of Streamlit.

The views call these with the cached FormServiceClient and an
IdentityStore over st.session_state; tests pass a mocked client and a
plain dict store. A 401 anywhere becomes a hard logout: the identity is
cleared and LoginRequired is raised for the view to redirect on.
"""

from __future__ import annotations

from app.activity_log import get_entries_for_roll_number, log_event
from app.remote_client import AuthExpired, FormServiceClient, FormServiceError
from app.schema import Identity
from app.session_state import FormSession
from app.validation import validate_identity
from shared.auth import IdentityStore, LoginRequired


def current_identity(
    identities: IdentityStore,
    message: str = "Please login to access the form",
) -> Identity:
    """Read the cached identity or raise LoginRequired."""
    identity = Identity.from_dict(identities.load() or {})
    if identity is None:
        raise LoginRequired(message)
    return identity


def _expire(identities: IdentityStore, identity: Identity, exc: AuthExpired) -> LoginRequired:
    identities.clear()
    log_event(
        "hard_logout",
        roll_number=identity.roll_number,
        details={"operation": exc.operation},
    )
    return LoginRequired("Your session has expired. Please login again.")


def sign_in(
    client: FormServiceClient,
    identities: IdentityStore,
    roll_number: str,
    name: str,
) -> tuple[bool, str]:
    """Validate the login form, register the user and cache the identity.

    Returns (success, error message). The identity is cached only when the
    service confirms the registration.
    """
    errors = validate_identity(roll_number, name)
    if errors:
        return False, errors[0]

    identity = Identity(roll_number=roll_number.strip(), name=name.strip())
    try:
        client.create_identity(identity)
    except FormServiceError as exc:
        return False, exc.message

    identities.save(identity.roll_number, identity.name)
    log_event("signed_in", roll_number=identity.roll_number)
    return True, ""


def open_form(client: FormServiceClient, identities: IdentityStore) -> FormSession:
    """Fetch the schema for the cached identity and start a FormSession.

    Raises LoginRequired without an identity or on 401, and
    FormServiceError for any other fetch failure.
    """
    identity = current_identity(identities)
    try:
        schema = client.fetch_form(identity.roll_number)
    except AuthExpired as exc:
        raise _expire(identities, identity, exc) from exc

    log_event(
        "form_loaded",
        roll_number=identity.roll_number,
        details={
            "form_title": schema.form_title,
            "version": schema.version,
            "sections": len(schema.sections),
        },
    )
    return FormSession(schema=schema)


def submit(
    client: FormServiceClient,
    identities: IdentityStore,
    session: FormSession,
) -> bool:
    """Send the submission queued by the Submit button (or validate and
    send one directly) with every value collected.

    Returns True on success. On failure the message is left in
    session.api_error and the submit control can be used again.
    """
    if not session.begin_submit():
        return False

    try:
        identity = current_identity(identities, "Please login to submit the form")
    except LoginRequired:
        session.finish_submit("Please login to submit the form")
        raise

    try:
        client.submit_form(identity.roll_number, session.payload())
    except AuthExpired as exc:
        session.finish_submit(exc.message)
        raise _expire(identities, identity, exc) from exc
    except FormServiceError as exc:
        session.finish_submit(exc.message)
        return False

    session.finish_submit()
    log_event(
        "form_submitted",
        roll_number=identity.roll_number,
        details={"fields": len(session.values)},
    )
    return True


def last_submitted_at(roll_number: str) -> str:
    """ISO timestamp of the identity's latest successful submission, or ''."""
    entries = get_entries_for_roll_number(roll_number, limit=1, action="form_submitted")
    return entries[0].timestamp if entries else ""
