"""HTTP client for the remote form service.

Wraps the three calls the portal makes (create-user, get-form, submit-form)
and turns every failure into a FormServiceError carrying a user-facing
message. A 401 from any call raises AuthExpired so the caller can drop the
cached identity.

The service base URL and timeout come from Settings
(FORM_PORTAL_SERVICE_BASE_URL, FORM_PORTAL_REQUEST_TIMEOUT).
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any

import requests

from app.activity_log import log_event
from app.config import get_settings
from app.schema import FormSchema, Identity

CREATE_IDENTITY = "create_identity"
FETCH_FORM = "fetch_form"
SUBMIT_FORM = "submit_form"

_PATHS = {
    CREATE_IDENTITY: "/create-user",
    FETCH_FORM: "/get-form",
    SUBMIT_FORM: "/submit-form",
}


class ErrorKind(str, Enum):
    SERVER_REJECTED = "server_rejected"
    UNREACHABLE = "unreachable"
    SETUP_FAILURE = "setup_failure"
    MALFORMED_RESPONSE = "malformed_response"


_NO_RESPONSE = "No response from server. Please check your internet connection."

# Default user-facing messages per operation and failure kind
MESSAGES: dict[str, dict[ErrorKind, str]] = {
    CREATE_IDENTITY: {
        ErrorKind.SERVER_REJECTED: "Server error occurred. Please try again.",
        ErrorKind.UNREACHABLE: _NO_RESPONSE,
        ErrorKind.SETUP_FAILURE: "An error occurred. Please try again.",
        ErrorKind.MALFORMED_RESPONSE: "Invalid response from server. Please try again.",
    },
    FETCH_FORM: {
        ErrorKind.SERVER_REJECTED: "Failed to load form. Please try again later.",
        ErrorKind.UNREACHABLE: _NO_RESPONSE,
        ErrorKind.SETUP_FAILURE: "An error occurred while loading the form. Please try again.",
        ErrorKind.MALFORMED_RESPONSE: "An error occurred while loading the form. Please try again.",
    },
    SUBMIT_FORM: {
        ErrorKind.SERVER_REJECTED: "Failed to submit form. Please try again.",
        ErrorKind.UNREACHABLE: _NO_RESPONSE,
        ErrorKind.SETUP_FAILURE: "Failed to submit form. Please try again.",
        ErrorKind.MALFORMED_RESPONSE: "Failed to submit form. Please try again.",
    },
}


class FormServiceError(Exception):
    """A call to the form service failed.

    ``message`` is safe to show to the user as-is.
    """

    def __init__(
        self,
        operation: str,
        kind: ErrorKind,
        message: str = "",
        status_code: int | None = None,
    ) -> None:
        self.operation = operation
        self.kind = kind
        self.message = message or MESSAGES[operation][kind]
        self.status_code = status_code
        super().__init__(self.message)


class AuthExpired(FormServiceError):
    """The service answered 401; the cached identity is no longer valid."""


class FormServiceClient:
    """Client for the form service. One instance per browser session is fine."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    # ── Public operations ──────────────────────────────────────────────

    def create_identity(self, identity: Identity) -> dict:
        """Register the user. Returns the service's response payload."""
        data = self._request(
            CREATE_IDENTITY,
            "POST",
            json=identity.to_dict(),
            roll_number=identity.roll_number,
        )
        if not isinstance(data, dict) or not data.get("success"):
            self._fail(CREATE_IDENTITY, ErrorKind.MALFORMED_RESPONSE, identity.roll_number)
        return data

    def fetch_form(self, roll_number: str) -> FormSchema:
        """Fetch and parse the form schema assigned to *roll_number*."""
        data = self._request(
            FETCH_FORM,
            "GET",
            params={"rollNumber": roll_number},
            roll_number=roll_number,
        )
        form = data.get("form") if isinstance(data, dict) else None
        if not form:
            self._fail(FETCH_FORM, ErrorKind.MALFORMED_RESPONSE, roll_number)
        try:
            return FormSchema.from_dict(form)
        except ValueError as exc:
            self._fail(
                FETCH_FORM,
                ErrorKind.MALFORMED_RESPONSE,
                roll_number,
                details={"reason": str(exc)},
            )

    def submit_form(self, roll_number: str, form_data: dict[str, Any]) -> dict:
        """Submit the collected FormValues."""
        data = self._request(
            SUBMIT_FORM,
            "POST",
            json={"rollNumber": roll_number, "formData": form_data},
            roll_number=roll_number,
        )
        if not isinstance(data, dict) or not data.get("success"):
            self._fail(SUBMIT_FORM, ErrorKind.MALFORMED_RESPONSE, roll_number)
        return data

    # ── Transport ──────────────────────────────────────────────────────

    def _request(self, operation: str, method: str, *, roll_number: str, **kwargs) -> Any:
        """Issue one request and return the decoded JSON body.

        Raises AuthExpired on 401 and FormServiceError for everything else
        that is not a 2xx response carrying JSON.
        """
        url = f"{self.base_url}{_PATHS[operation]}"
        started = time.monotonic()
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as exc:
            self._fail(
                operation, ErrorKind.UNREACHABLE, roll_number,
                details={"error": type(exc).__name__}, started=started,
            )
        except requests.RequestException as exc:
            self._fail(
                operation, ErrorKind.SETUP_FAILURE, roll_number,
                details={"error": type(exc).__name__}, started=started,
            )

        if resp.status_code == 401:
            self._log(operation, roll_number, "auth_expired", resp.status_code, started)
            raise AuthExpired(
                operation,
                ErrorKind.SERVER_REJECTED,
                _server_message(resp),
                status_code=401,
            )

        if not resp.ok:
            self._log(operation, roll_number, ErrorKind.SERVER_REJECTED.value, resp.status_code, started)
            raise FormServiceError(
                operation,
                ErrorKind.SERVER_REJECTED,
                _server_message(resp),
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError:
            self._fail(
                operation, ErrorKind.MALFORMED_RESPONSE, roll_number,
                status_code=resp.status_code, started=started,
            )

        self._log(operation, roll_number, "ok", resp.status_code, started)
        return data

    def _fail(
        self,
        operation: str,
        kind: ErrorKind,
        roll_number: str,
        *,
        status_code: int | None = None,
        details: dict | None = None,
        started: float | None = None,
    ):
        self._log(operation, roll_number, kind.value, status_code, started, details)
        raise FormServiceError(operation, kind, status_code=status_code)

    @staticmethod
    def _log(
        operation: str,
        roll_number: str,
        outcome: str,
        status_code: int | None,
        started: float | None,
        details: dict | None = None,
    ) -> None:
        info: dict = {"operation": operation, "outcome": outcome}
        if status_code is not None:
            info["status"] = status_code
        if started is not None:
            info["elapsed_ms"] = round((time.monotonic() - started) * 1000)
        if details:
            info.update(details)
        log_event("remote_call", roll_number=roll_number, details=info)


def _server_message(resp: requests.Response) -> str:
    """The ``message`` the server put in an error body, if any."""
    try:
        body = resp.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return ""


# Cache the client so the HTTP session is reused across reruns
_client: FormServiceClient | None = None


def get_client() -> FormServiceClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = FormServiceClient(settings.service_base_url, settings.request_timeout)
    return _client


def reset_client() -> None:
    """Force a fresh client on next call (e.g. after a settings change)."""
    global _client
    _client = None
