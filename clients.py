"""API client for the Jira worklog endpoint."""

from dataclasses import dataclass

import requests

from duration import DEFAULT_DATETIME_PATTERN, to_iso
from models import Credentials, PushRequest

WORKLOG_PATH = "/rest/api/2/issue/{ticket}/worklog"
REQUEST_TIMEOUT = 30


class ApiError(Exception):
    """User-friendly API error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _handle_api_error(response: requests.Response, service: str) -> str:
    """Convert HTTP errors to user-friendly messages."""
    status = response.status_code

    messages = {
        400: f"{service}: Bad request. Check the ticket, time spent and start date.",
        401: f"{service}: Authentication failed. Check your username and password!",
        403: f"{service}: Access denied. You may not log work on this issue.",
        404: f"{service}: Issue not found. Check the ticket key and the host in config.json!",
        429: f"{service}: Too many requests. Wait a moment and try again.",
        500: f"{service}: Server error. The service may be temporarily unavailable.",
        502: f"{service}: Bad gateway. The service may be temporarily unavailable.",
        503: f"{service}: Service unavailable. Try again later.",
    }

    return messages.get(status, f"{service}: HTTP {status} - {response.reason}")


@dataclass
class WorklogCall:
    """A worklog POST ready to be sent or shown."""

    method: str
    url: str
    headers: dict
    body: dict


class JiraClient:
    """Client for the Jira worklog REST API."""

    def __init__(
        self,
        host: str,
        credentials: Credentials | None = None,
        datetime_pattern: str = DEFAULT_DATETIME_PATTERN,
        session: requests.Session | None = None,
    ):
        self.host = host.rstrip("/")
        self.credentials = credentials
        self.datetime_pattern = datetime_pattern
        # None: every call opens its own session through requests.request
        self.session = session

    def _auth(self) -> tuple[str, str] | None:
        if self.credentials is None:
            return None
        return (self.credentials.username, self.credentials.password)

    def worklog_url(self, ticket: str) -> str:
        return self.host + WORKLOG_PATH.format(ticket=ticket)

    def worklog_body(self, request: PushRequest) -> dict:
        return {
            "timeSpent": request.time_spent,
            "comment": request.comment,
            "started": to_iso(request.started, self.datetime_pattern),
        }

    def build_call(self, request: PushRequest) -> WorklogCall:
        """Build the POST for one worklog. Preview and dispatch both use this."""
        return WorklogCall(
            method="POST",
            url=self.worklog_url(request.ticket),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            body=self.worklog_body(request),
        )

    def add_worklog(self, request: PushRequest) -> dict:
        """Create a worklog and return the tracker's JSON answer."""
        call = self.build_call(request)
        http = self.session or requests
        try:
            r = http.request(
                call.method,
                call.url,
                auth=self._auth(),
                headers=call.headers,
                json=call.body,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.ConnectionError:
            raise ApiError(f"Jira: Cannot connect to {self.host}. Check your network!")
        except requests.exceptions.Timeout:
            raise ApiError("Jira: Connection timed out. The server may be slow.")
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Jira: Request failed: {e}")

        if r.status_code != 201:
            raise ApiError(_handle_api_error(r, "Jira"), r.status_code)
        try:
            return r.json()
        except requests.exceptions.JSONDecodeError:
            raise ApiError("Jira: Worklog created but the answer is not valid JSON.", r.status_code)
