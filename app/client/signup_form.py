import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import httpx

logger = logging.getLogger("app")

# Same shape the server enforces in app.api.utils.validators; checked here for UX only.
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+\Z")

SIGNUP_PATH = "/api/signup"

EMPTY_EMAIL_MESSAGE = "Please enter your email"
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
DUPLICATE_EMAIL_MESSAGE = "This email is already on the waitlist"
DEFAULT_FAILURE_MESSAGE = "Failed to save email"
NETWORK_ERROR_MESSAGE = "Network error. Please try again."
DEFAULT_SUCCESS_MESSAGE = "Successfully joined the waitlist!"


class FormPhase(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class FormState:
    email: str = ""
    phase: FormPhase = FormPhase.EDITING
    error_message: Optional[str] = None
    confirmation: Optional[str] = None


def validate_email(email: str) -> bool:
    return bool(email) and EMAIL_REGEX.match(email) is not None


class SignupFormController:
    """
    Client-side state machine behind the waitlist form.

    One instance per page view. Input events (:meth:`on_input`,
    :meth:`on_escape`) are synchronous; :meth:`submit` is the only suspend
    point and at most one submission is in flight at a time.

    Args:
        client: HTTP client bound to the site's base URL.
        on_focus: Called when the email input should take focus.
        on_notify: Called with ``(level, message)`` for toast-style
            notifications; ``level`` is ``"success"`` or ``"error"``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        on_focus: Optional[Callable[[], None]] = None,
        on_notify: Optional[Callable[[str, str], None]] = None,
    ):
        self.client = client
        self.state = FormState()
        self._on_focus = on_focus
        self._on_notify = on_notify

    @property
    def phase(self) -> FormPhase:
        return self.state.phase

    @property
    def is_valid(self) -> bool:
        return validate_email(self.state.email)

    @property
    def busy(self) -> bool:
        return self.state.phase == FormPhase.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return self.is_valid and self.state.phase in (FormPhase.EDITING, FormPhase.ERROR)

    def on_input(self, value: str) -> None:
        """Store a new input value and clear any error message."""
        if self.state.phase in (FormPhase.SUCCESS, FormPhase.SUBMITTING):
            return

        self.state.email = value
        self.state.error_message = None
        self.state.phase = FormPhase.EDITING

    def on_escape(self) -> None:
        """
        Clear the input and any error, then request focus.

        An in-flight request is left alone: the phase stays ``submitting``
        and its outcome still applies when it arrives.
        """
        if self.state.phase == FormPhase.SUCCESS:
            return

        self.state.email = ""
        self.state.error_message = None
        if self.state.phase == FormPhase.ERROR:
            self.state.phase = FormPhase.EDITING

        if self._on_focus is not None:
            self._on_focus()

    async def submit(self) -> FormState:
        """
        Submit the current email.

        Empty or malformed input sets an inline error and never reaches the
        network. A submit while one is outstanding, or after success, is
        ignored.

        Returns:
            FormState: The state after the submission settled.
        """
        if self.state.phase in (FormPhase.SUBMITTING, FormPhase.SUCCESS):
            return self.state

        email = self.state.email
        if not email:
            self.state.error_message = EMPTY_EMAIL_MESSAGE
            return self.state
        if not validate_email(email):
            self.state.error_message = INVALID_EMAIL_MESSAGE
            return self.state

        self.state.phase = FormPhase.SUBMITTING
        self.state.error_message = None

        try:
            response = await self.client.post(SIGNUP_PATH, json={"email": email})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Signup error: %s", str(e))
            self._fail(NETWORK_ERROR_MESSAGE, NETWORK_ERROR_MESSAGE)
            return self.state

        if not isinstance(data, dict):
            data = {}

        if response.is_success:
            self.state.phase = FormPhase.SUCCESS
            self.state.email = ""
            self.state.confirmation = data.get("message") or DEFAULT_SUCCESS_MESSAGE
            self._notify("success", self.state.confirmation)
        elif response.status_code == 409:
            self._fail(DUPLICATE_EMAIL_MESSAGE, "Email already registered")
        else:
            self._fail(
                data.get("error") or DEFAULT_FAILURE_MESSAGE,
                data.get("error") or "Something went wrong",
            )

        return self.state

    def _fail(self, message: str, notification: str) -> None:
        self.state.phase = FormPhase.ERROR
        self.state.error_message = message
        self._notify("error", notification)

    def _notify(self, level: str, message: str) -> None:
        if self._on_notify is not None:
            self._on_notify(level, message)
