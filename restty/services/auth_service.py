"""
Password authentication against the hosted auth API.

Sign-in returns a Session; every rejection is raised as an AuthError whose
message is fit to show the user. Known failure payloads are recognised by
marker substrings.
"""

import logging

import httpx

from ..config import Settings
from ..exceptions import AuthError
from ..schemas.auth import Session

logger = logging.getLogger(__name__)

SIGNUP_PATH = "/auth/v1/signup"
TOKEN_PATH = "/auth/v1/token"

CONFIRMATION_MARKERS = ("confirmation_sent_at",)
ALREADY_REGISTERED_MARKERS = ("already registered", "already been registered", "user_already_exists")
EMAIL_NOT_CONFIRMED_MARKERS = ("Email not confirmed", "email_not_confirmed")
INVALID_CREDENTIALS_MARKERS = ("Invalid login credentials", "invalid_credentials", "invalid_grant")

MESSAGES = {
    "confirmation_required": "Please check your email to confirm your account before logging in.",
    "already_registered": "User already exists. Please use Login instead.",
    "email_not_confirmed": "Please confirm your email before logging in. Check your inbox.",
    "invalid_credentials": "Invalid email or password",
}


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def classify_auth_error(operation: str, payload: str) -> AuthError:
    """
    Map an error payload from the auth API to a user-facing AuthError.

    Args:
        operation: "Login" or "Signup", used in the generic fallback message
        payload: Raw error body returned by the auth API

    Returns:
        AuthError with the matching kind and message
    """
    if operation == "Signup" and _contains_any(payload, ALREADY_REGISTERED_MARKERS):
        kind = "already_registered"
    elif _contains_any(payload, EMAIL_NOT_CONFIRMED_MARKERS):
        kind = "email_not_confirmed"
    elif _contains_any(payload, INVALID_CREDENTIALS_MARKERS):
        kind = "invalid_credentials"
    else:
        return AuthError(f"{operation} failed: {payload}", kind="failed")
    return AuthError(MESSAGES[kind], kind=kind)


class AuthClient:
    """Sign-up and password sign-in against the auth API."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    def _post(self, operation: str, path: str, email: str, password: str, params=None) -> httpx.Response:
        logger.info("Attempting %s for %s", operation.lower(), email)
        try:
            with httpx.Client(
                base_url=self._settings.remote_url,
                timeout=self._settings.request_timeout,
                transport=self._transport,
            ) as client:
                response = client.post(
                    path,
                    params=params,
                    headers={"apikey": self._settings.api_key},
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as e:
            logger.warning("%s connection error: %s", operation, e)
            raise AuthError(f"Connection error: {e}", kind="connection") from e

        logger.debug("%s response status: %s", operation, response.status_code)
        if not response.is_success:
            payload = response.text or "Unknown error"
            logger.warning("%s error: %s", operation, payload)
            raise classify_auth_error(operation, payload)
        return response

    def sign_in(self, email: str, password: str) -> Session:
        """Exchange email and password for a Session."""
        response = self._post(
            "Login", TOKEN_PATH, email, password, params={"grant_type": "password"}
        )
        try:
            data = response.json()
            user = data["user"]
            return Session(
                token=data["access_token"],
                user_id=user["id"],
                email=user.get("email") or email,
            )
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(f"Failed to parse login response: {e}") from e

    def sign_up(self, email: str, password: str) -> Session:
        """
        Register a new account and sign in to it.

        Raises AuthError with kind "confirmation_required" when the account
        has to be confirmed by email first.
        """
        response = self._post("Signup", SIGNUP_PATH, email, password)
        if _contains_any(response.text, CONFIRMATION_MARKERS):
            raise AuthError(MESSAGES["confirmation_required"], kind="confirmation_required")
        logger.info("Signup successful, attempting login")
        return self.sign_in(email, password)
