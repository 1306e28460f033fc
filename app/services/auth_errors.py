from typing import NamedTuple, Optional, Sequence
from app.services.messages import AUTH_MESSAGES, ERROR_MESSAGES

class ErrorCopy(NamedTuple):
    title: str
    message: str

def _copy(entry: dict) -> ErrorCopy:
    return ErrorCopy(entry["title"], entry["message"])

# (phrases, copy) pairs evaluated top to bottom; the first rule with any phrase present wins.
ERROR_RULES: Sequence[tuple[tuple[str, ...], ErrorCopy]] = (
    (("Invalid login credentials",), _copy(ERROR_MESSAGES["auth"]["invalid_credentials"])),
    (("already registered",), _copy(ERROR_MESSAGES["auth"]["account_exists"])),
    (("user not found",), _copy(ERROR_MESSAGES["auth"]["account_not_found"])),
    (("Email not confirmed",), _copy(ERROR_MESSAGES["auth"]["email_not_verified"])),
    (("permission denied",), _copy(ERROR_MESSAGES["generic"]["permission_denied"])),
    (("Failed to fetch", "Network Error"), _copy(ERROR_MESSAGES["network"]["connection_error"])),
)

LOGIN_RULES: Sequence[tuple[tuple[str, ...], ErrorCopy]] = (
    (("Invalid login credentials",), _copy(AUTH_MESSAGES["login"]["invalid_credentials"])),
    (("user not found",), _copy(AUTH_MESSAGES["login"]["user_not_found"])),
    (("locked",), _copy(AUTH_MESSAGES["login"]["account_locked"])),
    (("suspended",), _copy(AUTH_MESSAGES["login"]["account_suspended"])),
    (("too many requests", "rate limit"), _copy(AUTH_MESSAGES["login"]["too_many_attempts"])),
    (("network", "connection"), _copy(AUTH_MESSAGES["login"]["server_error"])),
)

ADMIN_LOGIN_RULES = LOGIN_RULES[:2]

REGISTER_RULES: Sequence[tuple[tuple[str, ...], ErrorCopy]] = (
    (("already registered",), _copy(AUTH_MESSAGES["register"]["email_exists"])),
)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

def match_rules(raw: Optional[str], rules, fallback_title: str) -> ErrorCopy:
    """Return the copy of the first rule whose phrase occurs in `raw`.

    Matching is a case-sensitive substring test. Without a match the raw
    text is echoed under `fallback_title`.
    """
    text = raw or ""
    for phrases, copy in rules:
        if any(phrase in text for phrase in phrases):
            return copy
    return ErrorCopy(fallback_title, text or DEFAULT_ERROR_MESSAGE)

def classify_error(raw: Optional[str]) -> ErrorCopy:
    return match_rules(raw, ERROR_RULES, "Error")

def classify_login_error(raw: Optional[str]) -> ErrorCopy:
    return match_rules(raw, LOGIN_RULES, "Login Failed")

def classify_admin_login_error(raw: Optional[str]) -> ErrorCopy:
    return match_rules(raw, ADMIN_LOGIN_RULES, "Login Failed")

def classify_register_error(raw: Optional[str]) -> ErrorCopy:
    return match_rules(raw, REGISTER_RULES, "Registration Failed")
