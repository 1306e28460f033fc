from typing import Optional

CONFIRMATION_FAILURE_TITLE = "Email Confirmation Failed"

DEFAULT_CONFIRMATION_FAILURE = "The email confirmation link is invalid or has expired. Please try again."

CONFIRMATION_FAILURE_MESSAGES = {
    "no_token": "No confirmation token was provided. Please ensure you clicked the full link.",
    "invalid_token": "The confirmation token is invalid. It might have been used already or is incorrect.",
    "expired_token": "The confirmation link has expired. Please request a new one.",
    "already_verified": "Your email is already verified or your account status prevents further action.",
    "update_failed": "Failed to update your account status. Please contact support.",
    "db_error": "A database error occurred during verification. Please try again later.",
    "internal_error": "An internal server error occurred. Please try again later.",
}

def confirmation_failure_message(code: Optional[str]) -> str:
    return CONFIRMATION_FAILURE_MESSAGES.get(code or "", DEFAULT_CONFIRMATION_FAILURE)
