from httpx import AsyncClient, RequestError, Response
from structlog import get_logger
from app.config import settings
from app.exceptions import AuthenticationError
from app.services.auth_errors import (
    classify_admin_login_error,
    classify_login_error,
    classify_register_error,
)
from app.services.messages import AUTH_MESSAGES, ERROR_MESSAGES
from app.services.notifications import ToastCenter
import re

logger = get_logger()

# Normalize base and paths whether USER_MANAGEMENT_URL already includes '/api/v1' or not
_um_base = settings.USER_MANAGEMENT_URL.rstrip("/")
_has_v1 = _um_base.endswith("/api/v1")
_prefix = "" if _has_v1 else "/api/v1"
_login_path = f"{_prefix}/auth/login"
_register_path = f"{_prefix}/auth/register"
_verify_path = f"{_prefix}/auth/verify"

ADMIN_ROLES = ("admin", "superadmin")
ADMIN_DASHBOARD = "/admin/dashboard"
ADMIN_UNAUTHORIZED = "/admin/unauthorized"

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

def _error_text(resp: Response) -> str:
    """Pull a human readable message out of an upstream error body."""
    try:
        body = resp.json()
    except Exception:
        return resp.text or f"Upstream error ({resp.status_code})"
    if isinstance(body, dict):
        for key in ("error_description", "message", "msg", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return str(body)

def normalize_user(payload: dict) -> dict:
    user = payload.get("user", payload) if isinstance(payload, dict) else {}
    uid = user.get("id") or user.get("_id") or user.get("user_id") or user.get("sub") or user.get("uid")
    if uid is not None:
        user["id"] = uid
    if isinstance(user.get("role"), str):
        user["role"] = user["role"].lower()
    return user

class AuthClient:
    """Session state for one caller against the upstream auth service.

    Mirrors what the login pages consume: `error`, `loading`,
    `is_authenticated`, `is_admin()` and `clear_error()`.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 15.0):
        self.base_url = (base_url or _um_base).rstrip("/")
        self.timeout = timeout
        self.error: str | None = None
        self.loading = False
        self.user: dict | None = None
        self.access_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") in ADMIN_ROLES

    def clear_error(self) -> None:
        self.error = None

    def _fail(self, message: str, status_code: int) -> AuthenticationError:
        self.error = message
        self.loading = False
        return AuthenticationError(message, status_code)

    async def sign_in(self, email: str, password: str) -> dict:
        self.loading = True
        self.clear_error()
        url = f"{self.base_url}{_login_path}"
        try:
            async with AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json={"email": email, "password": password})
                logger.info("Sign-in upstream response", upstream=url, status_code=resp.status_code)
                # Some deployments expect OAuth2 form fields instead of JSON
                if resp.status_code in (415, 422):
                    resp = await client.post(
                        url,
                        data={"username": email, "password": password, "grant_type": "password"},
                        headers={"Content-Type": "application/x-www-form-urlencoded"},
                    )
                    logger.info("Sign-in retried with form-encoded", upstream=url, status_code=resp.status_code)
        except RequestError as e:
            raise self._fail(f"Network Error: connection to auth service failed ({e.__class__.__name__})", 502)

        if not 200 <= resp.status_code < 300:
            raise self._fail(_error_text(resp), resp.status_code)

        try:
            data = resp.json()
        except Exception:
            data = {"access_token": resp.text, "token_type": "bearer"}
        self.access_token = data.get("access_token") or (data.get("session") or {}).get("access_token")
        self.user = normalize_user(data) if "user" in data else await self._verify()
        self.loading = False
        return data

    async def _verify(self) -> dict | None:
        if not self.access_token:
            return None
        url = f"{self.base_url}{_verify_path}"
        async with AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(url, json={"token": self.access_token})
        if resp.status_code != 200:
            logger.warning("Token verify failed after sign-in", upstream=url, status_code=resp.status_code)
            return None
        return normalize_user(resp.json())

    async def sign_up(self, email: str, password: str, full_name: str, phone: str | None = None, role: str = "user") -> dict:
        self.loading = True
        self.clear_error()
        url = f"{self.base_url}{_register_path}"
        payload = {
            "email": email,
            "password": password,
            "full_name": full_name,
            "phone": phone,
            "role": role or "user",
        }
        try:
            async with AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload)
                logger.info("Sign-up upstream response", upstream=url, status_code=resp.status_code)
        except RequestError as e:
            raise self._fail(f"Network Error: connection to auth service failed ({e.__class__.__name__})", 502)
        if not 200 <= resp.status_code < 300:
            raise self._fail(_error_text(resp), resp.status_code)
        self.loading = False
        try:
            return resp.json()
        except Exception:
            return {"message": resp.text}
def flow_result(auth: AuthClient, toasts: ToastCenter, success: bool, status_code: int,
                redirect_to: str | None = None) -> dict:
    return {
        "success": success,
        "status_code": status_code,
        "redirect_to": redirect_to,
        "access_token": auth.access_token if success else None,
        "toasts": toasts.as_list(),
    }

class LoginFlow:
    """Login form handler shared by the public and admin login endpoints."""

    def __init__(self, auth: AuthClient, toasts: ToastCenter, admin: bool = False):
        self.auth = auth
        self.toasts = toasts
        self.admin = admin

    async def submit(self, email: str, password: str, redirect_to: str | None = None) -> dict:
        self.auth.clear_error()
        if not email.strip() or not password:
            self.toasts.show_error(**AUTH_MESSAGES["login"]["empty_fields"])
            return flow_result(self.auth, self.toasts, False, 400)

        try:
            await self.auth.sign_in(email, password)
        except AuthenticationError as e:
            classify = classify_admin_login_error if self.admin else classify_login_error
            title, message = classify(self.auth.error)
            self.toasts.show_error(title, message)
            if self.admin:
                logger.warning("Admin login failed", email=email, status_code=e.status_code, error=str(e))
            else:
                logger.info("Login failed", status_code=e.status_code)
            return flow_result(self.auth, self.toasts, False, e.status_code)

        if not self.admin:
            self.toasts.show_success(**AUTH_MESSAGES["login"]["success"])
            return flow_result(self.auth, self.toasts, True, 200, redirect_to or "/")

        if self.auth.is_authenticated and self.auth.is_admin():
            self.toasts.show_success(**AUTH_MESSAGES["login"]["admin_success"])
            return flow_result(self.auth, self.toasts, True, 200, redirect_to or ADMIN_DASHBOARD)
        # Signed in, but the account may not use the admin panel
        logger.warning("Non-admin account used admin login", email=email)
        self.toasts.show_error(**ERROR_MESSAGES["generic"]["permission_denied"])
        return flow_result(self.auth, self.toasts, False, 403, ADMIN_UNAUTHORIZED)

def validate_registration(data: dict) -> dict | None:
    """Return the first failing form check as title/message copy, or None."""
    checks = AUTH_MESSAGES["register"]
    if not (data.get("full_name") or "").strip():
        return checks["name_required"]
    email = (data.get("email") or "").strip()
    if not email:
        return checks["email_required"]
    if not _EMAIL_RE.search(email):
        return checks["invalid_email"]
    password = data.get("password") or ""
    if not password:
        return checks["password_required"]
    if len(password) < 8:
        return checks["password_too_short"]
    if password != data.get("confirm_password"):
        return checks["password_mismatch"]
    if not data.get("agree_terms"):
        return checks["terms_required"]
    return None

class RegisterFlow:
    def __init__(self, auth: AuthClient, toasts: ToastCenter):
        self.auth = auth
        self.toasts = toasts

    async def submit(self, data: dict) -> dict:
        self.auth.clear_error()
        problem = validate_registration(data)
        if problem:
            self.toasts.show_error(**problem)
            return flow_result(self.auth, self.toasts, False, 400)
        try:
            await self.auth.sign_up(
                data["email"].strip(),
                data["password"],
                full_name=data["full_name"].strip(),
                phone=data.get("phone") or None,
                role=data.get("role") or "user",
            )
        except AuthenticationError as e:
            title, message = classify_register_error(self.auth.error)
            self.toasts.show_error(title, message)
            logger.info("Registration failed", status_code=e.status_code)
            return flow_result(self.auth, self.toasts, False, e.status_code)
        self.toasts.show_success(**AUTH_MESSAGES["register"]["success"])
        return flow_result(self.auth, self.toasts, True, 201, "/login")
