from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from app.config import settings
from app.services.auth import ADMIN_ROLES, normalize_user
from httpx import AsyncClient
from structlog import get_logger

_um_base = settings.USER_MANAGEMENT_URL.rstrip("/")
_has_v1 = _um_base.endswith("/api/v1")
_verify_path = "/auth/verify" if _has_v1 else "/api/v1/auth/verify"

# Use local login endpoint for Swagger to avoid cross-origin/browser CORS issues
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
logger = get_logger()

async def get_current_admin(token: str = Depends(oauth2_scheme)):
    """Verify the bearer token upstream and require an admin or superadmin role."""
    async with AsyncClient(timeout=30.0) as client:
        # 1) Preferred: POST JSON {"token": token}
        resp = await client.post(f"{_um_base}{_verify_path}", json={"token": token})
        logger.info(
            "Verify attempt JSON",
            upstream=f"{_um_base}{_verify_path}",
            status_code=resp.status_code,
        )
        # 2) Some services expect Authorization header and GET
        if resp.status_code in (400, 404, 405, 415, 422):
            resp = await client.get(
                f"{_um_base}{_verify_path}",
                headers={"Authorization": f"Bearer {token}"},
            )
            logger.info(
                "Verify attempt GET Bearer",
                upstream=f"{_um_base}{_verify_path}",
                status_code=resp.status_code,
            )
        if resp.status_code != 200:
            try:
                err = resp.json()
            except Exception:
                err = {"detail": resp.text or "Upstream verify error"}
            logger.warning(
                "Verify failed",
                upstream=f"{_um_base}{_verify_path}",
                status_code=resp.status_code,
                error=err,
            )
            raise HTTPException(status_code=401, detail="Invalid token")
        user = normalize_user(resp.json())
        if user.get("role") not in ADMIN_ROLES:
            raise HTTPException(status_code=403, detail="Admin role required")
        return user
