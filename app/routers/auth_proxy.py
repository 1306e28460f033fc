from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from typing import Optional
from app.config import settings
from app.dependencies.rate_limit import login_limiter, register_limiter
from app.exceptions import AuthenticationError
from app.schemas.auth import AuthFlowResponse, ConfirmationFailureResponse, LoginRequest, RegisterRequest
from app.services.auth import AuthClient, LoginFlow, RegisterFlow
from app.services.auth_errors import classify_error
from app.services.confirmation import CONFIRMATION_FAILURE_TITLE, confirmation_failure_message
from app.services.notifications import ToastCenter
from structlog import get_logger

logger = get_logger()
router = APIRouter(prefix="/auth", tags=["auth"])

def get_auth_client() -> AuthClient:
    return AuthClient()

def get_toast_center() -> ToastCenter:
    return ToastCenter(settings.TOAST_DURATION_MS)

def _flow_response(result: dict) -> JSONResponse:
    status_code = result.pop("status_code")
    return JSONResponse(status_code=status_code, content=AuthFlowResponse(**result).model_dump())

@router.post("/login", response_model=AuthFlowResponse, dependencies=[Depends(login_limiter)])
async def login(
    data: LoginRequest,
    redirect_to: Optional[str] = None,
    auth: AuthClient = Depends(get_auth_client),
    toasts: ToastCenter = Depends(get_toast_center),
):
    result = await LoginFlow(auth, toasts).submit(data.email, data.password, redirect_to=redirect_to)
    return _flow_response(result)

@router.post("/admin/login", response_model=AuthFlowResponse, dependencies=[Depends(login_limiter)])
async def admin_login(
    data: LoginRequest,
    redirect_to: Optional[str] = None,
    auth: AuthClient = Depends(get_auth_client),
    toasts: ToastCenter = Depends(get_toast_center),
):
    result = await LoginFlow(auth, toasts, admin=True).submit(data.email, data.password, redirect_to=redirect_to)
    return _flow_response(result)

@router.post("/token", dependencies=[Depends(login_limiter)])
async def token_login(form_data: OAuth2PasswordRequestForm = Depends(), auth: AuthClient = Depends(get_auth_client)):
    """OAuth2 password flow used by the interactive docs."""
    try:
        await auth.sign_in(form_data.username, form_data.password)
    except AuthenticationError as e:
        title, message = classify_error(auth.error)
        raise HTTPException(status_code=e.status_code, detail={"title": title, "message": message})
    if not auth.access_token:
        raise HTTPException(status_code=502, detail="Auth service returned no access token")
    return {"access_token": auth.access_token, "token_type": "bearer"}

@router.post("/register", response_model=AuthFlowResponse, dependencies=[Depends(register_limiter)])
async def register(
    data: RegisterRequest,
    auth: AuthClient = Depends(get_auth_client),
    toasts: ToastCenter = Depends(get_toast_center),
):
    result = await RegisterFlow(auth, toasts).submit(data.model_dump())
    return _flow_response(result)

@router.get("/confirm/failure", response_model=ConfirmationFailureResponse)
async def confirmation_failure(error: Optional[str] = None):
    logger.info("Email confirmation failed", error_code=error)
    return {
        "title": CONFIRMATION_FAILURE_TITLE,
        "message": confirmation_failure_message(error),
        "error": error,
    }
