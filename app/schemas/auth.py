from pydantic import BaseModel
from typing import List, Optional

class LoginRequest(BaseModel):
    email: str
    password: str

class RegisterRequest(BaseModel):
    full_name: str
    email: str
    phone: Optional[str] = None
    password: str
    confirm_password: str
    role: str = "user"
    agree_terms: bool = False

class ToastResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    duration: int

class AuthFlowResponse(BaseModel):
    success: bool
    redirect_to: Optional[str] = None
    access_token: Optional[str] = None
    toasts: List[ToastResponse]

class ConfirmationFailureResponse(BaseModel):
    title: str
    message: str
    error: Optional[str] = None
