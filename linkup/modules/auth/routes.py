from fastapi import APIRouter, Depends, Request, Response
from linkup.config import settings
from linkup.core.dependencies import get_current_identity
from linkup.core.rate_limit import auth_rate_limit, limiter
from linkup.database.supabase_client import get_supabase
from linkup.modules.auth.schemas import (
    LoginRequest, CompanyLoginRequest, UserSignupRequest, CompanySignupRequest,
    SessionResponse, SignupResponse, WhoAmIResponse
)
from linkup.modules.auth.service import AuthService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.jwt_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict" if settings.is_production else "lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict" if settings.is_production else "lax",
    )


@router.post("/users/signup", response_model=SignupResponse, status_code=201)
@limiter.limit(auth_rate_limit)
async def signup_user(
    request: Request,
    signup_data: UserSignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new candidate"""
    return service.signup_user(signup_data)


@router.post("/companies/signup", response_model=SignupResponse, status_code=201)
@limiter.limit(auth_rate_limit)
async def signup_company(
    request: Request,
    signup_data: CompanySignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new company"""
    return service.signup_company(signup_data)


@router.post("/users/login", response_model=SessionResponse)
@limiter.limit(auth_rate_limit)
async def login_user(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login as candidate or admin; the session JWT is set as an httpOnly cookie"""
    token, session = service.login_user(login_data)
    set_session_cookie(response, token)
    return session


@router.post("/companies/login", response_model=SessionResponse)
@limiter.limit(auth_rate_limit)
async def login_company(
    request: Request,
    response: Response,
    login_data: CompanyLoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login as company; the session JWT is set as an httpOnly cookie"""
    token, session = service.login_company(login_data)
    set_session_cookie(response, token)
    return session


@router.get("/me", response_model=WhoAmIResponse)
async def whoami(
    identity: Dict = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service)
):
    return service.whoami(identity)


@router.post("/users/logout", status_code=200)
@router.post("/companies/logout", status_code=200)
async def logout(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Revoke the session token and clear the cookie"""
    service.logout(request.cookies.get(settings.auth_cookie_name))
    clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/csrf", status_code=204)
async def csrf_token():
    """Empty response; the CSRF middleware attaches a fresh token to it"""
    return Response(status_code=204)
