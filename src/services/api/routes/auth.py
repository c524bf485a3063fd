# src/services/api/routes/auth.py
from fastapi import APIRouter, Depends

from src.core.users import AuthResponse, AuthService, AuthUser, LoginRequest, SignupRequest, UserInfo
from src.services.api.dependencies import get_auth_service
from src.services.api.security import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: SignupRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.signup(
        email=request.email,
        password=request.password,
        name=request.name,
        role=request.role,
        phone=request.phone,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.login(request.email, request.password)


@router.get("/me", response_model=UserInfo)
async def me(caller: AuthUser = Depends(get_current_user)):
    return AuthService.me(caller)
