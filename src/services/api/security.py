# src/services/api/security.py
"""
Аутентификация запросов по Bearer-токену.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.users import AuthService, AuthUser
from src.services.api.dependencies import get_auth_service


# auto_error=False: отсутствие заголовка превращается в Unauthenticated (401), а не 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> AuthUser:
    """Данные вызывающего из токена."""
    token = credentials.credentials if credentials else None
    return auth.verify_token(token)
