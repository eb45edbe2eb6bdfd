"""
TrailMix Backend: Bearer Token Authentication
===============================================

What:  FastAPI dependency guarding the authenticated routes.
How:   Reads `Authorization: Bearer <token>`, verifies it with AuthService,
       stores the decoded identity on `request.state.user` and returns it.
Who:   Declared on profile routes, trail creation and "my trails".

Failure modes (all 401 via UnauthenticatedError):
    - header missing or not a Bearer credential → "No token provided"
    - bad signature / malformed                 → "Invalid token"
    - expired                                   → "Token expired"
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from trailmix.exceptions import UnauthenticatedError
from trailmix.schemas.user import AuthenticatedUser
from trailmix.services.auth_service import auth_service

# auto_error=False so a missing header maps to our own 401 payload
bearer_scheme = HTTPBearer(auto_error=False)


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError(message="No token provided")

    user = auth_service.decode_access_token(credentials.credentials)
    request.state.user = user
    return user
