"""
TrailMix Backend: Authentication Service
==========================================

What:  Password hashing and bearer-token issue/verification.
How:   bcrypt with a per-password random salt (cost factor from settings);
       HS256 JWTs signed with `settings.jwt_secret`, carrying the user id
       and role and expiring `jwt_expire_hours` after issue.
Who:   UserService (register, login) and the `require_user` dependency.

Token claims:
    {"id": 42, "role": "user", "iat": 1718000000, "exp": 1718086400}
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from trailmix.config import settings
from trailmix.exceptions import UnauthenticatedError, ValidationError
from trailmix.schemas.user import AuthenticatedUser

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless helper around bcrypt and PyJWT."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_hours: Optional[int] = None,
        bcrypt_rounds: Optional[int] = None,
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_hours = expire_hours or settings.jwt_expire_hours
        self.bcrypt_rounds = bcrypt_rounds or settings.bcrypt_rounds

    # ── Passwords ─────────────────────────────────────────────────────────

    def _hash(self, password: str) -> str:
        try:
            hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds))
        except ValueError as e:
            # bcrypt refuses passwords longer than 72 bytes
            raise ValidationError(message="Password is too long", field="password") from e
        return hashed.decode("utf-8")

    def _verify(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False

    async def hash_password(self, password: str) -> str:
        """bcrypt-hash `password` off the event loop."""
        return await asyncio.to_thread(self._hash, password)

    async def verify_password(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self._verify, password, hashed)

    # ── Tokens ────────────────────────────────────────────────────────────

    def create_access_token(self, user_id: int, role: str, now: Optional[datetime] = None) -> str:
        """Sign a token for `user_id` valid for `expire_hours` from `now`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + timedelta(hours=self.expire_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> AuthenticatedUser:
        """
        Verify signature and expiry and return the embedded identity.

        Raises:
            UnauthenticatedError: bad signature, expired, malformed, or no `id` claim
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id"]},
            )
            return AuthenticatedUser(id=claims["id"], role=claims.get("role") or "user")
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError(message="Token expired")
        except (jwt.InvalidTokenError, ValueError) as e:
            logger.debug("Rejected bearer token: %s", str(e))
            raise UnauthenticatedError(message="Invalid token")


auth_service = AuthService()
