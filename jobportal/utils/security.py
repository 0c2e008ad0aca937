"""
Security utilities for password hashing and JWT session tokens
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

import bcrypt
import jwt
import structlog

from jobportal.core.config import Settings, get_settings
from jobportal.models.auth import TokenData

logger = structlog.get_logger(__name__)


class PasswordManager:
    """Password hashing and validation utilities"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def hash_password(self, password: str) -> str:
        """Hash password with bcrypt"""
        salt = bcrypt.gensalt(rounds=self.settings.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed_password: Optional[str]) -> bool:
        """Verify password against hash"""
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError as e:
            # Stored value is not a bcrypt hash
            logger.error("Password verification failed", error=str(e))
            return False


class TokenManager:
    """JWT token management utilities"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def create_access_token(
        self,
        user_id: str,
        email: str,
        name: str,
        role: Optional[Dict[str, str]],
    ) -> str:
        """Create JWT access token carrying the identity context"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "name": name,
            "role": role,
            "exp": now + timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            "iat": now,
            "jti": str(uuid4()),
            "token_type": "access",
        }
        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.JWT_ALGORITHM)

    def create_refresh_token(self, user_id: str) -> str:
        """Create JWT refresh token; the jti makes every rotation distinct"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "exp": now + timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS),
            "iat": now,
            "jti": str(uuid4()),
            "token_type": "refresh",
        }
        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.JWT_ALGORITHM)

    def verify_token(self, token: str, expected_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Verify and decode JWT token; returns None when invalid or expired"""
        try:
            payload = jwt.decode(
                token,
                self.settings.SECRET_KEY,
                algorithms=[self.settings.JWT_ALGORITHM],
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("Token validation failed", error=str(e))
            return None

        if expected_type and payload.get("token_type") != expected_type:
            logger.warning(
                "Unexpected token type",
                expected=expected_type,
                actual=payload.get("token_type"),
            )
            return None
        return payload

    def extract_token_data(self, payload: Dict[str, Any]) -> Optional[TokenData]:
        """Extract structured token data from an access token payload"""
        try:
            return TokenData(
                sub=payload["sub"],
                email=payload["email"],
                name=payload.get("name", ""),
                role=payload.get("role"),
                exp=payload["exp"],
                iat=payload["iat"],
                token_type=payload.get("token_type", "access"),
            )
        except KeyError as e:
            logger.error("Missing required token field", field=str(e))
            return None


_password_manager: Optional[PasswordManager] = None
_token_manager: Optional[TokenManager] = None


def get_password_manager() -> PasswordManager:
    global _password_manager
    if _password_manager is None:
        _password_manager = PasswordManager()
    return _password_manager


def get_token_manager() -> TokenManager:
    global _token_manager
    if _token_manager is None:
        _token_manager = TokenManager()
    return _token_manager


def reset_security_managers() -> None:
    """Drop cached managers so new settings take effect."""
    global _password_manager, _token_manager
    _password_manager = None
    _token_manager = None


__all__ = [
    "PasswordManager",
    "TokenManager",
    "get_password_manager",
    "get_token_manager",
    "reset_security_managers",
]
