"""Authentication utilities: password hashing, JWT tokens and request guards."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from .config import Settings, get_settings
from .errors import (
    BadSignature,
    ExpiredToken,
    Forbidden,
    InternalFailure,
    MalformedClaims,
    NotYetValid,
    Unauthenticated,
)
from .models import AuthenticatedPrincipal, Birthday, User
from .storage import UserStorage

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh salt."""
    try:
        return pwd_context.hash(password)
    except (ValueError, RuntimeError) as e:
        logger.error(f"Password hashing failed: {e}")
        raise InternalFailure("Password hashing failed") from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or corrupt hash
        return False


class TokenManager:
    """Issues and validates signed, time-bound bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenManager":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.token_lifetime)

    def issue(self, user_id: UUID, email: str, now: Optional[datetime] = None) -> str:
        """Create a token for a user, valid from ``now`` for the configured lifetime."""
        now = now or datetime.now(timezone.utc)
        claims = {
            "user_id": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "nbf": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def validate(self, token: str) -> AuthenticatedPrincipal:
        """Return the principal a token was issued for.

        Raises ExpiredToken, NotYetValid, BadSignature or MalformedClaims.
        """
        # jose checks the signature and exp; required keys and nbf are checked below
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_nbf": False},
            )
        except ExpiredSignatureError:
            raise ExpiredToken() from None
        except JWTClaimsError:
            raise MalformedClaims() from None
        except JWTError:
            raise BadSignature() from None

        for key in ("exp", "nbf"):
            value = claims.get(key)
            if not isinstance(value, int) or isinstance(value, bool):
                raise MalformedClaims(f"Missing or invalid {key} claim")
        if claims["nbf"] > int(datetime.now(timezone.utc).timestamp()):
            raise NotYetValid()

        user_id = claims.get("user_id")
        email = claims.get("email")
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise MalformedClaims()
        try:
            parsed_id = UUID(user_id)
        except ValueError:
            raise MalformedClaims("Invalid user ID in token") from None

        return AuthenticatedPrincipal(user_id=parsed_id, email=email)


def get_token_manager(settings: Settings = Depends(get_settings)) -> TokenManager:
    return TokenManager.from_settings(settings)


def authenticate_user(storage: UserStorage, email: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, otherwise None."""
    user = storage.get_by_email(email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def parse_bearer_header(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise Unauthenticated("Authorization header is required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise Unauthenticated("Invalid authorization header format")
    return parts[1]


async def get_current_principal(
    authorization: Optional[str] = Header(None),
    tokens: TokenManager = Depends(get_token_manager),
) -> AuthenticatedPrincipal:
    """Bearer guard for end-user routes."""
    token = parse_bearer_header(authorization)
    return tokens.validate(token)


async def require_api_key(
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Static key guard for admin routes."""
    if not x_api_key:
        raise Unauthenticated("X-API-Key header is required")
    if not secrets.compare_digest(x_api_key.encode(), settings.api_key.encode()):
        logger.warning("Rejected admin request with an invalid API key")
        raise Unauthenticated("Invalid API key")


def ensure_owner(birthday: Birthday, principal: AuthenticatedPrincipal) -> None:
    """Raise Forbidden unless the principal created the birthday."""
    if birthday.user_id != principal.user_id:
        raise Forbidden("Access denied")
